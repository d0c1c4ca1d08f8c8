"""User API routes.

Endpoints:
- GET /users: List users
- GET /users/{id}: Get one user
- POST /users: Create a user
- PUT /users/{id}: Replace a user's fields
- PATCH /users/{id}: Update only the supplied fields
- DELETE /users/{id}: Delete a user

Service outcomes map to status codes:
    Success → 200/201/204, NotFound → 404,
    INVALID_INPUT → 400, CONFLICT → 409
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_user_repo
from api.models import (
    ErrorResponse,
    UserCreateRequest,
    UserPatchRequest,
    UserResponse,
    UserUpdateRequest,
)
from domain.model.result import ErrorKind, Failure, NotFound, Success
from domain.model.user import CreateUserInput, UpdateUserInput, UserPatch
from port.user_repository import UserRepository
from services import user_service

router = APIRouter(prefix="/users", tags=["users"])

_ERROR_STATUS = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    409: {"model": ErrorResponse, "description": "Email already in use"},
}


def _not_found(user_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")


def _to_response(outcome: Success | Failure | NotFound) -> UserResponse:
    """Unwrap a service outcome or raise the matching HTTPException."""
    if isinstance(outcome, Success):
        return UserResponse.from_view(outcome.value)
    if isinstance(outcome, NotFound):
        raise _not_found(outcome.id)

    body = ErrorResponse(message=outcome.message, kind=outcome.kind.value, value=outcome.value)
    raise HTTPException(status_code=_ERROR_STATUS[outcome.kind], detail=body.model_dump())


@router.get("", response_model=list[UserResponse])
async def list_users(repo: UserRepository = Depends(get_user_repo)):
    """List all users."""
    views = user_service.list_users(repo)
    return [UserResponse.from_view(v) for v in views]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, repo: UserRepository = Depends(get_user_repo)):
    """Get a user by ID."""
    view = user_service.get_user(repo, user_id)
    if not view:
        raise _not_found(user_id)
    return UserResponse.from_view(view)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def create_user(
    request: UserCreateRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repo),
):
    """Create a user."""
    outcome = user_service.create_user(repo, CreateUserInput(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
    ))
    user = _to_response(outcome)
    response.headers["Location"] = f"{router.prefix}/{user.id}"
    return user


@router.put("/{user_id}", response_model=UserResponse, responses=_ERROR_RESPONSES)
async def update_user(
    user_id: str,
    request: UserUpdateRequest,
    repo: UserRepository = Depends(get_user_repo),
):
    """Replace a user's names and email."""
    outcome = user_service.update_user(repo, user_id, UpdateUserInput(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
    ))
    return _to_response(outcome)


@router.patch("/{user_id}", response_model=UserResponse, responses=_ERROR_RESPONSES)
async def patch_user(
    user_id: str,
    request: UserPatchRequest,
    repo: UserRepository = Depends(get_user_repo),
):
    """Update only the fields present in the request body."""
    outcome = user_service.patch_user(repo, user_id, UserPatch(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
    ))
    return _to_response(outcome)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, repo: UserRepository = Depends(get_user_repo)):
    """Delete a user."""
    if not user_service.delete_user(repo, user_id):
        raise _not_found(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
