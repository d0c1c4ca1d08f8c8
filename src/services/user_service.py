"""User service — business rules for user CRUD.

Pure business logic with no HTTP dependencies. Every operation takes the
repository as its first argument and keeps no state between calls.

Business failures come back as result values (see domain.model.result):
- INVALID_INPUT: a field breaks a structural rule
- CONFLICT: the email belongs to another user
A missing user is NotFound (or None/False for reads and deletes).
Repository exceptions other than DuplicateError are not caught here.
"""

import logging

from domain.model.errors import DuplicateError, ValidationError
from domain.model.result import ErrorKind, Failure, NotFound, Outcome, Success
from domain.model.user import (
    CreateUserInput,
    UpdateUserInput,
    User,
    UserPatch,
    UserView,
    normalize_email,
    validate_user_fields,
)
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)


def _invalid(error: ValidationError) -> Failure:
    return Failure(kind=ErrorKind.INVALID_INPUT, message=str(error))


def _conflict(email: str) -> Failure:
    return Failure(
        kind=ErrorKind.CONFLICT,
        message=f"User with email '{email}' already exists",
        value=email,
    )


# ── reads ────────────────────────────────────────────────────


def list_users(repo: UserRepository) -> list[UserView]:
    """Return every user as a view. Order follows the repository."""
    return [UserView.from_user(u) for u in repo.get_all()]


def get_user(repo: UserRepository, user_id: str) -> UserView | None:
    """Return the user's view, or None if no such user exists."""
    user = repo.get_by_id(user_id)
    return UserView.from_user(user) if user else None


# ── writes ───────────────────────────────────────────────────


def create_user(repo: UserRepository, data: CreateUserInput) -> Success[UserView] | Failure:
    """Create a new user.

    Validation and the email lookup both run before `repo.add`. The store's
    unique index still gets the final say; a DuplicateError from it is
    reported as CONFLICT.
    """
    try:
        validate_user_fields(data.first_name, data.last_name, data.email)
    except ValidationError as e:
        logger.info("User creation rejected", extra={"reason": str(e)})
        return _invalid(e)

    email = normalize_email(data.email)
    if repo.get_by_email(email):
        logger.info("User creation rejected: email taken", extra={"email": email})
        return _conflict(email)

    user = User.create(data.first_name, data.last_name, email)
    try:
        stored = repo.add(user)
    except DuplicateError:
        logger.warning("User creation lost email race", extra={"email": email})
        return _conflict(email)

    logger.info("User created", extra={"userId": stored.id})
    return Success(UserView.from_user(stored))


def update_user(
    repo: UserRepository,
    user_id: str,
    data: UpdateUserInput,
) -> Outcome[UserView]:
    """Replace a user's names and email.

    Keeping the current email never conflicts. Moving to an email owned by
    a different user does.
    """
    user = repo.get_by_id(user_id)
    if not user:
        return NotFound(user_id)

    try:
        validate_user_fields(data.first_name, data.last_name, data.email)
    except ValidationError as e:
        logger.info("User update rejected", extra={"userId": user_id, "reason": str(e)})
        return _invalid(e)

    email = normalize_email(data.email)
    if email != user.email:
        owner = repo.get_by_email(email)
        if owner and owner.id != user.id:
            logger.info("User update rejected: email taken", extra={"userId": user_id, "email": email})
            return _conflict(email)
        user.update_email(email)

    user.update_basic_info(data.first_name, data.last_name)

    try:
        stored = repo.update(user)
    except DuplicateError:
        logger.warning("User update lost email race", extra={"userId": user_id, "email": email})
        return _conflict(email)

    logger.info("User updated", extra={"userId": user_id})
    return Success(UserView.from_user(stored))


def patch_user(
    repo: UserRepository,
    user_id: str,
    data: UserPatch,
) -> Outcome[UserView]:
    """Apply only the fields present in `data`, then update as usual."""
    user = repo.get_by_id(user_id)
    if not user:
        return NotFound(user_id)
    return update_user(repo, user_id, data.merge_into(user))


def delete_user(repo: UserRepository, user_id: str) -> bool:
    """Delete a user. Return False, without deleting, if it doesn't exist."""
    if not repo.exists(user_id):
        return False

    repo.delete(user_id)
    logger.info("User deleted", extra={"userId": user_id})
    return True
