"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from domain.model.user import NAME_MAX_LENGTH, UserView


class UserCreateRequest(BaseModel):
    """Request model for creating a user."""
    first_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="Given name")
    last_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="Family name")
    email: EmailStr = Field(..., description="Unique email address")


class UserUpdateRequest(BaseModel):
    """Request model for replacing a user's fields (PUT)."""
    first_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    email: EmailStr


class UserPatchRequest(BaseModel):
    """Request model for a partial update (PATCH). Omitted fields are kept."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    last_name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    email: Optional[EmailStr] = None


class UserResponse(BaseModel):
    """Response model for user."""
    id: str = Field(..., description="User ID")
    first_name: str
    last_name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: UserView) -> 'UserResponse':
        return cls(
            id=view.id,
            first_name=view.first_name,
            last_name=view.last_name,
            email=view.email,
            created_at=view.created_at,
            updated_at=view.updated_at,
        )


class ErrorResponse(BaseModel):
    """Body returned for 400/409 business errors."""
    message: str
    kind: str
    value: Optional[str] = None
