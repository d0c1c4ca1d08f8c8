# domain/model/user.py

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from domain.model.errors import ValidationError

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 254

_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ── field rules ──────────────────────────────────────────


def normalize_email(email: str) -> str:
    """Canonical form used for storage and uniqueness checks."""
    return email.strip().lower()


def _validate_name(label: str, value: str | None) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    if len(value) > NAME_MAX_LENGTH:
        raise ValidationError(f"{label} must be at most {NAME_MAX_LENGTH} characters")


def validate_user_fields(first_name: str | None, last_name: str | None, email: str | None) -> None:
    """Check structural constraints on user fields.

    The transport layer already rejects malformed requests, but the
    service calls this again so that bad data never reaches storage.

    Raises:
        ValidationError: first offending field, with a readable reason
    """
    _validate_name("First name", first_name)
    _validate_name("Last name", last_name)

    if not isinstance(email, str) or not email.strip():
        raise ValidationError("Email is required")
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValidationError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    if not _EMAIL_PATTERN.match(email.strip()):
        raise ValidationError("Email is not a valid address")


# ── User Domain Model ────────────────────────────────────


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    first_name: str
    last_name: str
    email: str
    created_at: datetime
    updated_at: datetime

    # ── factory ───────────────────────────────────────────

    @staticmethod
    def create(first_name: str, last_name: str, email: str) -> 'User':
        """Create a new User with a generated ID and fresh timestamps."""
        now = _now()
        return User(
            id=uuid.uuid4().hex,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=normalize_email(email),
            created_at=now,
            updated_at=now,
        )

    # ── mutations ─────────────────────────────────────────

    def update_basic_info(self, first_name: str, last_name: str) -> None:
        self.first_name = first_name.strip()
        self.last_name = last_name.strip()
        self.touch()

    def update_email(self, email: str) -> None:
        self.email = normalize_email(email)
        self.touch()

    def touch(self) -> None:
        """Refresh updated_at after a mutation."""
        self.updated_at = _now()


# ── Transfer Objects ─────────────────────────────────────


@dataclass(frozen=True)
class CreateUserInput:
    """Fields supplied by a caller creating a user."""
    first_name: str
    last_name: str
    email: str


@dataclass(frozen=True)
class UpdateUserInput:
    """Full replacement of a user's editable fields."""
    first_name: str
    last_name: str
    email: str


@dataclass(frozen=True)
class UserPatch:
    """Sparse update; None means keep the current value."""
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None

    def merge_into(self, user: User) -> UpdateUserInput:
        return UpdateUserInput(
            first_name=self.first_name if self.first_name is not None else user.first_name,
            last_name=self.last_name if self.last_name is not None else user.last_name,
            email=self.email if self.email is not None else user.email,
        )


@dataclass(frozen=True)
class UserView:
    """Projection of a User returned to callers."""
    id: str
    first_name: str
    last_name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def from_user(user: User) -> 'UserView':
        return UserView(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
