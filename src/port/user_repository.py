from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Infrastructure failures propagate as exceptions; a missing user is
    reported as None/False, never raised.
    """
    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by (normalized) email. Return User or None if not found."""
        ...

    def get_all(self) -> list[User]:
        """Return every user. No ordering is guaranteed."""
        ...

    def add(self, user: User) -> User:
        """Store a new user and return the stored value.

        Raises DuplicateError if the email is already taken.
        """
        ...

    def update(self, user: User) -> User:
        """Replace an existing user and return the stored value.

        Raises DuplicateError if the new email is taken by another user.
        """
        ...

    def delete(self, user_id: str) -> None:
        """Remove a user by ID."""
        ...

    def exists(self, user_id: str) -> bool:
        """Return True if a user with this ID is stored."""
        ...
