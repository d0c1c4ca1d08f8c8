"""In-memory implementation of UserRepository for testing."""

from dataclasses import replace

from domain.model.errors import DuplicateError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self.calls: list[str] = []

    def _email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        return any(u.email == email and u.id != exclude_id for u in self.store.values())

    # ── write operations ─────────────────────────────────────

    def add(self, user: User) -> User:
        self.calls.append('add')
        if self._email_taken(user.email):
            raise DuplicateError(user.email)

        self.store[user.id] = replace(user)
        return replace(user)

    def update(self, user: User) -> User:
        self.calls.append('update')
        if self._email_taken(user.email, exclude_id=user.id):
            raise DuplicateError(user.email)

        self.store[user.id] = replace(user)
        return replace(user)

    def delete(self, user_id: str) -> None:
        self.calls.append('delete')
        self.store.pop(user_id, None)

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def get_all(self) -> list[User]:
        return [replace(u) for u in self.store.values()]

    def exists(self, user_id: str) -> bool:
        return user_id in self.store
