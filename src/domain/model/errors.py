"""Domain-level exceptions.

Raised inside the core and by repository adapters to express business rule
violations. The user service converts them into result values; route
handlers never see them directly.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""

    def __init__(self, value: str, message: str | None = None):
        self.value = value
        super().__init__(message or f"'{value}' is already in use")
