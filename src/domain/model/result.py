"""Outcome values returned by service operations.

Every mutating operation ends in exactly one of:
- Success: the operation ran, `value` holds the result
- Failure: a caller-fixable business error (`kind` says which)
- NotFound: the target entity does not exist

Infrastructure faults are not represented here; they propagate as exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar('T')


class ErrorKind(str, Enum):
    """Business error kinds surfaced by the service."""
    INVALID_INPUT = 'invalid_input'
    CONFLICT = 'conflict'


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    value: str | None = None


@dataclass(frozen=True)
class NotFound:
    id: str


Outcome = Success[T] | Failure | NotFound
