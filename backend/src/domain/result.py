"""
Tagged results returned by application use cases.

Use cases return ``Ok(value)`` or ``Err(kind, message)`` instead of raising
for expected failures; the API layer maps each ErrorKind to a status code.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union


T = TypeVar("T")


class ErrorKind(Enum):
    """Expected failure kinds surfaced to callers."""
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    REFRESH_INVALID = "refresh_invalid"
    UNAUTHORIZED = "unauthorized"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str = ""

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
