"""
Explicit result types for engine boundary calls.

Every call that crosses into a collaborator (storage, image labeler) or that
can be rejected (voting) reports its outcome through these types, so the
fallback behaviour is visible in the signature instead of hidden in a
try/except.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Recoverable failure kinds surfaced by the engine."""
    NOT_AUTHENTICATED = "not-authenticated"
    ALREADY_VOTED = "already-voted"
    CLASSIFICATION_UNAVAILABLE = "classification-unavailable"
    PERSISTENCE_UNAVAILABLE = "persistence-unavailable"
    NOT_FOUND = "not-found"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success value or an ErrorKind with a human-readable message."""
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: Optional[str] = None) -> "Result[T]":
        return cls(error=error, message=message or error.value)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok and self.value is not None else default
