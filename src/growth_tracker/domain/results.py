"""Error taxonomy and tagged results returned at the action boundary."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(StrEnum):
    """Kinds of recoverable failures callers can branch on."""

    INVALID_INPUT = "InvalidInput"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    INVALID_UPSTREAM_RESPONSE = "InvalidUpstreamResponse"
    UPSTREAM_FAILURE = "UpstreamFailure"


class GrowthTrackerError(Exception):
    """Base class for domain failures raised by services."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(GrowthTrackerError):
    kind = ErrorKind.INVALID_INPUT


class NotFoundError(GrowthTrackerError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(GrowthTrackerError):
    kind = ErrorKind.CONFLICT


class InvalidUpstreamResponseError(GrowthTrackerError):
    kind = ErrorKind.INVALID_UPSTREAM_RESPONSE


class UpstreamFailureError(GrowthTrackerError):
    kind = ErrorKind.UPSTREAM_FAILURE


@dataclass(frozen=True)
class ActionError:
    """Structured error payload."""

    kind: ErrorKind
    message: str

    @classmethod
    def from_exception(cls, exc: GrowthTrackerError) -> "ActionError":
        return cls(kind=exc.kind, message=exc.message)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful action result."""

    value: T

    def to_payload(self) -> dict[str, object]:
        """Return the wire shape."""
        return {"ok": self.value}


@dataclass(frozen=True)
class Err:
    """Failed action result."""

    error: ActionError

    def to_payload(self) -> dict[str, object]:
        """Return the wire shape."""
        return {"error": {"kind": str(self.error.kind), "message": self.error.message}}


Result = Ok[T] | Err
