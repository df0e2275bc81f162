"""Domain error codes for the scheduling module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REMINDEE_NOT_FOUND = "REMINDEE_NOT_FOUND"
    ATTENDEE_NOT_FOUND = "ATTENDEE_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    NOT_EVENT_OWNER = "NOT_EVENT_OWNER"
    NOT_SIGNED_IN = "NOT_SIGNED_IN"
    EVENT_NOT_GROUP = "EVENT_NOT_GROUP"
    PERSISTENCE_CONFLICT = "PERSISTENCE_CONFLICT"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class RemindeeNotFoundError(DomainError):
    """Raised when an email is not on the event's remindee list."""

    def __init__(self, email: str) -> None:
        super().__init__(
            code=ErrorCode.REMINDEE_NOT_FOUND,
            message="Remindee email not found",
        )
        self.email = email


class AttendeeNotFoundError(DomainError):
    """Raised when an email is not on the event's attendee list."""

    def __init__(self, email: str | None) -> None:
        super().__init__(
            code=ErrorCode.ATTENDEE_NOT_FOUND,
            message="Attendee email not found",
        )
        self.email = email


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class NotEventOwnerError(DomainError):
    """Raised when the actor does not own the event they are changing."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_EVENT_OWNER,
            message="User is not the owner of this event",
        )


class NotSignedInError(DomainError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_SIGNED_IN,
            message="User is not signed in",
        )


class EventNotGroupError(DomainError):
    """Raised when a group-only operation targets another event type."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_GROUP,
            message="Event is not an availability group",
        )


class PersistenceConflictError(DomainError):
    """Raised when an atomic write could not be applied after retrying."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.PERSISTENCE_CONFLICT,
            message="The event was modified concurrently, try again",
        )
        self.detail = detail
