from scheduling.domain.models import (
    Actor,
    Attendee,
    Event,
    EventDetails,
    Remindee,
    Response,
    UserSummary,
)
from scheduling.domain.value_objects import EventId, EventType, IndexedValue

__all__ = [
    "Actor",
    "Attendee",
    "Event",
    "EventDetails",
    "Remindee",
    "Response",
    "UserSummary",
    "EventId",
    "EventType",
    "IndexedValue",
]
