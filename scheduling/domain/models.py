"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in scheduling/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from scheduling.domain.value_objects import EventId, EventType


@dataclass(frozen=True)
class Response:
    """One participant's availability for an event.

    Guests are keyed by the name they typed and signed-in users by their id,
    in the same namespace. Two guests submitting the same name overwrite
    each other.
    """

    participant_key: str
    availability: tuple[datetime, ...] = ()
    user_id: str | None = None
    guest_name: str | None = None
    use_calendar_availability: bool | None = None
    enabled_calendars: tuple[Mapping[str, Any], ...] | None = None

    @property
    def is_guest(self) -> bool:
        return self.user_id is None


@dataclass(frozen=True)
class Remindee:
    """A contact who receives reminder emails until they respond."""

    email: str
    task_refs: tuple[str, ...] = ()
    responded: bool = False


@dataclass(frozen=True)
class Attendee:
    """An invited member of an availability group."""

    email: str
    declined: bool = False


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    name: str
    duration_minutes: int
    type: EventType
    dates: tuple[datetime, ...] = ()
    owner_id: str | None = None
    notifications_enabled: bool = False
    responses: Mapping[str, Response] = field(default_factory=dict)
    remindees: tuple[Remindee, ...] = ()
    attendees: tuple[Attendee, ...] = ()
    created_at: datetime | None = None

    @property
    def is_ownerless(self) -> bool:
        return self.owner_id is None

    def is_owned_by(self, user_id: str | None) -> bool:
        return self.owner_id is not None and self.owner_id == user_id

    def can_be_edited_by(self, actor: "Actor") -> bool:
        return self.is_ownerless or self.is_owned_by(actor.user_id)

    def find_remindee(self, email: str) -> Remindee | None:
        return next((r for r in self.remindees if r.email == email), None)

    def find_attendee(self, email: str) -> Attendee | None:
        return next((a for a in self.attendees if a.email == email), None)


@dataclass(frozen=True)
class Actor:
    """Whoever is making the request; anonymous when user_id is None."""

    user_id: str | None = None
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


@dataclass(frozen=True)
class UserSummary:
    """Display information for a signed-in user."""

    user_id: str
    first_name: str
    last_name: str
    email: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class EventDetails:
    """An event with display information resolved for each respondent."""

    event: Event
    participants: Mapping[str, UserSummary] = field(default_factory=dict)
