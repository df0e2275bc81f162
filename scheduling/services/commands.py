"""Validated inputs to EventService operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from scheduling.domain import EventType


@dataclass(frozen=True)
class EventDraft:
    """Fields submitted when creating or editing an event."""

    name: str
    duration_minutes: int
    dates: tuple[datetime, ...]
    type: EventType
    notifications_enabled: bool = False
    remindees: tuple[str, ...] = ()
    attendees: tuple[str, ...] = ()


@dataclass(frozen=True)
class ResponseSubmission:
    availability: tuple[datetime, ...]
    guest: bool
    name: str = ""
    use_calendar_availability: bool | None = None
    enabled_calendars: tuple[Mapping[str, Any], ...] | None = None


@dataclass(frozen=True)
class ResponseDeletion:
    """Guests are addressed by name, signed-in users by user id."""

    guest: bool
    name: str = ""
    user_id: str = ""
