"""In-memory collaborators for service-level tests."""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from scheduling.domain import (
    Attendee,
    Event,
    EventId,
    EventType,
    Remindee,
    Response,
    UserSummary,
)
from scheduling.reminders.interfaces import TaskScheduler
from scheduling.stores.interfaces import EventStore, UserDirectory


class InMemoryEventStore(EventStore):
    """Dict-backed store. Every write is counted in ``writes``."""

    def __init__(self, *events: Event) -> None:
        self._events: dict[EventId, Event] = {event.id: event for event in events}
        self._lock = threading.Lock()
        self._claimed: set[EventId] = set()
        self.writes: list[str] = []

    def get_event(self, event_id: EventId) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def insert_event(self, event: Event) -> EventId:
        with self._lock:
            self.writes.append("insert_event")
            self._events[event.id] = event
        return event.id

    def update_event_fields(self, event_id: EventId, fields: Mapping[str, Any]) -> bool:
        with self._lock:
            self.writes.append("update_event_fields")
            if event_id not in self._events:
                return False
            self._events[event_id] = replace(self._events[event_id], **fields)
            return True

    def sync_remindees(self, event_id: EventId, remindees: Sequence[Remindee]) -> None:
        with self._lock:
            self.writes.append("sync_remindees")
            event = self._events[event_id]
            stored = {r.email: r for r in event.remindees}
            synced = tuple(stored.get(r.email, r) for r in remindees)
            self._events[event_id] = replace(event, remindees=synced)
            if any(r.email not in stored for r in remindees):
                self._claimed.discard(event_id)

    def sync_attendees(self, event_id: EventId, attendees: Sequence[Attendee]) -> None:
        with self._lock:
            self.writes.append("sync_attendees")
            event = self._events[event_id]
            stored = {a.email: a for a in event.attendees}
            synced = tuple(stored.get(a.email, a) for a in attendees)
            self._events[event_id] = replace(event, attendees=synced)

    def set_response(self, event_id: EventId, response: Response) -> bool:
        with self._lock:
            self.writes.append("set_response")
            event = self._events[event_id]
            created = response.participant_key not in event.responses
            responses = dict(event.responses)
            responses[response.participant_key] = response
            self._events[event_id] = replace(event, responses=responses)
            return created

    def delete_response(self, event_id: EventId, participant_key: str) -> bool:
        with self._lock:
            self.writes.append("delete_response")
            event = self._events[event_id]
            if participant_key not in event.responses:
                return False
            responses = {k: v for k, v in event.responses.items() if k != participant_key}
            self._events[event_id] = replace(event, responses=responses)
            return True

    def mark_remindee_responded(self, event_id: EventId, email: str) -> bool:
        with self._lock:
            self.writes.append("mark_remindee_responded")
            event = self._events[event_id]
            target = event.find_remindee(email)
            if target is None or target.responded:
                return False
            remindees = tuple(
                replace(r, responded=True) if r.email == email else r for r in event.remindees
            )
            self._events[event_id] = replace(event, remindees=remindees)
            return True

    def get_remindees(self, event_id: EventId) -> list[Remindee]:
        with self._lock:
            return list(self._events[event_id].remindees)

    def claim_everyone_responded(self, event_id: EventId) -> bool:
        with self._lock:
            self.writes.append("claim_everyone_responded")
            if event_id in self._claimed:
                return False
            self._claimed.add(event_id)
            return True

    def decline_attendee(self, event_id: EventId, email: str) -> bool:
        with self._lock:
            self.writes.append("decline_attendee")
            event = self._events[event_id]
            target = event.find_attendee(email)
            if target is None or target.declined:
                return False
            attendees = tuple(
                replace(a, declined=True) if a.email == email else a for a in event.attendees
            )
            self._events[event_id] = replace(event, attendees=attendees)
            return True

    def delete_event(self, event_id: EventId, owner_id: str) -> bool:
        with self._lock:
            self.writes.append("delete_event")
            event = self._events.get(event_id)
            if event is None or event.owner_id != owner_id:
                return False
            del self._events[event_id]
            return True


class FakeUserDirectory(UserDirectory):
    def __init__(self, *users: UserSummary) -> None:
        self._users = {user.user_id: user for user in users}

    def add(self, user: UserSummary) -> None:
        self._users[user.user_id] = user

    def lookup_user(self, user_id: str) -> UserSummary | None:
        return self._users.get(user_id)


class FakeTaskScheduler(TaskScheduler):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.scheduled: list[tuple[str, str, str, str]] = []
        self.cancelled: list[str] = []

    def schedule_reminder(
        self, email: str, owner_name: str, event_name: str, event_id: str
    ) -> list[str]:
        if self.fail:
            raise ConnectionError("scheduler unavailable")
        self.scheduled.append((email, owner_name, event_name, event_id))
        return [f"{email}-task-1", f"{email}-task-2"]

    def cancel_reminder(self, handle: str) -> None:
        if self.fail:
            raise ConnectionError("scheduler unavailable")
        self.cancelled.append(handle)


class RecordingNotificationQueue:
    """Stands in for NotificationQueue; keeps intents instead of sending them."""

    def __init__(self) -> None:
        self.intents: list[Any] = []

    def enqueue(self, intent) -> None:
        self.intents.append(intent)

    def of_type(self, intent_type) -> list[Any]:
        return [i for i in self.intents if isinstance(i, intent_type)]


OWNER = UserSummary(user_id="1", first_name="Olive", last_name="Owner", email="olive@example.com")
RESPONDENT = UserSummary(
    user_id="2", first_name="Remy", last_name="Respondent", email="remy@example.com"
)


def make_event(**overrides) -> Event:
    values = {
        "id": EventId.new(),
        "name": "Team sync",
        "duration_minutes": 60,
        "type": EventType.SPECIFIC_DATES,
        "dates": (datetime(2026, 11, 2, 15, tzinfo=timezone.utc),),
        "owner_id": OWNER.user_id,
        "notifications_enabled": True,
        "responses": {},
    }
    values.update(overrides)
    return Event(**values)
