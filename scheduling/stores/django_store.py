"""Django ORM implementation of the EventStore and UserDirectory.

Each mutation is a filtered ``update()``/``delete()`` or a per-row upsert,
never a save of the whole aggregate read earlier in the request.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Sequence

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from scheduling import models
from scheduling.domain import (
    Attendee,
    Event,
    EventId,
    EventType,
    Remindee,
    Response,
    UserSummary,
)
from scheduling.domain.errors import PersistenceConflictError
from scheduling.stores.interfaces import EventStore, UserDirectory

logger = logging.getLogger(__name__)


def _dump_datetimes(values: Iterable[datetime]) -> list[str]:
    return [value.isoformat() for value in values]


def _load_datetimes(values: Iterable[str]) -> tuple[datetime, ...]:
    return tuple(datetime.fromisoformat(value) for value in values)


_FIELD_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "name": str,
    "duration_minutes": int,
    "type": lambda value: EventType(value).value,
    "dates": _dump_datetimes,
    "notifications_enabled": bool,
}


def _response_to_domain(row: models.Response) -> Response:
    return Response(
        participant_key=row.participant_key,
        availability=_load_datetimes(row.availability),
        user_id=str(row.user_id) if row.user_id is not None else None,
        guest_name=row.guest_name,
        use_calendar_availability=row.use_calendar_availability,
        enabled_calendars=(
            tuple(row.enabled_calendars) if row.enabled_calendars is not None else None
        ),
    )


def _response_columns(response: Response) -> dict[str, Any]:
    return {
        "user_id": response.user_id,
        "guest_name": response.guest_name,
        "availability": _dump_datetimes(response.availability),
        "use_calendar_availability": response.use_calendar_availability,
        "enabled_calendars": (
            [dict(c) for c in response.enabled_calendars]
            if response.enabled_calendars is not None
            else None
        ),
    }


def _remindee_to_domain(row: models.Remindee) -> Remindee:
    return Remindee(email=row.email, task_refs=tuple(row.task_refs), responded=row.responded)


def _attendee_to_domain(row: models.Attendee) -> Attendee:
    return Attendee(email=row.email, declined=row.declined)


def _event_to_domain(row: models.Event) -> Event:
    return Event(
        id=EventId(value=row.id),
        name=row.name,
        duration_minutes=row.duration_minutes,
        type=EventType(row.type),
        dates=_load_datetimes(row.dates),
        owner_id=str(row.owner_id) if row.owner_id is not None else None,
        notifications_enabled=row.notifications_enabled,
        responses={r.participant_key: _response_to_domain(r) for r in row.responses.all()},
        remindees=tuple(_remindee_to_domain(r) for r in row.remindees.all()),
        attendees=tuple(_attendee_to_domain(a) for a in row.attendees.all()),
        created_at=row.created_at,
    )


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def __init__(self, write_retries: int = 3) -> None:
        self._write_retries = max(1, write_retries)

    def get_event(self, event_id: EventId) -> Event | None:
        row = (
            models.Event.objects.prefetch_related("responses", "remindees", "attendees")
            .filter(pk=event_id.value)
            .first()
        )
        return _event_to_domain(row) if row is not None else None

    def insert_event(self, event: Event) -> EventId:
        with transaction.atomic():
            row = models.Event.objects.create(
                id=event.id.value,
                owner_id=event.owner_id,
                name=event.name,
                duration_minutes=event.duration_minutes,
                type=event.type.value,
                dates=_dump_datetimes(event.dates),
                notifications_enabled=event.notifications_enabled,
            )
            models.Response.objects.bulk_create(
                models.Response(event=row, participant_key=key, **_response_columns(response))
                for key, response in event.responses.items()
            )
            models.Remindee.objects.bulk_create(
                models.Remindee(
                    event=row,
                    email=r.email,
                    task_refs=list(r.task_refs),
                    responded=r.responded,
                    position=position,
                )
                for position, r in enumerate(event.remindees)
            )
            models.Attendee.objects.bulk_create(
                models.Attendee(event=row, email=a.email, declined=a.declined, position=position)
                for position, a in enumerate(event.attendees)
            )
        logger.debug("Inserted event %s", row.id)
        return EventId(value=row.id)

    def update_event_fields(self, event_id: EventId, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - set(_FIELD_CONVERTERS)
        if unknown:
            raise ValueError(f"Cannot update event fields: {sorted(unknown)}")
        values = {name: _FIELD_CONVERTERS[name](value) for name, value in fields.items()}
        updated = models.Event.objects.filter(pk=event_id.value).update(
            **values, updated_at=timezone.now()
        )
        return updated > 0

    def sync_remindees(self, event_id: EventId, remindees: Sequence[Remindee]) -> None:
        with transaction.atomic():
            rows = models.Remindee.objects.filter(event_id=event_id.value)
            rows.exclude(email__in=[r.email for r in remindees]).delete()
            added = False
            for position, remindee in enumerate(remindees):
                if not rows.filter(email=remindee.email).update(position=position):
                    models.Remindee.objects.create(
                        event_id=event_id.value,
                        email=remindee.email,
                        task_refs=list(remindee.task_refs),
                        responded=remindee.responded,
                        position=position,
                    )
                    added = True
            if added:
                models.Event.objects.filter(pk=event_id.value).update(
                    everyone_responded_notified_at=None
                )

    def sync_attendees(self, event_id: EventId, attendees: Sequence[Attendee]) -> None:
        with transaction.atomic():
            rows = models.Attendee.objects.filter(event_id=event_id.value)
            rows.exclude(email__in=[a.email for a in attendees]).delete()
            for position, attendee in enumerate(attendees):
                if not rows.filter(email=attendee.email).update(position=position):
                    models.Attendee.objects.create(
                        event_id=event_id.value,
                        email=attendee.email,
                        declined=attendee.declined,
                        position=position,
                    )

    def set_response(self, event_id: EventId, response: Response) -> bool:
        # Two first submissions for one key can both miss the row and race
        # on the unique constraint; the loser retries as an update.
        for attempt in range(1, self._write_retries + 1):
            try:
                with transaction.atomic():
                    _, created = models.Response.objects.update_or_create(
                        event_id=event_id.value,
                        participant_key=response.participant_key,
                        defaults=_response_columns(response),
                    )
                return created
            except IntegrityError:
                logger.warning(
                    "Response write for %s on event %s conflicted (attempt %d/%d)",
                    response.participant_key,
                    event_id,
                    attempt,
                    self._write_retries,
                )
        raise PersistenceConflictError(f"response {response.participant_key} on {event_id}")

    def delete_response(self, event_id: EventId, participant_key: str) -> bool:
        deleted, _ = models.Response.objects.filter(
            event_id=event_id.value, participant_key=participant_key
        ).delete()
        return deleted > 0

    def mark_remindee_responded(self, event_id: EventId, email: str) -> bool:
        updated = models.Remindee.objects.filter(
            event_id=event_id.value, email=email, responded=False
        ).update(responded=True)
        return updated == 1

    def get_remindees(self, event_id: EventId) -> list[Remindee]:
        rows = models.Remindee.objects.filter(event_id=event_id.value)
        return [_remindee_to_domain(row) for row in rows]

    def claim_everyone_responded(self, event_id: EventId) -> bool:
        claimed = models.Event.objects.filter(
            pk=event_id.value, everyone_responded_notified_at__isnull=True
        ).update(everyone_responded_notified_at=timezone.now())
        return claimed == 1

    def decline_attendee(self, event_id: EventId, email: str) -> bool:
        updated = models.Attendee.objects.filter(
            event_id=event_id.value, email=email, declined=False
        ).update(declined=True)
        return updated == 1

    def delete_event(self, event_id: EventId, owner_id: str) -> bool:
        deleted, _ = models.Event.objects.filter(pk=event_id.value, owner_id=owner_id).delete()
        return deleted > 0


class DjangoUserDirectory(UserDirectory):
    """Looks users up in django.contrib.auth's user model."""

    def lookup_user(self, user_id: str) -> UserSummary | None:
        try:
            user = get_user_model().objects.filter(pk=user_id).first()
        except (ValueError, ValidationError):
            return None
        if user is None:
            return None
        return UserSummary(
            user_id=str(user.pk),
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )
