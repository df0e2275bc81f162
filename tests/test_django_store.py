"""Integration tests for the Django ORM stores.

Run with: pytest tests/test_django_store.py -v
"""

from datetime import datetime, timezone
from unittest import mock

import pytest
from django.db import IntegrityError

from scheduling import models
from scheduling.domain import Actor, Attendee, EventId, EventType, Remindee, Response
from scheduling.domain.errors import PersistenceConflictError
from scheduling.services.commands import ResponseSubmission
from scheduling.services.event_service import EventService
from scheduling.stores.django_store import DjangoEventStore, DjangoUserDirectory
from tests.fakes import (
    FakeTaskScheduler,
    FakeUserDirectory,
    RecordingNotificationQueue,
    make_event,
)

MONDAY = datetime(2026, 11, 2, 15, tzinfo=timezone.utc)
TUESDAY = datetime(2026, 11, 3, 15, tzinfo=timezone.utc)

pytestmark = pytest.mark.django_db


@pytest.fixture
def owner(django_user_model):
    return django_user_model.objects.create_user(
        username="olive", email="olive@example.com", first_name="Olive", last_name="Owner"
    )


@pytest.fixture
def django_store() -> DjangoEventStore:
    return DjangoEventStore(write_retries=2)


@pytest.fixture
def stored_event(django_store, owner):
    event = make_event(
        owner_id=str(owner.pk),
        dates=(MONDAY, TUESDAY),
        responses={"Ann": Response(participant_key="Ann", availability=(MONDAY,), guest_name="Ann")},
        remindees=(
            Remindee(email="a@example.com", task_refs=("t1", "t2")),
            Remindee(email="b@example.com", responded=True),
        ),
    )
    django_store.insert_event(event)
    return event


class TestInsertAndGet:
    def test_round_trips_the_aggregate(self, django_store, stored_event):
        loaded = django_store.get_event(stored_event.id)

        assert loaded.name == stored_event.name
        assert loaded.owner_id == stored_event.owner_id
        assert loaded.dates == (MONDAY, TUESDAY)
        assert loaded.responses == stored_event.responses
        assert loaded.remindees == stored_event.remindees
        assert loaded.created_at is not None

    def test_missing_event_returns_none(self, django_store):
        assert django_store.get_event(EventId.new()) is None

    def test_ownerless_event(self, django_store):
        event = make_event(owner_id=None)
        django_store.insert_event(event)

        assert django_store.get_event(event.id).owner_id is None


class TestUpdateEventFields:
    def test_updates_only_given_fields(self, django_store, stored_event):
        updated = django_store.update_event_fields(
            stored_event.id, {"name": "Renamed", "type": EventType.DOW}
        )

        loaded = django_store.get_event(stored_event.id)
        assert updated is True
        assert loaded.name == "Renamed"
        assert loaded.type is EventType.DOW
        assert loaded.duration_minutes == stored_event.duration_minutes
        assert loaded.responses == stored_event.responses

    def test_missing_event(self, django_store):
        assert django_store.update_event_fields(EventId.new(), {"name": "x"}) is False

    def test_rejects_unknown_fields(self, django_store, stored_event):
        with pytest.raises(ValueError):
            django_store.update_event_fields(stored_event.id, {"owner_id": "9"})


class TestSync:
    def test_sync_remindees_keeps_stored_state(self, django_store, stored_event):
        django_store.sync_remindees(
            stored_event.id,
            [Remindee(email="b@example.com"), Remindee(email="c@example.com", task_refs=("t3",))],
        )

        assert django_store.get_remindees(stored_event.id) == [
            Remindee(email="b@example.com", responded=True),
            Remindee(email="c@example.com", task_refs=("t3",)),
        ]

    def test_sync_attendees(self, django_store):
        event = make_event(
            owner_id=None,
            type=EventType.GROUP,
            attendees=(Attendee("a@example.com", declined=True), Attendee("b@example.com")),
        )
        django_store.insert_event(event)

        django_store.sync_attendees(
            event.id, [Attendee("c@example.com"), Attendee("a@example.com")]
        )

        assert django_store.get_event(event.id).attendees == (
            Attendee("c@example.com"),
            Attendee("a@example.com", declined=True),
        )


class TestResponses:
    def test_set_response_creates_then_replaces(self, django_store, stored_event):
        first = Response(participant_key="Bob", availability=(MONDAY,), guest_name="Bob")
        second = Response(participant_key="Bob", availability=(TUESDAY,), guest_name="Bob")

        assert django_store.set_response(stored_event.id, first) is True
        assert django_store.set_response(stored_event.id, second) is False

        responses = django_store.get_event(stored_event.id).responses
        assert responses["Bob"] == second
        assert responses["Ann"] == stored_event.responses["Ann"]
        assert models.Response.objects.filter(participant_key="Bob").count() == 1

    def test_signed_in_response_keeps_calendar_settings(self, django_store, stored_event, owner):
        response = Response(
            participant_key=str(owner.pk),
            availability=(MONDAY,),
            user_id=str(owner.pk),
            use_calendar_availability=True,
            enabled_calendars=({"email": "olive@example.com", "calendars": ["primary"]},),
        )

        django_store.set_response(stored_event.id, response)

        assert django_store.get_event(stored_event.id).responses[str(owner.pk)] == response

    def test_persistent_conflict_raises(self, django_store, stored_event):
        with mock.patch.object(
            models.Response.objects, "update_or_create", side_effect=IntegrityError("dup")
        ):
            with pytest.raises(PersistenceConflictError):
                django_store.set_response(stored_event.id, Response(participant_key="Bob"))

    def test_delete_response(self, django_store, stored_event):
        assert django_store.delete_response(stored_event.id, "Ann") is True
        assert django_store.delete_response(stored_event.id, "Ann") is False
        assert django_store.get_event(stored_event.id).responses == {}


class TestConditionalUpdates:
    def test_mark_remindee_responded_transitions_once(self, django_store, stored_event):
        assert django_store.mark_remindee_responded(stored_event.id, "a@example.com") is True
        assert django_store.mark_remindee_responded(stored_event.id, "a@example.com") is False
        assert all(r.responded for r in django_store.get_remindees(stored_event.id))

    def test_decline_attendee_transitions_once(self, django_store):
        event = make_event(owner_id=None, type=EventType.GROUP, attendees=(Attendee("a@example.com"),))
        django_store.insert_event(event)

        assert django_store.decline_attendee(event.id, "a@example.com") is True
        assert django_store.decline_attendee(event.id, "a@example.com") is False
        assert django_store.decline_attendee(event.id, "nobody@example.com") is False

    def test_delete_event_requires_owner(self, django_store, stored_event, owner):
        assert django_store.delete_event(stored_event.id, "999") is False
        assert django_store.delete_event(stored_event.id, str(owner.pk)) is True
        assert django_store.get_event(stored_event.id) is None
        assert not models.Response.objects.exists()


class TestUserDirectory:
    def test_lookup_existing_user(self, owner):
        user = DjangoUserDirectory().lookup_user(str(owner.pk))

        assert user.full_name == "Olive Owner"
        assert user.email == "olive@example.com"

    @pytest.mark.parametrize("user_id", ["999", "not-a-number"])
    def test_unknown_user(self, user_id):
        assert DjangoUserDirectory().lookup_user(user_id) is None


class TestEveryoneRespondedClaim:
    def test_only_first_claim_wins(self, django_store, stored_event):
        assert django_store.claim_everyone_responded(stored_event.id) is True
        assert django_store.claim_everyone_responded(stored_event.id) is False
        assert models.Event.objects.get(pk=stored_event.id.value).everyone_responded_notified_at

    def test_adding_a_remindee_releases_the_claim(self, django_store, stored_event):
        django_store.claim_everyone_responded(stored_event.id)

        django_store.sync_remindees(
            stored_event.id, [*stored_event.remindees, Remindee(email="c@example.com")]
        )

        assert django_store.claim_everyone_responded(stored_event.id) is True

    def test_removing_a_remindee_keeps_the_claim(self, django_store, stored_event):
        django_store.claim_everyone_responded(stored_event.id)

        django_store.sync_remindees(stored_event.id, stored_event.remindees[:1])

        assert django_store.claim_everyone_responded(stored_event.id) is False


class SnapshotStore(DjangoEventStore):
    """Serves every read from one snapshot taken before any write."""

    def __init__(self, snapshot) -> None:
        super().__init__()
        self._snapshot = snapshot

    def get_event(self, event_id):
        return self._snapshot


class TestWritesFromStaleSnapshot:
    def test_distinct_keys_written_from_one_snapshot_both_survive(
        self, django_store, stored_event, scheduling_settings
    ):
        snapshot = django_store.get_event(stored_event.id)
        service = EventService(
            store=SnapshotStore(snapshot),
            users=FakeUserDirectory(),
            scheduler=FakeTaskScheduler(),
            notifications=RecordingNotificationQueue(),
            settings=scheduling_settings,
        )

        for name, day in (("Bob", MONDAY), ("Cat", TUESDAY)):
            service.submit_response(
                Actor(), str(stored_event.id), ResponseSubmission((day,), guest=True, name=name)
            )

        responses = django_store.get_event(stored_event.id).responses
        assert sorted(responses) == ["Ann", "Bob", "Cat"]
        assert responses["Bob"].availability == (MONDAY,)
        assert responses["Cat"].availability == (TUESDAY,)

    def test_field_update_from_snapshot_keeps_responses(self, django_store, stored_event):
        snapshot = django_store.get_event(stored_event.id)
        django_store.set_response(snapshot.id, Response(participant_key="Bob", guest_name="Bob"))

        django_store.update_event_fields(snapshot.id, {"name": snapshot.name + " (moved)"})

        assert sorted(django_store.get_event(stored_event.id).responses) == ["Ann", "Bob"]
