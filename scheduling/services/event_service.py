"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores, scheduler, notification queue)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Reminder scheduling and notification delivery are side effects of a state
change that has already been written. Their failures are logged and never
undo or fail that change.
"""

import logging
from dataclasses import replace
from typing import Iterable

from scheduling.conf import SchedulingSettings
from scheduling.domain import (
    Actor,
    Event,
    EventDetails,
    EventId,
    EventType,
    Remindee,
    Response,
    UserSummary,
)
from scheduling.domain import responses as response_map
from scheduling.domain.diff import dedupe
from scheduling.domain.errors import (
    AttendeeNotFoundError,
    EventNotFoundError,
    EventNotGroupError,
    InvalidEventIdError,
    NotEventOwnerError,
    NotSignedInError,
    RemindeeNotFoundError,
)
from scheduling.domain.reconcile import (
    CancelReminders,
    Effect,
    Reconciliation,
    ScheduleReminder,
    SendInvite,
    reconcile_attendees,
    reconcile_remindees,
)
from scheduling.domain.triggers import (
    everyone_responded,
    is_decline_transition,
    should_notify_first_response,
)
from scheduling.notifications.intents import (
    EventCreatedNotice,
    EveryoneRespondedNotice,
    GroupInvite,
    RespondentNotice,
)
from scheduling.notifications.queue import NotificationQueue
from scheduling.reminders.interfaces import TaskScheduler
from scheduling.services.commands import EventDraft, ResponseDeletion, ResponseSubmission
from scheduling.stores.interfaces import EventStore, UserDirectory

logger = logging.getLogger(__name__)


class EventService:
    """Service for scheduling event operations."""

    def __init__(
        self,
        store: EventStore,
        users: UserDirectory,
        scheduler: TaskScheduler,
        notifications: NotificationQueue,
        settings: SchedulingSettings,
    ) -> None:
        self._store = store
        self._users = users
        self._scheduler = scheduler
        self._notifications = notifications
        self._settings = settings

    def create_event(self, actor: Actor, draft: EventDraft) -> Event:
        """Create an event owned by the actor, or ownerless for guests."""
        event = Event(
            id=EventId.new(),
            name=draft.name,
            duration_minutes=draft.duration_minutes,
            type=draft.type,
            dates=draft.dates,
            owner_id=actor.user_id,
            notifications_enabled=draft.notifications_enabled,
            responses={},
        )
        owner = self._users.lookup_user(actor.user_id) if actor.is_authenticated else None
        owner_name = owner.first_name if owner else self._settings.default_owner_name

        invites: tuple[Effect, ...] = ()
        scheduled: list[str] = []
        if draft.type.has_remindees and draft.remindees:
            reconciliation = reconcile_remindees((), dedupe(draft.remindees), owner_name, event)
            remindees, scheduled = self._schedule_added(reconciliation)
            event = replace(event, remindees=remindees)
        if draft.type.has_attendees and draft.attendees:
            reconciliation = reconcile_attendees((), dedupe(draft.attendees), owner_name, event)
            event = replace(event, attendees=reconciliation.participants)
            invites = reconciliation.effects

        try:
            self._store.insert_event(event)
        except Exception:
            self._cancel_reminders(scheduled)
            raise
        logger.info("Created %s event %s (owner=%s)", event.type.value, event.id, event.owner_id)

        self._send_invites(invites)
        self._notifications.enqueue(
            EventCreatedNotice(
                event_id=str(event.id),
                event_name=event.name,
                event_type=event.type.value,
                creator=f"{owner.full_name} ({owner.email})" if owner else "Guest",
                event_url=self._settings.event_url(str(event.id)),
            )
        )
        return event

    def edit_event(self, actor: Actor, event_id: str, draft: EventDraft) -> Event:
        """Update an event and reconcile its remindee or attendee list.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            NotEventOwnerError: If the event is owned by someone else.
        """
        event = self._load(event_id)
        if not event.can_be_edited_by(actor):
            raise NotEventOwnerError()

        fields = {
            "name": draft.name,
            "duration_minutes": draft.duration_minutes,
            "dates": draft.dates,
            "notifications_enabled": draft.notifications_enabled,
            "type": draft.type,
        }
        if not self._store.update_event_fields(event.id, fields):
            raise EventNotFoundError(event_id)
        edited = replace(event, **fields)

        owner_name = self._owner_name(event)
        if draft.type.has_remindees:
            reconciliation = reconcile_remindees(
                event.remindees, dedupe(draft.remindees), owner_name, edited
            )
            remindees, scheduled = self._schedule_added(reconciliation)
            try:
                self._store.sync_remindees(event.id, remindees)
            except Exception:
                self._cancel_reminders(scheduled)
                raise
            self._cancel_removed(reconciliation)
            edited = replace(edited, remindees=remindees)
        if draft.type.has_attendees:
            reconciliation = reconcile_attendees(
                event.attendees, dedupe(draft.attendees), owner_name, edited
            )
            self._store.sync_attendees(event.id, reconciliation.participants)
            edited = replace(edited, attendees=reconciliation.participants)
            self._send_invites(reconciliation.effects)

        logger.info("Edited event %s", event.id)
        return edited

    def get_event(self, event_id: str) -> EventDetails:
        """Return an event with respondents' display information.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._load(event_id)
        participants: dict[str, UserSummary] = {}
        for key, response in event.responses.items():
            if response.user_id is None:
                continue
            user = self._users.lookup_user(response.user_id)
            if user is not None:
                participants[key] = user
        return EventDetails(event=event, participants=participants)

    def submit_response(
        self, actor: Actor, event_id: str, submission: ResponseSubmission
    ) -> Event:
        """Set the submitting participant's response, replacing any earlier one.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            NotSignedInError: If a non-guest submission has no signed-in user.
        """
        event = self._load(event_id)
        if submission.guest:
            key = submission.name
            response = Response(
                participant_key=key,
                availability=submission.availability,
                guest_name=submission.name,
            )
        else:
            if not actor.is_authenticated:
                raise NotSignedInError()
            key = actor.user_id
            response = Response(
                participant_key=key,
                availability=submission.availability,
                user_id=actor.user_id,
                use_calendar_availability=submission.use_calendar_availability,
                enabled_calendars=submission.enabled_calendars,
            )

        had_prior_response = key in event.responses
        created = self._store.set_response(event.id, response)
        updated = response_map.merge_response(event, key, response)
        logger.info(
            "%s response %r on event %s",
            "Created" if created else "Replaced",
            key,
            event.id,
        )

        if should_notify_first_response(
            event, key, had_prior_response=had_prior_response or not created
        ):
            self._notify_first_response(event, response)
        return updated

    def delete_response(self, actor: Actor, event_id: str, deletion: ResponseDeletion) -> Event:
        """Remove one participant's response. Removing a missing one is not an error.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            NotSignedInError: If a non-guest deletion has no signed-in user.
            NotEventOwnerError: If a user deletes someone else's response
                on an event they do not own.
        """
        event = self._load(event_id)
        if deletion.guest:
            key = deletion.name
        else:
            if not actor.is_authenticated:
                raise NotSignedInError()
            if deletion.user_id != actor.user_id and not event.is_owned_by(actor.user_id):
                raise NotEventOwnerError()
            key = deletion.user_id

        if self._store.delete_response(event.id, key):
            logger.info("Deleted response %r on event %s", key, event.id)
        else:
            logger.debug("No response %r on event %s to delete", key, event.id)
        return response_map.delete_response(event, key)

    def mark_remindee_responded(self, event_id: str, email: str) -> bool:
        """Record that a remindee responded and stop their reminders.

        Returns True for the call that made the transition. Once everyone
        on the list has responded the owner is told, once.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            RemindeeNotFoundError: If the email is not a remindee.
        """
        event = self._load(event_id)
        remindee = event.find_remindee(email)
        if remindee is None:
            raise RemindeeNotFoundError(email)
        if remindee.responded:
            logger.debug("Remindee %s already responded to event %s", email, event.id)
            return False
        if not self._store.mark_remindee_responded(event.id, email):
            logger.debug("Remindee %s on event %s changed concurrently", email, event.id)
            return False

        logger.info("Remindee %s responded to event %s", email, event.id)
        self._cancel_reminders(remindee.task_refs)

        if everyone_responded(self._store.get_remindees(event.id)):
            if self._store.claim_everyone_responded(event.id):
                self._notify_everyone_responded(event)
            else:
                logger.debug("Everyone-responded notice for event %s already sent", event.id)
        return True

    def decline_invite(self, actor: Actor, event_id: str) -> bool:
        """Decline the signed-in attendee's invite to a group.

        Returns True when the invite was not declined before.

        Raises:
            NotSignedInError: If there is no signed-in user.
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            EventNotGroupError: If the event is not an availability group.
            AttendeeNotFoundError: If the user is not an attendee.
        """
        if not actor.is_authenticated:
            raise NotSignedInError()
        event = self._load(event_id)
        if event.type is not EventType.GROUP:
            raise EventNotGroupError()

        attendee = event.find_attendee(actor.email) if actor.email else None
        if attendee is None:
            raise AttendeeNotFoundError(actor.email)
        if not is_decline_transition(attendee):
            logger.debug("%s already declined event %s", attendee.email, event.id)
            return False

        declined = self._store.decline_attendee(event.id, attendee.email)
        if declined:
            logger.info("%s declined event %s", attendee.email, event.id)
        return declined

    def delete_event(self, actor: Actor, event_id: str) -> None:
        """Delete an event owned by the actor.

        Raises:
            NotSignedInError: If there is no signed-in user.
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            NotEventOwnerError: If the actor does not own the event.
        """
        if not actor.is_authenticated:
            raise NotSignedInError()
        event = self._load(event_id)
        if not event.is_owned_by(actor.user_id):
            raise NotEventOwnerError()
        if not self._store.delete_event(event.id, actor.user_id):
            raise EventNotFoundError(event_id)
        logger.info("Deleted event %s", event.id)

    def duplicate_event(
        self, actor: Actor, event_id: str, name: str, copy_availability: bool
    ) -> Event:
        """Copy an owned event under a new id and name.

        Remindees and attendees are copied as they are, task refs included;
        no reminders are scheduled for the copy.

        Raises:
            NotSignedInError: If there is no signed-in user.
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            NotEventOwnerError: If the actor does not own the event.
        """
        if not actor.is_authenticated:
            raise NotSignedInError()
        event = self._load(event_id)
        if not event.is_owned_by(actor.user_id):
            raise NotEventOwnerError()

        duplicate = replace(
            event,
            id=EventId.new(),
            name=name,
            responses=dict(event.responses) if copy_availability else {},
            created_at=None,
        )
        self._store.insert_event(duplicate)
        logger.info("Duplicated event %s as %s", event.id, duplicate.id)
        return duplicate

    def _load(self, event_id: str) -> Event:
        try:
            parsed = EventId.from_string(event_id)
        except ValueError:
            raise InvalidEventIdError() from None
        event = self._store.get_event(parsed)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def _owner_name(self, event: Event) -> str:
        if event.is_ownerless:
            return self._settings.default_owner_name
        owner = self._users.lookup_user(event.owner_id)
        return owner.first_name if owner else self._settings.default_owner_name

    def _schedule_added(
        self, reconciliation: Reconciliation[Remindee]
    ) -> tuple[tuple[Remindee, ...], list[str]]:
        """Schedule reminders for added remindees.

        Returns the remindee list with their task refs filled in, and every
        handle just created so the caller can cancel them if its write fails.
        """
        task_refs: dict[str, tuple[str, ...]] = {}
        for effect in reconciliation.effects:
            if isinstance(effect, ScheduleReminder):
                task_refs[effect.email] = self._schedule_reminder(effect)
        remindees = tuple(
            replace(r, task_refs=task_refs[r.email]) if r.email in task_refs else r
            for r in reconciliation.participants
        )
        return remindees, [handle for handles in task_refs.values() for handle in handles]

    def _cancel_removed(self, reconciliation: Reconciliation[Remindee]) -> None:
        for effect in reconciliation.effects:
            if isinstance(effect, CancelReminders):
                self._cancel_reminders(effect.task_refs)

    def _schedule_reminder(self, effect: ScheduleReminder) -> tuple[str, ...]:
        try:
            handles = self._scheduler.schedule_reminder(
                effect.email, effect.owner_name, effect.event_name, effect.event_id
            )
        except Exception:
            logger.exception("Failed to schedule reminders for %s", effect.email)
            return ()
        return tuple(handles)

    def _cancel_reminders(self, task_refs: Iterable[str]) -> None:
        for handle in task_refs:
            try:
                self._scheduler.cancel_reminder(handle)
            except Exception:
                logger.exception("Failed to cancel reminder %s", handle)

    def _send_invites(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, SendInvite):
                self._notifications.enqueue(
                    GroupInvite(
                        email=effect.email,
                        owner_name=effect.owner_name,
                        group_name=effect.group_name,
                        group_url=self._settings.group_url(effect.event_id),
                        template_id=self._settings.group_invite_template_id,
                    )
                )

    def _notify_first_response(self, event: Event, response: Response) -> None:
        owner = self._users.lookup_user(event.owner_id)
        if owner is None:
            logger.warning("Owner %s of event %s not found", event.owner_id, event.id)
            return

        respondent_name = response.guest_name or response.participant_key
        if not response.is_guest:
            respondent = self._users.lookup_user(response.user_id)
            if respondent is not None:
                respondent_name = respondent.full_name

        self._notifications.enqueue(
            RespondentNotice(
                owner_email=owner.email,
                owner_name=owner.first_name,
                respondent_name=respondent_name,
                event_name=event.name,
                event_url=self._settings.event_url(str(event.id)),
            )
        )

    def _notify_everyone_responded(self, event: Event) -> None:
        owner = self._users.lookup_user(event.owner_id) if not event.is_ownerless else None
        if owner is None:
            logger.info("Everyone responded to event %s but it has no owner to tell", event.id)
            return
        self._notifications.enqueue(
            EveryoneRespondedNotice(
                owner_email=owner.email,
                event_name=event.name,
                event_url=self._settings.event_url(str(event.id)),
                template_id=self._settings.everyone_responded_template_id,
            )
        )
