"""Merge a submitted remindee or attendee list into an event's stored list.

Reconciliation is pure. Work that has to happen outside the process
(scheduling reminder emails, cancelling them, sending invites) comes back
as effect instructions for the caller to carry out.
"""

from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from scheduling.domain.diff import diff
from scheduling.domain.models import Attendee, Event, Remindee

P = TypeVar("P", Remindee, Attendee)


@dataclass(frozen=True)
class ScheduleReminder:
    """Schedule reminder emails for a newly added remindee."""

    email: str
    owner_name: str
    event_name: str
    event_id: str


@dataclass(frozen=True)
class CancelReminders:
    """Cancel the scheduled reminders of a removed remindee."""

    email: str
    task_refs: tuple[str, ...]


@dataclass(frozen=True)
class SendInvite:
    """Invite a newly added attendee to an availability group."""

    email: str
    owner_name: str
    group_name: str
    event_id: str


Effect = ScheduleReminder | CancelReminders | SendInvite


@dataclass(frozen=True)
class Reconciliation(Generic[P]):
    participants: tuple[P, ...]
    effects: tuple[Effect, ...]


def reconcile_remindees(
    old_remindees: Sequence[Remindee],
    new_emails: Sequence[str],
    owner_name: str,
    event: Event,
) -> Reconciliation[Remindee]:
    """Kept remindees keep their responded flag and task refs.

    Added remindees start unresponded with no task refs; the caller fills
    the refs in from the ``ScheduleReminder`` effects it executes.
    """
    result = diff([r.email for r in old_remindees], new_emails)

    remindees = [old_remindees[kept.index] for kept in result.kept]
    effects: list[Effect] = []
    for added in result.added:
        remindees.append(Remindee(email=added.value))
        effects.append(
            ScheduleReminder(
                email=added.value,
                owner_name=owner_name,
                event_name=event.name,
                event_id=str(event.id),
            )
        )
    for removed in result.removed:
        previous = old_remindees[removed.index]
        effects.append(CancelReminders(email=previous.email, task_refs=previous.task_refs))

    return Reconciliation(participants=tuple(remindees), effects=tuple(effects))


def reconcile_attendees(
    old_attendees: Sequence[Attendee],
    new_emails: Sequence[str],
    owner_name: str,
    event: Event,
) -> Reconciliation[Attendee]:
    """Kept attendees keep their declined flag; removed ones are dropped."""
    result = diff([a.email for a in old_attendees], new_emails)

    attendees = [old_attendees[kept.index] for kept in result.kept]
    effects: list[Effect] = []
    for added in result.added:
        attendees.append(Attendee(email=added.value))
        effects.append(
            SendInvite(
                email=added.value,
                owner_name=owner_name,
                group_name=event.name,
                event_id=str(event.id),
            )
        )

    return Reconciliation(participants=tuple(attendees), effects=tuple(effects))
