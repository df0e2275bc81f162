"""Decide which notifications a state transition should fire.

Every check here is evaluated against state captured around a single
write, so a given transition can only be observed once per call.
"""

from typing import Iterable

from scheduling.domain.models import Attendee, Event, Remindee


def should_notify_first_response(
    event: Event,
    participant_key: str,
    *,
    had_prior_response: bool,
) -> bool:
    """Whether the owner should hear about a participant's first response.

    ``had_prior_response`` must be computed before the response is merged.
    """
    if not event.notifications_enabled:
        return False
    if not event.type.has_remindees:
        return False
    if had_prior_response:
        return False
    if event.is_ownerless:
        return False
    return participant_key != event.owner_id


def everyone_responded(remindees: Iterable[Remindee]) -> bool:
    """True when the list is non-empty and every remindee has responded."""
    remindees = list(remindees)
    return bool(remindees) and all(r.responded for r in remindees)


def is_decline_transition(attendee: Attendee) -> bool:
    """Declining is terminal; only the first decline changes anything."""
    return not attendee.declined
