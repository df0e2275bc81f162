"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.

Every mutation is a targeted write: it touches only the field, row or map
key named in its arguments, so concurrent requests changing different
parts of one event never overwrite each other with stale state.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from scheduling.domain import Attendee, Event, EventId, Remindee, Response, UserSummary


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def insert_event(self, event: Event) -> EventId:
        """Persist a new event with its responses, remindees and attendees."""
        ...

    @abstractmethod
    def update_event_fields(self, event_id: EventId, fields: Mapping[str, Any]) -> bool:
        """Set the given top-level fields. Return False if the event is gone."""
        ...

    @abstractmethod
    def sync_remindees(self, event_id: EventId, remindees: Sequence[Remindee]) -> None:
        """Make the stored remindee list match ``remindees``.

        Emails no longer listed are removed, new emails are inserted as given,
        and emails already stored keep their stored state. Inserting anyone
        releases the everyone-responded claim.
        """
        ...

    @abstractmethod
    def sync_attendees(self, event_id: EventId, attendees: Sequence[Attendee]) -> None:
        """Same as sync_remindees, for attendees."""
        ...

    @abstractmethod
    def set_response(self, event_id: EventId, response: Response) -> bool:
        """Upsert one participant's response. Return True if it was created."""
        ...

    @abstractmethod
    def delete_response(self, event_id: EventId, participant_key: str) -> bool:
        """Remove one participant's response. Return True if one was removed."""
        ...

    @abstractmethod
    def mark_remindee_responded(self, event_id: EventId, email: str) -> bool:
        """Flip ``responded`` from False to True.

        Return True only for the call that made the change.
        """
        ...

    @abstractmethod
    def get_remindees(self, event_id: EventId) -> list[Remindee]:
        """Return the current remindee list in order."""
        ...

    @abstractmethod
    def claim_everyone_responded(self, event_id: EventId) -> bool:
        """Record that the owner is being told everyone responded.

        Return True only for the first call since the remindee list last
        gained someone new.
        """
        ...

    @abstractmethod
    def decline_attendee(self, event_id: EventId, email: str) -> bool:
        """Flip ``declined`` from False to True.

        Return True only for the call that made the change.
        """
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId, owner_id: str) -> bool:
        """Delete the event if it is owned by ``owner_id``."""
        ...


class UserDirectory(ABC):
    """Read-only lookup of user display information."""

    @abstractmethod
    def lookup_user(self, user_id: str) -> UserSummary | None:
        """Return the user's summary, or None if there is no such user."""
        ...
