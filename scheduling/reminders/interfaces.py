"""Task scheduler interface for remindee reminder emails."""

from abc import ABC, abstractmethod


class TaskScheduler(ABC):
    """Schedules and cancels reminder emails."""

    @abstractmethod
    def schedule_reminder(
        self, email: str, owner_name: str, event_name: str, event_id: str
    ) -> list[str]:
        """Schedule the reminder series for one remindee and return its handles."""
        ...

    @abstractmethod
    def cancel_reminder(self, handle: str) -> None:
        """Cancel one scheduled reminder. Unknown handles are ignored."""
        ...
