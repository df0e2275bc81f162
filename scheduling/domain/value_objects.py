"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


class EventType(str, Enum):
    """Kind of scheduling event."""

    SPECIFIC_DATES = "specific_dates"
    DOW = "dow"
    GROUP = "group"

    @property
    def has_remindees(self) -> bool:
        return self in (EventType.SPECIFIC_DATES, EventType.DOW)

    @property
    def has_attendees(self) -> bool:
        return self is EventType.GROUP


class IndexedValue(NamedTuple):
    """A list entry paired with its position in the list it came from."""

    value: str
    index: int
