"""Three-way diff between an old and a new list of participant emails."""

from dataclasses import dataclass
from typing import Iterable, Sequence

from scheduling.domain.value_objects import IndexedValue


@dataclass(frozen=True)
class DiffResult:
    """Partition of two lists into added, removed and kept entries.

    ``added`` carries indexes into the new list, ``removed`` and ``kept``
    carry indexes into the old list so callers can recover prior state.
    """

    added: tuple[IndexedValue, ...] = ()
    removed: tuple[IndexedValue, ...] = ()
    kept: tuple[IndexedValue, ...] = ()


def dedupe(values: Iterable[str]) -> list[str]:
    """Drop repeated values, keeping the first occurrence of each."""
    seen: set[str] = set()
    unique = []
    for value in values:
        if value not in seen:
            seen.add(value)
            unique.append(value)
    return unique


def _first_indexes(values: Sequence[str]) -> dict[str, int]:
    indexes: dict[str, int] = {}
    for index, value in enumerate(values):
        indexes.setdefault(value, index)
    return indexes


def diff(old: Sequence[str], new: Sequence[str]) -> DiffResult:
    """Compare two lists by exact string equality.

    Duplicates are collapsed onto their first occurrence in either list, and
    that occurrence's index is the one reported.
    """
    old_indexes = _first_indexes(old)
    new_indexes = _first_indexes(new)

    added = tuple(
        IndexedValue(value, index)
        for value, index in new_indexes.items()
        if value not in old_indexes
    )
    removed = tuple(
        IndexedValue(value, index)
        for value, index in old_indexes.items()
        if value not in new_indexes
    )
    kept = tuple(
        IndexedValue(value, index)
        for value, index in old_indexes.items()
        if value in new_indexes
    )
    return DiffResult(added=added, removed=removed, kept=kept)
