"""Occurrence tables: label -> count, ranked by count."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from protocol.event import Event


@dataclass
class OccurrenceEntry:
    """A label, how often it was seen, and (for submitters) the events behind it."""
    label: str = ""
    count: int = 0
    events: List[Event] = field(default_factory=list)

    @property
    def is_placeholder(self) -> bool:
        return not self.label and self.count == 0


def _rank_key(entry: OccurrenceEntry):
    # count descending, then label ascending
    return (-entry.count, entry.label)


def sort_entries(entries: List[OccurrenceEntry]) -> List[OccurrenceEntry]:
    return sorted(entries, key=_rank_key)


class OccurrenceTable:
    """Counts occurrences of string labels."""

    def __init__(self, keep_events: bool = False):
        self.keep_events = keep_events
        self._entries: Dict[str, OccurrenceEntry] = {}

    def add(self, label: str, event: Optional[Event] = None) -> OccurrenceEntry:
        entry = self._entries.get(label)
        if entry is None:
            entry = OccurrenceEntry(label=label)
            self._entries[label] = entry
        entry.count += 1
        if self.keep_events and event is not None:
            entry.events.append(event)
        return entry

    def get(self, label: str) -> Optional[OccurrenceEntry]:
        return self._entries.get(label)

    @property
    def total(self) -> int:
        return sum(entry.count for entry in self._entries.values())

    def top(self, n: int) -> List[OccurrenceEntry]:
        """
        Return exactly ``n`` entries, highest count first.

        Ties are broken by label ascending. When fewer than ``n`` labels were
        seen, the list is padded with empty placeholder entries.
        """
        if n <= 0:
            return []
        ranked = sort_entries(list(self._entries.values()))[:n]
        ranked.extend(OccurrenceEntry() for _ in range(n - len(ranked)))
        return ranked

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, label: str) -> bool:
        return label in self._entries

    def __iter__(self) -> Iterator[OccurrenceEntry]:
        return iter(self._entries.values())
