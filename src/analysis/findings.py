"""Findings: occurrence statistics over collected events."""
from __future__ import annotations

import logging
from ipaddress import IPv4Address
from typing import Dict, Iterable, List, Optional, Tuple, Union

from protocol.constants import (
    KEY_EMAIL,
    KEY_PASSWORD,
    KEY_USER_AGENT,
    KEY_USERNAME,
    Protocol,
)
from protocol.event import Event

from .exceptions import FindingsError
from .occurrence import OccurrenceEntry, OccurrenceTable

logger = logging.getLogger(__name__)

# Payload key -> name used in error messages
TRACKED_KEYS = {
    KEY_EMAIL: "emails",
    KEY_PASSWORD: "passwords",
    KEY_USERNAME: "users",
    KEY_USER_AGENT: "user-agents",
}


class Findings:
    """
    An accounting of collected events.

    Tracks events per protocol, per-protocol tables for every tracked
    payload key, and submitters by IPv4 address (with their events).
    Only validated events should be added.
    """

    def __init__(self):
        self.events: List[Event] = []
        self.by_protocol: Dict[Protocol, OccurrenceEntry] = {}
        self.tables: Dict[str, Dict[Protocol, OccurrenceTable]] = {key: {} for key in TRACKED_KEYS}
        self.submitters = OccurrenceTable(keep_events=True)

    @classmethod
    def from_events(cls, events: Iterable[Event]) -> "Findings":
        findings = cls()
        for event in events:
            findings.add(event)
        return findings

    def add(self, event: Event) -> None:
        self.events.append(event)

        item = self.by_protocol.get(event.protocol)
        if item is None:
            item = OccurrenceEntry(label=event.protocol.label())
            self.by_protocol[event.protocol] = item
        item.count += 1

        self.submitters.add(str(event.ip), event)

        for key, value in event.decoded_payload.items():
            tables = self.tables.get(key)
            if tables is None:
                logger.warning("unknown event (%s) payload key %r", event.event_uuid, key)
                continue
            table = tables.get(event.protocol)
            if table is None:
                table = OccurrenceTable()
                tables[event.protocol] = table
            table.add(value)

    # -- queries ----------------------------------------------------------------

    @property
    def total_events(self) -> int:
        return len(self.events)

    def protocol_total(self, proto: Protocol) -> int:
        item = self.by_protocol.get(proto)
        if item is None:
            raise FindingsError(f"no {proto.label()} events")
        return item.count

    def table(self, key: str, proto: Protocol) -> OccurrenceTable:
        if key not in self.tables:
            raise KeyError(f"untracked payload key: {key}")
        self.protocol_total(proto)
        table = self.tables[key].get(proto)
        if table is None:
            raise FindingsError(f"no {proto.label()} {TRACKED_KEYS[key]}")
        return table

    def top(self, key: str, proto: Protocol, count: int) -> List[OccurrenceEntry]:
        return self.table(key, proto).top(count)

    def top_passwords_users(self, proto: Protocol, count: int
                            ) -> Tuple[List[OccurrenceEntry], List[OccurrenceEntry]]:
        return self.top(KEY_PASSWORD, proto, count), self.top(KEY_USERNAME, proto, count)

    def top_user_agents(self, proto: Protocol, count: int) -> List[OccurrenceEntry]:
        return self.top(KEY_USER_AGENT, proto, count)

    def top_emails(self, proto: Protocol, count: int) -> List[OccurrenceEntry]:
        return self.top(KEY_EMAIL, proto, count)

    def top_submitters(self, count: int) -> List[OccurrenceEntry]:
        return self.submitters.top(count)

    def submitted_by(self, address: Union[IPv4Address, str, None]) -> List[Event]:
        """Events submitted by ``address`` in arrival order."""
        if address is None:
            return []
        entry: Optional[OccurrenceEntry] = self.submitters.get(str(address))
        if entry is None:
            return []
        return list(entry.events)
