"""
Wire constants for the event protocol.
"""
from __future__ import annotations

from enum import IntEnum

# Payload grammar: key:value[,key:value...]
PAIR_SEPARATOR = ","
SEPARATOR = ":"

# Payload keys tracked by the findings aggregator
KEY_EMAIL = "email"
KEY_PASSWORD = "password"
KEY_USERNAME = "username"
KEY_USER_AGENT = "user-agent"

UNKNOWN_LABEL = "UNKNOWN"

# Fixed-width sizes (bytes)
NODE_ID_SIZE = 2
TIMESTAMP_SIZE = 4
PAYLOAD_SIZE_SIZE = 2
UUID_SIZE = 16
UUID_NODE_SIZE = 6
PROTOCOL_SIZE = 2
SUBMITTER_SIZE = 4
CHECKSUM_SIZE = 4

# Frame bytes excluding the payload
FRAME_OVERHEAD = (
    NODE_ID_SIZE + TIMESTAMP_SIZE + PAYLOAD_SIZE_SIZE + UUID_SIZE
    + PROTOCOL_SIZE + SUBMITTER_SIZE + CHECKSUM_SIZE
)


class Protocol(IntEnum):
    """
    Originating application protocol of an event.

    Values outside the known set are still accepted: ``Protocol(0x99)``
    returns a pseudo-member that keeps its numeric value and is labelled
    ``UNKNOWN``, so unknown protocols round-trip through the codec.
    """
    HTTP = 0x0A
    SMTP = 0x11
    SSH = 0x31
    TELNET = 0x23

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, int) and 0 <= value <= 0xFFFF:
            member = int.__new__(cls, value)
            member._name_ = UNKNOWN_LABEL
            member._value_ = value
            return member
        return None

    @property
    def is_known(self) -> bool:
        return self._name_ != UNKNOWN_LABEL

    def label(self) -> str:
        return self._name_
