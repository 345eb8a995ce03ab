"""
Event frame codec.

Frame layout (all integers big-endian):
- node_id        2
- timestamp      4   seconds since epoch
- payload_size   2
- uuid          16
- payload        payload_size bytes of key:value text
- protocol       2
- submitter      4   also an IPv4 address
- checksum       4   CRC-32 (IEEE) over every preceding byte

EVENTS ARE IMMUTABLE - a decoded event is read-only. ``decoded_payload``
is always derived from ``payload_bytes`` and ``ip`` from ``submitter``.
"""
from __future__ import annotations

import io
import struct
import zlib
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from ipaddress import IPv4Address
from typing import BinaryIO, Dict, Tuple, Union

from .constants import (
    CHECKSUM_SIZE,
    NODE_ID_SIZE,
    PAYLOAD_SIZE_SIZE,
    PROTOCOL_SIZE,
    SUBMITTER_SIZE,
    TIMESTAMP_SIZE,
    Protocol,
)
from .event_uuid import EventUUID
from .exceptions import EventFormatError
from .payload import parse_payload
from .wire import pack_uint, read_bytes, read_uint


@dataclass(frozen=True)
class Event:
    """A server-emitted event."""
    node_id: int
    timestamp: int
    payload_size: int
    event_uuid: EventUUID
    payload_bytes: bytes
    protocol: Protocol
    submitter: int
    checksum: int

    decoded_payload: Dict[str, str] = field(init=False, repr=False, compare=False)
    """Key/value pairs parsed from payload_bytes (last value wins)."""

    def __post_init__(self):
        object.__setattr__(self, "protocol", Protocol(self.protocol))
        object.__setattr__(self, "payload_bytes", bytes(self.payload_bytes))
        object.__setattr__(self, "decoded_payload", parse_payload(self.payload_bytes))

    # COMPUTED PROPERTIES
    @property
    def ip(self) -> IPv4Address:
        """Submitter reinterpreted as a 4-octet IPv4 address."""
        return IPv4Address(self.submitter)

    @property
    def timestamp_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @classmethod
    def build(cls,
              node_id: int,
              timestamp: int,
              event_uuid: EventUUID,
              payload_bytes: Union[bytes, str],
              protocol: Union[Protocol, int],
              submitter: int) -> "Event":
        """Create an event with a derived payload size and a valid checksum."""
        if isinstance(payload_bytes, str):
            payload_bytes = payload_bytes.encode("utf-8")
        unsigned = cls(
            node_id=node_id,
            timestamp=timestamp,
            payload_size=len(payload_bytes),
            event_uuid=event_uuid,
            payload_bytes=payload_bytes,
            protocol=protocol,
            submitter=submitter,
            checksum=0,
        )
        return unsigned.with_checksum(unsigned.compute_checksum())

    def with_checksum(self, checksum: int) -> "Event":
        return replace(self, checksum=checksum)

    @classmethod
    def read_from(cls, stream: BinaryIO) -> Tuple["Event", int]:
        """
        Decode one event from ``stream``.

        Decoding is all-or-nothing: the first field that cannot be read
        aborts it.

        Returns:
            (event, bytes consumed)

        Raises:
            EventFormatError: field-labelled, e.g. ``reading checksum: EOF``.
                ``bytes_read`` holds the count consumed before the failure.
        """
        n = 0
        node_id = read_uint(stream, NODE_ID_SIZE, "node ID", n)
        n += NODE_ID_SIZE

        timestamp = read_uint(stream, TIMESTAMP_SIZE, "time stamp", n)
        n += TIMESTAMP_SIZE

        payload_size = read_uint(stream, PAYLOAD_SIZE_SIZE, "size", n)
        n += PAYLOAD_SIZE_SIZE

        try:
            event_uuid, i = EventUUID.read_from(stream)
        except EventFormatError as e:
            raise e.within("UUID", n) from e
        n += i

        payload_bytes = read_bytes(stream, payload_size, "payload", n)
        n += payload_size

        protocol = read_uint(stream, PROTOCOL_SIZE, "protocol", n)
        n += PROTOCOL_SIZE

        submitter = read_uint(stream, SUBMITTER_SIZE, "submitter", n)
        n += SUBMITTER_SIZE

        checksum = read_uint(stream, CHECKSUM_SIZE, "checksum", n)
        n += CHECKSUM_SIZE

        return cls(
            node_id=node_id,
            timestamp=timestamp,
            payload_size=payload_size,
            event_uuid=event_uuid,
            payload_bytes=payload_bytes,
            protocol=Protocol(protocol),
            submitter=submitter,
            checksum=checksum,
        ), n

    @classmethod
    def decode(cls, data: bytes) -> "Event":
        """Decode one event from a complete frame; trailing bytes are ignored."""
        event, _ = cls.read_from(io.BytesIO(data))
        return event

    def _encode_unchecked(self) -> bytes:
        """Every field but the checksum, in frame order."""
        return b"".join((
            pack_uint(self.node_id, NODE_ID_SIZE),
            pack_uint(self.timestamp, TIMESTAMP_SIZE),
            pack_uint(self.payload_size, PAYLOAD_SIZE_SIZE),
            self.event_uuid.encode(),
            self.payload_bytes,
            pack_uint(int(self.protocol), PROTOCOL_SIZE),
            pack_uint(self.submitter, SUBMITTER_SIZE),
        ))

    def encode(self) -> bytes:
        """Encode the whole frame, including the stored checksum."""
        return self._encode_unchecked() + pack_uint(self.checksum, CHECKSUM_SIZE)

    def compute_checksum(self) -> int:
        return zlib.crc32(self._encode_unchecked()) & 0xFFFFFFFF

    def validate(self) -> bool:
        """True if the stored checksum matches the CRC-32 of the other fields."""
        try:
            return self.compute_checksum() == self.checksum
        except (struct.error, TypeError):
            # A field out of its wire range cannot have produced this checksum
            return False
