"""
128-bit event identifier.

Layout (16 bytes, big-endian integers):
- time_low             4
- time_mid             2
- time_hi_and_version  2
- clock_seq_hi_and_res 1
- clock_seq_low        1
- node                 6 raw bytes

The string form is derived from the raw bytes, not from the version or
variant bits, so any 16 bytes render.
"""
from __future__ import annotations

import io
import uuid
from dataclasses import dataclass
from typing import BinaryIO, Tuple

from .constants import UUID_NODE_SIZE
from .exceptions import EventFormatError
from .wire import pack_uint, read_bytes, read_uint


@dataclass(frozen=True)
class EventUUID:
    time_low: int = 0
    time_mid: int = 0
    time_hi_and_version: int = 0
    clock_seq_hi_and_res: int = 0
    clock_seq_low: int = 0
    node: bytes = b"\x00" * UUID_NODE_SIZE

    def __post_init__(self):
        if len(self.node) != UUID_NODE_SIZE:
            raise ValueError(f"node must be {UUID_NODE_SIZE} bytes, got {len(self.node)}")

    @classmethod
    def read_from(cls, stream: BinaryIO) -> Tuple["EventUUID", int]:
        """
        Decode a UUID from ``stream``.

        Returns:
            (uuid, bytes consumed)

        Raises:
            EventFormatError: labelled with the field that could not be read.
                ``bytes_read`` holds the count consumed before that field.
        """
        n = 0
        time_low = read_uint(stream, 4, "time low", n)
        n += 4
        time_mid = read_uint(stream, 2, "time mid", n)
        n += 2
        time_hi_and_version = read_uint(stream, 2, "time hi and version", n)
        n += 2
        clock_seq_hi_and_res = read_uint(stream, 1, "clock seq hi and res", n)
        n += 1
        clock_seq_low = read_uint(stream, 1, "clock seq low", n)
        n += 1
        node = read_bytes(stream, UUID_NODE_SIZE, "node", n)
        n += UUID_NODE_SIZE

        return cls(
            time_low=time_low,
            time_mid=time_mid,
            time_hi_and_version=time_hi_and_version,
            clock_seq_hi_and_res=clock_seq_hi_and_res,
            clock_seq_low=clock_seq_low,
            node=node,
        ), n

    @classmethod
    def from_bytes(cls, data: bytes) -> "EventUUID":
        try:
            value, _ = cls.read_from(io.BytesIO(data))
        except EventFormatError as e:
            raise ValueError(f"invalid UUID bytes: {e}") from e
        return value

    @classmethod
    def from_uuid(cls, value: uuid.UUID) -> "EventUUID":
        return cls.from_bytes(value.bytes)

    def encode(self) -> bytes:
        return (
            pack_uint(self.time_low, 4)
            + pack_uint(self.time_mid, 2)
            + pack_uint(self.time_hi_and_version, 2)
            + pack_uint(self.clock_seq_hi_and_res, 1)
            + pack_uint(self.clock_seq_low, 1)
            + bytes(self.node)
        )

    def to_uuid(self) -> uuid.UUID:
        return uuid.UUID(bytes=self.encode())

    def __str__(self) -> str:
        # 8-4-4-2+2-6 byte groups in lowercase hex
        return str(self.to_uuid())
