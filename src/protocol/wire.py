"""
Field readers for big-endian event frames.

Fixed-width integers are read fully or not at all: a field that starts at
the end of the input raises EventEOFError, one that is cut short raises
EventUnexpectedEOFError. Variable-length fields are read with a single
read call and report short counts with EventShortReadError.
"""
from __future__ import annotations

import struct
from typing import BinaryIO

from .exceptions import EventEOFError, EventShortReadError, EventUnexpectedEOFError

_UINT_FORMATS = {
    1: ">B",
    2: ">H",
    4: ">I",
}


def _read_full(stream: BinaryIO, size: int) -> bytes:
    buf = b""
    while len(buf) < size:
        chunk = stream.read(size - len(buf))
        if not chunk:
            break
        buf += chunk
    return buf


def read_uint(stream: BinaryIO, size: int, field: str, bytes_read: int = 0) -> int:
    """Read an unsigned big-endian integer of 1, 2 or 4 bytes."""
    data = _read_full(stream, size)
    if not data:
        raise EventEOFError().within(field, bytes_read)
    if len(data) < size:
        raise EventUnexpectedEOFError().within(field, bytes_read)
    value, = struct.unpack(_UINT_FORMATS[size], data)
    return value


def read_bytes(stream: BinaryIO, size: int, field: str, bytes_read: int = 0) -> bytes:
    """Read exactly ``size`` raw bytes with a single read call."""
    data = stream.read(size) if size else b""
    if size and not data:
        raise EventEOFError().within(field, bytes_read)
    if len(data) != size:
        raise EventShortReadError(len(data), size).within(field, bytes_read)
    return bytes(data)


def pack_uint(value: int, size: int) -> bytes:
    return struct.pack(_UINT_FORMATS[size], value)
