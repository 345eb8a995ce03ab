# Custom exceptions

"""
Custom exceptions for event frame decoding.
"""
from __future__ import annotations

import copy


class EventError(Exception):
    """Base exception for all event-related errors."""
    pass


class EventFormatError(EventError):
    """
    Raised when an event frame cannot be decoded.

    The message is the chain of fields being read when the failure
    happened, e.g. ``reading UUID: reading node: read 2 of 6 bytes``.
    ``bytes_read`` is the number of bytes consumed before the failing field.
    """

    def __init__(self, reason: str, bytes_read: int = 0):
        super().__init__(reason)
        self.reason = reason
        self.bytes_read = bytes_read

    def within(self, field: str, bytes_read: int) -> "EventFormatError":
        """Return a copy of this error labelled with the enclosing field."""
        err = copy.copy(self)
        err.reason = f"reading {field}: {self.reason}"
        err.args = (err.reason,)
        err.bytes_read = bytes_read
        return err


class EventEOFError(EventFormatError):
    """Raised when a field starts at the very end of the input."""

    def __init__(self, reason: str = "EOF", bytes_read: int = 0):
        super().__init__(reason, bytes_read)


class EventUnexpectedEOFError(EventFormatError):
    """Raised when the input ends in the middle of a fixed-width field."""

    def __init__(self, reason: str = "unexpected EOF", bytes_read: int = 0):
        super().__init__(reason, bytes_read)


class EventShortReadError(EventFormatError):
    """Raised when a variable-length read returns fewer bytes than requested."""

    def __init__(self, got: int, expected: int, bytes_read: int = 0):
        super().__init__(f"read {got} of {expected} bytes", bytes_read)
        self.got = got
        self.expected = expected
