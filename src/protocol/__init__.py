"""
Event server protocol: frame codec, UUIDs and payload lexing.
"""

from .constants import Protocol
from .event import Event
from .event_uuid import EventUUID
from .exceptions import (
    EventError,
    EventFormatError,
    EventEOFError,
    EventUnexpectedEOFError,
    EventShortReadError,
)
from .lexer import PayloadLexer, Token, TokenType, lex
from .payload import parse_payload

__all__ = [
    'Protocol',
    'Event',
    'EventUUID',
    'EventError',
    'EventFormatError',
    'EventEOFError',
    'EventUnexpectedEOFError',
    'EventShortReadError',
    'PayloadLexer',
    'Token',
    'TokenType',
    'lex',
    'parse_payload',
]
