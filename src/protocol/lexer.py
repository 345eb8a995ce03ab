"""
Payload lexer.

Scans ``key1:value1,key2:value2,...`` payloads into key and value tokens.
There is no escaping, so a value runs up to the next ``,`` only when
another ``key:`` follows; otherwise it runs to the end of the input.
The input is assumed well-formed. Malformed input still produces tokens,
never an error.

The lexer is a small state machine: each state scans a span, emits its
token and returns the next state. Tokens are produced lazily and the
lexer can be consumed once.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Iterator, Optional, Union

from .constants import PAIR_SEPARATOR, SEPARATOR

EOF = -1


class TokenType(Enum):
    EOF = "eof"
    KEY = "key"
    VALUE = "value"


@dataclass(frozen=True)
class Token:
    typ: TokenType
    pos: int
    """Byte offset just past the token's span."""
    val: str = ""


StateFn = Callable[["PayloadLexer"], Optional["StateFn"]]


def _rune_width(lead: int) -> int:
    """Byte width of the UTF-8 sequence starting with ``lead``."""
    if lead < 0x80:
        return 1
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    # invalid lead byte, consumed on its own
    return 1


class PayloadLexer:
    """Lazy, single-use token stream over a raw payload."""

    def __init__(self, payload: Union[bytes, str]):
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        self.input = bytes(payload)
        self.start = 0
        self.pos = 0
        self.width = 0
        self._pending: Deque[Token] = deque()
        self._tokens = self._run()

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        return next(self._tokens)

    def _run(self) -> Iterator[Token]:
        state: Optional[StateFn] = lex_key
        while state is not None:
            state = state(self)
            while self._pending:
                yield self._pending.popleft()

    # -- scanning primitives -------------------------------------------------

    def is_eof(self) -> bool:
        return self.pos >= len(self.input)

    def next(self) -> Union[str, int]:
        """Consume one code point and return it, or EOF."""
        if self.is_eof():
            self.width = 0
            return EOF

        width = min(_rune_width(self.input[self.pos]), len(self.input) - self.pos)
        try:
            rune = self.input[self.pos:self.pos + width].decode("utf-8")
        except UnicodeDecodeError:
            # invalid or truncated sequence counts as one byte
            width = 1
            rune = "\ufffd"
        self.width = width
        self.pos += width
        return rune

    def backup(self) -> None:
        self.pos -= self.width

    def ignore(self) -> None:
        self.start = self.pos

    def skip(self, sep: str) -> None:
        self.pos = min(self.pos + len(sep.encode("utf-8")), len(self.input))
        self.ignore()

    def accept_until(self, chars: str) -> None:
        r = self.next()
        while r != EOF and r not in chars:
            r = self.next()
        self.backup()

    def accept_until_eof(self) -> None:
        while self.next() != EOF:
            pass

    def index(self, sep: str) -> int:
        return self.input.find(sep.encode("utf-8"), self.pos)

    def first(self, *seps: str) -> str:
        """Return whichever of ``seps`` occurs first from the current position."""
        first_index = -1
        first_sep = ""
        for sep in seps:
            i = self.index(sep)
            if i >= 0 and (first_index < 0 or i < first_index):
                first_index = i
                first_sep = sep
        return first_sep

    def emit(self, typ: TokenType) -> None:
        val = self.input[self.start:self.pos].decode("utf-8", errors="replace")
        self._pending.append(Token(typ=typ, pos=self.pos, val=val))
        self.start = self.pos


# -- states -------------------------------------------------------------------

def lex_key(lx: PayloadLexer) -> Optional[StateFn]:
    if lx.is_eof():
        lx.emit(TokenType.EOF)
        return None
    lx.accept_until(SEPARATOR)
    lx.emit(TokenType.KEY)
    return lex_separator


def lex_separator(lx: PayloadLexer) -> Optional[StateFn]:
    lx.skip(SEPARATOR)
    return lex_value


def lex_pair_separator(lx: PayloadLexer) -> Optional[StateFn]:
    lx.skip(PAIR_SEPARATOR)
    return lex_key


def lex_value(lx: PayloadLexer) -> Optional[StateFn]:
    # Another key:value pair follows only if a ':' remains and the nearest
    # separator is ','.
    if lx.index(SEPARATOR) >= 0 and lx.first(PAIR_SEPARATOR, SEPARATOR) == PAIR_SEPARATOR:
        lx.accept_until(PAIR_SEPARATOR)
        lx.emit(TokenType.VALUE)
        return lex_pair_separator

    lx.accept_until_eof()
    lx.emit(TokenType.VALUE)
    lx.emit(TokenType.EOF)
    return None


def lex(payload: Union[bytes, str]) -> PayloadLexer:
    return PayloadLexer(payload)
