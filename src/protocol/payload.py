"""Payload parser: folds lexer tokens into a key/value mapping."""
from __future__ import annotations

from typing import Dict, Union

from .lexer import TokenType, lex


def parse_payload(payload: Union[bytes, str]) -> Dict[str, str]:
    """
    Parse ``key:value[,key:value...]`` pairs.

    Duplicate keys keep the last value. Parsing never fails; malformed
    input yields whatever pairs the lexer produces.
    """
    pairs: Dict[str, str] = {}
    key = ""
    for token in lex(payload):
        if token.typ is TokenType.EOF:
            break
        if token.typ is TokenType.KEY:
            key = token.val
        elif token.typ is TokenType.VALUE:
            pairs[key] = token.val
    return pairs
