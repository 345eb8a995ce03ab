"""
test_lexer.py - Unit tests for the payload lexer.
"""
import pytest

from protocol.lexer import PayloadLexer, Token, TokenType, lex
from protocol.payload import parse_payload


def tokens_of(payload):
    return list(lex(payload))


def test_username_and_password_tokens():
    assert tokens_of("username:alexander,password:Scribeapple") == [
        Token(TokenType.KEY, 8, "username"),
        Token(TokenType.VALUE, 18, "alexander"),
        Token(TokenType.KEY, 27, "password"),
        Token(TokenType.VALUE, 39, "Scribeapple"),
        Token(TokenType.EOF, 39),
    ]


def test_single_pair():
    assert tokens_of("email:liamwilson186@example.net") == [
        Token(TokenType.KEY, 5, "email"),
        Token(TokenType.VALUE, 31, "liamwilson186@example.net"),
        Token(TokenType.EOF, 31),
    ]


def test_value_with_comma_and_no_following_pair_runs_to_end():
    ua = ("Mozilla/5.0 (Macintosh; Intel Mac OS X 10_12_1) AppleWebKit/602.2.14 "
          "(KHTML, like Gecko) Version/10.0.1 Safari/602.2.14")
    assert tokens_of("user-agent:" + ua) == [
        Token(TokenType.KEY, 10, "user-agent"),
        Token(TokenType.VALUE, 130, ua),
        Token(TokenType.EOF, 130),
    ]


def test_value_with_comma_before_another_pair_is_split():
    # no escaping: the first ',' ends the value when a later ':' exists
    assert [(t.typ, t.val) for t in lex("user-agent:KHTML, like Gecko,email:a@b.c")] == [
        (TokenType.KEY, "user-agent"),
        (TokenType.VALUE, "KHTML"),
        (TokenType.KEY, " like Gecko,email"),
        (TokenType.VALUE, "a@b.c"),
        (TokenType.EOF, ""),
    ]


def test_colon_in_value_keeps_rest_of_input():
    assert [(t.typ, t.val) for t in lex("url:http://example.com")] == [
        (TokenType.KEY, "url"),
        (TokenType.VALUE, "http://example.com"),
        (TokenType.EOF, ""),
    ]


def test_multibyte_offsets_are_byte_positions():
    payload = "name:José,city:Zürich"
    toks = tokens_of(payload.encode("utf-8"))
    raw = payload.encode("utf-8")

    assert [t.val for t in toks[:4]] == ["name", "José", "city", "Zürich"]
    for tok in toks:
        # every offset is a valid cut point
        raw[:tok.pos].decode("utf-8")
    assert toks[1].pos == len("name:José".encode("utf-8"))
    assert toks[-1].pos == len(raw)


def test_invalid_utf8_does_not_fail():
    toks = tokens_of(b"key:\xff\xfeval")
    assert toks[0].val == "key"
    assert toks[1].typ is TokenType.VALUE
    assert toks[1].pos == 9
    assert toks[-1].typ is TokenType.EOF


@pytest.mark.parametrize("payload,expected", [
    (b"a:\xc3,username:root", [(TokenType.KEY, "a", 1), (TokenType.VALUE, "\ufffd", 3),
                               (TokenType.KEY, "username", 12), (TokenType.VALUE, "root", 17)]),
    (b"\xe0:value", [(TokenType.KEY, "\ufffd", 1), (TokenType.VALUE, "value", 7)]),
    (b"key:\xf0\x9f", [(TokenType.KEY, "key", 3), (TokenType.VALUE, "\ufffd", 6)]),
])
def test_stray_lead_byte_does_not_swallow_separators(payload, expected):
    toks = tokens_of(payload)
    assert [(t.typ, t.val, t.pos) for t in toks[:-1]] == expected
    assert toks[-1] == Token(TokenType.EOF, len(payload))


def test_stray_lead_byte_keeps_tracked_keys():
    assert parse_payload(b"a:\xc3,username:root") == {"a": "\ufffd", "username": "root"}
    assert parse_payload(b"\xe0:value") == {"\ufffd": "value"}


def test_empty_payload_only_ends():
    assert tokens_of(b"") == [Token(TokenType.EOF, 0)]


@pytest.mark.parametrize("payload", ["novalue", "key:", ":value", "a:b,", ",,,", "a:b,c:"])
def test_malformed_input_terminates_with_eof(payload):
    toks = tokens_of(payload)
    assert toks[-1].typ is TokenType.EOF
    assert all(0 <= t.pos <= len(payload) for t in toks)


def test_lexer_is_single_use():
    lexer = PayloadLexer("a:b")
    assert len(list(lexer)) == 3
    assert list(lexer) == []


def test_tokens_are_lazy():
    lexer = PayloadLexer("a:1,b:2,c:3")
    assert next(lexer) == Token(TokenType.KEY, 1, "a")
    assert lexer.pos == 1
