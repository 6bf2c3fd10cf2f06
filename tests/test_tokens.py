from dataclasses import replace

import pytest

from huhobot.tokens import Position, TokenType, token_type_name


@pytest.mark.parametrize(
    "token, expected",
    [
        (TokenType.UNINITIALIZED, "<uninitialized>"),
        (TokenType.LITERAL_TRUE, "true literal"),
        (TokenType.LITERAL_FALSE, "false literal"),
        (TokenType.LITERAL_NULL, "null literal"),
        (TokenType.VALUE_STRING, "string literal"),
        (TokenType.BEGIN_ARRAY, "'['"),
        (TokenType.BEGIN_OBJECT, "'{'"),
        (TokenType.END_ARRAY, "']'"),
        (TokenType.END_OBJECT, "'}'"),
        (TokenType.NAME_SEPARATOR, "':'"),
        (TokenType.VALUE_SEPARATOR, "','"),
        (TokenType.PARSE_ERROR, "<parse error>"),
        (TokenType.END_OF_INPUT, "end of input"),
        (TokenType.LITERAL_OR_VALUE, "'[', '{', or a literal"),
    ],
)
def test_token_type_name(token, expected):
    assert token_type_name(token) == expected


@pytest.mark.parametrize(
    "token",
    [TokenType.VALUE_UNSIGNED, TokenType.VALUE_INTEGER, TokenType.VALUE_FLOAT],
)
def test_all_number_types_share_a_name(token):
    assert token_type_name(token) == "number literal"


def test_every_token_type_has_a_known_name():
    names = [token_type_name(t) for t in TokenType]
    assert "unknown token" not in names
    assert all(names)


@pytest.mark.parametrize("value", [None, 42, "begin_array"])
def test_non_token_values_are_unknown(value):
    assert token_type_name(value) == "unknown token"


def test_position_starts_at_origin():
    pos = Position()
    assert (pos.chars_read_total, pos.chars_read_current_line, pos.lines_read) == (0, 0, 0)


def test_position_is_mutable_and_compares_by_value():
    pos = Position()
    pos.chars_read_total += 3
    pos.chars_read_current_line += 3
    assert pos == Position(chars_read_total=3, chars_read_current_line=3)
    moved = replace(pos, lines_read=1, chars_read_current_line=0)
    assert moved.lines_read == 1
    assert moved.chars_read_total == pos.chars_read_total
    assert moved != pos