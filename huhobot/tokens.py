"""Token kinds and input positions used by the JSON lexer."""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = ["TokenType", "Position", "token_type_name"]


class TokenType(enum.Enum):
    """Token types produced by the lexer for the parser."""

    UNINITIALIZED = enum.auto()
    LITERAL_TRUE = enum.auto()
    LITERAL_FALSE = enum.auto()
    LITERAL_NULL = enum.auto()
    VALUE_STRING = enum.auto()
    VALUE_UNSIGNED = enum.auto()
    VALUE_INTEGER = enum.auto()
    VALUE_FLOAT = enum.auto()
    BEGIN_ARRAY = enum.auto()
    BEGIN_OBJECT = enum.auto()
    END_ARRAY = enum.auto()
    END_OBJECT = enum.auto()
    NAME_SEPARATOR = enum.auto()
    VALUE_SEPARATOR = enum.auto()
    PARSE_ERROR = enum.auto()
    END_OF_INPUT = enum.auto()
    LITERAL_OR_VALUE = enum.auto()


@dataclass
class Position:
    """Where the lexer stands in its input."""

    chars_read_total: int = 0
    chars_read_current_line: int = 0
    lines_read: int = 0


_NAMES = {
    TokenType.UNINITIALIZED: "<uninitialized>",
    TokenType.LITERAL_TRUE: "true literal",
    TokenType.LITERAL_FALSE: "false literal",
    TokenType.LITERAL_NULL: "null literal",
    TokenType.VALUE_STRING: "string literal",
    TokenType.VALUE_UNSIGNED: "number literal",
    TokenType.VALUE_INTEGER: "number literal",
    TokenType.VALUE_FLOAT: "number literal",
    TokenType.BEGIN_ARRAY: "'['",
    TokenType.BEGIN_OBJECT: "'{'",
    TokenType.END_ARRAY: "']'",
    TokenType.END_OBJECT: "'}'",
    TokenType.NAME_SEPARATOR: "':'",
    TokenType.VALUE_SEPARATOR: "','",
    TokenType.PARSE_ERROR: "<parse error>",
    TokenType.END_OF_INPUT: "end of input",
    TokenType.LITERAL_OR_VALUE: "'[', '{', or a literal",
}


def token_type_name(token: object) -> str:
    """Return the human-readable name of a token type, for error messages."""
    if isinstance(token, TokenType):
        return _NAMES.get(token, "unknown token")
    return "unknown token"