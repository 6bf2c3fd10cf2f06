"""Lexical analysis of JSON text.

:class:`Lexer` turns an input (bytes, text, a file or any iterable of
characters) into a sequence of :class:`~huhobot.tokens.TokenType` values.
Malformed input raises :class:`~huhobot.scanners.ScanError`.
"""

from __future__ import annotations

from typing import Any, Iterator

from huhobot.input_adapters import EOF
from huhobot.scanners import (
    CharReader,
    ScanError,
    scan_comment,
    scan_literal,
    scan_number,
    scan_string,
)
from huhobot.tokens import Position, TokenType

__all__ = ["Lexer", "tokenize"]

_WHITESPACE = frozenset(map(ord, " \t\n\r"))

_STRUCTURAL = {
    ord("["): TokenType.BEGIN_ARRAY,
    ord("]"): TokenType.END_ARRAY,
    ord("{"): TokenType.BEGIN_OBJECT,
    ord("}"): TokenType.END_OBJECT,
    ord(":"): TokenType.NAME_SEPARATOR,
    ord(","): TokenType.VALUE_SEPARATOR,
}

_LITERALS = {
    ord("t"): ("true", TokenType.LITERAL_TRUE),
    ord("f"): ("false", TokenType.LITERAL_FALSE),
    ord("n"): ("null", TokenType.LITERAL_NULL),
}

_NUMBER_STARTS = frozenset(map(ord, "-0123456789"))

_LITERAL_VALUES = {
    TokenType.LITERAL_TRUE: True,
    TokenType.LITERAL_FALSE: False,
    TokenType.LITERAL_NULL: None,
}


class Lexer:
    """Splits JSON input into tokens, one per call to :meth:`scan`."""

    def __init__(self, source: Any, ignore_comments: bool = False) -> None:
        self._reader = CharReader(source)
        self.ignore_comments = ignore_comments
        self._string = ""
        self.value: int | float | None = None

    @property
    def position(self) -> Position:
        """The position of the last read character."""
        return self._reader.position

    def skip_bom(self) -> bool:
        """Skip a UTF-8 byte order mark; return False if one is only partly there."""
        reader = self._reader
        if reader.get() == 0xEF:
            return reader.get() == 0xBB and reader.get() == 0xBF
        reader.unget()
        return True

    def skip_whitespace(self) -> None:
        """Read characters until one that is not JSON whitespace."""
        reader = self._reader
        while reader.get() in _WHITESPACE:
            pass

    def get_string(self) -> str:
        """Return the value of the last scanned string token."""
        return self._string

    def get_token_string(self) -> str:
        """Return the raw text of the last token, for error messages."""
        return self._reader.token_string()

    def scan(self) -> TokenType:
        """Read the next token and return its type.

        Numbers leave their value in :attr:`value`; strings are available
        through :meth:`get_string`.
        """
        reader = self._reader
        if reader.position.chars_read_total == 0 and not self.skip_bom():
            raise ScanError("invalid BOM; must be 0xEF 0xBB 0xBF if given")

        self.skip_whitespace()
        while self.ignore_comments and reader.current == ord("/"):
            scan_comment(reader)
            self.skip_whitespace()

        current = reader.current
        if current in _STRUCTURAL:
            return _STRUCTURAL[current]
        if current in _LITERALS:
            literal, token = _LITERALS[current]
            return scan_literal(reader, literal, token)
        if current == ord('"'):
            self._string = scan_string(reader)
            return TokenType.VALUE_STRING
        if current in _NUMBER_STARTS:
            token, self.value = scan_number(reader)
            return token
        if current in (0, EOF):
            return TokenType.END_OF_INPUT
        raise ScanError("invalid literal")


def tokenize(source: Any, ignore_comments: bool = False) -> Iterator[tuple[TokenType, Any]]:
    """Yield ``(token_type, value)`` pairs for every token in ``source``.

    The value is the string or number for value tokens, ``True``, ``False``
    or ``None`` for literals, and ``None`` for structural characters.
    Iteration stops at the end of the input.
    """
    lexer = Lexer(source, ignore_comments)
    while True:
        token = lexer.scan()
        if token is TokenType.END_OF_INPUT:
            return
        if token is TokenType.VALUE_STRING:
            yield token, lexer.get_string()
        elif token in (TokenType.VALUE_UNSIGNED, TokenType.VALUE_INTEGER, TokenType.VALUE_FLOAT):
            yield token, lexer.value
        else:
            yield token, _LITERAL_VALUES.get(token)