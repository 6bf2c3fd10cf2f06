"""Scanners for the individual JSON token kinds.

A :class:`CharReader` pulls characters from an input adapter and records what
it read.  The ``scan_*`` functions are called once the reader's current
character has shown which kind of token starts.  They raise
:class:`ScanError` on malformed input.
"""

from __future__ import annotations

from typing import Any

from huhobot.input_adapters import EOF, input_adapter
from huhobot.tokens import Position, TokenType

__all__ = [
    "ScanError",
    "CharReader",
    "scan_string",
    "scan_number",
    "scan_literal",
    "scan_comment",
]

_UINT64_MAX = 2**64 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_SLASH = ord("/")
_STAR = ord("*")
_MINUS = ord("-")
_PLUS = ord("+")
_DOT = ord(".")
_ZERO = ord("0")
_NINE = ord("9")
_NEWLINE = ord("\n")
_RETURN = ord("\r")

_SIMPLE_ESCAPES = {
    _QUOTE: _QUOTE,
    _BACKSLASH: _BACKSLASH,
    _SLASH: _SLASH,
    ord("b"): 0x08,
    ord("f"): 0x0C,
    ord("n"): 0x0A,
    ord("r"): 0x0D,
    ord("t"): 0x09,
}

_CONTROL_NAMES = (
    "NUL", "SOH", "STX", "ETX", "EOT", "ENQ", "ACK", "BEL",
    "BS", "HT", "LF", "VT", "FF", "CR", "SO", "SI",
    "DLE", "DC1", "DC2", "DC3", "DC4", "NAK", "SYN", "ETB",
    "CAN", "EM", "SUB", "ESC", "FS", "GS", "RS", "US",
)
_CONTROL_SHORT_ESCAPES = {0x08: "b", 0x09: "t", 0x0A: "n", 0x0C: "f", 0x0D: "r"}


def _control_message(code: int) -> str:
    message = (
        f"invalid string: control character U+{code:04X} ({_CONTROL_NAMES[code]}) "
        f"must be escaped to \\u{code:04X}"
    )
    short = _CONTROL_SHORT_ESCAPES.get(code)
    if short is not None:
        message += f" or \\{short}"
    return message


# Follow-up byte ranges for each valid UTF-8 lead byte (RFC 3629).
_UTF8_RANGES: dict[int, tuple[tuple[int, int], ...]] = {}
for _lead in range(0xC2, 0xE0):
    _UTF8_RANGES[_lead] = ((0x80, 0xBF),)
_UTF8_RANGES[0xE0] = ((0xA0, 0xBF), (0x80, 0xBF))
for _lead in (*range(0xE1, 0xED), 0xEE, 0xEF):
    _UTF8_RANGES[_lead] = ((0x80, 0xBF), (0x80, 0xBF))
_UTF8_RANGES[0xED] = ((0x80, 0x9F), (0x80, 0xBF))
_UTF8_RANGES[0xF0] = ((0x90, 0xBF), (0x80, 0xBF), (0x80, 0xBF))
for _lead in (0xF1, 0xF2, 0xF3):
    _UTF8_RANGES[_lead] = ((0x80, 0xBF), (0x80, 0xBF), (0x80, 0xBF))
_UTF8_RANGES[0xF4] = ((0x80, 0x8F), (0x80, 0xBF), (0x80, 0xBF))

_HEX_DIGITS = {ord(c): int(c, 16) for c in "0123456789abcdefABCDEF"}

_MISSING_HEX = "invalid string: '\\u' must be followed by 4 hex digits"
_BAD_LOW_SURROGATE = (
    "invalid string: surrogate U+D800..U+DBFF must be followed by U+DC00..U+DFFF"
)
_LONE_LOW_SURROGATE = "invalid string: surrogate U+DC00..U+DFFF must follow U+D800..U+DBFF"


class ScanError(ValueError):
    """Raised when the input does not form a valid token."""


def _is_digit(c: int) -> bool:
    return _ZERO <= c <= _NINE


class CharReader:
    """Reads characters from an input and keeps track of position and token text."""

    def __init__(self, source: Any) -> None:
        self._input = input_adapter(source)
        self.current: int = EOF
        self.position = Position()
        self.buffer = bytearray()
        self._next_unget = False
        self._token: list[int] = []

    def get(self) -> int:
        """Read the next character (or re-read an ungotten one) and return it."""
        self.position.chars_read_total += 1
        self.position.chars_read_current_line += 1
        if self._next_unget:
            self._next_unget = False
        else:
            self.current = self._input.get_character()
        if self.current != EOF:
            self._token.append(self.current)
        if self.current == _NEWLINE:
            self.position.lines_read += 1
            self.position.chars_read_current_line = 0
        return self.current

    def unget(self) -> None:
        """Step back one character; the next ``get`` returns it again."""
        self._next_unget = True
        self.position.chars_read_total -= 1
        if self.position.chars_read_current_line == 0:
            if self.position.lines_read > 0:
                self.position.lines_read -= 1
        else:
            self.position.chars_read_current_line -= 1
        if self.current != EOF and self._token:
            self._token.pop()

    def reset(self) -> None:
        """Start a new token at the current character."""
        self.buffer.clear()
        self._token.clear()
        if self.current != EOF:
            self._token.append(self.current)

    def token_string(self) -> str:
        """Return the raw text of the last token, with control characters escaped."""
        out = bytearray()
        for c in self._token:
            byte = c & 0xFF
            if byte <= 0x1F:
                out += f"<U+{byte:04X}>".encode("ascii")
            else:
                out.append(byte)
        return out.decode("utf-8", errors="replace")

    def _add(self, c: int) -> None:
        self.buffer.append(c & 0xFF)


def _next_bytes_in_range(reader: CharReader, ranges: tuple[tuple[int, int], ...]) -> None:
    reader._add(reader.current)
    for low, high in ranges:
        c = reader.get()
        if not low <= c <= high:
            raise ScanError("invalid string: ill-formed UTF-8 byte")
        reader._add(c)


def _get_codepoint(reader: CharReader) -> int:
    """Read four hex digits after ``\\u``; return -1 if they are not there."""
    codepoint = 0
    for factor in (12, 8, 4, 0):
        digit = _HEX_DIGITS.get(reader.get())
        if digit is None:
            return -1
        codepoint += digit << factor
    return codepoint


def _scan_unicode_escape(reader: CharReader) -> None:
    codepoint1 = _get_codepoint(reader)
    if codepoint1 == -1:
        raise ScanError(_MISSING_HEX)
    codepoint = codepoint1
    if 0xD800 <= codepoint1 <= 0xDBFF:
        if not (reader.get() == _BACKSLASH and reader.get() == ord("u")):
            raise ScanError(_BAD_LOW_SURROGATE)
        codepoint2 = _get_codepoint(reader)
        if codepoint2 == -1:
            raise ScanError(_MISSING_HEX)
        if not 0xDC00 <= codepoint2 <= 0xDFFF:
            raise ScanError(_BAD_LOW_SURROGATE)
        codepoint = ((codepoint1 - 0xD800) << 10) + (codepoint2 - 0xDC00) + 0x10000
    elif 0xDC00 <= codepoint1 <= 0xDFFF:
        raise ScanError(_LONE_LOW_SURROGATE)
    reader.buffer += chr(codepoint).encode("utf-8")


def scan_string(reader: CharReader) -> str:
    """Scan a string literal whose opening quote is the current character."""
    reader.reset()
    if reader.current != _QUOTE:
        raise ScanError("invalid string: expected opening quote")
    while True:
        c = reader.get()
        if c == EOF:
            raise ScanError("invalid string: missing closing quote")
        if c == _QUOTE:
            return reader.buffer.decode("utf-8")
        if c == _BACKSLASH:
            escaped = reader.get()
            if escaped in _SIMPLE_ESCAPES:
                reader._add(_SIMPLE_ESCAPES[escaped])
            elif escaped == ord("u"):
                _scan_unicode_escape(reader)
            else:
                raise ScanError("invalid string: forbidden character after backslash")
        elif 0x00 <= c <= 0x1F:
            raise ScanError(_control_message(c))
        elif 0x20 <= c <= 0x7F:
            reader._add(c)
        elif c in _UTF8_RANGES:
            _next_bytes_in_range(reader, _UTF8_RANGES[c])
        else:
            raise ScanError("invalid string: ill-formed UTF-8 byte")


def scan_number(reader: CharReader) -> tuple[TokenType, int | float]:
    """Scan a number literal starting at the current character.

    Returns the token type (unsigned, integer or float) and the value.
    Integers that do not fit in 64 bits are returned as floats.
    """
    reader.reset()
    number_type = TokenType.VALUE_UNSIGNED
    c = reader.current
    if c == _MINUS:
        state = "minus"
    elif c == _ZERO:
        state = "zero"
    elif _is_digit(c):
        state = "any1"
    else:
        raise ScanError("invalid number; expected '-' or digit")
    reader._add(c)

    while state != "done":
        if state == "minus":
            number_type = TokenType.VALUE_INTEGER
            c = reader.get()
            if c == _ZERO:
                state = "zero"
            elif _is_digit(c):
                state = "any1"
            else:
                raise ScanError("invalid number; expected digit after '-'")
            reader._add(c)
        elif state in ("zero", "any1"):
            c = reader.get()
            if state == "any1" and _is_digit(c):
                reader._add(c)
            elif c == _DOT:
                reader._add(c)
                state = "decimal1"
            elif c in (ord("e"), ord("E")):
                reader._add(c)
                state = "exponent"
            else:
                state = "done"
        elif state == "decimal1":
            number_type = TokenType.VALUE_FLOAT
            c = reader.get()
            if not _is_digit(c):
                raise ScanError("invalid number; expected digit after '.'")
            reader._add(c)
            state = "decimal2"
        elif state == "decimal2":
            c = reader.get()
            if _is_digit(c):
                reader._add(c)
            elif c in (ord("e"), ord("E")):
                reader._add(c)
                state = "exponent"
            else:
                state = "done"
        elif state == "exponent":
            number_type = TokenType.VALUE_FLOAT
            c = reader.get()
            if c in (_PLUS, _MINUS):
                state = "sign"
            elif _is_digit(c):
                state = "any2"
            else:
                raise ScanError("invalid number; expected '+', '-', or digit after exponent")
            reader._add(c)
        elif state == "sign":
            c = reader.get()
            if not _is_digit(c):
                raise ScanError("invalid number; expected digit after exponent sign")
            reader._add(c)
            state = "any2"
        else:  # any2
            c = reader.get()
            if _is_digit(c):
                reader._add(c)
            else:
                state = "done"

    # the character after the number is read again by the next scan
    reader.unget()

    text = reader.buffer.decode("ascii")
    if number_type is TokenType.VALUE_UNSIGNED:
        value = int(text)
        if value <= _UINT64_MAX:
            return TokenType.VALUE_UNSIGNED, value
    elif number_type is TokenType.VALUE_INTEGER:
        value = int(text)
        if _INT64_MIN <= value <= _INT64_MAX:
            return TokenType.VALUE_INTEGER, value
    return TokenType.VALUE_FLOAT, float(text)


def scan_literal(reader: CharReader, literal: str, token: TokenType) -> TokenType:
    """Check that the input spells ``literal`` from the current character on."""
    expected = literal.encode("utf-8")
    if not expected or (reader.current & 0xFF) != expected[0]:
        raise ScanError("invalid literal")
    for byte in expected[1:]:
        if (reader.get() & 0xFF) != byte or reader.current == EOF:
            raise ScanError("invalid literal")
    return token


def scan_comment(reader: CharReader) -> None:
    """Skip a ``//`` or ``/* */`` comment; the current character is the first '/'."""
    c = reader.get()
    if c == _SLASH:
        while reader.get() not in (_NEWLINE, _RETURN, EOF, 0):
            pass
        return
    if c == _STAR:
        while True:
            c = reader.get()
            if c in (EOF, 0):
                raise ScanError("invalid comment; missing closing '*/'")
            if c == _STAR:
                if reader.get() == _SLASH:
                    return
                reader.unget()
    raise ScanError("invalid comment; expecting '/' or '*' after '/'")