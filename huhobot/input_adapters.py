"""Character sources that feed the JSON lexer one code unit at a time.

Every adapter exposes ``get_character()``, which returns the next byte as an
``int`` or :data:`EOF` once the input is exhausted.  Wide inputs (UTF-16 code
units or UTF-32 code points) are transcoded to UTF-8 bytes on the fly.
"""

from __future__ import annotations

import enum
import io
from collections import deque
from functools import partial
from typing import Any, Iterable

__all__ = [
    "EOF",
    "InputFormat",
    "FileInputAdapter",
    "IteratorInputAdapter",
    "WideStringInputAdapter",
    "utf32_to_utf8",
    "utf16_to_utf8",
    "input_adapter",
]

EOF = -1
"""Value returned by ``get_character`` once the input is exhausted."""

_END = object()
_NOT_PEEKED = object()


class InputFormat(enum.Enum):
    """The supported input formats."""

    JSON = "json"
    CBOR = "cbor"
    MSGPACK = "msgpack"
    UBJSON = "ubjson"
    BSON = "bson"
    BJDATA = "bjdata"


def _ordinal(item: Any) -> int:
    if isinstance(item, str):
        if len(item) != 1:
            raise TypeError(f"expected a single character, got {item!r}")
        return ord(item)
    if isinstance(item, int):
        return item
    raise TypeError(f"cannot read a character from {type(item).__name__}")


class FileInputAdapter:
    """Reads one character at a time from a file object, without buffering."""

    def __init__(self, file: Any) -> None:
        if file is None:
            raise ValueError("file must not be None")
        self._file = file

    def get_character(self) -> int:
        """Return the next character, or EOF at end of file."""
        chunk = self._file.read(1)
        if not chunk:
            return EOF
        if isinstance(chunk, str):
            return ord(chunk)
        return chunk[0]


class IteratorInputAdapter:
    """Reads characters from any iterable of ints or one-character strings."""

    def __init__(self, iterable: Iterable[Any]) -> None:
        self._iterator = iter(iterable)
        self._pending: Any = _NOT_PEEKED

    def _peek(self) -> Any:
        if self._pending is _NOT_PEEKED:
            self._pending = next(self._iterator, _END)
        return self._pending

    def empty(self) -> bool:
        """Return True when no characters remain."""
        return self._peek() is _END

    def get_character(self) -> int:
        """Return the next character, or EOF when the iterable is exhausted."""
        item = self._peek()
        if item is _END:
            return EOF
        self._pending = _NOT_PEEKED
        return _ordinal(item)


def utf32_to_utf8(input: IteratorInputAdapter) -> tuple[int, ...]:
    """Read one UTF-32 code point from ``input`` and return its UTF-8 bytes."""
    if input.empty():
        return (EOF,)
    wc = input.get_character()
    if wc < 0x80:
        return (wc,)
    if wc <= 0x7FF:
        return (0xC0 | ((wc >> 6) & 0x1F), 0x80 | (wc & 0x3F))
    if wc <= 0xFFFF:
        return (
            0xE0 | ((wc >> 12) & 0x0F),
            0x80 | ((wc >> 6) & 0x3F),
            0x80 | (wc & 0x3F),
        )
    if wc <= 0x10FFFF:
        return (
            0xF0 | ((wc >> 18) & 0x07),
            0x80 | ((wc >> 12) & 0x3F),
            0x80 | ((wc >> 6) & 0x3F),
            0x80 | (wc & 0x3F),
        )
    # unknown character: passed through unchanged
    return (wc,)


def utf16_to_utf8(input: IteratorInputAdapter) -> tuple[int, ...]:
    """Read one UTF-16 character (one or two code units) and return its UTF-8 bytes."""
    if input.empty():
        return (EOF,)
    wc = input.get_character()
    if wc < 0x80:
        return (wc,)
    if wc <= 0x7FF:
        return (0xC0 | (wc >> 6), 0x80 | (wc & 0x3F))
    if not 0xD800 <= wc < 0xE000:
        return (0xE0 | (wc >> 12), 0x80 | ((wc >> 6) & 0x3F), 0x80 | (wc & 0x3F))
    if input.empty():
        return (wc,)
    wc2 = input.get_character()
    charcode = 0x10000 + (((wc & 0x3FF) << 10) | (wc2 & 0x3FF))
    return (
        0xF0 | (charcode >> 18),
        0x80 | ((charcode >> 12) & 0x3F),
        0x80 | ((charcode >> 6) & 0x3F),
        0x80 | (charcode & 0x3F),
    )


class WideStringInputAdapter:
    """Turns a source of wide characters into a stream of UTF-8 bytes.

    ``char_size`` is 2 for UTF-16 code units and 4 for UTF-32 code points.
    """

    def __init__(self, base: IteratorInputAdapter, char_size: int = 4) -> None:
        if char_size == 4:
            self._fill = utf32_to_utf8
        elif char_size == 2:
            self._fill = utf16_to_utf8
        else:
            raise ValueError(f"unsupported wide character size: {char_size}")
        self._base = base
        self._buffer: deque[int] = deque()

    def get_character(self) -> int:
        """Return the next UTF-8 byte, or EOF when the input is exhausted."""
        if not self._buffer:
            self._buffer.extend(self._fill(self._base))
        return self._buffer.popleft()


def input_adapter(source: Any) -> Any:
    """Choose the adapter that fits ``source``.

    Bytes-like objects are read byte by byte, ``str`` and text files are
    transcoded from code points to UTF-8, binary files are read one byte at a
    time, and any other iterable is read item by item.
    """
    if isinstance(source, (FileInputAdapter, IteratorInputAdapter, WideStringInputAdapter)):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return IteratorInputAdapter(bytes(source))
    if isinstance(source, str):
        return WideStringInputAdapter(IteratorInputAdapter(source), 4)
    if isinstance(source, io.TextIOBase):
        chars = iter(partial(source.read, 1), "")
        return WideStringInputAdapter(IteratorInputAdapter(chars), 4)
    if hasattr(source, "read"):
        return FileInputAdapter(source)
    try:
        return IteratorInputAdapter(source)
    except TypeError:
        raise TypeError(f"cannot read JSON input from {type(source).__name__}") from None