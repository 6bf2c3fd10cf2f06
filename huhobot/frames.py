"""Encoding and decoding of WebSocket frames.

Frames sent by the client are always masked and never fragmented.  Incoming
frame headers are parsed with :func:`parse_frame_header`, which returns
``None`` while the header is still incomplete.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = [
    "Opcode",
    "FrameInfo",
    "FrameTooLargeError",
    "DEFAULT_MASK_KEY",
    "encode_control_frame",
    "encode_frame",
    "parse_frame_header",
    "apply_mask",
]

DEFAULT_MASK_KEY = bytes((0xD2, 0x28, 0xB6, 0xDE))
"""Mask key used for every client frame that carries a payload."""

_UINT16_MAX = 0xFFFF
_UINT64_MAX = 2**64 - 1


class Opcode(enum.IntEnum):
    """Frame opcodes."""

    CONTINUATION = 0x00
    TEXT = 0x01
    BINARY = 0x02
    CLOSE = 0x08
    PING = 0x09
    PONG = 0x0A


class FrameTooLargeError(ValueError):
    """Raised when a payload does not fit in a single frame."""


@dataclass(frozen=True)
class FrameInfo:
    """The decoded header of one frame."""

    fin: bool
    mask: bool
    opcode: int
    payload_length: int
    header_length: int
    mask_key: bytes = b""

    @property
    def frame_length(self) -> int:
        """Total number of bytes of the frame, header included."""
        return self.header_length + self.payload_length


def apply_mask(payload: bytes, mask_key: bytes) -> bytes:
    """XOR ``payload`` with the repeated four-byte ``mask_key``.

    Applying the same key twice gives back the original payload.
    """
    if len(mask_key) != 4:
        raise ValueError("mask key must be exactly 4 bytes")
    payload = bytes(payload)
    size = len(payload)
    if not size:
        return b""
    key = (bytes(mask_key) * (size // 4 + 1))[:size]
    masked = int.from_bytes(payload, "big") ^ int.from_bytes(key, "big")
    return masked.to_bytes(size, "big")


def encode_control_frame(opcode: int) -> bytes:
    """Encode a final, masked frame with an empty payload and a zero mask key."""
    return bytes((0x80 | int(opcode), 0x80, 0x00, 0x00, 0x00, 0x00))


def encode_frame(opcode: int, payload: bytes, mask_key: bytes = DEFAULT_MASK_KEY) -> bytes:
    """Encode ``payload`` as one final, masked frame."""
    payload = bytes(payload)
    length = len(payload)
    header = bytearray((0x80 | int(opcode),))
    if length <= 125:
        header.append(0x80 | length)
    elif length <= _UINT16_MAX:
        header.append(0xFE)
        header += length.to_bytes(2, "big")
    elif length <= _UINT64_MAX:
        header.append(0xFF)
        header += length.to_bytes(8, "big")
    else:
        raise FrameTooLargeError("Data is too large. Does not support fragmentation.")
    header += mask_key
    return bytes(header) + apply_mask(payload, mask_key)


def parse_frame_header(data: bytes) -> FrameInfo | None:
    """Decode the frame header at the start of ``data``.

    Returns ``None`` if ``data`` does not yet hold the whole header.
    """
    if len(data) < 2:
        return None
    first, second = data[0], data[1]
    length = second & 0x7F
    offset = 2
    if length == 126:
        if len(data) < 4:
            return None
        length = int.from_bytes(data[2:4], "big")
        offset = 4
    elif length == 127:
        if len(data) < 10:
            return None
        length = int.from_bytes(data[2:10], "big")
        offset = 10
    mask = (second & 0x80) == 0x80
    mask_key = b""
    if mask:
        if len(data) < offset + 4:
            return None
        mask_key = bytes(data[offset:offset + 4])
        offset += 4
    return FrameInfo(
        fin=(first & 0x80) == 0x80,
        mask=mask,
        opcode=first & 0x0F,
        payload_length=length,
        header_length=offset,
        mask_key=mask_key,
    )