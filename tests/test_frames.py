import pytest

from huhobot.frames import (
    DEFAULT_MASK_KEY,
    FrameInfo,
    Opcode,
    apply_mask,
    encode_control_frame,
    encode_frame,
    parse_frame_header,
)


def test_control_frame_wire_bytes():
    assert encode_control_frame(Opcode.PING) == bytes((0x89, 0x80, 0, 0, 0, 0))


def test_control_frame_close_opcode():
    frame = encode_control_frame(Opcode.CLOSE)
    assert frame[0] == 0x80 | Opcode.CLOSE
    assert len(frame) == 6


def test_short_frame_header():
    frame = encode_frame(Opcode.TEXT, b"Hi")
    assert frame[:2] == bytes((0x80 | Opcode.TEXT, 0x80 | 2))
    assert frame[2:6] == DEFAULT_MASK_KEY
    assert apply_mask(frame[6:], DEFAULT_MASK_KEY) == b"Hi"


def test_medium_frame_uses_16_bit_length():
    payload = b"x" * 126
    frame = encode_frame(Opcode.BINARY, payload)
    assert frame[1] == 0xFE
    assert int.from_bytes(frame[2:4], "big") == len(payload)
    assert len(frame) == 4 + 4 + len(payload)


def test_large_frame_uses_64_bit_length():
    payload = bytes(70000)
    frame = encode_frame(Opcode.BINARY, payload)
    assert frame[1] == 0xFF
    assert int.from_bytes(frame[2:10], "big") == len(payload)
    assert apply_mask(frame[14:], DEFAULT_MASK_KEY) == payload


@pytest.mark.parametrize("payload", [b"", b"a", b"hello world", bytes(range(256))])
def test_apply_mask_round_trip(payload):
    key = bytes((1, 2, 3, 4))
    assert apply_mask(apply_mask(payload, key), key) == payload


def test_apply_mask_rejects_bad_key():
    with pytest.raises(ValueError):
        apply_mask(b"abc", b"\x01\x02")


@pytest.mark.parametrize("size", [0, 5, 125, 126, 65535, 65536])
def test_parse_round_trip(size):
    payload = bytes(i % 251 for i in range(size))
    frame = encode_frame(Opcode.TEXT, payload)
    info = parse_frame_header(frame)
    assert info is not None
    assert info.fin and info.mask
    assert info.opcode == Opcode.TEXT
    assert info.payload_length == size
    assert info.mask_key == DEFAULT_MASK_KEY
    assert info.frame_length == len(frame)
    body = frame[info.header_length:info.frame_length]
    assert apply_mask(body, info.mask_key) == payload


def test_parse_unmasked_server_frame():
    info = parse_frame_header(b"\x81\x05hello")
    assert info == FrameInfo(fin=True, mask=False, opcode=Opcode.TEXT,
                             payload_length=5, header_length=2)


@pytest.mark.parametrize("data", [b"", b"\x81", b"\x81\x7e\x00", b"\x82\x7f\x00\x00", b"\x81\x85\xd2"])
def test_parse_incomplete_header(data):
    assert parse_frame_header(data) is None


def test_parse_non_final_frame():
    info = parse_frame_header(bytes((Opcode.BINARY, 0x00)))
    assert info is not None
    assert info.fin is False
    assert info.opcode == Opcode.BINARY