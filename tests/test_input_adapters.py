import io

import pytest

from huhobot.input_adapters import (
    EOF,
    FileInputAdapter,
    InputFormat,
    IteratorInputAdapter,
    WideStringInputAdapter,
    input_adapter,
    utf16_to_utf8,
    utf32_to_utf8,
)


def drain(adapter):
    out = []
    while True:
        c = adapter.get_character()
        if c == EOF:
            return out
        out.append(c)


SAMPLES = ["", "abc", "{\"k\": [1, 2]}", "é", "€uro", "😀 smile", "mixé€😀x"]


@pytest.mark.parametrize("text", SAMPLES)
def test_str_is_transcoded_to_utf8(text):
    assert bytes(drain(input_adapter(text))) == text.encode("utf-8")


@pytest.mark.parametrize("text", SAMPLES)
def test_bytes_are_read_verbatim(text):
    data = text.encode("utf-8")
    assert bytes(drain(input_adapter(data))) == data


@pytest.mark.parametrize("text", SAMPLES)
def test_utf16_code_units_are_transcoded(text):
    raw = text.encode("utf-16-le")
    units = [int.from_bytes(raw[i:i + 2], "little") for i in range(0, len(raw), 2)]
    adapter = WideStringInputAdapter(IteratorInputAdapter(units), 2)
    assert bytes(drain(adapter)) == text.encode("utf-8")


@pytest.mark.parametrize("text", SAMPLES)
def test_binary_file_adapter(text):
    data = text.encode("utf-8")
    adapter = input_adapter(io.BytesIO(data))
    assert isinstance(adapter, FileInputAdapter)
    assert bytes(drain(adapter)) == data


@pytest.mark.parametrize("text", SAMPLES)
def test_text_file_is_transcoded(text):
    assert bytes(drain(input_adapter(io.StringIO(text)))) == text.encode("utf-8")


def test_eof_is_sticky():
    adapter = input_adapter(b"x")
    assert adapter.get_character() == ord("x")
    assert [adapter.get_character() for _ in range(3)] == [EOF, EOF, EOF]


def test_wide_eof_is_sticky():
    adapter = input_adapter("a")
    assert adapter.get_character() == ord("a")
    assert adapter.get_character() == EOF
    assert adapter.get_character() == EOF


def test_iterator_empty_tracks_consumption():
    adapter = IteratorInputAdapter([1, 2])
    assert adapter.empty() is False
    assert adapter.get_character() == 1
    assert adapter.empty() is False
    assert adapter.get_character() == 2
    assert adapter.empty() is True
    assert adapter.get_character() == EOF


def test_iterator_accepts_characters():
    assert drain(IteratorInputAdapter(iter("ab"))) == [ord("a"), ord("b")]


def test_utf32_helper_on_empty_input():
    assert utf32_to_utf8(IteratorInputAdapter([])) == (EOF,)
    assert utf16_to_utf8(IteratorInputAdapter([])) == (EOF,)


def test_utf32_helper_reads_one_code_point():
    base = IteratorInputAdapter([ord("€"), ord("a")])
    assert bytes(utf32_to_utf8(base)) == "€".encode("utf-8")
    assert utf32_to_utf8(base) == (ord("a"),)


def test_utf32_out_of_range_is_passed_through():
    assert utf32_to_utf8(IteratorInputAdapter([0x110000])) == (0x110000,)


def test_utf16_lone_high_surrogate_at_end_is_passed_through():
    assert utf16_to_utf8(IteratorInputAdapter([0xD800])) == (0xD800,)


def test_utf16_surrogate_pair_consumes_two_units():
    raw = "😀".encode("utf-16-le")
    units = [int.from_bytes(raw[i:i + 2], "little") for i in range(0, len(raw), 2)]
    base = IteratorInputAdapter(units + [ord("z")])
    assert bytes(utf16_to_utf8(base)) == "😀".encode("utf-8")
    assert utf16_to_utf8(base) == (ord("z"),)


def test_invalid_wide_size_rejected():
    with pytest.raises(ValueError):
        WideStringInputAdapter(IteratorInputAdapter([]), 3)


def test_unsupported_source_rejected():
    with pytest.raises(TypeError):
        input_adapter(3.5)


def test_file_adapter_rejects_none():
    with pytest.raises(ValueError):
        FileInputAdapter(None)


@pytest.mark.parametrize(
    "name, position",
    [("json", 0), ("cbor", 1), ("msgpack", 2), ("ubjson", 3), ("bson", 4), ("bjdata", 5)],
)
def test_input_format_lookup_by_value(name, position):
    fmt = InputFormat(name)
    assert fmt is list(InputFormat)[position]
    assert fmt.value == name


def test_input_format_unknown_value_rejected():
    with pytest.raises(ValueError):
        InputFormat("yaml")