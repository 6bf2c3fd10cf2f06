# huhobot

A library with two independent parts, using only the standard library:

- `huhobot.client` and `huhobot.frames`: a minimal WebSocket client for
  plain `ws://` connections, with frame encoding and decoding that also
  works without a socket;
- `huhobot.lexer`, `huhobot.scanners`, `huhobot.tokens` and
  `huhobot.input_adapters`: a byte-level JSON lexer that reports tokens,
  positions and precise error messages.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## WebSocket client

```python
from huhobot.client import WebSocketClient

client = WebSocketClient()
client.on_text_received(lambda ws, text: print("got", text))
client.on_error(lambda ws, message: print("error:", message))
client.on_lost_connection(lambda ws, code: print("closed with", code))

client.connect("ws://127.0.0.1:8888/")
client.send_text("hello")
client.close()
```

`connect(uri)` parses the URI and calls `connect_host(hostname, port, path)`,
which resolves the host, connects, sends the upgrade request, reads (but does
not inspect) the reply, sets `status` to `Status.OPEN` and starts a background
thread that receives frames.

Callbacks are called as `callback(client, value)`:

- `on_text_received`: a `str` for every text frame;
- `on_binary_received`: `bytes` for every binary frame;
- `on_error`: a message, for example `"Failed to parse frame."` or
  `"The opcode #0 is not supported."`;
- `on_lost_connection`: a close code, 1000 when the server sends a close
  frame, 1006 when the socket drops.

Incoming pings are answered with a pong that echoes their payload.

`send_text` and `send_binary` raise `WebSocketError` when the client is
closed; `ping`, `pong` and `close` do nothing then. `close()` sends a close
frame and sets `status` to `Status.CLOSING`; the socket is dropped once the
server's close frame arrives. `shutdown()` drops the socket at once, without a
closing handshake. The client is also a context manager whose exit calls
`shutdown()`.

`parse_ws_uri(uri)` splits a `ws://host[:port][/path]` URI into host, port
(default 80) and path (default `/`), raising `WebSocketError` if it does not
match. `build_handshake(hostname, port, path)` returns the HTTP upgrade
request as bytes.

`WebSocketClient.feed(data)` appends received bytes to the client's buffer and
dispatches every complete frame. The receive thread uses it, and you can call
it yourself to drive the client without a network. When the buffered bytes do
not yet hold a whole frame header, the error callback is told
`"Failed to parse frame."` and the bytes stay buffered for the next call.

### Frames

`huhobot.frames` works without a socket:

```python
from huhobot.frames import Opcode, apply_mask, encode_frame, parse_frame_header

frame = encode_frame(Opcode.TEXT, b"hi")
info = parse_frame_header(frame)   # FrameInfo, or None if more bytes are needed
payload = apply_mask(frame[info.header_length:info.frame_length], info.mask_key)
assert payload == b"hi"
```

- `encode_frame(opcode, payload, mask_key=DEFAULT_MASK_KEY)` builds one final,
  masked frame; a payload longer than 2**64 - 1 bytes raises
  `FrameTooLargeError`.
- `encode_control_frame(opcode)` builds a final frame with an empty payload
  and a zero mask key, such as a ping or a close.
- `parse_frame_header(data)` returns a `FrameInfo` (`fin`, `mask`, `opcode`,
  `payload_length`, `header_length`, `mask_key`, and the `frame_length`
  property), or `None` while the header is incomplete.
- `apply_mask(payload, mask_key)` XORs the payload with a four-byte key;
  applying it twice gives back the original.

## JSON lexer

```python
from huhobot.lexer import tokenize

for token, value in tokenize(b'{"a": [1, -2, 3.5, true, null]}', ignore_comments=False):
    print(token, value)
```

`tokenize(source, ignore_comments)` yields `(TokenType, value)` pairs: the
string or number for value tokens, `True`, `False` or `None` for literals,
and `None` for structural characters. It stops at the end of the input.

`Lexer(source, ignore_comments=False)` reads one token at a time:
`scan()` returns the next `TokenType`, numbers leave their value in
`value`, `get_string()` returns the last string, `get_token_string()` returns
the raw token text with control characters written as `<U+XXXX>`, and
`position` is a `Position` with `chars_read_total`,
`chars_read_current_line` and `lines_read`. A UTF-8 byte order mark at the
start is skipped; with `ignore_comments` set, `//` and `/* */` comments are
skipped. Malformed input raises `huhobot.scanners.ScanError` with a message
such as `"invalid number; expected digit after '-'"`.

Numbers come back as `TokenType.VALUE_UNSIGNED`, `VALUE_INTEGER` or
`VALUE_FLOAT`; integers that do not fit in 64 bits become floats.
`huhobot.tokens.token_type_name(token)` gives the name used in error messages,
for example `"number literal"` or `"'['"`.

`huhobot.scanners` holds the building blocks: `CharReader` and the
`scan_string`, `scan_number`, `scan_literal` and `scan_comment` functions.

`huhobot.input_adapters.input_adapter(source)` accepts bytes, a `str`, a text
or binary file, or an iterable of code units, and returns an object whose
`get_character()` yields bytes and then `EOF`. `utf16_to_utf8` and
`utf32_to_utf8` read one character from an `IteratorInputAdapter` of wide
code units and return its UTF-8 bytes; `WideStringInputAdapter` uses them to
stream wide input as UTF-8.

## What the package does not do

- The client speaks plain `ws://` only: no TLS (`wss://`), no check of the
  server's handshake reply, no reassembly of fragmented messages
  (continuation frames are reported as unsupported), and a fixed mask key.
- The lexer only produces tokens; there is no parser that builds Python
  values from a whole JSON document, and no serializer.
- There is no command-line tool, no bot logic and no game-server
  integration: the package is a library of the pieces above.