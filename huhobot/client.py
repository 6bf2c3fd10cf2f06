"""A small WebSocket client.

The client opens a plain ``ws://`` connection, performs the upgrade
handshake and receives frames on a background thread, handing them to the
registered callbacks.  Every callback is called as ``callback(client, value)``.
"""

from __future__ import annotations

import enum
import re
import select
import socket
import threading
from typing import Any, Callable

from huhobot.frames import (
    Opcode,
    apply_mask,
    encode_control_frame,
    encode_frame,
    parse_frame_header,
)

__all__ = [
    "Status",
    "WebSocketError",
    "WebSocketClient",
    "parse_ws_uri",
    "build_handshake",
]

_URI_PATTERN = re.compile(r"ws://([^:/]+):?(\d+)?(/\S*)?")
_HANDSHAKE_KEY = "O7Tk4xI04v+X91cuvefLSQ=="
_POLL_SECONDS = 0.2
_RECV_SIZE = 2048

Callback = Callable[["WebSocketClient", Any], Any]


class Status(enum.Enum):
    """Connection state."""

    CLOSED = "closed"
    OPEN = "open"
    CLOSING = "closing"


class WebSocketError(RuntimeError):
    """Raised when connecting or sending fails."""


def parse_ws_uri(uri: str) -> tuple[str, int, str]:
    """Split a ``ws://host[:port][/path]`` URI into host, port and path."""
    match = _URI_PATTERN.search(uri)
    if match is None:
        raise WebSocketError("Unable to parse websocket uri.")
    host, port, path = match.groups()
    return host, int(port) if port is not None else 80, path if path is not None else "/"


def build_handshake(hostname: str, port: int, path: str) -> bytes:
    """Build the HTTP upgrade request sent when connecting."""
    lines = [
        f"GET {path} HTTP/1.1",
        f"Host: {hostname}:{port}",
        "Connection: Upgrade",
        "Upgrade: websocket",
        "Sec-WebSocket-Version: 13",
        f"Sec-WebSocket-Key: {_HANDSHAKE_KEY}",
        "",
        "",
    ]
    return "\r\n".join(lines).encode("utf-8")


class WebSocketClient:
    """A WebSocket connection whose incoming frames are delivered to callbacks."""

    def __init__(self) -> None:
        self.status = Status.CLOSED
        self._sock: socket.socket | None = None
        self._buffer = bytearray()
        self._send_lock = threading.Lock()
        self._text_callback: Callback | None = None
        self._binary_callback: Callback | None = None
        self._error_callback: Callback | None = None
        self._lost_callback: Callback | None = None

    def __enter__(self) -> WebSocketClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # connection

    def connect(self, uri: str) -> None:
        """Connect to a ``ws://`` URI."""
        self.connect_host(*parse_ws_uri(uri))

    def connect_host(self, hostname: str, port: int, path: str = "/") -> None:
        """Connect to ``hostname:port``, perform the handshake and start receiving."""
        try:
            addresses = socket.getaddrinfo(hostname, port, type=socket.SOCK_STREAM)
        except socket.gaierror as exc:
            raise WebSocketError("getaddrinfo failed.") from exc

        sock = None
        for family, socktype, proto, _, address in addresses:
            try:
                candidate = socket.socket(family, socktype, proto)
            except OSError:
                continue
            try:
                candidate.connect(address)
            except OSError:
                candidate.close()
                continue
            sock = candidate
            break
        if sock is None:
            raise WebSocketError(f"Unable to connect to {hostname}")

        try:
            sock.sendall(build_handshake(hostname, port, path))
        except OSError as exc:
            sock.close()
            raise WebSocketError("An error occurred during the handshake.") from exc
        try:
            sock.recv(4096)  # the response is not inspected
        except OSError:
            pass

        self._sock = sock
        self._buffer.clear()
        self.status = Status.OPEN
        threading.Thread(target=self._recv_loop, args=(sock,), daemon=True).start()

    def shutdown(self) -> None:
        """Close the socket without a closing handshake."""
        if self.status is Status.CLOSED:
            return
        self.status = Status.CLOSED
        if self._sock is not None:
            self._sock.close()

    # callbacks

    def on_text_received(self, callback: Callback | None) -> None:
        """Call ``callback(client, text)`` for every text frame."""
        self._text_callback = callback

    def on_binary_received(self, callback: Callback | None) -> None:
        """Call ``callback(client, data)`` for every binary frame."""
        self._binary_callback = callback

    def on_error(self, callback: Callback | None) -> None:
        """Call ``callback(client, message)`` when something goes wrong while receiving."""
        self._error_callback = callback

    def on_lost_connection(self, callback: Callback | None) -> None:
        """Call ``callback(client, code)`` when the connection ends."""
        self._lost_callback = callback

    # sending

    def _send(self, frame: bytes) -> None:
        if self._sock is None:
            raise WebSocketError("socket error (send).")
        try:
            with self._send_lock:
                self._sock.sendall(frame)
        except OSError as exc:
            raise WebSocketError("socket error (send).") from exc

    def send_text(self, text: str) -> None:
        """Send a text frame."""
        if self.status is Status.CLOSED:
            raise WebSocketError("WebSocket is closed.")
        self._send(encode_frame(Opcode.TEXT, text.encode("utf-8")))

    def send_binary(self, data: bytes) -> None:
        """Send a binary frame."""
        if self.status is Status.CLOSED:
            raise WebSocketError("WebSocket is closed.")
        self._send(encode_frame(Opcode.BINARY, bytes(data)))

    def ping(self) -> None:
        """Send an empty ping; does nothing when closed."""
        if self.status is Status.CLOSED:
            return
        self._send(encode_control_frame(Opcode.PING))

    def pong(self, data: bytes | None = None) -> None:
        """Send a pong, echoing ``data`` if given; does nothing when closed."""
        if self.status is Status.CLOSED:
            return
        if data is None:
            self._send(encode_control_frame(Opcode.PONG))
        else:
            self._send(encode_frame(Opcode.PONG, bytes(data)))

    def close(self) -> None:
        """Start the closing handshake by sending a close frame."""
        if self.status is Status.CLOSED:
            return
        self.status = Status.CLOSING
        self._send(encode_control_frame(Opcode.CLOSE))

    # receiving

    def _report_error(self, message: str) -> None:
        if self._error_callback is not None:
            self._error_callback(self, message)

    def _lost(self, code: int) -> None:
        if self._lost_callback is not None:
            self._lost_callback(self, code)

    def feed(self, data: bytes) -> None:
        """Add received bytes and dispatch every complete frame they finish."""
        buffer = self._buffer
        buffer += data
        while buffer:
            info = parse_frame_header(buffer)
            if info is None:
                self._report_error("Failed to parse frame.")
                return
            if len(buffer) < info.frame_length:
                return
            payload = bytes(buffer[info.header_length:info.frame_length])
            del buffer[:info.frame_length]
            if info.mask:
                payload = apply_mask(payload, info.mask_key)

            if info.opcode == Opcode.TEXT:
                if self._text_callback is not None:
                    self._text_callback(self, payload.decode("utf-8", errors="replace"))
            elif info.opcode == Opcode.BINARY:
                if self._binary_callback is not None:
                    self._binary_callback(self, payload)
            elif info.opcode == Opcode.PING:
                try:
                    self.pong(payload)
                except WebSocketError as exc:
                    self._report_error(
                        f"An error occurs on sending pong frame. error: {exc}"
                    )
            elif info.opcode == Opcode.CLOSE:
                if self.status is Status.CLOSING:
                    self.shutdown()
                elif self.status is Status.OPEN:
                    # the server closes: answer with a close frame and drop the socket
                    try:
                        self.close()
                    except WebSocketError:
                        pass
                    self.shutdown()
                    self._lost(1000)
                buffer.clear()
                return
            else:
                self._report_error(f"The opcode #{info.opcode} is not supported.")

    def _recv_loop(self, sock: socket.socket) -> None:
        while self.status is Status.OPEN:
            try:
                readable, _, _ = select.select([sock], [], [], _POLL_SECONDS)
            except (OSError, ValueError):
                if self.status is Status.OPEN:
                    self._report_error("select error.")
                return
            if not readable:
                continue
            try:
                data = sock.recv(_RECV_SIZE)
            except OSError:
                data = b""
            if not data:
                # a manual shutdown must not be reported as a lost connection
                if self.status is Status.OPEN:
                    self.shutdown()
                    self._lost(1006)
                return
            self.feed(data)