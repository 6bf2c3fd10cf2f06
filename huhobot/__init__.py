"""A plain ws:// WebSocket client with a frame codec, and a streaming JSON lexer."""

__version__ = "0.1.0"