"""WebExtension native messaging framing for Python hosts."""
from __future__ import annotations

from native_messaging.errors import MessagingError, MessagingException
from native_messaging.io_ops import (
    read_message,
    read_stdin_message,
    write_message,
    write_stdout_message,
)
from native_messaging.protocol import (
    HEADER_SIZE,
    MAX_MESSAGE_SIZE,
    decode_frame,
    decode_message,
    encode_message,
)
from native_messaging.types import (
    JsonSerializer,
    ModelSerializer,
    Serializer,
)

__all__ = [
    "HEADER_SIZE",
    "MAX_MESSAGE_SIZE",
    "JsonSerializer",
    "MessagingError",
    "MessagingException",
    "ModelSerializer",
    "Serializer",
    "decode_frame",
    "decode_message",
    "encode_message",
    "read_message",
    "read_stdin_message",
    "write_message",
    "write_stdout_message",
]
