"""I/O boundary for native messaging hosts.

All stdin/stdout access goes through here. Tests mock the
buffer seams or hand in BytesIO streams directly.
"""
from __future__ import annotations

import sys
import threading
from contextlib import contextmanager
from typing import IO, TYPE_CHECKING, Any, TypeVar

from returns.io import IOFailure, IOResult, IOSuccess
from returns.result import Failure

from native_messaging.errors import MessagingError
from native_messaging.protocol import decode_message, encode_message
from native_messaging.types import DEFAULT_SERIALIZER

if TYPE_CHECKING:
    from collections.abc import Iterator

    from native_messaging.types import Serializer

T = TypeVar("T")

_stdin_lock = threading.Lock()
_stdout_lock = threading.Lock()


def _get_stdin_buffer() -> IO[bytes]:
    """Return stdin binary buffer. Mockable seam."""
    return sys.stdin.buffer


def _get_stdout_buffer() -> IO[bytes]:
    """Return stdout binary buffer. Mockable seam."""
    return sys.stdout.buffer


@contextmanager
def acquire_stdin() -> Iterator[IO[bytes]]:
    """Hold exclusive access to stdin for one read."""
    with _stdin_lock:
        yield _get_stdin_buffer()


@contextmanager
def acquire_stdout() -> Iterator[IO[bytes]]:
    """Hold exclusive access to stdout for one write."""
    with _stdout_lock:
        yield _get_stdout_buffer()


def read_message(
    source: IO[bytes],
    serializer: Serializer[T] = DEFAULT_SERIALIZER,  # type: ignore[assignment]
) -> IOResult[T, MessagingError]:
    """Read one framed message from any binary reader."""
    return decode_message(source, serializer)


def write_message(
    message: Any,  # noqa: ANN401
    sink: IO[bytes],
    serializer: Serializer[Any] = DEFAULT_SERIALIZER,
) -> IOResult[None, MessagingError]:
    """Write one framed message to a binary writer and flush.

    Encoding failures are returned before anything touches
    the sink. If the write or flush fails the sink may hold
    part of a frame and must not be reused.
    """
    encoded = encode_message(message, serializer)
    if isinstance(encoded, Failure):
        return IOFailure(encoded.failure())
    frame = encoded.unwrap()
    try:
        sink.write(frame)
        sink.flush()
    except (OSError, ValueError) as exc:
        return IOFailure(
            MessagingError(
                operation="io_ops.write_message",
                error_type="IoError",
                message=f"Failed to write frame: {exc}",
                context={"frame_size": len(frame), "desynchronized": True},
                cause=exc,
            ),
        )
    return IOSuccess(None)


def read_stdin_message(
    serializer: Serializer[T] = DEFAULT_SERIALIZER,  # type: ignore[assignment]
) -> IOResult[T, MessagingError]:
    """Read one framed message from stdin.

    Blocks until a full frame arrives or stdin ends.
    """
    with acquire_stdin() as stdin_buf:
        return decode_message(stdin_buf, serializer)


def write_stdout_message(
    message: Any,  # noqa: ANN401
    serializer: Serializer[Any] = DEFAULT_SERIALIZER,
) -> IOResult[None, MessagingError]:
    """Write one framed message to stdout and flush it."""
    with acquire_stdout() as stdout_buf:
        return write_message(message, stdout_buf, serializer)
