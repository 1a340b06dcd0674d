"""Request/response loop for native messaging hosts.

Browsers keep the host process alive for the lifetime of a
connectNative() port and close stdin when the port goes
away. serve() runs until that happens.
"""
from __future__ import annotations

import logging
from typing import IO, TYPE_CHECKING, Any, TypeVar

from returns.io import IOFailure, IOResult, IOSuccess
from returns.unsafe import unsafe_perform_io

from native_messaging import io_ops
from native_messaging.errors import MessagingException
from native_messaging.protocol import decode_message
from native_messaging.types import DEFAULT_SERIALIZER

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from native_messaging.errors import MessagingError
    from native_messaging.types import Serializer

T = TypeVar("T")

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

logger = logging.getLogger("native_messaging")


def setup_logging(
    log_file: Path | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Attach a file or stderr handler to the package logger.

    stdout carries frames, so log output never goes there.
    """
    logger.setLevel(level)
    if logger.handlers:
        for existing in logger.handlers:
            existing.setLevel(level)
        return logger
    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(str(log_file))
    else:
        handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT),
    )
    logger.addHandler(handler)
    return logger


def iter_messages(
    source: IO[bytes],
    serializer: Serializer[T] = DEFAULT_SERIALIZER,  # type: ignore[assignment]
) -> Iterator[T]:
    """Yield messages until the stream ends at a frame boundary.

    Raises MessagingException for any other framing error.
    """
    while True:
        result = decode_message(source, serializer)
        if isinstance(result, IOFailure):
            err = unsafe_perform_io(result.failure())
            if err.at_frame_boundary:
                return
            raise MessagingException(err)
        yield unsafe_perform_io(result.unwrap())


def serve(
    handler: Callable[[Any], Any],
    serializer: Serializer[Any] = DEFAULT_SERIALIZER,
    *,
    once: bool = False,
) -> IOResult[int, MessagingError]:
    """Answer requests from stdin on stdout.

    handler receives each decoded request; a non-None return
    value is sent back as the response. Returns the number of
    requests handled once stdin closes, or the first framing
    error. Exceptions raised by handler propagate.
    """
    handled = 0
    while True:
        read_result = io_ops.read_stdin_message(serializer)
        if isinstance(read_result, IOFailure):
            err = unsafe_perform_io(read_result.failure())
            if err.at_frame_boundary:
                logger.info("stdin closed after %d message(s)", handled)
                return IOSuccess(handled)
            logger.error("Read failed: %s", err)
            return IOFailure(err)

        request = unsafe_perform_io(read_result.unwrap())
        logger.debug("Received request: %r", request)
        response = handler(request)
        handled += 1
        if response is not None:
            write_result = io_ops.write_stdout_message(
                response, serializer,
            )
            if isinstance(write_result, IOFailure):
                err = unsafe_perform_io(write_result.failure())
                logger.error("Write failed: %s", err)
                return IOFailure(err)
            logger.debug("Sent response: %r", response)
        if once:
            return IOSuccess(handled)
