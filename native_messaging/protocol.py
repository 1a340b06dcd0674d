"""WebExtension native messaging protocol framing.

A frame is a 4-byte unsigned length in the host's native
byte order followed by exactly that many payload bytes.
Browsers write the length in native order, so this must
not be pinned to little- or big-endian.
"""
from __future__ import annotations

import struct
import sys
from typing import IO, TYPE_CHECKING, Any, TypeVar

from returns.io import IOFailure, IOResult
from returns.result import Failure, Result, Success

from native_messaging.errors import MessagingError
from native_messaging.types import DEFAULT_SERIALIZER

if TYPE_CHECKING:
    from native_messaging.types import Serializer

T = TypeVar("T")

HEADER_SIZE = 4
MAX_MESSAGE_SIZE = 0xFFFFFFFF

_HEADER = struct.Struct("=I")
_HOST_SIZE_MAX = sys.maxsize
_READ_CHUNK_SIZE = 64 * 1024


def encode_message(
    message: Any,  # noqa: ANN401
    serializer: Serializer[Any] = DEFAULT_SERIALIZER,
) -> Result[bytes, MessagingError]:
    """Encode a value as a length-prefixed native message.

    Returns header + payload, or a failure without producing
    any bytes when serialization fails or the payload does
    not fit the 32-bit length field.
    """
    try:
        payload = serializer.dumps(message)
    except Exception as exc:  # noqa: BLE001
        return Failure(
            MessagingError(
                operation="protocol.encode_message",
                error_type="EncodingError",
                message=f"Failed to serialize message: {exc}",
                context={"value_type": type(message).__name__},
                cause=exc,
            ),
        )
    size = len(payload)
    if size > MAX_MESSAGE_SIZE:
        return Failure(
            MessagingError(
                operation="protocol.encode_message",
                error_type="SizeError",
                message=(
                    f"Message of {size} bytes exceeds the"
                    f" {MAX_MESSAGE_SIZE} byte frame limit"
                ),
                context={"size": size, "limit": MAX_MESSAGE_SIZE},
            ),
        )
    return Success(_HEADER.pack(size) + payload)


def _read_exact(source: IO[bytes], count: int) -> bytes:
    """Read up to count bytes, looping over short reads.

    Stops early only at end-of-stream. Each read asks for at
    most _READ_CHUNK_SIZE bytes and never more than remains,
    so a bogus length cannot force a huge allocation.
    """
    chunks: list[bytes] = []
    remaining = count
    while remaining > 0:
        chunk = source.read(min(remaining, _READ_CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _load_payload(
    operation: str,
    payload: bytes,
    serializer: Serializer[T],
) -> Result[T, MessagingError]:
    try:
        return Success(serializer.loads(payload))
    except Exception as exc:  # noqa: BLE001
        return Failure(
            MessagingError(
                operation=operation,
                error_type="DecodingError",
                message=f"Invalid payload in native message: {exc}",
                context={"length": len(payload)},
                cause=exc,
            ),
        )


def _check_host_size(
    operation: str, length: int,
) -> MessagingError | None:
    if length > _HOST_SIZE_MAX:
        return MessagingError(
            operation=operation,
            error_type="SizeError",
            message=(
                f"Frame length {length} exceeds the host's"
                f" addressable size {_HOST_SIZE_MAX}"
            ),
            context={"length": length, "limit": _HOST_SIZE_MAX},
        )
    return None


def decode_message(
    source: IO[bytes],
    serializer: Serializer[T] = DEFAULT_SERIALIZER,  # type: ignore[assignment]
) -> IOResult[T, MessagingError]:
    """Read one frame from a binary stream and decode it.

    Consumes exactly 4 + N bytes so the next frame stays on
    the stream. A stream that is already exhausted yields an
    IoError whose at_frame_boundary is True; a header or
    payload cut short is reported as an error, never as a
    partial value.
    """
    operation = "protocol.decode_message"
    try:
        header = _read_exact(source, HEADER_SIZE)
    except (OSError, ValueError) as exc:
        return IOFailure(
            MessagingError(
                operation=operation,
                error_type="IoError",
                message=f"Failed to read frame header: {exc}",
                cause=exc,
            ),
        )
    if len(header) < HEADER_SIZE:
        reason = (
            "End of stream" if not header
            else "Stream ended inside frame header"
        )
        return IOFailure(
            MessagingError(
                operation=operation,
                error_type="IoError",
                message=reason,
                context={"expected": HEADER_SIZE, "received": len(header)},
            ),
        )

    length: int = _HEADER.unpack(header)[0]
    size_error = _check_host_size(operation, length)
    if size_error is not None:
        return IOFailure(size_error)

    try:
        payload = _read_exact(source, length)
    except (OSError, ValueError) as exc:
        return IOFailure(
            MessagingError(
                operation=operation,
                error_type="IoError",
                message=f"Failed to read frame payload: {exc}",
                context={"expected": length},
                cause=exc,
            ),
        )
    if len(payload) < length:
        return IOFailure(
            MessagingError(
                operation=operation,
                error_type="TruncationError",
                message=(
                    f"Stream ended after {len(payload)} of"
                    f" {length} payload bytes"
                ),
                context={"expected": length, "received": len(payload)},
            ),
        )
    return IOResult.from_result(
        _load_payload(operation, payload, serializer),
    )


def decode_frame(
    raw: bytes,
    serializer: Serializer[T] = DEFAULT_SERIALIZER,  # type: ignore[assignment]
) -> Result[tuple[T, int], MessagingError]:
    """Decode the frame at the start of an in-memory buffer.

    Returns the value and the number of bytes it occupied.
    Bytes after the frame are left for the caller.
    """
    operation = "protocol.decode_frame"
    if len(raw) < HEADER_SIZE:
        return Failure(
            MessagingError(
                operation=operation,
                error_type="TruncationError",
                message="Buffer shorter than frame header",
                context={"expected": HEADER_SIZE, "received": len(raw)},
            ),
        )
    length: int = _HEADER.unpack_from(raw)[0]
    size_error = _check_host_size(operation, length)
    if size_error is not None:
        return Failure(size_error)
    end = HEADER_SIZE + length
    if len(raw) < end:
        return Failure(
            MessagingError(
                operation=operation,
                error_type="TruncationError",
                message=(
                    f"Buffer holds {len(raw) - HEADER_SIZE} of"
                    f" {length} payload bytes"
                ),
                context={
                    "expected": length,
                    "received": len(raw) - HEADER_SIZE,
                },
            ),
        )
    return _load_payload(
        operation, raw[HEADER_SIZE:end], serializer,
    ).map(lambda value: (value, end))
