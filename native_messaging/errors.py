"""Error types for native messaging framing."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ErrorKind = Literal[
    "IoError",
    "TruncationError",
    "SizeError",
    "DecodingError",
    "EncodingError",
]


@dataclass(frozen=True)
class MessagingError:
    """Structured error for a failed frame read or write.

    error_type tags the failure domain. cause keeps the
    originating exception (OSError, ValueError, pydantic
    ValidationError, ...) when there is one.
    """

    operation: str
    error_type: ErrorKind
    message: str
    context: dict[str, object] = field(default_factory=dict)
    cause: BaseException | None = field(
        default=None, compare=False,
    )

    @property
    def at_frame_boundary(self) -> bool:
        """True when the stream ended cleanly before a new header."""
        return (
            self.error_type == "IoError"
            and self.context.get("received") == 0
        )

    def to_dict(self) -> dict[str, object]:
        """Return plain dict suitable for JSON serialization.

        Non-serializable context values are converted to string representations.
        """

        def make_safe(obj: object) -> object:
            if isinstance(obj, (str, int, float, bool, type(None))):
                return obj
            if isinstance(obj, (list, tuple)):
                return [make_safe(x) for x in obj]
            if isinstance(obj, dict):
                return {str(k): make_safe(v) for k, v in obj.items()}
            return str(obj)

        return {
            "operation": self.operation,
            "error_type": self.error_type,
            "message": self.message,
            "context": make_safe(self.context),
            "cause": None if self.cause is None else repr(self.cause),
        }

    def __str__(self) -> str:
        """Human-readable error representation for logging."""
        base = f"MessagingError[{self.operation}] {self.error_type}: {self.message}"
        if self.context:
            base += f" | context={self.context}"
        return base


class MessagingException(Exception):  # noqa: N818
    """Raised by iterator APIs that cannot return a container."""

    def __init__(self, error: MessagingError) -> None:
        super().__init__(str(error))
        self.error = error
