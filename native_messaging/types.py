"""Serialization bindings for native message payloads."""
from __future__ import annotations

import json
from typing import Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


class Serializer(Protocol[T]):
    """Symmetric bytes encoding for message values.

    Implementations raise on failure; the frame codec turns
    those exceptions into EncodingError / DecodingError.
    """

    def dumps(self, value: T) -> bytes: ...

    def loads(self, data: bytes) -> T: ...


def _reject_constant(name: str) -> Any:  # noqa: ANN401
    msg = f"Out of range float value {name} is not JSON compliant"
    raise ValueError(msg)


class JsonSerializer:
    """Compact UTF-8 JSON, the format browsers send and expect."""

    def dumps(self, value: Any) -> bytes:  # noqa: ANN401
        return json.dumps(
            value,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        ).encode("utf-8")

    def loads(self, data: bytes) -> Any:  # noqa: ANN401
        return json.loads(
            data.decode("utf-8"), parse_constant=_reject_constant,
        )


class ModelSerializer(Generic[T]):
    """Typed JSON binding backed by a pydantic TypeAdapter.

    Accepts anything pydantic can validate: BaseModel
    subclasses, dataclasses, TypedDicts, list[int], ...
    A payload that does not match the type fails to load.
    """

    def __init__(self, tp: type[T]) -> None:
        self._adapter: TypeAdapter[T] = TypeAdapter(tp)

    def dumps(self, value: T) -> bytes:
        return self._adapter.dump_json(value)

    def loads(self, data: bytes) -> T:
        return self._adapter.validate_json(data)


DEFAULT_SERIALIZER = JsonSerializer()
