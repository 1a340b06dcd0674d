"""Tests for payload serializers."""
from __future__ import annotations

import json

import pytest
from pydantic import BaseModel, ValidationError

from native_messaging.types import JsonSerializer, ModelSerializer


class _Message(BaseModel):
    text: str


class TestJsonSerializer:
    """Tests for the default JSON binding."""

    def test_dumps_is_compact(self) -> None:
        """No whitespace between tokens."""
        data = JsonSerializer().dumps({"text": "This is a test"})
        assert data == b'{"text":"This is a test"}'

    def test_dumps_keeps_unicode_as_utf8(self) -> None:
        """Non-ASCII text is written as UTF-8, not escaped."""
        data = JsonSerializer().dumps({"t": "héllo"})
        assert data == '{"t":"héllo"}'.encode()

    def test_dumps_rejects_nan(self) -> None:
        """NaN is not valid JSON for browsers."""
        with pytest.raises(ValueError, match="JSON compliant"):
            JsonSerializer().dumps(float("nan"))

    def test_loads_invalid_json_raises(self) -> None:
        """Malformed JSON raises JSONDecodeError."""
        with pytest.raises(json.JSONDecodeError):
            JsonSerializer().loads(b"{oops")

    def test_loads_rejects_nan_and_infinity(self) -> None:
        """Loading refuses what dumping would refuse."""
        serializer = JsonSerializer()
        for raw in (b"NaN", b"[Infinity]", b'{"x":-Infinity}'):
            with pytest.raises(ValueError, match="JSON compliant"):
                serializer.loads(raw)

    def test_loads_invalid_utf8_raises(self) -> None:
        """Bytes that are not UTF-8 raise UnicodeDecodeError."""
        with pytest.raises(UnicodeDecodeError):
            JsonSerializer().loads(b"\xff\xfe")


class TestModelSerializer:
    """Tests for the pydantic-backed typed binding."""

    def test_loads_returns_model(self) -> None:
        """Payload is validated into the model type."""
        serializer = ModelSerializer(_Message)
        assert serializer.loads(b'{"text":"hi"}') == _Message(text="hi")

    def test_dumps_model(self) -> None:
        """Model dumps to compact JSON with field names kept."""
        serializer = ModelSerializer(_Message)
        assert serializer.dumps(_Message(text="hi")) == b'{"text":"hi"}'

    def test_schema_mismatch_raises(self) -> None:
        """Missing fields fail validation."""
        serializer = ModelSerializer(_Message)
        with pytest.raises(ValidationError):
            serializer.loads(b'{"other":1}')

    def test_generic_type(self) -> None:
        """Works with plain generic types too."""
        serializer = ModelSerializer(list[int])
        assert serializer.loads(b"[1,2,3]") == [1, 2, 3]
