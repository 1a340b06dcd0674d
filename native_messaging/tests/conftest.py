"""Shared test fixtures for the native messaging test suite."""
from __future__ import annotations

import struct
from typing import TYPE_CHECKING

import pytest

from native_messaging.host import logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture(autouse=True)
def _reset_logger() -> Iterator[None]:
    """Drop handlers attached by setup_logging between tests."""
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def frame() -> Callable[[bytes], bytes]:
    """Return a helper that frames a payload in native byte order."""

    def _frame(payload: bytes) -> bytes:
        return struct.pack("=I", len(payload)) + payload

    return _frame
