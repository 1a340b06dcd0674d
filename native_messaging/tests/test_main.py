"""Tests for the echo host command."""
from __future__ import annotations

import struct
from typing import TYPE_CHECKING

from click.testing import CliRunner

from native_messaging.main import echo_handler, main
from native_messaging.protocol import decode_frame

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def test_echo_handler_wraps_request() -> None:
    """Requests come back under the echo key."""
    assert echo_handler({"text": "hi"}) == {"echo": {"text": "hi"}}


class TestMain:
    """Tests for the click entry point."""

    def test_echoes_every_message(
        self, tmp_path: Path, frame: Callable[[bytes], bytes],
    ) -> None:
        """Two requests produce two framed echo responses."""
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--log-file", str(tmp_path / "host.log")],
            input=frame(b'{"text":"This is a test"}') + frame(b"2"),
        )
        assert result.exit_code == 0
        raw = result.stdout_bytes
        first, consumed = decode_frame(raw).unwrap()
        second, _ = decode_frame(raw[consumed:]).unwrap()
        assert first == {"echo": {"text": "This is a test"}}
        assert second == {"echo": 2}

    def test_once(
        self, tmp_path: Path, frame: Callable[[bytes], bytes],
    ) -> None:
        """--once answers only the first request."""
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--once", "--log-file", str(tmp_path / "host.log")],
            input=frame(b"1") + frame(b"2"),
        )
        assert result.exit_code == 0
        body = b'{"echo":1}'
        assert result.stdout_bytes == struct.pack("=I", len(body)) + body

    def test_truncated_input_exits_nonzero(self, tmp_path: Path) -> None:
        """A torn frame exits with status 1 and logs the reason."""
        log_file = tmp_path / "host.log"
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--verbose", "--log-file", str(log_file)],
            input=struct.pack("=I", 5),
        )
        assert result.exit_code == 1
        assert result.stdout_bytes == b""
        assert "Host stopped" in log_file.read_text()
