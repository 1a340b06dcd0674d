"""Echo host entry point.

Answers every request with {"echo": <request>}. Useful for
checking a manifest and extension wiring end to end.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import click
from returns.io import IOFailure
from returns.unsafe import unsafe_perform_io

from native_messaging.host import serve, setup_logging


def echo_handler(request: Any) -> dict[str, Any]:  # noqa: ANN401
    """Wrap the request in an echo envelope."""
    return {"echo": request}


@click.command()
@click.option(
    "--once", is_flag=True, help="Handle a single message then exit",
)
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write logs to this file instead of stderr",
)
@click.option("--verbose", is_flag=True, help="Log every message")
def main(once: bool, log_file: Path | None, verbose: bool) -> None:
    """Run a native messaging echo host on stdin/stdout."""
    logger = setup_logging(
        log_file, logging.DEBUG if verbose else logging.INFO,
    )
    result = serve(echo_handler, once=once)
    if isinstance(result, IOFailure):
        err = unsafe_perform_io(result.failure())
        logger.error("Host stopped: %s", err.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
