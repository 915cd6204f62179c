"""Logging setup for buildpack phases."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO") -> None:
    """Send log records to stderr so stdout stays free for command output."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            show_path=False,
            show_time=False,
            markup=False,
        )
    )
