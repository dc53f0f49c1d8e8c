"""Logging configuration helpers for quizgen."""

from __future__ import annotations

import logging
from logging import Logger

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str | int = logging.WARNING, console: Console | None = None) -> Logger:
    """Route log records through Rich and return the package logger."""
    logging.basicConfig(
        level=level,
        format="%(name)s | %(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console or Console(stderr=True),
                rich_tracebacks=True,
                show_path=False,
            )
        ],
        force=True,
    )
    return logging.getLogger("quizgen")
