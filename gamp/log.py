"""structlog setup for applications sending hits."""

from __future__ import annotations

import logging
from pathlib import Path

import structlog

from gamp.config import AppConfig


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"unknown log level: {level!r}")
    return number


def configure_logging(config: AppConfig) -> None:
    """Configure structlog from the ``logging`` config section.

    Hit events (``hit_sent``, ``hit_validation_failed``, ...) go to stdout,
    or are appended to ``logging.file`` when one is set.
    """
    level = _level_number(config.logging.level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if config.logging.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        # No ANSI colours in a log file
        processors.append(structlog.dev.ConsoleRenderer(colors=not config.logging.file))

    if config.logging.file:
        path = Path(config.logging.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger_factory = structlog.WriteLoggerFactory(file=path.open("a"))
    else:
        logger_factory = structlog.PrintLoggerFactory()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=logger_factory,
    )
