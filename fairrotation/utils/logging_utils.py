"""Structured logging setup for the Fair Rotation engine."""

import logging
import os
import sys
from typing import Optional, Union

import structlog
from structlog.stdlib import LoggerFactory

LOG_LEVEL_ENV = "FAIRROTATION_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def configure_logging(level: Optional[Union[str, int]] = None, json_logs: bool = False) -> None:
    """
    Configure structlog on top of the standard library logging module.

    Args:
        level: Log level name or number. Defaults to ``FAIRROTATION_LOG_LEVEL``
            from the environment, then WARNING.
        json_logs: Render JSON lines instead of the console renderer.
    """
    log_level = _resolve_level(level)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)
    logging.getLogger("fairrotation").setLevel(log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance. Call configure_logging to set up output."""
    return structlog.get_logger(name)
