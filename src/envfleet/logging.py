"""
Logging setup.

Logs go to stderr through the standard library so they never mix with the
progress lines commands write to stdout. Orchestrators log structured events
(``app_created``, ``rollback_delete_failed``...) via ``structlog.get_logger()``.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(level: int | str = logging.WARNING, *, json_logs: bool = True) -> None:
    """Configure the structlog/standard logging bridge.

    Args:
        level: Minimum level, as a number or a name ("debug", "INFO"...)
        json_logs: Render JSON lines; otherwise a human readable console format
    """

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)


def bind_context(**kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Logger carrying ``kwargs`` (project name, env...) on every event."""

    return structlog.get_logger().bind(**kwargs)
