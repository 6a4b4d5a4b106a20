"""
log_config.py — structlog configuration shared by the API and the CLI.

Sets up structured logging with JSON or human-readable console output
controlled by settings.log_format. Call configure_logging() once at
process startup (the app factory and the CLI group both do).

Usage:
    from cleanerp_shared.log_config import configure_logging, get_logger

    configure_logging()
    log = get_logger("cleanerp_pipeline.loaders.site_importer")
    log.info("batch_inserted", table="sites", rows=200)
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from cleanerp_shared.config import settings


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
) -> None:
    """
    Configure structlog for the current process. Idempotent.

    Args:
        log_level:  Override settings.log_level ("DEBUG", "INFO", …).
        log_format: Override settings.log_format ("json" | "console").
    """
    level = (log_level or settings.log_level).upper()
    fmt = log_format or settings.log_format
    numeric_level = getattr(logging, level, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if fmt == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    # Logs go to stderr so CLI output on stdout stays machine-readable
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """Return a structlog logger, optionally bound to initial context values."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger  # type: ignore[return-value]
