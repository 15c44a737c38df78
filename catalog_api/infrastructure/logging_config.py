"""Structured logging setup."""

import logging
import sys

import structlog

from catalog_api.infrastructure.config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure stdlib logging and structlog for JSON output.

    Args:
        level: Log level name. Defaults to ``settings.log_level``.
    """
    level_name = (level or settings.log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
