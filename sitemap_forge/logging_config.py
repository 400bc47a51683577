"""
Structured logging configuration for sitemap generation.

The library only emits events through structlog; applications that want
formatted output call ``configure_logging`` once at startup.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.typing import FilteringBoundLogger

from .settings import SitemapSettings, get_settings


def configure_logging(settings: Optional[SitemapSettings] = None) -> None:
    """Configure structured logging for the application."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper())

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> FilteringBoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
