"""
Structured Logging Configuration

Console output in development, one JSON object per line in production.
Every event carries the service name and environment.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import Processor

from ..config import get_settings

SERVICE_NAME = "insight_feed"


def _add_service_context(environment: str) -> Processor:
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict
    return processor


def setup_logging(log_level: Optional[str] = None):
    """
    Configure structured logging for the application.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()

    if log_level is None:
        log_level = "DEBUG" if settings.debug else "INFO"
    level = getattr(logging, log_level.upper())

    # Route stdlib loggers (uvicorn, apscheduler) to the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_service_context(settings.environment),
    ]

    if settings.is_production:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True)
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = SERVICE_NAME) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
