"""Structured logging configuration using structlog."""

import logging
import sys
from contextlib import AbstractContextManager

import structlog
from structlog.typing import EventDict, Processor

from src.core.config import get_settings

settings = get_settings()

# Chatty third-party loggers kept at WARNING unless DEBUG is on
_NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "asyncio")


def add_app_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every entry with the service name and environment."""
    event_dict["app"] = settings.app_name
    event_dict["env"] = settings.app_env
    return event_dict


def drop_empty_values(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Remove keys bound to None so JSON lines stay compact."""
    return {key: value for key, value in event_dict.items() if value is not None}


def _build_processors() -> list[Processor]:
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        drop_empty_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    # Frame locals hold bearer tokens on delivery paths; never render them
    if settings.debug:
        return shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False),
            )
        ]
    return shared_processors + [
        structlog.processors.ExceptionRenderer(
            structlog.tracebacks.ExceptionDictTransformer(show_locals=False)
        ),
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ]


def setup_logging() -> None:
    """Configure structured logging for the service.

    Output goes to stdout: coloured console lines when DEBUG is set, one
    JSON object per line otherwise.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    if not settings.debug:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=_build_processors(),  # type: ignore
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def bind_event_context(wedding_id: str, event_type: str) -> AbstractContextManager:
    """Bind tenant and event type to every log entry emitted inside the block.

    Each asyncio task runs with its own copy of the context, so concurrent
    deliveries for different weddings never see each other's values.
    """
    return structlog.contextvars.bound_contextvars(wedding_id=wedding_id, event_type=event_type)


setup_logging()
