"""Structured logging configuration for the governance engine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import structlog

from governance.redaction import redact_value

if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from config.settings import Settings

# Rendered by structlog itself; must keep their original types.
_PASSTHROUGH_KEYS: frozenset[str] = frozenset({"exc_info", "stack_info"})


def redact_pii_processor(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    """structlog processor masking emails and phone numbers in every value."""
    return {
        key: value if key in _PASSTHROUGH_KEYS else redact_value(value)
        for key, value in event_dict.items()
    }


def configure_logging(settings: Settings) -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_pii_processor,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[settings.log_level],
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
