"""Structured logging with rating_id support.

Uses structlog for structured logging with JSON or console output.
Engine modules log through the standard ``logging`` module; those records
are rendered by the same structlog pipeline, so every entry (stdlib or
structlog) carries the ``rating_id`` of the rating run that produced it.
"""

from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog

from ..core.config import RatingSettings

# Context var for rating_id propagation
_rating_id: ContextVar[str] = ContextVar("rating_id", default="")


def get_rating_id() -> str:
    """Current rating ID, or "" outside a rating run."""
    return _rating_id.get()


def set_rating_id(rating_id: str) -> None:
    _rating_id.set(rating_id)


def new_rating_id() -> str:
    """Generate and set a new rating ID."""
    rid = uuid.uuid4().hex[:12]
    _rating_id.set(rid)
    return rid


@contextmanager
def rating_scope(rating_id: str | None = None) -> Iterator[str]:
    """Bind a rating ID for the duration of one rating run.

    Nested scopes keep the outer ID so a caller can correlate its own
    entries with the engine's.
    """
    current = _rating_id.get()
    if current:
        yield current
        return
    token = _rating_id.set(rating_id or uuid.uuid4().hex[:12])
    try:
        yield _rating_id.get()
    finally:
        _rating_id.reset(token)


def _add_rating_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add rating_id to entries logged inside a run."""
    rid = _rating_id.get()
    if rid:
        event_dict["rating_id"] = rid
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging for the engine.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for production, "console" for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _add_rating_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[structlog.stdlib.ExtraAdder(), *shared],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)


def setup_logging_from_settings(settings: RatingSettings | None = None) -> None:
    """``setup_logging`` driven by ``RatingSettings.observability``."""
    settings = settings or RatingSettings()
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
