"""
structlog setup for the registry client.

Every record carries timestamp, level, logger and event_type. The account a
piece of work belongs to travels in structlog's context variables:
account_context() binds it for the duration of a reconciliation run or a
write, and every log call made inside (loaders, guard, adapters) picks it up
without passing it along.

No other registry_client imports here; everything else imports this module.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

_RENDERERS = ("json", "console")


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type."""
    if "event" in event_dict:
        event_dict.setdefault("event_type", event_dict.pop("event"))
    return event_dict


def _resolve_level(name: str | None) -> int:
    level = logging.getLevelName((name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog. Defaults come from LOG_LEVEL and LOG_FORMAT
    (json or console).
    """
    fmt = (fmt or os.getenv("LOG_FORMAT") or "json").strip().lower()
    if fmt not in _RENDERERS:
        fmt = "json"
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.format_exc_info,
            _event_type,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level or os.getenv("LOG_LEVEL"))),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger; call with a snake_case event name and keyword fields:

        logger = get_logger(__name__)
        logger.info("assets_loaded", asset_count=3)
    """
    return structlog.get_logger(name).bind(logger=name)


@contextmanager
def account_context(account: str) -> Iterator[None]:
    """Bind account to every log record emitted inside the block (same task only)."""
    with structlog.contextvars.bound_contextvars(account=account):
        yield
