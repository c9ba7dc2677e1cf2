from __future__ import annotations

import logging
import sys
from typing import Any, Protocol

import structlog
from rich.logging import RichHandler
from structlog.contextvars import bind_contextvars, merge_contextvars

_CONFIGURED = False


class EventLogger(Protocol):
    """What the fare book needs from a logger: keyword-style events."""

    def info(self, event: str, **kw: Any) -> Any: ...
    def warning(self, event: str, **kw: Any) -> Any: ...


def _handler(fmt: str) -> logging.Handler:
    handler: logging.Handler
    if fmt == "console":
        handler = RichHandler(
            rich_tracebacks=True,
            markup=False,
            show_time=False,
            show_path=False,
        )
    else:
        handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _renderer(fmt: str) -> Any:
    if fmt == "console":
        # event name first, the rest sorted; place names stay readable
        return structlog.processors.KeyValueRenderer(sort_keys=True, key_order=["event"])
    return structlog.processors.JSONRenderer(ensure_ascii=False)


def configure_logging(*, level: str = "INFO", fmt: str = "console") -> None:
    """
    Route structlog events through stdlib logging. Console mode renders
    key=value lines via rich; json mode writes one JSON object per line to
    stdout. Only the first call in a process takes effect.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    lvl = level.upper()
    handler = _handler(fmt)
    handler.setLevel(lvl)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(lvl)
    root.addHandler(handler)

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            _renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(lvl),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True


def get_logger(name: str = "itinerary_fares") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind(**values: Any) -> None:
    """Attach values (e.g. the CLI command) to every later event."""
    bind_contextvars(**values)
