"""Structured logging for the icon service.

structlog events and plain ``logging`` records (the storage modules,
uvicorn, SQLAlchemy) go through one ``ProcessorFormatter`` on stderr, so
every line has the same shape. Per-request fields such as ``request_id``
live in :mod:`structlog.contextvars` and are bound by the HTTP middleware.
"""

from __future__ import annotations

import logging
import sys
import uuid
from typing import Any

import structlog

# Applied to structlog events and to foreign stdlib records alike
_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def bind_request(request_id: str | None = None) -> str:
    """Start a fresh log context for one request and return its id.

    Fields bound while serving a previous request on the same context are
    dropped first.
    """
    rid = request_id or uuid.uuid4().hex[:16]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=rid)
    return rid


def build_formatter(format: str = "json") -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering both structlog and stdlib records.

    Args:
        format: "json" for deployment, "console" for a terminal.
    """
    if format == "json":
        renderers: list[Any] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer()]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )


def setup_logging(level: str = "INFO", format: str = "json") -> None:
    """Route structlog and stdlib logging to stderr at *level*.

    Safe to call more than once; the handler installed by an earlier call
    is replaced.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_formatter(format))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
