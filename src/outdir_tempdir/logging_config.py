from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


_RENDERERS = {
    "json": structlog.processors.JSONRenderer,
    "console": structlog.dev.ConsoleRenderer,
}


def resolve_log_format(requested: str, stream: TextIO | None = None) -> str:
    """Map ``auto`` to ``console`` on a terminal and ``json`` elsewhere."""
    if requested != "auto":
        return requested
    out = stream if stream is not None else sys.stderr
    return "console" if getattr(out, "isatty", lambda: False)() else "json"


def _shared_processors() -> list[Any]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def configure_logging(log_level: int, log_format: str, stream: TextIO | None = None) -> str:
    """Route structlog through stdlib logging; expects values from ``load_runtime_config``."""
    effective_format = resolve_log_format(log_format, stream=stream)
    logging.basicConfig(level=log_level, format="%(message)s", stream=stream, force=True)

    structlog.reset_defaults()
    structlog.configure(
        processors=[*_shared_processors(), _RENDERERS[effective_format]()],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return effective_format


def get_logger(name: str) -> Any:
    if structlog.is_configured():
        return structlog.get_logger(name)
    # Nobody configured structlog: route through stdlib so host levels apply.
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def log_event(logger: Any, level: str, event: str, **fields: Any) -> None:
    getattr(logger, level.lower())(event, **fields)
