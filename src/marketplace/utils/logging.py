"""Logging for the marketplace.

Stdlib handlers write to the console and to rotating files under `LOG_DIR`;
structlog renders on top of them. Every event carries the service name, and
whatever buyer, seller or order the current request is working on, bound with
`add_context` or `log_context`.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

SERVICE = "agrimart"

LEVELS_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Library loggers that flood the console at DEBUG
QUIET_LOGGERS = ("protean", "urllib3", "asyncio", "httpx", "uvicorn.access")


def _environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def _structured_output() -> bool:
    return _environment() in ("production", "staging")


def get_log_level() -> str:
    """`LOG_LEVEL` if set, otherwise the level for the current environment."""
    return os.getenv("LOG_LEVEL", LEVELS_BY_ENVIRONMENT.get(_environment(), "INFO")).upper()


def _rotating_file(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    return handler


def _configure_handlers(level: str) -> None:
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_file(log_dir / f"{SERVICE}.log", level),
        _rotating_file(log_dir / f"{SERVICE}_error.log", logging.ERROR),
    ]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def add_service(_logger: Any, _method: str, event_dict: dict) -> dict:
    """Stamp every event with the service name."""
    event_dict.setdefault("service", SERVICE)
    return event_dict


def _renderer():
    if _structured_output():
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
    )


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            add_service,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            ),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    """Configure stdlib handlers and structlog for the marketplace."""
    _configure_handlers(get_log_level())
    _configure_structlog()


def add_context(**kwargs: Any) -> None:
    """Bind values to every log event for the rest of the current request."""
    structlog.contextvars.bind_contextvars(**{key: str(value) for key, value in kwargs.items()})


def log_context(**kwargs: Any):
    """Bind values to log events only inside a `with` block.

    Usage:
        with log_context(order_id=order_id, seller_id=identity.user_id):
            ...
    """
    return structlog.contextvars.bound_contextvars(**{key: str(value) for key, value in kwargs.items()})


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
