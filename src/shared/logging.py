"""Logging configuration shared by the ordering, payments and fulfillment contexts.

Call :func:`configure_logging` once from the process entry point. Domain
modules only ever call ``structlog.get_logger(__name__)`` and log key/value
pairs; the workflow binds the order number with :func:`bind_order` so every
line of one checkout carries it.
"""

import logging
import os
import sys
from typing import Any

import structlog

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_JSON_ENVS = {"production", "staging"}

# Third-party loggers that are too chatty below WARNING
_QUIET_LOGGERS = ("protean", "asyncio")


def current_env() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` if set, else the level for the current environment."""
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(current_env(), "INFO"))


def setup_stdlib_logging() -> None:
    level = get_log_level()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _processors(json_output: bool) -> list:
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def setup_structlog() -> None:
    structlog.configure(
        processors=_processors(json_output=current_env() in _JSON_ENVS),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    """Configure stdlib logging and structlog for the whole process."""
    setup_stdlib_logging()
    setup_structlog()


def bind_order(order_number: int, **kwargs: Any) -> None:
    """Attach the order number to every log line emitted in this context."""
    structlog.contextvars.bind_contextvars(order_number=order_number, **kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
