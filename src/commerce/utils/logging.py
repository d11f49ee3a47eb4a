"""Structured logging for the commerce services.

stdlib logging carries the handlers (console plus rotating files when a log
directory is given); structlog renders on top of it. Each HTTP request binds
a request id and path into the structlog context so every line logged while
serving it, including the payment task it spawns, carries them.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from uuid import uuid4

import structlog

from commerce.config import CommerceSettings

_LEVELS_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_QUIET_LOGGERS = ("protean", "asyncio", "httpx", "uvicorn.access")

_MAX_LOG_BYTES = 10 * 1024 * 1024


def get_log_level(environment: str) -> str:
    """LOG_LEVEL wins; otherwise the level follows the environment."""
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENVIRONMENT.get(environment.lower(), "INFO"))


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(level: str, log_dir: Path | None = None) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_handler(log_dir / "kalakart.log", level))
        root_logger.addHandler(_rotating_handler(log_dir / "kalakart_error.log", logging.ERROR))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_structlog(json_output: bool) -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: CommerceSettings | None = None, log_dir: Path | None = None) -> None:
    """Configure stdlib handlers and the structlog chain for ``settings``."""
    settings = settings or CommerceSettings.from_env()
    environment = settings.environment.lower()

    setup_stdlib_logging(get_log_level(environment), log_dir)
    setup_structlog(json_output=environment in ("production", "staging"))


def bind_request_context(path: str, request_id: str | None = None) -> str:
    """Start a fresh log context for one request and return its id."""
    request_id = request_id or uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, path=path)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
