"""Logging configuration shared by every context.

Records flow through the standard library root logger so that uvicorn,
SQLAlchemy and storefront code end up in the same handlers. structlog renders
them: readable console lines locally, one JSON object per line in deployed
environments. Request-scoped fields (request id, route, caller) are carried in
contextvars and merged into every line logged while a request is served.
"""

import logging
import logging.handlers
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

from shared.config import Settings, get_settings

DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
JSON_ENVIRONMENTS = ("production", "staging")

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

NOISY_LOGGERS = ("urllib3", "asyncio", "multipart")


def resolve_level(settings: Settings) -> str:
    """An explicit LOG_LEVEL wins; otherwise the environment decides."""
    if settings.log_level:
        return settings.log_level.upper()
    return DEFAULT_LEVELS.get(settings.environment.lower(), "INFO")


def _file_handler(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _route_stdlib(settings: Settings, level: str) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [logging.StreamHandler(sys.stdout)]

    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        root.addHandler(_file_handler(log_dir / "storefront.log", level))
        root.addHandler(_file_handler(log_dir / "storefront_error.log", logging.ERROR))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.database_echo else logging.WARNING)


def _render_with(settings: Settings):
    if settings.environment.lower() in JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(settings: Settings | None = None) -> None:
    """Install handlers and the structlog pipeline for the whole process."""
    settings = settings or get_settings()
    _route_stdlib(settings, resolve_level(settings))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            ),
            _render_with(settings),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def request_context(request_id: str, method: str, path: str) -> Iterator[None]:
    """Scope log fields to one HTTP request; nothing leaks into the next one."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)
    try:
        yield
    finally:
        structlog.contextvars.clear_contextvars()


def bind_caller(user_id: str) -> None:
    """Attach the authenticated caller to the rest of the request's log lines."""
    structlog.contextvars.bind_contextvars(user_id=user_id)
