"""
structlog setup for the task tracker.

Debug runs render colored console lines; every other environment emits one
JSON object per event. Request-scoped values (request id, acting user) are
carried in contextvars and merged into each event.
"""

import logging
import sys
from typing import Any

import structlog
from app.core.settings import settings

# Third-party loggers and the level they are held at outside of debug
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "slowapi": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


def _use_console_renderer() -> bool:
    return settings.app_debug and not settings.testing


def configure_logging() -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if _use_console_renderer():
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.app_debug else logging.INFO,
    )
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
    if _use_console_renderer():
        # Show SQL while developing locally
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)


def bind_actor(actor_id: int, role: str) -> None:
    """Attach the acting user to every event logged for the rest of the request."""
    structlog.contextvars.bind_contextvars(actor_id=actor_id, actor_role=role)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """
    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("member_added", project_id=1, user_id=7)
    """
    return structlog.get_logger(name)
