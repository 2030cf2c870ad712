"""
Structured logging configuration using structlog.

Console output in development, one JSON object per line elsewhere. Standard
library loggers (uvicorn, aiosqlite, fontTools) go through the same
processor chain, so request and sale context shows up on their lines too.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from shopdesk.config.settings import Settings, get_settings

HANDLER_NAME = "shopdesk"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "fontTools": logging.WARNING,
    "fpdf": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def app_context(settings: Settings) -> Processor:
    """Processor stamping every event with the app name, version and environment."""
    context = {
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_app_context


def money_as_text(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Render Decimal amounts as plain strings ("300.00", not "Decimal('300.00')")."""
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
    return event_dict


@contextmanager
def sale_context(sale_id: str, **extra: Any) -> Iterator[None]:
    """Bind ``sale_id`` to every log line emitted inside the block."""
    with structlog.contextvars.bound_contextvars(sale_id=sale_id, **extra):
        yield


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and route standard library logging through it."""
    settings = settings or get_settings()
    development = settings.environment == "development"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context(settings),
        money_as_text,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if development:
        final: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        final = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(settings.log_level)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
