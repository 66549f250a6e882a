"""structlog setup for aggregation runs.

Console rendering locally, one JSON object per line in production. Every
event carries whatever run context (tenant, period) is currently bound.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from vat_declaration.config import Settings, get_settings


def _engine_context(settings: Settings) -> Processor:
    """Stamp JSON events with the engine name and deployment environment."""
    engine, environment = settings.app_name, settings.environment.value

    def add_engine_context(
        logger: Any, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("engine", engine)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_engine_context


def build_processors(settings: Settings) -> list[Processor]:
    """Processor chain for the configured log format."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.log_format == "json":
        return processors + [
            _engine_context(settings),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return processors + [
        structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
    ]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the root stdlib logger.

    Call once at startup, before the first aggregation run. Rendered lines
    go to stdout and, when ``log_file`` is set, to that file as well.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.value)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    root = logging.getLogger()
    # basicConfig is a no-op once the root logger has handlers
    root.setLevel(level)

    if settings.log_file:
        root.addHandler(_file_handler(settings.log_file, level))


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Structured logger for a module, typically ``get_logger(__name__)``."""
    return structlog.stdlib.get_logger(name)


@contextmanager
def log_context(**run_context: Any) -> Iterator[None]:
    """Bind run context (tenant, period, legal entity) for a block.

    Values bound outside the block, including ones it shadows, are restored
    on exit::

        with log_context(tenant_id=tenant_id, period_start="2026-01-01"):
            logger.info("aggregation_started")
    """
    with structlog.contextvars.bound_contextvars(**run_context):
        yield
