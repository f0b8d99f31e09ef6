"""structlog setup."""

from __future__ import annotations

import logging

import structlog

from vaultdav.config import LoggingConfig, get_settings


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure structlog for console or JSON output.

    Without ``config`` the ``logging`` section of ``get_settings()`` is used,
    so ``VAULTDAV_LOGGING__*`` variables apply.
    """
    config = config or get_settings().logging
    level = logging.getLevelName(config.level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if config.json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
