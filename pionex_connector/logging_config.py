"""
Structured logging setup.

All modules log through structlog (``structlog.get_logger(__name__)``); this
module routes those events to the stdlib logging backend with either a JSON
or a console renderer.
"""

import logging
from typing import Union

import structlog

from pionex_connector.config.models import LogFormat, LogLevel


def configure_logging(
    level: Union[LogLevel, str] = LogLevel.INFO,
    fmt: Union[LogFormat, str] = LogFormat.JSON,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        fmt: "json" for machine-readable output, "text" for a console renderer.
    """
    level_name = LogLevel(str(getattr(level, "value", level)).upper()).value
    log_format = LogFormat(str(getattr(fmt, "value", fmt)).lower())

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == LogFormat.JSON
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name),
    )

    # aiohttp access noise
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
