"""Structured logging setup.

Library modules only call ``structlog.get_logger()``; an application embedding
the resolver calls configure_logging() once at startup.
"""
import logging
import sys

import structlog

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(log_level: str = "info") -> None:
    """Configure structlog to emit JSON lines through stdlib logging.

    Args:
        log_level: One of debug, info, warn, warning, error
    """
    try:
        level = _LEVELS[log_level.lower()]
    except KeyError:
        raise ValueError(f"Invalid log level: {log_level}") from None

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
