"""
Structured logging configuration for the XML emitter.

The library only obtains loggers; applications embedding it call
``configure_logging`` once at startup if they want its output rendered.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.typing import FilteringBoundLogger


def configure_logging(level: str = "INFO", log_format: str = "console") -> None:
    """
    Configure structlog and standard library logging.

    Args:
        level: Log level name
        log_format: ``console`` for human-readable output, ``json`` otherwise
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None) -> FilteringBoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
