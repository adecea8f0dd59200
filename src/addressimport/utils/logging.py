"""
Structured logging for the import, built on structlog.

Log lines are printed straight to a stream (stderr by default) so that
the report and outcome printed on stdout stay machine-readable. The stdlib
logging module is only used for its level names.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.typing import FilteringBoundLogger, Processor


def level_number(level: str) -> int:
    """Numeric value of a level name; unknown names fall back to INFO."""
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Minimum level to emit (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Render one JSON object per line instead of console text.
        stream: Destination, defaults to sys.stderr.
    """
    out = stream or sys.stderr

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=out.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_number(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Module logger; call as get_logger(__name__)."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind values to every log line emitted inside the block.

    Example:
        with log_context(source="psgc_2024.csv"):
            log.info("Validating rows")  # carries source=psgc_2024.csv
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
