"""structlog configuration shared by the scheduler, the runner and the CLI."""
from __future__ import annotations

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor


def configure_logging(level: str = "INFO", json_format: Optional[bool] = None) -> None:
    """Configure structured logging once at process start.

    ``json_format=None`` picks JSON when stderr is not a terminal and the
    coloured console renderer otherwise.  Log lines go to stderr so the JSON
    printed by the CLI on stdout stays machine readable.
    """

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"unknown log level: {level!r}")

    if json_format is None:
        json_format = not sys.stderr.isatty()

    processors: list[Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level, force=True)


def get_logger(name: Optional[str] = None) -> Any:
    return structlog.get_logger(name)
