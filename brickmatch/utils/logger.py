# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Structured Logging
JSON-formatted logs via structlog. Per-set runs bind set_id into the
context so every stage decision can be traced back to its roster.
"""

import logging
import sys
from enum import Enum
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from brickmatch.config import get_settings


def _add_app_info(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    """Inject application name into every log entry."""
    event_dict["app"] = "brickmatch"
    return event_dict


def _enum_values(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    """Log stage and conflict labels as their plain string values."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_logging() -> None:
    """
    Configure structlog for JSON output in batch runs and
    human-readable console output in development (DEBUG level).
    Called once by the batch driver before matching starts.
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_app_info,
        _enum_values,
    ]

    if settings.log_level == "DEBUG":
        processors: list[Processor] = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True)
        ]
    else:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )


def get_logger(name: str = "brickmatch") -> structlog.BoundLogger:
    """
    Return a structlog bound logger.

    Usage:
        log = get_logger(__name__)
        log.info("stage_complete", stage="name-normalized", paired=3)

    To bind set_id for a per-set run:
        with structlog.contextvars.bound_contextvars(set_id=set_id):
            log.info("set_match_start")
    """
    return structlog.get_logger(name)
