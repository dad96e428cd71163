"""
Structured logging setup with structlog
"""
import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def add_severity_level(_logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """add severity field for cloud logging compatibility"""
    if method_name == "warning":
        event_dict["severity"] = "WARNING"
    else:
        event_dict["severity"] = method_name.upper()
    return event_dict


def setup_logging(log_level: str = "INFO", log_format: str = "json", is_debug: bool = False) -> None:
    """
    Configure structured logging

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: "json" for machine-readable output, "console" for humans
        is_debug: Debug mode always renders to the console
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_severity_level,
    ]

    if is_debug or log_format == "console":
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a logger for a module

    Args:
        name: Module name

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
