"""
dupsweep - structlog configuration.

Structured logs for the whole package. Logs go to stderr so that stdout
only carries the duplicate report.

Usage:
    from dupsweep.config.logging import configure_logging

    # At startup (CLI)
    configure_logging(level="DEBUG", json_format=False)

    # In modules
    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("event_name", key=value)

Environment:
    LOG_LEVEL: default level (INFO)
    LOG_FORMAT: "json" or "console" (console)
"""

import logging
import os
import sys
from typing import Optional

import structlog
from structlog.types import EventDict, WrappedLogger

from dupsweep import __version__

PACKAGE_LOGGER = "dupsweep"


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add app and version to every log entry."""
    event_dict["app"] = "dupsweep"
    event_dict["version"] = __version__
    return event_dict


def configure_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
    enable_colors: bool = False,
) -> None:
    """
    Configure structlog for dupsweep.

    Args:
        level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: $LOG_LEVEL or INFO)
        json_format: JSON logs if True, human-readable if False
            (default: $LOG_FORMAT == "json")
        enable_colors: Colorize console logs

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if json_format is None:
        json_format = os.getenv("LOG_FORMAT", "console").lower() == "json"

    log_level = getattr(logging, level.upper(), logging.INFO)

    # Package logger only, so embedding applications keep their root config
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=enable_colors))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
