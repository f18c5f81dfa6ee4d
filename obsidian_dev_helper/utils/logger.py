"""
Obsidian Dev Helper Structured Logging Module.

Provides consistent, structured logging throughout the application.
Requires Python 3.11+.
"""

import atexit
import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.types import Processor

from obsidian_dev_helper.utils.config import Settings, get_settings

# Log file opened by configure_logging, if any
_log_file: TextIO | None = None


def _app_context(settings: Settings) -> Processor:
    """Build a processor that adds application context to all log entries."""

    def add_app_context(
        logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["app"] = settings.app_name
        event_dict["version"] = settings.app_version
        return event_dict

    return add_app_context


def close_log_file() -> None:
    """Close the log file opened by configure_logging."""
    global _log_file

    if _log_file is not None:
        _log_file.close()
        _log_file = None


atexit.register(close_log_file)


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure structured logging for the application.

    Call this once at application startup. Logs go to stderr so they
    never interleave with the tagged build output on stdout.
    """
    global _log_file

    settings = settings or get_settings()
    level = getattr(logging, settings.logging.level.upper())

    # Common processors for all output formats
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        _app_context(settings),
    ]

    if settings.logging.format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=settings.logging.file_path is None and sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    close_log_file()
    if settings.logging.file_path is not None:
        _log_file = settings.logging.file_path.open("a", encoding="utf-8")
        logger_factory = structlog.PrintLoggerFactory(file=_log_file)
    else:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    # Suppress noisy loggers
    logging.getLogger("watchdog").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class LoggerMixin:
    """
    Mixin class to add logging capability to any class.

    Usage:
        class MyClass(LoggerMixin):
            def my_method(self):
                self.log.info("doing something", key="value")
    """

    @property
    def log(self) -> structlog.stdlib.BoundLogger:
        """Get logger bound to this class name."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
