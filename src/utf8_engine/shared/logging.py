"""Structured logging utilities for the UTF-8 engine.

Loggers returned here attach the emitting component and an optional
correlation ID to every record, so output from the codec, the string buffer
and the command-line front end can be told apart and traced per request.
"""

import logging
from typing import Any, Dict, Optional

DEFAULT_FORMAT = "%(levelname)s %(name)s [%(component)s] %(message)s"


class EngineLogger:
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize the logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name; defaults to the last dotted part of name
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a record at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with correlation info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with correlation info."""
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log error message with correlation info."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)


class _ComponentDefaultsFilter(logging.Filter):
    """Fill in component fields for records from loggers outside this package."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        if not hasattr(record, "correlation_id"):
            record.correlation_id = None
        return True


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> EngineLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        EngineLogger instance
    """
    return EngineLogger(name, correlation_id, component)


def configure_logging(level: str = "WARNING", fmt: str = DEFAULT_FORMAT) -> None:
    """Install a stderr handler on the package logger.

    Repeated calls only update the level, they never stack handlers.

    Args:
        level: Standard logging level name
        fmt: Format string; may reference ``component`` and ``correlation_id``
    """
    package_logger = logging.getLogger("utf8_engine")
    package_logger.setLevel(level)

    for handler in package_logger.handlers:
        if getattr(handler, "_utf8_engine_handler", False):
            handler.setLevel(level)
            return

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    handler.addFilter(_ComponentDefaultsFilter())
    handler._utf8_engine_handler = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
