"""Shared utilities for the UTF-8 engine.

This module provides the configuration objects, result types, exception
hierarchy and logging helpers used by every other layer.
"""

from .config import (
    BufferConfig,
    CodecConfig,
    ConfigError,
    ConfigValidationError,
    EngineConfig,
    ErrorPolicy,
    GlobalConfig,
)
from .errors import (
    InvalidArgumentError,
    InvalidSequenceError,
    OutOfBoundsError,
    OutOfMemoryError,
    Utf8Error,
)
from .logging import (
    EngineLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DecodeResult,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "BufferConfig",
    "CodecConfig",
    "ConfigError",
    "ConfigValidationError",
    "EngineConfig",
    "ErrorPolicy",
    "GlobalConfig",
    "InvalidArgumentError",
    "InvalidSequenceError",
    "OutOfBoundsError",
    "OutOfMemoryError",
    "Utf8Error",
    "EngineLogger",
    "configure_logging",
    "get_logger",
    "DecodeResult",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
