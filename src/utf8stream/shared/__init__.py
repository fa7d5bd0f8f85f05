"""Shared utilities for utf8stream.

This module provides configuration objects, result and diagnostic types,
the exception hierarchy and logging helpers used across all layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ConsoleConfig,
    GlobalConfig,
    ReaderConfig,
    Utf8StreamConfig,
    WriterConfig,
)
from .errors import (
    ConsoleCodePageError,
    EndOfInput,
    MalformedSequenceError,
    TokenParseError,
    Utf8StreamError,
)
from .logging import (
    StreamLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ReaderStats,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConsoleConfig",
    "GlobalConfig",
    "ReaderConfig",
    "Utf8StreamConfig",
    "WriterConfig",
    "ConsoleCodePageError",
    "EndOfInput",
    "MalformedSequenceError",
    "TokenParseError",
    "Utf8StreamError",
    "StreamLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ReaderStats",
]
