"""
Telemetry module for stream-reshape.

Provides structured logging for the stream operators.
"""

from stream_reshape.telemetry.logger import (
    JsonFormatter,
    LogContext,
    LoggingConfig,
    LogLevel,
    StreamReshapeLogger,
    TextFormatter,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
)

__all__ = [
    "JsonFormatter",
    "LogContext",
    "LogLevel",
    "LoggingConfig",
    "StreamReshapeLogger",
    "TextFormatter",
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "set_log_context",
]
