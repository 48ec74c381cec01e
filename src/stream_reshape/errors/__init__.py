"""Error hierarchy for stream-reshape."""

from stream_reshape.errors.base import (
    ErrorContext,
    InvalidConfiguration,
    ModeMismatch,
    StreamClosedError,
    StreamReshapeError,
)

__all__ = [
    "ErrorContext",
    "InvalidConfiguration",
    "ModeMismatch",
    "StreamClosedError",
    "StreamReshapeError",
]
