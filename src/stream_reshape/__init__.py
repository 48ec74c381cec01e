"""
stream-reshape: backpressure-aware stream-reshaping operators.

Two narrowly scoped operators for pipelines that process bytes or objects
incrementally: a fixed-size chunker and a predicate-gated drop-while
filter. Both work in binary or object mode and can be driven by pushing
items in or by pulling from an async iterator.
"""
from __future__ import annotations

from stream_reshape.errors import (
    InvalidConfiguration,
    ModeMismatch,
    StreamClosedError,
    StreamReshapeError,
)
from stream_reshape.transformers import (
    ChunkTransform,
    DropState,
    DropWhileTransform,
    Mode,
    StreamState,
    Transform,
    create_transform,
)

__version__ = "0.1.0"

__all__ = [
    # Operators
    "ChunkTransform",
    "DropState",
    "DropWhileTransform",
    "Mode",
    "StreamState",
    "Transform",
    "create_transform",
    # Errors
    "InvalidConfiguration",
    "ModeMismatch",
    "StreamClosedError",
    "StreamReshapeError",
    # Version
    "__version__",
]
