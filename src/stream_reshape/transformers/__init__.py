"""
Transformers - Stateful stream-reshaping operators.

- ChunkTransform: Re-groups units into fixed-size groups
- DropWhileTransform: Drops a leading run of units, then passes through

Operators are single-input, single-output stages; linking them into a
pipeline is left to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from stream_reshape.errors import InvalidConfiguration
from stream_reshape.transformers.base import (
    Mode,
    StreamState,
    Transform,
    TransformOptions,
    parse_options,
)
from stream_reshape.transformers.chunk import ChunkOptions, ChunkTransform
from stream_reshape.transformers.drop_while import (
    DropState,
    DropWhileOptions,
    DropWhileTransform,
)

_TRANSFORMS: dict[str, type[Transform]] = {
    "chunk": ChunkTransform,
    "drop_while": DropWhileTransform,
}


def create_transform(config: Mapping[str, Any]) -> Transform:
    """Create an operator from a configuration mapping.

    Args:
        config: Mapping with a ``type`` key ("chunk" or "drop_while") and
            the operator's options

    Returns:
        Configured operator

    Raises:
        InvalidConfiguration: If the type is unknown or options are invalid
    """
    options = dict(config)
    kind = options.pop("type", None)
    transform_cls = _TRANSFORMS.get(kind) if isinstance(kind, str) else None
    if transform_cls is None:
        raise InvalidConfiguration(
            f"Unknown transform type: {kind!r}",
            field="type",
            expected=sorted(_TRANSFORMS),
            actual=repr(kind),
        )

    return transform_cls.from_options(
        parse_options(transform_cls.options_model, **options)
    )


__all__ = [
    "ChunkOptions",
    "ChunkTransform",
    "DropState",
    "DropWhileOptions",
    "DropWhileTransform",
    "Mode",
    "StreamState",
    "Transform",
    "TransformOptions",
    "create_transform",
]
