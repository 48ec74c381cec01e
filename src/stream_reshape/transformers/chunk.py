"""
Fixed-size chunking operator.

Re-groups a byte or object stream into groups of exactly ``group_size``
units, flushing one final short group at end-of-stream.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from stream_reshape.telemetry import get_logger
from stream_reshape.transformers.base import (
    Mode,
    Transform,
    TransformOptions,
    parse_options,
)

logger = get_logger(__name__)


class ChunkOptions(TransformOptions):
    """Options for ChunkTransform."""

    group_size: int = Field(gt=0, strict=True, description="Units per group")


class ChunkTransform(Transform):
    """Transform that emits fixed-size groups of units.

    Binary groups are new ``bytes`` objects, independent of the buffers they
    were cut from. Object groups are lists holding the original elements.
    If the total input length is not a multiple of ``group_size``, the last
    group is shorter; a group is never empty.

    Example:
        >>> chunk = ChunkTransform(group_size=3, mode="object")
        >>> async for group in chunk.transform(source()):
        ...     print(group)
        [0, 1, 2]
        [3, 4]
    """

    options_model = ChunkOptions

    def __init__(self, group_size: int, mode: Mode | str = Mode.BINARY) -> None:
        """Initialize the chunker.

        Args:
            group_size: Number of units per emitted group
            mode: Binary or object mode

        Raises:
            InvalidConfiguration: If group_size is not a positive int or the
                mode is unknown
        """
        options = parse_options(ChunkOptions, group_size=group_size, mode=mode)
        super().__init__(options)
        self._group_size = options.group_size
        self._pending: bytearray | list[Any] = self._new_buffer()
        self._groups_out = 0

        logger.debug(
            "Chunk transform created",
            group_size=self._group_size,
            mode=self._mode.value,
        )

    @property
    def group_size(self) -> int:
        """Number of units per full group."""
        return self._group_size

    @property
    def pending(self) -> int:
        """Number of units buffered since the last emitted group."""
        return len(self._pending)

    def _new_buffer(self) -> bytearray | list[Any]:
        if self._mode is Mode.BINARY:
            return bytearray()
        return []

    def _process(self, data: Any) -> list[Any]:
        if self._mode is Mode.BINARY:
            return self._process_bytes(data)

        self._pending.append(data)
        if len(self._pending) < self._group_size:
            return []

        group = self._pending
        self._pending = []
        self._emitted(len(group))
        return [group]

    def _process_bytes(self, data: bytes | bytearray | memoryview) -> list[bytes]:
        if isinstance(data, memoryview) and not data.contiguous:
            data = data.tobytes()
        buffer = self._pending
        buffer += data

        size = self._group_size
        groups: list[bytes] = []
        start = 0
        while len(buffer) - start >= size:
            groups.append(bytes(buffer[start : start + size]))
            start += size

        if start:
            del buffer[:start]
            self._emitted(start, len(groups))
        return groups

    def _emitted(self, units: int, groups: int = 1) -> None:
        self._units_out += units
        self._groups_out += groups

    def _flush(self) -> list[Any]:
        if not self._pending:
            return []

        rest = self._pending
        self._pending = self._new_buffer()
        group = bytes(rest) if self._mode is Mode.BINARY else rest
        self._emitted(len(group))

        logger.debug("Flushed final group", size=len(group))
        return [group]

    def _discard(self) -> int:
        discarded = len(self._pending)
        self._pending = self._new_buffer()
        return discarded

    def get_stats(self) -> dict[str, Any]:
        """Get chunker statistics."""
        stats = super().get_stats()
        stats["group_size"] = self._group_size
        stats["groups_out"] = self._groups_out
        stats["pending"] = len(self._pending)
        return stats

    def __repr__(self) -> str:
        return (
            f"ChunkTransform(group_size={self._group_size}, "
            f"mode={self._mode.value}, pending={len(self._pending)})"
        )
