"""
Predicate-gated drop-while operator.

Discards the leading run of units for which a predicate holds, then passes
every remaining unit through unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import Field

from stream_reshape.telemetry import get_logger
from stream_reshape.transformers.base import (
    Mode,
    Transform,
    TransformOptions,
    parse_options,
    unit_count,
)

logger = get_logger(__name__)

Predicate = Callable[[Any, int], Any]


class DropState(str, Enum):
    """Drop-while state. PASSING_THROUGH is terminal."""

    DROPPING = "dropping"
    PASSING_THROUGH = "passing_through"


class DropWhileOptions(TransformOptions):
    """Options for DropWhileTransform."""

    predicate: Callable[[Any, int], Any] = Field(
        description="Called as predicate(value, index) while dropping"
    )


class DropWhileTransform(Transform):
    """Transform that drops units while a predicate holds.

    The predicate receives each unit and its zero-based index. In binary
    mode the unit is a one-byte ``bytes`` object. The first unit for which
    the predicate is falsy is forwarded and the operator switches to
    pass-through for good: the predicate is never called again.

    Example:
        >>> drop = DropWhileTransform(lambda v, i: v <= 50, mode="object")
        >>> [v async for v in drop.transform(numbers())]
        [51, 52, ...]
    """

    options_model = DropWhileOptions

    def __init__(self, predicate: Predicate, mode: Mode | str = Mode.BINARY) -> None:
        """Initialize the operator.

        Args:
            predicate: Function of (value, index) deciding whether to drop
            mode: Binary or object mode

        Raises:
            InvalidConfiguration: If predicate is not callable or the mode
                is unknown
        """
        options = parse_options(DropWhileOptions, predicate=predicate, mode=mode)
        super().__init__(options)
        self._predicate = options.predicate
        self._drop_state = DropState.DROPPING
        self._index = 0
        self._dropped = 0
        self._predicate_calls = 0

        logger.debug("Drop-while transform created", mode=self._mode.value)

    @property
    def drop_state(self) -> DropState:
        """Whether the operator is still dropping."""
        return self._drop_state

    @property
    def index(self) -> int:
        """Number of units observed so far."""
        return self._index

    def _should_drop(self, value: Any) -> bool:
        self._predicate_calls += 1
        result = self._predicate(value, self._index)
        self._index += 1
        if result:
            self._dropped += 1
            return True

        self._drop_state = DropState.PASSING_THROUGH
        logger.debug(
            "Passing through",
            operator=self.name,
            index=self._index - 1,
            dropped=self._dropped,
        )
        return False

    def _process(self, data: Any) -> list[Any]:
        if self._drop_state is DropState.PASSING_THROUGH:
            count = unit_count(data, self._mode)
            if not count:
                return []
            self._index += count
            self._units_out += count
            return [data]

        if self._mode is Mode.OBJECT:
            if self._should_drop(data):
                return []
            self._units_out += 1
            return [data]

        raw = data if isinstance(data, bytes) else bytes(data)
        for offset in range(len(raw)):
            if not self._should_drop(raw[offset : offset + 1]):
                rest = raw[offset:]
                self._index += len(rest) - 1
                self._units_out += len(rest)
                return [rest]
        return []

    def _flush(self) -> list[Any]:
        return []

    def _discard(self) -> int:
        return 0

    def get_stats(self) -> dict[str, Any]:
        """Get operator statistics."""
        stats = super().get_stats()
        stats["drop_state"] = self._drop_state.value
        stats["dropped"] = self._dropped
        stats["predicate_calls"] = self._predicate_calls
        return stats

    def __repr__(self) -> str:
        return (
            f"DropWhileTransform(mode={self._mode.value}, "
            f"drop_state={self._drop_state.value}, index={self._index})"
        )
