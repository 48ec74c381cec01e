"""
Base abstractions for the stream operators.

Every operator works in exactly one of two modes, declared at construction:

- ``Mode.BINARY``: items are bytes-like batches, the atomic unit is one byte
- ``Mode.OBJECT``: every item is one opaque value, order-preserving

Each operator exposes the same state through two surfaces:

- push: ``feed(data)`` / ``end()`` / ``abort()`` return the outputs directly
- pull: ``async for out in op.transform(source)``, where nothing is pulled
  from upstream until the consumer asks for the next output
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from stream_reshape.errors import (
    InvalidConfiguration,
    ModeMismatch,
    StreamClosedError,
)
from stream_reshape.telemetry import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

logger = get_logger(__name__)

BYTES_LIKE = (bytes, bytearray, memoryview)

OptionsT = TypeVar("OptionsT", bound="TransformOptions")


class Mode(str, Enum):
    """Atomic-unit semantics of an operator."""

    BINARY = "binary"
    OBJECT = "object"


class StreamState(str, Enum):
    """Lifecycle of an operator's stream. ENDED and ABORTED are terminal."""

    OPEN = "open"
    ENDED = "ended"
    ABORTED = "aborted"


class TransformOptions(BaseModel):
    """Options shared by every operator."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: Mode = Field(default=Mode.BINARY, description="binary or object")


def parse_options(model: type[OptionsT], **options: Any) -> OptionsT:
    """Validate operator options, raising InvalidConfiguration on failure.

    Args:
        model: Options model to validate against
        **options: Raw option values

    Returns:
        Validated options

    Raises:
        InvalidConfiguration: If any option is missing, unknown or malformed
    """
    try:
        return model(**options)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or None
        actual = None if error["type"] == "missing" else error.get("input")
        raise InvalidConfiguration(
            f"Invalid {model.__name__} option: {error['msg']}",
            field=field,
            actual=repr(actual) if actual is not None else None,
        ) from exc


def unit_count(data: Any, mode: Mode) -> int:
    """Number of atomic units carried by one delivered item."""
    if mode is Mode.OBJECT:
        return 1
    if isinstance(data, memoryview):
        return data.nbytes
    return len(data)


class Transform(ABC):
    """Abstract single-input, single-output stream operator.

    Subclasses implement ``_process`` (one validated item in, outputs out),
    ``_flush`` (end-of-stream outputs) and ``_discard`` (drop pending state
    on abort). The base class owns mode checking and the stream lifecycle.
    """

    options_model: ClassVar[type[TransformOptions]] = TransformOptions

    def __init__(self, options: TransformOptions) -> None:
        """Initialize the operator.

        Args:
            options: Validated operator options
        """
        self._options = options
        self._mode = options.mode
        self._state = StreamState.OPEN
        self._units_in = 0
        self._units_out = 0

    @classmethod
    def from_options(cls, options: TransformOptions) -> Transform:
        """Create an operator from a validated options model."""
        if not isinstance(options, cls.options_model):
            raise InvalidConfiguration(
                f"{cls.__name__} expects {cls.options_model.__name__}",
                expected=cls.options_model.__name__,
                actual=type(options).__name__,
            )
        return cls(**options.model_dump())

    @property
    def name(self) -> str:
        """Operator name used in errors and logs."""
        return type(self).__name__

    @property
    def mode(self) -> Mode:
        """Declared mode."""
        return self._mode

    @property
    def options(self) -> TransformOptions:
        """Validated options."""
        return self._options

    @property
    def state(self) -> StreamState:
        """Current lifecycle state."""
        return self._state

    @property
    def closed(self) -> bool:
        """Whether the stream has ended or been aborted."""
        return self._state is not StreamState.OPEN

    def _check_unit(self, data: Any) -> None:
        """Check a delivered item against the declared mode.

        Raises:
            ModeMismatch: If the item's shape disagrees with the mode
        """
        is_binary = isinstance(data, BYTES_LIKE)
        if self._mode is Mode.BINARY and not is_binary:
            raise ModeMismatch(
                f"{self.name} in binary mode received {type(data).__name__}",
                expected_mode=self._mode.value,
                actual_type=type(data).__name__,
                operator=self.name,
            ).with_hint("declare mode='object' for non-bytes items")
        if self._mode is Mode.OBJECT and is_binary:
            raise ModeMismatch(
                f"{self.name} in object mode received {type(data).__name__}",
                expected_mode=self._mode.value,
                actual_type=type(data).__name__,
                operator=self.name,
            ).with_hint("declare mode='binary' for byte streams")

    def feed(self, data: Any) -> list[Any]:
        """Accept one item from upstream.

        In binary mode ``data`` is a bytes-like batch; in object mode it is
        a single unit.

        Args:
            data: Item delivered by upstream

        Returns:
            Outputs to push downstream, in order (possibly empty)

        Raises:
            StreamClosedError: If the stream already ended or was aborted
            ModeMismatch: If the item disagrees with the declared mode
        """
        if self._state is not StreamState.OPEN:
            raise StreamClosedError(
                f"{self.name} received data after the stream was {self._state.value}",
                operator=self.name,
                state=self._state.value,
            )

        try:
            self._check_unit(data)
            self._units_in += unit_count(data, self._mode)
            return self._process(data)
        except BaseException:
            self.abort()
            raise

    def end(self) -> list[Any]:
        """Signal end-of-stream and return the final outputs.

        The flush runs exactly once; later calls return an empty list.

        Raises:
            StreamClosedError: If the stream was aborted
        """
        if self._state is StreamState.ENDED:
            return []
        if self._state is StreamState.ABORTED:
            raise StreamClosedError(
                f"{self.name} cannot end an aborted stream",
                operator=self.name,
                state=self._state.value,
            )

        outputs = self._flush()
        self._state = StreamState.ENDED
        logger.debug(
            "Stream ended",
            operator=self.name,
            units_in=self._units_in,
            units_out=self._units_out,
        )
        return outputs

    def abort(self) -> None:
        """Terminate the stream without a final flush.

        Pending units are discarded. Calling this on a closed stream is a
        no-op.
        """
        if self._state is not StreamState.OPEN:
            return

        discarded = self._discard()
        self._state = StreamState.ABORTED
        if discarded:
            logger.warning(
                "Stream aborted, pending units discarded",
                operator=self.name,
                discarded=discarded,
            )
        else:
            logger.debug("Stream aborted", operator=self.name)

    async def transform(self, source: AsyncIterable[Any]) -> AsyncIterator[Any]:
        """Transform an async stream.

        Upstream errors, consumer cancellation and early ``aclose()`` abort
        the operator and propagate unchanged; only clean exhaustion of
        ``source`` triggers the end-of-stream flush.

        Args:
            source: Upstream async iterable

        Yields:
            Outputs in order
        """
        try:
            async for data in source:
                for output in self.feed(data):
                    yield output
        except BaseException:
            self.abort()
            raise

        for output in self.end():
            yield output

    def apply(self, source: Iterable[Any]) -> Iterator[Any]:
        """Synchronous counterpart of ``transform`` for plain iterables."""
        try:
            for data in source:
                yield from self.feed(data)
        except BaseException:
            self.abort()
            raise

        yield from self.end()

    def get_stats(self) -> dict[str, Any]:
        """Get operator statistics.

        Returns:
            Dict with statistics
        """
        return {
            "operator": self.name,
            "mode": self._mode.value,
            "state": self._state.value,
            "units_in": self._units_in,
            "units_out": self._units_out,
        }

    @abstractmethod
    def _process(self, data: Any) -> list[Any]:
        """Process one mode-checked item."""
        ...

    @abstractmethod
    def _flush(self) -> list[Any]:
        """Produce end-of-stream outputs."""
        ...

    @abstractmethod
    def _discard(self) -> int:
        """Drop pending state; return the number of units discarded."""
        ...

    def __repr__(self) -> str:
        return f"{self.name}(mode={self._mode.value}, state={self._state.value})"
