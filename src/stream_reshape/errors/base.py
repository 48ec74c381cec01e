"""
Base error classes for stream-reshape.

Provides a small layered error hierarchy:
- StreamReshapeError: Base class for all library errors
- InvalidConfiguration: Malformed operator options, raised at construction
- ModeMismatch: A delivered item disagrees with the declared mode
- StreamClosedError: Data delivered after end-of-stream or abort
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorContext:
    """Structured error context for diagnostics."""

    field_path: str | None = None
    """Path to the problematic option (e.g., 'group_size')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'config', 'stream')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.field_path:
            parts.append(f"at '{self.field_path}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class StreamReshapeError(Exception):
    """Base class for all stream-reshape errors.

    Attributes:
        message: Human-readable error message
        context: Structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> StreamReshapeError:
        """Add a hint to this error."""
        self.context.hint = hint
        self.args = (self._format_message(),)
        return self


class InvalidConfiguration(StreamReshapeError):
    """Malformed operator options.

    Raised synchronously at construction, before any unit is processed:
    - group_size not a positive integer
    - predicate not callable
    - unrecognized mode
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        field: str | None = None,
        expected: Any = None,
        actual: Any = None,
    ) -> None:
        ctx = context or ErrorContext(source="config")
        if field:
            ctx.field_path = field
        if expected is not None:
            ctx.details["expected"] = expected
        if actual is not None:
            ctx.details["actual"] = actual
        super().__init__(message, ctx)
        self.field = field
        self.expected = expected
        self.actual = actual


class ModeMismatch(StreamReshapeError):
    """A delivered item's shape disagrees with the operator's mode.

    Raised at the first offending item. The stage is aborted; whether to
    restart it is up to the pipeline owner.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        expected_mode: str | None = None,
        actual_type: str | None = None,
        operator: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="stream")
        if expected_mode:
            ctx.details["expected_mode"] = expected_mode
        if actual_type:
            ctx.details["actual_type"] = actual_type
        if operator:
            ctx.details["operator"] = operator
        super().__init__(message, ctx)
        self.expected_mode = expected_mode
        self.actual_type = actual_type
        self.operator = operator


class StreamClosedError(StreamReshapeError):
    """Data was delivered to an operator that already ended or aborted."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        operator: str | None = None,
        state: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="stream")
        if operator:
            ctx.details["operator"] = operator
        if state:
            ctx.details["state"] = state
        super().__init__(message, ctx)
        self.operator = operator
        self.state = state
