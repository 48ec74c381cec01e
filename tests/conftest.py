"""Root pytest fixtures for stream-reshape tests."""

from __future__ import annotations

import random

import pytest

from stream_reshape.telemetry import clear_log_context


@pytest.fixture
def numbers() -> list[int]:
    """The integers 0..99, delivered one per item in object mode."""
    return list(range(100))


@pytest.fixture
def payload() -> bytes:
    """100 reproducible random bytes."""
    return random.Random(1234).randbytes(100)


@pytest.fixture(autouse=True)
def _reset_log_context() -> None:
    """Keep logging context from leaking between tests."""
    clear_log_context()
