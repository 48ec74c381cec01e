"""Tests for ChunkTransform."""

from __future__ import annotations

import asyncio

import pytest

from stream_reshape import (
    ChunkTransform,
    InvalidConfiguration,
    Mode,
    StreamState,
    Transform,
)


async def async_list(items) -> list:
    """Helper to collect async iterator results."""
    result = []
    async for item in items:
        result.append(item)
    return result


async def create_async_iter(items: list):
    """Create async iterator from list."""
    for item in items:
        yield item


async def failing_iter(items: list, error: Exception):
    """Yield items, then raise."""
    for item in items:
        yield item
    raise error


class TestChunkConstruction:
    """Tests for ChunkTransform options."""

    def test_is_transform(self) -> None:
        """Test chunker implements the operator contract."""
        chunk = ChunkTransform(10)
        assert isinstance(chunk, Transform)
        assert chunk.group_size == 10
        assert chunk.mode is Mode.BINARY

    def test_mode_from_string(self) -> None:
        """Test mode accepts its string value."""
        chunk = ChunkTransform(10, mode="object")
        assert chunk.mode is Mode.OBJECT

    @pytest.mark.parametrize("group_size", [0, -1, -100])
    def test_non_positive_group_size(self, group_size: int) -> None:
        """Test zero or negative group sizes are rejected."""
        with pytest.raises(InvalidConfiguration) as exc_info:
            ChunkTransform(group_size)
        assert exc_info.value.field == "group_size"

    @pytest.mark.parametrize("group_size", [2.5, 10.0, "10", True, None])
    def test_non_integer_group_size(self, group_size: object) -> None:
        """Test non-integer group sizes are rejected."""
        with pytest.raises(InvalidConfiguration):
            ChunkTransform(group_size)  # type: ignore[arg-type]

    def test_unknown_mode(self) -> None:
        """Test unrecognized mode is rejected."""
        with pytest.raises(InvalidConfiguration) as exc_info:
            ChunkTransform(10, mode="text")
        assert exc_info.value.field == "mode"


class TestChunkObjectMode:
    """Tests for ChunkTransform in object mode."""

    @pytest.mark.asyncio
    async def test_chunk_exact_multiple(self, numbers: list[int]) -> None:
        """Test 100 items in groups of 10."""
        chunk = ChunkTransform(10, mode=Mode.OBJECT)

        groups = await async_list(chunk.transform(create_async_iter(numbers)))

        assert len(groups) == 10
        assert all(len(group) == 10 for group in groups)
        assert [item for group in groups for item in group] == numbers

    @pytest.mark.asyncio
    async def test_send_remaining_elements(self, numbers: list[int]) -> None:
        """Test the short final group carries the remainder."""
        chunk = ChunkTransform(8, mode=Mode.OBJECT)

        groups = await async_list(chunk.transform(create_async_iter(numbers)))

        assert len(groups) == 13
        assert all(len(group) == 8 for group in groups[:-1])
        assert groups[-1] == numbers[-4:]
        assert [item for group in groups for item in group] == numbers

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        """Test empty input produces no groups."""
        chunk = ChunkTransform(5, mode=Mode.OBJECT)

        groups = await async_list(chunk.transform(create_async_iter([])))

        assert groups == []
        assert chunk.state is StreamState.ENDED

    @pytest.mark.asyncio
    async def test_group_size_one(self) -> None:
        """Test group size 1 wraps every item."""
        chunk = ChunkTransform(1, mode=Mode.OBJECT)

        groups = await async_list(chunk.transform(create_async_iter(["a", "b"])))

        assert groups == [["a"], ["b"]]

    @pytest.mark.asyncio
    async def test_preserves_element_identity(self) -> None:
        """Test groups hold the original objects, not copies."""
        items = [{"id": i} for i in range(5)]
        chunk = ChunkTransform(2, mode=Mode.OBJECT)

        groups = await async_list(chunk.transform(create_async_iter(items)))

        flat = [item for group in groups for item in group]
        assert all(a is b for a, b in zip(flat, items))

    def test_push_surface(self) -> None:
        """Test feeding items one at a time."""
        chunk = ChunkTransform(3, mode=Mode.OBJECT)

        assert chunk.feed(1) == []
        assert chunk.feed(2) == []
        assert chunk.pending == 2
        assert chunk.feed(3) == [[1, 2, 3]]
        assert chunk.pending == 0
        assert chunk.feed(4) == []
        assert chunk.end() == [[4]]
        assert chunk.pending == 0

    def test_emitted_group_not_reused(self) -> None:
        """Test an emitted group is not mutated by later input."""
        chunk = ChunkTransform(2, mode=Mode.OBJECT)

        first = chunk.feed("a") + chunk.feed("b")
        chunk.feed("c")

        assert first == [["a", "b"]]

    def test_list_items_are_single_units(self) -> None:
        """Test list-valued items are not split in object mode."""
        chunk = ChunkTransform(2, mode=Mode.OBJECT)

        assert chunk.feed([1, 2, 3]) == []
        assert chunk.feed([4]) == [[[1, 2, 3], [4]]]


class TestChunkBinaryMode:
    """Tests for ChunkTransform in binary mode."""

    @pytest.mark.asyncio
    async def test_split_buffer_by_chunk(self, payload: bytes) -> None:
        """Test one 100-byte buffer becomes ten 10-byte groups."""
        chunk = ChunkTransform(10)

        groups = await async_list(chunk.transform(create_async_iter([payload])))

        assert len(groups) == 10
        for idx, group in enumerate(groups):
            assert isinstance(group, bytes)
            assert group == payload[idx * 10 : (idx + 1) * 10]

    @pytest.mark.asyncio
    async def test_last_buffer_smaller(self, payload: bytes) -> None:
        """Test the final group holds 100 mod 8 bytes."""
        chunk = ChunkTransform(8)

        groups = await async_list(chunk.transform(create_async_iter([payload])))

        assert len(groups) == 13
        assert all(len(group) == 8 for group in groups[:-1])
        assert groups[-1] == payload[-4:]
        assert b"".join(groups) == payload

    @pytest.mark.asyncio
    async def test_regroups_across_batches(self, payload: bytes) -> None:
        """Test units from several small batches are joined into groups."""
        batches = [payload[i : i + 3] for i in range(0, len(payload), 3)]
        chunk = ChunkTransform(7)

        groups = await async_list(chunk.transform(create_async_iter(batches)))

        assert b"".join(groups) == payload
        assert [len(g) for g in groups] == [7] * 14 + [2]

    @pytest.mark.asyncio
    async def test_accepts_bytes_like(self) -> None:
        """Test bytearray, memoryview and empty batches are accepted."""
        chunk = ChunkTransform(4)
        batches = [bytearray(b"ab"), b"", memoryview(b"cdef")]

        groups = await async_list(chunk.transform(create_async_iter(batches)))

        assert groups == [b"abcd", b"ef"]

    def test_accepts_strided_memoryview(self) -> None:
        """Test a non-contiguous view is chunked by its logical bytes."""
        chunk = ChunkTransform(2)
        view = memoryview(b"abcdefgh")[::2]

        assert chunk.feed(view) == [b"ac", b"eg"]
        assert chunk.state is StreamState.OPEN
        assert chunk.get_stats()["units_in"] == 4

    def test_groups_do_not_alias_input(self) -> None:
        """Test emitted groups are independent of the source buffer."""
        source = bytearray(b"abcdef")
        chunk = ChunkTransform(3)

        groups = chunk.feed(source)
        source[:] = b"xxxxxx"

        assert groups == [b"abc", b"def"]

    def test_large_burst_yields_many_groups(self) -> None:
        """Test a single large batch is cut into every full group at once."""
        chunk = ChunkTransform(4)

        groups = chunk.feed(b"0123456789")

        assert groups == [b"0123", b"4567"]
        assert chunk.pending == 2
        assert chunk.end() == [b"89"]

    def test_stats(self) -> None:
        """Test chunker statistics."""
        chunk = ChunkTransform(4)
        chunk.feed(b"0123456789")

        stats = chunk.get_stats()

        assert stats["units_in"] == 10
        assert stats["units_out"] == 8
        assert stats["groups_out"] == 2
        assert stats["pending"] == 2
        assert stats["state"] == "open"


class TestChunkTermination:
    """Tests for end-of-stream versus abort."""

    def test_flush_happens_once(self) -> None:
        """Test calling end twice flushes once."""
        chunk = ChunkTransform(3, mode=Mode.OBJECT)
        chunk.feed("a")

        assert chunk.end() == [["a"]]
        assert chunk.end() == []

    def test_abort_discards_pending(self) -> None:
        """Test abort drops the partial group without emitting it."""
        chunk = ChunkTransform(3, mode=Mode.OBJECT)
        chunk.feed("a")
        chunk.feed("b")

        chunk.abort()

        assert chunk.pending == 0
        assert chunk.state is StreamState.ABORTED

    @pytest.mark.asyncio
    async def test_upstream_error_discards_partial_group(self) -> None:
        """Test an upstream error propagates unchanged and nothing is flushed."""
        error = ValueError("upstream failed")
        chunk = ChunkTransform(3, mode=Mode.OBJECT)
        received = []

        with pytest.raises(ValueError) as exc_info:
            async for group in chunk.transform(failing_iter([1, 2, 3, 4, 5], error)):
                received.append(group)

        assert exc_info.value is error
        assert received == [[1, 2, 3]]
        assert chunk.state is StreamState.ABORTED
        assert chunk.pending == 0

    @pytest.mark.asyncio
    async def test_consumer_close_aborts(self) -> None:
        """Test closing the output stream early aborts the operator."""
        chunk = ChunkTransform(2, mode=Mode.OBJECT)
        stream = chunk.transform(create_async_iter([1, 2, 3, 4, 5]))

        assert await stream.__anext__() == [1, 2]
        await stream.aclose()

        assert chunk.state is StreamState.ABORTED
        assert chunk.pending == 0

    @pytest.mark.asyncio
    async def test_cancellation_aborts(self) -> None:
        """Test cancelling the consuming task aborts without a flush."""
        chunk = ChunkTransform(3, mode=Mode.OBJECT)
        started = asyncio.Event()
        received = []

        async def slow_source():
            yield "a"
            started.set()
            await asyncio.sleep(10)
            yield "b"

        async def consume() -> None:
            async for group in chunk.transform(slow_source()):
                received.append(group)

        task = asyncio.create_task(consume())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert received == []
        assert chunk.state is StreamState.ABORTED

    def test_sync_apply(self, numbers: list[int]) -> None:
        """Test the synchronous surface over a plain iterable."""
        chunk = ChunkTransform(30, mode=Mode.OBJECT)

        groups = list(chunk.apply(numbers))

        assert [len(g) for g in groups] == [30, 30, 30, 10]
