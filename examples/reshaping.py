#!/usr/bin/env python3
"""
Stream reshaping example.

Skips a file header with DropWhileTransform, then cuts the body into
fixed-size records with ChunkTransform. The two stages are linked by
passing one operator's output iterator to the next.

Usage:
    STREAM_RESHAPE_LOG_LEVEL=DEBUG python examples/reshaping.py
"""

import asyncio

from stream_reshape import ChunkTransform, DropWhileTransform, Mode
from stream_reshape.telemetry import LogContext, StreamReshapeLogger, set_log_context


async def read_batches():
    """Simulate a byte source delivering uneven batches."""
    data = b"#header#" + bytes(range(48))
    for start in range(0, len(data), 5):
        yield data[start : start + 5]


async def main() -> None:
    """Run reshaping example."""
    StreamReshapeLogger.configure_from_env()
    set_log_context(LogContext(pipeline_id="example"))

    skip_header = DropWhileTransform(lambda v, i: i < 8)
    records = ChunkTransform(16)

    async for record in records.transform(skip_header.transform(read_batches())):
        print(record.hex(" "))

    print("-" * 50)

    # Object mode: batch ids into groups of four
    batcher = ChunkTransform(4, mode=Mode.OBJECT)
    for item_id in range(10):
        for group in batcher.feed(item_id):
            print("batch", group)
    for group in batcher.end():
        print("final batch", group)

    print(skip_header.get_stats())
    print(records.get_stats())


if __name__ == "__main__":
    asyncio.run(main())
