#!/usr/bin/env python3
"""
Operator performance benchmarks.

Measures throughput of the chunking and drop-while operators.
"""

import asyncio
import os
import time
from typing import Any

from stream_reshape import ChunkTransform, DropWhileTransform, Mode


async def benchmark_chunk_binary(iterations: int = 1000) -> dict[str, Any]:
    """Benchmark binary chunking of 4 KiB batches into 1000-byte groups."""
    batches = [os.urandom(4096) for _ in range(iterations)]
    chunk = ChunkTransform(1000)

    async def byte_stream():
        for batch in batches:
            yield batch

    start = time.perf_counter()
    groups = []
    async for group in chunk.transform(byte_stream()):
        groups.append(group)
    elapsed = time.perf_counter() - start

    units = sum(len(b) for b in batches)
    return {
        "name": "ChunkTransform(binary)",
        "iterations": iterations,
        "groups_emitted": len(groups),
        "elapsed_seconds": elapsed,
        "throughput_ups": units / elapsed,
        "latency_us": (elapsed / iterations) * 1_000_000,
    }


async def benchmark_chunk_object(iterations: int = 100_000) -> dict[str, Any]:
    """Benchmark object chunking into groups of 64."""
    chunk = ChunkTransform(64, mode=Mode.OBJECT)

    async def item_stream():
        for i in range(iterations):
            yield {"id": i}

    start = time.perf_counter()
    groups = []
    async for group in chunk.transform(item_stream()):
        groups.append(group)
    elapsed = time.perf_counter() - start

    return {
        "name": "ChunkTransform(object)",
        "iterations": iterations,
        "groups_emitted": len(groups),
        "elapsed_seconds": elapsed,
        "throughput_ups": iterations / elapsed,
        "latency_us": (elapsed / iterations) * 1_000_000,
    }


async def benchmark_drop_while(iterations: int = 100_000) -> dict[str, Any]:
    """Benchmark dropping the first half of an object stream."""
    half = iterations // 2
    drop = DropWhileTransform(lambda v, i: v < half, mode=Mode.OBJECT)

    async def item_stream():
        for i in range(iterations):
            yield i

    start = time.perf_counter()
    passed = []
    async for item in drop.transform(item_stream()):
        passed.append(item)
    elapsed = time.perf_counter() - start

    return {
        "name": "DropWhileTransform(object)",
        "iterations": iterations,
        "items_passed": len(passed),
        "elapsed_seconds": elapsed,
        "throughput_ups": iterations / elapsed,
        "latency_us": (elapsed / iterations) * 1_000_000,
    }


async def run_benchmarks() -> None:
    """Run all benchmarks and print results."""
    print("=" * 60)
    print("Operator Benchmarks")
    print("=" * 60)
    print()

    benchmarks = [
        benchmark_chunk_binary,
        benchmark_chunk_object,
        benchmark_drop_while,
    ]

    for bench in benchmarks:
        result = await bench()
        print(f"{result['name']}:")
        print(f"  Iterations: {result['iterations']}")
        print(f"  Elapsed: {result['elapsed_seconds']:.4f}s")
        print(f"  Throughput: {result['throughput_ups']:.0f} units/sec")
        print(f"  Latency: {result['latency_us']:.2f} µs/item")
        print()


if __name__ == "__main__":
    asyncio.run(run_benchmarks())
