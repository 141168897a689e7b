"""
Deep nested runs with a shared counter.

Each run below the configured depth launches two nested runs and waits
for neither; the root result still accounts for every leaf because the
engine waits for the whole execution tree.

Run:
    PYTHONPATH=src python examples/nested_fanout.py
"""

import asyncio
from time import perf_counter

from pyconduit import Pipeline

MAX_DEPTH = 8


async def split(path: str, ctx):
    """Branch until MAX_DEPTH, then report the leaf path."""
    await asyncio.sleep(0.001)
    if ctx.depth < MAX_DEPTH:
        ctx.launch(path + "0")
        ctx.launch(path + "1")
        return ctx.terminate()
    ctx.extra["leaves"] += 1
    return ctx.terminate(path)


async def main():
    """Run the fan-out example."""
    extra = {"leaves": 0}
    start = perf_counter()
    result = await Pipeline([split], name="fanout").execute("", extra)
    elapsed = perf_counter() - start

    print(f"ok={result.ok} leaves={len(result.data)} counted={extra['leaves']}")
    print(f"first={result.data[0]!r} last={result.data[-1]!r}")
    print(f"elapsed: {elapsed:.3f}s (leaves wait concurrently)")


if __name__ == "__main__":
    asyncio.run(main())
