"""
Pipeline - ordered handler chain with nested-run aggregation.

This module provides Pipeline, the single entry point of the engine.

Features supported:
- Execution of the handlers in the order given at construction
- Handlers can run nested executions of the same pipeline
- Handlers can transform data for downstream handlers
- Early termination, with an optional result
- Error reporting, including errors from nested executions
- Reporting data returned from terminating handlers

Design: Single type that holds configuration AND provides execution.
Per-execution state lives in Run, so one Pipeline can serve many
concurrent execute() calls.
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Generic, TypeVar

from pyconduit.core.handler import Handler
from pyconduit.executor.run import Run
from pyconduit.models import PipelineResult

logger = logging.getLogger(__name__)

__all__ = ["Pipeline", "DEFAULT_BATCH_LIMIT"]

T = TypeVar("T")  # Input data type
R = TypeVar("R")  # Result type
E = TypeVar("E")  # Extra context type

DEFAULT_BATCH_LIMIT = 20
"""Root executions started concurrently per batch by execute_many()."""


class Pipeline(Generic[T, R, E]):
    """
    Execute a value through an ordered chain of handlers.

    Usage:
        ```python
        async def double_it(value, ctx):
            if ctx.depth > 0:
                return ctx.terminate(value * 2)
            ctx.launch(10)
            return value * 2

        def finish(value, ctx):
            return ctx.terminate(value * 2)

        pipeline = Pipeline([double_it, finish])
        result = await pipeline.execute(3)
        # result.ok is True, result.data holds 12 and the nested run's output
        ```
    """

    def __init__(
        self,
        handlers: Sequence[Handler] | None = None,
        *,
        name: str | None = None,
        keep_none_results: bool = False,
    ):
        """
        Initialize pipeline with its handler chain.

        After construction the pipeline is ready to use. The handler chain
        is fixed for the pipeline's lifetime.

        Args:
            handlers: Handlers in execution order (copied)
            name: Name used in log messages and exposed to handlers
            keep_none_results: Report terminate(None) results in data.
                By default None results are dropped like missing ones.
        """
        self._handlers: tuple[Handler, ...] = tuple(handlers or ())
        self.name = name or "pipeline"
        self.keep_none_results = keep_none_results

    @property
    def handlers(self) -> tuple[Handler, ...]:
        """Handlers in execution order (read-only)."""
        return self._handlers

    async def execute(self, input: T, extra: E | None = None) -> PipelineResult[T, R]:
        """
        Execute the pipeline with a given input.

        Resolves once this execution and all nested executions have
        finished, allowing aggregate error reporting.

        Extra context data is passed to all handlers via `context.extra`.
        In nested executions handlers may pass their own extra data into
        `context.launch(input, extra)`. If none is supplied, the extra data
        of the launching run is used.

        Args:
            input: Input of the root run
            extra: Extra data shared (by reference) with every handler

        Returns:
            PipelineResult: never raised, inspect `ok` and `errors`

        Example:
            ```python
            result = await pipeline.execute(source, extra={"cache": cache})
            if not result.ok:
                for error in result.errors:
                    log_failure(error.message, error.input_data_stack_trace)
            ```
        """
        run: Run[T, R, E] = Run(
            self._handlers,
            input,
            extra,
            pipeline_name=self.name,
            keep_none_results=self.keep_none_results,
        )
        return await run.execute()

    async def execute_many(
        self,
        inputs: Iterable[T],
        extra: E | None = None,
        *,
        limit: int = DEFAULT_BATCH_LIMIT,
    ) -> list[PipelineResult[T, R]]:
        """
        Execute independent root runs in bounded batches.

        Each batch of at most `limit` inputs runs concurrently, the next
        batch starts when the previous one finished.

        Args:
            inputs: Inputs, each executed as its own root run
            extra: Extra data shared by every run
            limit: Maximum root runs per batch

        Returns:
            One PipelineResult per input, in input order

        Raises:
            ValueError: If limit is lower than 1

        Example:
            ```python
            results = await pipeline.execute_many(sources, limit=10)
            summary = merge_many(results)
            ```
        """
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        pending = list(inputs)
        results: list[PipelineResult[T, R]] = []

        for start in range(0, len(pending), limit):
            batch = pending[start : start + limit]
            results.extend(await asyncio.gather(*(self.execute(item, extra) for item in batch)))
            logger.debug(
                f"Pipeline {self.name!r} finished {len(results)}/{len(pending)} executions"
            )

        return results

    def __repr__(self) -> str:
        """Readable representation for debugging."""
        return f"Pipeline(name={self.name!r}, handlers={len(self._handlers)})"
