"""
Run - one execution of the handler chain against one input.

A run is created per Pipeline.execute() call (the root run) and per
context.launch() call (nested runs). It advances through the handlers,
settles its own completion handle exactly once, then waits for every
nested run it launched and merges their results into its own.

Two separate completions are tracked on purpose:
- `completion`: this run's own chain has terminated (Deferred)
- `nested`: every nested run launched from this run (PendingRun list)

The run's result is only produced once both are done, so no partially
complete execution tree is ever observable through execute().
"""

import asyncio
import inspect
import logging
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from uuid_extensions import uuid7

from pyconduit.core.context import CURRENT_CONTEXT, ExecutionContext
from pyconduit.core.handler import Handler
from pyconduit.core.signals import Continue, Terminate
from pyconduit.executor.deferred import Deferred
from pyconduit.executor.merge import merge_run_result
from pyconduit.executor.pending_run import PendingRun
from pyconduit.models import LaunchAfterCompleteError, PipelineResult, RunStatus

logger = logging.getLogger(__name__)

__all__ = ["Run"]

T = TypeVar("T")  # Input data type
R = TypeVar("R")  # Result type
E = TypeVar("E")  # Extra context type


class Run(Generic[T, R, E]):
    """
    Ephemeral state of a single (root or nested) execution.

    Holds the handler chain (a private copy), the original input, the
    inherited extra data, the nested-run handles it launched and the
    Deferred settled when its own chain terminates.

    Attributes:
        run_id: Time-ordered unique identifier (UUIDv7)
        parent_id: run_id of the launching run, None for a root run
        depth: Nesting level, 0 for a root run
        input: Original input of this run
        extra: Extra data visible to this run's handlers
        status: Current lifecycle status
        nested: Handles of every nested run launched from this run
        completion: Settled once this run's own chain terminates

    Example:
        ```python
        run = Run([parse, load], source, extra=None)
        result = await run.execute()
        ```
    """

    def __init__(
        self,
        handlers: Sequence[Handler],
        input: T,
        extra: E | None = None,
        *,
        parent_id: str | None = None,
        depth: int = 0,
        pipeline_name: str = "pipeline",
        keep_none_results: bool = False,
    ):
        # Copy so external mutation cannot affect an in-flight run
        self.handlers: tuple[Handler, ...] = tuple(handlers)
        self.input = input
        self.extra = extra
        self.run_id = str(uuid7())
        self.parent_id = parent_id
        self.depth = depth
        self.pipeline_name = pipeline_name
        self.keep_none_results = keep_none_results

        self.status = RunStatus.PENDING
        self.nested: list[PendingRun[T, R]] = []
        self.completion: Deferred[Terminate[R]] = Deferred()

    # =========================================================================
    # NESTED RUNS
    # =========================================================================

    def launch(self, input: T, extra: E | None = None) -> PendingRun[T, R]:
        """
        Start a nested run and track it.

        The nested run executes as its own asyncio task, starting the next
        time the event loop gets control. The handle is recorded before it
        is returned, so dropping it cannot lose the nested run's outcome.

        Args:
            input: Input of the nested run
            extra: Extra data of the nested run (already resolved by the
                context, inherited or overridden)

        Returns:
            PendingRun handle for the nested run

        Raises:
            LaunchAfterCompleteError: If this run already merged its result
        """
        if self.status.is_terminal:
            raise LaunchAfterCompleteError(self.run_id)

        child: Run[T, R, E] = Run(
            self.handlers,
            input,
            extra,
            parent_id=self.run_id,
            depth=self.depth + 1,
            pipeline_name=self.pipeline_name,
            keep_none_results=self.keep_none_results,
        )
        task = asyncio.get_running_loop().create_task(
            child.execute(), name=f"{self.pipeline_name}-run-{child.run_id}"
        )
        pending = PendingRun(child, task)
        self.nested.append(pending)

        logger.debug(
            f"Run {self.run_id} launched nested run {child.run_id} (depth={child.depth})"
        )
        return pending

    async def _wait_for_nested(self) -> list[PipelineResult[T, R]]:
        """Wait for every nested run, concurrently.

        Repeats until no new handle appeared while waiting: a context kept
        by a still-running handler may launch more nested runs.
        """
        results: list[PipelineResult[T, R]] = []
        while len(results) < len(self.nested):
            batch = self.nested[len(results) :]
            results.extend(await asyncio.gather(*(pending.task for pending in batch)))
        return results

    # =========================================================================
    # CHAIN ADVANCEMENT
    # =========================================================================

    def _context_for(self, index: int) -> ExecutionContext[T, R, E]:
        return ExecutionContext(
            self.run_id,
            self.launch,
            self.extra,
            parent_id=self.parent_id,
            depth=self.depth,
            handler_index=index,
            pipeline_name=self.pipeline_name,
        )

    async def _advance(self) -> None:
        """
        Invoke handlers in order until the chain terminates or fails.

        Iterative on purpose: each step replaces the current value and
        loops, so long chains do not grow the call stack. Settles
        `completion` exactly once before returning.
        """
        index = 0
        value: Any = self.input
        self.status = RunStatus.RUNNING

        while True:
            # End of chain is an implicit terminate() without result
            if index >= len(self.handlers):
                self.completion.resolve(Terminate())
                return

            ctx = self._context_for(index)
            token = CURRENT_CONTEXT.set(ctx)
            try:
                output = self.handlers[index](value, ctx)
                if inspect.isawaitable(output):
                    output = await output
            except Exception as e:
                logger.debug(f"Run {self.run_id} failed at handler {index}: {type(e).__name__}")
                self.completion.reject(e)
                return
            finally:
                CURRENT_CONTEXT.reset(token)

            # terminate() wins over whatever the handler returned
            if ctx.terminated:
                self.completion.resolve(ctx.termination)
                return

            if isinstance(output, Terminate):
                self.completion.resolve(output)
                return

            if isinstance(output, Continue):
                output = output.value

            value = output
            index += 1

    async def execute(self) -> PipelineResult[T, R]:
        """
        Execute the run and every nested run it launches.

        Returns:
            Aggregated result of this run and all its descendants. Never
            raises for handler failures.
        """
        logger.debug(
            f"Run {self.run_id} started (pipeline={self.pipeline_name!r}, "
            f"depth={self.depth}, handlers={len(self.handlers)})"
        )

        await self._advance()

        own: Terminate[R] | BaseException
        try:
            own = await self.completion.wait()
        except Exception as e:
            own = e

        self.status = RunStatus.WAITING_FOR_NESTED
        nested_results = await self._wait_for_nested()

        result = merge_run_result(
            self.input, own, nested_results, keep_none_results=self.keep_none_results
        )
        self.status = RunStatus.COMPLETE

        logger.debug(
            f"Run {self.run_id} complete: ok={result.ok}, data={len(result.data)}, "
            f"errors={len(result.errors)}, nested={len(nested_results)}"
        )
        return result

    def __repr__(self) -> str:
        """Readable representation for debugging."""
        return f"Run(run_id={self.run_id!r}, depth={self.depth}, status={self.status})"
