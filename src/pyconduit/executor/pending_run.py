"""Nested run handle.

Provides PendingRun, the handle returned from context.launch() that
allows awaiting a nested run's aggregated result.

Design: Fire and Track
The nested run starts as soon as it is launched. The handler may await
the handle, or drop it; the launching run keeps its own reference and
waits for it before producing its result either way.
"""

import asyncio
from collections.abc import Generator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pyconduit.models import PipelineResult, RunStatus

if TYPE_CHECKING:
    from pyconduit.executor.run import Run

__all__ = ["PendingRun"]

T = TypeVar("T")  # Input data type
R = TypeVar("R")  # Result type


class PendingRun(Generic[T, R]):
    """Handle for awaiting a nested run's completion.

    Awaiting the handle never raises for handler failures: it resolves to
    the nested run's PipelineResult, failures included.

    Attributes:
        run: The nested run
        task: asyncio.Task executing the nested run

    Example:
        ```python
        async def probe(source, ctx):
            pending = ctx.launch(source.sidecar)
            sidecar = await pending
            if sidecar.ok:
                return Continue(source.with_meta(sidecar.data))
            return source
        ```
    """

    def __init__(self, run: "Run[T, R, Any]", task: "asyncio.Task[PipelineResult[T, R]]"):
        """Initialize PendingRun handle.

        Args:
            run: Nested run being executed
            task: Task driving the nested run

        Note:
            Created by Run.launch(), not directly by users.
        """
        self.run = run
        self.task = task

    @property
    def run_id(self) -> str:
        """Identifier of the nested run."""
        return self.run.run_id

    @property
    def input(self) -> T:
        """Original input of the nested run."""
        return self.run.input

    @property
    def status(self) -> RunStatus:
        """Current lifecycle status of the nested run."""
        return self.run.status

    def done(self) -> bool:
        """Check if the nested run and its own nested runs finished."""
        return self.task.done()

    async def result(self) -> PipelineResult[T, R]:
        """Wait for the nested run to complete and return its result.

        Returns:
            Aggregated result of the nested run and its descendants
        """
        return await asyncio.shield(self.task)

    def __await__(self) -> Generator[Any, None, PipelineResult[T, R]]:
        return self.result().__await__()

    def __repr__(self) -> str:
        """Readable representation for debugging."""
        return f"PendingRun(run_id={self.run_id!r}, status={self.status})"
