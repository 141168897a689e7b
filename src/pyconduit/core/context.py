"""Per-invocation execution context handed to every handler.

Provides ExecutionContext, the handler-facing view of a run: terminate
the chain, launch nested runs, and read the caller-supplied extra data.

Also exposes the context of the handler currently running through a
task-local variable, so helper code deep inside a handler can reach it
without threading it through every call.

Design: Task-Local State (contextvars)
    Avoids explicit parameter passing while remaining safe for concurrent
    async execution. Each nested run is its own asyncio task, so each sees
    its own context.
"""

from collections.abc import Callable
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Generic, Optional, TypeVar

from pyconduit.core.signals import _NO_RESULT, Terminate
from pyconduit.models import TerminateCalledTwiceError

if TYPE_CHECKING:
    from pyconduit.executor.pending_run import PendingRun

T = TypeVar("T")  # Input data type
R = TypeVar("R")  # Result type
E = TypeVar("E")  # Extra context type

# launcher(input, extra) starts a nested run and returns its handle
Launcher = Callable[[Any, Any], "PendingRun[Any, Any]"]


# =============================================================================
# Task-Local Context Variable
# =============================================================================

CURRENT_CONTEXT: ContextVar[Optional["ExecutionContext"]] = ContextVar(
    "current_context", default=None
)
"""Task-local ExecutionContext of the handler currently running.

Usage:
    ```python
    ctx = ExecutionContext(...)
    token = CURRENT_CONTEXT.set(ctx)
    try:
        output = handler(value, ctx)
    finally:
        CURRENT_CONTEXT.reset(token)
    ```
"""


# =============================================================================
# ExecutionContext - Handler Services
# =============================================================================


class ExecutionContext(Generic[T, R, E]):
    """Services available to a single handler invocation.

    A fresh context is built for every handler call. It records whether the
    handler terminated the chain and with which result, and forwards nested
    launches to the run that owns it.

    Design: Single Responsibility
        Only mediates between one handler call and its run. The run owns
        the chain state and the nested-run list.

    Attributes:
        run_id: Identifier of the owning run
        parent_id: Identifier of the run that launched it, None for a root run
        depth: Nesting level, 0 for a root run
        handler_index: Position of the handler being invoked
        pipeline_name: Name of the pipeline executing the run

    Usage:
        ```python
        async def split(archive, ctx):
            for member in archive.members():
                ctx.launch(member)
            return ctx.terminate()
        ```
    """

    def __init__(
        self,
        run_id: str,
        launcher: Launcher,
        extra: E | None = None,
        *,
        parent_id: str | None = None,
        depth: int = 0,
        handler_index: int = 0,
        pipeline_name: str = "pipeline",
    ):
        """Initialize ExecutionContext for one handler invocation.

        Args:
            run_id: Identifier of the owning run
            launcher: Callback starting a nested run on the owning run
            extra: Extra data inherited by the owning run
            parent_id: Identifier of the parent run, if nested
            depth: Nesting level of the owning run
            handler_index: Position of the handler in the chain
            pipeline_name: Name of the executing pipeline (for logging)
        """
        self.run_id = run_id
        self.parent_id = parent_id
        self.depth = depth
        self.handler_index = handler_index
        self.pipeline_name = pipeline_name

        self._launcher = launcher
        self._extra = extra

        # Termination tracking - one terminate() per invocation
        self._termination: Terminate[R] | None = None

    @property
    def extra(self) -> E | None:
        """Extra data supplied by the caller (read-only reference)."""
        return self._extra

    @property
    def terminated(self) -> bool:
        """Check if terminate() was called during this invocation."""
        return self._termination is not None

    @property
    def termination(self) -> Terminate[R] | None:
        """The Terminate signal recorded by terminate(), if any."""
        return self._termination

    def terminate(self, result: R = _NO_RESULT) -> Terminate[R]:
        """Terminate the chain after this handler returns.

        The handler should return the signal this method gives back. Once
        terminate() was called, the handler's return value is ignored.

        Args:
            result: Optional value reported in the run's result data

        Returns:
            Terminate signal carrying the result

        Raises:
            TerminateCalledTwiceError: If called again in the same invocation

        Example:
            ```python
            def keep_images(source, ctx):
                if source.kind == "image":
                    return ctx.terminate(load(source))
                return source
            ```
        """
        if self._termination is not None:
            raise TerminateCalledTwiceError(self.run_id, self.handler_index)

        self._termination = Terminate(result)
        return self._termination

    def launch(self, input: T, extra: E | None = None) -> "PendingRun[T, R]":
        """Start a nested run of the same pipeline with new input.

        The nested run starts immediately as its own task. The owning run
        tracks it regardless of whether the handler awaits the handle, and
        its outcome is merged into the owning run's result.

        Args:
            input: Input for the nested run
            extra: Extra data for the nested run; None inherits this run's

        Returns:
            PendingRun handle, awaitable for the nested run's result

        Raises:
            LaunchAfterCompleteError: If the owning run already completed,
                for example through a context kept past execute()

        Example:
            ```python
            async def expand(folder, ctx):
                pending = [ctx.launch(entry) for entry in folder.entries]
                results = [await p for p in pending]
                return ctx.terminate(sum(len(r.data) for r in results))
            ```
        """
        return self._launcher(input, extra if extra is not None else self._extra)

    def __repr__(self) -> str:
        """Readable representation for debugging."""
        return (
            f"ExecutionContext(run_id={self.run_id!r}, depth={self.depth}, "
            f"handler_index={self.handler_index}, terminated={self.terminated})"
        )


# =============================================================================
# Helper Functions
# =============================================================================


def get_current_context() -> ExecutionContext | None:
    """Get the ExecutionContext of the handler currently running.

    Returns:
        Current context if called from inside a handler, None otherwise

    Usage:
        ctx = get_current_context()
        if ctx is not None:
            ctx.launch(extra_source)
    """
    return CURRENT_CONTEXT.get()
