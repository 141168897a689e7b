"""
Handler protocol for pipeline steps.

A handler is any callable taking (input, context). It may be a plain
function or a coroutine function, the run awaits whatever awaitable the
handler returns.

Design: Protocol-based (PEP 544) for structural typing
No inheritance required - functions, lambdas, bound methods and callable
objects all qualify.

Handlers have three operations available to them:
- process input and produce output for the rest of the chain
- terminate the chain and optionally produce a result
- launch a nested run of the same chain with new data

Usage:
    ```python
    def strip(text: str, ctx: ExecutionContext) -> str:
        return text.strip()

    async def fetch(url: str, ctx: ExecutionContext) -> StepSignal:
        if not url.startswith("http"):
            return Continue(url)
        body = await download(url)
        ctx.launch(body)
        return ctx.terminate()

    pipeline = Pipeline([strip, fetch])
    ```
"""

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, runtime_checkable

from pyconduit.core.signals import StepSignal

if TYPE_CHECKING:
    from pyconduit.core.context import ExecutionContext

__all__ = ["Handler", "HandlerOutput"]

# A handler may return the next value directly (shorthand for Continue),
# or an explicit StepSignal, or an awaitable resolving to either.
HandlerOutput: TypeAlias = Any | StepSignal | Awaitable[Any | StepSignal]


@runtime_checkable
class Handler(Protocol):
    """
    Protocol for a single pluggable step in a pipeline.

    The second argument is the ExecutionContext of the current invocation.
    If terminate() was called on it, the handler's return value is ignored.
    """

    def __call__(self, input: Any, context: "ExecutionContext") -> HandlerOutput:
        """Process input and return the next value or a StepSignal."""
        ...
