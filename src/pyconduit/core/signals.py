"""
Step signals returned by handlers.

This module defines the tagged variant a handler uses to tell the run what
to do next: continue with a new value, or terminate the chain with an
optional result.

**Design Pattern**: State Machine using Union types

A handler decides explicitly. There is no sentinel identity check on the
value itself: a plain return value is shorthand for Continue(value), and
context.terminate() hands back a Terminate the handler returns.

Example:
    ```python
    async def parse(raw: bytes, ctx: ExecutionContext) -> StepSignal:
        if not raw:
            return ctx.terminate()          # Terminate(), no result
        if raw.startswith(b"DICM"):
            return Terminate(load(raw))     # Terminate(result)
        return Continue(raw.decode())       # next handler gets a str
    ```
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

__all__ = [
    "Continue",
    "Terminate",
    "StepSignal",
    "is_terminate",
    "_NO_RESULT",
]

T = TypeVar("T")
R = TypeVar("R")


class _NoResult:
    """Marker type for "terminated without a result"."""

    def __repr__(self) -> str:
        return "<no result>"


# Sentinel for "no result supplied"
#
# Problem: Optional[R] cannot distinguish between:
#   - terminate() with no argument -> nothing to report
#   - terminate(None) -> the handler produced None on purpose
#
# Solution: Sentinel Object Pattern (PEP 661)
#   Tested with identity (is), never equality (==)
#
_NO_RESULT: Any = _NoResult()


@dataclass(frozen=True)
class Continue(Generic[T]):
    """
    Handler finished, pass value to the next handler.

    Attributes:
        value: Replaces the run's current value wholesale
    """

    value: T

    def __str__(self) -> str:
        return f"Continue({self.value!r})"


@dataclass(frozen=True)
class Terminate(Generic[R]):
    """
    Handler finished, stop the chain.

    Attributes:
        result: Optional value reported in PipelineResult.data. Defaults to
            the _NO_RESULT sentinel, which is never reported.
    """

    result: R = field(default=_NO_RESULT)

    def has_result(self) -> bool:
        """Check if a result was supplied (None counts as supplied)."""
        return self.result is not _NO_RESULT

    def __str__(self) -> str:
        if self.has_result():
            return f"Terminate({self.result!r})"
        return "Terminate()"


# StepSignal is the tagged variant a handler returns.
#
# Pattern matching:
#     match signal:
#         case Terminate(result):
#             ...
#         case Continue(value):
#             ...
#
StepSignal = Continue[T] | Terminate[R]


def is_terminate(signal: object) -> bool:
    """
    Type guard to check if a handler output is a Terminate signal.

    Args:
        signal: Whatever the handler returned

    Returns:
        True if the output terminates the chain
    """
    return isinstance(signal, Terminate)
