"""
Pipeline execution results and structured errors.

A run never raises past Pipeline.execute(). Instead it returns a
PipelineResult that aggregates its own outcome with the outcomes of every
nested run it launched.

Example:
    ```python
    result = await pipeline.execute(source)

    if result.is_success():
        for loaded in result.data:
            register(loaded)
    else:
        for error in result.errors:
            # innermost failing input first, root input last
            print(error.message, error.input_data_stack_trace)
    ```
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

__all__ = [
    "PipelineError",
    "PipelineResult",
    "create_pipeline_error",
    "describe_failure",
]

T = TypeVar("T")  # Input data type
R = TypeVar("R")  # Result type


@dataclass
class PipelineError(Generic[T]):
    """
    A failure reported by a run or one of its nested runs.

    Attributes:
        message: Human-readable failure message
        input_data_stack_trace: Inputs that led to the failure, ordered by
            nesting level starting with the innermost run. The failing run
            records its own input, each ancestor appends its input while
            merging.
        cause: The exception originally raised by the handler or the engine
    """

    message: str
    input_data_stack_trace: list[T] = field(default_factory=list)
    cause: BaseException | None = None

    def __str__(self) -> str:
        """Human-readable string representation."""
        depth = len(self.input_data_stack_trace)
        return f"PipelineError({self.message!r}, depth={depth})"


@dataclass
class PipelineResult(Generic[T, R]):
    """
    Aggregated outcome of a run and every run nested beneath it.

    Attributes:
        ok: True iff the run and all its nested runs terminated without error
        data: Results produced by terminating handlers, own result first,
            then nested results in launch order
        errors: Errors from this run and its nested runs

    Example:
        ```python
        result = PipelineResult(ok=True, data=[12, 20], errors=[])
        assert result.is_success()
        ```
    """

    ok: bool = True
    data: list[R] = field(default_factory=list)
    errors: list[PipelineError[T]] = field(default_factory=list)

    def is_success(self) -> bool:
        """Check if the whole execution tree succeeded."""
        return self.ok

    def is_failure(self) -> bool:
        """Check if any run in the execution tree failed."""
        return not self.ok

    def __str__(self) -> str:
        """Human-readable string representation."""
        if self.ok:
            return f"PipelineResult(ok, data={len(self.data)})"
        return f"PipelineResult(failed, data={len(self.data)}, errors={len(self.errors)})"


def describe_failure(error: BaseException) -> str:
    """Return the message recorded for a failure.

    Falls back to the exception class name when the exception carries no
    message or cannot be converted to a string, so every PipelineError
    has a non-empty message.
    """
    try:
        message = str(error)
    except Exception:
        message = ""
    return message or type(error).__name__


def create_pipeline_error(input_data: T, error: BaseException) -> PipelineError[T]:
    """Create the error record for a run whose own chain failed.

    The stack trace starts with the failing run's own input only.
    """
    return PipelineError(
        message=describe_failure(error),
        input_data_stack_trace=[input_data],
        cause=error,
    )
