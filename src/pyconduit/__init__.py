"""
pyconduit: Typed async handler pipelines with nested-run aggregation

Runs a value through an ordered chain of handlers. Any handler may
transform the value, terminate the chain with an optional result, or
launch a nested run of the same chain on new data. Pipeline.execute()
waits for the whole execution tree and returns one PipelineResult with
every produced result and every error.

Design Pattern: Façade Pattern
This module provides a simplified interface to the engine, hiding the
run bookkeeping and result aggregation.

Example:
    ```python
    import asyncio
    from pathlib import Path

    from pyconduit import Continue, Pipeline

    async def expand(path, ctx):
        if path.is_dir():
            for child in path.iterdir():
                ctx.launch(child)
            return ctx.terminate()
        return Continue(path)

    def load(path, ctx):
        return ctx.terminate(path.read_bytes())

    async def main():
        pipeline = Pipeline([expand, load], name="loader")
        result = await pipeline.execute(Path("scans"))

        if not result.ok:
            for error in result.errors:
                print(error.message, error.input_data_stack_trace)

    asyncio.run(main())
    ```
"""

# Core types
from pyconduit.core import (
    Continue,
    ExecutionContext,
    Handler,
    StepSignal,
    Terminate,
    get_current_context,
    is_terminate,
)

# Execution
from pyconduit.executor import (
    DEFAULT_BATCH_LIMIT,
    Deferred,
    PendingRun,
    Pipeline,
    merge_many,
)

# Results and errors
from pyconduit.models import (
    LaunchAfterCompleteError,
    PipelineError,
    PipelineResult,
    PipelineUsageError,
    RunStatus,
    TerminateCalledTwiceError,
)

__version__ = "0.1.0"

__all__ = [
    # Execution
    "Pipeline",
    "DEFAULT_BATCH_LIMIT",
    "PendingRun",
    "Deferred",
    "merge_many",
    # Handlers
    "Handler",
    "ExecutionContext",
    "get_current_context",
    "Continue",
    "Terminate",
    "StepSignal",
    "is_terminate",
    # Results
    "PipelineResult",
    "PipelineError",
    "RunStatus",
    # Errors
    "PipelineUsageError",
    "TerminateCalledTwiceError",
    "LaunchAfterCompleteError",
]
