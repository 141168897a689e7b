"""Core data models for pipeline execution.

Defines the result and error records returned by Pipeline.execute(),
run lifecycle states, and the exceptions raised on handler API misuse.

Design: Dependency-Free Models
These types have no dependencies on core or executor modules to
prevent circular imports and enable clean layering.
"""

from pyconduit.models.errors import (
    LaunchAfterCompleteError,
    PipelineUsageError,
    TerminateCalledTwiceError,
)
from pyconduit.models.result import (
    PipelineError,
    PipelineResult,
    create_pipeline_error,
    describe_failure,
)
from pyconduit.models.status import RunStatus

__all__ = [
    "PipelineError",
    "PipelineResult",
    "create_pipeline_error",
    "describe_failure",
    "RunStatus",
    "PipelineUsageError",
    "TerminateCalledTwiceError",
    "LaunchAfterCompleteError",
]
