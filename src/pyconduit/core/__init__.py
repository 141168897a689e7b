"""
Core types for the pyconduit execution engine.

This module contains the handler-facing types:
- Continue / Terminate: Tagged variant a handler returns
- StepSignal: Union of the two signals
- Handler: Protocol for a pipeline step
- ExecutionContext: Per-invocation services (terminate, launch, extra)
- get_current_context: Task-local access to the running handler's context
"""

from pyconduit.core.context import (
    CURRENT_CONTEXT,
    ExecutionContext,
    get_current_context,
)
from pyconduit.core.handler import Handler, HandlerOutput
from pyconduit.core.signals import (
    Continue,
    StepSignal,
    Terminate,
    is_terminate,
)

__all__ = [
    "Continue",
    "Terminate",
    "StepSignal",
    "is_terminate",
    "Handler",
    "HandlerOutput",
    "ExecutionContext",
    "CURRENT_CONTEXT",
    "get_current_context",
]
