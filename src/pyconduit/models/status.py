"""Status enumeration for run lifecycle tracking.

Defines the lifecycle states of a single run (root or nested) as it
advances through the handler chain and waits for its nested runs.
"""

from enum import Enum


class RunStatus(Enum):
    """Status of a single run.

    Lifecycle:
        PENDING → RUNNING → WAITING_FOR_NESTED → COMPLETE

    Design: No FAILED Status
        Failures are represented as COMPLETE with the error recorded in the
        run's PipelineResult. A failed handler only ends its own chain, the
        run still waits for every nested run it launched before completing.
    """

    PENDING = "PENDING"
    """Run is created but its first handler has not been invoked yet."""

    RUNNING = "RUNNING"
    """Run is advancing through the handler chain."""

    WAITING_FOR_NESTED = "WAITING_FOR_NESTED"
    """Run's own chain terminated, nested runs are still in flight."""

    COMPLETE = "COMPLETE"
    """Run and all its nested runs finished, the result is merged."""

    @property
    def is_terminal(self) -> bool:
        """Check if this status is terminal (result available)."""
        return self == RunStatus.COMPLETE

    def __str__(self) -> str:
        return self.value
