"""
Executor module - Runtime engine for handler pipelines.

This module contains the execution components:
- pipeline: Pipeline entry point (execute, execute_many)
- run: Per-execution state and the chain advancement loop
- pending_run: Handle for nested runs launched by handlers
- deferred: Manually settled completion handle
- merge: Result aggregation across nested runs
"""

from pyconduit.executor.deferred import Deferred
from pyconduit.executor.merge import is_reportable, merge_many, merge_run_result, partition
from pyconduit.executor.pending_run import PendingRun
from pyconduit.executor.pipeline import DEFAULT_BATCH_LIMIT, Pipeline
from pyconduit.executor.run import Run

__all__ = [
    # Pipeline
    "Pipeline",
    "DEFAULT_BATCH_LIMIT",
    # Runs
    "Run",
    "PendingRun",
    "Deferred",
    # Aggregation
    "merge_run_result",
    "merge_many",
    "partition",
    "is_reportable",
]
