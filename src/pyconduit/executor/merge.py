"""Result aggregation for runs and their nested runs.

Folds a run's own termination and the results of every nested run it
launched into one PipelineResult.

Design: Information Hiding (Parnas)
Aggregation policy (which results count as data, how error traces grow)
is isolated here, so the run loop only decides *when* to merge.
"""

import dataclasses
import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from pyconduit.core.signals import _NO_RESULT, Terminate
from pyconduit.models import PipelineError, PipelineResult, create_pipeline_error

logger = logging.getLogger(__name__)

__all__ = [
    "merge_run_result",
    "merge_many",
    "partition",
    "is_reportable",
]

T = TypeVar("T")
R = TypeVar("R")


def partition(predicate: Callable[[T], bool], items: Iterable[T]) -> tuple[list[T], list[T]]:
    """Split items into (matching, non-matching), preserving order.

    Example:
        ```python
        succeeded, failed = partition(lambda r: r.ok, nested_results)
        ```
    """
    matching: list[T] = []
    rest: list[T] = []
    for item in items:
        (matching if predicate(item) else rest).append(item)
    return matching, rest


def is_reportable(value: Any, keep_none_results: bool = False) -> bool:
    """Check if a terminal value belongs in PipelineResult.data.

    A missing result is never reported. None is reported only when
    keep_none_results is set. Falsy values such as 0 or "" always are.
    """
    if value is _NO_RESULT:
        return False
    if value is None:
        return keep_none_results
    return True


def _with_ancestor(error: PipelineError[T], input_data: T) -> PipelineError[T]:
    # Copy, the nested run's own result stays as its launcher saw it
    return dataclasses.replace(
        error, input_data_stack_trace=[*error.input_data_stack_trace, input_data]
    )


def merge_run_result(
    input_data: T,
    own: Terminate[R] | BaseException,
    nested: Iterable[PipelineResult[T, R]],
    *,
    keep_none_results: bool = False,
) -> PipelineResult[T, R]:
    """Merge a run's own outcome with its nested runs' results.

    Args:
        input_data: The run's original input
        own: Terminate signal if the chain ended normally, the exception
            if it failed
        nested: Results of every nested run, in launch order
        keep_none_results: Report None results in data

    Returns:
        Aggregated result. ok is False if the run or any nested run failed.

    Example:
        ```python
        result = merge_run_result("root", Terminate(12), [child_result])
        ```
    """
    result: PipelineResult[T, R] = PipelineResult(ok=True, data=[], errors=[])

    if isinstance(own, BaseException):
        result.ok = False
        result.errors.append(create_pipeline_error(input_data, own))
    elif is_reportable(own.result, keep_none_results):
        result.data.append(own.result)

    succeeded, failed = partition(lambda r: r.ok, nested)

    if failed:
        result.ok = False

    for ok_result in succeeded:
        result.data.extend(
            value for value in ok_result.data if is_reportable(value, keep_none_results)
        )

    # Data produced beneath a failed nested run is dropped, only its errors bubble up
    for failed_result in failed:
        result.errors.extend(_with_ancestor(err, input_data) for err in failed_result.errors)

    if failed:
        logger.debug(
            f"Merged {len(failed)} failed nested run(s) into run with "
            f"{len(result.errors)} error(s)"
        )

    return result


def merge_many(results: Iterable[PipelineResult[T, R]]) -> PipelineResult[T, R]:
    """Fold independent root results into one.

    Unlike merge_run_result, no input is appended to error traces: the
    results are siblings, not nested runs of a common parent.

    Example:
        ```python
        results = await pipeline.execute_many(sources)
        summary = merge_many(results)
        ```
    """
    merged: PipelineResult[T, R] = PipelineResult(ok=True, data=[], errors=[])
    for result in results:
        merged.ok = merged.ok and result.ok
        merged.data.extend(result.data)
        merged.errors.extend(result.errors)
    return merged
