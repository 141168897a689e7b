"""Tests for result aggregation helpers."""

import pytest

from pyconduit import PipelineError, PipelineResult, Terminate, merge_many
from pyconduit.core.signals import _NO_RESULT
from pyconduit.executor.merge import is_reportable, merge_run_result, partition
from pyconduit.models import create_pipeline_error, describe_failure


def _failed(message: str, *trace) -> PipelineResult:
    cause = ValueError(message)
    return PipelineResult(
        ok=False,
        data=[],
        errors=[PipelineError(message, list(trace), cause)],
    )


def test_partition_preserves_order():
    evens, odds = partition(lambda n: n % 2 == 0, [1, 2, 3, 4, 5, 6])

    assert evens == [2, 4, 6]
    assert odds == [1, 3, 5]


@pytest.mark.parametrize(
    ("value", "keep_none", "expected"),
    [
        (_NO_RESULT, False, False),
        (_NO_RESULT, True, False),
        (None, False, False),
        (None, True, True),
        (0, False, True),
        ("", False, True),
        ("volume", False, True),
    ],
)
def test_is_reportable(value, keep_none, expected):
    assert is_reportable(value, keep_none) is expected


def test_merge_own_success():
    result = merge_run_result("in", Terminate("out"), [])

    assert result == PipelineResult(ok=True, data=["out"], errors=[])


def test_merge_own_success_without_result():
    result = merge_run_result("in", Terminate(), [])

    assert result == PipelineResult(ok=True, data=[], errors=[])


def test_merge_own_failure():
    error = OSError("disk")

    result = merge_run_result("in", error, [])

    assert not result.ok
    assert result.data == []
    assert result.errors == [PipelineError("disk", ["in"], error)]


def test_merge_nested_results_in_launch_order():
    nested = [
        PipelineResult(ok=True, data=["a", "b"], errors=[]),
        _failed("broken", "child"),
        PipelineResult(ok=True, data=["c"], errors=[]),
    ]

    result = merge_run_result("parent", Terminate("own"), nested)

    assert not result.ok
    assert result.data == ["own", "a", "b", "c"]
    assert [e.input_data_stack_trace for e in result.errors] == [["child", "parent"]]


def test_merge_copies_nested_errors():
    nested = _failed("broken", "child")

    result = merge_run_result("parent", Terminate(), [nested])

    assert nested.errors[0].input_data_stack_trace == ["child"]
    assert result.errors[0].input_data_stack_trace == ["child", "parent"]
    assert result.errors[0].cause is nested.errors[0].cause


def test_merge_drops_none_from_nested_data_by_default():
    nested = [PipelineResult(ok=True, data=[None, 1], errors=[])]

    assert merge_run_result("p", Terminate(), nested).data == [1]
    assert merge_run_result("p", Terminate(), nested, keep_none_results=True).data == [None, 1]


def test_merge_many_concatenates_without_touching_traces():
    results = [
        PipelineResult(ok=True, data=[1], errors=[]),
        _failed("x failed", "x"),
        PipelineResult(ok=True, data=[2, 3], errors=[]),
    ]

    merged = merge_many(results)

    assert not merged.ok
    assert merged.data == [1, 2, 3]
    assert merged.errors[0].input_data_stack_trace == ["x"]


def test_merge_many_of_nothing_is_ok():
    assert merge_many([]) == PipelineResult(ok=True, data=[], errors=[])


def test_create_pipeline_error():
    error = TimeoutError("slow server")

    record = create_pipeline_error({"uri": "a"}, error)

    assert record.message == "slow server"
    assert record.input_data_stack_trace == [{"uri": "a"}]
    assert record.cause is error


def test_describe_failure_fallback():
    assert describe_failure(ValueError("msg")) == "msg"
    assert describe_failure(ValueError()) == "ValueError"


class _UnprintableError(Exception):
    def __str__(self):
        raise TypeError("no str")


def test_describe_failure_unprintable_exception():
    assert describe_failure(_UnprintableError()) == "_UnprintableError"


def test_result_string_forms():
    assert str(PipelineResult(ok=True, data=[1, 2])) == "PipelineResult(ok, data=2)"
    assert str(_failed("m", "a")) == "PipelineResult(failed, data=0, errors=1)"
    assert str(PipelineError("m", ["a", "b"])) == "PipelineError('m', depth=2)"
