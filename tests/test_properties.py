"""
Property-based tests for pyconduit using Hypothesis.

These tests generate many pipeline shapes and inputs to check:
- Identity chains never produce data
- Terminal values are reported exactly once
- Execution is deterministic for side-effect-free handlers
- A failing handler yields exactly one error with the root input
- Nested failure traces list inputs innermost first
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import (
    async_passthrough,
    chain_lengths,
    input_values,
    make_failing_handler,
    passthrough,
    terminate_with_value,
)
from pyconduit import Pipeline

# ==============================================================================
# PROPERTY 1: Identity chains
# ==============================================================================


@pytest.mark.property
@pytest.mark.asyncio
@given(value=input_values, length=chain_lengths, use_async=st.booleans())
@settings(max_examples=100, deadline=None)
async def test_identity_chain_produces_no_data(value, length, use_async):
    """
    Property: N passthrough handlers reach ok with no data.
    """
    handler = async_passthrough if use_async else passthrough
    result = await Pipeline([handler] * length).execute(value)

    assert result.ok
    assert result.data == []
    assert result.errors == []


@pytest.mark.property
@pytest.mark.asyncio
@given(value=input_values, length=chain_lengths)
@settings(max_examples=100, deadline=None)
async def test_terminating_identity_chain_reports_input(value, length):
    """
    Property: N passthrough handlers then terminate(x) yield data == [x].
    """
    result = await Pipeline([passthrough] * length + [terminate_with_value]).execute(value)

    assert result.ok
    assert result.data == [value]


# ==============================================================================
# PROPERTY 2: Determinism
# ==============================================================================


@pytest.mark.property
@pytest.mark.asyncio
@given(values=st.lists(st.integers(min_value=-1000, max_value=1000), max_size=8))
@settings(max_examples=50, deadline=None)
async def test_execution_is_deterministic(values):
    """
    Property: executing twice with the same input gives equal results.
    """

    def fan_out(value, ctx):
        if isinstance(value, list):
            for item in value:
                ctx.launch(item)
            return ctx.terminate(len(value))
        return ctx.terminate(value * 3)

    pipeline = Pipeline([fan_out])

    first = await pipeline.execute(values)
    second = await pipeline.execute(values)

    assert first == second
    assert first.data == [len(values)] + [v * 3 for v in values]


# ==============================================================================
# PROPERTY 3: Failure reporting
# ==============================================================================


@pytest.mark.property
@pytest.mark.asyncio
@given(
    value=input_values,
    before=chain_lengths,
    after=st.integers(min_value=0, max_value=5),
)
@settings(max_examples=100, deadline=None)
async def test_single_failure_reports_root_input(value, before, after):
    """
    Property: one raising handler anywhere gives exactly one error whose
    trace is the original input.
    """
    handlers = (
        [passthrough] * before
        + [make_failing_handler("broken")]
        + [terminate_with_value] * after
    )

    result = await Pipeline(handlers).execute(value)

    assert not result.ok
    assert result.data == []
    assert len(result.errors) == 1
    assert result.errors[0].input_data_stack_trace == [value]


@pytest.mark.property
@pytest.mark.asyncio
@given(depth=st.integers(min_value=1, max_value=12))
@settings(max_examples=30, deadline=None)
async def test_nested_failure_trace_innermost_first(depth):
    """
    Property: a failure at nesting level d has trace [d, d-1, ..., 0].
    """

    def descend(level, ctx):
        if level == depth:
            raise ValueError(f"failed at {level}")
        ctx.launch(level + 1)
        return ctx.terminate()

    result = await Pipeline([descend]).execute(0)

    assert not result.ok
    assert len(result.errors) == 1
    assert result.errors[0].input_data_stack_trace == list(range(depth, -1, -1))
