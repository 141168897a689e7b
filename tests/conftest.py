"""
Pytest configuration and fixtures for pyconduit tests.

Provides reusable handlers, pipelines and Hypothesis strategies.
"""

import asyncio
import logging

import pytest
from hypothesis import strategies as st

from pyconduit import Continue, ExecutionContext, Pipeline

# =============================================================================
# Reusable Handlers
# =============================================================================


def passthrough(value, ctx: ExecutionContext):
    """Return the input unchanged."""
    return value


async def async_passthrough(value, ctx: ExecutionContext):
    """Return the input unchanged after yielding to the event loop."""
    await asyncio.sleep(0)
    return Continue(value)


def increment(value: int, ctx: ExecutionContext) -> int:
    return value + 1


def terminate_with_value(value, ctx: ExecutionContext):
    """Terminate the chain reporting the current value."""
    return ctx.terminate(value)


def make_failing_handler(message: str = "handler failed", exc_type: type = ValueError):
    """Build a handler raising exc_type(message)."""

    def failing(value, ctx: ExecutionContext):
        raise exc_type(message)

    return failing


class RecordingHandler:
    """Callable handler recording every value it sees."""

    def __init__(self):
        self.seen: list = []

    def __call__(self, value, ctx: ExecutionContext):
        self.seen.append(value)
        return value


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def identity_pipeline() -> Pipeline:
    """Three passthrough handlers, no result produced."""
    return Pipeline([passthrough, async_passthrough, passthrough], name="identity")


@pytest.fixture
def echo_pipeline() -> Pipeline:
    """Two passthrough handlers then a terminating one."""
    return Pipeline([passthrough, async_passthrough, terminate_with_value], name="echo")


@pytest.fixture
def debug_logs(caplog):
    """Capture pyconduit debug logs."""
    caplog.set_level(logging.DEBUG, logger="pyconduit")
    return caplog


# =============================================================================
# Hypothesis Strategies
# =============================================================================

# Hashable, comparable, non-None inputs
input_values = st.integers() | st.text(max_size=20) | st.tuples(st.integers(), st.booleans())

chain_lengths = st.integers(min_value=0, max_value=30)
