"""
Deferred completion handle.

A manually settled future: created empty, resolved or rejected exactly
once by later code, awaited by any number of readers.

Each run owns one Deferred representing "this run's own chain has
terminated". It is distinct from "all nested runs have finished", which
the run tracks separately.

**Example**:
```python
done: Deferred[int] = Deferred()

async def reader():
    return await done.wait()

task = asyncio.create_task(reader())
done.resolve(42)
assert await task == 42
```
"""

import asyncio
from typing import Generic, TypeVar

__all__ = ["Deferred"]

T = TypeVar("T")


class Deferred(Generic[T]):
    """
    A single-producer, multi-reader completion handle.

    **Important**: Settlement is single-use. Calling `resolve()` or
    `reject()` after the handle settled raises RuntimeError, so a run
    cannot report two outcomes.

    Backed by an asyncio.Future created lazily on the running loop, which
    lets a Deferred be constructed outside of a coroutine.

    **Attributes**:
        _future: asyncio.Future holding the outcome
        _settled: Whether resolve() or reject() was called
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[T] | None = None
        self._settled = False

    def _get_future(self) -> "asyncio.Future[T]":
        if self._future is None:
            self._future = asyncio.get_running_loop().create_future()
        return self._future

    @property
    def settled(self) -> bool:
        """Check if the handle was resolved or rejected."""
        return self._settled

    def resolve(self, value: T) -> None:
        """
        Settle the handle successfully.

        **Raises**:
            RuntimeError: If the handle already settled
        """
        self._check_unsettled()
        self._settled = True
        self._get_future().set_result(value)

    def reject(self, error: BaseException) -> None:
        """
        Settle the handle with a failure.

        Readers awaiting `wait()` get the error raised.

        **Raises**:
            RuntimeError: If the handle already settled
        """
        self._check_unsettled()
        self._settled = True
        future = self._get_future()
        future.set_exception(error)
        # Readers are optional; avoid "exception was never retrieved" noise
        future.exception()

    async def wait(self) -> T:
        """
        Wait for the handle to settle.

        May be called by any number of readers, before or after settlement.

        **Returns**:
            The resolved value

        **Raises**:
            BaseException: The error passed to `reject()`
        """
        return await asyncio.shield(self._get_future())

    def _check_unsettled(self) -> None:
        if self._settled:
            raise RuntimeError(
                "Deferred settled twice. A completion handle is resolved "
                "or rejected exactly once."
            )

    def __repr__(self) -> str:
        """Readable representation for debugging."""
        state = "settled" if self._settled else "pending"
        return f"Deferred({state})"
