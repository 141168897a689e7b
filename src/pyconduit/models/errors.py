"""Exceptions raised by the engine for misuse of its handler API.

Raised inside a handler, they never escape Pipeline.execute(): the run
that hits one of them is failed like any other handler exception and
reported in its result.
"""

__all__ = ["LaunchAfterCompleteError", "PipelineUsageError", "TerminateCalledTwiceError"]


class PipelineUsageError(RuntimeError):
    """Base class for programming errors detected by the engine.

    Raised when a handler uses its ExecutionContext in a way the engine
    cannot honor. Subclasses RuntimeError so generic handlers that already
    catch RuntimeError keep working.
    """


class TerminateCalledTwiceError(PipelineUsageError):
    """Raised when terminate() is called more than once in one invocation.

    A handler gets a fresh context per invocation, and that context
    accepts a single termination. The second call fails the run that the
    handler belongs to, nested runs already launched are unaffected.

    Attributes:
        run_id: Identifier of the run whose handler misbehaved
        handler_index: Position of the handler in the chain
    """

    def __init__(self, run_id: str, handler_index: int):
        super().__init__("terminate() called twice!")
        self.run_id = run_id
        self.handler_index = handler_index

    def __repr__(self) -> str:
        """Readable representation for debugging."""
        return (
            f"TerminateCalledTwiceError(run_id={self.run_id!r}, "
            f"handler_index={self.handler_index})"
        )


class LaunchAfterCompleteError(PipelineUsageError):
    """Raised when a retained context launches after its run completed.

    Once a run has merged its nested results nothing would await a new
    nested run, so the launch is refused instead of started.

    Attributes:
        run_id: Identifier of the completed run
    """

    def __init__(self, run_id: str):
        super().__init__(f"launch() after run {run_id} completed")
        self.run_id = run_id

    def __repr__(self) -> str:
        """Readable representation for debugging."""
        return f"LaunchAfterCompleteError(run_id={self.run_id!r})"
