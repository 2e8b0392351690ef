"""Exception hierarchy shared by the profiling harness."""


class BenchmarkError(Exception):
    """Base exception for all benchmark harness errors."""


class InvalidSampleError(BenchmarkError, ValueError):
    """A timing sample carried a negative duration or count."""


class PayloadDecodeError(BenchmarkError, ValueError):
    """A share payload could not be decoded, parsed or validated."""


class RunStateError(BenchmarkError, RuntimeError):
    """An operation was invoked in the wrong run mode or phase."""


class EngineAttachError(BenchmarkError, RuntimeError):
    """The execution engine rejected a profiler attach or lifecycle call."""
