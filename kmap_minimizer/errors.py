"""Exception types raised by the minimizer."""


class MinimizerError(Exception):
    """Base class for all minimizer errors."""


class ValidationError(MinimizerError, ValueError):
    """The request itself is malformed (bad variable count, indices, vector)."""


class ConsistencyError(MinimizerError, RuntimeError):
    """
    An internal invariant of the algorithm was violated.

    This never depends on user input; seeing it means there is a bug in the
    generator or the covering step.
    """
