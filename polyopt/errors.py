"""Exception types raised by polyopt.

InvalidArgument is raised before any solver work starts. Solver and sampler
failures are never swallowed: they surface as RelaxationSolveError or
SamplingError.
"""


class PolyOptError(Exception):
    """Base class for all polyopt errors."""


class InvalidArgument(PolyOptError, ValueError):
    """Malformed polynomial, bad n/d/k, or unrecognized direction/target."""


class RelaxationSolveError(PolyOptError, RuntimeError):
    """The SDP or eigenvalue solver failed or reported infeasibility."""

    def __init__(self, message, solver=None, status=None):
        super().__init__(message)
        self.solver = solver
        self.status = status


class SamplingError(PolyOptError, RuntimeError):
    """The random sampler failed during inner-bound refinement.

    `partial` holds the inner bound reached before the failure (the analytic
    seed, possibly already tightened by earlier samples), or None if the
    failure happened before the seed was computed.
    """

    def __init__(self, message, partial=None, n_samples=0):
        super().__init__(message)
        self.partial = partial
        self.n_samples = n_samples
