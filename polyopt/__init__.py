"""
polyopt
=======

Outer and inner bounds on the maximum or minimum of a real homogeneous
polynomial of degree 2d in n variables over the unit sphere, via a
hierarchy indexed by k >= 0:

  polynomial_sos       -- symmetric-extension SDP (tighter, slower)
  polynomial_optimize  -- extremal eigenvalue of the representing matrix

Both return the outer bound, or (outer, inner) with with_inner=True.
"""

__version__ = "0.1.0"

from polyopt.errors import (
    PolyOptError,
    InvalidArgument,
    RelaxationSolveError,
    SamplingError,
)
from polyopt.config import BoundOptions, resolve_options
from polyopt.monomials import (
    count_monomials,
    monomial_exponents,
    multinomial,
    symmetric_index_set,
    check_polynomial,
)
from polyopt.matrices import (
    polynomial_as_matrix,
    symmetric_isometry,
    symmetric_projection,
    partial_transpose,
)
from polyopt.solvers import SpectralSolver, SDPSolver, eigenvalue_count
from polyopt.sampling import poly_rand_input, poly_value
from polyopt.budget import TimeBudget, SampleBudget
from polyopt.bounds import (
    sdp_outer_bound,
    spectral_outer_bound,
    inner_bound,
    analytic_inner_bound,
    target_crossed,
    compute_bounds,
    polynomial_sos,
    polynomial_optimize,
)
from polyopt.sweep import sweep_levels
