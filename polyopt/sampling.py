"""Random evaluation of a form on the unit sphere (inner-bound sampler)."""
import numba as nb
import numpy as np

from .errors import SamplingError


@nb.njit(cache=True)
def poly_value(p, x, si):
    """sum_j p[j] * prod_i x[si[j, i]]"""
    total = 0.0
    for j in range(si.shape[0]):
        term = p[j]
        if term != 0.0:
            for i in range(si.shape[1]):
                term *= x[si[j, i]]
            total += term
    return total


def random_unit_vector(n, rng):
    """Uniformly random point on the real unit sphere in R^n."""
    while True:
        x = rng.standard_normal(n)
        nrm = np.linalg.norm(x)
        if nrm > 0.0:
            return x / nrm


def poly_rand_input(p, n, si, rng=None):
    """Value of the form p at a random point of the unit sphere.

    Parameters
    ----------
    p : (N,) float64 array
        Coefficients in lexicographic monomial order.
    n : int
        Number of variables.
    si : (N, 2d) int64 array
        Symmetric index set from monomials.symmetric_index_set(2d, n).
    rng : numpy RandomState or Generator, optional
    """
    if rng is None:
        rng = np.random.RandomState()
    p = np.asarray(p, dtype=np.float64)
    si = np.asarray(si, dtype=np.int64)
    if si.ndim != 2 or si.shape[0] != p.shape[0]:
        raise SamplingError(
            f"index set of shape {si.shape} does not match {p.shape[0]} coefficients")
    if si.size and (si.min() < 0 or si.max() >= n):
        raise SamplingError(f"index set refers to variables outside 0..{n - 1}")
    x = random_unit_vector(n, rng)
    val = poly_value(p, x, si)
    if not np.isfinite(val):
        raise SamplingError(f"polynomial evaluated to {val} at a unit vector")
    return float(val)
