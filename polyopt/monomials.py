"""Monomial bookkeeping for homogeneous polynomials.

Conventions:
  Variables are indexed 0..n-1. A monomial of degree D is stored either as an
  exponent tuple (e_0, ..., e_{n-1}) with sum e = D, or as its sorted tuple of
  variable indices (i_1 <= ... <= i_D), e.g. x0^2 x2 <-> (2, 0, 1) <-> (0, 0, 2).
  Coefficient vectors list monomials in lexicographic order: x0^D first,
  x_{n-1}^D last. For n=2, D=2 this is [x^2, xy, y^2].
"""
import numbers
from itertools import combinations_with_replacement
from math import comb, factorial

import numpy as np

from .errors import InvalidArgument


def count_monomials(n, degree):
    """Number of degree-`degree` monomials in n variables: C(n + degree - 1, degree)."""
    return comb(n + degree - 1, degree)


def monomial_indices(n, degree):
    """Sorted variable-index tuples of all monomials, in lexicographic order."""
    return list(combinations_with_replacement(range(n), degree))


def exponents_of(indices, n):
    """Exponent tuple of a monomial given by its variable indices."""
    e = [0] * n
    for i in indices:
        e[i] += 1
    return tuple(e)


def monomial_exponents(n, degree):
    """Exponent tuples of all monomials, in lexicographic order."""
    return [exponents_of(idx, n) for idx in monomial_indices(n, degree)]


def monomial_position(n, degree):
    """Map exponent tuple -> position in the coefficient vector."""
    return {e: j for j, e in enumerate(monomial_exponents(n, degree))}


def multinomial(exponents):
    """(sum e)! / prod(e_i!): number of index words of the given type."""
    out = factorial(sum(exponents))
    for e in exponents:
        out //= factorial(e)
    return out


def symmetric_index_set(degree, n):
    """(count_monomials(n, degree), degree) int64 array of variable indices.

    Row j lists the variables of monomial j with repetition, so the monomial
    value at x is np.prod(x[si[j]]).
    """
    rows = monomial_indices(n, degree)
    if not rows:
        return np.zeros((0, degree), dtype=np.int64)
    return np.array(rows, dtype=np.int64).reshape(len(rows), degree)


def _check_int(name, value, lowest):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if value < lowest:
        raise InvalidArgument(f"{name} must be >= {lowest}, got {value}")
    return int(value)


def check_dimensions(n, d, k=0):
    """Validate n >= 1, d >= 1, k >= 0. Returns them as plain ints."""
    return _check_int("n", n, 1), _check_int("d", d, 1), _check_int("k", k, 0)


def check_polynomial(p, n, d):
    """Validate a coefficient vector for a degree-2d form in n variables.

    Returns a contiguous float64 copy.
    """
    n, d, _ = check_dimensions(n, d)
    try:
        arr = np.asarray(p)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"polynomial is not a coefficient sequence: {e}")
    if arr.ndim == 2 and 1 in arr.shape:
        # row or column vector
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise InvalidArgument(
            f"polynomial must be a 1-D coefficient vector, got shape {arr.shape}")
    if np.iscomplexobj(arr):
        raise InvalidArgument("polynomial coefficients must be real")
    if arr.dtype == object or not np.issubdtype(arr.dtype, np.number):
        raise InvalidArgument(f"polynomial coefficients must be numeric, got {arr.dtype}")
    expected = count_monomials(n, 2 * d)
    if arr.shape[0] != expected:
        raise InvalidArgument(
            f"polynomial has {arr.shape[0]} coefficients; a degree-{2 * d} form "
            f"in {n} variables needs {expected}")
    arr = np.ascontiguousarray(arr, dtype=np.float64)
    if not np.all(np.isfinite(arr)):
        raise InvalidArgument("polynomial coefficients must be finite")
    return arr
