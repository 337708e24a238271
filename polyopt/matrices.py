"""Matrix representations of forms on the symmetric subspace.

Setup:
  Let m = d + k. The symmetric subspace Sym^m(R^n) of (R^n)^{(x)m} has the
  orthonormal basis
      e_g = sum_{words w of type g} e_w / sqrt(mult(g)),   |g| = m,
  indexed by exponent tuples g in lexicographic order (see monomials.py).
  Tensor-product indices are row-major: the first factor is most significant,
  matching np.kron / scipy.sparse.kron.

  For a unit vector x, v(x) = V^T x^{(x)m} has entries sqrt(mult(g)) x^g and is
  itself a unit vector.

Representing matrix:
  Level 0 (m = d): M0[g, h] = sqrt(mult(g) mult(h)) * p_{g+h} / mult(g+h).
  This is the fully symmetric (partial-transpose invariant) representation;
  by the multinomial Vandermonde identity, v(x)^T M0 v(x) = p(x).

  Level k: M_k = V_m^T (M0_full (x) I_{n^k}) V_m with M0_full = V_d M0 V_d^T.
  On the sphere v(x)^T M_k v(x) = p(x) (x.x)^k = p(x), so lambda_max(M_k) >= max p.
  M_k is a compression of M_{k-1} (x) I_n, hence lambda_max(M_k) <= lambda_max(M_{k-1}).
"""
from itertools import product

import cvxpy as cp
import numpy as np
import scipy.sparse as sp

from .errors import InvalidArgument
from .monomials import (
    check_dimensions,
    check_polynomial,
    monomial_exponents,
    monomial_indices,
    monomial_position,
    multinomial,
)


def symmetric_isometry(n, degree):
    """Sparse (n^degree, s) isometry whose columns span Sym^degree(R^n).

    s = C(n + degree - 1, degree). Column order follows monomial_indices.
    """
    cols = {idx: j for j, idx in enumerate(monomial_indices(n, degree))}
    words = np.array(list(product(range(n), repeat=degree)), dtype=np.int64)
    words = words.reshape(n ** degree, degree)
    col_of_row = np.array([cols[w] for w in map(tuple, np.sort(words, axis=1).tolist())],
                          dtype=np.int64)
    weights = np.array([1.0 / np.sqrt(multinomial(e))
                        for e in monomial_exponents(n, degree)])
    rows = np.arange(n ** degree)
    return sp.csr_matrix((weights[col_of_row], (rows, col_of_row)),
                         shape=(n ** degree, len(cols)))


def symmetric_projection(n, degree, partial=False):
    """Projector onto Sym^degree(R^n), or with partial=True its isometry V."""
    if n < 1 or degree < 0:
        raise InvalidArgument(f"need n >= 1 and degree >= 0, got n={n}, degree={degree}")
    V = symmetric_isometry(n, degree)
    if partial:
        return V
    return (V @ V.T).tocsr()


def _level0_matrix(p, n, d):
    """Dense level-0 representation M0 (size C(n+d-1, d))."""
    half = monomial_exponents(n, d)
    pos = monomial_position(n, 2 * d)
    root_mult = np.sqrt([float(multinomial(g)) for g in half])
    s = len(half)
    M0 = np.zeros((s, s))
    for a in range(s):
        for b in range(a, s):
            e = tuple(x + y for x, y in zip(half[a], half[b]))
            val = root_mult[a] * root_mult[b] * p[pos[e]] / multinomial(e)
            M0[a, b] = val
            M0[b, a] = val
    return M0


def polynomial_as_matrix(p, n, d, k=None):
    """Hermitian representing matrix of p at hierarchy level k.

    Parameters
    ----------
    p : sequence of float
        Coefficients of the degree-2d form in lexicographic monomial order.
    n, d : int
        Number of variables and half-degree.
    k : int or None
        Hierarchy level; None means level 0.

    Returns
    -------
    scipy.sparse.csr_matrix of shape (s, s), s = C(n+d+k-1, d+k), real
    symmetric, expressed in the basis of symmetric_isometry(n, d + k).
    """
    n, d, k = check_dimensions(n, d, 0 if k is None else k)
    p = check_polynomial(p, n, d)
    M0 = _level0_matrix(p, n, d)
    if k == 0:
        return sp.csr_matrix(M0)

    V_d = symmetric_isometry(n, d)
    M0_full = V_d @ sp.csr_matrix(M0) @ V_d.T
    lifted = sp.kron(M0_full, sp.identity(n ** k, format='csr'), format='csr')
    V = symmetric_isometry(n, d + k)
    M = (V.T @ lifted @ V).tocsr()
    # clean up rounding asymmetry
    M = ((M + M.T) * 0.5).tocsr()
    M.eliminate_zeros()
    return M


def partial_transpose(X, sys=0, dims=None):
    """Transpose subsystem `sys` of a square matrix on a tensor product space.

    Parameters
    ----------
    X : ndarray, scipy sparse matrix or cvxpy Expression
        Square matrix of side prod(dims).
    sys : int
        Index (0-based) of the subsystem to transpose.
    dims : sequence of int, optional
        Local dimensions. Defaults to two equal subsystems.

    Returns
    -------
    Same kind as X (sparse input comes back dense).
    """
    shape = X.shape
    if len(shape) != 2 or shape[0] != shape[1]:
        raise InvalidArgument(f"partial_transpose needs a square matrix, got shape {shape}")
    D = shape[0]
    if dims is None:
        root = int(round(np.sqrt(D)))
        if root * root != D:
            raise InvalidArgument(
                f"cannot split dimension {D} into two equal subsystems; pass dims")
        dims = [root, root]
    dims = [int(x) for x in dims]
    if int(np.prod(dims)) != D:
        raise InvalidArgument(f"dims {dims} do not multiply to {D}")
    if not 0 <= sys < len(dims):
        raise InvalidArgument(f"subsystem {sys} out of range for {len(dims)} subsystems")

    if isinstance(X, cp.Expression):
        if len(dims) == 1:
            return X.T
        return cp.partial_transpose(X, dims=tuple(dims), axis=sys)

    if sp.issparse(X):
        X = X.toarray()
    X = np.asarray(X)
    r = len(dims)
    T = X.reshape(dims + dims)
    T = np.swapaxes(T, sys, r + sys)
    return T.reshape(D, D)
