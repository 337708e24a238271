"""Outer and inner bounds on the extreme value of a form on the unit sphere.

Given a real form p of degree 2d in n variables and a hierarchy level k >= 0:

  Outer bound ob (max p <= ob when maximizing, min p >= ob when minimizing):
    - SDP variant (polynomial_sos): optimal value of the symmetric-extension
      SDP over rho on Sym^{d+k}(R^n) with tr(rho M_k), rho >> 0, tr rho = 1
      and partial-transpose invariance. Non-increasing in k (maximizing).
    - Spectral variant (polynomial_optimize): extremal eigenvalue of M_k.
      Cheaper, weaker for the same k.

  Inner bound ib:
    1. If a target is given and ob already certifies it (ob <= target when
       maximizing), return -inf (+inf when minimizing) and do nothing else.
    2. Analytic seed  ob -/+ 4 d (n-1) ||M_0|| / (d+k+1)  from the level-0 matrix.
    3. Tighten with p(x) at random unit x until the refinement budget is spent
       (default: 25% of the outer-bound time).
"""
import math
import time

import numpy as np

from .budget import TimeBudget
from .config import resolve_options
from .errors import InvalidArgument, SamplingError
from .matrices import polynomial_as_matrix, symmetric_projection
from .monomials import check_dimensions, check_polynomial, symmetric_index_set
from .output import fmt_bound, log
from .sampling import poly_rand_input
from .solvers import SDPSolver, SpectralSolver

METHODS = ('spectral', 'sdp')


def target_crossed(ob, target, direction):
    """True if ob already proves the optimum is on the far side of target."""
    if target is None:
        return False
    if direction == 'max':
        return ob <= target
    return ob >= target


def sentinel_inner_bound(direction):
    return -math.inf if direction == 'max' else math.inf


def analytic_inner_bound(ob, M0, n, d, k, direction):
    """ob -/+ 4 d (n-1) ||M0||_2 / (d+k+1), with M0 the level-0 matrix."""
    dense = M0.toarray() if hasattr(M0, 'toarray') else np.asarray(M0)
    gap = 4.0 * d * (n - 1) * np.linalg.norm(dense, 2) / (d + k + 1)
    if direction == 'max':
        return ob - gap
    return ob + gap


def _outer(method, p, n, d, k, direction, solver, verbose):
    """Representing matrix, ob and solver path for one level."""
    M = polynomial_as_matrix(p, n, d, k)
    if method == 'sdp':
        solver = solver if solver is not None else SDPSolver(verbose=verbose)
        V = symmetric_projection(n, d + k, partial=True)
        ob = solver.solve(M, V, [n] * (d + k), direction)
        path = solver.last_solver
    else:
        solver = solver if solver is not None else SpectralSolver()
        ob = solver.extreme_eigenvalue(M, direction)
        path = solver.last_path
    return M, ob, path


def sdp_outer_bound(p, n, d, k, direction=None, sdp_solver=None, verbose=False):
    """Outer bound from the symmetric-extension SDP at level k."""
    n, d, k = check_dimensions(n, d, k)
    p = check_polynomial(p, n, d)
    opts = resolve_options(direction)
    _, ob, _ = _outer('sdp', p, n, d, k, opts.direction, sdp_solver, verbose)
    return ob


def spectral_outer_bound(p, n, d, k, direction=None, spectral_solver=None,
                         verbose=False):
    """Outer bound from the extremal eigenvalue of the level-k matrix."""
    n, d, k = check_dimensions(n, d, k)
    p = check_polynomial(p, n, d)
    opts = resolve_options(direction)
    _, ob, _ = _outer('spectral', p, n, d, k, opts.direction, spectral_solver,
                      verbose)
    return ob


def inner_bound(p, n, d, k, ob, ob_time, direction=None, target=None,
                budget=None, rng=None, M=None, verbose=False):
    """Inner bound paired with an outer bound ob that took ob_time seconds.

    Parameters
    ----------
    M : sparse or dense matrix, optional
        The level-k representing matrix already built for ob. Reused for the
        analytic seed only when k == 0; for k > 0 the level-0 matrix is built
        separately.
    budget : TimeBudget or SampleBudget, optional
        Refinement budget policy. Defaults to TimeBudget().
    rng : numpy RandomState or Generator, optional

    Returns
    -------
    dict with keys
        ib        -- the inner bound (sentinel +/-inf when skipped)
        analytic  -- the analytic seed (None when skipped)
        n_samples -- number of random evaluations
        elapsed   -- seconds spent on the inner bound
        skipped   -- True when the target early exit fired

    Raises
    ------
    SamplingError
        If the sampler fails; `partial` holds the inner bound reached so far.
    """
    n, d, k = check_dimensions(n, d, k)
    p = check_polynomial(p, n, d)
    opts = resolve_options(direction, target)
    do_max = opts.do_max

    if target_crossed(ob, opts.target, opts.direction):
        ib = sentinel_inner_bound(opts.direction)
        if verbose:
            log(f"  target {opts.target} certified by ob={fmt_bound(ob)}; "
                f"inner bound skipped")
        return {'ib': ib, 'analytic': None, 'n_samples': 0,
                'elapsed': 0.0, 'skipped': True}

    if budget is None:
        budget = TimeBudget()
    if rng is None:
        rng = np.random.RandomState()
    budget.start(ob_time)

    if k > 0 or M is None:
        M0 = polynomial_as_matrix(p, n, d)  # error estimate uses the k = 0 matrix
    else:
        M0 = M
    ib = analytic_inner_bound(ob, M0, n, d, k, opts.direction)
    analytic = ib

    si = symmetric_index_set(2 * d, n)
    n_samples = 0
    while not budget.exhausted(n_samples):
        try:
            new_ib = poly_rand_input(p, n, si, rng=rng)
        except SamplingError as e:
            e.partial = ib
            e.n_samples = n_samples
            raise
        if do_max:
            ib = max(ib, new_ib)
        else:
            ib = min(ib, new_ib)
        n_samples += 1

    elapsed = budget.elapsed()
    if verbose:
        log(f"  inner bound: analytic={fmt_bound(analytic)}, "
            f"sampled={fmt_bound(ib)} ({n_samples} samples; {budget.status_line()})")
    return {'ib': ib, 'analytic': analytic, 'n_samples': n_samples,
            'elapsed': elapsed, 'skipped': False}


def compute_bounds(p, n, d, k, method='spectral', direction=None, target=None,
                   with_inner=True, budget=None, rng=None, solver=None,
                   verbose=False):
    """Outer bound (and optionally inner bound) at one level, with timings.

    Returns a dict: method, n, d, k, direction, target, size, path, ob,
    ob_time, and when with_inner: ib, ib_analytic, n_samples, ib_time,
    ib_skipped.
    """
    n, d, k = check_dimensions(n, d, k)
    p = check_polynomial(p, n, d)
    opts = resolve_options(direction, target)
    if method not in METHODS:
        raise InvalidArgument(f"method must be one of {METHODS}, got {method!r}")

    ob_start = time.perf_counter()
    M, ob, path = _outer(method, p, n, d, k, opts.direction, solver, verbose)
    ob_time = time.perf_counter() - ob_start  # time spent on the outer bound
    if verbose:
        log(f"  {method} k={k}: size {M.shape[0]}, ob={fmt_bound(ob)} "
            f"({path}, {ob_time:.3f}s)")

    result = {
        'method': method, 'n': n, 'd': d, 'k': k,
        'direction': opts.direction, 'target': opts.target,
        'size': M.shape[0], 'path': path,
        'ob': ob, 'ob_time': ob_time,
    }
    if with_inner:
        inner = inner_bound(p, n, d, k, ob, ob_time, direction=opts.direction,
                            target=opts.target, budget=budget, rng=rng, M=M,
                            verbose=verbose)
        result.update({
            'ib': inner['ib'],
            'ib_analytic': inner['analytic'],
            'n_samples': inner['n_samples'],
            'ib_time': inner['elapsed'],
            'ib_skipped': inner['skipped'],
        })
    return result


def polynomial_sos(p, n, d, k, direction=None, target=None, with_inner=False,
                   budget=None, rng=None, sdp_solver=None, verbose=False):
    """Bound the max (or min) of p on the unit sphere via the SDP hierarchy.

    Returns ob, or (ob, ib) when with_inner=True.
    """
    res = compute_bounds(p, n, d, k, method='sdp', direction=direction,
                         target=target, with_inner=with_inner, budget=budget,
                         rng=rng, solver=sdp_solver, verbose=verbose)
    if with_inner:
        return res['ob'], res['ib']
    return res['ob']


def polynomial_optimize(p, n, d, k, direction=None, target=None,
                        with_inner=False, budget=None, rng=None,
                        spectral_solver=None, verbose=False):
    """Bound the max (or min) of p on the unit sphere via extremal eigenvalues.

    Returns ob, or (ob, ib) when with_inner=True.
    """
    res = compute_bounds(p, n, d, k, method='spectral', direction=direction,
                         target=target, with_inner=with_inner, budget=budget,
                         rng=rng, solver=spectral_solver, verbose=verbose)
    if with_inner:
        return res['ob'], res['ib']
    return res['ob']
