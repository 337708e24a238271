"""Bounds over a range of hierarchy levels, optionally in parallel via joblib.

Each level is an independent, sequential compute_bounds call.
"""
import numbers

import numpy as np
from joblib import Parallel, delayed

from .bounds import METHODS, compute_bounds
from .config import resolve_options
from .errors import InvalidArgument
from .monomials import check_dimensions, check_polynomial
from .output import fmt_bound, log


def _level_rng(seed, k):
    if seed is None:
        return None
    return np.random.RandomState(seed + k)


def parse_levels(levels):
    """Sorted unique levels from an int, an iterable of ints or a '0,1,2' / '0-3' string."""
    if isinstance(levels, str):
        out = []
        for part in levels.split(","):
            part = part.strip()
            if not part:
                continue
            if "-" in part:
                lo, hi = part.split("-", 1)
                try:
                    out.extend(range(int(lo), int(hi) + 1))
                except ValueError:
                    raise InvalidArgument(f"bad level range {part!r}")
            else:
                try:
                    out.append(int(part))
                except ValueError:
                    raise InvalidArgument(f"bad level {part!r}")
        levels = out
    elif isinstance(levels, numbers.Integral):
        levels = [levels]
    levels = sorted(set(levels))
    if not levels:
        raise InvalidArgument("levels cannot be empty")
    for k in levels:
        if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k < 0:
            raise InvalidArgument(f"levels must be non-negative integers, got {k!r}")
    return [int(k) for k in levels]


def sweep_levels(p, n, d, levels, method='spectral', direction=None,
                 target=None, with_inner=False, budget=None, seed=None,
                 n_jobs=1, verbose=False):
    """compute_bounds for every level in `levels`; results sorted by k."""
    n, d, _ = check_dimensions(n, d)
    p = check_polynomial(p, n, d)
    opts = resolve_options(direction, target)
    if method not in METHODS:
        raise InvalidArgument(f"method must be one of {METHODS}, got {method!r}")
    levels = parse_levels(levels)

    def one(k):
        return compute_bounds(p, n, d, k, method=method,
                              direction=opts.direction, target=opts.target,
                              with_inner=with_inner, budget=budget,
                              rng=_level_rng(seed, k), verbose=verbose)

    if n_jobs == 1 or len(levels) == 1:
        results = [one(k) for k in levels]
    else:
        results = Parallel(n_jobs=n_jobs)(delayed(one)(k) for k in levels)

    results = sorted(results, key=lambda r: r['k'])
    if verbose:
        for r in results:
            log(f"  k={r['k']}: ob={fmt_bound(r['ob'])}"
                + (f", ib={fmt_bound(r['ib'])}" if with_inner else ""))
    return results


def is_tightening(results, tol=1e-7):
    """True if ob is non-increasing (max) / non-decreasing (min) in k, up to tol."""
    if not results:
        return True
    obs = [r['ob'] for r in sorted(results, key=lambda r: r['k'])]
    sign = 1.0 if results[0]['direction'] == 'max' else -1.0
    return all(sign * (b - a) <= tol for a, b in zip(obs, obs[1:]))
