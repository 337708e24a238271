"""Configuration constants and call-boundary option resolution."""
import math
import numbers
import os
from pathlib import Path

from dotenv import load_dotenv

from .errors import InvalidArgument

# Load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")


def _env_float(name, default):
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise InvalidArgument(f"{name}={raw!r} is not a number")


def _env_int(name, default):
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgument(f"{name}={raw!r} is not an integer")


# Optional-argument defaults
DEFAULT_DIRECTION = "max"
DEFAULT_TARGET = None

# Spectral variant: minimum number of eigenvalues requested from the sparse
# eigensolver. Raise it if eigsh misses the extremal eigenvalue.
NEV_FLOOR = _env_int("POLYOPT_NEV_FLOOR", 100)

# Inner-bound sampling stops once it has used this fraction of the
# outer-bound time.
REFINE_TIME_FRACTION = _env_float("POLYOPT_REFINE_FRACTION", 0.25)

# SDP backend. Empty means: MOSEK if installed, otherwise CLARABEL, then SCS.
SDP_SOLVER = os.environ.get("POLYOPT_SDP_SOLVER", "").upper() or None

# Solver tolerances, passed on every solve
MOSEK_PARAMS_TIGHT = {
    'MSK_DPAR_INTPNT_CO_TOL_PFEAS': 1e-10,
    'MSK_DPAR_INTPNT_CO_TOL_DFEAS': 1e-10,
    'MSK_DPAR_INTPNT_CO_TOL_REL_GAP': 1e-10,
}
CLARABEL_PARAMS = {
    'tol_gap_abs': 1e-9,
    'tol_gap_rel': 1e-9,
    'tol_feas': 1e-9,
}
SCS_PARAMS = {
    'max_iters': 25000,
    'eps': 1e-8,
}

_DIRECTIONS = {
    "max": "max",
    "maximize": "max",
    "min": "min",
    "minimize": "min",
}


class BoundOptions:
    """Resolved optional arguments: direction ('max'/'min') and target."""

    __slots__ = ("direction", "target")

    def __init__(self, direction=DEFAULT_DIRECTION, target=DEFAULT_TARGET):
        self.direction = direction
        self.target = target

    @property
    def do_max(self):
        return self.direction == "max"

    @property
    def has_target(self):
        return self.target is not None

    def __repr__(self):
        return f"BoundOptions(direction={self.direction!r}, target={self.target!r})"


def resolve_direction(direction):
    if direction is None:
        return DEFAULT_DIRECTION
    if not isinstance(direction, str) or direction.lower() not in _DIRECTIONS:
        raise InvalidArgument(
            f"direction must be 'max' or 'min', got {direction!r}")
    return _DIRECTIONS[direction.lower()]


def resolve_target(target):
    if target is None:
        return DEFAULT_TARGET
    if isinstance(target, str):
        if target.lower() == "none":
            return None
        raise InvalidArgument(f"target must be a number or 'none', got {target!r}")
    if isinstance(target, bool) or not isinstance(target, numbers.Real):
        raise InvalidArgument(f"target must be a real number, got {target!r}")
    target = float(target)
    if math.isnan(target):
        raise InvalidArgument("target must not be NaN")
    return target


def resolve_options(direction=None, target=None):
    """Apply defaults once at the call boundary (direction='max', target=None)."""
    return BoundOptions(resolve_direction(direction), resolve_target(target))
