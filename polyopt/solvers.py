"""Numerical backends: extremal eigenvalues and the symmetric-extension SDP.

Both backends raise RelaxationSolveError on failure. Neither retries with
different parameters on its own; SDPSolver only falls through its list of
candidate cvxpy solvers, the same way a single solve is attempted with
several installed solvers.
"""
import warnings as _warnings

import cvxpy as cp
import numpy as np
import scipy.sparse as sp
from scipy.sparse.linalg import ArpackError, ArpackNoConvergence, eigsh

from .config import (
    CLARABEL_PARAMS,
    MOSEK_PARAMS_TIGHT,
    NEV_FLOOR,
    SCS_PARAMS,
    SDP_SOLVER,
)
from .errors import InvalidArgument, RelaxationSolveError
from .matrices import partial_transpose
from .output import log

_OK_STATUSES = ('optimal', 'optimal_inaccurate')


def _dense(M):
    return M.toarray() if sp.issparse(M) else np.asarray(M)


def eigenvalue_count(s, floor=NEV_FLOOR):
    """How many eigenvalues of an s x s matrix to request: clamp(round(sqrt(s)), floor, s)."""
    return int(min(max(round(np.sqrt(s)), floor), s))


class SpectralSolver:
    """Extremal eigenvalues of a Hermitian (possibly sparse) matrix.

    If you encounter missed extremal eigenvalues on large matrices, raise
    nev_floor.
    """

    def __init__(self, nev_floor=NEV_FLOOR, tol=0, maxiter=None):
        if nev_floor < 1:
            raise InvalidArgument(f"nev_floor must be >= 1, got {nev_floor}")
        self.nev_floor = nev_floor
        self.tol = tol
        self.maxiter = maxiter
        self.last_path = None
        self.last_nev = None

    def eigenvalues(self, M, count=None, which='LA'):
        """Eigenvalues of M: all of them (count=None or count >= s), else `count`
        largest ('LA') or smallest ('SA') algebraic ones via ARPACK."""
        if which not in ('LA', 'SA'):
            raise InvalidArgument(f"which must be 'LA' or 'SA', got {which!r}")
        s = M.shape[0]
        try:
            if count is None or count >= s:
                self.last_path = 'full'
                return np.linalg.eigvalsh(_dense(M))
            self.last_path = 'partial'
            vals = eigsh(sp.csr_matrix(M), k=count, which=which, tol=self.tol,
                         maxiter=self.maxiter, return_eigenvectors=False)
            return np.sort(np.real(vals))
        except ArpackNoConvergence as e:
            raise RelaxationSolveError(
                f"eigsh did not converge for {count} eigenvalues of a {s}x{s} "
                f"matrix ({len(e.eigenvalues)} converged); try a larger nev_floor",
                solver='ARPACK', status='no_convergence') from e
        except ArpackError as e:
            raise RelaxationSolveError(f"ARPACK failed: {e}", solver='ARPACK',
                                       status='error') from e
        except np.linalg.LinAlgError as e:
            raise RelaxationSolveError(f"eigvalsh failed: {e}", solver='LAPACK',
                                       status='error') from e

    def extreme_eigenvalue(self, M, direction='max'):
        """Largest (direction='max') or smallest real eigenvalue of M."""
        s = M.shape[0]
        nev = eigenvalue_count(s, self.nev_floor)
        self.last_nev = nev
        if direction == 'max':
            vals = self.eigenvalues(M, None if nev >= s else nev, 'LA')
            return float(np.max(vals))
        vals = self.eigenvalues(M, None if nev >= s else nev, 'SA')
        return float(np.min(vals))


def pick_sdp_solvers(solver=None):
    """Ordered list of cvxpy solvers to try."""
    if solver is not None:
        return [solver.upper()]
    installed = cp.installed_solvers()
    if 'MOSEK' in installed:
        solver_list = ['MOSEK']
        if 'CLARABEL' in installed:
            solver_list.append('CLARABEL')
    else:
        solver_list = ['CLARABEL'] if 'CLARABEL' in installed else []
        if 'SCS' in installed:
            solver_list.append('SCS')
    return solver_list


def _solver_kwargs(solver):
    if solver == 'MOSEK':
        return {'mosek_params': dict(MOSEK_PARAMS_TIGHT)}
    if solver == 'CLARABEL':
        return dict(CLARABEL_PARAMS)
    if solver == 'SCS':
        return dict(SCS_PARAMS)
    return {}


class SDPSolver:
    """Symmetric-extension SDP over density matrices on the symmetric subspace.

    maximize / minimize   Re tr(rho M)
    subject to            rho >> 0,  tr(rho) = 1,
                          PT_0(V rho V^T) = V rho V^T
    where V is the isometry onto Sym^m(R^n) and PT_0 transposes the first of
    the m tensor factors.

    For real M the optimum is attained at a real symmetric rho (the real part
    of a feasible Hermitian rho is feasible with the same objective), so the
    variable is real symmetric unless M is complex.
    """

    def __init__(self, solver=None, verbose=False):
        self.solver = solver if solver is not None else SDP_SOLVER
        self.verbose = verbose
        self.last_solver = None
        self.last_status = None

    def build_problem(self, M, V, dims, direction='max'):
        M = _dense(M)
        V = _dense(V)
        s = M.shape[0]
        if V.shape[1] != s:
            raise InvalidArgument(
                f"isometry has {V.shape[1]} columns but the matrix is {s}x{s}")
        if np.iscomplexobj(M):
            rho = cp.Variable((s, s), hermitian=True)
            value = cp.real(cp.trace(rho @ M))
        else:
            # cp.real has no canonicalization for real arguments
            rho = cp.Variable((s, s), symmetric=True)
            value = cp.trace(rho @ M)
        if direction == 'max':
            objective = cp.Maximize(value)
        else:
            objective = cp.Minimize(value)
        lifted = V @ rho @ V.T
        constraints = [
            rho >> 0,
            cp.trace(rho) == 1,
            partial_transpose(lifted, 0, dims) == lifted,
        ]
        return cp.Problem(objective, constraints)

    def solve(self, M, V, dims, direction='max'):
        """Optimal value of the SDP; raises RelaxationSolveError on failure."""
        prob = self.build_problem(M, V, dims, direction)
        solver_list = pick_sdp_solvers(self.solver)
        if not solver_list:
            raise RelaxationSolveError("no SDP solver installed for cvxpy",
                                       status='no_solver')
        failures = []
        last_error = None
        for s in solver_list:
            try:
                with _warnings.catch_warnings():
                    _warnings.filterwarnings('ignore',
                                             message='Solution may be inaccurate')
                    prob.solve(solver=s, verbose=False, **_solver_kwargs(s))
            except (KeyboardInterrupt, SystemExit):
                raise
            except Exception as e:
                # cvxpy raises SolverError, but also NotImplementedError and
                # ValueError from canonicalization
                failures.append(f"{s}: {type(e).__name__}: {e}")
                last_error = e
                if self.verbose:
                    log(f"  {s} failed: {e}")
                continue
            self.last_solver = s
            self.last_status = prob.status
            if prob.status in _OK_STATUSES and prob.value is not None:
                if self.verbose:
                    log(f"  SDP solved by {s} ({prob.status}), "
                        f"value={float(np.real(prob.value)):.10f}")
                return float(np.real(prob.value))
            failures.append(f"{s}: status {prob.status}")
            if self.verbose:
                log(f"  {s} returned status {prob.status}")
        raise RelaxationSolveError(
            "SDP relaxation not solved (" + "; ".join(failures) + ")",
            solver=self.last_solver, status=self.last_status) from last_error
