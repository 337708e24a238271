"""Tests for eigenvalue sizing/path selection and the SDP backend."""
import sys, os
import unittest
from unittest import mock

import numpy as np
import scipy.sparse as sp
from scipy.sparse.linalg import ArpackNoConvergence

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from polyopt import solvers
from polyopt.errors import InvalidArgument, RelaxationSolveError
from polyopt.matrices import polynomial_as_matrix, symmetric_projection
from polyopt.solvers import (
    SDPSolver,
    SpectralSolver,
    eigenvalue_count,
    pick_sdp_solvers,
)


class TestEigenvalueCount(unittest.TestCase):
    def test_small_matrix_uses_all(self):
        self.assertEqual(eigenvalue_count(4), 4)
        self.assertEqual(eigenvalue_count(100), 100)

    def test_floor(self):
        self.assertEqual(eigenvalue_count(150), 100)
        self.assertEqual(eigenvalue_count(10000), 100)

    def test_sqrt_above_floor(self):
        self.assertEqual(eigenvalue_count(40000), 200)
        self.assertEqual(eigenvalue_count(40401), 201)

    def test_custom_floor(self):
        self.assertEqual(eigenvalue_count(121, floor=5), 11)
        self.assertEqual(eigenvalue_count(3, floor=5), 3)

    def test_formula(self):
        for s in [1, 7, 99, 101, 250, 12345, 50000]:
            self.assertEqual(eigenvalue_count(s),
                             min(max(int(round(np.sqrt(s))), 100), s))


class TestSpectralSolver(unittest.TestCase):
    def test_full_path_small(self):
        M = sp.diags(np.arange(50, dtype=float)).tocsr()
        solver = SpectralSolver()
        self.assertEqual(solver.extreme_eigenvalue(M, 'max'), 49.0)
        self.assertEqual(solver.last_path, 'full')
        self.assertEqual(solver.last_nev, 50)
        self.assertEqual(solver.extreme_eigenvalue(M, 'min'), 0.0)

    def test_partial_path_large(self):
        M = sp.diags(np.linspace(-3.0, 5.0, 150)).tocsr()
        solver = SpectralSolver()
        with mock.patch.object(solvers, 'eigsh', wraps=solvers.eigsh) as m:
            top = solver.extreme_eigenvalue(M, 'max')
            self.assertEqual(m.call_count, 1)
            self.assertEqual(m.call_args.kwargs['k'], 100)
            self.assertEqual(m.call_args.kwargs['which'], 'LA')
        self.assertEqual(solver.last_path, 'partial')
        self.assertAlmostEqual(top, 5.0, places=8)

    def test_partial_path_smallest(self):
        M = sp.diags(np.linspace(-3.0, 5.0, 150)).tocsr()
        solver = SpectralSolver()
        with mock.patch.object(solvers, 'eigsh', wraps=solvers.eigsh) as m:
            bottom = solver.extreme_eigenvalue(M, 'min')
            self.assertEqual(m.call_args.kwargs['which'], 'SA')
        self.assertAlmostEqual(bottom, -3.0, places=8)

    def test_full_path_iff_nev_covers_matrix(self):
        M = sp.diags(np.arange(150, dtype=float)).tocsr()
        solver = SpectralSolver(nev_floor=200)
        with mock.patch.object(solvers, 'eigsh') as m:
            self.assertEqual(solver.extreme_eigenvalue(M, 'max'), 149.0)
            m.assert_not_called()
        self.assertEqual(solver.last_path, 'full')

    def test_no_convergence_is_fatal(self):
        M = sp.diags(np.arange(150, dtype=float)).tocsr()
        err = ArpackNoConvergence("no convergence", np.array([]), np.array([]))
        with mock.patch.object(solvers, 'eigsh', side_effect=err):
            with self.assertRaises(RelaxationSolveError) as cm:
                SpectralSolver().extreme_eigenvalue(M, 'max')
        self.assertEqual(cm.exception.status, 'no_convergence')

    def test_eigenvalues_contract(self):
        M = np.diag([3.0, 1.0, 2.0])
        np.testing.assert_allclose(SpectralSolver().eigenvalues(M), [1.0, 2.0, 3.0])

    def test_bad_which(self):
        with self.assertRaises(InvalidArgument):
            SpectralSolver().eigenvalues(np.eye(2), 1, 'LM')

    def test_bad_floor(self):
        with self.assertRaises(InvalidArgument):
            SpectralSolver(nev_floor=0)


class TestPickSolvers(unittest.TestCase):
    def test_explicit(self):
        self.assertEqual(pick_sdp_solvers('scs'), ['SCS'])

    def test_automatic_nonempty(self):
        self.assertTrue(len(pick_sdp_solvers()) >= 1)


class TestSDPSolver(unittest.TestCase):
    def _problem(self, p, n, d, k):
        M = polynomial_as_matrix(p, n, d, k)
        V = symmetric_projection(n, d + k, partial=True)
        return M, V, [n] * (d + k)

    def test_diagonal_quadratic(self):
        # x^2 + 2 y^2 on the circle: max 2, min 1
        M, V, dims = self._problem([1, 0, 2], 2, 1, 0)
        solver = SDPSolver()
        self.assertAlmostEqual(solver.solve(M, V, dims, 'max'), 2.0, places=5)
        self.assertAlmostEqual(solver.solve(M, V, dims, 'min'), 1.0, places=5)
        self.assertIn(solver.last_status, ('optimal', 'optimal_inaccurate'))

    def test_not_above_spectral(self):
        p = [1, 0, -1, 0, 1]
        M, V, dims = self._problem(p, 2, 2, 0)
        sdp = SDPSolver().solve(M, V, dims, 'max')
        top = np.linalg.eigvalsh(M.toarray())[-1]
        self.assertLessEqual(sdp, top + 1e-6)

    def test_missing_solver_is_fatal(self):
        M, V, dims = self._problem([1, 0, 1], 2, 1, 0)
        with self.assertRaises(RelaxationSolveError):
            SDPSolver(solver='NOT_A_SOLVER').solve(M, V, dims, 'max')

    def test_bad_status_is_fatal(self):
        M, V, dims = self._problem([1, 0, 1], 2, 1, 0)
        solver = SDPSolver()
        prob = mock.MagicMock(status='infeasible', value=None)
        with mock.patch.object(solver, 'build_problem', return_value=prob):
            with self.assertRaises(RelaxationSolveError) as cm:
                solver.solve(M, V, dims, 'max')
        self.assertEqual(cm.exception.status, 'infeasible')
        self.assertTrue(prob.solve.called)

    def test_real_and_hermitian_variables_agree(self):
        M, V, dims = self._problem([1, 0, 2], 2, 1, 0)
        real = SDPSolver().solve(M, V, dims, 'max')
        herm = SDPSolver().solve(M.toarray().astype(complex), V, dims, 'max')
        self.assertAlmostEqual(real, 2.0, places=5)
        self.assertAlmostEqual(herm, real, places=5)

    def test_canonicalization_error_is_wrapped(self):
        M, V, dims = self._problem([1, 0, 1], 2, 1, 0)
        solver = SDPSolver(solver='SCS')
        prob = mock.MagicMock()
        prob.solve.side_effect = NotImplementedError("no canonicalization")
        with mock.patch.object(solver, 'build_problem', return_value=prob):
            with self.assertRaises(RelaxationSolveError) as cm:
                solver.solve(M, V, dims, 'max')
        self.assertIsInstance(cm.exception.__cause__, NotImplementedError)
        self.assertIn('NotImplementedError', str(cm.exception))

    def test_interrupt_not_wrapped(self):
        M, V, dims = self._problem([1, 0, 1], 2, 1, 0)
        solver = SDPSolver(solver='SCS')
        prob = mock.MagicMock()
        prob.solve.side_effect = KeyboardInterrupt
        with mock.patch.object(solver, 'build_problem', return_value=prob):
            with self.assertRaises(KeyboardInterrupt):
                solver.solve(M, V, dims, 'max')

    def test_size_mismatch(self):
        M = polynomial_as_matrix([1, 0, 1], 2, 1, 0)
        V = symmetric_projection(2, 2, partial=True)
        with self.assertRaises(InvalidArgument):
            SDPSolver().build_problem(M, V, [2, 2], 'max')


if __name__ == '__main__':
    unittest.main()
