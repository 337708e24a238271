"""Tests for monomial ordering, counting and polynomial validation."""
import sys, os
import unittest
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from polyopt.errors import InvalidArgument
from polyopt.monomials import (
    check_dimensions,
    check_polynomial,
    count_monomials,
    monomial_exponents,
    monomial_position,
    multinomial,
    symmetric_index_set,
)


class TestCountMonomials(unittest.TestCase):
    def test_binary_quadratic(self):
        self.assertEqual(count_monomials(2, 2), 3)

    def test_ternary_quartic(self):
        self.assertEqual(count_monomials(3, 4), 15)

    def test_single_variable(self):
        self.assertEqual(count_monomials(1, 6), 1)

    def test_matches_enumeration(self):
        for n in range(1, 5):
            for deg in range(0, 5):
                self.assertEqual(len(monomial_exponents(n, deg)),
                                 count_monomials(n, deg))


class TestLexOrder(unittest.TestCase):
    def test_two_variables(self):
        self.assertEqual(monomial_exponents(2, 2), [(2, 0), (1, 1), (0, 2)])

    def test_three_variables(self):
        self.assertEqual(monomial_exponents(3, 2),
                         [(2, 0, 0), (1, 1, 0), (1, 0, 1),
                          (0, 2, 0), (0, 1, 1), (0, 0, 2)])

    def test_descending_lexicographic(self):
        exps = monomial_exponents(3, 4)
        self.assertEqual(exps, sorted(exps, reverse=True))

    def test_position_map(self):
        pos = monomial_position(2, 4)
        self.assertEqual(pos[(4, 0)], 0)
        self.assertEqual(pos[(2, 2)], 2)
        self.assertEqual(pos[(0, 4)], 4)


class TestMultinomial(unittest.TestCase):
    def test_values(self):
        self.assertEqual(multinomial((2, 2)), 6)
        self.assertEqual(multinomial((1, 1, 1)), 6)
        self.assertEqual(multinomial((4, 0)), 1)
        self.assertEqual(multinomial((6, 2)), 28)

    def test_sum_is_power(self):
        # sum over types of mult(g) = n^deg
        for n, deg in [(2, 3), (3, 4)]:
            total = sum(multinomial(e) for e in monomial_exponents(n, deg))
            self.assertEqual(total, n ** deg)


class TestSymmetricIndexSet(unittest.TestCase):
    def test_shape_and_rows(self):
        si = symmetric_index_set(2, 2)
        np.testing.assert_array_equal(si, [[0, 0], [0, 1], [1, 1]])

    def test_evaluates_monomials(self):
        x = np.array([0.3, -0.5, 2.0])
        si = symmetric_index_set(4, 3)
        vals = np.prod(x[si], axis=1)
        for v, e in zip(vals, monomial_exponents(3, 4)):
            self.assertAlmostEqual(v, np.prod(x ** np.array(e)), places=12)


class TestCheckPolynomial(unittest.TestCase):
    def test_returns_float_array(self):
        p = check_polynomial([1, 0, 1], 2, 1)
        self.assertEqual(p.dtype, np.float64)
        np.testing.assert_array_equal(p, [1.0, 0.0, 1.0])

    def test_column_vector_accepted(self):
        p = check_polynomial(np.array([[1], [0], [1]]), 2, 1)
        self.assertEqual(p.shape, (3,))

    def test_wrong_length(self):
        with self.assertRaises(InvalidArgument):
            check_polynomial([1, 0], 2, 1)

    def test_bad_dimensions(self):
        with self.assertRaises(InvalidArgument):
            check_polynomial([1], 0, 1)
        with self.assertRaises(InvalidArgument):
            check_polynomial([1, 0, 1], 2, 0)
        with self.assertRaises(InvalidArgument):
            check_polynomial([1, 0, 1], 2.0, 1)

    def test_negative_level(self):
        with self.assertRaises(InvalidArgument):
            check_dimensions(2, 1, -1)

    def test_complex_rejected(self):
        with self.assertRaises(InvalidArgument):
            check_polynomial([1, 1j, 1], 2, 1)

    def test_non_finite_rejected(self):
        with self.assertRaises(InvalidArgument):
            check_polynomial([1, np.nan, 1], 2, 1)

    def test_non_numeric_rejected(self):
        with self.assertRaises(InvalidArgument):
            check_polynomial(['a', 'b', 'c'], 2, 1)

    def test_is_value_error(self):
        with self.assertRaises(ValueError):
            check_polynomial([1, 0], 2, 1)


if __name__ == '__main__':
    unittest.main()
