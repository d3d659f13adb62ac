#!/usr/bin/env python3

from decimal import Decimal
from fractions import Fraction
import math
import tracemalloc
import unittest
import sys
import warnings

import numpy as np
from mpmath import mp

from testutils import PolyTestCase
from .numutils import FusedMultiplyAddUnsupportedError, FMAEmulationWarning
from .runtime import evaluate_sequence, evaluate_fixed_array
from .exprs.horner import horner


_SCENARIOS = [
    ([], 5, 0),
    ([7], 5, 7),
    ([1, 2, 3], 2, 17),
    ([0, 0, 1], 10, 100),
    ([1, 1, 1, 1, 1], 1, 5),
]


def _peak_memory(func, *args, **kwargs):
    r"""Peak memory in bytes allocated by a second call of `func`."""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", FMAEmulationWarning)
        func(*args, **kwargs)
    tracemalloc.start()
    try:
        func(*args, **kwargs)
        return tracemalloc.get_traced_memory()[1]
    finally:
        tracemalloc.stop()


class _Coeffs(object):
    r"""Reversible container counting how often it is iterated backwards."""
    def __init__(self, values):
        self.values = list(values)
        self.reversals = 0
    def __len__(self): return len(self.values)
    def __iter__(self): return iter(self.values)
    def __reversed__(self):
        self.reversals += 1
        return reversed(self.values)


class TestEvaluateSequence(PolyTestCase):
    def test_scenarios(self):
        for coeffs, x, expected in _SCENARIOS:
            for fused in (False, True):
                res = evaluate_sequence(coeffs, x, fused=fused)
                self.assertIdentical(res, expected)

    def test_empty(self):
        self.assertIdentical(evaluate_sequence([], 2.5), 0.0)
        self.assertIdentical(evaluate_sequence((), Fraction(1, 2)), Fraction(0))
        z = evaluate_sequence([], np.array([1.0, 2.0]))
        self.assertListEqual(z.tolist(), [0.0, 0.0])

    def test_single_coefficient(self):
        self.assertIdentical(evaluate_sequence([-0.0], 3.0), -0.0)
        self.assertIdentical(evaluate_sequence([2.5], math.nan), 2.5)

    def test_does_not_modify_input(self):
        coeffs = [1, 2, 3]
        evaluate_sequence(coeffs, 4)
        self.assertListEqual(coeffs, [1, 2, 3])

    def test_iterates_once(self):
        coeffs = _Coeffs([1, 2, 3])
        self.assertEqual(evaluate_sequence(coeffs, 2), 17)
        self.assertEqual(coeffs.reversals, 1)

    def test_infinite_argument(self):
        self.assertIdentical(evaluate_sequence([1.0, 2.0], math.inf), math.inf)
        self.assertIdentical(evaluate_sequence([1.0, 2.0], -math.inf), -math.inf)

    def test_fractions(self):
        coeffs = [Fraction(1, 2), Fraction(-1, 3), Fraction(1, 4)]
        x = Fraction(3, 5)
        expected = coeffs[0] + coeffs[1] * x + coeffs[2] * x**2
        self.assertEqual(evaluate_sequence(coeffs, x), expected)
        self.assertEqual(evaluate_sequence(coeffs, x, fused=True), expected)

    def test_fused_rounds_once(self):
        self.assertIdentical(evaluate_sequence([-1.0, 10.0], 0.1), 0.0)
        self.assertIdentical(evaluate_sequence([-1.0, 10.0], 0.1, fused=True),
                             2.0**-54)

    def test_decimal(self):
        coeffs = [Decimal(1), Decimal(2)]
        self.assertEqual(evaluate_sequence(coeffs, Decimal(3), fused=True),
                         Decimal(7))

    def test_mpmath(self):
        with mp.workdps(30):
            coeffs = [mp.mpf(1)/3] * 3
            res = evaluate_sequence(coeffs, mp.mpf(2))
            self.assertIsInstance(res, mp.mpf)
            self.assertTrue(mp.almosteq(res, mp.mpf(7)/3))
            res = evaluate_sequence(coeffs, mp.mpf(2), fused=True)
            self.assertTrue(mp.almosteq(res, mp.mpf(7)/3))

    def test_array_argument(self):
        res = evaluate_sequence([1.0, 2.0, 3.0], np.array([0.0, 1.0, 2.0]))
        self.assertListEqual(res.tolist(), [1.0, 6.0, 17.0])
        res = evaluate_sequence([1.0, 2.0, 3.0], np.array([0.0, 1.0, 2.0]),
                                fused=True)
        self.assertListEqual(res.tolist(), [1.0, 6.0, 17.0])

    def test_not_reversible(self):
        with self.assertRaises(TypeError):
            evaluate_sequence(iter([1, 2]), 3)
        with self.assertRaises(TypeError):
            evaluate_sequence((c for c in [1, 2]), 3)
        with self.assertRaises(TypeError):
            evaluate_sequence(5, 3)

    def test_fused_unsupported(self):
        coeffs = _Coeffs([1.0, object(), 2.0])
        with self.assertRaises(FusedMultiplyAddUnsupportedError):
            evaluate_sequence(coeffs, 2.0, fused=True)
        # rejected before the evaluation loop started
        self.assertEqual(coeffs.reversals, 0)
        with self.assertRaises(FusedMultiplyAddUnsupportedError):
            evaluate_sequence([1.0, 2.0], np.complex64(1), fused=True)
        with self.assertRaises(FusedMultiplyAddUnsupportedError):
            evaluate_sequence([], "x", fused=True)

    def test_fused_check_constant_memory(self):
        coeffs = [1.0] * 100000
        for fused in (False, True):
            peak = _peak_memory(evaluate_sequence, coeffs, 0.5, fused=fused)
            self.assertLess(peak, 256 * 1024)

    def test_matches_horner_expression(self):
        rng = np.random.RandomState(7)
        for num in range(8):
            coeffs = rng.uniform(-10, 10, num).tolist()
            for fused in (False, True):
                f = horner(None, coeffs, fused=fused).evaluator()
                for x in rng.uniform(-2, 2, 5).tolist():
                    self.assertIdentical(
                        evaluate_sequence(coeffs, x, fused=fused), f(x)
                    )


class TestEvaluateFixedArray(PolyTestCase):
    def test_scenarios(self):
        for coeffs, x, expected in _SCENARIOS:
            for fused in (False, True):
                res = evaluate_fixed_array(tuple(coeffs), x, fused=fused)
                self.assertIdentical(res, expected)

    def test_numpy_coefficients(self):
        coeffs = np.array([1.0, 2.0, 3.0])
        self.assertEqual(evaluate_fixed_array(coeffs, 2.0), 17.0)
        self.assertEqual(evaluate_fixed_array(coeffs, 2.0, fused=True), 17.0)
        res = evaluate_fixed_array(coeffs, np.array([0.0, 1.0, 2.0]))
        self.assertListEqual(res.tolist(), [1.0, 6.0, 17.0])
        self.assertEqual(evaluate_fixed_array(np.arange(1, 4), 2), 17)
        z = evaluate_fixed_array(np.zeros(0), 3.0)
        self.assertIdentical(z, 0.0)

    def test_agrees_with_sequence(self):
        rng = np.random.RandomState(3)
        for num in range(8):
            coeffs = rng.uniform(-1, 1, num)
            for x in rng.uniform(-3, 3, 4):
                for fused in (False, True):
                    self.assertEqual(
                        evaluate_fixed_array(coeffs, x, fused=fused),
                        evaluate_sequence(coeffs.tolist(), float(x), fused=fused),
                    )

    def test_multidimensional(self):
        with self.assertRaises(TypeError):
            evaluate_fixed_array(np.ones((2, 2)), 1.0)
        with self.assertRaises(TypeError):
            evaluate_fixed_array(np.float64(1.0), 1.0)

    def test_fused_unsupported(self):
        with self.assertRaises(FusedMultiplyAddUnsupportedError):
            evaluate_fixed_array(np.ones(3, dtype=np.complex64), 1.0, fused=True)
        with self.assertRaises(FusedMultiplyAddUnsupportedError):
            evaluate_fixed_array((1.0, None), 1.0, fused=True)

    def test_fused_check_constant_memory(self):
        coeffs = (1.0,) * 100000
        for fused in (False, True):
            peak = _peak_memory(evaluate_fixed_array, coeffs, 0.5, fused=fused)
            self.assertLess(peak, 256 * 1024)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
