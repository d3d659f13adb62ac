#!/usr/bin/env python3

from fractions import Fraction
import unittest
import sys

from testutils import PolyTestCase
from ..runtime import evaluate_sequence
from .basics import (IdentityExpression, SumExpression, ProductExpression,
                     FusedMultiplyAddExpression, CallableExpression)
from .binding import LetExpression
from .horner import HornerExpression, horner
from .estrin import EstrinExpression, estrin
from .polynomial import Scheme, polynomial, multiply_add


_SCENARIOS = [
    ([], 5, 0),
    ([7], 5, 7),
    ([1, 2, 3], 2, 17),
    ([0, 0, 1], 10, 100),
    ([1, 1, 1, 1, 1], 1, 5),
]


class TestScheme(PolyTestCase):
    def test_members(self):
        self.assertFalse(Scheme.HORNER.fused)
        self.assertTrue(Scheme.HORNER_FMA.fused)
        self.assertFalse(Scheme.ESTRIN.fused)
        self.assertTrue(Scheme.ESTRIN_FMA.fused)
        self.assertIs(Scheme.HORNER.builder, horner)
        self.assertIs(Scheme.HORNER_FMA.builder, horner)
        self.assertIs(Scheme.ESTRIN.builder, estrin)
        self.assertIs(Scheme.ESTRIN_FMA.builder, estrin)

    def test_get(self):
        self.assertIs(Scheme.get(Scheme.ESTRIN), Scheme.ESTRIN)
        self.assertIs(Scheme.get("estrin_fma"), Scheme.ESTRIN_FMA)
        self.assertIs(Scheme.get("Horner"), Scheme.HORNER)
        with self.assertRaises(TypeError):
            Scheme.get("paterson_stockmeyer")


class TestPolynomial(PolyTestCase):
    def test_scenarios(self):
        for scheme in Scheme:
            for coeffs, x, expected in _SCENARIOS:
                f = polynomial(None, coeffs, scheme=scheme).evaluator()
                self.assertIdentical(f(x), expected)

    def test_scenarios_with_variable_expression(self):
        for scheme in Scheme:
            for coeffs, x, expected in _SCENARIOS:
                f = polynomial(x, coeffs, scheme=scheme).evaluator()
                self.assertIdentical(f(None), expected)

    def test_builders(self):
        expr = polynomial(None, [1, 2], scheme="horner_fma", name="p")
        self.assertIsType(expr, HornerExpression)
        self.assertTrue(expr.fused)
        self.assertEqual(expr.name, "p")
        expr = polynomial(None, [1, 2], scheme=Scheme.ESTRIN)
        self.assertIsType(expr, EstrinExpression)
        self.assertFalse(expr.fused)
        self.assertIsType(polynomial(None, [1, 2]), HornerExpression)
        with self.assertRaises(TypeError):
            polynomial(None, [1, 2], scheme="unknown")

    def test_default_variable(self):
        expr = polynomial(None, [1])
        self.assertIsInstance(expr.x, IdentityExpression)

    def test_generate(self):
        for scheme in Scheme:
            expr = polynomial(None, [1, 2, 3], scheme=scheme, name="p")
            generated = expr.generate()
            self.assertIsInstance(generated, LetExpression)
            self.assertEqual(generated.name, "p")
            self.assertIs(generated.bindings[0][1], expr.x)
            # each call generates fresh bindings
            self.assertIsNot(generated.bindings[0][0],
                             expr.generate().bindings[0][0])

    def test_generate_logs(self):
        with self.assertLogs('polyeval.exprs.polynomial', level='DEBUG') as cm:
            estrin(None, [1, 2, 3, 4, 5], fused=True).generate()
        self.assertEqual(len(cm.output), 1)
        self.assertIn("estrin", cm.output[0])
        self.assertIn("5 coefficients", cm.output[0])
        self.assertIn("3 bindings", cm.output[0])

    def test_exact_domains_agree(self):
        coeffs = [Fraction(1, k) for k in range(1, 10)]
        x = Fraction(-4, 3)
        expected = evaluate_sequence(coeffs, x)
        for scheme in Scheme:
            self.assertEqual(polynomial(None, coeffs, scheme).evaluator()(x), expected)


class TestMultiplyAdd(PolyTestCase):
    def test_evaluation_order(self):
        for fused in (False, True):
            order = []
            a, b, c = [CallableExpression(lambda x, k=k, v=v: order.append(k) or v)
                       for k, v in zip("abc", (2, 3, 4))]
            self.assertEqual(multiply_add(a, b, c, fused).evaluator()(None), 10)
            self.assertEqual(order, ["a", "b", "c"])

    def test_plain(self):
        expr = multiply_add(2, IdentityExpression(), 1, fused=False)
        self.assertIsInstance(expr, SumExpression)
        self.assertIsInstance(expr.e1, ProductExpression)
        self.assertEqual(expr.e1.e1.c, 2)
        self.assertEqual(expr.e2.c, 1)
        self.assertEqual(expr.evaluator()(5), 11)

    def test_fused(self):
        expr = multiply_add(2, IdentityExpression(), 1, fused=True)
        self.assertIsInstance(expr, FusedMultiplyAddExpression)
        self.assertEqual(expr.a.c, 2)
        self.assertEqual(expr.c.c, 1)
        self.assertEqual(expr.evaluator()(5), 11)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
