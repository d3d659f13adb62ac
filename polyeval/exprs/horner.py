r"""@package polyeval.exprs.horner

Polynomial expressions using Horner's method.

The generated expression has the nested form
\f[
    c_0 + x (c_1 + x (c_2 + \ldots + x\, c_{N-1})),
\f]
i.e. a sequential chain of \f$ N-1 \f$ multiply-add steps. In fused mode,
each step is a single \f$ \mathrm{fma}(x, acc, c_k) \f$.

See also https://en.wikipedia.org/wiki/Horner%27s_method
"""

from .polynomial import PolynomialExpression, multiply_add


__all__ = [
    "HornerExpression",
    "horner",
]


class HornerExpression(PolynomialExpression):
    r"""Polynomial evaluated with Horner's method.

    The expression is built right-to-left: starting with the last coefficient
    \f$ c_{N-1} \f$, each step combines the accumulated expression with the
    next lower coefficient as \f$ x \cdot acc + c_k \f$.

    Coefficients given as callables or expressions are evaluated from the
    highest degree down to \f$ c_0 \f$, in plain as well as in fused mode.
    """
    @property
    def scheme_name(self):
        return "horner"

    def _build(self, coeffs, x, bindings):
        if not coeffs:
            return self._zero(x)
        acc = coeffs[-1]
        for c in reversed(coeffs[:-1]):
            acc = multiply_add(x, acc, c, self.fused)
        return acc


def horner(x, coeffs, fused=False, name=None):
    r"""Create an expression evaluating a polynomial using Horner's method.

    Args:
        x:      Variable of the polynomial, evaluated once per evaluation. May
                be an expression, a callable, a constant or `None` for the
                argument of the evaluator.
        coeffs: Coefficients ordered from degree zero upwards.
        fused:  Whether to use fused multiply-add operations.
        name:   Optional name of the expression.

    @b Examples

    ```
        >>> horner(None, [2, 3, 4]).evaluator()(7)
        219
        >>> horner(7, []).evaluator()(None)
        0
    ```
    """
    return HornerExpression(x, coeffs, fused=fused, name=name)
