r"""@package polyeval.exprs.estrin

Polynomial expressions using Estrin's scheme.

The coefficient list is split into a low part of \f$ m = \lceil N/2 \rceil \f$
coefficients and a high part with the remaining ones. Both parts are built
recursively and then combined as
\f[
    p(x) = p_{low}(x) + x^m\, p_{high}(x).
\f]
The two halves don't depend on each other, which exposes independent
sub-computations. For \f$ N = 2 \f$ this reduces to \f$ c_0 + x\, c_1 \f$.

The powers \f$ x^m \f$ are materialized once per evaluation as bindings of the
generated binding.LetExpression, each computed from smaller powers by
repeated doubling (see _PowerCache).

See also https://en.wikipedia.org/wiki/Estrin%27s_scheme
"""

from .basics import ProductExpression
from .binding import Binding, BoundExpression
from .polynomial import PolynomialExpression, multiply_add


__all__ = [
    "EstrinExpression",
    "estrin",
]


class _PowerCache(object):
    r"""Powers of the variable shared by all levels of the recursion.

    \f$ x^k \f$ is computed as \f$ x^{\lfloor k/2 \rfloor} \cdot
    x^{\lceil k/2 \rceil} \f$, requesting the two smaller powers first. New
    powers are appended to the list of bindings, which is hence ordered such
    that every power only depends on earlier ones.
    """
    def __init__(self, x, bindings):
        self._bindings = bindings
        self._powers = {1: x}

    def __getitem__(self, k):
        if k < 1:
            raise ValueError("Only positive powers are cached.")
        if k in self._powers:
            return self._powers[k]
        lo = self[k // 2]
        hi = self[(k + 1) // 2]
        binding = Binding('x%d' % k)
        self._bindings.append((binding, ProductExpression(lo, hi)))
        self._powers[k] = BoundExpression(binding)
        return self._powers[k]


class EstrinExpression(PolynomialExpression):
    r"""Polynomial evaluated with Estrin's scheme."""
    @property
    def scheme_name(self):
        return "estrin"

    def _build(self, coeffs, x, bindings):
        if not coeffs:
            return self._zero(x)
        return self._split(coeffs, _PowerCache(x, bindings))

    def _split(self, coeffs, powers):
        r"""Recursively combine the low and high halves of `coeffs`."""
        n = len(coeffs)
        if n == 1:
            return coeffs[0]
        m = (n + 1) // 2
        low = self._split(coeffs[:m], powers)
        high = self._split(coeffs[m:], powers)
        return multiply_add(powers[m], high, low, self.fused)


def estrin(x, coeffs, fused=False, name=None):
    r"""Create an expression evaluating a polynomial using Estrin's scheme.

    Args:
        x:      Variable of the polynomial, evaluated once per evaluation. May
                be an expression, a callable, a constant or `None` for the
                argument of the evaluator.
        coeffs: Coefficients ordered from degree zero upwards.
        fused:  Whether to use fused multiply-add operations.
        name:   Optional name of the expression.

    @b Examples

    ```
        >>> estrin(None, [1, 1, 1, 1, 1]).evaluator()(2)
        31
    ```
    """
    return EstrinExpression(x, coeffs, fused=fused, name=name)
