r"""@package polyeval.exprs.polynomial

Common base of the polynomial expressions generated by horner and estrin.

A PolynomialExpression represents
\f[
    p(x) = \sum_{i=0}^{N-1} c_i\, s(x)^i ,
\f]
where the coefficients \f$ c_i \f$ and the variable \f$ s \f$ are arbitrary
numexpr.NumericExpression objects (or values/callables converted to such).
Child classes only decide on the *shape* of the arithmetic expression computing
this value by implementing PolynomialExpression._build().

The generated expression is a binding.LetExpression binding the variable (and
any intermediates like powers of it) once and then evaluating a tree made up
of basics.SumExpression, basics.ProductExpression and, in fused mode,
basics.FusedMultiplyAddExpression nodes. This ensures the variable expression
is evaluated exactly once per evaluation, independently of the number of
coefficients.

@b Examples

```
    expr = polynomial(None, [1, 2, 3], scheme=Scheme.ESTRIN_FMA)
    expr.evaluator()(2)  # 1 + 2*2 + 3*4 == 17
    expr.generate().print_tree()
```
"""

from abc import abstractmethod
from enum import Enum
import logging

from ..numutils import require_fma
from ..utils import isiterable
from .numexpr import NumericExpression, ensure_expr
from .basics import (ConstantExpression, IdentityExpression, SumExpression,
                     ProductExpression, FusedMultiplyAddExpression,
                     ZeroLikeExpression)
from .binding import Binding, BoundExpression, LetExpression


__all__ = [
    "PolynomialExpression",
    "Scheme",
    "polynomial",
    "multiply_add",
]


logger = logging.getLogger(__name__)


def multiply_add(a, b, c, fused):
    r"""Create an expression computing `a*b + c`.

    This is the only place the polynomial builders combine sub-expressions,
    so that the plain and fused variants produce trees of identical shape.

    Args:
        a, b:   Factors of the product.
        c:      Summand.
        fused:  If `True`, create a single
                basics.FusedMultiplyAddExpression. Otherwise, create
                `a*b + c` from a basics.ProductExpression and a
                basics.SumExpression.

    Both variants evaluate `a`, `b` and `c` in this order.
    """
    if fused:
        return FusedMultiplyAddExpression(a, b, c)
    return SumExpression(ProductExpression(a, b), c)


class PolynomialExpression(NumericExpression):
    r"""Base class for expressions evaluating a polynomial.

    The variable is stored as sub-expression `x` and the coefficients as
    `c0`, `c1`, etc. The coefficient list is fixed at construction.

    Child classes implement _build() to generate the arithmetic for a given
    list of coefficient expressions and the expression of the (already
    materialized) variable.
    """
    def __init__(self, x, coeffs, fused=False, name=None):
        r"""Init function.

        Args:
            x:      Variable of the polynomial. May be an expression, a
                    callable or a constant value. If `None`, the argument of
                    the evaluator is used (see basics.IdentityExpression).
            coeffs: Iterable of coefficient expressions (or values/callables)
                    ordered from degree zero upwards.
            fused:  Whether to use fused multiply-add operations.
            name:   Name of the expression (e.g. for print_tree()).

        @b Raises

        `TypeError` if `coeffs` is not iterable.
        numutils.FusedMultiplyAddUnsupportedError if `fused=True` and any
        constant coefficient or a constant variable has a type without a
        fused multiply-add operation.
        """
        if not isiterable(coeffs) or isinstance(coeffs, str):
            raise TypeError("Coefficients must be given as an iterable.")
        x = IdentityExpression() if x is None else ensure_expr(x)
        coeffs = tuple(ensure_expr(c) for c in coeffs)
        sub_exprs = dict(("c%d" % i, c) for i, c in enumerate(coeffs))
        super(PolynomialExpression, self).__init__(name=name, x=x, **sub_exprs)
        self._coeffs = coeffs
        self._fused = bool(fused)
        if self._fused:
            constants = [e.c for e in (x,) + coeffs
                         if isinstance(e, ConstantExpression)]
            require_fma(*constants)

    @property
    def coeffs(self):
        r"""Tuple of the coefficient expressions, lowest degree first."""
        return self._coeffs

    @property
    def fused(self):
        r"""Whether fused multiply-add operations are generated."""
        return self._fused

    @property
    def degree(self):
        r"""Formal degree, i.e. number of coefficients minus one.

        This is `-1` for the empty coefficient list. Vanishing leading
        coefficients are not taken into account.
        """
        return len(self._coeffs) - 1

    @property
    def scheme_name(self):
        r"""Short name of the evaluation scheme used in printing."""
        return type(self).__name__

    @property
    def nice_name(self):
        fused = ", fused" if self._fused else ""
        return "%s (%s, N=%d%s)" % (self.name, self.scheme_name,
                                    len(self._coeffs), fused)

    def _expr_str(self):
        coeffs = ", ".join(c.str() for c in self._coeffs)
        return "%s[%s](x), fused=%r, where x=%s" % (
            self.scheme_name, coeffs, self._fused, self.x.str()
        )

    def generate(self):
        r"""Generate the expression evaluating this polynomial.

        Each call creates a new binding.LetExpression with its own bindings,
        the first of which binds the variable expression to `x`.
        """
        x = Binding('x')
        bindings = [(x, self.x)]
        body = self._build(self._coeffs, BoundExpression(x), bindings)
        logger.debug("Generated %s expression for %d coefficients "
                     "(fused=%s, %d bindings).", self.scheme_name,
                     len(self._coeffs), self._fused, len(bindings))
        return LetExpression(bindings, body, name=self.name)

    @abstractmethod
    def _build(self, coeffs, x, bindings):
        r"""Build the body of the generated expression.

        Args:
            coeffs: Tuple of coefficient expressions.
            x:      binding.BoundExpression of the materialized variable.
            bindings: List of `(binding, expr)` pairs. Implementations may
                    append further bindings (e.g. powers of `x`), which will
                    be evaluated once in order before the body.

        Returns:
            The expression computing the polynomial. Use multiply_add() with
            `self.fused` for every multiply-then-add combination.
        """
        pass

    def _zero(self, x):
        r"""Expression for the empty polynomial."""
        return ZeroLikeExpression(x)

    def to_sympy(self, inline=True):
        r"""Return a `sympy` representation of the generated expression.

        See binding.LetExpression.to_sympy() for the meaning of `inline`.
        """
        return self.generate().to_sympy(inline=inline)

    def _evaluator(self, use_mp):
        return self.generate().evaluator(use_mp)


class Scheme(Enum):
    r"""Polynomial evaluation schemes.

    Each member combines a shape (Horner or Estrin) with the choice of plain
    or fused multiply-add arithmetic.
    """
    HORNER = ('horner', False)
    HORNER_FMA = ('horner', True)
    ESTRIN = ('estrin', False)
    ESTRIN_FMA = ('estrin', True)

    @property
    def fused(self):
        r"""Whether this scheme uses fused multiply-add operations."""
        return self.value[1]

    @property
    def builder(self):
        r"""Builder function `f(x, coeffs, fused=False)` of this scheme."""
        if self.value[0] == 'horner':
            from .horner import horner
            return horner
        from .estrin import estrin
        return estrin

    @classmethod
    def get(cls, scheme):
        r"""Convert a scheme name like `"estrin_fma"` to a Scheme member."""
        if isinstance(scheme, cls):
            return scheme
        try:
            return cls[str(scheme).upper()]
        except KeyError:
            raise TypeError("Unknown evaluation scheme: %r" % (scheme,))


def polynomial(x, coeffs, scheme=Scheme.HORNER, name=None):
    r"""Create a polynomial expression using the given evaluation scheme.

    Args:
        x:      Variable of the polynomial (see PolynomialExpression).
        coeffs: Coefficients ordered from degree zero upwards.
        scheme: Scheme member or its (case insensitive) name, e.g.
                `"horner_fma"`. Default is `Scheme.HORNER`.
        name:   Optional name of the expression.
    """
    scheme = Scheme.get(scheme)
    return scheme.builder(x, coeffs, fused=scheme.fused, name=name)
