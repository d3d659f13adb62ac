r"""@package polyeval.exprs.basics

Collection of basic numexpr.NumericExpression subclasses.

Besides the leaf expressions (constants, the identity and wrapped Python
callables), this module contains the arithmetic nodes the polynomial builders
generate their expression trees from: SumExpression, ProductExpression and
FusedMultiplyAddExpression.
"""

import numpy as np
import sympy as sp

from ..numutils import fma, zero_like, to_mp
from .numexpr import NumericExpression, ARGUMENT
from .evaluators import TrivialEvaluator


__all__ = [
    "ConstantExpression",
    "IdentityExpression",
    "CallableExpression",
    "ZeroLikeExpression",
    "SumExpression",
    "ProductExpression",
    "FusedMultiplyAddExpression",
]


class ConstantExpression(NumericExpression):
    r"""Constant function \f$ f(x) = c \f$, e.g. a polynomial coefficient.

    The value is stored in the `c` attribute. In
    the native evaluation mode, the value is returned as it is (i.e. integers
    stay integers). In `mpmath` mode, it is converted using
    numutils.to_mp().
    """

    def __init__(self, value=0, name='const'):
        r"""Init function.

        Args:
            value:  The constant value.
            name:   Name of the expression (e.g. for print_tree()).
        """
        super(ConstantExpression, self).__init__(name=name)
        ## The constant value this expression represents.
        self.c = value

    def _expr_str(self):
        return "%r" % (self.c,)

    @property
    def nice_name(self):
        return "%s (%r)" % (self.name, self.c)

    def is_zero_expression(self):
        if isinstance(self.c, np.ndarray):
            return not self.c.any()
        try:
            return bool(self.c == 0)
        except TypeError:
            return False

    def to_sympy(self):
        return sp.sympify(self.c)

    def _evaluator(self, use_mp):
        c = to_mp(self.c) if use_mp else self.c
        return lambda x: c


class IdentityExpression(NumericExpression):
    r"""Identity expression, \f$ f(x) = x \f$.

    This is the default variable of the polynomial builders, i.e. the
    generated polynomial is then a function of the evaluator argument itself.
    """
    def __init__(self, name='x'):
        super(IdentityExpression, self).__init__(name=name)

    def _expr_str(self):
        return "x"

    def to_sympy(self):
        return ARGUMENT

    def _evaluator(self, use_mp):
        if use_mp:
            return to_mp
        return lambda x: x


class CallableExpression(NumericExpression):
    r"""Wrap a plain Python callable `f(x)` into an expression.

    The callable may be expensive or have side effects. Expressions built on
    top of it (such as the polynomial builders) take care to call it only as
    often as needed.

    In `mpmath` mode, returned values are converted using numutils.to_mp().
    """
    def __init__(self, func, desc=None, symbolic=None, name=None):
        r"""Init function.

        Args:
            func:   Callable taking the argument of the expression.
            desc:   Description used when printing. Defaults to the name of
                    the callable.
            symbolic: Optional `sympy` expression (in numexpr.ARGUMENT)
                    returned by to_sympy(). By default, an undefined `sympy`
                    function named after `desc` is used.
            name:   Name of the expression (e.g. for print_tree()).
        """
        if not callable(func):
            raise TypeError("Expected a callable, got %r." % (func,))
        if desc is None:
            desc = getattr(func, '__name__', 'f')
        super(CallableExpression, self).__init__(name=name or desc)
        self._func = func
        self._desc = desc
        self._symbolic = symbolic

    @property
    def func(self):
        r"""The wrapped callable."""
        return self._func

    def _expr_str(self):
        return "%s(x)" % self._desc

    def to_sympy(self):
        if self._symbolic is not None:
            return self._symbolic
        name = self._desc if self._desc.isidentifier() else 'f'
        return sp.Function(name)(ARGUMENT)

    def _evaluator(self, use_mp):
        func = self._func
        if use_mp:
            return lambda x: to_mp(func(x))
        return func


class ZeroLikeExpression(NumericExpression):
    r"""The zero element of the numeric domain of another expression.

    Represents \f$ f(x) = 0 \f$, where the type of the zero matches the value
    of the expression `e` (see numutils.zero_like()). This is what the
    polynomial builders produce for an empty coefficient list.
    """
    def __init__(self, expr, name='zero'):
        super(ZeroLikeExpression, self).__init__(e=expr, name=name)

    def _expr_str(self):
        return "0"

    def is_zero_expression(self):
        return True

    def to_sympy(self):
        return sp.S.Zero

    def _evaluator(self, use_mp):
        e = self.e.evaluator(use_mp)
        def f(x):
            return zero_like(e(x))
        return TrivialEvaluator(self, f, [e])


class SumExpression(NumericExpression):
    r"""Sum of two expressions.

    Represents an expression of the form \f$ f(x) = g(x) + h(x) \f$.
    The first summand is evaluated first.
    """
    def __init__(self, expr1, expr2, name='add'):
        r"""Sum of `expr1` and `expr2`, stored as `e1` and `e2`."""
        super(SumExpression, self).__init__(e1=expr1, e2=expr2, name=name)

    def _expr_str(self):
        return "e1 + e2, where e1=%s, e2=%s" % (self.e1.str(), self.e2.str())

    @property
    def nice_name(self):
        return "%s (e1 + e2)" % self.name

    def to_sympy(self):
        return sp.Add(self.e1.to_sympy(), self.e2.to_sympy(), evaluate=False)

    def _evaluator(self, use_mp):
        e1 = self.e1.evaluator(use_mp)
        e2 = self.e2.evaluator(use_mp)
        def f(x):
            return e1(x) + e2(x)
        return TrivialEvaluator(self, f, [e1, e2])


class ProductExpression(NumericExpression):
    r"""Product \f$ f(x) = g(x) h(x) \f$ of two expressions.

    The first factor is evaluated first.
    """
    def __init__(self, expr1, expr2, name='mult'):
        super(ProductExpression, self).__init__(e1=expr1, e2=expr2, name=name)

    def _expr_str(self):
        return "e1 * e2, where e1=%s, e2=%s" % (self.e1.str(), self.e2.str())

    @property
    def nice_name(self):
        return "%s (e1 * e2)" % self.name

    def to_sympy(self):
        return sp.Mul(self.e1.to_sympy(), self.e2.to_sympy(), evaluate=False)

    def _evaluator(self, use_mp):
        e1 = self.e1.evaluator(use_mp)
        e2 = self.e2.evaluator(use_mp)
        def f(x):
            return e1(x) * e2(x)
        return TrivialEvaluator(self, f, [e1, e2])


class FusedMultiplyAddExpression(NumericExpression):
    r"""Fused multiply-add of three expressions.

    Represents \f$ f(x) = a(x) b(x) + c(x) \f$ computed with a single rounding
    step using numutils.fma(). Values of types without a fused multiply-add
    raise numutils.FusedMultiplyAddUnsupportedError.
    """
    def __init__(self, a, b, c, name='fma'):
        r"""Init function.

        Args:
            a, b:   Factors of the product.
            c:      Summand.
            name:   Name of the expression (e.g. for print_tree()).
        """
        super(FusedMultiplyAddExpression, self).__init__(a=a, b=b, c=c, name=name)

    def _expr_str(self):
        return ("fma(a, b, c), where a=%s, b=%s, c=%s"
                % (self.a.str(), self.b.str(), self.c.str()))

    @property
    def nice_name(self):
        return "%s (a * b + c)" % self.name

    def to_sympy(self):
        product = sp.Mul(self.a.to_sympy(), self.b.to_sympy(), evaluate=False)
        return sp.Add(product, self.c.to_sympy(), evaluate=False)

    def _evaluator(self, use_mp):
        a = self.a.evaluator(use_mp)
        b = self.b.evaluator(use_mp)
        c = self.c.evaluator(use_mp)
        def f(x):
            return fma(a(x), b(x), c(x))
        return TrivialEvaluator(self, f, sub_evaluators=[a, b, c])

