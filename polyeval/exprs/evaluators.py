r"""@package polyeval.exprs.evaluators

Evaluator classes created by numexpr.NumericExpression.evaluator().

An evaluator is a light-weight callable snapshot of an expression, `ev(t)`.
Expressions normally don't need their own evaluator class: returning a plain
callable from `_evaluator()` is enough, which is then wrapped in a
TrivialEvaluator.

Polynomial expressions compute values only. The `diff()` and `function()`
methods exist for the zeroth derivative (the value itself) and raise
`NotImplementedError` for any higher order.
"""


__all__ = [
    "TrivialEvaluator",
]


def _no_derivative(n):
    return NotImplementedError('Derivative for n = %s not implemented.' % n)


class _Evaluator(object):
    r"""Common base of all evaluators.

    Keeps the name of the expression and the evaluators of its
    sub-expressions, e.g. for inspecting a snapshot of a larger tree.
    Subclasses implement `__call__()`.
    """
    def __init__(self, expr, sub_evaluators=None):
        ## Name of the expression this evaluator was created from.
        self.name = expr.name
        self._sub_evaluators = list(sub_evaluators or ())

    @property
    def sub_evaluators(self):
        r"""Evaluators this one calls into."""
        return list(self._sub_evaluators)

    def diff(self, x, n=1):
        r"""Value of the n'th derivative at `x`; only `n=0` is supported."""
        return self.function(n)(x)

    def function(self, n=0):
        r"""Callable computing the n'th derivative; only `n=0` is supported."""
        if n == 0:
            return self.__call__
        raise _no_derivative(n)


class TrivialEvaluator(_Evaluator):
    r"""Evaluator wrapping a single callable computing the value."""
    def __init__(self, expr, f, sub_evaluators=None):
        r"""Init function.

        @param expr
            Expression this evaluator is created from.
        @param f
            Callable computing the value.
        @param sub_evaluators
            Evaluators of sub-expressions used by the callable.
        """
        super(TrivialEvaluator, self).__init__(expr, sub_evaluators=sub_evaluators)
        if not callable(f):
            raise TypeError("Expected a callable, got %r." % (f,))
        self._f = f

    def __call__(self, x):
        return self._f(x)

    def function(self, n=0):
        if n == 0:
            return self._f
        raise _no_derivative(n)
