r"""@package polyeval.exprs.numexpr

Base of the NumericExpression system.

An expression is an object describing a function of a single argument `t`
together with the expressions it is composed of. The polynomial builders in
polynomial, horner and estrin compose such trees from a list of coefficient
expressions and one variable expression.

Expressions are never evaluated directly. Calling
NumericExpression.evaluator() freezes the current state into a callable
'evaluator', either working with whatever native Python numbers the leaves
produce or with `mpmath` numbers at the current working precision. This way
the same expression serves fast double precision computations as well as
high precision checks.

For example, evaluating \f$ 1 + 2 s + 3 s^2 \f$ at \f$ s = \sin(t) \f$:

~~~.py
expr = horner(math.sin, [1, 2, 3])
ev = expr.evaluator()
print("p(sin(.5)) =", ev(.5))
~~~

Values and plain callables may be passed wherever an expression is expected;
ensure_expr() turns them into basics.ConstantExpression and
basics.CallableExpression objects, respectively.
"""

from contextlib import contextmanager
from abc import ABCMeta, abstractmethod

import sympy as sp
from mpmath import mp, fp

from .evaluators import TrivialEvaluator, _Evaluator


__all__ = [
    "NumericExpression",
    "ensure_expr",
    "ARGUMENT",
]


## Symbol standing for the argument `t` in NumericExpression.to_sympy().
ARGUMENT = sp.Symbol('x')


@contextmanager
def _noop_context(*_args, **_kwargs):
    r"""Context manager doing nothing, used where `fp` lacks one."""
    yield


def ensure_expr(expr):
    r"""Return `expr` as a NumericExpression.

    Expressions are passed through. Any other callable is wrapped in a
    basics.CallableExpression, except `sympy` objects, which are (like all
    remaining values) taken as constants and wrapped in a
    basics.ConstantExpression.
    """
    if isinstance(expr, NumericExpression):
        return expr
    from .basics import ConstantExpression, CallableExpression
    if callable(expr) and not isinstance(expr, sp.Basic):
        return CallableExpression(expr)
    return ConstantExpression(expr)


class NumericExpression(metaclass=ABCMeta):
    """Abstract base of all expressions.

    Sub-expressions are registered by keyword when constructing the object
    (or later via set_sub_exprs()) and become attributes of the same name.
    They are what traverse_tree() and print_tree() walk through.

    Subclasses implement:
        * _expr_str() describing the expression and its parameters
        * _evaluator() building the evaluator for one of the two evaluation
          modes
    and, if possible, to_sympy().
    """

    def __init__(self, name=None, **sub_exprs):
        r"""Base class init for numeric expressions.

        Args:
            name: (string, optional)
                Label of this expression, e.g. to tell apart several
                expressions of the same kind in print_tree(). Defaults to the
                class name.
            **sub_exprs:
                Sub-expressions (or values/callables, see ensure_expr()) to
                register under the given keys.
        """
        self.__sub_expressions = dict()
        self.__name = name if name else type(self).__name__
        self.set_sub_exprs(**sub_exprs)
        ## Evaluation mode overriding the requested one, if not `None`.
        self._force_evaluation_mode = None

    @property
    def name(self):
        r"""Label of this expression."""
        return self.__name
    @name.setter
    def name(self, name):
        self.__name = name

    @property
    def nice_name(self):
        r"""Label used by print_tree(); subclasses may add details."""
        return self.__name

    @property
    def sub_exprs(self):
        r"""Copy of the dictionary of direct sub-expressions."""
        return dict(self.__sub_expressions)

    def traverse_tree(self, include_root=False, skip_zeros=False, parents=None):
        r"""Iterate depth-first over all nodes below this expression.

        Yields `(parents, key, expr)` triples, where `parents` lists the
        ancestors from the root down to the direct parent and `key` is the
        name under which `expr` is registered in its parent. A node
        referenced by more than one parent is visited once for each.

        Args:
            include_root: Also yield `([], "", self)` first. Default is
                `False`.
            skip_zeros: Leave out nodes that are constant zero (the nodes
                below them are still visited). Default is `False`.
            parents: Ancestors of this expression. Only used in the
                recursion.

        @b Examples
        \code
            for parents, key, expr in horner(None, [1, 2]).traverse_tree():
                print(". " * len(parents), key, expr.name)
        \endcode
        """
        parents = [] if parents is None else parents
        if include_root:
            yield parents, "", self
        path = parents + [self]
        for key, expr in self.__sub_expressions.items():
            if not skip_zeros or not expr.is_zero_expression():
                yield path, key, expr
            yield from expr.traverse_tree(skip_zeros=skip_zeros, parents=path)

    def print_tree(self, root_name='root', nice_names=True, skip_zeros=False):
        r"""Print one line per node of the expression tree.

        Each line shows the key of the node in its parent, its (nice) name
        and its class, indented by its depth.
        """
        def _line(expr, key, depth):
            label = expr.nice_name if nice_names else expr.name
            print("%s%s [%s] <%s>" % (". " * depth, key, label,
                                      type(expr).__name__))
        _line(self, root_name, 0)
        for parents, key, expr in self.traverse_tree(skip_zeros=skip_zeros):
            _line(expr, key, len(parents))

    def __repr__(self):
        r"""Class name and string of the complete expression tree."""
        return "<%s%s>" % (type(self).__name__, self.str())

    def force_evaluation_mode(self, use_mp):
        r"""Fix the evaluation mode of all evaluators created from now on.

        Args:
            use_mp: `True` or `False` to ignore the `use_mp` argument of
                evaluator() and use this value instead. `None` to respect the
                requested mode again.
        """
        self._force_evaluation_mode = use_mp

    def evaluator(self, use_mp=False):
        r"""Create an evaluator for the current state of the expression.

        Args:
            use_mp: If `False` (default), evaluate using native arithmetic
                on the values produced by the leaves. If `True`, evaluate
                with `mpmath` numbers. Overridden by force_evaluation_mode().

        Returns:
            Callable object `ev(t)`.
        """
        if self._force_evaluation_mode is not None:
            use_mp = self._force_evaluation_mode
        ev = self._evaluator(use_mp=use_mp)
        if not isinstance(ev, _Evaluator):
            ev = TrivialEvaluator(self, ev)
        return ev

    def str(self):
        """String of this expression including all sub-expressions."""
        return "(%s)" % self._expr_str()

    @abstractmethod
    def _expr_str(self):
        """Describe this expression and its parameters.

        Sub-expressions should be included via their str() method, e.g.
        `"e1 + e2, where e1=%s, e2=%s" % (self.e1.str(), self.e2.str())`.
        """
        pass

    @abstractmethod
    def _evaluator(self, use_mp):
        r"""Return the evaluator for the given mode.

        May return an evaluator object or a plain callable computing the
        value.
        """
        pass

    def to_sympy(self):
        r"""Return the `sympy` form of this expression in #ARGUMENT."""
        raise NotImplementedError("No symbolic representation for %s."
                                  % type(self).__name__)

    def is_zero_expression(self):
        r"""Whether this expression is known to be constant zero."""
        return False

    @classmethod
    def mpmath_context(cls, use_mp):
        r"""Return `mpmath.mp` for `use_mp=True` and `mpmath.fp` otherwise.

        The `fp` context is given no-op versions of the precision managers
        (`workdps()` etc.) it lacks, so both can be used interchangeably.
        """
        if use_mp:
            return mp
        for attr in ('extradps', 'extraprec', 'workdps', 'workprec'):
            if not hasattr(fp, attr):
                setattr(fp, attr, _noop_context)
        return fp

    @classmethod
    @contextmanager
    def context(cls, use_mp, dps):
        r"""Context manager yielding the `mpmath` context for a mode.

        For `use_mp=True`, the working precision is set to `dps` decimal
        places (or left unchanged if `dps` is `None`) while inside the
        context.
        """
        ctx = cls.mpmath_context(use_mp)
        if not use_mp or dps is None:
            dps = mp.dps
        with ctx.workdps(dps):
            yield ctx

    def set_sub_exprs(self, **sub_exprs):
        r"""Register (or replace) sub-expressions under the given keys.

        Values are converted with ensure_expr() and stored both in the
        sub-expression dictionary and as attributes of this object.
        """
        for key, expr in sub_exprs.items():
            expr = ensure_expr(expr)
            setattr(self, key, expr)
            self.__sub_expressions[key] = expr
