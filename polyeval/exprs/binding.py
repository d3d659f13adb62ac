r"""@package polyeval.exprs.binding

Expressions for evaluating sub-expressions once and reusing their values.

A LetExpression evaluates an ordered list of bindings, storing each value in
a Binding object, and then evaluates its body. Within the body (and within
later bindings), BoundExpression leaves read the stored values. This way, an
expensive or side-effecting sub-expression (such as the variable of a
polynomial) is evaluated exactly once per evaluation, however often the
generated arithmetic refers to it.

@b Examples

```
    b = Binding('s')
    s = BoundExpression(b)
    expr = LetExpression([(b, math.sin)],
                         ProductExpression(s, s))
    ev = expr.evaluator()
    ev(0.3)  # == sin(0.3)**2, sine evaluated once
```
"""

import sympy as sp

from .numexpr import NumericExpression, ensure_expr
from .evaluators import _Evaluator


__all__ = [
    "Binding",
    "BoundExpression",
    "LetExpression",
]


class Binding(object):
    r"""Named slot holding a value materialized once per evaluation.

    Bindings are filled by the evaluator of a LetExpression right before the
    values are needed. Any number of BoundExpression leaves may then read the
    stored value.
    """
    _UNSET = object()

    def __init__(self, name):
        ## Name used when printing and when emitting sympy expressions.
        self.name = name
        self._value = Binding._UNSET
        self._symbol = None

    @property
    def value(self):
        r"""The currently materialized value."""
        if self._value is Binding._UNSET:
            raise RuntimeError("Binding '%s' read before being assigned."
                               % self.name)
        return self._value
    @value.setter
    def value(self, value):
        self._value = value

    @property
    def is_set(self):
        r"""Whether a value has been materialized."""
        return self._value is not Binding._UNSET

    def clear(self):
        r"""Forget the materialized value."""
        self._value = Binding._UNSET

    @property
    def symbol(self):
        r"""Unique `sympy.Dummy` standing for this binding."""
        if self._symbol is None:
            self._symbol = sp.Dummy(self.name)
        return self._symbol

    def __repr__(self):
        return "<Binding %s>" % self.name


class BoundExpression(NumericExpression):
    r"""Leaf expression reading the current value of a Binding.

    The value is whatever the enclosing LetExpression materialized last.
    """
    def __init__(self, binding, name=None):
        r"""Init function.

        Args:
            binding: The Binding to read from.
            name:    Name of the expression (e.g. for print_tree()). Defaults
                     to the name of the binding.
        """
        super(BoundExpression, self).__init__(name=name or binding.name)
        ## The Binding read by this expression.
        self.binding = binding

    def _expr_str(self):
        return self.binding.name

    def to_sympy(self):
        return self.binding.symbol

    def _evaluator(self, use_mp):
        binding = self.binding
        return lambda x: binding.value


class LetExpression(NumericExpression):
    r"""Evaluate a sequence of bindings once, then a body using them.

    Represents the expression
    \f[
        \mathrm{let}\ b_1 = e_1(x), \ldots, b_k = e_k(x)\
        \mathrm{in}\ f(x; b_1, \ldots, b_k),
    \f]
    where each \f$ e_i \f$ may use the bindings \f$ b_j \f$ with
    \f$ j < i \f$.

    The bound expressions are stored as sub-expressions under the names of
    their bindings, the body under `body`.
    """
    def __init__(self, bindings, body, name='let'):
        r"""Init function.

        Args:
            bindings: Sequence of `(binding, expr)` pairs evaluated in order.
            body:     Expression evaluated after all bindings.
            name:     Name of the expression (e.g. for print_tree()).
        """
        bindings = [(b, ensure_expr(e)) for b, e in bindings]
        names = [b.name for b, _ in bindings]
        if len(set(names)) != len(names):
            raise TypeError("Binding names must be unique.")
        for n in names:
            if n == 'body' or hasattr(LetExpression, n):
                raise TypeError("Binding name '%s' clashes with an attribute." % n)
        sub_exprs = dict((b.name, e) for b, e in bindings)
        sub_exprs['body'] = body
        super(LetExpression, self).__init__(name=name, **sub_exprs)
        self._bindings = tuple(bindings)

    @property
    def bindings(self):
        r"""Tuple of `(binding, expr)` pairs in evaluation order."""
        return self._bindings

    def _expr_str(self):
        lets = ", ".join("%s=%s" % (b.name, e.str()) for b, e in self._bindings)
        return "let %s in %s" % (lets, self.body.str())

    @property
    def nice_name(self):
        return "%s (%s)" % (self.name, ", ".join(b.name for b, _ in self._bindings))

    def to_sympy(self, inline=True):
        r"""Return a `sympy` representation of this expression.

        Args:
            inline: If `True` (default), substitute all bindings into the body
                and return a single `sympy` expression. If `False`, return a
                tuple `(replacements, body)` in the format used by
                `sympy.cse`, i.e. `replacements` is a list of
                `(symbol, value)` pairs in evaluation order.
        """
        replacements = [(b.symbol, e.to_sympy()) for b, e in self._bindings]
        body = self.body.to_sympy()
        if not inline:
            return replacements, body
        subs = dict()
        for symbol, value in replacements:
            subs[symbol] = value.xreplace(subs)
        return body.xreplace(subs)

    def _evaluator(self, use_mp):
        return _LetEval(self, use_mp)


class _LetEval(_Evaluator):
    r"""Evaluator for LetExpression.

    Each call evaluates every bound expression exactly once, in order.
    """
    def __init__(self, expr, use_mp):
        values = [(b, e.evaluator(use_mp)) for b, e in expr.bindings]
        body = expr.body.evaluator(use_mp)
        super(_LetEval, self).__init__(
            expr, sub_evaluators=[ev for _, ev in values] + [body]
        )
        self._values = values
        self._body = body

    def __call__(self, x):
        r"""Evaluate the bindings and then the body at x."""
        for binding, ev in self._values:
            binding.value = ev(x)
        return self._body(x)
