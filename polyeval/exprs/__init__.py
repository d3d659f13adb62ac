r"""@package polyeval.exprs

Expression system for composing functions and generating the arithmetic for
evaluating polynomials.

Each expression represents either a function (like \f$ \sin(x) \f$ or a
polynomial \f$ \sum_{n=0}^{N-1} c_n s(x)^n \f$) or a composite expression of
one or more functions (like \f$ f_1(x) + f_2(x) \f$, where \f$ f_i \f$ are
other numeric expressions).

NOTE: Expression objects themselves cannot be evaluated. Instead, you take a
      *snapshot* of the current state and turn it into a callable object, here
      called an *evaluator* and subclasses of evaluators._Evaluator.

Upon creation of an evaluator, evaluators of all composing sub-expressions are
created. Also, at creation time, evaluators can be configured to either
evaluate using native arithmetic on the values or using `mpmath` arbitrary
precision operations.

The polynomial expressions of horner and estrin generate their arithmetic
when an evaluator is created. The result is a binding.LetExpression which
evaluates the variable only once and can also be converted to `sympy` for
inspection or code generation.
"""

from .horner import horner, HornerExpression
from .estrin import estrin, EstrinExpression
from .polynomial import polynomial, Scheme, PolynomialExpression
