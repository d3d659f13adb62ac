r"""@package polyeval

Polynomial evaluation schemes for the numeric expression system.

Given coefficients \f$ c_0, \ldots, c_{N-1} \f$ and a variable \f$ x \f$, the
polynomial \f$ p(x) = \sum_i c_i x^i \f$ can be evaluated in different ways.
This package offers:
    * expression builders in polyeval.exprs, generating arithmetic expression
      trees for Horner's method or Estrin's scheme, each either with plain or
      fused multiply-add operations
    * the functions in polyeval.runtime, evaluating Horner's method directly
      on a sequence or fixed-size array of coefficient values

Fused multiply-add operations are provided by numutils.fma() for the numeric
types it supports. Requesting fused arithmetic for other types raises a
numutils.FusedMultiplyAddUnsupportedError.
"""

from .numutils import fma, FusedMultiplyAddUnsupportedError
from .runtime import evaluate_sequence, evaluate_fixed_array
from .exprs import horner, estrin, polynomial, Scheme
