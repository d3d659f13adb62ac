r"""@package polyeval.runtime

Runtime evaluation of polynomials from coefficient containers.

As opposed to the expressions in polyeval.exprs, nothing is generated here:
evaluate_sequence() and evaluate_fixed_array() simply loop over the
coefficients using Horner's method. For the same coefficients (and plain
arithmetic), the results agree exactly with those of exprs.horner.horner().

Both functions accept any values supporting `+` and `*`, e.g. ints,
fractions, floats, `mpmath` numbers or numpy arrays (evaluating at many
points at once).

@b Examples

```
    >>> evaluate_sequence([1, 2, 3], 2)
    17
    >>> evaluate_fixed_array(np.array([1., 2., 3.]), np.array([0., 1., 2.]))
    array([ 1.,  6., 17.])
```
"""

import numpy as np

from .numutils import fma, require_fma, zero_like
from .utils import isreversible


__all__ = [
    "evaluate_sequence",
    "evaluate_fixed_array",
]


def evaluate_sequence(coeffs, x, fused=False):
    r"""Evaluate \f$ \sum_i c_i x^i \f$ using Horner's method.

    The coefficients are processed from the highest index down to zero, i.e.
    \f$ acc \leftarrow acc \cdot x + c_i \f$, starting with the last
    coefficient. No intermediate containers are created.

    @param coeffs
        Sequence of coefficients, lowest degree first. Must support
        `reversed()`. It is not modified.
    @param x
        Point at which to evaluate. Any type supporting the arithmetic with
        the coefficients.
    @param fused
        Whether to compute each step as one fused multiply-add. Default is
        `False`.

    @return The value of the polynomial. For an empty sequence, the zero
        element matching `x` (see numutils.zero_like()).

    @b Raises

    `TypeError` if `coeffs` can't be reversed.
    numutils.FusedMultiplyAddUnsupportedError (before computing anything) if
    `fused=True` and any value lacks a fused multiply-add operation.
    """
    if not isreversible(coeffs):
        raise TypeError("Coefficients must be a sequence, got %s."
                        % type(coeffs).__name__)
    if fused:
        require_fma(x)
        for c in coeffs:
            require_fma(c)
    it = reversed(coeffs)
    acc = next(it, _NOTHING)
    if acc is _NOTHING:
        return zero_like(x)
    for c in it:
        acc = fma(acc, x, c) if fused else acc * x + c
    return acc


def evaluate_fixed_array(coeffs, x, fused=False):
    r"""Evaluate a polynomial with coefficients in a fixed-size container.

    This is the counterpart of evaluate_sequence() for containers of known
    length supporting indexing, such as tuples or one-dimensional numpy
    arrays. The algorithm and results are identical.

    @param coeffs
        Tuple, one-dimensional numpy array or other indexable container of
        fixed length, lowest degree first.
    @param x
        Point at which to evaluate.
    @param fused
        Whether to compute each step as one fused multiply-add.

    @b Raises

    `TypeError` if `coeffs` is a numpy array with more than one dimension.
    numutils.FusedMultiplyAddUnsupportedError (before computing anything) if
    `fused=True` and any value lacks a fused multiply-add operation.
    """
    if isinstance(coeffs, np.ndarray) and coeffs.ndim != 1:
        raise TypeError("Coefficient array must be one-dimensional, got "
                        "shape %s." % (coeffs.shape,))
    num = len(coeffs)
    if fused:
        if isinstance(coeffs, np.ndarray):
            require_fma(x, coeffs)
        else:
            require_fma(x)
            for i in range(num):
                require_fma(coeffs[i])
    if num == 0:
        return zero_like(x)
    acc = coeffs[num-1]
    for i in reversed(range(num-1)): # i = num-2, ..., 0
        acc = fma(acc, x, coeffs[i]) if fused else acc * x + coeffs[i]
    return acc


_NOTHING = object()
