r"""@package polyeval.numutils

Numerical helpers shared by the expression system and the runtime evaluators.

The most important item is fma(), computing \f$ a b + c \f$ with a single
rounding step for all value types we know how to handle. Which types these are
can be queried with supports_fma() and enforced with require_fma(). Types
lacking a fused multiply-add are rejected, never silently evaluated with two
roundings.


@b Examples

```
    >>> fma(0.1, 10.0, -1.0)
    5.551115123125783e-17
    >>> 0.1 * 10.0 - 1.0
    0.0
    >>> fma(Fraction(1, 3), 3, 1)
    Fraction(2, 1)
```
"""

from decimal import Decimal
from fractions import Fraction
import math
import numbers
import warnings

import numpy as np
import sympy as sp
from mpmath import mp


__all__ = [
    "fma",
    "supports_fma",
    "require_fma",
    "zero_like",
    "to_mp",
    "NumericalError",
    "FusedMultiplyAddUnsupportedError",
    "FMAEmulationWarning",
]


class NumericalError(Exception):
    r"""Exception raised for problems with numerical evaluation."""
    pass


class FusedMultiplyAddUnsupportedError(NumericalError, TypeError):
    r"""Raised when fused arithmetic is requested for a type lacking an FMA.

    This is a capability mismatch between the requested scheme and the
    numeric type of the values. It is raised before any arithmetic on the
    offending values takes place.
    """
    pass


class FMAEmulationWarning(UserWarning):
    r"""Issued once when `math.fma` is missing and floats use exact emulation."""
    pass


# Value kinds in increasing order of precedence. When mixing values, the
# kind with the highest precedence decides how the FMA is computed.
_EXACT = 0
_FLOAT = 1
_COMPLEX = 2
_NUMPY = 3
_DECIMAL = 4
_MPMATH = 5
_SYMPY = 6
_ARRAY = 7

_emulation_warned = False


def _fma_kind(value):
    r"""Classify a single value, returning `None` for unsupported types."""
    if isinstance(value, np.ndarray):
        kind, size = value.dtype.kind, value.dtype.itemsize
        if kind in 'biuO' or (kind == 'f' and size <= 8) or (kind == 'c' and size == 16):
            return _ARRAY
        return None
    if isinstance(value, (mp.mpf, mp.mpc)):
        return _MPMATH
    if isinstance(value, Decimal):
        return _DECIMAL
    if isinstance(value, sp.Basic):
        return _SYMPY
    # Note that `numpy.float64` and `numpy.complex128` derive from the
    # builtin types and are caught here.
    if isinstance(value, float):
        return _FLOAT
    if isinstance(value, complex):
        return _COMPLEX
    if isinstance(value, np.floating):
        return _NUMPY if value.dtype.itemsize < 8 else None
    if isinstance(value, numbers.Rational):
        return _EXACT
    return None


def supports_fma(value):
    r"""Return whether fma() can compute with values of this type."""
    return _fma_kind(value) is not None


def require_fma(*values):
    r"""Raise FusedMultiplyAddUnsupportedError for values fma() can't handle."""
    for value in values:
        if not supports_fma(value):
            raise FusedMultiplyAddUnsupportedError(
                "No fused multiply-add available for values of type %s."
                % type(value).__name__
            )


def fma(a, b, c):
    r"""Compute `a*b + c` rounding only once.

    For exact domains (integers, fractions, sympy objects) this is just
    `a*b + c`. Floating point types get a correctly rounded result of the
    exact value \f$ a b + c \f$.

    @param a,b
        Factors of the product.
    @param c
        Summand.

    @b Raises

    FusedMultiplyAddUnsupportedError if any of the values has a type without
    a fused multiply-add operation.
    """
    kind = -1
    for value in (a, b, c):
        k = _fma_kind(value)
        if k is None:
            require_fma(value)
        kind = max(kind, k)
    return _FMA_IMPLEMENTATIONS[kind](a, b, c)


def _fma_exact(a, b, c):
    return a * b + c


def _fma_float_emulated(a, b, c):
    r"""Correctly rounded FMA for floats computed via exact fractions."""
    global _emulation_warned
    if not _emulation_warned:
        _emulation_warned = True
        warnings.warn("math.fma is not available. Falling back to slower "
                      "exact emulation of fused multiply-add.",
                      FMAEmulationWarning)
    a, b, c = float(a), float(b), float(c)
    if not (math.isfinite(a) and math.isfinite(b) and math.isfinite(c)):
        return a * b + c
    exact = Fraction(a) * Fraction(b) + Fraction(c)
    if exact == 0:
        # Let IEEE arithmetic decide the sign of zero.
        return a * b + c
    return _round_fraction(exact)


if hasattr(math, 'fma'):
    def _fma_float(a, b, c):
        return math.fma(float(a), float(b), float(c))
else:
    _fma_float = _fma_float_emulated


def _fma_complex(a, b, c, prec=53):
    r"""Complex FMA rounding each of the two components once.

    The components are rounded to `prec` bits, i.e. to double precision by
    default.
    """
    a, b, c = complex(a), complex(b), complex(c)
    parts = (a.real, a.imag, b.real, b.imag, c.real, c.imag)
    if not all(math.isfinite(p) for p in parts):
        return a * b + c
    ar, ai, br, bi, cr, ci = map(Fraction, parts)
    real = ar * br - ai * bi + cr
    imag = ar * bi + ai * br + ci
    return complex(_round_fraction(real, prec), _round_fraction(imag, prec))


def _round_fraction(value, prec=53):
    r"""Round an exact value to `prec` bits, overflowing to infinity."""
    try:
        if prec < 53:
            return float(mp.fdiv(value.numerator, value.denominator, prec=prec))
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _fma_numpy(a, b, c):
    r"""FMA for numpy floats narrower than double precision.

    The exponent range of the narrow dtype is not modelled, i.e. results in
    the subnormal range may be rounded twice.

    Mixing with Python complex numbers gives a complex dtype, computed
    componentwise with the precision of its real part.
    """
    dtype = np.result_type(a, b, c)
    if dtype.kind == 'c':
        prec = min(53, np.finfo(dtype).nmant + 1)
        return dtype.type(_fma_complex(a, b, c, prec=prec))
    if dtype.itemsize >= 8:
        return dtype.type(_fma_float(a, b, c))
    prec = np.finfo(dtype).nmant + 1
    product = mp.fmul(float(a), float(b), exact=True)
    result = mp.fadd(product, float(c), prec=prec)
    return dtype.type(float(result))


def _fma_decimal(a, b, c):
    return Decimal(a).fma(b, c)


def _fma_mpmath(a, b, c):
    return mp.fadd(mp.fmul(a, b, exact=True), c)


def _fma_array(a, b, c):
    dtype = np.result_type(a, b, c)
    if dtype.kind in 'biu':
        return a * b + c
    return np.vectorize(fma, otypes=[dtype])(a, b, c)


_FMA_IMPLEMENTATIONS = {
    _EXACT: _fma_exact,
    _FLOAT: _fma_float,
    _COMPLEX: _fma_complex,
    _NUMPY: _fma_numpy,
    _DECIMAL: _fma_decimal,
    _MPMATH: _fma_mpmath,
    _SYMPY: _fma_exact,
    _ARRAY: _fma_array,
}


def zero_like(value):
    r"""Return the additive identity of the numeric domain of `value`.

    For example, `0` for integers, `0.0` for floats, `mp.mpf(0)` for `mpmath`
    numbers and an array of zeros of matching shape and dtype for numpy
    arrays. Types that can't be constructed from `0` get `value * 0`.
    """
    if isinstance(value, np.ndarray):
        return np.zeros_like(value)
    try:
        return type(value)(0)
    except (TypeError, ValueError):
        return value * 0


def to_mp(value):
    r"""Convert a value to an `mpmath` number at the current precision.

    Values already being `mpmath` numbers, numpy arrays and sympy objects are
    returned unchanged.
    """
    if isinstance(value, (mp.mpf, mp.mpc, np.ndarray, sp.Basic)):
        return value
    if isinstance(value, Fraction):
        return mp.mpf(value.numerator) / value.denominator
    return mp.mpmathify(value)
