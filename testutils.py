r"""@package testutils

Utilities to add more features to `unittest` classes.

This module provides a custom subclass of `unittest.TestCase`, namely
PolyTestCase, which obeys the global configuration settings in TestSettings.
The latter can be configured by the script invoking the test run (see
`tests.py`).

This module also introduces a decorator slowtest, which, when applied, leads
to the test being skipped on normal runs. The script starting the test must
set `TestSettings.skipslow` to `False` for the slow tests to be run.
"""

import sys
import functools
import math
import unittest
import time


__all__ = [
    "PolyTestCase",
    "TestSettings",
    "slowtest",
    "CallCounter",
]


def slowtest(func):
    """Decorator for skipping a test if TestSettings.skipslow is true."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if TestSettings.skipslow:
            raise unittest.SkipTest("skipping slow tests")
        return func(*args, **kwargs)
    return wrapper


class CallCounter(object):
    r"""Callable counting its calls.

    Returns `func(x)`, or just `x` if no function is given.
    """
    def __init__(self, func=None):
        self.calls = 0
        self.func = func
    def __call__(self, x):
        self.calls += 1
        return x if self.func is None else self.func(x)


class PolyTestCase(unittest.TestCase):
    """Tweaked baseclass for unit tests.

    By deriving from this class, you:
        * Get timed individual tests (needs `verbosity=2`) if
          TestSettings.timing is true.
        * Get a few additional assertions for comparing numbers exactly,
          including their type and the sign of zero.

    Test runners other than `unittest`'s (e.g. `pytest`) may pass result
    objects without the usual bookkeeping lists. Timing is then simply not
    printed.
    """
    def run(self, result=None):
        self.__result = result
        self.__prevIssues = self.__countIssues()
        return unittest.TestCase.run(self, result)

    def __countIssues(self):
        r"""Number of errors, failures and skips recorded in the result."""
        result = getattr(self, '_PolyTestCase__result', None)
        return sum(len(getattr(result, attr, ()))
                   for attr in ('errors', 'failures', 'skipped'))

    def __shouldPrintTiming(self):
        r"""Return whether timing information should be printed."""
        result = getattr(self, '_PolyTestCase__result', None)
        if not TestSettings.timing or result is None:
            return False
        if self.__countIssues() > self.__prevIssues:
            return False
        return not getattr(result, 'dots', True) and getattr(result, 'showAll', False)

    def setUp(self):
        self.startTime = time.time()
        self.addCleanup(self.__printTiming)

    def __printTiming(self):
        if self.__shouldPrintTiming():
            duration = time.time() - self.startTime
            print("(%.4f seconds) ... " % (duration), file=sys.stderr, end='')

    def assertIsType(self, obj, cls):
        r"""Assert that an object is exactly of a certain type."""
        self.assertIs(type(obj), cls)

    def assertIdentical(self, a, b):
        r"""Assert two numbers are equal, of equal type and equally signed.

        For floats, this compares the bit patterns, i.e. `0.0` and `-0.0`
        differ while two NaNs are considered identical.
        """
        self.assertIs(type(a), type(b))
        if isinstance(a, float):
            if math.isnan(a) and math.isnan(b):
                return
            self.assertEqual(a.hex(), b.hex())
        else:
            self.assertEqual(a, b)

    def assertListAlmostEqual(self, a, b, places=None, delta=None):
        r"""Assert that two iterables contain (almost) the same values."""
        if places is not None and delta is not None:
            raise TypeError("Cannot use delta and places at the same time")
        if places is None and delta is None:
            places = 7
        if len(a) != len(b):
            raise self.failureException("Lists have different lengths (%d != %d)" % (len(a), len(b)))
        fails = []
        for i in range(len(a)):
            if a[i] == b[i]:
                continue
            if delta is not None:
                if abs(a[i]-b[i]) > delta:
                    fails.append(i)
            else:
                if round(abs(a[i]-b[i]), places) != 0:
                    fails.append(i)
        if fails:
            msg = "%d elements differ.\n" % len(fails)
            msg += "\n".join(["  [{i}] {a} != {b}".format(i=i, a=a[i], b=b[i])
                              for i in fails[:9]])
            raise self.failureException(msg)


class TestSettings(object):
    """Global settings for tests."""
    ## Stop test run on first fail/error.
    failfast = False
    ## Whether output is buffered.\ Just information, cannot be used to toggle output buffering.
    buffering = False
    ## Whether the timing for each test case should be printed.
    timing = False
    ## Control whether tests marked as slowtest should be skipped.
    skipslow = True
