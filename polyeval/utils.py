r"""@package polyeval.utils

General utilities for simplifying certain tasks in Python.
"""

__all__ = [
    "isiterable",
    "isreversible",
]


def isiterable(obj):
    """Check whether an object is iterable.

    Note that this returns `True` for strings, which you may or may not intend
    to check for.
    """
    try:
        iter(obj)
    except TypeError:
        return False
    return True


def isreversible(obj):
    r"""Check whether `reversed()` can be applied to an object.

    This is the case for sequences (lists, tuples, numpy arrays, ...) and
    objects implementing `__reversed__`, but not for general iterators. Unlike
    calling `reversed()`, this does not invoke any method of the object.
    """
    cls = type(obj)
    if hasattr(cls, '__reversed__'):
        return cls.__reversed__ is not None
    return hasattr(cls, '__len__') and hasattr(cls, '__getitem__')
