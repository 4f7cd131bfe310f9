# aad/ops/conditional.py
"""
Non-smooth operations: min/max (floor/cap) and path-wise selection.

Control flow of the pricing model (exercise decisions, floors, caps) is
recorded as graph operations so that the reverse sweep applies the
indicator-valued local derivatives instead of silently dropping branches.
Ties are resolved in favour of the first operand. Conditions and triggers
are logical selectors and receive no sensitivity.
"""
import numpy as np

from ..core.builder import record
from ..core.path_vector import PathVector
from .registry import register


def _indicator(test):
    return lambda x, y: np.where(test(x, y), 1.0, 0.0)


_GE = _indicator(lambda x, y: x >= y)
_LT = _indicator(lambda x, y: x < y)
_LE = _indicator(lambda x, y: x <= y)
_GT = _indicator(lambda x, y: x > y)

register("max", 2, PathVector.floor, (
    lambda a, out, n: a[0].apply(_GE, a[1]),
    lambda a, out, n: a[0].apply(_LT, a[1]),
))
register("min", 2, PathVector.cap, (
    lambda a, out, n: a[0].apply(_LE, a[1]),
    lambda a, out, n: a[0].apply(_GT, a[1]),
))


def _selected(c):
    return np.where(c != 0.0, 1.0, 0.0)


def _not_selected(c):
    return np.where(c != 0.0, 0.0, 1.0)


register("choose", 3, PathVector.choose, (
    None,
    lambda a, out, n: a[0].apply(_selected),
    lambda a, out, n: a[0].apply(_not_selected),
))
register("barrier", 3, PathVector.barrier, (
    None,
    lambda a, out, n: a[0].apply(lambda t: np.where(t >= 0.0, 1.0, 0.0)),
    lambda a, out, n: a[0].apply(lambda t: np.where(t >= 0.0, 0.0, 1.0)),
))


def maximum(x, y): return record("max", x, y)
def minimum(x, y): return record("min", x, y)


def floor(x, bound):
    """max(x, bound)"""
    return record("max", x, bound)


def cap(x, bound):
    """min(x, bound)"""
    return record("min", x, bound)


def choose(condition, if_true, if_false):
    return record("choose", condition, if_true, if_false)


def barrier(trigger, if_non_negative, if_negative):
    return record("barrier", trigger, if_non_negative, if_negative)
