# aad/ops/arithmetic.py
import numpy as np

from ..core.builder import record
from ..core.path_vector import PathVector
from .registry import register


def _one(args, out, n_paths):
    return 1.0


def _minus_one(args, out, n_paths):
    return -1.0


register("add", 2, PathVector.add, (_one, _one))
register("sub", 2, PathVector.sub, (_one, _minus_one))
register("mul", 2, PathVector.mult, (lambda a, out, n: a[1], lambda a, out, n: a[0]))
# d(a/b)/db = -a/b^2 = -out/b
register("div", 2, PathVector.div, (lambda a, out, n: 1.0 / a[1], lambda a, out, n: -(out / a[1])))
register("neg", 1, PathVector.neg, (_minus_one,))
register("squared", 1, PathVector.squared, (lambda a, out, n: 2.0 * a[0],))
register("abs", 1, PathVector.abs, (lambda a, out, n: a[0].apply(np.sign),))


def _dpow_dbase(args, out, n_paths):
    base, expo = args
    return expo * base.pow(expo - 1.0)


def _dpow_dexponent(args, out, n_paths):
    return out * args[0].log()


register("pow", 2, PathVector.pow, (_dpow_dbase, _dpow_dexponent))


# accrue: x * (1 + r * dt)
def _accrue_dx(args, out, n_paths):
    _, r, dt = args
    return 1.0 + r * dt


register("accrue", 3, PathVector.accrue, (
    _accrue_dx,
    lambda a, out, n: a[0] * a[2],
    lambda a, out, n: a[0] * a[1],
))


# discount: x / (1 + r * dt)
def _discount_dx(args, out, n_paths):
    _, r, dt = args
    return 1.0 / (1.0 + r * dt)


def _discount_drate(args, out, n_paths):
    _, r, dt = args
    return -(out * dt) / (1.0 + r * dt)


def _discount_dperiod(args, out, n_paths):
    _, r, dt = args
    return -(out * r) / (1.0 + r * dt)


register("discount", 3, PathVector.discount, (_discount_dx, _discount_drate, _discount_dperiod))


def add(x, y): return record("add", x, y)
def sub(x, y): return record("sub", x, y)
def mul(x, y): return record("mul", x, y)
def div(x, y): return record("div", x, y)
def neg(x): return record("neg", x)
def squared(x): return record("squared", x)
def abs(x): return record("abs", x)


def pow(x, y):
    """
    Power x ** y. The exponent is usually a constant; when it is a DiffVar
    its local derivative x^y * log(x) is only defined for x > 0 (NaN otherwise).
    """
    return record("pow", x, y)


def accrue(x, rate, period):
    """x * (1 + rate * period): value of x accrued over one period at a simple rate."""
    return record("accrue", x, rate, period)


def discount(x, rate, period):
    """x / (1 + rate * period): value of x discounted over one period at a simple rate."""
    return record("discount", x, rate, period)
