# aad/ops/transcendental.py
import numpy as np
from scipy.special import ndtr

from ..core.builder import record
from ..core.path_vector import PathVector
from .registry import register

SQRT_TWO_PI = np.sqrt(2.0 * np.pi)


def norm_pdf(x):
    return np.exp(-0.5 * x * x) / SQRT_TWO_PI


register("exp", 1, PathVector.exp, (lambda a, out, n: out,))
register("log", 1, PathVector.log, (lambda a, out, n: 1.0 / a[0],))
register("sqrt", 1, PathVector.sqrt, (lambda a, out, n: 0.5 / out,))
register("norm_cdf", 1, lambda a: a.apply(ndtr), (lambda a, out, n: a[0].apply(norm_pdf),))


def exp(x): return record("exp", x)
def log(x): return record("log", x)
def sqrt(x): return record("sqrt", x)


def norm_cdf(x):
    """Standard normal distribution function; local partial is the density."""
    return record("norm_cdf", x)
