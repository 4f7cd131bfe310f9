# aad/core/path_vector.py
from __future__ import annotations

import numpy as np
from typing import Any, Callable, Optional, Tuple, Union

from .errors import DimensionMismatch

Number = Union[int, float, np.floating]


class PathVector:
    """
    Immutable Monte-Carlo random variable: one value per simulation path,
    tagged with the filtration time at which it is known.

    Attributes
    ----------
    time : float
        Filtration time. Results of binary/ternary operations carry the
        maximum of the operand times.
    values : np.float64 | np.ndarray
        Either a 0-d float (deterministic value, broadcasts against any
        number of paths) or a read-only 1-d float64 array of length N.

    Arithmetic is elementwise. Combining two stochastic vectors of different
    length raises DimensionMismatch. Domain errors (log of a non-positive
    number, division by zero) follow IEEE semantics and produce NaN/Inf.
    """

    __slots__ = ("_time", "_values")

    # keep numpy from broadcasting over PathVector objects; numpy scalars
    # defer to our reflected operators instead
    __array_ufunc__ = None

    def __init__(self, time: float, values: Any, *, copy: bool = True):
        self._time = float(time)
        self._values = _freeze(values, copy=copy)

    @classmethod
    def deterministic(cls, value: Number, time: float = 0.0) -> "PathVector":
        return cls(time, np.float64(value))

    @classmethod
    def _wrap(cls, time: float, values: Any) -> "PathVector":
        # Internal constructor for freshly computed results (no defensive copy).
        return cls(time, values, copy=False)

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #
    @property
    def time(self) -> float:
        return self._time

    @property
    def values(self):
        return self._values

    @property
    def is_deterministic(self) -> bool:
        return np.ndim(self._values) == 0

    def size(self) -> int:
        return 1 if self.is_deterministic else int(self._values.shape[0])

    def get(self, path: int) -> float:
        if self.is_deterministic:
            return float(self._values)
        return float(self._values[path])

    def average(self) -> float:
        return float(np.mean(self._values))

    def variance(self) -> float:
        if self.is_deterministic:
            return 0.0
        return float(np.var(self._values))

    def standard_error(self) -> float:
        return float(np.sqrt(self.variance() / self.size()))

    def min(self) -> float:
        return float(np.min(self._values))

    def max(self) -> float:
        return float(np.max(self._values))

    def expand(self, n_paths: int) -> np.ndarray:
        """Return the values as a fresh array of length n_paths."""
        if self.is_deterministic:
            return np.full(n_paths, float(self._values))
        if self.size() != n_paths:
            raise DimensionMismatch(self.size(), n_paths)
        return np.array(self._values)

    def to_array(self) -> np.ndarray:
        return np.array(self._values, dtype=np.float64, ndmin=1)

    def slice(self, start: int, stop: int) -> "PathVector":
        """Paths [start, stop) as a view. Deterministic vectors are returned unchanged."""
        if self.is_deterministic:
            return self
        return PathVector._wrap(self._time, self._values[start:stop])

    # ------------------------------------------------------------------ #
    # Elementwise arithmetic
    # ------------------------------------------------------------------ #
    def add(self, other) -> "PathVector":
        return _apply(np.add, self, other)

    def sub(self, other) -> "PathVector":
        return _apply(np.subtract, self, other)

    def mult(self, other) -> "PathVector":
        return _apply(np.multiply, self, other)

    def div(self, other) -> "PathVector":
        return _apply(np.divide, self, other)

    def neg(self) -> "PathVector":
        return PathVector._wrap(self._time, np.negative(self._values))

    def exp(self) -> "PathVector":
        return _apply(np.exp, self)

    def log(self) -> "PathVector":
        return _apply(np.log, self)

    def sqrt(self) -> "PathVector":
        return _apply(np.sqrt, self)

    def squared(self) -> "PathVector":
        return _apply(np.square, self)

    def pow(self, exponent) -> "PathVector":
        return _apply(np.power, self, exponent)

    def abs(self) -> "PathVector":
        return _apply(np.abs, self)

    def floor(self, bound) -> "PathVector":
        return _apply(np.maximum, self, bound)

    def cap(self, bound) -> "PathVector":
        return _apply(np.minimum, self, bound)

    def accrue(self, rate, period) -> "PathVector":
        """self * (1 + rate * period)"""
        return _apply(lambda x, r, p: x * (1.0 + r * p), self, rate, period)

    def discount(self, rate, period) -> "PathVector":
        """self / (1 + rate * period)"""
        return _apply(lambda x, r, p: x / (1.0 + r * p), self, rate, period)

    def apply(self, fn: Callable, *others) -> "PathVector":
        """Apply an arbitrary elementwise numpy function to self (and others)."""
        return _apply(fn, self, *others)

    # ------------------------------------------------------------------ #
    # Conditional selection
    # ------------------------------------------------------------------ #
    @staticmethod
    def choose(condition, if_true, if_false) -> "PathVector":
        """Path-wise if_true where condition != 0, if_false otherwise."""
        return _apply(lambda c, a, b: np.where(c != 0.0, a, b), condition, if_true, if_false)

    @staticmethod
    def barrier(trigger, if_non_negative, if_negative) -> "PathVector":
        """Path-wise if_non_negative where trigger >= 0, if_negative otherwise."""
        return _apply(lambda t, a, b: np.where(t >= 0.0, a, b), trigger, if_non_negative, if_negative)

    # ------------------------------------------------------------------ #
    # Python operators
    # ------------------------------------------------------------------ #
    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return _apply(np.add, other, self)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return _apply(np.subtract, other, self)

    def __mul__(self, other):
        return self.mult(other)

    def __rmul__(self, other):
        return _apply(np.multiply, other, self)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return _apply(np.divide, other, self)

    def __neg__(self):
        return self.neg()

    def __pow__(self, exponent):
        return self.pow(exponent)

    def __len__(self):
        return self.size()

    def __repr__(self):
        if self.is_deterministic:
            return f"PathVector(time={self._time}, value={float(self._values)!r})"
        return f"PathVector(time={self._time}, size={self.size()}, mean={self.average():.6g})"


def _freeze(values: Any, *, copy: bool):
    arr = np.array(values, dtype=np.float64, copy=True) if copy else np.asarray(values, dtype=np.float64)
    if arr.ndim == 0:
        return np.float64(arr)
    if arr.ndim != 1:
        raise ValueError(f"PathVector values must be a scalar or 1-d array, got shape {arr.shape}")
    arr.flags.writeable = False
    return arr


def _unpack(x) -> Tuple[Optional[float], Any]:
    if isinstance(x, PathVector):
        return x._time, x._values
    if isinstance(x, (int, float, np.floating, np.integer)):
        return None, np.float64(x)
    raise TypeError(f"Cannot combine PathVector with {type(x).__name__}")


def check_sizes(*operands) -> int:
    """Common path count of the operands (1 if all deterministic); raise on mismatch."""
    n = None
    for v in operands:
        if np.ndim(v) == 0:
            continue
        m = v.shape[0]
        if n is None:
            n = m
        elif m != n:
            raise DimensionMismatch(n, m)
    return 1 if n is None else n


def _apply(fn: Callable, *operands) -> PathVector:
    unpacked = [_unpack(x) for x in operands]
    times = [t for t, _ in unpacked if t is not None]
    values = [v for _, v in unpacked]
    check_sizes(*values)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        result = fn(*values)
    return PathVector._wrap(max(times) if times else 0.0, result)
