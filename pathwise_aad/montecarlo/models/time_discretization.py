# montecarlo/models/time_discretization.py
from typing import Sequence

import numpy as np


class TimeDiscretization:
    """
    Strictly increasing grid of times (year fractions from the reference date).

    Attributes:
        times (np.ndarray): Grid points T_0 < T_1 < ... < T_n
        tolerance (float): Distance within which a time is matched to a grid point
    """

    def __init__(self, times: Sequence[float], tolerance: float = 1e-8):
        self.times = np.asarray(times, dtype=np.float64)
        if self.times.ndim != 1 or len(self.times) < 2:
            raise ValueError("TimeDiscretization needs at least two time points")
        if np.any(np.diff(self.times) <= 0.0):
            raise ValueError("Time points must be strictly increasing")
        self.tolerance = tolerance

    @classmethod
    def regular(cls, start: float, n_steps: int, step: float) -> "TimeDiscretization":
        return cls(start + step * np.arange(n_steps + 1))

    @property
    def n_times(self) -> int:
        return len(self.times)

    @property
    def n_periods(self) -> int:
        return len(self.times) - 1

    def time(self, index: int) -> float:
        return float(self.times[index])

    def period_length(self, index: int) -> float:
        return float(self.times[index + 1] - self.times[index])

    def index_of(self, time: float) -> int:
        """Index of the grid point matching `time`; ValueError if there is none."""
        index = int(np.argmin(np.abs(self.times - time)))
        if abs(self.times[index] - time) > self.tolerance:
            raise ValueError(f"Time {time} is not on the time discretization")
        return index

    def __repr__(self):
        return f"TimeDiscretization({self.times[0]}..{self.times[-1]}, n_periods={self.n_periods})"
