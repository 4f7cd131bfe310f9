# montecarlo/products/schedule.py
"""
Minimal schedule representation in year fractions from the reference date.
Calendar and business-day arithmetic are left to the caller.
"""
import datetime
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np


def floating_point_date(reference_date: datetime.date, date: datetime.date) -> float:
    """ACT/365 year fraction between reference_date and date."""
    return (date - reference_date).days / 365.0


@dataclass(frozen=True)
class Period:
    fixing: float
    start: float
    end: float
    payment: float

    def __post_init__(self):
        if self.end <= self.start:
            raise ValueError(f"Period end {self.end} must be after start {self.start}")

    @property
    def length(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class Schedule:
    periods: Tuple[Period, ...]

    def __post_init__(self):
        object.__setattr__(self, "periods", tuple(self.periods))
        if not self.periods:
            raise ValueError("Schedule needs at least one period")

    @classmethod
    def regular(cls, start: float, end: float, frequency: float) -> "Schedule":
        """
        Back-to-back periods of length `frequency` (years) from start to end,
        fixing in advance at period start and paying in arrears at period end.
        """
        n = int(round((end - start) / frequency))
        if n < 1 or not np.isclose(start + n * frequency, end):
            raise ValueError(f"[{start}, {end}] is not a whole number of {frequency}y periods")
        dates = start + frequency * np.arange(n + 1)
        return cls(tuple(Period(float(a), float(a), float(b), float(b)) for a, b in zip(dates[:-1], dates[1:])))

    @classmethod
    def from_dates(cls, dates: Sequence[float]) -> "Schedule":
        return cls(tuple(Period(a, a, b, b) for a, b in zip(dates[:-1], dates[1:])))

    @property
    def n_periods(self) -> int:
        return len(self.periods)

    def __len__(self):
        return len(self.periods)

    def __iter__(self):
        return iter(self.periods)

    def __getitem__(self, i) -> Period:
        return self.periods[i]
