# montecarlo/products/descriptors.py
"""
Declarative product descriptors. Products are assembled from them by
InterestRateMonteCarloProductFactory.
"""
import datetime
from dataclasses import dataclass
from typing import Optional, Tuple

from .schedule import Schedule


@dataclass(frozen=True)
class InterestRateProductDescriptor:
    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class SwapLegDescriptor(InterestRateProductDescriptor):
    """
    Attributes:
        schedule: Periods of the leg
        notionals: One notional per period
        spreads: One spread per period (the fixed rate for a fixed leg)
        forward_curve_name: Forward curve of the floating index, None for a fixed leg
        notional_exchanged: Pay the notional at period start, receive it at period end
    """
    schedule: Schedule
    notionals: Tuple[float, ...]
    spreads: Tuple[float, ...]
    forward_curve_name: Optional[str] = None
    notional_exchanged: bool = False

    def __post_init__(self):
        object.__setattr__(self, "notionals", tuple(float(x) for x in self.notionals))
        object.__setattr__(self, "spreads", tuple(float(x) for x in self.spreads))
        n = self.schedule.n_periods
        if len(self.notionals) != n or len(self.spreads) != n:
            raise ValueError(f"Need one notional and one spread per period ({n}), got "
                             f"{len(self.notionals)} notionals and {len(self.spreads)} spreads")

    @classmethod
    def constant(cls, schedule: Schedule, notional: float, spread: float,
                 forward_curve_name: Optional[str] = None, notional_exchanged: bool = False):
        n = schedule.n_periods
        return cls(schedule, (notional,) * n, (spread,) * n, forward_curve_name, notional_exchanged)


@dataclass(frozen=True)
class SwapDescriptor(InterestRateProductDescriptor):
    leg_receiver: SwapLegDescriptor
    leg_payer: SwapLegDescriptor


@dataclass(frozen=True)
class SwaptionDescriptor(InterestRateProductDescriptor):
    """Physically settled option to enter `underlying_swap` at exercise_date."""
    exercise_date: datetime.date
    strike_rate: float
    underlying_swap: SwapDescriptor
