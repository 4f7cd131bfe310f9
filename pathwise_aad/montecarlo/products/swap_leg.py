# montecarlo/products/swap_leg.py
from typing import Optional, Sequence

from .base import MonteCarloProduct
from .indices import LIBORIndex
from .schedule import Schedule


class SwapLeg(MonteCarloProduct):
    """
    Leg paying notional_i * (index_i + spread_i) * periodLength_i at each payment
    date (spread_i only, for a fixed leg without index), optionally with
    notional exchange at period start and end.

    Each cash flow is valued at evaluation_time with the model's forward bond
    P(evaluation_time, payment), which makes the leg value known at
    evaluation_time on every path. Cash flows paid on or before
    evaluation_time are excluded.
    """

    def __init__(self, schedule: Schedule, notionals: Sequence[float], index: Optional[LIBORIndex],
                 spreads: Sequence[float], notional_exchanged: bool = False, descriptor=None):
        if len(notionals) != schedule.n_periods or len(spreads) != schedule.n_periods:
            raise ValueError("Need one notional and one spread per period")
        self.schedule = schedule
        self.notionals = tuple(notionals)
        self.index = index
        self.spreads = tuple(spreads)
        self.notional_exchanged = notional_exchanged
        self.descriptor = descriptor

    def price(self, evaluation_time: float, model):
        value = None
        for period, notional, spread in zip(self.schedule, self.notionals, self.spreads):
            if period.payment <= evaluation_time:
                continue
            bond = model.get_forward_bond(evaluation_time, period.payment)

            if self.index is None:
                cashflow = notional * spread * period.length * bond
            else:
                rate = self.index.forward(evaluation_time, period.fixing, model) + spread
                cashflow = notional * period.length * rate * bond

            if self.notional_exchanged:
                cashflow = cashflow + notional * bond
                if period.start > evaluation_time:
                    cashflow = cashflow - notional * model.get_forward_bond(evaluation_time, period.start)

            value = cashflow if value is None else value + cashflow

        return model.constant(0.0) if value is None else value
