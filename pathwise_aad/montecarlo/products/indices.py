# montecarlo/products/indices.py
from dataclasses import dataclass
from typing import Optional

from .schedule import Schedule


@dataclass(frozen=True)
class LIBORIndex:
    """
    Forward rate over [fixing + fixing_offset, fixing + fixing_offset + period_length].

    Attributes:
        name (str): Forward curve name
        fixing_offset (float): Period start minus fixing time (years)
        period_length (float): Length of the rate period (years)
    """
    name: str
    fixing_offset: float
    period_length: float

    def forward(self, evaluation_time: float, fixing_time: float, model):
        """Index fixing at fixing_time, as known at evaluation_time."""
        start = fixing_time + self.fixing_offset
        return model.get_libor(min(evaluation_time, fixing_time), start, start + self.period_length)


def construct_libor_index(forward_curve_name: Optional[str], schedule: Schedule) -> Optional[LIBORIndex]:
    """
    LIBOR index for a forward curve and schedule, using the schedule's average
    fixing offset and average period length. None for fixed legs (no curve).
    """
    if forward_curve_name is None:
        return None

    fixing_offset = 0.0
    period_length = 0.0
    # running means
    for i, period in enumerate(schedule.periods):
        fixing_offset += ((period.start - period.fixing) - fixing_offset) / (i + 1)
        period_length += (period.length - period_length) / (i + 1)
    return LIBORIndex(forward_curve_name, fixing_offset, period_length)
