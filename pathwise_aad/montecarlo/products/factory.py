# montecarlo/products/factory.py
import datetime

from .descriptors import SwapDescriptor, SwapLegDescriptor, SwaptionDescriptor
from .indices import construct_libor_index
from .schedule import floating_point_date
from .swap import Swap
from .swap_leg import SwapLeg
from .swaption import SwaptionPhysical


class InterestRateMonteCarloProductFactory:
    """
    Product factory of interest rate derivatives for use with a Monte-Carlo
    model.

    Attributes:
        reference_date (datetime.date): Used to convert absolute dates into
            year fractions
    """

    def __init__(self, reference_date: datetime.date):
        self.reference_date = reference_date

    def product_from_descriptor(self, descriptor):
        if isinstance(descriptor, SwapLegDescriptor):
            return SwapLeg(
                descriptor.schedule,
                descriptor.notionals,
                construct_libor_index(descriptor.forward_curve_name, descriptor.schedule),
                descriptor.spreads,
                notional_exchanged=descriptor.notional_exchanged,
                descriptor=descriptor,
            )
        elif isinstance(descriptor, SwapDescriptor):
            return Swap(
                self.product_from_descriptor(descriptor.leg_receiver),
                self.product_from_descriptor(descriptor.leg_payer),
            )
        elif isinstance(descriptor, SwaptionDescriptor):
            exercise = floating_point_date(self.reference_date, descriptor.exercise_date)
            swap = self.product_from_descriptor(descriptor.underlying_swap)
            return SwaptionPhysical(exercise, descriptor.strike_rate, swap, descriptor=descriptor)
        else:
            name = getattr(descriptor, "name", type(descriptor).__name__)
            raise ValueError(f"Unsupported product type {name}")
