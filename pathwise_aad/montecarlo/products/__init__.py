"""
Interest rate products for Monte-Carlo valuation, assembled from descriptors.
"""

from .schedule import Period, Schedule, floating_point_date
from .indices import LIBORIndex, construct_libor_index
from .descriptors import (
    InterestRateProductDescriptor,
    SwapLegDescriptor,
    SwapDescriptor,
    SwaptionDescriptor,
)
from .base import MonteCarloProduct
from .swap_leg import SwapLeg
from .swap import Swap
from .swaption import SwaptionPhysical
from .factory import InterestRateMonteCarloProductFactory

__all__ = [
    'Period',
    'Schedule',
    'floating_point_date',
    'LIBORIndex',
    'construct_libor_index',
    'InterestRateProductDescriptor',
    'SwapLegDescriptor',
    'SwapDescriptor',
    'SwaptionDescriptor',
    'MonteCarloProduct',
    'SwapLeg',
    'Swap',
    'SwaptionPhysical',
    'InterestRateMonteCarloProductFactory',
]
