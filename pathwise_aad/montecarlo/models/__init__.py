"""
Monte-Carlo models producing the leaf nodes of the differentiable graph.
"""

from .time_discretization import TimeDiscretization
from .libor_market_model import LIBORMarketModel

__all__ = [
    'TimeDiscretization',
    'LIBORMarketModel',
]
