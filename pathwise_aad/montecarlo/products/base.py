# montecarlo/products/base.py
from abc import ABC, abstractmethod


class MonteCarloProduct(ABC):
    """
    Product valued on a Monte-Carlo model. Products only use the arithmetic
    of the differentiable random variables, so the same code prices with or
    without sensitivities.
    """

    descriptor = None

    @abstractmethod
    def price(self, evaluation_time: float, model):
        """Path-wise value at evaluation_time (a DiffVar, root of the pricing graph)."""

    def expected_value(self, model):
        """Monte-Carlo estimate of the value at time 0 (deterministic DiffVar)."""
        return self.price(0.0, model).average()
