# montecarlo/products/swap.py
from .base import MonteCarloProduct
from .descriptors import SwapDescriptor


class Swap(MonteCarloProduct):
    """Receiver leg minus payer leg; both legs always enter the value."""

    def __init__(self, leg_receiver: MonteCarloProduct, leg_payer: MonteCarloProduct):
        self.leg_receiver = leg_receiver
        self.leg_payer = leg_payer

    def price(self, evaluation_time: float, model):
        return self.leg_receiver.price(evaluation_time, model) - self.leg_payer.price(evaluation_time, model)

    @property
    def descriptor(self) -> SwapDescriptor:
        receiver = self.leg_receiver.descriptor
        payer = self.leg_payer.descriptor
        if receiver is None or payer is None:
            raise ValueError("One or both of the legs of this swap do not support extraction of a descriptor.")
        return SwapDescriptor(receiver, payer)
