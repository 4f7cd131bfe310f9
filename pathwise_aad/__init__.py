# pathwise_aad/__init__.py
"""
Path-wise adjoint differentiation of Monte-Carlo prices.

    pathwise_aad.aad         : differentiable path vectors, tape, reverse sweep
    pathwise_aad.montecarlo  : LIBOR market model and interest rate products
"""

__version__ = "0.1.0"
