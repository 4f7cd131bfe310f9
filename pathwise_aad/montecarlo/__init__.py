"""
Monte-Carlo interest rate models and products built on the differentiable
random variables of pathwise_aad.aad.
"""
