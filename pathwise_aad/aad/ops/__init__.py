# aad/ops/__init__.py

# Importing the families registers their rules
from . import arithmetic
from . import transcendental
from . import conditional
from . import reduction

# Convenience re-exports so users can do: from pathwise_aad.aad.ops import mul, exp, ...
from .arithmetic import add, sub, mul, div, neg, squared, abs, pow, accrue, discount
from .transcendental import exp, log, sqrt, norm_cdf
from .conditional import maximum, minimum, floor, cap, choose, barrier
from .reduction import average
from .registry import OpRule, register, rule_for, registered_tags

__all__ = [
    "add", "sub", "mul", "div", "neg", "squared", "abs", "pow", "accrue", "discount",
    "exp", "log", "sqrt", "norm_cdf",
    "maximum", "minimum", "floor", "cap", "choose", "barrier",
    "average",
    "OpRule", "register", "rule_for", "registered_tags",
]
