# aad/core/__init__.py

"""
Core public API of the path-wise AAD engine.

Exports:
    PathVector         : Immutable per-path random variable (the value type).
    DiffVar            : Handle to a differentiable node on a tape.
    Tape               : Node arena; builds leaves/constants and prunes graphs.
    active_tape        : The calling thread's current tape.
    use_tape           : Context manager to temporarily switch the active tape.
    AdjointConfig      : Settings of the reverse sweep.
    AdjointWalker      : Reverse sweep with statistics of the last run.
    differentiate      : Path-wise adjoints of a root w.r.t. many targets.
    get_gradient       : Same, for a single target.
    grad / grads       : Convenience: build on a fresh tape and differentiate.
    value              : Convenience: extract the PathVector of a DiffVar.
"""

from .errors import (
    AADError,
    DimensionMismatch,
    UnreachableTarget,
    CyclicGraphDetected,
    DetachedNodeError,
    UnknownOperation,
)
from .path_vector import PathVector
from .node import Node
from .var import DiffVar
from .tape import Tape, active_tape, use_tape
from .config import AdjointConfig
from .engine import AdjointWalker, SweepStats, differentiate, get_gradient
from .seeds import grad, grads, grads_list, value, expected_gradient

__all__ = [
    "AADError", "DimensionMismatch", "UnreachableTarget", "CyclicGraphDetected",
    "DetachedNodeError", "UnknownOperation",
    "PathVector", "Node", "DiffVar",
    "Tape", "active_tape", "use_tape",
    "AdjointConfig", "AdjointWalker", "SweepStats", "differentiate", "get_gradient",
    "grad", "grads", "grads_list", "value", "expected_gradient",
]
