# aad/__init__.py
# Path-wise automatic adjoint differentiation

from .core import (
    PathVector,
    DiffVar,
    Tape,
    active_tape,
    use_tape,
    AdjointConfig,
    AdjointWalker,
    differentiate,
    get_gradient,
    grad,
    grads,
    value,
)
from .core.errors import (
    AADError,
    DimensionMismatch,
    UnreachableTarget,
    CyclicGraphDetected,
    DetachedNodeError,
)
from . import ops

__all__ = [
    # Core
    'PathVector',
    'DiffVar',
    'Tape',
    'active_tape',
    'use_tape',
    # Engine
    'AdjointConfig',
    'AdjointWalker',
    'differentiate',
    'get_gradient',
    'grad',
    'grads',
    'value',
    # Errors
    'AADError',
    'DimensionMismatch',
    'UnreachableTarget',
    'CyclicGraphDetected',
    'DetachedNodeError',
    # Operations
    'ops',
]
