# aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1 on every path) at the output and let the
# path-wise gradients grow backwards through a fresh tape.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .config import AdjointConfig
from .engine import differentiate
from .path_vector import PathVector
from .tape import Tape, use_tape
from .var import DiffVar


def value(x: Any) -> Any:
    """Return the PathVector of a DiffVar; pass through anything else unchanged."""
    return x.value if isinstance(x, DiffVar) else x


def _ensure_var(tape: Tape, y: Any) -> DiffVar:
    return y if isinstance(y, DiffVar) else tape.constant(value(y))


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[DiffVar], DiffVar], x0, *, time: float = 0.0,
         config: Optional[AdjointConfig] = None) -> PathVector:
    """
    Path-wise derivative of y = f(x) at x0 (a scalar or one value per path).
    Runs one reverse sweep on a fresh, isolated tape.
    """
    with use_tape() as tape:
        x = tape.leaf(time, x0, name="x")
        y = _ensure_var(tape, f(x))
        return differentiate(y, [x], config)[x.id]


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, DiffVar]], DiffVar], inputs: Mapping[str, Any], *,
          time: float = 0.0, config: Optional[AdjointConfig] = None) -> Dict[str, PathVector]:
    """
    Path-wise derivatives of y = f(vars) w.r.t. ALL inputs (dict form), from
    ONE reverse sweep. Keys follow the order of `inputs`.
    """
    with use_tape() as tape:
        xs = {k: tape.leaf(time, v, name=k) for k, v in inputs.items()}
        y = _ensure_var(tape, f(xs))
        adj = differentiate(y, list(xs.values()), config)
        return {k: adj[x.id] for k, x in xs.items()}


def grads_list(f: Callable[[List[DiffVar]], DiffVar], x0_list: Iterable, *,
               time: float = 0.0, config: Optional[AdjointConfig] = None) -> List[PathVector]:
    """
    Same as grads(), with the inputs given as a list.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [PathVector(4.0), PathVector(3.0)]
    """
    with use_tape() as tape:
        xs = [tape.leaf(time, v, name=f"x{i}") for i, v in enumerate(x0_list)]
        y = _ensure_var(tape, f(xs))
        adj = differentiate(y, xs, config)
        return [adj[x.id] for x in xs]


def expected_gradient(gradient: Union[PathVector, Mapping[Any, PathVector]]):
    """Monte-Carlo average of path-wise gradient(s): the explicit aggregation step."""
    if isinstance(gradient, PathVector):
        return gradient.average()
    return {k: g.average() for k, g in gradient.items()}
