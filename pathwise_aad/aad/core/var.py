# aad/core/var.py
from __future__ import annotations

from typing import Optional, Tuple

from .path_vector import PathVector


class DiffVar:
    """
    Handle to a Differentiable Node: a PathVector recorded on a tape together
    with the operation and operands that produced it.

    A DiffVar is used exactly like a plain random variable; every arithmetic
    call appends a new node to the tape and returns a new handle. Nodes are
    never mutated.

    Attributes
    ----------
    tape : Tape
        Arena the node lives in.
    id   : int
        Arena slot (construction order).
    """

    __slots__ = ("tape", "id")

    # numpy scalars must defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, tape, node_id: int):
        self.tape = tape
        self.id = node_id

    # ------------------------------------------------------------------ #
    # Node data
    # ------------------------------------------------------------------ #
    @property
    def node(self):
        return self.tape.node(self.id)

    @property
    def value(self) -> PathVector:
        return self.tape.get_value(self.id)

    def get_value(self) -> PathVector:
        return self.value

    @property
    def time(self) -> float:
        return self.value.time

    @property
    def op_tag(self) -> str:
        return self.node.op_tag

    @property
    def operands(self) -> Tuple[int, ...]:
        return self.node.operands

    @property
    def is_constant(self) -> bool:
        return self.node.is_constant

    @property
    def name(self) -> Optional[str]:
        return self.node.name

    def __eq__(self, other):
        return isinstance(other, DiffVar) and other.tape is self.tape and other.id == self.id

    def __hash__(self):
        return hash((id(self.tape), self.id))

    def __repr__(self):
        node = self.tape.nodes.get(self.id)
        if node is None:
            return f"DiffVar(id={self.id}, detached)"
        kind = "const" if node.is_constant else node.op_tag
        return f"DiffVar(id={self.id}, {kind}, {node.value!r}, name={node.name!r})"

    # ------------------------------------------------------------------ #
    # Sensitivities
    # ------------------------------------------------------------------ #
    def gradient(self, targets=None, config=None):
        """
        Path-wise derivatives of this node w.r.t. `targets`
        (default: every non-constant leaf in its ancestry), keyed by node id.
        """
        from .engine import differentiate
        if targets is None:
            targets = [i for i in self.tape.reachable([self.id])
                       if self.tape.node(i).is_leaf and not self.tape.node(i).is_constant]
        return differentiate(self, targets, config=config)

    # ------------------------------------------------------------------ #
    # Method forms (mirroring PathVector)
    # ------------------------------------------------------------------ #
    def add(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def sub(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def mult(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def div(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def squared(self):
        from ..ops.arithmetic import squared
        return squared(self)

    def pow(self, exponent):
        from ..ops.arithmetic import pow
        return pow(self, exponent)

    def exp(self):
        from ..ops.transcendental import exp
        return exp(self)

    def log(self):
        from ..ops.transcendental import log
        return log(self)

    def sqrt(self):
        from ..ops.transcendental import sqrt
        return sqrt(self)

    def abs(self):
        from ..ops.arithmetic import abs
        return abs(self)

    def floor(self, bound):
        from ..ops.conditional import floor
        return floor(self, bound)

    def cap(self, bound):
        from ..ops.conditional import cap
        return cap(self, bound)

    def choose(self, if_true, if_false):
        """self is the logical condition (non-zero selects if_true)."""
        from ..ops.conditional import choose
        return choose(self, if_true, if_false)

    def barrier(self, if_non_negative, if_negative):
        """self is the trigger (>= 0 selects if_non_negative)."""
        from ..ops.conditional import barrier
        return barrier(self, if_non_negative, if_negative)

    def accrue(self, rate, period):
        from ..ops.arithmetic import accrue
        return accrue(self, rate, period)

    def discount(self, rate, period):
        from ..ops.arithmetic import discount
        return discount(self, rate, period)

    def average(self):
        from ..ops.reduction import average
        return average(self)

    # ------------------------------------------------------------------ #
    # Operator overloading
    # ------------------------------------------------------------------ #
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, other):
        from ..ops.arithmetic import pow
        return pow(self, other)

    def __rpow__(self, other):
        from ..ops.arithmetic import pow
        return pow(other, self)
