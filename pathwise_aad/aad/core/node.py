# aad/core/node.py
from dataclasses import dataclass
from typing import Optional, Tuple

from .path_vector import PathVector


@dataclass(frozen=True)
class Node:
    """
    One entry of the tape arena.

    Attributes
    ----------
    id        : int
        Arena slot. Ids increase monotonically with construction order, so every
        operand id is strictly smaller than the id of its dependent.
    op_tag    : str
        Operation that produced the node ("leaf" / "constant" for inputs).
    value     : PathVector
        Forward value, evaluated eagerly when the node was recorded.
    operands  : Tuple[int, ...]
        Ids of the operand nodes, in the order the operation received them.
    is_constant : bool
        Constants never receive or propagate adjoints.
    name      : Optional[str]
        Optional debug label (model inputs are usually named).
    """
    id: int
    op_tag: str
    value: PathVector
    operands: Tuple[int, ...] = ()
    is_constant: bool = False
    name: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return not self.operands
