# aad/core/tape.py
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .errors import DetachedNodeError
from .node import Node
from .path_vector import PathVector

logger = logging.getLogger(__name__)


class Tape:
    """
    Arena of Nodes in construction order.

    Nodes are addressed by stable integer ids handed out by a monotonically
    increasing counter; ids are never reused, even after reset() or prune().
    The arena is append-only while a graph is being built. It is owned by
    whichever computation creates it (a pricing call, a model) and can be
    dropped or pruned independently of other tapes.
    """

    def __init__(self):
        self.nodes: Dict[int, Node] = {}
        self._next_id = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self.nodes

    def ids(self) -> Iterator[int]:
        return iter(self.nodes)

    def reset(self):
        with self._lock:
            self.nodes.clear()

    def node(self, node_id: int) -> Node:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise DetachedNodeError(node_id) from None

    def get_value(self, node_id: int) -> PathVector:
        return self.node(node_id).value

    def push_node(self, *, op_tag: str, value: PathVector, operands: Tuple[int, ...] = (),
                  is_constant: bool = False, name: Optional[str] = None) -> int:
        """Append a Node and return its id."""
        with self._lock:
            node_id = self._next_id
            self._next_id += 1
            self.nodes[node_id] = Node(node_id, op_tag, value, tuple(operands), is_constant, name)
        return node_id

    # ------------------------------------------------------------------ #
    # Leaf construction
    # ------------------------------------------------------------------ #
    def leaf(self, time: float, values, name: Optional[str] = None):
        """
        Create an input node whose sensitivity may be queried.

        A PathVector passed as `values` keeps its own time; `time` only tags
        raw numbers and arrays.
        """
        from .var import DiffVar
        value = values if isinstance(values, PathVector) else PathVector(time, values)
        return DiffVar(self, self.push_node(op_tag="leaf", value=value, name=name))

    def constant(self, values, time: float = 0.0):
        """
        Create a node that never receives an adjoint (literals, random numbers).
        As for leaf(), a PathVector keeps its own time.
        """
        from .var import DiffVar
        value = values if isinstance(values, PathVector) else PathVector(time, values)
        return DiffVar(self, self.push_node(op_tag="constant", value=value, is_constant=True))

    # ------------------------------------------------------------------ #
    # Memory management
    # ------------------------------------------------------------------ #
    def reachable(self, roots: Iterable[int]) -> set:
        """Ids reachable from `roots` through operand edges (work-list, no recursion)."""
        seen = set()
        stack = [r for r in roots]
        while stack:
            node_id = stack.pop()
            if node_id in seen:
                continue
            seen.add(node_id)
            stack.extend(op for op in self.node(node_id).operands if op not in seen)
        return seen

    def prune(self, roots: Iterable) -> int:
        """
        Detach every node that is not reachable from one of `roots`.

        `roots` may hold DiffVars or node ids. Returns the number of removed
        nodes. Handles to removed nodes become invalid (DetachedNodeError on use).
        """
        root_ids = [getattr(r, "id", r) for r in roots]
        with self._lock:
            keep = self.reachable(root_ids)
            dropped = [i for i in self.nodes if i not in keep]
            for node_id in dropped:
                del self.nodes[node_id]
        logger.debug("pruned %d nodes, %d retained", len(dropped), len(self.nodes))
        return len(dropped)


# One default tape per thread: graphs are confined to the thread that builds them.
_local = threading.local()


def active_tape() -> Tape:
    tape = getattr(_local, "tape", None)
    if tape is None:
        tape = _local.tape = Tape()
    return tape


@contextmanager
def use_tape(tape: Optional[Tape] = None):
    """
    Context manager to temporarily record on a given (or fresh) tape:
        with use_tape() as tape:
            ... build computation ...
            differentiate(y, [x])
    """
    prev = getattr(_local, "tape", None)
    try:
        _local.tape = Tape() if tape is None else tape
        yield _local.tape
    finally:
        _local.tape = prev
