# aad/core/errors.py
"""Error taxonomy of the differentiation engine."""


class AADError(Exception):
    """Base class of every error raised by the engine."""


class DimensionMismatch(AADError, ValueError):
    """Operand path vectors have different numbers of paths."""

    def __init__(self, size_a: int, size_b: int):
        super().__init__(f"Path vectors of different sizes: {size_a} vs {size_b}")
        self.sizes = (size_a, size_b)


class UnreachableTarget(AADError, KeyError):
    """A requested target is not in the ancestry of the root (strict mode only)."""

    def __init__(self, node_id: int):
        super().__init__(f"Node {node_id} is not reachable from the root")
        self.node_id = node_id


class CyclicGraphDetected(AADError, RuntimeError):
    """An operand was constructed after its dependent; the arena is corrupt."""

    def __init__(self, node_id: int, operand_id: int):
        super().__init__(
            f"Node {node_id} references operand {operand_id} which was not constructed before it"
        )
        self.node_id = node_id
        self.operand_id = operand_id


class DetachedNodeError(AADError, KeyError):
    """A node (or an operand of one) has been pruned from the arena."""

    def __init__(self, node_id: int):
        super().__init__(f"Node {node_id} is not present on the tape (pruned?)")
        self.node_id = node_id


class UnknownOperation(AADError, KeyError):
    """No rule is registered for an operation tag."""

    def __init__(self, tag: str):
        super().__init__(f"No operation registered under tag {tag!r}")
        self.tag = tag
