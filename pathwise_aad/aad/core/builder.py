# aad/core/builder.py
"""
Graph builder: every operation on DiffVars goes through record(), which
evaluates the forward rule eagerly and appends the resulting node to the
operands' tape.
"""
from __future__ import annotations

import numpy as np

from .path_vector import PathVector
from .tape import Tape, active_tape
from .var import DiffVar
from ..ops.registry import rule_for


def _tape_of(operands) -> Tape:
    tape = None
    for x in operands:
        if isinstance(x, DiffVar):
            if tape is None:
                tape = x.tape
            elif x.tape is not tape:
                raise ValueError("Operands are recorded on different tapes")
    return tape if tape is not None else active_tape()


def _value_of(x) -> PathVector:
    if isinstance(x, DiffVar):
        return x.value
    if isinstance(x, PathVector):
        return x
    if isinstance(x, (int, float, np.floating, np.integer)):
        return PathVector.deterministic(x)
    raise TypeError(f"Unsupported operand type {type(x).__name__}")


def record(tag: str, *operands, name=None) -> DiffVar:
    """
    Apply operation `tag` to `operands` and record the result.

    Raw numbers and PathVectors are wrapped as constant nodes. Forward errors
    (DimensionMismatch) propagate before anything is appended to the tape.
    """
    rule = rule_for(tag)
    if len(operands) != rule.arity:
        raise TypeError(f"{tag} takes {rule.arity} operands, got {len(operands)}")
    tape = _tape_of(operands)
    values = [_value_of(x) for x in operands]
    out = rule.forward(*values)

    ids = []
    for x, v in zip(operands, values):
        ids.append(x.id if isinstance(x, DiffVar) else
                   tape.push_node(op_tag="constant", value=v, is_constant=True))
    # a node fed only by constants cannot carry a sensitivity either
    is_constant = all(not isinstance(x, DiffVar) or x.is_constant for x in operands)
    return DiffVar(tape, tape.push_node(op_tag=tag, value=out, operands=tuple(ids),
                                        is_constant=is_constant, name=name))
