# aad/ops/registry.py
"""
Operation registry.

Every elementary operation is a tagged entry holding
  - a forward rule  f(*operand values) -> PathVector
  - one local-derivative rule per operand, evaluated during the reverse
    sweep from the values recorded at construction time:
        partial(args, out, n_paths) -> PathVector | float | None
    where `args` are the operand values, `out` the node value and `n_paths`
    the path count of the sweep (None when the walker did not partition
    paths). A rule of None, or a rule returning None, is a locally zero
    derivative (logical selectors).
  - a `reduction` flag for operations whose value is shared by all paths
    (average). The adjoint reaching such a node is summed over the paths
    before the local derivatives are applied.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

from ..core.errors import UnknownOperation
from ..core.path_vector import PathVector

Partial = Callable[[Sequence[PathVector], PathVector, Optional[int]], Union[PathVector, float, None]]


@dataclass(frozen=True)
class OpRule:
    tag: str
    arity: int
    forward: Callable[..., PathVector]
    partials: Tuple[Optional[Partial], ...]
    reduction: bool = False


_RULES: Dict[str, OpRule] = {}


def register(tag: str, arity: int, forward: Callable[..., PathVector],
             partials: Sequence[Optional[Partial]], reduction: bool = False) -> OpRule:
    if tag in _RULES:
        raise ValueError(f"Operation {tag!r} is already registered")
    if len(partials) != arity:
        raise ValueError(f"Operation {tag!r}: {arity} operands but {len(partials)} partials")
    rule = OpRule(tag, arity, forward, tuple(partials), reduction)
    _RULES[tag] = rule
    return rule


def rule_for(tag: str) -> OpRule:
    try:
        return _RULES[tag]
    except KeyError:
        raise UnknownOperation(tag) from None


def registered_tags():
    return sorted(_RULES)
