# aad/core/engine.py
"""
Adjoint walker: reverse-mode accumulation over a recorded graph.

    1) Seed the root with ones (scalar 1 if the root is deterministic).
    2) Collect the nodes reachable from the root through differentiable edges.
       Construction order is already a topological order, so no sort beyond
       ordering the reachable ids is needed.
    3) Walk them in reverse construction order; for every operand i
           adj[operand_i] += adj[node] * d node / d operand_i
       A node's slot is released as soon as the node is processed, so the
       number of live adjoints is bounded by the width of the reverse frontier.
       The adjoint of a reduction node (average) is summed over the paths
       before it is pushed to the operand, since all paths share its value.
    4) Read off the targets. Targets outside the ancestry get zeros.

All adjoints are path-wise PathVectors; nothing is averaged unless the
caller asks for it.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .config import AdjointConfig
from .errors import CyclicGraphDetected, UnreachableTarget
from .path_vector import PathVector
from .tape import Tape
from .var import DiffVar
from .. import ops as _ops  # noqa: F401  (registers the operation rules)
from ..ops.registry import rule_for

logger = logging.getLogger(__name__)

Window = Optional[Tuple[int, int]]


@dataclass
class SweepStats:
    reachable: int = 0
    processed: int = 0
    peak_live: int = 0
    live_after: int = 0
    chunks: int = 1


def _id_of(x, tape: Tape) -> int:
    if isinstance(x, DiffVar):
        if x.tape is not tape:
            raise ValueError("Target is recorded on a different tape than the root")
        return x.id
    return int(x)


def _window(value: PathVector, window: Window) -> PathVector:
    return value if window is None else value.slice(*window)


def _seed(value: PathVector) -> PathVector:
    if value.is_deterministic:
        return PathVector.deterministic(1.0, value.time)
    return PathVector(value.time, np.ones(value.size()), copy=False)


def _zeros_like(value: PathVector) -> PathVector:
    if value.is_deterministic:
        return PathVector.deterministic(0.0, value.time)
    return PathVector(value.time, np.zeros(value.size()), copy=False)


class AdjointWalker:
    """Runs reverse sweeps; keeps the statistics of the last one in `last_stats`."""

    def __init__(self, config: Optional[AdjointConfig] = None):
        self.config = config or AdjointConfig()
        self.last_stats: Optional[SweepStats] = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def differentiate(self, root: DiffVar, targets: Iterable) -> Dict[int, PathVector]:
        tape = root.tape
        target_ids = list(dict.fromkeys(_id_of(t, tape) for t in targets))
        logger.debug("reverse sweep from node %d, %d target(s)", root.id, len(target_ids))
        order, n_paths = self._collect(tape, root.id)
        target_set = set(target_ids)

        windows = self._partition(n_paths)
        if len(windows) == 1:
            found, stats = self._sweep(tape, root.id, order, target_set, None, None)
        else:
            found, stats = self._sweep_parallel(tape, root.id, order, target_set, windows, n_paths)
        stats.reachable = len(order)
        self.last_stats = stats
        logger.debug("reverse sweep: %d reachable nodes, %d chunk(s), peak %d live adjoints",
                     stats.reachable, stats.chunks, stats.peak_live)

        result: Dict[int, PathVector] = {}
        for target_id in target_ids:
            if target_id in found:
                result[target_id] = found[target_id]
            elif self.config.strict_targets:
                raise UnreachableTarget(target_id)
            elif target_id in tape:
                result[target_id] = _zeros_like(tape.get_value(target_id))
            else:
                result[target_id] = PathVector.deterministic(0.0)
        return result

    # ------------------------------------------------------------------ #
    # Graph collection
    # ------------------------------------------------------------------ #
    def _collect(self, tape: Tape, root_id: int) -> Tuple[List[int], Optional[int]]:
        """
        Ids reachable from the root through differentiable edges, in reverse
        construction order, and the common path count of their values
        (None if stochastic values of different lengths are mixed, which is
        legal once they have been averaged). The path count is also None when
        a reduction sits below the root: its adjoint is a sum over all paths,
        so the sweep cannot be split into path slices.
        """
        root = tape.node(root_id)
        if root.is_constant:
            return [], None
        seen = {root_id}
        stack = [root_id]
        sizes = set()
        interior_reduction = False
        verify = self.config.verify_order
        while stack:
            node_id = stack.pop()
            node = tape.node(node_id)
            if not node.value.is_deterministic:
                sizes.add(node.value.size())
            if node.is_leaf:
                continue
            rule = rule_for(node.op_tag)
            if rule.reduction and node_id != root_id:
                interior_reduction = True
            partials = rule.partials
            for pos, op_id in enumerate(node.operands):
                if verify and op_id >= node_id:
                    raise CyclicGraphDetected(node_id, op_id)
                if op_id in seen or partials[pos] is None:
                    continue
                if tape.node(op_id).is_constant:
                    continue
                seen.add(op_id)
                stack.append(op_id)
        n_paths = sizes.pop() if len(sizes) == 1 else (1 if not sizes else None)
        if interior_reduction:
            n_paths = None
        return sorted(seen, reverse=True), n_paths

    def _partition(self, n_paths: Optional[int]) -> List[Window]:
        cfg = self.config
        if cfg.workers <= 1 or n_paths is None:
            return [None]
        n_chunks = min(cfg.workers, n_paths // cfg.min_paths_per_worker)
        if n_chunks <= 1:
            return [None]
        bounds = np.linspace(0, n_paths, n_chunks + 1).astype(int)
        return [(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:])]

    # ------------------------------------------------------------------ #
    # Reverse sweep
    # ------------------------------------------------------------------ #
    def _sweep(self, tape: Tape, root_id: int, order: Sequence[int], targets: set,
               window: Window, n_paths: Optional[int]) -> Tuple[Dict[int, PathVector], SweepStats]:
        stats = SweepStats()
        found: Dict[int, PathVector] = {}
        if not order:
            return found, stats

        adjoints: Dict[int, PathVector] = {root_id: _seed(_window(tape.get_value(root_id), window))}
        stats.peak_live = 1
        for node_id in order:
            adj = adjoints.pop(node_id, None)
            if adj is None:
                continue
            stats.processed += 1
            node = tape.node(node_id)
            rule = None if node.is_leaf else rule_for(node.op_tag)
            if rule is not None and rule.reduction and not adj.is_deterministic:
                # one value shared by every path: its adjoint is the sum over paths
                adj = PathVector.deterministic(float(np.sum(adj.values)), adj.time)
            if node_id in targets:
                found[node_id] = adj
            if node.is_leaf or node.is_constant:
                continue

            args = None
            for pos, op_id in enumerate(node.operands):
                partial = rule.partials[pos]
                if partial is None or tape.node(op_id).is_constant:
                    continue
                if args is None:
                    args = [_window(tape.get_value(i), window) for i in node.operands]
                    out = _window(node.value, window)
                local = partial(args, out, n_paths)
                if local is None:
                    continue
                contribution = adj * local
                previous = adjoints.get(op_id)
                adjoints[op_id] = contribution if previous is None else previous + contribution
            stats.peak_live = max(stats.peak_live, len(adjoints))

        stats.live_after = len(adjoints)
        return found, stats

    def _sweep_parallel(self, tape, root_id, order, targets, windows, n_paths):
        # Every rule is path-wise, so slices never share an accumulator slot.
        with ThreadPoolExecutor(max_workers=len(windows)) as pool:
            parts = list(pool.map(
                lambda w: self._sweep(tape, root_id, order, targets, w, n_paths), windows))

        found: Dict[int, PathVector] = {}
        for target_id in targets:
            pieces = [(w, part[0][target_id]) for w, part in zip(windows, parts) if target_id in part[0]]
            if not pieces:
                continue
            if all(p.is_deterministic for _, p in pieces):
                found[target_id] = pieces[0][1]
            else:
                values = np.concatenate([p.expand(w[1] - w[0]) for w, p in pieces])
                found[target_id] = PathVector(pieces[0][1].time, values, copy=False)

        stats = SweepStats(
            processed=max(p[1].processed for p in parts),
            peak_live=max(p[1].peak_live for p in parts),
            live_after=sum(p[1].live_after for p in parts),
            chunks=len(windows),
        )
        return found, stats


def differentiate(root: DiffVar, targets: Iterable, config: Optional[AdjointConfig] = None) -> Dict[int, PathVector]:
    """
    Path-wise derivatives of `root` w.r.t. each target (DiffVars or node ids),
    keyed by target node id.
    """
    return AdjointWalker(config).differentiate(root, targets)


def get_gradient(root: DiffVar, leaf, config: Optional[AdjointConfig] = None) -> PathVector:
    """Path-wise derivative of `root` w.r.t. a single node."""
    leaf_id = _id_of(leaf, root.tape)
    return differentiate(root, [leaf_id], config)[leaf_id]
