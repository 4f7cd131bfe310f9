# aad/core/graph_utils.py
"""
Graph statistics: size, fan-in/fan-out, operation breakdown and the width
of the reverse frontier (peak number of live adjoints in a sweep).
"""
import logging
from collections import Counter
from typing import Dict

import numpy as np

from .tape import Tape

logger = logging.getLogger(__name__)


def get_graph_stats(tape: Tape) -> Dict:
    """Statistics of every node currently held by the tape."""
    nodes = list(tape.nodes.values())
    if not nodes:
        return {
            'nodes': 0, 'edges': 0, 'leaves': 0, 'constants': 0,
            'max_fan_in': 0, 'avg_fan_in': 0.0,
            'max_fan_out': 0, 'avg_fan_out': 0.0,
            'operations': {},
        }

    fan_ins = [len(node.operands) for node in nodes]
    fan_outs = Counter()
    for node in nodes:
        fan_outs.update(node.operands)
    outs = [fan_outs.get(node.id, 0) for node in nodes]

    return {
        'nodes': len(nodes),
        'edges': sum(fan_ins),
        'leaves': sum(1 for node in nodes if node.is_leaf and not node.is_constant),
        'constants': sum(1 for node in nodes if node.is_constant),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(outs),
        'avg_fan_out': float(np.mean(outs)),
        'operations': dict(Counter(node.op_tag for node in nodes)),
    }


def reverse_frontier_width(tape: Tape, root) -> int:
    """
    Largest number of nodes holding a pending adjoint at any point of a
    reverse sweep from `root`, i.e. the peak accumulator size.
    """
    from .engine import AdjointWalker
    from ..ops.registry import rule_for

    root_id = getattr(root, "id", root)
    order, _ = AdjointWalker()._collect(tape, root_id)
    if not order:
        return 0
    live = {root_id}
    width = 1
    for node_id in order:
        if node_id not in live:
            continue
        live.discard(node_id)
        node = tape.node(node_id)
        if not node.is_leaf and not node.is_constant:
            partials = rule_for(node.op_tag).partials
            for pos, op_id in enumerate(node.operands):
                if partials[pos] is not None and not tape.node(op_id).is_constant:
                    live.add(op_id)
        width = max(width, len(live))
    return width


def describe_graph(tape: Tape, top: int = 10) -> str:
    """Text report of the graph held by `tape`."""
    stats = get_graph_stats(tape)
    if stats['nodes'] == 0:
        return "Empty computation graph"

    lines = [
        f"Total nodes:        {stats['nodes']:,}",
        f"Total edges:        {stats['edges']:,}",
        f"Leaves / constants: {stats['leaves']:,} / {stats['constants']:,}",
        f"Max fan-in:         {stats['max_fan_in']}",
        f"Avg fan-in:         {stats['avg_fan_in']:.2f}",
        f"Max fan-out:        {stats['max_fan_out']}",
        f"Avg fan-out:        {stats['avg_fan_out']:.2f}",
        "Operation breakdown:",
    ]
    for op_tag, count in Counter(stats['operations']).most_common(top):
        pct = 100.0 * count / stats['nodes']
        lines.append(f"  {op_tag:12s}: {count:8,} ({pct:5.1f}%)")
    return "\n".join(lines)


def log_graph_summary(tape: Tape, level: int = logging.INFO) -> Dict:
    """Log describe_graph() and return the underlying statistics."""
    logger.log(level, "computation graph summary\n%s", describe_graph(tape))
    return get_graph_stats(tape)
