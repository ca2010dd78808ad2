"""
Reverse-mode traversal over the computation graph.

`run_backward(root)` computes gradients of `root` with respect to every
node reachable from it:

1. `topological_order` walks the graph from `root` with an explicit stack
   and returns the nodes in post-order (every node after all of its
   predecessors). Nodes are keyed by `node_id`, so a node shared by several
   successors appears exactly once.
2. Gradients are reset: `root` is seeded with ones, every other derived node
   reached is cleared to zero. Leaf gradients are left alone so they keep
   accumulating across calls until `zero_grad()`.
3. Nodes are processed in reverse post-order. By the time a node is reached
   all of its successors have already pushed their contributions, so its
   gradient is complete before it propagates to its own inputs.
"""

from __future__ import annotations

import logging
from typing import Dict

from ._backward_rules import backward_rules
from ._graph_node import GraphNode

logger = logging.getLogger(__name__)


def topological_order(root: GraphNode) -> list[GraphNode]:
    """
    Return every node reachable from `root`, predecessors first.

    Parameters
    ----------
    root : GraphNode
        Node to start the walk from.

    Returns
    -------
    list[GraphNode]
        Post-order listing; `root` is always the last element.
    """
    order: list[GraphNode] = []
    visited: set[str] = set()
    stack: list[tuple[GraphNode, bool]] = [(root, False)]

    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        if node.node_id in visited:
            continue
        visited.add(node.node_id)
        stack.append((node, True))
        if node.op is not None:
            for parent in reversed(node.op.inputs):
                if parent.node_id not in visited:
                    stack.append((parent, False))

    return order


def run_backward(root: GraphNode) -> None:
    """
    Backpropagate from `root` into every reachable node that requires grad.

    Parameters
    ----------
    root : GraphNode
        Terminal node. Its gradient is seeded with ones of its own shape.

    Raises
    ------
    NotImplementedError
        If a reachable node was produced by an operation without a rule.
    ShapeMismatchError
        If a rule returns a contribution whose shape differs from its input.
    """
    order = topological_order(root)
    nodes: Dict[str, GraphNode] = {n.node_id: n for n in order}
    logger.debug(
        "backward from %s: %d node(s) reachable", root.label, len(nodes)
    )

    for node in order:
        if node is not root and not node.is_leaf:
            node.zero_grad()
    root.seed_grad()

    for node in reversed(order):
        record = node.op
        if record is None:
            logger.debug("reached leaf %s (id=%s)", node.label, node.node_id[:8])
            continue
        if not node.requires_grad:
            continue

        logger.debug(
            "propagating through %s (%s) into %s",
            node.label,
            record.kind,
            ", ".join(nodes[pid].label for pid in node.predecessors),
        )
        contributions = backward_rules.dispatch(record.kind, record, node.grad)
        if len(contributions) != len(record.inputs):
            raise RuntimeError(
                f"Backward rule for {record.kind} returned "
                f"{len(contributions)} gradient(s) for {len(record.inputs)} input(s)"
            )

        for parent, g in zip(record.inputs, contributions):
            if g is None or not parent.requires_grad:
                continue
            parent.accumulate_grad(g)
