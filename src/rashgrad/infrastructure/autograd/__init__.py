"""
Reverse-mode automatic differentiation over `GraphNode`s.

This package holds the graph node type, the tagged operation records attached
to derived nodes, the per-operation backward rules (registered on a dispatch
table keyed by `OpKind`), and the traversal that runs them.

Design notes
------------
- Backward rules are registered as a side effect of importing
  `_backward_rules`; importing this package is enough to make every rule
  available to `run_backward`.
- The op record holds the only strong references from a node to its inputs.

Public API
----------
- ``GraphNode``
- ``OpKind`` / ``OpRecord``
- ``run_backward`` / ``topological_order``
- ``TensorRegistry``
"""

from ._op_record import OpKind, OpRecord
from ._graph_node import GraphNode
from ._backward_rules import backward_rules
from ._engine import run_backward, topological_order
from ._registry import TensorRegistry

__all__ = [
    OpKind.__name__,
    OpRecord.__name__,
    GraphNode.__name__,
    "backward_rules",
    run_backward.__name__,
    topological_order.__name__,
    TensorRegistry.__name__,
]
