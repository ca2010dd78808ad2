from typing import TYPE_CHECKING, Any, Sequence
from dataclasses import dataclass, field
from enum import Enum

from ..ndarray import NDArray

if TYPE_CHECKING:
    from ._graph_node import GraphNode


class OpKind(Enum):
    """Differentiable operations that can produce a graph node."""

    ADD = "add"
    SUB = "sub"
    NEG = "neg"
    MUL = "mul"
    DIV = "div"
    EXP = "exp"
    ABS = "abs"
    POW = "pow"
    MATMUL = "matmul"
    PERMUTE = "permute"
    RESHAPE = "reshape"
    SUM = "sum"
    MEAN = "mean"
    MAX = "max"
    MIN = "min"


@dataclass
class OpRecord:
    """
    Operation record attached to a node produced by an operation.

    An `OpRecord` stores everything the backward pass needs to compute the
    local gradient of one operation, without capturing any closure.

    Attributes
    ----------
    kind : OpKind
        Which operation produced the node. Selects the backward rule.
    inputs : Sequence[GraphNode]
        Operand nodes, in operand order. These are the only strong references
        a node holds to its predecessors.
    saved : list[NDArray]
        Values explicitly saved during the forward pass (operand values,
        the output, masks).
    meta : dict[str, Any]
        Non-array metadata required for backward (axes, permutations,
        shapes, scalar exponents).
    """

    kind: OpKind
    inputs: Sequence["GraphNode"]
    saved: list[NDArray] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    def save_for_backward(self, *arrays: NDArray) -> None:
        """
        Save arrays for use during the backward computation.

        Parameters
        ----------
        *arrays : NDArray
            Any number of arrays appended to `saved`.
        """
        self.saved.extend(arrays)
