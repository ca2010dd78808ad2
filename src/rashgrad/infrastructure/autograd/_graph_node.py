"""
Computation-graph node for reverse-mode automatic differentiation.

A `GraphNode` pairs a value with its gradient buffer and, for derived nodes,
the `OpRecord` describing how it was produced. Nodes are identified by a
string `node_id` generated at construction; predecessor edges are exposed as
ids, while the op record keeps the operand nodes alive. Ownership therefore
only flows from successor to predecessor and the graph never forms a cycle
in memory.
"""

from __future__ import annotations

import uuid
from typing import Optional

from ...domain._errors import ShapeMismatchError
from ..ndarray import NDArray
from ._op_record import OpRecord


def new_node_id() -> str:
    """Return a fresh, process-unique node identifier."""
    return uuid.uuid4().hex


class GraphNode:
    """
    A value in the computation graph plus its accumulated gradient.

    Parameters
    ----------
    value : NDArray
        The forward value held by this node.
    requires_grad : bool, optional
        Whether gradients should be propagated into (and through) this node.
    op : Optional[OpRecord], optional
        Operation record for derived nodes. Leaves have no record.
    label : Optional[str], optional
        Human-readable tag used in printing and debug logs.

    Notes
    -----
    The gradient buffer always has the same shape as the value and starts at
    zero. It is mutated only through `accumulate_grad`, `zero_grad`,
    `seed_grad` and `set_grad`.
    """

    __slots__ = (
        "_node_id",
        "_value",
        "_grad",
        "_requires_grad",
        "_op",
        "label",
        "__weakref__",
    )

    def __init__(
        self,
        value: NDArray,
        *,
        requires_grad: bool = False,
        op: Optional[OpRecord] = None,
        label: Optional[str] = None,
    ) -> None:
        self._node_id = new_node_id()
        self._value = value
        self._grad = NDArray.zeros(value.shape)
        self._requires_grad = bool(requires_grad)
        self._op = op
        self.label = label if label is not None else f"node_{self._node_id[:8]}"

    def __repr__(self) -> str:
        kind = self._op.kind.name if self._op is not None else "LEAF"
        return (
            f"GraphNode(id={self._node_id[:8]}, label={self.label!r}, "
            f"op={kind}, shape={self.shape}, requires_grad={self._requires_grad})"
        )

    @property
    def node_id(self) -> str:
        return self._node_id

    @property
    def value(self) -> NDArray:
        return self._value

    @property
    def grad(self) -> NDArray:
        return self._grad

    @property
    def shape(self) -> tuple[int, ...]:
        return self._value.shape

    @property
    def requires_grad(self) -> bool:
        return self._requires_grad

    @property
    def op(self) -> Optional[OpRecord]:
        return self._op

    @property
    def is_leaf(self) -> bool:
        return self._op is None

    @property
    def predecessors(self) -> tuple[str, ...]:
        """Ids of the operand nodes, in operand order (empty for leaves)."""
        if self._op is None:
            return ()
        return tuple(n.node_id for n in self._op.inputs)

    def accumulate_grad(self, contribution: NDArray) -> None:
        """
        Add a gradient contribution into this node's gradient buffer.

        Raises
        ------
        ShapeMismatchError
            If `contribution` does not have this node's shape. Backward rules
            reduce broadcast contributions before calling this.
        """
        if contribution.shape != self.shape:
            raise ShapeMismatchError(
                "accumulate_grad", self.shape, contribution.shape
            )
        self._grad.accumulate_(contribution)

    def zero_grad(self) -> None:
        self._grad.fill_(0.0)

    def seed_grad(self) -> None:
        """Reset the gradient to ones (d node / d node)."""
        self._grad.fill_(1.0)

    def set_value(self, value: NDArray) -> None:
        """
        Replace the value in place of the node, keeping its shape.

        Raises
        ------
        ShapeMismatchError
            If `value` has a different shape.
        """
        if value.shape != self.shape:
            raise ShapeMismatchError("update_data", self.shape, value.shape)
        self._value = value.copy()

    def set_grad(self, grad: NDArray) -> None:
        """
        Overwrite the gradient buffer, keeping its shape.

        Raises
        ------
        ShapeMismatchError
            If `grad` has a different shape.
        """
        if grad.shape != self.shape:
            raise ShapeMismatchError("update_grad", self.shape, grad.shape)
        self._grad = grad.copy()
