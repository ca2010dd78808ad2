"""
Tensor handle: the public, differentiable face of the engine.

A `Tensor` wraps exactly one `GraphNode`. Several handles may alias the same
node (for example a parameter reused in several expressions); the node lives
as long as any handle, or any downstream node's operation record, still
reaches it.

Operators are grouped into mixins (arithmetic, comparison, unary, reduction,
memory) that share three helpers defined here:

- `_lift(x)`     : promote a Python scalar to a non-grad leaf of shape `(1,)`
- `_derive(...)` : wrap a forward value in a new node carrying an `OpRecord`
- `_constant(...)` : wrap a value in a fresh non-differentiable leaf

A derived tensor requires gradients if any of its operands does.
"""

from __future__ import annotations

import numbers
from typing import Any, Iterable, Optional, Sequence, Union

import numpy as np

from ... import _config
from ...domain._tensor import ITensor
from ..autograd import GraphNode, OpKind, OpRecord, run_backward
from ..ndarray import NDArray
from ..ndarray._printer import format_nested, format_value
from .mixins import (
    TensorMixinArithmetic,
    TensorMixinComparison,
    TensorMixinMemory,
    TensorMixinReduction,
    TensorMixinUnary,
)

Number = Union[int, float]


def _is_scalar(x: Any) -> bool:
    return isinstance(x, numbers.Real) and not isinstance(x, bool)


def _bounded_label(label: Optional[str], prefix: str, node_id: str) -> str:
    """Return `label`, or `<prefix>_<8 hex>` when it is missing or too long."""
    if label is not None and len(label) <= _config.MAX_LABEL_LENGTH:
        return label
    return f"{prefix}_{node_id[:8]}"


class Tensor(
    TensorMixinArithmetic,
    TensorMixinComparison,
    TensorMixinUnary,
    TensorMixinReduction,
    TensorMixinMemory,
    ITensor,
):
    """
    Differentiable n-dimensional tensor.

    Parameters
    ----------
    data : NDArray, np.ndarray, Sequence[float] or scalar
        Initial value. NumPy arrays keep their shape; flat sequences become
        1-D unless `shape` is given; scalars become shape `(1,)`.
    shape : Optional[Sequence[int]], optional
        Shape for flat `data`.
    requires_grad : bool, optional
        Whether gradients should be accumulated for this tensor.
    label : Optional[str], optional
        Human-readable tag. Defaults to ``tensor_<8 hex digits>``.

    Raises
    ------
    ConstructionMismatchError
        If the data length does not match `shape`.

    Examples
    --------
    >>> a = Tensor([5.0], requires_grad=True, label="a")
    >>> b = Tensor([1.0], requires_grad=True, label="b")
    >>> f = a * a + b * b
    >>> f.backward()
    >>> a.fetch_grad().item(), b.fetch_grad().item()
    (10.0, 2.0)
    """

    def __init__(
        self,
        data: Any,
        shape: Optional[Sequence[int]] = None,
        *,
        requires_grad: bool = False,
        label: Optional[str] = None,
    ) -> None:
        value = self._as_value(data, shape)
        node = GraphNode(value, requires_grad=requires_grad)
        node.label = label if label is not None else f"tensor_{node.node_id[:8]}"
        self._node = node

    # ----------------------------
    # Construction helpers
    # ----------------------------
    @staticmethod
    def _as_value(data: Any, shape: Optional[Sequence[int]] = None) -> NDArray:
        if isinstance(data, Tensor):
            data = data.value
        if isinstance(data, NDArray):
            return data.copy() if shape is None else data.reshape(shape)
        if isinstance(data, np.ndarray) and shape is None:
            return NDArray.from_numpy(data)
        return NDArray(data, shape)

    @classmethod
    def _from_node(cls, node: GraphNode) -> "Tensor":
        obj = cls.__new__(cls)
        obj._node = node
        return obj

    @classmethod
    def rand(
        cls,
        shape: Union[int, Iterable[int]],
        *,
        requires_grad: bool = False,
        label: Optional[str] = None,
    ) -> "Tensor":
        """
        Leaf tensor of independent uniform [0, 1) samples.

        Seed with `rashgrad.manual_seed` for reproducibility.
        """
        return cls(NDArray.rand(shape), requires_grad=requires_grad, label=label)

    @classmethod
    def zeros(
        cls,
        shape: Union[int, Iterable[int]],
        *,
        requires_grad: bool = False,
        label: Optional[str] = None,
    ) -> "Tensor":
        return cls(NDArray.zeros(shape), requires_grad=requires_grad, label=label)

    @classmethod
    def ones(
        cls,
        shape: Union[int, Iterable[int]],
        *,
        requires_grad: bool = False,
        label: Optional[str] = None,
    ) -> "Tensor":
        return cls(NDArray.ones(shape), requires_grad=requires_grad, label=label)

    # ----------------------------
    # Graph-building helpers (used by mixins)
    # ----------------------------
    def _lift(self, other: Union["Tensor", Number]) -> "Tensor":
        """
        Return `other` as a Tensor.

        Scalars become non-grad leaves of shape `(1,)` labelled with their
        value, and broadcast against the other operand.

        Raises
        ------
        TypeError
            If `other` is neither a Tensor nor a real number.
        """
        if isinstance(other, Tensor):
            return other
        if _is_scalar(other):
            return Tensor(NDArray.from_scalar(other), label=format_value(other))
        raise TypeError(f"Unsupported operand type for Tensor: {type(other)!r}")

    @staticmethod
    def _require_tensor(other: Any, op: str) -> "Tensor":
        if not isinstance(other, Tensor):
            raise TypeError(f"{op} expects Tensor, got {type(other)!r}")
        return other

    @staticmethod
    def _derive(
        value: NDArray,
        kind: OpKind,
        operands: Sequence["Tensor"],
        *,
        saved: Sequence[NDArray] = (),
        meta: Optional[dict] = None,
        label: Optional[str] = None,
    ) -> "Tensor":
        record = OpRecord(
            kind=kind,
            inputs=tuple(t._node for t in operands),
            saved=list(saved),
            meta=dict(meta or {}),
        )
        node = GraphNode(
            value,
            requires_grad=any(t.requires_grad for t in operands),
            op=record,
        )
        node.label = _bounded_label(label, kind.value, node.node_id)
        return Tensor._from_node(node)

    @staticmethod
    def _constant(value: NDArray, label: Optional[str] = None) -> "Tensor":
        node = GraphNode(value, requires_grad=False)
        node.label = _bounded_label(label, "const", node.node_id)
        return Tensor._from_node(node)

    def _relabel(self, label: str, prefix: str) -> "Tensor":
        """Set a label composed from operand labels, bounded in length."""
        self._node.label = _bounded_label(label, prefix, self._node.node_id)
        return self

    # ----------------------------
    # Properties
    # ----------------------------
    @property
    def value(self) -> NDArray:
        """The node's current value (not a copy; never mutate it)."""
        return self._node.value

    @property
    def data(self) -> NDArray:
        """A copy of the current value."""
        return self._node.value.copy()

    @property
    def grad(self) -> NDArray:
        """A copy of the accumulated gradient."""
        return self._node.grad.copy()

    @property
    def shape(self) -> tuple[int, ...]:
        return self._node.shape

    @property
    def ndim(self) -> int:
        return len(self._node.shape)

    @property
    def requires_grad(self) -> bool:
        return self._node.requires_grad

    @property
    def label(self) -> str:
        return self._node.label

    @label.setter
    def label(self, value: str) -> None:
        self._node.label = str(value)

    @property
    def node_id(self) -> str:
        return self._node.node_id

    @property
    def node(self) -> GraphNode:
        return self._node

    def numel(self) -> int:
        return self._node.value.numel()

    # ----------------------------
    # Gradient lifecycle
    # ----------------------------
    def backward(self) -> None:
        """
        Backpropagate from this tensor.

        The gradient of this tensor is seeded with ones of its own shape, the
        gradients of intermediate nodes are recomputed from scratch, and the
        contributions are added into every reachable leaf that requires
        gradients. Leaf gradients keep accumulating across calls until
        `zero_grad()`.
        """
        run_backward(self._node)

    def zero_grad(self) -> None:
        """Reset the gradient buffer to zeros (shape unchanged)."""
        self._node.zero_grad()

    def fetch_grad(self) -> NDArray:
        return self._node.grad.copy()

    def fetch_data(self) -> NDArray:
        return self._node.value.copy()

    def update_data(self, value: Any) -> None:
        """
        Replace this tensor's value, as an optimizer step does.

        Raises
        ------
        ShapeMismatchError
            If the new value has a different shape.
        """
        self._node.set_value(self._coerce_like(value))

    def update_grad(self, value: Any) -> None:
        """
        Overwrite this tensor's gradient.

        Raises
        ------
        ShapeMismatchError
            If the new gradient has a different shape.
        """
        self._node.set_grad(self._coerce_like(value))

    def _coerce_like(self, value: Any) -> NDArray:
        # scalars fill the whole shape
        if _is_scalar(value):
            return NDArray.full(self.shape, value)
        return self._as_value(value)

    def item(self) -> float:
        """
        Return the single element as a float.

        Raises
        ------
        InvalidConversionError
            If the tensor does not hold exactly one element.
        """
        return self._node.value.item()

    def __float__(self) -> float:
        return self.item()

    def to_numpy(self) -> np.ndarray:
        return self._node.value.to_numpy()

    # ----------------------------
    # Printing
    # ----------------------------
    def __str__(self) -> str:
        value = self._node.value
        parts = [format_nested(value.shape, value.to_list())]
        parts.append(f"requires_grad={self.requires_grad}")
        if self.requires_grad:
            grad = self._node.grad
            parts.append(f"grad={format_nested(grad.shape, grad.to_list())}")
        parts.append(f"label={self.label}")
        return "Tensor(" + ", ".join(parts) + ")"

    def __repr__(self) -> str:
        return (
            f"Tensor(shape={self.shape}, requires_grad={self.requires_grad}, "
            f"label={self.label!r})"
        )
