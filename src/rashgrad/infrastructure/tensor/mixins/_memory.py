"""
Shape and layout mixin: permutation, transpose, reshape and matmul.

Every transform materializes a new value; none of them returns a view.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, Optional, Sequence, Union

from ...autograd import OpKind
from ...ndarray._shape import normalize_axis, normalize_shape

if TYPE_CHECKING:
    from .._tensor import Tensor

AxesLike = Optional[Union[int, Sequence[int]]]


class TensorMixinMemory(ABC):
    """
    Mixin providing layout-changing operations.

    Notes
    -----
    Backward rules:
    - ``permute`` : apply the inverse permutation to the gradient.
    - ``reshape`` : reshape the gradient back to the input shape.
    - ``matmul``  : ``dA = dOut @ B^T`` and ``dB = A^T @ dOut``, with 1-D
      operands promoted and broadcast batch axes summed away.
    """

    # ----------------------------
    # Permutation
    # ----------------------------
    def permute(self: "Tensor", *perm: Union[int, Sequence[int]]) -> "Tensor":
        """
        Reorder axes: output axis `i` is input axis `perm[i]`.

        Accepts either a single sequence (``t.permute((1, 0))``) or the axes
        as separate arguments (``t.permute(1, 0)``).

        Raises
        ------
        ShapeMismatchError
            If `perm` is not a permutation of ``0 .. ndim-1``.
        """
        if len(perm) == 1 and isinstance(perm[0], (list, tuple, range)):
            perm = tuple(perm[0])
        perm = tuple(int(p) for p in perm)
        return self._derive(
            self.value.permute(perm),
            OpKind.PERMUTE,
            (self,),
            meta={"perm": perm},
            label=f"permute({self.label})",
        )

    def transpose(self: "Tensor", dim1: int = -1, dim2: int = -2) -> "Tensor":
        """Swap two axes (the last two by default); 1-D tensors are unchanged."""
        perm = list(range(self.ndim))
        if self.ndim > 1:
            d1 = normalize_axis(dim1, self.ndim, op="transpose")
            d2 = normalize_axis(dim2, self.ndim, op="transpose")
            perm[d1], perm[d2] = perm[d2], perm[d1]
        return self.permute(perm)._relabel(f"transpose({self.label})", "transpose")

    @property
    def T(self: "Tensor") -> "Tensor":
        """Reverse all axes."""
        out = self.permute(tuple(reversed(range(self.ndim))))
        return out._relabel(f"{self.label}.T", "transpose")

    # ----------------------------
    # Reshaping
    # ----------------------------
    def reshape(self: "Tensor", *shape: Union[int, Sequence[int]]) -> "Tensor":
        """
        Return a tensor with the same elements and a new shape.

        Raises
        ------
        ShapeMismatchError
            If the element counts differ.
        """
        if len(shape) == 1 and isinstance(shape[0], (list, tuple)):
            shape = tuple(shape[0])
        target = normalize_shape(shape)
        return self._derive(
            self.value.reshape(target),
            OpKind.RESHAPE,
            (self,),
            meta={"in_shape": self.shape},
            label=f"reshape({self.label})",
        )

    def squeeze(self: "Tensor", axes: AxesLike = None) -> "Tensor":
        """Drop size-1 axes (all of them when `axes` is None)."""
        return self.reshape(self.value.squeeze(axes).shape)

    def unsqueeze(self: "Tensor", axis: int = 0) -> "Tensor":
        """Insert a size-1 axis at `axis`."""
        return self.reshape(self.value.unsqueeze(axis).shape)

    # ----------------------------
    # Matrix multiplication
    # ----------------------------
    def matmul(self: "Tensor", other: "Tensor") -> "Tensor":
        """
        Matrix product `self @ other`.

        Also usable in static form, ``Tensor.matmul(a, b)``.

        Raises
        ------
        TypeError
            If `other` is not a Tensor.
        ShapeMismatchError
            If inner dimensions differ or batch axes do not broadcast.
        """
        other = self._require_tensor(other, "matmul")
        return self._derive(
            self.value.matmul(other.value),
            OpKind.MATMUL,
            (self, other),
            saved=(self.value, other.value),
            label=f"({self.label}@{other.label})",
        )

    def __matmul__(self: "Tensor", other: "Tensor") -> "Tensor":
        return self.matmul(other)
