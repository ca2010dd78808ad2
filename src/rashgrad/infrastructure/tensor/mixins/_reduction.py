"""
Reduction mixin: `sum`, `mean`, `max` and `min` over any set of axes.

All reductions share the NDArray axis conventions: `axes=None` reduces every
axis, negative axes count from the end, and a result with no remaining axes
has shape `(1,)`.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, Optional, Sequence, Union

from ...autograd import OpKind
from ...ndarray._shape import keepdims_shape, normalize_axes

if TYPE_CHECKING:
    from .._tensor import Tensor

AxesLike = Optional[Union[int, Sequence[int]]]


class TensorMixinReduction(ABC):
    """
    Mixin providing axis-aware reductions.

    Notes
    -----
    Backward rules:
    - ``sum``  : the gradient is broadcast back over the reduced axes.
    - ``mean`` : as `sum`, divided by the number of reduced elements.
    - ``max`` / ``min`` : the gradient is routed to every position equal to
      the extreme value, i.e. ``dx = grad_out * 1[x == max(x)]``.
    """

    def _reduce(self: "Tensor", kind: OpKind, axes: AxesLike, keepdims: bool) -> "Tensor":
        name = kind.value
        norm = normalize_axes(axes, self.ndim, op=name)
        value = getattr(self.value, name)(norm, keepdims)
        saved = ()
        if kind in (OpKind.MAX, OpKind.MIN):
            extreme = value if keepdims else value.reshape(keepdims_shape(self.shape, norm))
            saved = (self.value, extreme)
        return self._derive(
            value,
            kind,
            (self,),
            saved=saved,
            meta={"axes": norm, "keepdims": bool(keepdims), "in_shape": self.shape},
            label=f"{name}({self.label})",
        )

    def sum(self: "Tensor", axes: AxesLike = None, keepdims: bool = False) -> "Tensor":
        """
        Sum over `axes` (every axis when None).

        Parameters
        ----------
        axes : None, int or Sequence[int], optional
            Axes to reduce.
        keepdims : bool, optional
            Keep reduced axes as size 1.

        Raises
        ------
        ShapeMismatchError
            If an axis is out of range or repeated.
        """
        return self._reduce(OpKind.SUM, axes, keepdims)

    def mean(self: "Tensor", axes: AxesLike = None, keepdims: bool = False) -> "Tensor":
        return self._reduce(OpKind.MEAN, axes, keepdims)

    def max(self: "Tensor", axes: AxesLike = None, keepdims: bool = False) -> "Tensor":
        return self._reduce(OpKind.MAX, axes, keepdims)

    def min(self: "Tensor", axes: AxesLike = None, keepdims: bool = False) -> "Tensor":
        return self._reduce(OpKind.MIN, axes, keepdims)
