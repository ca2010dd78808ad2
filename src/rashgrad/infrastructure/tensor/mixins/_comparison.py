"""
Comparison mixin.

Comparisons return 1.0 / 0.0 tensors and never participate in autograd: the
result is a fresh leaf with `requires_grad=False`, whatever the operands'
flags. They are typically used to build masks, e.g. ``x * (x > 0)``.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .._tensor import Tensor

Number = Union[int, float]


class TensorMixinComparison(ABC):
    """Mixin providing `> >= < <=` as non-differentiable operators."""

    def __gt__(self: "Tensor", other: Union["Tensor", Number]) -> "Tensor":
        other = self._lift(other)
        return self._constant(self.value > other.value, f"({self.label}>{other.label})")

    def __ge__(self: "Tensor", other: Union["Tensor", Number]) -> "Tensor":
        other = self._lift(other)
        return self._constant(self.value >= other.value, f"({self.label}>={other.label})")

    def __lt__(self: "Tensor", other: Union["Tensor", Number]) -> "Tensor":
        other = self._lift(other)
        return self._constant(self.value < other.value, f"({self.label}<{other.label})")

    def __le__(self: "Tensor", other: Union["Tensor", Number]) -> "Tensor":
        other = self._lift(other)
        return self._constant(self.value <= other.value, f"({self.label}<={other.label})")
