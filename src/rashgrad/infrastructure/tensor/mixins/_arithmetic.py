"""
Arithmetic mixin implementing elementwise Tensor operators.

Every operator lifts scalar operands to non-grad leaves of shape `(1,)`,
computes the forward value with the NDArray broadcasting engine and records
an `OpRecord` so the backward pass can route gradients to both operands.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, Union

from ...autograd import OpKind

if TYPE_CHECKING:
    from .._tensor import Tensor

Number = Union[int, float]


class TensorMixinArithmetic(ABC):
    """
    Mixin providing `+ - * /`, their reflected forms and unary negation.

    Notes
    -----
    Backward rules (operands broadcast in the forward pass receive gradients
    summed back to their own shape):
    - ``d(a + b) = (1, 1)``
    - ``d(a - b) = (1, -1)``
    - ``d(a * b) = (b, a)``
    - ``d(a / b) = (1 / b, -a / b^2)``
    """

    # ----------------------------
    # Addition
    # ----------------------------
    def __add__(self: "Tensor", other: Union["Tensor", Number]) -> "Tensor":
        other = self._lift(other)
        return self._derive(
            self.value + other.value,
            OpKind.ADD,
            (self, other),
            label=f"({self.label}+{other.label})",
        )

    def __radd__(self: "Tensor", other: Number) -> "Tensor":
        return self._lift(other).__add__(self)

    # ----------------------------
    # Subtraction
    # ----------------------------
    def __sub__(self: "Tensor", other: Union["Tensor", Number]) -> "Tensor":
        other = self._lift(other)
        return self._derive(
            self.value - other.value,
            OpKind.SUB,
            (self, other),
            label=f"({self.label}-{other.label})",
        )

    def __rsub__(self: "Tensor", other: Number) -> "Tensor":
        return self._lift(other).__sub__(self)

    # ----------------------------
    # Multiplication
    # ----------------------------
    def __mul__(self: "Tensor", other: Union["Tensor", Number]) -> "Tensor":
        other = self._lift(other)
        return self._derive(
            self.value * other.value,
            OpKind.MUL,
            (self, other),
            saved=(self.value, other.value),
            label=f"({self.label}*{other.label})",
        )

    def __rmul__(self: "Tensor", other: Number) -> "Tensor":
        return self._lift(other).__mul__(self)

    # ----------------------------
    # True division
    # ----------------------------
    def __truediv__(self: "Tensor", other: Union["Tensor", Number]) -> "Tensor":
        """
        Elementwise true division.

        Division by zero follows IEEE semantics (`inf` / `nan`), it does not
        raise.
        """
        other = self._lift(other)
        return self._derive(
            self.value / other.value,
            OpKind.DIV,
            (self, other),
            saved=(self.value, other.value),
            label=f"({self.label}/{other.label})",
        )

    def __rtruediv__(self: "Tensor", other: Number) -> "Tensor":
        return self._lift(other).__truediv__(self)

    # ----------------------------
    # Negation
    # ----------------------------
    def __neg__(self: "Tensor") -> "Tensor":
        return self._derive(-self.value, OpKind.NEG, (self,), label=f"(-{self.label})")
