"""
Unary mixin: `exp`, `abs` and scalar `pow`.
"""

from __future__ import annotations

import numbers
from abc import ABC
from typing import TYPE_CHECKING, Union

from ...autograd import OpKind
from ...ndarray._printer import format_value

if TYPE_CHECKING:
    from .._tensor import Tensor

Number = Union[int, float]


class TensorMixinUnary(ABC):
    """
    Mixin providing elementwise unary functions.

    Notes
    -----
    Backward rules:
    - ``d exp(x) = exp(x)`` (the saved output is reused)
    - ``d |x| = sign(x)``, with 0 at 0
    - ``d x^n = n * x^(n-1)``
    """

    def exp(self: "Tensor") -> "Tensor":
        out = self.value.exp()
        return self._derive(
            out, OpKind.EXP, (self,), saved=(out,), label=f"exp({self.label})"
        )

    def abs(self: "Tensor") -> "Tensor":
        return self._derive(
            self.value.abs(),
            OpKind.ABS,
            (self,),
            saved=(self.value,),
            label=f"abs({self.label})",
        )

    def __abs__(self: "Tensor") -> "Tensor":
        return self.abs()

    def pow(self: "Tensor", exponent: Number) -> "Tensor":
        """
        Raise every element to a scalar power.

        Parameters
        ----------
        exponent : int or float
            Scalar exponent. Tensor exponents are not supported.

        Raises
        ------
        TypeError
            If `exponent` is not a real number.
        """
        if not isinstance(exponent, numbers.Real) or isinstance(exponent, bool):
            raise TypeError(
                f"pow only supports scalar exponents, got {type(exponent)!r}"
            )
        n = float(exponent)
        return self._derive(
            self.value.power(n),
            OpKind.POW,
            (self,),
            saved=(self.value,),
            meta={"exponent": n},
            label=f"({self.label}^{format_value(n)})",
        )

    def __pow__(self: "Tensor", exponent: Number) -> "Tensor":
        return self.pow(exponent)
