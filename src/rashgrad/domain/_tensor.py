"""
Tensor interface definitions.

This module defines the domain-level interface for tensor-like objects using
structural typing. The interface captures the operator surface and gradient
lifecycle that activation functions, optimizers and demo programs rely on,
without depending on the concrete NumPy-backed implementation.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, Union, runtime_checkable

Number = Union[int, float]


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    An `ITensor` is a handle to one node of a computation graph: an
    n-dimensional value plus, when `requires_grad` is set, an accumulated
    gradient of the same shape.

    Notes
    -----
    - Values and gradients are exposed as copies; the only sanctioned
      in-place writes are `update_data` and `update_grad`.
    - Comparisons produce tensors that never require gradients.
    """

    # ---------------------------------------------------------------------
    # Identity / shape
    # ---------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]: ...

    @property
    def label(self) -> str: ...

    @property
    def requires_grad(self) -> bool: ...

    def numel(self) -> int: ...

    # ---------------------------------------------------------------------
    # Gradient lifecycle
    # ---------------------------------------------------------------------
    def backward(self) -> None:
        """
        Backpropagate from this tensor, seeding its gradient with ones.
        """
        ...

    def zero_grad(self) -> None: ...

    def fetch_grad(self) -> Any: ...

    def fetch_data(self) -> Any: ...

    def update_data(self, value: Any) -> None:
        """
        Replace the value in place (shape must not change).
        """
        ...

    def update_grad(self, value: Any) -> None: ...

    def item(self) -> float: ...

    def to_numpy(self) -> Any: ...

    # ---------------------------------------------------------------------
    # Operators
    # ---------------------------------------------------------------------
    def __add__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def __radd__(self, other: Number) -> "ITensor": ...

    def __sub__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def __rsub__(self, other: Number) -> "ITensor": ...

    def __mul__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def __rmul__(self, other: Number) -> "ITensor": ...

    def __truediv__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def __rtruediv__(self, other: Number) -> "ITensor": ...

    def __neg__(self) -> "ITensor": ...

    def __gt__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def __lt__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def exp(self) -> "ITensor": ...

    def abs(self) -> "ITensor": ...

    def pow(self, exponent: Number) -> "ITensor": ...

    def sum(
        self, axes: Optional[Union[int, Sequence[int]]] = None, keepdims: bool = False
    ) -> "ITensor": ...

    def mean(
        self, axes: Optional[Union[int, Sequence[int]]] = None, keepdims: bool = False
    ) -> "ITensor": ...

    def matmul(self, other: "ITensor") -> "ITensor":
        """
        Matrix product with NumPy-style 1-D promotion and batch broadcasting.

        If out = A @ B, then:
        - dL/dA = dL/dout @ B^T
        - dL/dB = A^T @ dL/dout
        """
        ...

    def __matmul__(self, other: "ITensor") -> "ITensor": ...

    def transpose(self, dim1: int = -1, dim2: int = -2) -> "ITensor": ...
