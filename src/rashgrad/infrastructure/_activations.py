"""
Elementwise activation functions.

Each activation is composed only from the public Tensor operator surface, so
its gradient is produced by the core backward rules; no activation defines a
backward pass of its own.
"""

from ..domain._activation import IActivation
from .tensor import Tensor


class ReLU(IActivation):
    """
    Rectified linear unit: ``relu(x) = x * (x > 0)``.

    The comparison mask is a non-differentiable constant, so the gradient is
    ``grad_out`` where ``x > 0`` and 0 elsewhere.
    """

    def forward(self, x: Tensor) -> Tensor:
        return (x * (x > 0))._relabel(f"relu({x.label})", "relu")


class Sigmoid(IActivation):
    """
    Logistic sigmoid: ``sigmoid(x) = 1 / (1 + exp(-x))``.
    """

    def forward(self, x: Tensor) -> Tensor:
        out = 1.0 / (1.0 + (-x).exp())
        return out._relabel(f"sigmoid({x.label})", "sigmoid")


class Tanh(IActivation):
    """
    Hyperbolic tangent: ``tanh(x) = (exp(2x) - 1) / (exp(2x) + 1)``.

    Notes
    -----
    For large positive `x`, ``exp(2x)`` overflows to `inf` and the ratio
    becomes `nan`; inputs are expected to stay in a moderate range.
    """

    def forward(self, x: Tensor) -> Tensor:
        e = (x * 2.0).exp()
        out = (e - 1.0) / (e + 1.0)
        return out._relabel(f"tanh({x.label})", "tanh")
