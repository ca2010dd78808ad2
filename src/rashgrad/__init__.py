"""
rashgrad: a minimal reverse-mode automatic differentiation tensor engine.

Public API
----------
- ``Tensor``            : differentiable tensor handle
- ``NDArray``           : the underlying value-type array engine
- ``TensorRegistry``    : caller-owned label -> tensor lookup
- ``SGD``               : stochastic gradient descent optimizer
- ``ReLU`` / ``Sigmoid`` / ``Tanh`` : activations
- ``manual_seed``       : seed the random source used by ``rand``
- error types           : ``ShapeMismatchError``, ``ConstructionMismatchError``,
                          ``InvalidConversionError``
"""

from ._config import manual_seed
from .domain._errors import (
    ConstructionMismatchError,
    InvalidConversionError,
    ShapeMismatchError,
)
from .infrastructure.ndarray import NDArray
from .infrastructure.autograd import TensorRegistry
from .infrastructure.tensor import Tensor
from .infrastructure._activations import ReLU, Sigmoid, Tanh
from .infrastructure._optimizers import SGD

__version__ = "0.1.0"

__all__ = [
    "Tensor",
    "NDArray",
    "TensorRegistry",
    "SGD",
    "ReLU",
    "Sigmoid",
    "Tanh",
    "manual_seed",
    "ShapeMismatchError",
    "ConstructionMismatchError",
    "InvalidConversionError",
]
