"""
Operator groups mixed into `Tensor`.

Each mixin implements one family of operations on top of three helpers the
`Tensor` core provides: `_lift` (scalar promotion), `_derive` (build a node
with an operation record) and `_constant` (build a non-differentiable leaf).

Public API
----------
- ``TensorMixinArithmetic``
- ``TensorMixinComparison``
- ``TensorMixinUnary``
- ``TensorMixinReduction``
- ``TensorMixinMemory``
"""

from ._arithmetic import TensorMixinArithmetic
from ._comparison import TensorMixinComparison
from ._unary import TensorMixinUnary
from ._reduction import TensorMixinReduction
from ._memory import TensorMixinMemory

__all__ = [
    TensorMixinArithmetic.__name__,
    TensorMixinComparison.__name__,
    TensorMixinUnary.__name__,
    TensorMixinReduction.__name__,
    TensorMixinMemory.__name__,
]
