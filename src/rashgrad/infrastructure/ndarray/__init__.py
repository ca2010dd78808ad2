"""
NumPy-backed n-dimensional array engine.

Public API
----------
- ``NDArray``: flat row-major float64 array with an explicit shape
- ``broadcast_shapes``: broadcast result of two shapes
"""

from ._ndarray import NDArray
from ._shape import broadcast_shapes

__all__ = [
    NDArray.__name__,
    broadcast_shapes.__name__,
]
