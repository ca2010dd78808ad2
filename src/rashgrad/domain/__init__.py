"""
Domain layer: interfaces, the error taxonomy and dispatch utilities.
"""

from ._errors import ConstructionMismatchError, InvalidConversionError, ShapeMismatchError
from ._tensor import ITensor
from ._activation import IActivation

__all__ = [
    ShapeMismatchError.__name__,
    ConstructionMismatchError.__name__,
    InvalidConversionError.__name__,
    ITensor.__name__,
    IActivation.__name__,
]
