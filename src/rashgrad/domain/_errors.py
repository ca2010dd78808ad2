"""
Shape- and conversion-related exceptions for rashgrad.

This module defines the error taxonomy used by the array engine and the
autograd layer. Every error is a precondition violation: it is raised at the
point of the offending call, before any caller-visible state is mutated, and
is never retried or corrected internally.

Numeric problems (division by zero, overflow, NaN) are deliberately *not*
represented here; they propagate as ordinary IEEE floating-point values.
"""

from typing import Sequence


def _fmt_shape(shape: Sequence[int]) -> str:
    return "(" + ", ".join(str(int(d)) for d in shape) + ("," if len(shape) == 1 else "") + ")"


class ShapeMismatchError(ValueError):
    """
    Raised when shapes are incompatible for the requested operation.

    Typical triggers are non-broadcastable operands, disagreeing matmul inner
    dimensions, a permutation whose length does not match the rank, an axis
    out of range, or an in-place update that would change a tensor's shape.

    Attributes
    ----------
    op : str
        The name of the operation that was attempted (e.g., "add", "matmul").
    shapes : tuple[tuple[int, ...], ...]
        The shapes involved in the failing call.
    """

    def __init__(self, op: str, *shapes: Sequence[int], detail: str = "") -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            The operation name.
        *shapes : Sequence[int]
            Shapes of the operands involved.
        detail : str, optional
            Extra human-readable context appended to the message.
        """
        self.op = op
        self.shapes = tuple(tuple(int(d) for d in s) for s in shapes)
        rendered = " vs ".join(_fmt_shape(s) for s in self.shapes)
        msg = f"Shape mismatch in {op}"
        if rendered:
            msg += f": {rendered}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class ConstructionMismatchError(ValueError):
    """
    Raised when explicit flat data disagrees with the declared shape.

    Also raised for shapes that cannot describe an array at all (no
    dimensions, or a negative dimension).

    Attributes
    ----------
    shape : tuple[int, ...]
        The declared shape.
    size : int
        The number of data elements that were supplied.
    """

    def __init__(self, shape: Sequence[int], size: int, detail: str = "") -> None:
        self.shape = tuple(shape)
        self.size = int(size)
        msg = (
            f"Data size {self.size} does not match shape {self.shape}"
            if not detail
            else f"Invalid shape {self.shape}: {detail}"
        )
        super().__init__(msg)


class InvalidConversionError(TypeError):
    """
    Raised when a multi-element array is read as a Python scalar.

    Attributes
    ----------
    shape : tuple[int, ...]
        Shape of the array that could not be converted.
    """

    def __init__(self, shape: Sequence[int]) -> None:
        self.shape = tuple(shape)
        super().__init__(
            f"Only single-element arrays can be converted to a scalar; got shape {self.shape}"
        )
