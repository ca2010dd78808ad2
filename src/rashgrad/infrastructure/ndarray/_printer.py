"""
Nested-bracket rendering of flat row-major buffers.

The innermost axis is rendered as a flat comma-separated list; each outer
axis wraps its sub-blocks in brackets and separates them with ",\\n".

    shape (2, 3)  ->  "[[1, 2, 3],\\n[4, 5, 6]]"
"""

from __future__ import annotations

from typing import Sequence

from ... import _config
from ._shape import numel


def format_value(value: float) -> str:
    return format(float(value), _config.PRINT_FORMAT)


def format_nested(shape: Sequence[int], flat: Sequence[float], start: int = 0) -> str:
    """
    Render `flat[start:start + numel(shape)]` as nested brackets.

    Parameters
    ----------
    shape : Sequence[int]
        Logical shape of the block (at least one dimension).
    flat : Sequence[float]
        Flat row-major buffer.
    start : int, optional
        Offset of the block inside `flat`.

    Returns
    -------
    str
        Bracketed text for the block.
    """
    if len(shape) == 1:
        return "[" + ", ".join(format_value(flat[start + i]) for i in range(shape[0])) + "]"

    child = tuple(shape[1:])
    block = numel(child)
    sep = ",\n"
    parts = [format_nested(child, flat, start + i * block) for i in range(shape[0])]
    return "[" + sep.join(parts) + "]"
