"""
Shape arithmetic for the array engine.

All arrays in rashgrad are flat, row-major buffers described by a shape.
This module holds the pure functions that turn shapes into strides, decide
broadcast compatibility, and map multi-indices of an output array onto
physical offsets of an operand:

- `compute_strides`    : row-major strides (in elements) for a shape
- `broadcast_shapes`   : the broadcast result of two shapes (or an error)
- `broadcast_strides`  : operand strides aligned to a broadcast shape, with
                         stride 0 on every expanded axis
- `strided_offsets`    : the physical offset of every output element, in
                         row-major output order
- `normalize_axes` / `reduced_shape` : reduction bookkeeping
- `sum_to_shape_axes`  : axes to collapse when undoing a broadcast

Offsets are produced by an explicit, iterative walk over the output axes
(one axis at a time) rather than by recursion, so arbitrarily high ranks are
handled without recursion-depth concerns.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from ...domain._errors import ConstructionMismatchError, ShapeMismatchError

Shape = tuple[int, ...]
AxesLike = Union[None, int, Sequence[int]]


def normalize_shape(shape: Union[int, Iterable[int]]) -> Shape:
    """
    Convert a user-supplied shape into a validated tuple of ints.

    Parameters
    ----------
    shape : int or Iterable[int]
        A single dimension size or a sequence of sizes.

    Returns
    -------
    tuple[int, ...]
        Normalized shape.

    Raises
    ------
    ConstructionMismatchError
        If the shape is empty or contains a negative size.
    TypeError
        If a dimension is not an integer.
    """
    if isinstance(shape, (int, np.integer)):
        dims = (int(shape),)
    else:
        dims = tuple(shape)
        for d in dims:
            if not isinstance(d, (int, np.integer)) or isinstance(d, bool):
                raise TypeError(f"Shape dimensions must be integers, got {d!r}")
        dims = tuple(int(d) for d in dims)

    if len(dims) == 0:
        raise ConstructionMismatchError(dims, 0, "at least one dimension is required")
    if any(d < 0 for d in dims):
        raise ConstructionMismatchError(dims, 0, "dimensions must be non-negative")
    return dims


def numel(shape: Sequence[int]) -> int:
    """Return the number of elements described by `shape`."""
    return math.prod(shape)


def compute_strides(shape: Sequence[int]) -> Shape:
    """
    Compute row-major strides (in elements) for `shape`.

    The last axis has stride 1, and each earlier axis strides over the
    product of all later sizes.
    """
    strides = [0] * len(shape)
    running = 1
    for i in range(len(shape) - 1, -1, -1):
        strides[i] = running
        running *= shape[i]
    return tuple(strides)


def _broadcast_dims(shape_a: Sequence[int], shape_b: Sequence[int], op: str) -> Shape:
    """
    Broadcast two (possibly empty) shapes aligned from the trailing axis.

    Empty shapes are allowed here because matmul batch prefixes may be empty.
    """
    n = max(len(shape_a), len(shape_b))
    pa = (1,) * (n - len(shape_a)) + tuple(shape_a)
    pb = (1,) * (n - len(shape_b)) + tuple(shape_b)

    out = []
    for da, db in zip(pa, pb):
        if da == db:
            out.append(da)
        elif da == 1:
            out.append(db)
        elif db == 1:
            out.append(da)
        else:
            raise ShapeMismatchError(op, shape_a, shape_b, detail="not broadcastable")
    return tuple(out)


def broadcast_shapes(
    shape_a: Sequence[int], shape_b: Sequence[int], *, op: str = "broadcast"
) -> Shape:
    """
    Compute the broadcast shape of two shapes.

    Shapes are aligned from the trailing dimension. For each aligned pair the
    sizes must be equal, or one must be 1; a missing leading dimension counts
    as size 1. The result takes the larger size per axis.

    Parameters
    ----------
    shape_a, shape_b : Sequence[int]
        Operand shapes (each with at least one dimension).
    op : str, optional
        Operation name used in the error message.

    Returns
    -------
    tuple[int, ...]
        The broadcast shape.

    Raises
    ------
    ShapeMismatchError
        If either shape is empty or the shapes are not broadcastable.
    """
    if len(shape_a) == 0 or len(shape_b) == 0:
        raise ShapeMismatchError(
            op, shape_a, shape_b, detail="arrays need at least one dimension"
        )
    return _broadcast_dims(shape_a, shape_b, op)


def broadcast_strides(
    shape: Sequence[int],
    out_shape: Sequence[int],
    strides: Optional[Sequence[int]] = None,
) -> Shape:
    """
    Align an operand's strides to a broadcast output shape.

    Leading axes the operand does not have, and axes where the operand has
    size 1, get stride 0 so every output index along them maps to the same
    physical element.

    Parameters
    ----------
    shape : Sequence[int]
        Operand shape (may be shorter than `out_shape`).
    out_shape : Sequence[int]
        Broadcast target shape.
    strides : Optional[Sequence[int]]
        Operand strides. Defaults to row-major strides for `shape`.

    Returns
    -------
    tuple[int, ...]
        Strides of length `len(out_shape)`.
    """
    if strides is None:
        strides = compute_strides(shape)
    pad = len(out_shape) - len(shape)
    aligned = [0] * pad
    for size, stride in zip(shape, strides):
        aligned.append(0 if size == 1 else int(stride))
    return tuple(aligned)


def strided_offsets(
    shape: Sequence[int], strides: Sequence[int], base: int = 0
) -> np.ndarray:
    """
    Physical offsets for every multi-index of `shape`, in row-major order.

    Walks the axes from first to last, expanding the running set of partial
    offsets by `index * stride` for each index along the current axis.

    Parameters
    ----------
    shape : Sequence[int]
        Logical shape being walked (may be empty, yielding one offset).
    strides : Sequence[int]
        Stride (in elements) contributed by each axis of `shape`.
    base : int, optional
        Offset added to every result.

    Returns
    -------
    np.ndarray
        1-D int64 array of length `numel(shape)`.
    """
    offsets = np.array([base], dtype=np.int64)
    for size, stride in zip(shape, strides):
        steps = np.arange(size, dtype=np.int64) * int(stride)
        offsets = (offsets[:, None] + steps[None, :]).reshape(-1)
    return offsets


def normalize_axis(axis: int, ndim: int, *, op: str = "axis") -> int:
    """
    Normalize a possibly negative axis index.

    Raises
    ------
    TypeError
        If `axis` is not an integer.
    ShapeMismatchError
        If `axis` is out of range for `ndim`.
    """
    if not isinstance(axis, (int, np.integer)) or isinstance(axis, bool):
        raise TypeError(f"axis must be int, got {type(axis)!r}")
    a = int(axis)
    if a < 0:
        a += ndim
    if a < 0 or a >= ndim:
        raise ShapeMismatchError(
            op, detail=f"axis {axis} out of bounds for ndim {ndim}"
        )
    return a


def normalize_axes(axes: AxesLike, ndim: int, *, op: str = "reduce") -> Shape:
    """
    Normalize a reduction axes argument into sorted, unique, positive axes.

    Parameters
    ----------
    axes : None, int or Sequence[int]
        None selects every axis.
    ndim : int
        Rank of the array being reduced.

    Raises
    ------
    ShapeMismatchError
        If an axis is out of range or repeated.
    """
    if axes is None:
        return tuple(range(ndim))
    if isinstance(axes, (int, np.integer)):
        axes = (axes,)
    out = [normalize_axis(a, ndim, op=op) for a in axes]
    if len(set(out)) != len(out):
        raise ShapeMismatchError(op, detail=f"repeated axis in {tuple(axes)}")
    return tuple(sorted(out))


def keepdims_shape(shape: Sequence[int], axes: Sequence[int]) -> Shape:
    """Return `shape` with every axis in `axes` set to size 1."""
    return tuple(1 if i in axes else d for i, d in enumerate(shape))


def reduced_shape(shape: Sequence[int], axes: Sequence[int], keepdims: bool) -> Shape:
    """
    Output shape of a reduction over `axes`.

    With `keepdims` the reduced axes stay as size 1; otherwise they are
    removed. A result with no dimensions collapses to `(1,)` because the
    engine has no rank-0 arrays.
    """
    if keepdims:
        return keepdims_shape(shape, axes)
    out = tuple(d for i, d in enumerate(shape) if i not in axes)
    return out if out else (1,)


def sum_to_shape_axes(
    src_shape: Sequence[int], target_shape: Sequence[int]
) -> tuple[Shape, int]:
    """
    Compute the axes to sum when reducing `src_shape` back to `target_shape`.

    This is the inverse of a forward broadcast: `target_shape` is left-padded
    with ones to the rank of `src_shape`, then every axis where the padded
    target is 1 and the source is larger must be summed. The leading `pad`
    axes are summed away entirely.

    Returns
    -------
    reduce_axes : tuple[int, ...]
        Axes (in source coordinates) to sum with keepdims.
    pad : int
        Number of leading axes that the target does not have.

    Raises
    ------
    ShapeMismatchError
        If `target_shape` could not have been broadcast to `src_shape`.
    """
    src = tuple(src_shape)
    tgt = tuple(target_shape)
    if len(tgt) > len(src):
        raise ShapeMismatchError(
            "sum_to_shape", src, tgt, detail="target has higher rank than source"
        )

    pad = len(src) - len(tgt)
    padded = (1,) * pad + tgt
    for sd, td in zip(src, padded):
        if td not in (1, sd):
            raise ShapeMismatchError(
                "sum_to_shape", src, tgt, detail="target is not broadcastable to source"
            )

    reduce_axes = tuple(
        i for i, (sd, td) in enumerate(zip(src, padded)) if td == 1 and sd != 1
    )
    return reduce_axes, pad
