"""
NDArray: the value-type n-dimensional array engine (NumPy buffer backend).

An `NDArray` owns a flat, contiguous float64 buffer plus a shape. Strides are
implicit (row-major) and derived from the shape whenever they are needed.
Every producing operation returns a *new* array; no operation mutates an
operand's shape or data. The only in-place methods are `accumulate_` and
`fill_`, reserved for gradient buffers owned by graph nodes.

Elementwise operations
----------------------
All binary operations go through one broadcasting path:

1. Scalars are materialized as shape `(1,)` arrays.
2. The output shape is the broadcast of both operand shapes.
3. Each operand's strides are aligned to the output shape (stride 0 on
   expanded axes) and the physical offset of every output multi-index is
   computed with `strided_offsets`.
4. The binary function is applied to the gathered operand values and the
   result is stored in output order.

Reductions
----------
`sum`, `min`, `max` reduce one axis at a time in descending axis order,
seeding an accumulator with the operation identity (0, +inf, -inf). `mean`
is `sum` divided by the number of reduced elements. Results never have rank
0: a full reduction yields shape `(1,)`.

Design notes
------------
- NDArray knows nothing about gradients; autograd lives in `..autograd`.
- Floating-point exceptions are silenced so division by zero and overflow
  produce IEEE `inf`/`nan` values instead of warnings.
"""

from __future__ import annotations

import numbers
from typing import Any, Callable, Iterable, Optional, Sequence, Union

import numpy as np

from ... import _config
from ...domain._errors import (
    ConstructionMismatchError,
    InvalidConversionError,
    ShapeMismatchError,
)
from ._matmul import matmul_buffers
from ._printer import format_nested
from ._shape import (
    AxesLike,
    Shape,
    broadcast_shapes,
    broadcast_strides,
    compute_strides,
    keepdims_shape,
    normalize_axes,
    normalize_axis,
    normalize_shape,
    numel,
    reduced_shape,
    strided_offsets,
    sum_to_shape_axes,
)

Number = Union[int, float]
ArrayLike = Union["NDArray", Number, Sequence[float], np.ndarray]

# ufunc, identity
_REDUCERS: dict[str, tuple[Callable, float]] = {
    "sum": (np.add, 0.0),
    "min": (np.minimum, np.inf),
    "max": (np.maximum, -np.inf),
}


def _is_scalar(x: Any) -> bool:
    return isinstance(x, numbers.Real) and not isinstance(x, bool)


class NDArray:
    """
    Flat row-major float64 array with an explicit shape.

    Parameters
    ----------
    data : scalar, Sequence[float] or np.ndarray
        Element data in row-major order, a nested sequence, a NumPy array
        or a single Python number.
    shape : Optional[Sequence[int]]
        Declared shape; `data` is then read flat. Defaults to the nesting of
        `data` (`(1,)` for scalars).

    Raises
    ------
    ConstructionMismatchError
        If `len(data)` differs from the element count of `shape`, or the
        shape is empty / has a negative size.
    TypeError
        If `data` is not numeric.

    Notes
    -----
    The buffer is copied on construction, so later changes to the caller's
    sequence never leak into the array.
    """

    __slots__ = ("_shape", "_data")

    def __init__(self, data: Any, shape: Optional[Sequence[int]] = None) -> None:
        if _is_scalar(data):
            flat = np.array([float(data)], dtype=_config.DTYPE)
        else:
            try:
                arr = np.array(data, dtype=_config.DTYPE)
            except (TypeError, ValueError) as exc:
                raise TypeError(f"NDArray data must be numeric, got {type(data)!r}") from exc
            flat = arr.reshape(-1)

        if shape is not None:
            dims = normalize_shape(shape)
        elif _is_scalar(data):
            dims = (1,)
        else:
            dims = tuple(arr.shape) if arr.ndim > 0 else (1,)
        if flat.size != numel(dims):
            raise ConstructionMismatchError(dims, flat.size)

        self._shape: Shape = dims
        self._data: np.ndarray = flat

    # ----------------------------
    # Construction helpers
    # ----------------------------
    @classmethod
    def _wrap(cls, flat: np.ndarray, shape: Shape) -> "NDArray":
        """
        Build an array around an existing flat buffer without copying.

        Internal: callers guarantee `flat` is a fresh float64 1-D buffer of
        length `numel(shape)`.
        """
        obj = cls.__new__(cls)
        obj._shape = tuple(shape)
        obj._data = np.ascontiguousarray(flat, dtype=_config.DTYPE).reshape(-1)
        return obj

    @classmethod
    def from_scalar(cls, value: Number) -> "NDArray":
        """Create a single-element array of shape `(1,)`."""
        return cls([float(value)], (1,))

    @classmethod
    def full(cls, shape: Union[int, Iterable[int]], value: Number) -> "NDArray":
        """Create an array of `shape` with every element set to `value`."""
        dims = normalize_shape(shape)
        return cls._wrap(np.full(numel(dims), float(value), dtype=_config.DTYPE), dims)

    @classmethod
    def zeros(cls, shape: Union[int, Iterable[int]]) -> "NDArray":
        return cls.full(shape, 0.0)

    @classmethod
    def ones(cls, shape: Union[int, Iterable[int]]) -> "NDArray":
        return cls.full(shape, 1.0)

    @classmethod
    def rand(cls, shape: Union[int, Iterable[int]]) -> "NDArray":
        """
        Create an array of independent uniform [0, 1) samples.

        Samples come from NumPy's process-level generator; seed it with
        `rashgrad.manual_seed` for reproducible values.
        """
        dims = normalize_shape(shape)
        return cls._wrap(np.random.rand(numel(dims)).astype(_config.DTYPE), dims)

    @classmethod
    def from_numpy(cls, arr: Any) -> "NDArray":
        """
        Copy a NumPy array (any rank) into a new NDArray.

        A 0-d array becomes shape `(1,)`.
        """
        a = np.asarray(arr, dtype=_config.DTYPE)
        shape = a.shape if a.ndim > 0 else (1,)
        return cls._wrap(a.reshape(-1).copy(), shape)

    @staticmethod
    def as_ndarray(x: ArrayLike) -> "NDArray":
        """
        Return `x` as an NDArray, materializing scalars as shape `(1,)`.

        Raises
        ------
        TypeError
            If `x` is neither an NDArray, a real number, nor array-like.
        """
        if isinstance(x, NDArray):
            return x
        if _is_scalar(x):
            return NDArray.from_scalar(x)
        if isinstance(x, np.ndarray):
            return NDArray.from_numpy(x)
        if isinstance(x, (list, tuple)):
            return NDArray.from_numpy(np.asarray(x, dtype=_config.DTYPE))
        raise TypeError(f"Unsupported operand type: {type(x)!r}")

    # ----------------------------
    # Queries
    # ----------------------------
    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def strides(self) -> Shape:
        """Row-major strides in elements."""
        return compute_strides(self._shape)

    def numel(self) -> int:
        return self._data.size

    def copy(self) -> "NDArray":
        return NDArray._wrap(self._data.copy(), self._shape)

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the data shaped as this array."""
        return self._data.reshape(self._shape).copy()

    def to_list(self) -> list[float]:
        """Return the flat row-major data as a list of floats."""
        return self._data.tolist()

    def item(self) -> float:
        """
        Return the single element as a Python float.

        Raises
        ------
        InvalidConversionError
            If the array does not hold exactly one element.
        """
        if self._data.size != 1:
            raise InvalidConversionError(self._shape)
        return float(self._data[0])

    def __float__(self) -> float:
        return self.item()

    def __len__(self) -> int:
        return self._shape[0]

    # ----------------------------
    # In-place (gradient buffers only)
    # ----------------------------
    def accumulate_(self, other: "NDArray") -> None:
        """
        Add `other` into this buffer in place.

        Raises
        ------
        ShapeMismatchError
            If `other` does not have exactly this array's shape.
        """
        if other.shape != self._shape:
            raise ShapeMismatchError("accumulate", self._shape, other.shape)
        self._data += other._data

    def fill_(self, value: Number) -> None:
        """Overwrite every element with `value` in place."""
        self._data.fill(float(value))

    # ----------------------------
    # Broadcasting core
    # ----------------------------
    def _gather(self, out_shape: Shape) -> np.ndarray:
        """Values of this array at every index of `out_shape` (broadcast)."""
        if self._shape == tuple(out_shape):
            return self._data
        offsets = strided_offsets(out_shape, broadcast_strides(self._shape, out_shape))
        return self._data[offsets]

    def _binary(self, other: ArrayLike, fn: Callable, op: str) -> "NDArray":
        rhs = NDArray.as_ndarray(other)
        out_shape = broadcast_shapes(self._shape, rhs._shape, op=op)
        a = self._gather(out_shape)
        b = rhs._gather(out_shape)
        with np.errstate(all="ignore"):
            out = fn(a, b)
        return NDArray._wrap(np.asarray(out, dtype=_config.DTYPE), out_shape)

    def _unary(self, fn: Callable) -> "NDArray":
        with np.errstate(all="ignore"):
            out = fn(self._data)
        return NDArray._wrap(np.asarray(out, dtype=_config.DTYPE), self._shape)

    def broadcast_to(self, shape: Sequence[int]) -> "NDArray":
        """
        Materialize this array expanded to `shape`.

        Raises
        ------
        ShapeMismatchError
            If this array cannot be broadcast to exactly `shape`.
        """
        target = normalize_shape(shape)
        if broadcast_shapes(self._shape, target, op="broadcast_to") != target:
            raise ShapeMismatchError("broadcast_to", self._shape, target)
        return NDArray._wrap(self._gather(target).copy(), target)

    def sum_to_shape(self, shape: Sequence[int]) -> "NDArray":
        """
        Undo a forward broadcast by summing back down to `shape`.

        Axes where `shape` has size 1 but this array is larger are summed
        (kept as size 1), then leading axes that `shape` lacks are summed
        away entirely.

        Raises
        ------
        ShapeMismatchError
            If `shape` could not have been broadcast to this array's shape.
        """
        target = normalize_shape(shape)
        if target == self._shape:
            return self
        reduce_axes, _ = sum_to_shape_axes(self._shape, target)
        out = self.sum(reduce_axes, keepdims=True) if reduce_axes else self
        # leading axes are now size 1, so a reshape drops them
        return out.reshape(target)

    # ----------------------------
    # Arithmetic
    # ----------------------------
    def __add__(self, other: ArrayLike) -> "NDArray":
        return self._binary(other, np.add, "add")

    def __radd__(self, other: Number) -> "NDArray":
        return NDArray.as_ndarray(other)._binary(self, np.add, "add")

    def __sub__(self, other: ArrayLike) -> "NDArray":
        return self._binary(other, np.subtract, "sub")

    def __rsub__(self, other: Number) -> "NDArray":
        return NDArray.as_ndarray(other)._binary(self, np.subtract, "sub")

    def __mul__(self, other: ArrayLike) -> "NDArray":
        return self._binary(other, np.multiply, "mul")

    def __rmul__(self, other: Number) -> "NDArray":
        return NDArray.as_ndarray(other)._binary(self, np.multiply, "mul")

    def __truediv__(self, other: ArrayLike) -> "NDArray":
        return self._binary(other, np.divide, "div")

    def __rtruediv__(self, other: Number) -> "NDArray":
        return NDArray.as_ndarray(other)._binary(self, np.divide, "div")

    def __neg__(self) -> "NDArray":
        return self._unary(np.negative)

    def power(self, exponent: ArrayLike) -> "NDArray":
        """Elementwise `self ** exponent` (exponent broadcast like any operand)."""
        return self._binary(exponent, np.power, "pow")

    def __pow__(self, exponent: ArrayLike) -> "NDArray":
        return self.power(exponent)

    def exp(self) -> "NDArray":
        return self._unary(np.exp)

    def abs(self) -> "NDArray":
        return self._unary(np.abs)

    def sign(self) -> "NDArray":
        return self._unary(np.sign)

    # ----------------------------
    # Comparisons (1.0 / 0.0 results)
    # ----------------------------
    def __gt__(self, other: ArrayLike) -> "NDArray":
        return self._binary(other, np.greater, "gt")

    def __ge__(self, other: ArrayLike) -> "NDArray":
        return self._binary(other, np.greater_equal, "ge")

    def __lt__(self, other: ArrayLike) -> "NDArray":
        return self._binary(other, np.less, "lt")

    def __le__(self, other: ArrayLike) -> "NDArray":
        return self._binary(other, np.less_equal, "le")

    def equal(self, other: ArrayLike) -> "NDArray":
        """Elementwise equality as a 1.0 / 0.0 array."""
        return self._binary(other, np.equal, "equal")

    # ----------------------------
    # Reductions
    # ----------------------------
    def _reduce_axis(self, axis: int, ufunc: Callable, identity: float) -> "NDArray":
        """
        Reduce a single axis, keeping it as size 1.

        Every output element starts at `identity`; slice `i` of the reduced
        axis is folded in with `ufunc` for `i = 0 .. size-1`.
        """
        kept = keepdims_shape(self._shape, (axis,))
        strides = self.strides
        base = strided_offsets(kept, strides)
        acc = np.full(base.size, identity, dtype=_config.DTYPE)
        step = strides[axis]
        for i in range(self._shape[axis]):
            acc = ufunc(acc, self._data[base + i * step])
        return NDArray._wrap(acc, kept)

    def _reduce(self, kind: str, axes: AxesLike, keepdims: bool) -> "NDArray":
        ufunc, identity = _REDUCERS[kind]
        norm = normalize_axes(axes, self.ndim, op=kind)
        out = self
        for axis in sorted(norm, reverse=True):
            out = out._reduce_axis(axis, ufunc, identity)
        return out.reshape(reduced_shape(self._shape, norm, keepdims))

    def sum(self, axes: AxesLike = None, keepdims: bool = False) -> "NDArray":
        """
        Sum over `axes` (all axes when None).

        Parameters
        ----------
        axes : None, int or Sequence[int]
            Axes to reduce; negative values count from the end.
        keepdims : bool, optional
            Keep reduced axes as size 1 instead of removing them.
        """
        return self._reduce("sum", axes, keepdims)

    def min(self, axes: AxesLike = None, keepdims: bool = False) -> "NDArray":
        return self._reduce("min", axes, keepdims)

    def max(self, axes: AxesLike = None, keepdims: bool = False) -> "NDArray":
        return self._reduce("max", axes, keepdims)

    def mean(self, axes: AxesLike = None, keepdims: bool = False) -> "NDArray":
        """Arithmetic mean: `sum` divided by the number of reduced elements."""
        norm = normalize_axes(axes, self.ndim, op="mean")
        count = numel([self._shape[a] for a in norm])
        return self.sum(norm, keepdims) / float(count)

    # ----------------------------
    # Shape transforms (always copy)
    # ----------------------------
    def reshape(self, shape: Union[int, Sequence[int]]) -> "NDArray":
        """
        Return the same data with a new shape.

        Raises
        ------
        ShapeMismatchError
            If the element counts differ.
        """
        target = normalize_shape(shape)
        if numel(target) != self._data.size:
            raise ShapeMismatchError("reshape", self._shape, target)
        return NDArray._wrap(self._data.copy(), target)

    def squeeze(self, axes: AxesLike = None) -> "NDArray":
        """
        Remove size-1 axes (all of them when `axes` is None).

        Axes that are not size 1 are left untouched. The result keeps at
        least one dimension.
        """
        if axes is None:
            drop = tuple(i for i, d in enumerate(self._shape) if d == 1)
        else:
            drop = tuple(
                a for a in normalize_axes(axes, self.ndim, op="squeeze") if self._shape[a] == 1
            )
        shape = tuple(d for i, d in enumerate(self._shape) if i not in drop)
        return self.reshape(shape if shape else (1,))

    def unsqueeze(self, axis: int = 0) -> "NDArray":
        """Insert a size-1 axis at position `axis` (0 .. ndim inclusive)."""
        a = normalize_axis(axis, self.ndim + 1, op="unsqueeze")
        shape = self._shape[:a] + (1,) + self._shape[a:]
        return self.reshape(shape)

    def permute(self, perm: Sequence[int]) -> "NDArray":
        """
        Reorder axes so that output axis `i` is input axis `perm[i]`.

        Every element is copied to its permuted physical location; the
        result is a new contiguous array, not a view.

        Raises
        ------
        ShapeMismatchError
            If `perm` is not a permutation of `0 .. ndim-1`.
        """
        perm = tuple(int(p) for p in perm)
        if len(perm) != self.ndim or sorted(perm) != list(range(self.ndim)):
            raise ShapeMismatchError(
                "permute", self._shape, detail=f"invalid permutation {perm}"
            )
        strides = self.strides
        new_shape = tuple(self._shape[p] for p in perm)
        offsets = strided_offsets(new_shape, [strides[p] for p in perm])
        return NDArray._wrap(self._data[offsets], new_shape)

    def transpose(self, dim1: int = -1, dim2: int = -2) -> "NDArray":
        """Swap two axes (the last two by default)."""
        if self.ndim == 1:
            return self.copy()
        d1 = normalize_axis(dim1, self.ndim, op="transpose")
        d2 = normalize_axis(dim2, self.ndim, op="transpose")
        perm = list(range(self.ndim))
        perm[d1], perm[d2] = perm[d2], perm[d1]
        return self.permute(perm)

    @property
    def T(self) -> "NDArray":
        """Reverse all axes."""
        return self.permute(tuple(reversed(range(self.ndim))))

    # ----------------------------
    # Matrix multiplication
    # ----------------------------
    def matmul(self, other: "NDArray") -> "NDArray":
        """
        Matrix product with NumPy-style 1-D promotion and batch broadcasting.

        Raises
        ------
        ShapeMismatchError
            If inner dimensions differ or batch axes do not broadcast.
        """
        if not isinstance(other, NDArray):
            raise TypeError(f"matmul only supports NDArray operands, got {type(other)!r}")
        data, shape = matmul_buffers(self._data, self._shape, other._data, other._shape)
        return NDArray._wrap(data, shape)

    def __matmul__(self, other: "NDArray") -> "NDArray":
        return self.matmul(other)

    # ----------------------------
    # Printing
    # ----------------------------
    def __str__(self) -> str:
        return format_nested(self._shape, self._data)

    def __repr__(self) -> str:
        return f"NDArray({format_nested(self._shape, self._data)}, shape={self._shape})"
