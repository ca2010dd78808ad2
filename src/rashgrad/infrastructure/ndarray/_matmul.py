"""
Batched, broadcasting matrix multiplication over flat row-major buffers.

This module implements the batching and broadcasting *wrapper* around a dense
2-D matrix product. The per-slice multiply-accumulate itself is delegated to
NumPy's `dot` (BLAS-backed for float64), called on row-major, un-transposed
`(M, K)` and `(K, N)` views.

Dimension rules (NumPy-style)
-----------------------------
- 1-D x 1-D        : dot product, result shape `(1,)`.
- 2-D x 2-D        : standard matrix product `(M, K) x (K, N) -> (M, N)`.
- 1-D x N-D        : the 1-D operand is promoted to a single row `(1, K)`;
                     the promoted axis is dropped from the result.
- N-D x 1-D        : the 1-D operand is promoted to a single column `(K, 1)`;
                     the promoted axis is dropped from the result.
- N-D x M-D        : every axis except the last two is a batch axis; batch
                     axes broadcast against each other with the elementwise
                     broadcasting rule.

All validation happens in `matmul_plan` before any arithmetic runs.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ... import _config
from ...domain._errors import ShapeMismatchError
from ._shape import (
    Shape,
    _broadcast_dims,
    broadcast_strides,
    compute_strides,
    numel,
    strided_offsets,
)


@dataclass(frozen=True)
class MatmulPlan:
    """
    Validated shape bookkeeping for one matmul call.

    Attributes
    ----------
    a_shape, b_shape : tuple[int, ...]
        Operand shapes after 1-D promotion (each has rank >= 2).
    batch : tuple[int, ...]
        Broadcast batch shape (may be empty).
    m, k, n : int
        Matrix dimensions of each batch slice.
    out_shape : tuple[int, ...]
        Final result shape after dropping promoted axes.
    """

    a_shape: Shape
    b_shape: Shape
    batch: Shape
    m: int
    k: int
    n: int
    out_shape: Shape

    @property
    def full_shape(self) -> Shape:
        """Result shape before promoted axes are dropped."""
        return self.batch + (self.m, self.n)


def promote_operands(a_shape: Shape, b_shape: Shape) -> tuple[Shape, Shape]:
    """
    Promote 1-D operand shapes to matrices.

    A 1-D left operand becomes a row `(1, K)`, a 1-D right operand becomes a
    column `(K, 1)`. Higher-rank shapes are returned unchanged.
    """
    a2 = (1, a_shape[0]) if len(a_shape) == 1 else tuple(a_shape)
    b2 = (b_shape[0], 1) if len(b_shape) == 1 else tuple(b_shape)
    return a2, b2


def matmul_plan(a_shape: Shape, b_shape: Shape) -> MatmulPlan:
    """
    Validate two operand shapes and compute the matmul bookkeeping.

    Raises
    ------
    ShapeMismatchError
        If the inner dimensions disagree or the batch axes do not broadcast.
    """
    a2, b2 = promote_operands(a_shape, b_shape)
    if a2[-1] != b2[-2]:
        raise ShapeMismatchError(
            "matmul", a_shape, b_shape, detail="inner dimensions differ"
        )

    batch = _broadcast_dims(a2[:-2], b2[:-2], "matmul")
    m, k, n = a2[-2], a2[-1], b2[-1]

    out = list(batch + (m, n))
    if len(b_shape) == 1:
        out.pop(-1)
    if len(a_shape) == 1:
        out.pop(-2 if len(b_shape) != 1 else -1)
    out_shape = tuple(out) if out else (1,)

    return MatmulPlan(a2, b2, batch, m, k, n, out_shape)


def _gemm(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Dense 2-D product of row-major `(M, K)` and `(K, N)` blocks."""
    return np.dot(a, b)


def matmul_buffers(
    a_data: np.ndarray, a_shape: Shape, b_data: np.ndarray, b_shape: Shape
) -> tuple[np.ndarray, Shape]:
    """
    Multiply two flat buffers under the matmul dimension rules.

    Parameters
    ----------
    a_data, b_data : np.ndarray
        Flat row-major buffers.
    a_shape, b_shape : tuple[int, ...]
        Logical shapes of the buffers.

    Returns
    -------
    tuple[np.ndarray, tuple[int, ...]]
        Flat result buffer and its shape.
    """
    plan = matmul_plan(a_shape, b_shape)
    m, k, n = plan.m, plan.k, plan.n

    # Batch offsets: one physical start offset per broadcast batch index.
    a_batch_strides = broadcast_strides(
        plan.a_shape[:-2], plan.batch, compute_strides(plan.a_shape)[:-2]
    )
    b_batch_strides = broadcast_strides(
        plan.b_shape[:-2], plan.batch, compute_strides(plan.b_shape)[:-2]
    )
    a_offsets = strided_offsets(plan.batch, a_batch_strides)
    b_offsets = strided_offsets(plan.batch, b_batch_strides)

    out = np.empty(numel(plan.full_shape), dtype=_config.DTYPE)
    block = m * n
    for i, (oa, ob) in enumerate(zip(a_offsets, b_offsets)):
        lhs = a_data[oa : oa + m * k].reshape(m, k)
        rhs = b_data[ob : ob + k * n].reshape(k, n)
        out[i * block : (i + 1) * block] = _gemm(lhs, rhs).reshape(-1)

    return out, plan.out_shape
