"""
Local-derivative rules for every differentiable operation.

Each rule is registered on the `backward_rules` dispatch table under its
`OpKind` and has the signature

    rule(record: OpRecord, grad: NDArray) -> tuple[Optional[NDArray], ...]

where `grad` is the (complete) gradient of the node that `record` belongs
to. The rule returns one entry per `record.inputs`, already reduced to that
input's shape with `sum_to_shape` when the forward pass broadcast it. Inputs
that do not require gradients get `None`.

Saved-value conventions
-----------------------
- Binary elementwise ops and MATMUL save `(a, b)`.
- EXP saves its output; ABS and POW save their input.
- MAX / MIN save `(input, output_with_keepdims)`.
- Reductions keep `axes`, `keepdims` and `in_shape` in `meta`.
"""

from __future__ import annotations

from typing import Optional

from ...domain.utils._dispatch import create_dispatch_table
from ..ndarray import NDArray
from ..ndarray._matmul import matmul_plan, promote_operands
from ..ndarray._shape import keepdims_shape, numel
from ._op_record import OpKind, OpRecord

Grads = tuple[Optional[NDArray], ...]

backward_rules = create_dispatch_table("backward")


def _needs(record: OpRecord, i: int) -> bool:
    return record.inputs[i].requires_grad


def _to_input(record: OpRecord, i: int, g: NDArray) -> Optional[NDArray]:
    """Reduce a contribution to input `i`'s shape, or drop it if unused."""
    if not _needs(record, i):
        return None
    return g.sum_to_shape(record.inputs[i].shape)


# ----------------------------
# Elementwise arithmetic
# ----------------------------
@backward_rules(OpKind.ADD)
def add_backward(record: OpRecord, grad: NDArray) -> Grads:
    return _to_input(record, 0, grad), _to_input(record, 1, grad)


@backward_rules(OpKind.SUB)
def sub_backward(record: OpRecord, grad: NDArray) -> Grads:
    return _to_input(record, 0, grad), _to_input(record, 1, -grad)


@backward_rules(OpKind.NEG)
def neg_backward(record: OpRecord, grad: NDArray) -> Grads:
    return (_to_input(record, 0, -grad),)


@backward_rules(OpKind.MUL)
def mul_backward(record: OpRecord, grad: NDArray) -> Grads:
    a, b = record.saved
    ga = grad * b if _needs(record, 0) else None
    gb = grad * a if _needs(record, 1) else None
    return (
        _to_input(record, 0, ga) if ga is not None else None,
        _to_input(record, 1, gb) if gb is not None else None,
    )


@backward_rules(OpKind.DIV)
def div_backward(record: OpRecord, grad: NDArray) -> Grads:
    # d(a/b)/da = 1/b ; d(a/b)/db = -a / b^2
    a, b = record.saved
    ga = grad / b if _needs(record, 0) else None
    gb = -(grad * a) / (b * b) if _needs(record, 1) else None
    return (
        _to_input(record, 0, ga) if ga is not None else None,
        _to_input(record, 1, gb) if gb is not None else None,
    )


# ----------------------------
# Unary
# ----------------------------
@backward_rules(OpKind.EXP)
def exp_backward(record: OpRecord, grad: NDArray) -> Grads:
    (out,) = record.saved
    return (_to_input(record, 0, grad * out),)


@backward_rules(OpKind.ABS)
def abs_backward(record: OpRecord, grad: NDArray) -> Grads:
    (a,) = record.saved
    return (_to_input(record, 0, grad * a.sign()),)


@backward_rules(OpKind.POW)
def pow_backward(record: OpRecord, grad: NDArray) -> Grads:
    (a,) = record.saved
    n = float(record.meta["exponent"])
    if n == 0.0:
        # d/dx x^0 is zero everywhere, including x == 0
        return (_to_input(record, 0, NDArray.zeros(grad.shape)),)
    return (_to_input(record, 0, grad * (a.power(n - 1.0) * n)),)


# ----------------------------
# Shape transforms
# ----------------------------
@backward_rules(OpKind.PERMUTE)
def permute_backward(record: OpRecord, grad: NDArray) -> Grads:
    perm = record.meta["perm"]
    inverse = [0] * len(perm)
    for i, p in enumerate(perm):
        inverse[p] = i
    return (grad.permute(inverse) if _needs(record, 0) else None,)


@backward_rules(OpKind.RESHAPE)
def reshape_backward(record: OpRecord, grad: NDArray) -> Grads:
    in_shape = record.meta["in_shape"]
    return (grad.reshape(in_shape) if _needs(record, 0) else None,)


# ----------------------------
# Reductions
# ----------------------------
def _expand_reduced(record: OpRecord, grad: NDArray) -> NDArray:
    """Broadcast a reduced gradient back over the reduced axes."""
    in_shape = record.meta["in_shape"]
    kept = keepdims_shape(in_shape, record.meta["axes"])
    return grad.reshape(kept).broadcast_to(in_shape)


@backward_rules(OpKind.SUM)
def sum_backward(record: OpRecord, grad: NDArray) -> Grads:
    if not _needs(record, 0):
        return (None,)
    return (_expand_reduced(record, grad),)


@backward_rules(OpKind.MEAN)
def mean_backward(record: OpRecord, grad: NDArray) -> Grads:
    if not _needs(record, 0):
        return (None,)
    in_shape = record.meta["in_shape"]
    count = numel([in_shape[a] for a in record.meta["axes"]])
    return (_expand_reduced(record, grad) / float(count),)


def _extreme_backward(record: OpRecord, grad: NDArray) -> Grads:
    # every position tied with the extreme value receives the full gradient
    if not _needs(record, 0):
        return (None,)
    a, extreme = record.saved
    in_shape = record.meta["in_shape"]
    kept = keepdims_shape(in_shape, record.meta["axes"])
    mask = a.equal(extreme)
    return (mask * grad.reshape(kept),)


@backward_rules(OpKind.MAX)
def max_backward(record: OpRecord, grad: NDArray) -> Grads:
    return _extreme_backward(record, grad)


@backward_rules(OpKind.MIN)
def min_backward(record: OpRecord, grad: NDArray) -> Grads:
    return _extreme_backward(record, grad)


# ----------------------------
# Matrix multiplication
# ----------------------------
@backward_rules(OpKind.MATMUL)
def matmul_backward(record: OpRecord, grad: NDArray) -> Grads:
    """
    Backward of `out = a @ b`.

    With 1-D operands promoted to matrices:
    - dL/da = dL/dout @ b^T
    - dL/db = a^T @ dL/dout
    Batch axes that were broadcast in the forward pass are summed away.
    """
    a, b = record.saved
    plan = matmul_plan(a.shape, b.shape)
    a_shape2, b_shape2 = promote_operands(a.shape, b.shape)
    a2 = a.reshape(a_shape2)
    b2 = b.reshape(b_shape2)
    g2 = grad.reshape(plan.full_shape)

    ga = gb = None
    if _needs(record, 0):
        ga = (g2 @ b2.transpose()).sum_to_shape(a_shape2).reshape(a.shape)
    if _needs(record, 1):
        gb = (a2.transpose() @ g2).sum_to_shape(b_shape2).reshape(b.shape)
    return ga, gb
