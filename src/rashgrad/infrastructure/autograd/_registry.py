"""
Caller-owned label -> Tensor lookup for debugging and introspection.

A `TensorRegistry` only holds weak references: registering a tensor never
extends its lifetime, and entries disappear once the tensor is collected.
Nothing is registered implicitly; each registry belongs to whoever created
it.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Iterator, Optional

if TYPE_CHECKING:
    from ..tensor._tensor import Tensor


class TensorRegistry:
    """
    Weak-valued mapping from tensor labels to tensors.

    Examples
    --------
    >>> reg = TensorRegistry()
    >>> w = reg.register(Tensor.rand((3, 3), requires_grad=True, label="w"))
    >>> reg["w"] is w
    True
    """

    def __init__(self) -> None:
        self._entries: "weakref.WeakValueDictionary[str, Tensor]" = (
            weakref.WeakValueDictionary()
        )

    def register(self, tensor: "Tensor", label: Optional[str] = None) -> "Tensor":
        """
        Register `tensor` under `label` (its own label by default).

        A later registration under the same label replaces the earlier one.
        Returns the tensor so calls can be chained at construction time.
        """
        key = label if label is not None else tensor.label
        self._entries[key] = tensor
        return tensor

    def unregister(self, label: str) -> None:
        self._entries.pop(label, None)

    def get(self, label: str) -> Optional["Tensor"]:
        return self._entries.get(label)

    def __getitem__(self, label: str) -> "Tensor":
        return self._entries[label]

    def __contains__(self, label: object) -> bool:
        return label in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries.keys()))

    def __len__(self) -> int:
        return len(self._entries)

    def labels(self) -> list[str]:
        return list(self._entries.keys())

    def zero_grad(self) -> None:
        """Zero the gradient of every live registered tensor."""
        for tensor in list(self._entries.values()):
            tensor.zero_grad()
