"""
Stochastic Gradient Descent (SGD) optimizer.

The optimizer reads each parameter's accumulated gradient with
`fetch_grad()` and writes the updated value back with `update_data()`,
so it never builds graph nodes and stays independent from autograd
internals.

Design notes
------------
- Parameters that do not require gradients are skipped.
- Momentum, Nesterov and other SGD variants are not implemented.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from .tensor import Tensor

logger = logging.getLogger(__name__)


@dataclass
class SGD:
    """
    Stochastic Gradient Descent (SGD) optimizer.

    Update rule
    -----------
    For each parameter ``p`` with gradient ``g``:

    - If ``weight_decay > 0`` (classical L2 regularization):
        ``g <- g + weight_decay * p``
    - Parameter update:
        ``p <- p - lr * g``

    Parameters
    ----------
    params : Sequence[Tensor]
        Parameters to be optimized.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.
    weight_decay : float, optional
        Classical L2 weight decay coefficient (coupled). Must be non-negative.
        Defaults to 0.0.
    """

    params: Sequence[Tensor]
    lr: float = 1e-3
    weight_decay: float = 0.0

    def __init__(
        self,
        params: Iterable[Tensor],
        *,
        lr: float = 1e-3,
        weight_decay: float = 0.0,
    ) -> None:
        """
        Construct an SGD optimizer.

        Raises
        ------
        ValueError
            If ``lr <= 0`` or ``weight_decay < 0``.
        """
        self.params = list(params)
        self.lr = float(lr)
        self.weight_decay = float(weight_decay)

        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if self.weight_decay < 0.0:
            raise ValueError(f"weight_decay must be >= 0, got {self.weight_decay}")

    def zero_grad(self) -> None:
        """Reset the gradient of every managed parameter to zero."""
        for p in self.params:
            p.zero_grad()

    def step(self) -> None:
        """Apply one SGD update to every parameter that requires gradients."""
        for p in self.params:
            if not p.requires_grad:
                continue

            g = p.fetch_grad()
            value = p.fetch_data()
            if self.weight_decay != 0.0:
                g = g + value * self.weight_decay

            p.update_data(value - g * self.lr)

        logger.debug("SGD step applied to %d parameter(s)", len(self.params))
