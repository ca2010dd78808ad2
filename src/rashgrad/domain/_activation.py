"""
Activation-function interface.

Activations are stateless callables built purely from the public tensor
operator surface, so their gradients come from the core backward rules.
"""

from abc import ABC, abstractmethod

from ._tensor import ITensor


class IActivation(ABC):
    """
    Abstract activation function: `forward(x) -> tensor`.

    Calling an instance delegates to `forward`.
    """

    @abstractmethod
    def forward(self, x: ITensor) -> ITensor:
        """
        Apply the activation elementwise.

        Parameters
        ----------
        x : ITensor
            Input tensor.

        Returns
        -------
        ITensor
            Output tensor of the same shape, connected to `x` in the graph.
        """
        raise NotImplementedError

    def __call__(self, x: ITensor) -> ITensor:
        return self.forward(x)
