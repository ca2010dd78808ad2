from unittest import TestCase
import unittest

import numpy as np

from src.rashgrad.domain import IActivation
from src.rashgrad.infrastructure._activations import ReLU, Sigmoid, Tanh
from src.rashgrad.infrastructure.tensor import Tensor


class TestReLU(TestCase):
    def test_forward_and_backward(self):
        x = Tensor([-2.0, 0.0, 3.0], requires_grad=True, label="x")
        y = ReLU()(x)
        np.testing.assert_array_equal(y.to_numpy(), [0.0, 0.0, 3.0])
        self.assertEqual(y.label, "relu(x)")
        y.sum().backward()
        np.testing.assert_array_equal(x.fetch_grad().to_numpy(), [0.0, 0.0, 1.0])

    def test_is_activation(self):
        self.assertIsInstance(ReLU(), IActivation)


class TestSigmoid(TestCase):
    def test_forward_and_backward(self):
        x_np = np.array([-1.0, 0.0, 2.0])
        x = Tensor(x_np, requires_grad=True)
        y = Sigmoid()(x)
        s = 1.0 / (1.0 + np.exp(-x_np))
        np.testing.assert_allclose(y.to_numpy(), s)
        y.sum().backward()
        np.testing.assert_allclose(x.fetch_grad().to_numpy(), s * (1.0 - s))


class TestTanh(TestCase):
    def test_forward_and_backward(self):
        x_np = np.array([-1.5, 0.0, 0.5])
        x = Tensor(x_np, requires_grad=True)
        y = Tanh()(x)
        np.testing.assert_allclose(y.to_numpy(), np.tanh(x_np), atol=1e-12)
        y.sum().backward()
        np.testing.assert_allclose(
            x.fetch_grad().to_numpy(), 1.0 - np.tanh(x_np) ** 2, rtol=1e-6
        )


if __name__ == "__main__":
    unittest.main()
