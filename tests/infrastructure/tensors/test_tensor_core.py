from unittest import TestCase
import unittest

import numpy as np

from src.rashgrad._config import manual_seed
from src.rashgrad.domain import ITensor
from src.rashgrad.domain._errors import (
    ConstructionMismatchError,
    InvalidConversionError,
    ShapeMismatchError,
)
from src.rashgrad.infrastructure.ndarray import NDArray
from src.rashgrad.infrastructure._activations import ReLU
from src.rashgrad.infrastructure.tensor import Tensor


class TestTensorConstruction(TestCase):
    def test_from_list_and_shape(self):
        t = Tensor([1, 2, 3, 4, 5, 6], (2, 3))
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.ndim, 2)
        self.assertEqual(t.numel(), 6)
        np.testing.assert_array_equal(t.to_numpy(), [[1, 2, 3], [4, 5, 6]])

    def test_from_numpy_keeps_shape(self):
        arr = np.arange(6.0).reshape(3, 2)
        t = Tensor(arr)
        self.assertEqual(t.shape, (3, 2))
        arr[0, 0] = 100.0
        self.assertEqual(t.to_numpy()[0, 0], 0.0)

    def test_scalar_becomes_shape_one(self):
        t = Tensor(4.0)
        self.assertEqual(t.shape, (1,))
        self.assertEqual(t.item(), 4.0)

    def test_size_mismatch(self):
        with self.assertRaises(ConstructionMismatchError):
            Tensor([1, 2, 3], (2, 2))

    def test_leaf_defaults(self):
        t = Tensor([1.0, 2.0])
        self.assertFalse(t.requires_grad)
        self.assertTrue(t.node.is_leaf)
        self.assertTrue(t.label.startswith("tensor_"))
        np.testing.assert_array_equal(t.fetch_grad().to_numpy(), [0.0, 0.0])

    def test_unique_ids(self):
        ids = {Tensor([0.0]).node_id for _ in range(100)}
        self.assertEqual(len(ids), 100)

    def test_factories(self):
        self.assertEqual(Tensor.zeros((2, 2)).to_numpy().sum(), 0.0)
        self.assertEqual(Tensor.ones(3).to_numpy().sum(), 3.0)
        r = Tensor.rand((4, 5), requires_grad=True, label="r")
        self.assertTrue(r.requires_grad)
        self.assertEqual(r.label, "r")
        self.assertTrue(((r.to_numpy() >= 0.0) & (r.to_numpy() < 1.0)).all())

    def test_rand_is_reproducible_with_seed(self):
        manual_seed(7)
        a = Tensor.rand((3, 3)).to_numpy()
        manual_seed(7)
        b = Tensor.rand((3, 3)).to_numpy()
        np.testing.assert_array_equal(a, b)

    def test_satisfies_interface(self):
        self.assertIsInstance(Tensor([1.0]), ITensor)


class TestTensorLabels(TestCase):
    def test_binary_labels(self):
        a = Tensor([1.0], label="a")
        b = Tensor([2.0], label="b")
        self.assertEqual((a + b).label, "(a+b)")
        self.assertEqual((a - b).label, "(a-b)")
        self.assertEqual((a * b).label, "(a*b)")
        self.assertEqual((a / b).label, "(a/b)")
        self.assertEqual((-a).label, "(-a)")

    def test_scalar_operand_label(self):
        a = Tensor([1.0], label="a")
        self.assertEqual((a * 2.0).label, "(a*2)")
        self.assertEqual((3 + a).label, "(3+a)")

    def test_matmul_and_layout_labels(self):
        a = Tensor(np.ones((2, 2)), label="a")
        b = Tensor(np.ones((2, 2)), label="b")
        self.assertEqual((a @ b).label, "(a@b)")
        self.assertEqual(a.T.label, "a.T")
        self.assertEqual(a.sum().label, "sum(a)")

    def test_reused_operand_label_stays_bounded(self):
        y = Tensor([1.0], requires_grad=True, label="y")
        for _ in range(40):
            y = y + y
        self.assertLessEqual(len(y.label), 64)
        self.assertIn("add_", y.label)
        self.assertEqual(y.item(), 2.0**40)

    def test_long_composed_labels_fall_back(self):
        x = Tensor([1.0], label="x" * 70)
        self.assertEqual(x.exp().label[:4], "exp_")
        self.assertTrue(ReLU()(x).label.startswith("relu_"))
        self.assertTrue((x > x).label.startswith("const_"))

    def test_relabel(self):
        a = Tensor([1.0])
        a.label = "renamed"
        self.assertEqual(a.node.label, "renamed")


class TestTensorOperands(TestCase):
    def test_requires_grad_propagates(self):
        a = Tensor([1.0], requires_grad=True)
        b = Tensor([2.0])
        self.assertTrue((a + b).requires_grad)
        self.assertFalse((b * b).requires_grad)

    def test_unsupported_operand(self):
        a = Tensor([1.0])
        with self.assertRaises(TypeError):
            a + "x"
        with self.assertRaises(TypeError):
            a @ 3.0

    def test_incompatible_shapes(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor([1.0, 2.0]) + Tensor([1.0, 2.0, 3.0])
        with self.assertRaises(ShapeMismatchError):
            Tensor(np.ones((2, 3))) @ Tensor(np.ones((2, 3)))

    def test_static_matmul(self):
        a = Tensor(np.eye(2))
        b = Tensor([[1.0, 2.0], [3.0, 4.0]])
        np.testing.assert_array_equal(
            Tensor.matmul(a, b).to_numpy(), [[1.0, 2.0], [3.0, 4.0]]
        )

    def test_comparisons_are_constant_leaves(self):
        x = Tensor([-1.0, 0.0, 2.0], requires_grad=True, label="x")
        for mask in (x > 0, x >= 0, x < 0, x <= 0):
            self.assertFalse(mask.requires_grad)
            self.assertTrue(mask.node.is_leaf)
        np.testing.assert_array_equal((x > 0).to_numpy(), [0.0, 0.0, 1.0])
        np.testing.assert_array_equal((x <= 0).to_numpy(), [1.0, 1.0, 0.0])
        self.assertEqual((x > 0).label, "(x>0)")

    def test_item_requires_single_element(self):
        self.assertEqual(Tensor([[3.5]]).item(), 3.5)
        self.assertEqual(float(Tensor([2.0])), 2.0)
        with self.assertRaises(InvalidConversionError):
            Tensor([1.0, 2.0]).item()


class TestTensorLifecycle(TestCase):
    def test_fetch_returns_copies(self):
        t = Tensor([1.0, 2.0], requires_grad=True)
        d = t.fetch_data()
        d.fill_(9.0)
        g = t.fetch_grad()
        g.fill_(9.0)
        np.testing.assert_array_equal(t.to_numpy(), [1.0, 2.0])
        np.testing.assert_array_equal(t.fetch_grad().to_numpy(), [0.0, 0.0])

    def test_update_data(self):
        t = Tensor([1.0, 2.0])
        t.update_data(NDArray([3.0, 4.0]))
        np.testing.assert_array_equal(t.to_numpy(), [3.0, 4.0])
        t.update_data(0.5)
        np.testing.assert_array_equal(t.to_numpy(), [0.5, 0.5])
        with self.assertRaises(ShapeMismatchError):
            t.update_data([1.0, 2.0, 3.0])

    def test_update_grad(self):
        t = Tensor([1.0, 2.0], requires_grad=True)
        t.update_grad([0.25, -1.0])
        np.testing.assert_array_equal(t.fetch_grad().to_numpy(), [0.25, -1.0])
        with self.assertRaises(ShapeMismatchError):
            t.update_grad(np.ones((2, 1)))

    def test_zero_grad_keeps_shape(self):
        t = Tensor(np.ones((2, 3)), requires_grad=True)
        (t * 2.0).sum().backward()
        t.zero_grad()
        g = t.fetch_grad()
        self.assertEqual(g.shape, (2, 3))
        np.testing.assert_array_equal(g.to_numpy(), np.zeros((2, 3)))

    def test_existing_nodes_keep_old_value_after_update(self):
        w = Tensor([2.0], requires_grad=True)
        y = w * 3.0
        w.update_data([5.0])
        self.assertEqual(y.item(), 6.0)


class TestTensorPrinting(TestCase):
    def test_str_with_grad(self):
        w = Tensor([1.0, 2.0], requires_grad=True, label="w")
        self.assertEqual(
            str(w), "Tensor([1, 2], requires_grad=True, grad=[0, 0], label=w)"
        )

    def test_str_without_grad(self):
        c = Tensor([[1.5, 2.0], [3.0, 4.0]], label="c")
        self.assertEqual(
            str(c), "Tensor([[1.5, 2],\n[3, 4]], requires_grad=False, label=c)"
        )

    def test_repr(self):
        r = repr(Tensor([1.0], label="k"))
        self.assertIn("shape=(1,)", r)
        self.assertIn("'k'", r)


if __name__ == "__main__":
    unittest.main()
