from unittest import TestCase
import gc
import unittest

from src.rashgrad.infrastructure.autograd import TensorRegistry
from src.rashgrad.infrastructure.tensor import Tensor


class TestTensorRegistry(TestCase):
    def test_register_under_own_label(self):
        reg = TensorRegistry()
        w = reg.register(Tensor([1.0], requires_grad=True, label="w"))
        self.assertIs(reg["w"], w)
        self.assertIs(reg.get("w"), w)
        self.assertIn("w", reg)
        self.assertEqual(len(reg), 1)

    def test_register_with_explicit_label(self):
        reg = TensorRegistry()
        t = Tensor([1.0], label="inner")
        reg.register(t, "alias")
        self.assertIs(reg["alias"], t)
        self.assertNotIn("inner", reg)

    def test_missing_label(self):
        reg = TensorRegistry()
        self.assertIsNone(reg.get("nope"))
        with self.assertRaises(KeyError):
            reg["nope"]

    def test_iteration_and_unregister(self):
        reg = TensorRegistry()
        a = reg.register(Tensor([1.0], label="a"))
        b = reg.register(Tensor([2.0], label="b"))
        self.assertEqual(sorted(reg), ["a", "b"])
        self.assertEqual(sorted(reg.labels()), ["a", "b"])
        reg.unregister("a")
        self.assertEqual(list(reg), ["b"])
        self.assertIsNotNone(a)
        self.assertIsNotNone(b)

    def test_zero_grad_all(self):
        reg = TensorRegistry()
        a = reg.register(Tensor([5.0], requires_grad=True, label="a"))
        b = reg.register(Tensor([1.0], requires_grad=True, label="b"))
        (a * a + b * b).backward()
        reg.zero_grad()
        self.assertEqual(a.fetch_grad().item(), 0.0)
        self.assertEqual(b.fetch_grad().item(), 0.0)

    def test_entries_are_weak(self):
        reg = TensorRegistry()
        reg.register(Tensor([1.0], label="temp"))
        gc.collect()
        self.assertNotIn("temp", reg)
        self.assertEqual(len(reg), 0)

    def test_registries_are_independent(self):
        r1, r2 = TensorRegistry(), TensorRegistry()
        t = r1.register(Tensor([1.0], label="t"))
        self.assertIn("t", r1)
        self.assertNotIn("t", r2)
        self.assertIsNotNone(t)


if __name__ == "__main__":
    unittest.main()
