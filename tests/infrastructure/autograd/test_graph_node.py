from unittest import TestCase
import unittest

import numpy as np

from src.rashgrad.domain._errors import ShapeMismatchError
from src.rashgrad.infrastructure.autograd import GraphNode, OpKind, OpRecord
from src.rashgrad.infrastructure.ndarray import NDArray


class TestGraphNode(TestCase):
    def test_leaf_defaults(self):
        node = GraphNode(NDArray([1.0, 2.0]), requires_grad=True)
        self.assertTrue(node.is_leaf)
        self.assertIsNone(node.op)
        self.assertEqual(node.predecessors, ())
        self.assertEqual(node.grad.shape, (2,))
        self.assertEqual(node.grad.to_list(), [0.0, 0.0])
        self.assertTrue(node.label.startswith("node_"))

    def test_node_ids_are_unique(self):
        ids = {GraphNode(NDArray([0.0])).node_id for _ in range(100)}
        self.assertEqual(len(ids), 100)

    def test_predecessors_are_ids_in_operand_order(self):
        a = GraphNode(NDArray([1.0]), requires_grad=True)
        b = GraphNode(NDArray([2.0]))
        c = GraphNode(
            NDArray([3.0]),
            requires_grad=True,
            op=OpRecord(OpKind.ADD, (a, b)),
        )
        self.assertFalse(c.is_leaf)
        self.assertEqual(c.predecessors, (a.node_id, b.node_id))

    def test_accumulate_grad_adds(self):
        node = GraphNode(NDArray([1.0, 2.0]), requires_grad=True)
        node.accumulate_grad(NDArray([1.0, 1.0]))
        node.accumulate_grad(NDArray([0.5, 2.0]))
        self.assertEqual(node.grad.to_list(), [1.5, 3.0])

    def test_accumulate_grad_shape_mismatch(self):
        node = GraphNode(NDArray([1.0, 2.0]), requires_grad=True)
        with self.assertRaises(ShapeMismatchError):
            node.accumulate_grad(NDArray([1.0]))

    def test_zero_and_seed(self):
        node = GraphNode(NDArray.zeros((2, 2)), requires_grad=True)
        node.seed_grad()
        np.testing.assert_array_equal(node.grad.to_numpy(), np.ones((2, 2)))
        node.zero_grad()
        np.testing.assert_array_equal(node.grad.to_numpy(), np.zeros((2, 2)))

    def test_set_value_and_grad_require_same_shape(self):
        node = GraphNode(NDArray([1.0, 2.0]), requires_grad=True)
        node.set_value(NDArray([3.0, 4.0]))
        self.assertEqual(node.value.to_list(), [3.0, 4.0])
        node.set_grad(NDArray([5.0, 6.0]))
        self.assertEqual(node.grad.to_list(), [5.0, 6.0])
        with self.assertRaises(ShapeMismatchError):
            node.set_value(NDArray([1.0, 2.0, 3.0]))
        with self.assertRaises(ShapeMismatchError):
            node.set_grad(NDArray([1.0], (1, 1)))

    def test_op_record_save_for_backward(self):
        record = OpRecord(OpKind.MUL, ())
        x = NDArray([1.0])
        y = NDArray([2.0])
        record.save_for_backward(x, y)
        self.assertEqual(record.saved, [x, y])
        self.assertEqual(record.meta, {})


if __name__ == "__main__":
    unittest.main()
