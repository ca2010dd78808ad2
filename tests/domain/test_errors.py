from unittest import TestCase
import unittest

from src.rashgrad.domain._errors import (
    ConstructionMismatchError,
    InvalidConversionError,
    ShapeMismatchError,
)


class TestShapeMismatchError(TestCase):
    def test_is_value_error_and_keeps_shapes(self):
        err = ShapeMismatchError("add", (3,), (2, 4))
        self.assertIsInstance(err, ValueError)
        self.assertEqual(err.op, "add")
        self.assertEqual(err.shapes, ((3,), (2, 4)))

    def test_message_renders_shapes_and_detail(self):
        err = ShapeMismatchError("matmul", (2, 3), (4,), detail="inner dimensions differ")
        self.assertEqual(
            str(err), "Shape mismatch in matmul: (2, 3) vs (4,) (inner dimensions differ)"
        )

    def test_message_without_shapes(self):
        err = ShapeMismatchError("sum", detail="axis 3 out of bounds for ndim 2")
        self.assertEqual(str(err), "Shape mismatch in sum (axis 3 out of bounds for ndim 2)")
        self.assertEqual(err.shapes, ())


class TestConstructionMismatchError(TestCase):
    def test_size_mismatch_message(self):
        err = ConstructionMismatchError((2, 2), 3)
        self.assertIsInstance(err, ValueError)
        self.assertEqual(err.shape, (2, 2))
        self.assertEqual(err.size, 3)
        self.assertEqual(str(err), "Data size 3 does not match shape (2, 2)")

    def test_detail_message(self):
        err = ConstructionMismatchError((), 0, "at least one dimension is required")
        self.assertIn("at least one dimension is required", str(err))


class TestInvalidConversionError(TestCase):
    def test_is_type_error_and_keeps_shape(self):
        err = InvalidConversionError((2, 3))
        self.assertIsInstance(err, TypeError)
        self.assertEqual(err.shape, (2, 3))
        self.assertIn("(2, 3)", str(err))


if __name__ == "__main__":
    unittest.main()
