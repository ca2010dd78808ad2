from unittest import TestCase
import unittest

import numpy as np

from src.rashgrad import _config
from src.rashgrad.domain._errors import (
    ConstructionMismatchError,
    InvalidConversionError,
    ShapeMismatchError,
)
from src.rashgrad.infrastructure.ndarray import NDArray


class TestNDArrayConstruction(TestCase):
    def test_flat_data_with_shape(self):
        a = NDArray([1, 2, 3, 4, 5, 6], (2, 3))
        self.assertEqual(a.shape, (2, 3))
        self.assertEqual(a.ndim, 2)
        self.assertEqual(a.numel(), 6)
        self.assertEqual(a.strides, (3, 1))
        self.assertEqual(a.to_list(), [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

    def test_flat_data_without_shape_is_1d(self):
        self.assertEqual(NDArray([1, 2, 3]).shape, (3,))

    def test_nested_data_keeps_nesting(self):
        a = NDArray([[1, 2, 3], [4, 5, 6]])
        self.assertEqual(a.shape, (2, 3))
        self.assertEqual(a.to_list(), [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        self.assertEqual(NDArray([[1, 2], [3, 4]], (4,)).shape, (4,))

    def test_scalar_is_shape_one(self):
        a = NDArray(2.5)
        self.assertEqual(a.shape, (1,))
        self.assertEqual(a.item(), 2.5)
        self.assertEqual(NDArray.from_scalar(4).to_list(), [4.0])

    def test_size_mismatch_raises(self):
        with self.assertRaises(ConstructionMismatchError) as cm:
            NDArray([1, 2, 3], (2, 2))
        self.assertEqual(cm.exception.shape, (2, 2))
        self.assertEqual(cm.exception.size, 3)

    def test_empty_shape_raises(self):
        with self.assertRaises(ConstructionMismatchError):
            NDArray([1.0], ())

    def test_non_numeric_data_raises(self):
        with self.assertRaises(TypeError):
            NDArray(["a", "b"])

    def test_zero_sized(self):
        a = NDArray([], (0,))
        self.assertEqual(a.numel(), 0)
        self.assertEqual(a.shape, (0,))

    def test_data_is_copied(self):
        src = np.array([1.0, 2.0])
        a = NDArray(src)
        src[0] = 99.0
        self.assertEqual(a.to_list(), [1.0, 2.0])

    def test_dtype_is_float64(self):
        a = NDArray([1, 2])
        self.assertEqual(a.to_numpy().dtype, _config.DTYPE)


class TestNDArrayFactories(TestCase):
    def test_zeros_ones_full(self):
        self.assertEqual(NDArray.zeros((2, 2)).to_list(), [0.0] * 4)
        self.assertEqual(NDArray.ones(3).to_list(), [1.0] * 3)
        f = NDArray.full((2, 1), 3.5)
        self.assertEqual(f.shape, (2, 1))
        self.assertEqual(f.to_list(), [3.5, 3.5])

    def test_rand_in_unit_interval_and_seedable(self):
        _config.manual_seed(0)
        a = NDArray.rand((3, 4))
        _config.manual_seed(0)
        b = NDArray.rand((3, 4))
        self.assertEqual(a.shape, (3, 4))
        np.testing.assert_array_equal(a.to_numpy(), b.to_numpy())
        self.assertTrue(np.all(a.to_numpy() >= 0.0))
        self.assertTrue(np.all(a.to_numpy() < 1.0))

    def test_from_numpy_keeps_shape(self):
        arr = np.arange(6, dtype=np.float64).reshape(2, 3)
        a = NDArray.from_numpy(arr)
        self.assertEqual(a.shape, (2, 3))
        np.testing.assert_array_equal(a.to_numpy(), arr)

    def test_from_numpy_zero_dim(self):
        a = NDArray.from_numpy(np.array(3.0))
        self.assertEqual(a.shape, (1,))
        self.assertEqual(a.item(), 3.0)


class TestNDArrayConversion(TestCase):
    def test_item_requires_single_element(self):
        with self.assertRaises(InvalidConversionError):
            NDArray([1.0, 2.0]).item()

    def test_float_conversion(self):
        self.assertEqual(float(NDArray([2.0])), 2.0)
        self.assertEqual(NDArray([7.0], (1, 1)).item(), 7.0)
        with self.assertRaises(InvalidConversionError):
            float(NDArray.zeros((2, 2)))

    def test_to_numpy_is_a_copy(self):
        a = NDArray([1.0, 2.0])
        out = a.to_numpy()
        out[0] = 5.0
        self.assertEqual(a.to_list(), [1.0, 2.0])


class TestNDArrayInPlace(TestCase):
    def test_accumulate(self):
        g = NDArray.zeros((2,))
        g.accumulate_(NDArray([1.0, 2.0]))
        g.accumulate_(NDArray([1.0, 2.0]))
        self.assertEqual(g.to_list(), [2.0, 4.0])

    def test_accumulate_requires_identical_shape(self):
        g = NDArray.zeros((2, 1))
        with self.assertRaises(ShapeMismatchError):
            g.accumulate_(NDArray([1.0, 2.0]))

    def test_fill(self):
        g = NDArray([1.0, 2.0, 3.0])
        g.fill_(0.0)
        self.assertEqual(g.to_list(), [0.0, 0.0, 0.0])

    def test_copy_is_independent(self):
        a = NDArray([1.0, 2.0])
        b = a.copy()
        b.fill_(9.0)
        self.assertEqual(a.to_list(), [1.0, 2.0])


if __name__ == "__main__":
    unittest.main()
