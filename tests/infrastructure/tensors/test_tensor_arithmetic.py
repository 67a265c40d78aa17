import unittest
from unittest import TestCase

import numpy as np

from tensorkit import (
    DType,
    InvalidShapeError,
    Tensor,
    UnsupportedOperationError,
    use_backend,
)


class TestTensorElementwise(TestCase):
    def test_add_scalar_and_tensor(self):
        for name in ("numpy", "python"):
            with self.subTest(backend=name), use_backend(name):
                a = Tensor([1, 2, 3])
                self.assertEqual(a.add(1).to_list(), [2.0, 3.0, 4.0])
                self.assertEqual((a + a).to_list(), [2.0, 4.0, 6.0])
                self.assertEqual((10 + a).to_list(), [11.0, 12.0, 13.0])

    def test_add_shape_mismatch(self):
        with self.assertRaises(InvalidShapeError):
            Tensor([1, 2]) + Tensor([1, 2, 3])

    def test_scale_and_divide(self):
        a = Tensor([2, 4])
        self.assertEqual(a.multiply(3).to_list(), [6.0, 12.0])
        self.assertEqual((a * 0.5).to_list(), [1.0, 2.0])
        self.assertEqual((2 * a).to_list(), [4.0, 8.0])
        self.assertEqual((a / 2).to_list(), [1.0, 2.0])
        with self.assertRaises(ZeroDivisionError):
            a.divide(0)

    def test_add_on_view_leaves_source(self):
        m = Tensor([[1, 2], [3, 4]])
        out = m[1] + 1
        self.assertEqual(out.to_list(), [4.0, 5.0])
        self.assertEqual(m.to_list(), [[1.0, 2.0], [3.0, 4.0]])

    def test_sigmoid(self):
        out = Tensor([0, -1000, 1000]).sigmoid().to_numpy()
        np.testing.assert_allclose(out, [0.5, 0.0, 1.0], atol=1e-7)

    def test_clamp(self):
        self.assertEqual(
            Tensor([-2, 0.5, 3]).clamp(-1, 1).to_list(), [-1.0, 0.5, 1.0]
        )
        with self.assertRaises(ValueError):
            Tensor([1]).clamp(2, 1)

    def test_round_half_away_from_zero(self):
        out = Tensor([0.5, 1.5, -0.5, 2.4, -2.6]).round()
        self.assertEqual(out.to_list(), [1.0, 2.0, -1.0, 2.0, -3.0])
        self.assertIs(out.dtype, DType.FLOAT32)
        ints = Tensor([1, 2], dtype="int32").round()
        self.assertEqual(ints.to_list(), [1, 2])
        with self.assertRaises(UnsupportedOperationError):
            Tensor([1j], dtype="complex64").round()

    def test_to_converts_kind(self):
        a = Tensor([1.7, -2.2])
        self.assertIs(a.to("float32"), a)
        b = a.to("int32")
        self.assertIs(b.dtype, DType.INT32)
        self.assertEqual(b.to_list(), [1, -2])


class TestTensorLinearAlgebra(TestCase):
    def test_dot(self):
        self.assertEqual(Tensor([1, 2, 3]).dot(Tensor([4, 5, 6])), 32.0)
        with self.assertRaises(InvalidShapeError):
            Tensor([1, 2]).dot(Tensor([1, 2, 3]))

    def test_cross(self):
        out = Tensor([1, 0, 0]).cross(Tensor([0, 1, 0]))
        self.assertEqual(out.to_list(), [0.0, 0.0, 1.0])

    def test_softmax(self):
        np.testing.assert_allclose(Tensor([0, 0]).softmax().to_numpy(), [0.5, 0.5])
        out = Tensor(np.random.randn(3, 4)).softmax().to_numpy()
        np.testing.assert_allclose(out.sum(axis=1), np.ones(3), rtol=1e-6)
        with self.assertRaises(UnsupportedOperationError):
            Tensor(shape=(2, 2, 2)).softmax()


if __name__ == "__main__":
    unittest.main()
