import math
import unittest
from unittest import TestCase

import numpy as np

from tensorkit import (
    DType,
    InvalidShapeError,
    OutOfRangeError,
    Tensor,
    UnsupportedOperationError,
    use_backend,
)


class TestTensorNorm(TestCase):
    def test_global_norms(self):
        v = Tensor([3, -4])
        n = v.norm()
        self.assertEqual(n.shape, ())
        self.assertAlmostEqual(n.item(), 5.0, places=5)
        self.assertAlmostEqual(v.norm(1).item(), 7.0, places=5)
        self.assertAlmostEqual(v.norm(math.inf).item(), 4.0, places=5)

    def test_non_positive_order_rejected(self):
        for order in (0, -1):
            with self.assertRaises(UnsupportedOperationError):
                Tensor([1, 2]).norm(order)

    def test_axis_norms(self):
        m = Tensor([[3, 4], [6, 8]])
        np.testing.assert_allclose(m.norm(axis=1).to_numpy(), [5.0, 10.0], rtol=1e-6)
        np.testing.assert_allclose(
            m.norm(axis=0).to_numpy(), [math.sqrt(45), math.sqrt(80)], rtol=1e-6
        )
        self.assertEqual(m.norm(axis=1, keep_shape=True).shape, (2, 1))
        self.assertEqual(m.norm(axis=-1).shape, (2,))
        with self.assertRaises(OutOfRangeError):
            m.norm(axis=2)

    def test_higher_order_matches_numpy(self):
        x = np.random.randn(3, 4).astype(np.float32)
        ref = np.sum(np.abs(x) ** 3, axis=0) ** (1.0 / 3)
        np.testing.assert_allclose(Tensor(x).norm(3, axis=0).to_numpy(), ref, rtol=1e-5)

    def test_complex_and_float64_kinds(self):
        self.assertIs(Tensor([3 + 4j], dtype="complex128").norm().dtype, DType.FLOAT64)
        self.assertAlmostEqual(Tensor([3 + 4j], dtype="complex64").norm().item(), 5.0, places=5)


class TestTensorNormalize(TestCase):
    def test_normalize_vector(self):
        for name in ("numpy", "python"):
            with self.subTest(backend=name), use_backend(name):
                out = Tensor([3, 4]).normalize()
                np.testing.assert_allclose(out.to_numpy(), [0.6, 0.8], rtol=1e-6)

    def test_normalize_rows(self):
        x = np.random.rand(3, 5).astype(np.float32) + 0.1
        out = Tensor(x).normalize(axis=1).to_numpy()
        np.testing.assert_allclose(np.linalg.norm(out, axis=1), np.ones(3), rtol=1e-5)

    def test_zero_norm_is_clamped(self):
        out = Tensor([[0, 0], [3, 4]]).normalize(axis=1).to_numpy()
        self.assertFalse(np.isnan(out).any())
        np.testing.assert_allclose(out, [[0.0, 0.0], [0.6, 0.8]], rtol=1e-6)

    def test_integer_input_becomes_float(self):
        self.assertIs(Tensor([3, 4], dtype="int32").normalize().dtype, DType.FLOAT32)


class TestTensorStatistics(TestCase):
    def setUp(self) -> None:
        self.m = Tensor([[1, 5], [3, 2]])

    def test_global_reductions_return_scalars(self):
        self.assertAlmostEqual(self.m.mean(), 2.75)
        self.assertEqual(self.m.max(), 5.0)
        self.assertEqual(self.m.min(), 1.0)
        self.assertEqual(self.m.argmax(), 1)
        self.assertEqual(self.m.argmin(), 0)

    def test_axis_reductions_strip_axis(self):
        for name in ("numpy", "python"):
            with self.subTest(backend=name), use_backend(name):
                m = Tensor([[1, 5], [3, 2]])
                self.assertEqual(m.max(axis=0).to_list(), [3.0, 5.0])
                self.assertEqual(m.min(axis=1).to_list(), [1.0, 2.0])
                self.assertEqual(m.mean(axis=0).to_list(), [2.0, 3.5])
                self.assertEqual(m.max(axis=0, keep_shape=True).shape, (1, 2))

    def test_arg_reductions_are_int32(self):
        idx = self.m.argmax(axis=1)
        self.assertIs(idx.dtype, DType.INT32)
        self.assertEqual(idx.to_list(), [1, 0])
        self.assertEqual(self.m.argmin(axis=-1, keep_shape=True).to_list(), [[0], [1]])


class TestTensorTopK(TestCase):
    def test_topk_vector(self):
        for name in ("numpy", "python"):
            with self.subTest(backend=name), use_backend(name):
                values, indices = Tensor([3, 1, 4, 1, 5, 9, 2, 6]).topk(3)
                self.assertEqual(values.to_list(), [9.0, 6.0, 5.0])
                self.assertEqual(indices.to_list(), [5, 7, 4])
                self.assertIs(indices.dtype, DType.INT32)
                self.assertEqual(values.shape, (3,))

    def test_topk_matrix_rows(self):
        values, indices = Tensor([[1, 3, 2], [9, 7, 8]]).topk(2)
        self.assertEqual(values.to_list(), [[3.0, 2.0], [9.0, 8.0]])
        self.assertEqual(indices.to_list(), [[1, 2], [0, 2]])

    def test_topk_default_k_sorts_whole_row(self):
        values, indices = Tensor([2, 7, 1]).topk()
        self.assertEqual(values.to_list(), [7.0, 2.0, 1.0])
        self.assertEqual(indices.to_list(), [1, 0, 2])

    def test_topk_unsorted_keeps_same_entries(self):
        values, indices = Tensor([3, 1, 4, 1, 5, 9, 2, 6]).topk(3, sorted=False)
        self.assertEqual(sorted(values.to_list()), [5.0, 6.0, 9.0])
        self.assertEqual(sorted(indices.to_list()), [4, 5, 7])

    def test_topk_of_view_honours_offset(self):
        m = Tensor([[0, 0, 0], [1, 3, 2]])
        values, indices = m[1:].topk(2)
        self.assertEqual(values.to_list(), [[3.0, 2.0]])
        self.assertEqual(indices.to_list(), [[1, 2]])

    def test_topk_edge_cases(self):
        values, _ = Tensor([1, 2]).topk(0)
        self.assertEqual(values.shape, (0,))
        with self.assertRaises(OutOfRangeError):
            Tensor([1, 2]).topk(3)
        with self.assertRaises(OutOfRangeError):
            Tensor([1, 2]).topk(-1)
        with self.assertRaises(UnsupportedOperationError):
            Tensor(shape=(2, 2, 2)).topk(1)

    def test_topk_accepts_numpy_integers(self):
        values, indices = Tensor([3, 1, 4, 1, 5, 9, 2, 6]).topk(np.int64(3))
        self.assertEqual(values.shape, (3,))
        self.assertEqual(values.to_list(), [9.0, 6.0, 5.0])
        self.assertEqual(indices.to_list(), [5, 7, 4])


class TestTensorMeanPooling(TestCase):
    def test_masked_mean(self):
        x = Tensor(np.arange(12).reshape(2, 3, 2))
        mask = Tensor([[1, 1, 0], [0, 0, 0]], dtype="int32")
        out = x.mean_pooling(mask)
        self.assertEqual(out.shape, (2, 2))
        np.testing.assert_allclose(out.to_numpy(), [[1.0, 2.0], [0.0, 0.0]])

    def test_shape_validation(self):
        x = Tensor(shape=(2, 3, 2))
        with self.assertRaises(InvalidShapeError):
            x.mean_pooling(Tensor(shape=(2, 2)))
        with self.assertRaises(InvalidShapeError):
            Tensor(shape=(2, 3)).mean_pooling(Tensor(shape=(2, 3)))


if __name__ == "__main__":
    unittest.main()
