import unittest
from unittest import TestCase

import numpy as np

from tensorkit import InvalidShapeError, OutOfRangeError, Tensor, use_backend


class TestTensorSlice(TestCase):
    def setUp(self) -> None:
        self.a = Tensor(np.arange(12).reshape(3, 4))

    def test_pair_slices_copy(self):
        for name in ("numpy", "python"):
            with self.subTest(backend=name), use_backend(name):
                a = Tensor(np.arange(12).reshape(3, 4))
                s = a.slice([0, 2], [1, 3])
                self.assertEqual(s.to_list(), [[1.0, 2.0], [5.0, 6.0]])
                self.assertEqual(s.offset, 0)
                self.assertIsNot(s.buffer, a.buffer)

    def test_integer_spec_keeps_axis(self):
        s = self.a.slice(1)
        self.assertEqual(s.shape, (1, 4))
        self.assertEqual(s.to_list(), [[4.0, 5.0, 6.0, 7.0]])
        self.assertEqual(self.a.slice(None, -1).to_list(), [[3.0], [7.0], [11.0]])

    def test_pairs_are_clamped(self):
        self.assertEqual(self.a.slice([1, 10]).shape, (2, 4))
        self.assertEqual(self.a.slice([-3, 1]).shape, (1, 4))
        self.assertEqual(self.a.slice(slice(1, None)).shape, (2, 4))

    def test_invalid_slices(self):
        with self.assertRaises(OutOfRangeError):
            self.a.slice([2, 1])
        with self.assertRaises(OutOfRangeError):
            self.a.slice(None, None, None)
        with self.assertRaises(OutOfRangeError):
            self.a.slice(3)
        with self.assertRaises(OutOfRangeError):
            self.a.slice("x")

    def test_slice_of_view_honours_offset(self):
        v = self.a[1:3]
        self.assertEqual(v.slice(None, [0, 2]).to_list(), [[4.0, 5.0], [8.0, 9.0]])

    def test_slice_does_not_mutate_source(self):
        before = self.a.to_list()
        s = self.a.slice([0, 1])
        s[0] = Tensor([9, 9, 9, 9])
        self.assertEqual(self.a.to_list(), before)

    def test_new_slice_delegates_to_backend(self):
        s = self.a.new_slice([1, 0], [2, -1])
        self.assertEqual(s.to_list(), [[4.0, 5.0, 6.0, 7.0], [8.0, 9.0, 10.0, 11.0]])
        with self.assertRaises(OutOfRangeError):
            self.a.new_slice([2, 0], [2, 4])

    def test_python_slices_wrap_negative_bounds(self):
        v = Tensor([1, 2, 3, 4])
        self.assertEqual(v.slice(slice(-2, None)).to_list(), [3.0, 4.0])
        self.assertEqual(v.slice(slice(None, -1)).to_list(), [1.0, 2.0, 3.0])
        self.assertEqual(v.slice(slice(-10, 10)).to_list(), [1.0, 2.0, 3.0, 4.0])
        self.assertEqual(v.slice(slice(3, 1)).shape, (0,))
        self.assertEqual(self.a.slice(None, slice(-1, None)).to_list(), [[3.0], [7.0], [11.0]])

    def test_full_window_new_slice_owns_memory(self):
        for name in ("numpy", "python"):
            with self.subTest(backend=name), use_backend(name):
                t = Tensor([[1, 2], [3, 4]])
                s = t.new_slice([0, 0], [-1, -1])
                s[0] = Tensor([7, 7])
                self.assertEqual(t.to_list(), [[1.0, 2.0], [3.0, 4.0]])
                self.assertEqual(s.to_list(), [[7.0, 7.0], [3.0, 4.0]])


class TestTensorReshapeAndAxes(TestCase):
    def test_reshape_preserves_order_and_buffer(self):
        t = Tensor([1, 2, 3, 4, 5, 6])
        r = t.reshape((2, 3))
        self.assertEqual(r.to_list(), [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        self.assertIs(r.buffer, t.buffer)
        self.assertEqual(r.reshape((6,)).to_list(), t.to_list())

    def test_reshape_size_mismatch(self):
        with self.assertRaises(InvalidShapeError):
            Tensor([1, 2, 3, 4, 5, 6]).reshape((4,))

    def test_reshape_view_keeps_offset(self):
        m = Tensor([[1, 2], [3, 4], [5, 6]])
        r = m[1:].reshape((4,))
        self.assertEqual(r.offset, 2)
        self.assertEqual(r.to_list(), [3.0, 4.0, 5.0, 6.0])

    def test_unsqueeze_and_squeeze(self):
        t = Tensor([1, 2, 3])
        self.assertEqual(t.unsqueeze(0).shape, (1, 3))
        self.assertEqual(t.unsqueeze(-1).shape, (3, 1))
        self.assertIs(t.unsqueeze(0).buffer, t.buffer)

        u = Tensor(shape=(1, 3, 1))
        self.assertEqual(u.squeeze().shape, (3,))
        self.assertEqual(u.squeeze(0).shape, (3, 1))
        self.assertIs(u.squeeze().buffer, u.buffer)
        with self.assertRaises(InvalidShapeError):
            u.squeeze(1)

    def test_permute_and_transpose(self):
        m = Tensor([[1, 2, 3], [4, 5, 6]])
        expected = [[1.0, 4.0], [2.0, 5.0], [3.0, 6.0]]
        self.assertEqual(m.permute(1, 0).to_list(), expected)
        self.assertEqual(m.permute((1, 0)).to_list(), expected)
        self.assertEqual(m.transpose().to_list(), expected)
        with self.assertRaises(InvalidShapeError):
            m.permute(0, 0)

        t = Tensor(np.arange(24).reshape(2, 3, 4))
        np.testing.assert_array_equal(
            t.permute(2, 0, 1).to_numpy(),
            np.transpose(np.arange(24, dtype=np.float32).reshape(2, 3, 4), (2, 0, 1)),
        )

    def test_axis_reorders_are_independent_copies(self):
        v = Tensor([1, 2, 3])
        p = v.transpose()
        p[0] = 9
        self.assertEqual(v[0], 1.0)
        self.assertIsNot(p.buffer, v.buffer)

        m = Tensor([[1, 2], [3, 4]])
        q = m.permute(0, 1)
        q[0] = Tensor([7, 7])
        self.assertEqual(m.to_list(), [[1.0, 2.0], [3.0, 4.0]])
        self.assertEqual(q.to_list(), [[7.0, 7.0], [3.0, 4.0]])


if __name__ == "__main__":
    unittest.main()
