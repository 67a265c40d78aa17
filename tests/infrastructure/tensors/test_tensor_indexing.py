import unittest
from unittest import TestCase

import numpy as np

from tensorkit import (
    InvalidDTypeError,
    InvalidShapeError,
    OutOfRangeError,
    Range,
    Tensor,
    UnsupportedOperationError,
    reset_config,
    set_range_style,
    use_backend,
)


class TestTensorGetItem(TestCase):
    def setUp(self) -> None:
        self.m = Tensor([[1, 2], [3, 4], [5, 6]])

    def test_negative_integer_index(self):
        v = Tensor([1, 2, 3, 4])
        self.assertEqual(v[-1], 4.0)
        self.assertEqual(v[0], 1.0)
        with self.assertRaises(OutOfRangeError):
            v[-5]
        with self.assertRaises(OutOfRangeError):
            v[4]

    def test_integer_index_returns_view(self):
        row = self.m[1]
        self.assertIs(row.buffer, self.m.buffer)
        self.assertEqual(row.offset, 2)
        self.assertEqual(row.shape, (2,))
        self.assertEqual(row.to_list(), [3.0, 4.0])

    def test_views_are_idempotent(self):
        self.assertEqual(self.m[2][1], 6.0)
        self.assertEqual(self.m[2][1], self.m[2][1])
        self.assertEqual(self.m.to_list(), [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])

    def test_nested_view_offsets_accumulate(self):
        t = Tensor(np.arange(24).reshape(2, 3, 4))
        inner = t[1][2]
        self.assertEqual(inner.offset, 20)
        self.assertEqual(inner.to_list(), [20.0, 21.0, 22.0, 23.0])

    def test_range_keys(self):
        self.assertEqual(self.m[[0, 2]].shape, (2, 2))
        self.assertEqual(self.m[(0, 2)].to_list(), [[1.0, 2.0], [3.0, 4.0]])
        r = self.m[Range(1, 3)]
        self.assertEqual(r.offset, 2)
        self.assertEqual(r.to_list(), [[3.0, 4.0], [5.0, 6.0]])
        self.assertEqual(self.m[1:].shape, (2, 2))
        self.assertEqual(self.m[-2:].offset, 2)
        self.assertEqual(self.m[:].shape, (3, 2))

    def test_invalid_range_keys(self):
        with self.assertRaises(OutOfRangeError):
            self.m[[2, 1]]
        with self.assertRaises(OutOfRangeError):
            self.m[[0, 4]]
        with self.assertRaises(OutOfRangeError):
            self.m[::2]

    def test_invalid_key_types(self):
        for key in ("a", 1.5, [0, 1, 2], None):
            with self.assertRaises(OutOfRangeError):
                self.m[key]

    def test_rank_zero_rejects_indexing(self):
        with self.assertRaises(OutOfRangeError):
            Tensor(1.0)[0]

    def test_python_backend_views(self):
        with use_backend("python"):
            m = Tensor([[1, 2], [3, 4]])
            self.assertIs(m[1].buffer, m.buffer)
            self.assertEqual(m[1][0], 3.0)


class TestTensorInclusiveRanges(TestCase):
    def tearDown(self) -> None:
        reset_config()

    def test_inclusive_pairs(self):
        set_range_style("inclusive")
        m = Tensor([[1, 2], [3, 4], [5, 6]])
        self.assertEqual(m[[0, 1]].shape, (2, 2))
        self.assertEqual(m[[0, 2]].shape, (3, 2))
        with self.assertRaises(OutOfRangeError):
            m[[0, 3]]
        # slices keep their exclusive upper bound
        self.assertEqual(m[0:1].shape, (1, 2))


class TestTensorSetItem(TestCase):
    def test_scalar_write(self):
        v = Tensor([1, 2, 3])
        v[1] = 9
        v[-1] = 7.5
        self.assertEqual(v.to_list(), [1.0, 9.0, 7.5])

    def test_write_through_view_is_shared(self):
        m = Tensor([[1, 2], [3, 4]])
        row = m[1]
        row[0] = 7
        self.assertEqual(m.to_list(), [[1.0, 2.0], [7.0, 4.0]])

    def test_tensor_write_into_row(self):
        m = Tensor([[1, 2], [3, 4]])
        m[0] = Tensor([8, 9])
        self.assertEqual(m.to_list(), [[8.0, 9.0], [3.0, 4.0]])
        with self.assertRaises(InvalidShapeError):
            m[0] = Tensor([1, 2, 3])
        with self.assertRaises(InvalidShapeError):
            m[0] = 5

    def test_range_write_rejected(self):
        v = Tensor([1, 2, 3])
        with self.assertRaises(UnsupportedOperationError):
            v[[0, 2]] = 1
        with self.assertRaises(UnsupportedOperationError):
            v[0:2] = 1

    def test_kind_checked_writes(self):
        c = Tensor([1j, 2j], dtype="complex64")
        with self.assertRaises(InvalidDTypeError):
            c[0] = 1.0
        c[0] = 3 + 1j
        self.assertEqual(c[0], 3 + 1j)

        r = Tensor([1.0, 2.0])
        with self.assertRaises(InvalidDTypeError):
            r[0] = 1j
        with self.assertRaises(InvalidDTypeError):
            r[0] = "x"

    def test_out_of_range_write(self):
        v = Tensor([1, 2, 3])
        with self.assertRaises(OutOfRangeError):
            v[3] = 1

    def test_delete_rejected(self):
        v = Tensor([1, 2, 3])
        with self.assertRaises(UnsupportedOperationError):
            del v[0]


class TestTensorIndexExistsAndIteration(TestCase):
    def test_index_exists(self):
        v = Tensor([1, 2, 3])
        self.assertTrue(v.index_exists(2))
        self.assertTrue(v.index_exists(-3))
        self.assertFalse(v.index_exists(3))
        self.assertFalse(v.index_exists(-4))
        self.assertTrue(v.index_exists([0, 3]))
        self.assertFalse(v.index_exists([0, 4]))
        self.assertFalse(v.index_exists("a"))

    def test_iteration(self):
        self.assertEqual([x for x in Tensor([1, 2, 3])], [1.0, 2.0, 3.0])
        rows = list(Tensor([[1, 2], [3, 4]]))
        self.assertEqual([r.to_list() for r in rows], [[1.0, 2.0], [3.0, 4.0]])

    def test_rank0_iteration_is_empty(self):
        self.assertEqual(list(Tensor(5.0)), [])


if __name__ == "__main__":
    unittest.main()
