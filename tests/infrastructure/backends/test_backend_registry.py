import unittest
from unittest import TestCase

from tensorkit import (
    BackendCapability,
    InvalidShapeError,
    OutOfRangeError,
    Tensor,
    UnsupportedOperationError,
)
from tensorkit.domain import IBackend
from tensorkit.infrastructure.backends import (
    BACKEND_REGISTRY,
    NumpyBackend,
    PythonBackend,
    available_backends,
    backend_for_buffer,
    get_backend,
    register_backend,
    set_backend,
    use_backend,
)


class _Unnamed(NumpyBackend):
    name = ""


class _BadCapability(NumpyBackend):
    name = "bad-capability"
    capability = 2


class TestBackendRegistry(TestCase):
    def tearDown(self) -> None:
        BACKEND_REGISTRY.pop(_BadCapability.name, None)

    def test_builtin_providers(self):
        self.assertIn("numpy", available_backends())
        self.assertIn("python", available_backends())
        self.assertIs(get_backend("numpy").capability, BackendCapability.ADVANCED)
        self.assertIs(get_backend("python").capability, BackendCapability.BASIC)

    def test_default_backend_is_numpy(self):
        self.assertEqual(get_backend().name, "numpy")

    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            get_backend("cuda")
        with self.assertRaises(ValueError):
            set_backend("cuda")

    def test_register_rejects_bad_declarations(self):
        with self.assertRaises(TypeError):
            register_backend(_Unnamed())
        with self.assertRaises(TypeError):
            register_backend(_BadCapability())
        self.assertNotIn(_BadCapability.name, BACKEND_REGISTRY)

    def test_set_backend_returns_previous(self):
        previous = set_backend("python")
        try:
            self.assertEqual(previous.name, "numpy")
            self.assertEqual(get_backend().name, "python")
        finally:
            set_backend(previous)
        self.assertEqual(get_backend().name, "numpy")

    def test_use_backend_restores_on_error(self):
        with self.assertRaises(RuntimeError):
            with use_backend("python") as backend:
                self.assertIsInstance(backend, PythonBackend)
                raise RuntimeError("boom")
        self.assertEqual(get_backend().name, "numpy")

    def test_providers_satisfy_protocol(self):
        self.assertIsInstance(NumpyBackend(), IBackend)
        self.assertIsInstance(PythonBackend(), IBackend)

    def test_backend_for_buffer(self):
        with use_backend("python"):
            p = Tensor([1, 2])
        n = Tensor([1, 2])
        self.assertEqual(backend_for_buffer(p.buffer).name, "python")
        self.assertEqual(backend_for_buffer(n.buffer).name, "numpy")
        self.assertEqual(p.backend.name, "python")


class TestKernelErrors(TestCase):
    def setUp(self) -> None:
        self.backend = get_backend("numpy")
        self.t = Tensor([[1, 2, 3], [4, 5, 6]])

    def test_unknown_reduction(self):
        with self.assertRaises(UnsupportedOperationError):
            self.backend.reduce(self.t, "median")

    def test_unknown_operator(self):
        with self.assertRaises(UnsupportedOperationError):
            self.backend.elementwise_op(self.t, "@", 2)

    def test_operand_shape_mismatch(self):
        with self.assertRaises(InvalidShapeError):
            self.backend.elementwise_op(self.t, "+", Tensor([1, 2]))

    def test_bad_transpose_axes(self):
        with self.assertRaises(InvalidShapeError):
            self.backend.transpose(self.t, (0, 0))

    def test_slice_out_of_range(self):
        with self.assertRaises(OutOfRangeError):
            self.backend.slice(self.t, [1, 0], [2, 3])
        with self.assertRaises(OutOfRangeError):
            self.backend.slice(self.t, [0], [1, 1])

    def test_softmax_rank(self):
        with self.assertRaises(UnsupportedOperationError):
            self.backend.softmax(Tensor([[[1.0]]]))

    def test_squeeze_non_unit_axis(self):
        with self.assertRaises(InvalidShapeError):
            self.backend.squeeze(self.t, 0)

    def test_python_provider_results_live_in_lists(self):
        with use_backend("python"):
            result = Tensor([[1, 2], [3, 4]]).transpose()
        self.assertEqual(result.backend.name, "python")
        self.assertEqual(result.to_list(), [[1.0, 3.0], [2.0, 4.0]])


if __name__ == "__main__":
    unittest.main()
