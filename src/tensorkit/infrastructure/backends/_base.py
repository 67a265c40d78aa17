"""
Shared NumPy kernel implementations for backend providers.

`NumpyKernelBackend` implements every numeric kernel of the backend provider
contract on top of NumPy. Concrete providers only decide how results are
stored (`allocate`, `wrap`) and which capability tier they declare.

Kernels read tensors through ``tensor.to_numpy()`` (which honours offset and
shape) and return a `KernelResult`; they never mutate their inputs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from ...domain._backend import BackendCapability, KernelResult
from ...domain._buffer import IBuffer
from ...domain._dtype import DType
from ...domain._errors import InvalidShapeError, OutOfRangeError, UnsupportedOperationError
from ...domain.utils._index_math import safe_index

Scalar = Union[bool, int, float, complex]

_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.true_divide,
    "**": np.power,
    "%": np.mod,
}

_REDUCTIONS: dict[str, Callable[..., Any]] = {
    "mean": np.mean,
    "min": np.min,
    "max": np.max,
    "argmin": np.argmin,
    "argmax": np.argmax,
}


def _result_kind(source: DType, out: np.ndarray) -> DType:
    """
    Pick the element kind for a kernel output.

    Float and complex inputs keep their kind when NumPy did not widen to a
    complex result. Integer/bool inputs keep their kind when the output is
    still integral; otherwise the output becomes FLOAT32.
    """
    if out.dtype.kind == "c":
        return source if source.is_complex else DType.COMPLEX64
    if source.is_float or source.is_complex:
        return source
    if out.dtype.kind in ("i", "u", "b"):
        return DType.resolve(out.dtype)
    return DType.FLOAT32


class NumpyKernelBackend(ABC):
    """
    Base class for providers whose kernels run on NumPy.

    Subclasses must set `name` and `capability`, and implement `allocate`
    and `wrap`.
    """

    name: str = ""
    capability: BackendCapability = BackendCapability.NONE

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    @abstractmethod
    def allocate(self, size: int, dtype: DType) -> IBuffer:
        """Allocate a zero-filled buffer."""

    @abstractmethod
    def wrap(self, array: np.ndarray, dtype: Optional[DType] = None) -> IBuffer:
        """Adopt a NumPy array as a buffer of this provider."""

    def _result(self, out: Any, dtype: DType) -> KernelResult:
        # Results own their memory; NumPy may hand back a view of the input.
        arr = np.array(out, dtype=dtype.numpy, copy=True, order="C")
        return KernelResult(self.wrap(arr, dtype), dtype, tuple(arr.shape), 0)

    def fill(self, shape: Sequence[int], value: Scalar, dtype: DType) -> KernelResult:
        arr = np.full(tuple(shape), value, dtype=dtype.numpy)
        return self._result(arr, dtype)

    def astype(self, tensor: Any, dtype: DType) -> KernelResult:
        return self._result(tensor.to_numpy().astype(dtype.numpy), dtype)

    # ------------------------------------------------------------------
    # Elementwise
    # ------------------------------------------------------------------
    def elementwise_map(self, tensor: Any, fn: Callable[[Any], Any]) -> KernelResult:
        values = [fn(v) for v in tensor.to_flat_list()]
        out = np.asarray(values).reshape(tensor.shape)
        return self._result(out, _result_kind(tensor.dtype, out))

    def elementwise_op(self, tensor: Any, operator: str, other: Any) -> KernelResult:
        func = _OPERATORS.get(operator)
        if func is None:
            raise UnsupportedOperationError(
                "elementwise_op", f"unknown operator '{operator}'"
            )
        lhs = tensor.to_numpy()
        if hasattr(other, "to_numpy"):
            if tuple(other.shape) != tuple(tensor.shape):
                raise InvalidShapeError(
                    f"Unmatched shape for '{operator}': {tensor.shape} vs {other.shape}",
                    shape=other.shape,
                )
            rhs = other.to_numpy()
        else:
            rhs = other
        out = np.asarray(func(lhs, rhs))
        return self._result(out, _result_kind(tensor.dtype, out))

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    def reduce(
        self, tensor: Any, op: str, axis: Optional[int] = None
    ) -> Union[KernelResult, Scalar]:
        func = _REDUCTIONS.get(op)
        if func is None:
            raise UnsupportedOperationError("reduce", f"unknown reduction '{op}'")
        arr = tensor.to_numpy()

        if axis is None:
            return np.asarray(func(arr)).item()

        axis = safe_index(axis, tensor.ndim)
        out = np.asarray(func(arr, axis=axis, keepdims=True))
        if op.startswith("arg"):
            return self._result(out, DType.INT32)
        if op == "mean":
            return self._result(out, _result_kind(tensor.dtype, out))
        return self._result(out, tensor.dtype)

    # ------------------------------------------------------------------
    # Linear algebra
    # ------------------------------------------------------------------
    def scale(self, alpha: Scalar, tensor: Any) -> KernelResult:
        out = np.asarray(tensor.to_numpy() * alpha)
        return self._result(out, _result_kind(tensor.dtype, out))

    def transpose(self, tensor: Any, axes: Optional[Sequence[int]] = None) -> KernelResult:
        if axes is not None:
            axes = tuple(safe_index(a, tensor.ndim) for a in axes)
            if sorted(axes) != list(range(tensor.ndim)):
                raise InvalidShapeError(
                    f"Axes {tuple(axes)} are not a permutation of rank {tensor.ndim}",
                    shape=tensor.shape,
                )
        out = np.transpose(tensor.to_numpy(), axes)
        return self._result(np.ascontiguousarray(out), tensor.dtype)

    def dot(self, a: Any, b: Any) -> Scalar:
        if a.size() != b.size():
            raise InvalidShapeError(
                f"Unmatched size for dot: {a.size()} vs {b.size()}", shape=b.shape
            )
        return np.dot(a.to_numpy().ravel(), b.to_numpy().ravel()).item()

    def cross(self, a: Any, b: Any) -> KernelResult:
        try:
            out = np.cross(a.to_numpy(), b.to_numpy())
        except ValueError as exc:
            raise InvalidShapeError(str(exc), shape=b.shape) from exc
        return self._result(out, _result_kind(a.dtype, out))

    def squeeze(self, tensor: Any, axis: Optional[int] = None) -> KernelResult:
        shape = list(tensor.shape)
        if axis is None:
            shape = [d for d in shape if d != 1]
        else:
            axis = safe_index(axis, len(shape))
            if shape[axis] != 1:
                raise InvalidShapeError(
                    f"Cannot squeeze axis {axis} with size {shape[axis]}",
                    shape=tensor.shape,
                )
            del shape[axis]
        # Metadata-only: the result shares the input buffer.
        return KernelResult(tensor.buffer, tensor.dtype, tuple(shape), tensor.offset)

    def slice(self, tensor: Any, start: Sequence[int], size: Sequence[int]) -> KernelResult:
        if len(start) != len(size) or len(start) > tensor.ndim:
            raise OutOfRangeError(
                f"Invalid slice begin {tuple(start)} / size {tuple(size)} "
                f"for shape {tensor.shape}",
                index=(tuple(start), tuple(size)),
            )
        index = []
        for axis, (begin, extent) in enumerate(zip(start, size)):
            dim = tensor.shape[axis]
            begin = safe_index(begin, dim, axis)
            if extent < 0:
                extent = dim - begin
            if begin + extent > dim:
                raise OutOfRangeError(
                    f"Slice [{begin}, {begin + extent}) exceeds axis {axis} with size {dim}",
                    index=(begin, extent),
                    size=dim,
                    axis=axis,
                )
            index.append(slice(begin, begin + extent))
        out = tensor.to_numpy()[tuple(index)]
        return self._result(np.ascontiguousarray(out), tensor.dtype)

    def softmax(self, tensor: Any) -> KernelResult:
        if tensor.ndim != 2:
            raise UnsupportedOperationError("softmax", "expects a rank-2 tensor")
        x = tensor.to_numpy()
        shifted = x - np.max(x, axis=1, keepdims=True)
        e = np.exp(shifted)
        out = e / np.sum(e, axis=1, keepdims=True)
        return self._result(out, _result_kind(tensor.dtype, out))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, capability={self.capability.name})"
