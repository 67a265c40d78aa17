"""
Backend provider interface definitions.

A backend provider supplies buffer allocation and every numeric kernel the
tensor core needs (elementwise maps, reductions, linear algebra). The core
never computes these itself: it only validates inputs, calls the provider,
and wraps the provider's `KernelResult` back into a tensor.

Each provider declares a fixed `BackendCapability` tier. The tier decides how
buffers are cloned and transferred across providers, and is validated once
when the provider is registered rather than discovered from live objects.
"""

from __future__ import annotations

from enum import IntEnum
from typing import (
    Any,
    Callable,
    NamedTuple,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Union,
    runtime_checkable,
)

from ._buffer import IBuffer
from ._dtype import DType


class BackendCapability(IntEnum):
    """
    Declared level of buffer transfer support.

    Attributes
    ----------
    NONE : BackendCapability
        Buffers offer no copy primitive. Cloning fails.
    BASIC : BackendCapability
        Buffers can be copied element by element (``buffer.copy()``).
    ADVANCED : BackendCapability
        Buffers support bulk ``dump() -> bytes`` / ``load(bytes)``.
    """

    NONE = 0
    BASIC = 1
    ADVANCED = 2


class KernelResult(NamedTuple):
    """
    Backend-neutral description of a kernel output.

    Tensors wrap a `KernelResult` into a new tensor without copying.

    Attributes
    ----------
    buffer : IBuffer
        Storage holding the result.
    dtype : DType
        Element kind of the result.
    shape : tuple[int, ...]
        Logical shape of the result.
    offset : int
        Position of the result's first element inside `buffer`.
    """

    buffer: IBuffer
    dtype: DType
    shape: Tuple[int, ...]
    offset: int = 0


Scalar = Union[bool, int, float, complex]


@runtime_checkable
class IBackend(Protocol):
    """
    Backend provider contract consumed by the tensor core.

    Notes
    -----
    Tensor arguments are typed as ``Any`` to avoid a dependency from the
    domain protocol on the concrete tensor. Providers may rely on the
    `ITensor` surface (`buffer`, `offset`, `shape`, `dtype`, `to_numpy`).
    """

    name: str
    capability: BackendCapability

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    def allocate(self, size: int, dtype: DType) -> IBuffer:
        """Allocate a zero-filled buffer of `size` slots."""
        ...

    def wrap(self, array: Any, dtype: Optional[DType] = None) -> IBuffer:
        """Adopt a 1-D NumPy array (e.g., a kernel output) as a buffer."""
        ...

    def fill(self, shape: Sequence[int], value: Scalar, dtype: DType) -> KernelResult:
        """Allocate a buffer of `shape` filled with `value`."""
        ...

    def astype(self, tensor: Any, dtype: DType) -> KernelResult:
        """Convert the tensor's elements to another element kind."""
        ...

    # ------------------------------------------------------------------
    # Elementwise
    # ------------------------------------------------------------------
    def elementwise_map(self, tensor: Any, fn: Callable[[Any], Any]) -> KernelResult:
        """Apply a scalar function to every element."""
        ...

    def elementwise_op(self, tensor: Any, operator: str, other: Any) -> KernelResult:
        """Combine the tensor with a scalar or same-shape tensor."""
        ...

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    def reduce(
        self, tensor: Any, op: str, axis: Optional[int] = None
    ) -> Union[KernelResult, Scalar]:
        """
        Reduce with ``op`` in ``{"mean", "min", "max", "argmin", "argmax"}``.

        Returns a scalar when `axis` is None, otherwise a result whose shape
        keeps the reduced axis with extent 1.
        """
        ...

    # ------------------------------------------------------------------
    # Linear algebra
    # ------------------------------------------------------------------
    def scale(self, alpha: Scalar, tensor: Any) -> KernelResult:
        ...

    def transpose(self, tensor: Any, axes: Optional[Sequence[int]] = None) -> KernelResult:
        ...

    def dot(self, a: Any, b: Any) -> Scalar:
        ...

    def cross(self, a: Any, b: Any) -> KernelResult:
        ...

    def squeeze(self, tensor: Any, axis: Optional[int] = None) -> KernelResult:
        ...

    def slice(self, tensor: Any, start: Sequence[int], size: Sequence[int]) -> KernelResult:
        ...

    def softmax(self, tensor: Any) -> KernelResult:
        """Row-wise softmax over a rank-2 tensor."""
        ...
