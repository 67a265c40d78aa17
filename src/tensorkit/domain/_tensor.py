"""
Tensor interface definitions.

This module defines the domain-level interface for tensor-like objects using
structural typing. The interface captures the addressing model shared by
every engine (view/index, reduction, concatenation, codec): a tensor is a
shape plus an offset into a flat element buffer, with row-major strides
always derived from the shape.

Notes
-----
The concrete implementation (`tensorkit.infrastructure.tensor.Tensor`)
exposes a larger public surface. This protocol only lists what the engines
and backend providers rely on, so alternative tensor types can be passed to
a backend as long as they satisfy it.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from ._backend import IBackend
from ._buffer import IBuffer
from ._dtype import DType


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    An `ITensor` is a multi-dimensional window over an `IBuffer`:

    - element ``(i0, ..., in)`` lives at
      ``buffer[offset + sum(ik * stride()[k])]``;
    - ``len(buffer) - offset >= size()`` always holds;
    - views share the buffer object and differ only in offset/shape.
    """

    # ---------------------------------------------------------------------
    # Addressing
    # ---------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the tensor.

        Returns
        -------
        tuple[int, ...]
            Extent of each axis. An empty tuple denotes a rank-0 tensor.
        """
        ...

    @property
    def dtype(self) -> DType:
        """
        Return the element kind of the tensor.

        Returns
        -------
        DType
            The element kind shared with the underlying buffer.
        """
        ...

    @property
    def offset(self) -> int:
        """
        Return the position of logical element 0 inside the buffer.

        Returns
        -------
        int
            Non-negative offset. Non-zero offsets appear on views.
        """
        ...

    @property
    def buffer(self) -> IBuffer:
        """
        Return the (possibly shared) element buffer.
        """
        ...

    @property
    def backend(self) -> IBackend:
        """
        Return the backend provider that allocated the buffer.
        """
        ...

    @property
    def ndim(self) -> int:
        """Number of axes."""
        ...

    def size(self) -> int:
        """
        Return the total number of logical elements.

        Returns
        -------
        int
            ``product(shape)``; 1 for rank-0 tensors, 0 for empty tensors.
        """
        ...

    def stride(self) -> tuple[int, ...]:
        """
        Return the row-major stride of each axis.

        Returns
        -------
        tuple[int, ...]
            ``stride[i] == product(shape[i + 1:])``.
        """
        ...

    # ---------------------------------------------------------------------
    # Structure and host interop
    # ---------------------------------------------------------------------
    def reshape(self, shape: Sequence[int]) -> "ITensor":
        """
        Return a view with a new shape over the same elements.

        Raises
        ------
        InvalidShapeError
            If the new shape has a different element count.
        """
        ...

    def to_numpy(self) -> Any:
        """
        Return the logical elements as a NumPy array of shape `shape`.

        The returned array may share memory with the buffer; treat it as
        read-only.
        """
        ...

    def to_flat_list(self) -> list[Any]:
        """Return the logical elements in row-major order."""
        ...

    def serialize(self) -> bytes:
        """Encode the tensor into the self-describing byte format."""
        ...
