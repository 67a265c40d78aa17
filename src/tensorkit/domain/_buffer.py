"""
Element buffer interface definitions.

An element buffer is the flat, fixed-length, fixed-kind storage behind every
tensor. Tensors never own a buffer exclusively in the type system: views hold
references to the same buffer object and differ only in offset and shape.
Python reference counting keeps a buffer alive while any tensor refers to it.

Notes
-----
Not every buffer implements every method. Which optional methods are present
is declared by the owning backend's capability tier
(`tensorkit.domain._backend.BackendCapability`), never probed per object:

- ADVANCED buffers implement `dump` and `load` (bulk byte transfer).
- BASIC buffers implement `copy` (element-wise duplication).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ._dtype import DType


@runtime_checkable
class IBuffer(Protocol):
    """
    Flat element storage.

    Implementations must preserve the invariant that both length and element
    kind are fixed at creation.
    """

    @property
    def dtype(self) -> DType:
        """Element kind of every slot."""
        ...

    def __len__(self) -> int:
        """Number of slots."""
        ...

    def __getitem__(self, index: int) -> Any:
        """
        Read one element as a Python scalar.

        Parameters
        ----------
        index : int
            Non-negative slot index.
        """
        ...

    def __setitem__(self, index: int, value: Any) -> None:
        """
        Write one element, converting it to the buffer's element kind.
        """
        ...

    def to_numpy(self, start: int = 0, stop: Any = None) -> Any:
        """
        Return slots ``[start, stop)`` as a 1-D NumPy array.

        Implementations may return a view into their own storage; callers
        must not write through the returned array.
        """
        ...
