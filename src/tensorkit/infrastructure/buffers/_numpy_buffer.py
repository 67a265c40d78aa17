"""
NumPy-backed element buffer (ADVANCED capability tier).
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ...domain._dtype import DType
from ...domain._errors import CorruptedStateError, InvalidShapeError


class NumpyBuffer:
    """
    Element buffer stored in a contiguous 1-D NumPy array.

    Parameters
    ----------
    size : int
        Number of slots.
    dtype : DType
        Element kind.

    Notes
    -----
    - Storage is always little-endian so that `dump` produces the byte order
      the serialized format expects.
    - Elements are read back as Python scalars (``ndarray.item``).
    """

    __slots__ = ("_dtype", "_array")

    def __init__(self, size: int, dtype: DType) -> None:
        if size < 0:
            raise InvalidShapeError(f"Invalid buffer size: {size}")
        self._dtype = dtype
        self._array = np.zeros(int(size), dtype=dtype.numpy)

    @classmethod
    def from_numpy(cls, array: np.ndarray, dtype: Optional[DType] = None) -> "NumpyBuffer":
        """
        Adopt a NumPy array as buffer storage.

        The array is flattened and converted to the element kind's
        little-endian dtype; a copy is made only when the array is not
        already contiguous with that dtype.
        """
        kind = DType.resolve(array.dtype) if dtype is None else dtype
        obj = cls.__new__(cls)
        obj._dtype = kind
        obj._array = np.ascontiguousarray(np.ravel(array), dtype=kind.numpy)
        return obj

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def array(self) -> np.ndarray:
        """The backing 1-D array. Writes through it are visible to all views."""
        return self._array

    def __len__(self) -> int:
        return int(self._array.shape[0])

    def __getitem__(self, index: int) -> Any:
        return self._array[index].item()

    def __setitem__(self, index: int, value: Any) -> None:
        self._array[index] = value

    def __iter__(self):
        return iter(self._array.tolist())

    def to_numpy(self, start: int = 0, stop: Optional[int] = None) -> np.ndarray:
        return self._array[start:stop]

    def dump(self) -> bytes:
        """Return the raw little-endian bytes of every slot."""
        return self._array.tobytes(order="C")

    def load(self, data: bytes) -> None:
        """
        Overwrite every slot from raw little-endian bytes.

        Raises
        ------
        CorruptedStateError
            If the byte count does not match ``len(self) * itemsize``.
        """
        expected = len(self) * self._dtype.itemsize
        if len(data) != expected:
            raise CorruptedStateError(
                f"Buffer payload has {len(data)} bytes, expected {expected}"
            )
        self._array[:] = np.frombuffer(data, dtype=self._dtype.numpy)

    def __repr__(self) -> str:
        return f"NumpyBuffer(size={len(self)}, dtype={self._dtype})"
