"""
Pure-Python list-backed element buffer (BASIC capability tier).

This buffer has no bulk byte transfer. It can only be copied element by
element, which is exactly what the BASIC tier promises.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import numpy as np

from ...domain._dtype import DType
from ...domain._errors import InvalidShapeError


class ListBuffer:
    """
    Element buffer stored as a Python list of scalars.

    Parameters
    ----------
    size : int
        Number of slots.
    dtype : DType
        Element kind. Values are normalized through the kind's NumPy scalar
        type on write, so a float32 slot stores float32-rounded values.
    """

    __slots__ = ("_dtype", "_data")

    def __init__(self, size: int, dtype: DType) -> None:
        if size < 0:
            raise InvalidShapeError(f"Invalid buffer size: {size}")
        self._dtype = dtype
        zero = self._convert(0)
        self._data = [zero] * int(size)

    @classmethod
    def from_values(cls, values: Iterable[Any], dtype: DType) -> "ListBuffer":
        obj = cls.__new__(cls)
        obj._dtype = dtype
        obj._data = [obj._convert(v) for v in values]
        return obj

    def _convert(self, value: Any) -> Any:
        return self._dtype.numpy.type(value).item()

    @property
    def dtype(self) -> DType:
        return self._dtype

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, index: int) -> Any:
        return self._data[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self._data[index] = self._convert(value)

    def __iter__(self):
        return iter(self._data)

    def to_numpy(self, start: int = 0, stop: Optional[int] = None) -> np.ndarray:
        return np.asarray(self._data[start:stop], dtype=self._dtype.numpy)

    def copy(self) -> "ListBuffer":
        """Return an element-by-element copy of this buffer."""
        obj = ListBuffer.__new__(ListBuffer)
        obj._dtype = self._dtype
        obj._data = list(self._data)
        return obj

    def __repr__(self) -> str:
        return f"ListBuffer(size={len(self)}, dtype={self._dtype})"
