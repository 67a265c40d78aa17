"""
List-backed backend provider (BASIC capability tier).

Results are stored in plain Python lists. The provider still computes with
NumPy, but its buffers expose no bulk byte transfer: cloning and
cross-backend transfer fall back to element-by-element copies.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ...domain._backend import BackendCapability
from ...domain._dtype import DType
from ..buffers._list_buffer import ListBuffer
from ._base import NumpyKernelBackend


class PythonBackend(NumpyKernelBackend):
    """
    Provider storing every buffer as a `ListBuffer`.
    """

    name = "python"
    capability = BackendCapability.BASIC
    buffer_type = ListBuffer

    def allocate(self, size: int, dtype: DType) -> ListBuffer:
        return ListBuffer(size, dtype)

    def wrap(self, array: np.ndarray, dtype: Optional[DType] = None) -> ListBuffer:
        arr = np.asarray(array)
        kind = DType.resolve(arr.dtype) if dtype is None else dtype
        return ListBuffer.from_values(arr.ravel().tolist(), kind)
