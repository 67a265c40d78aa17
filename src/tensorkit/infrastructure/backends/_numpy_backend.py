"""
NumPy backend provider (ADVANCED capability tier).
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ...domain._backend import BackendCapability
from ...domain._dtype import DType
from ..buffers._numpy_buffer import NumpyBuffer
from ._base import NumpyKernelBackend


class NumpyBackend(NumpyKernelBackend):
    """
    Default provider: NumPy kernels over `NumpyBuffer` storage.

    Buffers support bulk ``dump``/``load``, so clones and cross-backend
    transfers move raw bytes instead of individual elements.
    """

    name = "numpy"
    capability = BackendCapability.ADVANCED
    buffer_type = NumpyBuffer

    def allocate(self, size: int, dtype: DType) -> NumpyBuffer:
        return NumpyBuffer(size, dtype)

    def wrap(self, array: np.ndarray, dtype: Optional[DType] = None) -> NumpyBuffer:
        return NumpyBuffer.from_numpy(np.asarray(array), dtype)
