"""
Domain layer: element kinds, error kinds, and the buffer/backend/tensor
interfaces. Nothing in this package depends on a concrete backend.
"""

from ._errors import (
    TensorError,
    InvalidShapeError,
    InvalidDTypeError,
    OutOfRangeError,
    UnsupportedOperationError,
    CorruptedStateError,
    BackendMismatchError,
    CloneUnsupportedError,
)
from ._dtype import DType
from ._range import Range, RangeStyle
from ._buffer import IBuffer
from ._backend import BackendCapability, IBackend, KernelResult
from ._tensor import ITensor

__all__ = [
    TensorError.__name__,
    InvalidShapeError.__name__,
    InvalidDTypeError.__name__,
    OutOfRangeError.__name__,
    UnsupportedOperationError.__name__,
    CorruptedStateError.__name__,
    BackendMismatchError.__name__,
    CloneUnsupportedError.__name__,
    DType.__name__,
    Range.__name__,
    RangeStyle.__name__,
    IBuffer.__name__,
    BackendCapability.__name__,
    IBackend.__name__,
    KernelResult.__name__,
    ITensor.__name__,
]
