"""
tensorkit: N-dimensional tensors over flat, backend-owned element buffers.

Example
-------
>>> from tensorkit import Tensor
>>> t = Tensor([[1, 2, 3], [4, 5, 6]])
>>> t[1].to_list()
[4.0, 5.0, 6.0]
>>> Tensor.unserialize(t.serialize()).shape
(2, 3)
"""

from .domain import (
    BackendCapability,
    BackendMismatchError,
    CloneUnsupportedError,
    CorruptedStateError,
    DType,
    IBackend,
    IBuffer,
    ITensor,
    InvalidDTypeError,
    InvalidShapeError,
    KernelResult,
    OutOfRangeError,
    Range,
    RangeStyle,
    TensorError,
    UnsupportedOperationError,
)
from .infrastructure import (
    NumpyBackend,
    PythonBackend,
    Tensor,
    TensorConfig,
    available_backends,
    get_backend,
    get_config,
    register_backend,
    reset_config,
    set_backend,
    set_range_style,
    use_backend,
)

__version__ = "1.0.0"

__all__ = [
    Tensor.__name__,
    DType.__name__,
    Range.__name__,
    RangeStyle.__name__,
    BackendCapability.__name__,
    KernelResult.__name__,
    IBackend.__name__,
    IBuffer.__name__,
    ITensor.__name__,
    TensorError.__name__,
    InvalidShapeError.__name__,
    InvalidDTypeError.__name__,
    OutOfRangeError.__name__,
    UnsupportedOperationError.__name__,
    CorruptedStateError.__name__,
    BackendMismatchError.__name__,
    CloneUnsupportedError.__name__,
    NumpyBackend.__name__,
    PythonBackend.__name__,
    available_backends.__name__,
    get_backend.__name__,
    register_backend.__name__,
    set_backend.__name__,
    use_backend.__name__,
    TensorConfig.__name__,
    get_config.__name__,
    reset_config.__name__,
    set_range_style.__name__,
]
