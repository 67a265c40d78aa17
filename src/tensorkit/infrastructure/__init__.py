"""
Infrastructure layer: concrete buffers, backend providers, the codec, the
process configuration and the `Tensor` implementation.
"""

from ._config import TensorConfig, get_config, reset_config, set_range_style
from ._logging import get_logger
from .backends import (
    NumpyBackend,
    PythonBackend,
    available_backends,
    get_backend,
    register_backend,
    set_backend,
    use_backend,
)
from .buffers import ListBuffer, NumpyBuffer
from .tensor import Tensor

__all__ = [
    TensorConfig.__name__,
    get_config.__name__,
    reset_config.__name__,
    set_range_style.__name__,
    get_logger.__name__,
    NumpyBackend.__name__,
    PythonBackend.__name__,
    available_backends.__name__,
    get_backend.__name__,
    register_backend.__name__,
    set_backend.__name__,
    use_backend.__name__,
    ListBuffer.__name__,
    NumpyBuffer.__name__,
    Tensor.__name__,
]
