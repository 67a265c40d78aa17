from ._numpy_buffer import NumpyBuffer
from ._list_buffer import ListBuffer

__all__ = [
    NumpyBuffer.__name__,
    ListBuffer.__name__,
]
