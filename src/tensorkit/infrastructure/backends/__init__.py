"""
Backend providers and the provider registry.

Importing this package registers the two built-in providers:

- ``"numpy"``  : `NumpyBackend`  (ADVANCED tier, default)
- ``"python"`` : `PythonBackend` (BASIC tier)
"""

from ._base import NumpyKernelBackend
from ._numpy_backend import NumpyBackend
from ._python_backend import PythonBackend
from ._registry import (
    BACKEND_REGISTRY,
    available_backends,
    backend_for_buffer,
    get_backend,
    register_backend,
    set_backend,
    use_backend,
)

register_backend(NumpyBackend())
register_backend(PythonBackend())

__all__ = [
    NumpyKernelBackend.__name__,
    NumpyBackend.__name__,
    PythonBackend.__name__,
    "BACKEND_REGISTRY",
    available_backends.__name__,
    backend_for_buffer.__name__,
    get_backend.__name__,
    register_backend.__name__,
    set_backend.__name__,
    use_backend.__name__,
]
