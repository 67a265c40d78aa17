"""
Indexing mixin for Tensor.

Public API
----------
- ``TensorMixinIndexing``

`resolve_index` and `IndexSpec` are exported for the structure and
reduction mixins, which address the leading axis the same way.
"""

from ._base import TensorMixinIndexing
from ._resolve import IndexSpec, resolve_index

__all__ = [
    TensorMixinIndexing.__name__,
    IndexSpec.__name__,
    resolve_index.__name__,
]
