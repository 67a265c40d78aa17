"""
Structure mixin for Tensor.

Public API
----------
- ``TensorMixinStructure``

The two concatenation copy paths are exported so they can be compared
against each other directly.
"""

from ._base import TensorMixinStructure
from ._tensor_concat import concat_fast, concat_general

__all__ = [
    TensorMixinStructure.__name__,
    concat_fast.__name__,
    concat_general.__name__,
]
