from ._index_math import (
    assert_shape,
    numel,
    strides,
    safe_index,
    unravel,
    ravel,
    reduced_index,
)

__all__ = [
    "assert_shape",
    "numel",
    "strides",
    "safe_index",
    "unravel",
    "ravel",
    "reduced_index",
]
