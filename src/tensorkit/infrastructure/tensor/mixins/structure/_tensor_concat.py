"""
Concatenation copy paths.

Both functions write every input's logical elements into a preallocated
output buffer of `result_shape`. Inputs are assumed validated: equal rank
and equal extents on every axis except `axis`.
"""

from __future__ import annotations

from typing import Any, Sequence

from .....domain._buffer import IBuffer


def concat_fast(out: IBuffer, tensors: Sequence[Any]) -> None:
    """
    Axis-0 concatenation: inputs are laid out one after another.
    """
    pos = 0
    for tensor in tensors:
        for value in tensor.to_flat_list():
            out[pos] = value
            pos += 1


def concat_general(
    out: IBuffer, tensors: Sequence[Any], axis: int, result_shape: Sequence[int]
) -> None:
    """
    Concatenation along any axis by remapping each element's multi-index.

    The position along `axis` is shifted by the extents of the preceding
    inputs; all other coordinates are kept, then re-flattened against
    `result_shape`.
    """
    current = 0
    for tensor in tensors:
        shape = tensor.shape
        for i, value in enumerate(tensor.to_flat_list()):
            num = i
            position = 0
            multiplier = 1
            for j in range(len(shape) - 1, -1, -1):
                index = num % shape[j]
                num //= shape[j]
                if j == axis:
                    index += current
                position += index * multiplier
                multiplier *= result_shape[j]
            out[position] = value
        current += shape[axis]
