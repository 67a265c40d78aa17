"""
Pure index arithmetic shared by the tensor engines.

All helpers assume row-major (last-axis-fastest) layout. They operate on plain
tuples of ints and never touch buffers, so they can be reused by the view,
reduction, and concatenation engines alike.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import numpy as np

from .._errors import InvalidShapeError, OutOfRangeError


def assert_shape(shape: Any) -> Tuple[int, ...]:
    """
    Validate a shape specification and return it as a tuple.

    Parameters
    ----------
    shape : Any
        Iterable of shape entries.

    Returns
    -------
    tuple[int, ...]
        The validated shape.

    Raises
    ------
    InvalidShapeError
        If `shape` is not iterable, or an entry is not a non-negative int.
        Bools are rejected even though they subclass int.
    """
    try:
        entries = tuple(shape)
    except TypeError:
        raise InvalidShapeError(
            f"Invalid shape. It gives {type(shape).__name__}"
        ) from None

    for num in entries:
        # NumPy integers expose __index__; bools do too but are rejected.
        if isinstance(num, (bool, np.bool_)) or not hasattr(num, "__index__"):
            raise InvalidShapeError(
                f"Invalid shape numbers. It gives {type(num).__name__}", shape=entries
            )
        if int(num) < 0:
            raise InvalidShapeError(
                f"Invalid shape numbers. It gives {num}", shape=entries
            )
    return tuple(int(num) for num in entries)


def numel(shape: Sequence[int]) -> int:
    """Return the product of the entries of `shape` (1 for rank 0)."""
    n = 1
    for d in shape:
        n *= int(d)
    return n


def strides(shape: Sequence[int]) -> Tuple[int, ...]:
    """
    Compute row-major element strides for `shape`.

    Examples
    --------
    >>> strides((2, 3, 4))
    (12, 4, 1)
    """
    out = [0] * len(shape)
    step = 1
    for i in range(len(shape) - 1, -1, -1):
        out[i] = step
        step *= int(shape[i])
    return tuple(out)


def safe_index(index: int, size: int, axis: Optional[int] = None) -> int:
    """
    Resolve a possibly negative index into ``[0, size)``.

    Parameters
    ----------
    index : int
        Index to resolve. Must satisfy ``-size <= index < size``.
    size : int
        Extent of the addressed dimension.
    axis : Optional[int], optional
        Axis number used only for the error message.

    Returns
    -------
    int
        Non-negative index.

    Raises
    ------
    OutOfRangeError
        If `index` is out of bounds.
    """
    if index < -size or index >= size:
        where = "" if axis is None else f" {axis}"
        raise OutOfRangeError(
            f"IndexError: index {index} is out of bounds for axis{where} with size {size}",
            index=index,
            size=size,
            axis=axis,
        )
    if index < 0:
        index = ((index % size) + size) % size
    return index


def unravel(flat: int, shape: Sequence[int]) -> Tuple[int, ...]:
    """
    Convert a flat row-major position into a multi-index.

    Axes are peeled from the innermost outward.
    """
    idx = [0] * len(shape)
    num = flat
    for j in range(len(shape) - 1, -1, -1):
        size = shape[j]
        idx[j] = num % size
        num //= size
    return tuple(idx)


def ravel(index: Sequence[int], shape: Sequence[int]) -> int:
    """Convert a multi-index into a flat row-major position."""
    flat = 0
    multiplier = 1
    for j in range(len(shape) - 1, -1, -1):
        flat += index[j] * multiplier
        multiplier *= shape[j]
    return flat


def reduced_index(flat: int, shape: Sequence[int], axis: int) -> int:
    """
    Map a flat position of `shape` to its slot in the axis-reduced output.

    The reduced output has the same layout as `shape` with extent 1 on
    `axis`, so the position along `axis` is simply dropped.

    Parameters
    ----------
    flat : int
        Flat row-major position in the source.
    shape : Sequence[int]
        Source shape.
    axis : int
        Non-negative axis being reduced.

    Returns
    -------
    int
        Flat position in the reduced output.
    """
    out = 0
    num = flat
    multiplier = 1
    for j in range(len(shape) - 1, -1, -1):
        size = shape[j]
        if j != axis:
            out += (num % size) * multiplier
            multiplier *= size
        num //= size
    return out
