"""
Leading-axis index resolution.

`resolve_index` turns a `__getitem__`/`__setitem__` key into a normalized
``IndexSpec``. Every key takes exactly one of two outcomes: a single
position on axis 0, or a half-open ``[start, limit)`` window on axis 0.
Anything else is rejected before any buffer is touched.
"""

from __future__ import annotations

import numbers
from typing import Any, NamedTuple, Sequence

from .....domain._errors import OutOfRangeError
from .....domain._range import Range, RangeStyle
from .....domain.utils._index_math import safe_index
from ...._config import get_config


class IndexSpec(NamedTuple):
    """
    Normalized leading-axis index.

    Attributes
    ----------
    start : int
        First selected position on axis 0.
    limit : int
        One past the last selected position.
    single : bool
        True when the key was an integer (the leading axis is dropped).
    """

    start: int
    limit: int
    single: bool


def _is_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def resolve_index(key: Any, shape: Sequence[int]) -> IndexSpec:
    """
    Resolve a leading-axis key against `shape`.

    Accepted keys
    -------------
    - an integer in ``[-shape[0], shape[0])`` (negatives wrap);
    - a `Range`;
    - a ``[start, limit]`` pair of integers (the upper bound is inclusive
      when the configured `RangeStyle` is INCLUSIVE);
    - a Python ``slice`` with step 1 (negative bounds wrap once).

    Raises
    ------
    OutOfRangeError
        If the tensor is rank 0, the key has an unsupported type, or the
        selection falls outside ``[0, shape[0]]``.
    """
    if not shape:
        raise OutOfRangeError("Index is out of range: the tensor has rank 0", index=key)
    size = int(shape[0])

    if _is_int(key):
        i = safe_index(int(key), size, 0)
        return IndexSpec(i, i + 1, True)

    if isinstance(key, Range):
        start, limit = key.start, key.limit

    elif isinstance(key, slice):
        if key.step not in (None, 1):
            raise OutOfRangeError(
                f"Illegal range specification.:step {key.step}", index=key
            )
        start = 0 if key.start is None else key.start
        limit = size if key.stop is None else key.stop
        if not (_is_int(start) and _is_int(limit)):
            raise OutOfRangeError("Dimension must be integer", index=key)
        start = start + size if start < 0 else start
        limit = limit + size if limit < 0 else limit
        # Python slices never raise on overshoot.
        start = min(max(start, 0), size)
        limit = min(max(limit, start), size)

    elif isinstance(key, (list, tuple)) and len(key) == 2 and all(_is_int(k) for k in key):
        start, limit = int(key[0]), int(key[1])
        if start > limit:
            raise OutOfRangeError(
                f"Illegal range specification.:[{start},{limit}]", index=key
            )
        if get_config().range_style is RangeStyle.INCLUSIVE:
            limit += 1

    else:
        raise OutOfRangeError(
            f"Dimension must be integer. It gives {type(key).__name__}", index=key
        )

    if start < 0 or limit > size:
        raise OutOfRangeError(
            f"Index is out of range: [{start},{limit}) for axis 0 with size {size}",
            index=key,
            size=size,
            axis=0,
        )
    return IndexSpec(start, limit, False)
