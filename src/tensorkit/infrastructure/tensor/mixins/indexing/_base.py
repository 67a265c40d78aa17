"""
Indexing mixin: element access, views, assignment and copying slices.

Integer and range keys address the leading axis only and produce views that
share the host tensor's buffer. `slice` addresses every axis and always
copies.
"""

from __future__ import annotations

import numbers
from typing import Any, Iterator, Sequence

from .....domain._errors import (
    InvalidDTypeError,
    InvalidShapeError,
    OutOfRangeError,
    UnsupportedOperationError,
)
from .....domain._tensor import ITensor
from .....domain.utils._index_math import numel, safe_index, unravel
from ....backends import get_backend
from ._resolve import resolve_index


def _slice_bounds(spec: Any, dim: int, axis: int) -> tuple[int, int]:
    if spec is None:
        return 0, dim
    if isinstance(spec, numbers.Integral) and not isinstance(spec, bool):
        i = safe_index(int(spec), dim, axis)
        return i, i + 1
    if isinstance(spec, slice):
        if spec.step not in (None, 1):
            raise OutOfRangeError(f"Invalid slice step {spec.step}", index=spec, axis=axis)
        lo, hi, _ = spec.indices(dim)
        return lo, max(lo, hi)
    if isinstance(spec, (list, tuple)) and len(spec) == 2:
        lo, hi = int(spec[0]), int(spec[1])
        if lo > hi:
            raise OutOfRangeError(
                f"Invalid slice [{lo},{hi}) for axis {axis}", index=spec, axis=axis
            )
        lo = min(max(lo, 0), dim)
        hi = min(max(hi, lo), dim)
        return lo, hi
    raise OutOfRangeError(
        f"Invalid slice specification for axis {axis}: {spec!r}", index=spec, axis=axis
    )


class TensorMixinIndexing:
    """
    Leading-axis indexing and multi-axis slicing.

    Notes
    -----
    Assumes the host class provides `shape`, `dtype`, `offset`, `buffer`,
    `stride()`, `_view(shape, offset)` and `_wrap(result)`.
    """

    def __getitem__(self: ITensor, key: Any) -> Any:
        """
        Index the leading axis.

        Parameters
        ----------
        key : Any
            Integer, `Range`, ``[start, limit]`` pair or unit-step slice.

        Returns
        -------
        Any
            A Python scalar when indexing a rank-1 tensor with an integer,
            otherwise a view sharing the buffer.

        Raises
        ------
        OutOfRangeError
            If the key is malformed or out of bounds.

        Examples
        --------
        >>> t = Tensor([[1, 2], [3, 4], [5, 6]])
        >>> t[1].to_list()
        [3.0, 4.0]
        >>> t[[0, 2]].shape
        (2, 2)
        """
        spec = resolve_index(key, self.shape)
        rest = self.shape[1:]
        item = numel(rest)
        offset = self.offset + spec.start * item
        if spec.single:
            if not rest:
                return self.buffer[offset]
            return self._view(rest, offset)
        return self._view((spec.limit - spec.start,) + rest, offset)

    def __setitem__(self: ITensor, key: Any, value: Any) -> None:
        """
        Assign to one position of the leading axis.

        A scalar is written into a rank-1 tensor; for higher ranks `value`
        must be a tensor whose shape equals ``shape[1:]``. The write lands in
        the shared buffer, so it is visible through every view.

        Raises
        ------
        OutOfRangeError
            If the key is malformed or out of bounds.
        UnsupportedOperationError
            If the key selects a range.
        InvalidDTypeError
            If a scalar does not match the element kind.
        InvalidShapeError
            If a tensor value has the wrong shape.
        """
        spec = resolve_index(key, self.shape)
        if not spec.single:
            raise UnsupportedOperationError(
                "setitem", "Unsupported to set for range specification."
            )
        rest = self.shape[1:]
        item = numel(rest)
        base = self.offset + spec.start * item

        if not rest:
            self.dtype.check_scalar(value)
            self.buffer[base] = value
            return

        if not hasattr(value, "to_flat_list") or tuple(value.shape) != rest:
            raise InvalidShapeError(
                f"Unmatched shape numbers: expected {rest}, got "
                f"{getattr(value, 'shape', type(value).__name__)}",
                shape=getattr(value, "shape", None),
            )
        if value.dtype.is_complex and not self.dtype.is_complex:
            raise InvalidDTypeError(
                f"Cannot assign {value.dtype} elements into {self.dtype}",
                dtype=self.dtype,
            )
        for k, v in enumerate(value.to_flat_list()):
            self.buffer[base + k] = v

    def __delitem__(self, key: Any) -> None:
        raise UnsupportedOperationError("delitem", "Unsupported to unset.")

    def index_exists(self: ITensor, key: Any) -> bool:
        """Return whether `key` resolves to a valid leading-axis selection."""
        try:
            resolve_index(key, self.shape)
        except OutOfRangeError:
            return False
        return True

    def __iter__(self: ITensor) -> Iterator[Any]:
        """Yield ``t[0] .. t[len-1]``; a rank-0 tensor yields nothing."""
        if not self.shape:
            return
        for i in range(self.shape[0]):
            yield self[i]

    def slice(self: ITensor, *slices: Any) -> ITensor:
        """
        Copy a rectangular window selected per axis.

        Parameters
        ----------
        *slices : Any
            One entry per leading axis (missing trailing entries select the
            whole axis). Each entry is None (whole axis), an integer (keeps a
            size-1 axis), a unit-step ``slice`` (resolved like Python slices) or
            a ``[lo, hi)`` pair clamped to ``[0, dim]``.

        Returns
        -------
        ITensor
            A new tensor with its own buffer and offset 0.

        Raises
        ------
        OutOfRangeError
            If there are more entries than axes, an integer is out of bounds,
            or a pair has ``lo > hi``.
        """
        if len(slices) > self.ndim:
            raise OutOfRangeError(
                f"Too many slice entries ({len(slices)}) for rank {self.ndim}",
                index=slices,
            )
        bounds = [
            _slice_bounds(slices[axis] if axis < len(slices) else None, dim, axis)
            for axis, dim in enumerate(self.shape)
        ]
        new_shape = tuple(hi - lo for lo, hi in bounds)
        src_strides = self.stride()
        size = numel(new_shape)

        out = get_backend().allocate(size, self.dtype)
        for i in range(size):
            idx = unravel(i, new_shape)
            pos = self.offset
            for axis, (lo, _) in enumerate(bounds):
                pos += (idx[axis] + lo) * src_strides[axis]
            out[i] = self.buffer[pos]
        return type(self)._from_parts(out, self.dtype, new_shape, 0, get_backend())

    def new_slice(self: ITensor, start: Sequence[int], size: Sequence[int]) -> ITensor:
        """
        Copy a window through the backend provider's slice kernel.

        ``size[i] == -1`` extends the window to the end of axis ``i``.
        """
        return self._wrap(get_backend().slice(self, start, size))
