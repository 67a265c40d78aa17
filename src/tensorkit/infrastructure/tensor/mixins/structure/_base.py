"""
Structure mixin: concatenation, stacking and axis manipulation.

`cat` and `stack` are staticmethods operating on sequences of tensors; to
avoid a circular import they build results through ``first.__class__``.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .....domain._errors import InvalidShapeError
from .....domain._tensor import ITensor
from .....domain.utils._index_math import numel, safe_index
from ....backends import get_backend
from ._tensor_concat import concat_fast, concat_general


class TensorMixinStructure:
    """
    Structural tensor operations.

    Notes
    -----
    Assumes the host class provides `shape`, `dtype`, `offset`, `ndim`,
    `_view(shape, offset)`, `_wrap(result)` and `_from_parts(...)`.
    """

    @staticmethod
    def cat(tensors: Sequence[ITensor], axis: int = 0) -> ITensor:
        """
        Concatenate tensors along an existing axis.

        Parameters
        ----------
        tensors : Sequence[ITensor]
            Non-empty sequence of tensors with equal rank and equal extents on
            every axis other than `axis`.
        axis : int, optional
            Concatenation axis (negative values wrap). Defaults to 0.

        Returns
        -------
        ITensor
            A new tensor with offset 0 and the first input's element kind.

        Raises
        ------
        InvalidShapeError
            If `tensors` is empty, or ranks/non-axis extents differ.
        OutOfRangeError
            If `axis` is out of bounds.

        Examples
        --------
        >>> a = Tensor([[1, 2], [3, 4]])
        >>> Tensor.cat([a, a], axis=1).shape
        (2, 4)
        """
        tensors = list(tensors)
        if not tensors:
            raise InvalidShapeError("Tensor.cat() requires a non-empty sequence")

        first = tensors[0]
        ndim = len(first.shape)
        axis = safe_index(axis, ndim)

        for idx, t in enumerate(tensors):
            if len(t.shape) != ndim:
                raise InvalidShapeError(
                    f"Tensor.cat() rank mismatch at index {idx}: "
                    f"expected rank {ndim}, got {len(t.shape)}",
                    shape=t.shape,
                )
            for d in range(ndim):
                if d != axis and t.shape[d] != first.shape[d]:
                    raise InvalidShapeError(
                        f"Tensor.cat() shape mismatch at index {idx} on axis {d}: "
                        f"expected {first.shape[d]}, got {t.shape[d]}",
                        shape=t.shape,
                    )

        result_shape = list(first.shape)
        result_shape[axis] = sum(t.shape[axis] for t in tensors)

        backend = get_backend()
        out = backend.allocate(numel(result_shape), first.dtype)
        if axis == 0:
            concat_fast(out, tensors)
        else:
            concat_general(out, tensors, axis, result_shape)

        return first.__class__._from_parts(
            out, first.dtype, tuple(result_shape), 0, backend
        )

    @staticmethod
    def stack(tensors: Sequence[ITensor], axis: int = 0) -> ITensor:
        """
        Stack same-shape tensors along a new axis.

        Raises
        ------
        InvalidShapeError
            If `tensors` is empty or the shapes differ.
        """
        tensors = list(tensors)
        if not tensors:
            raise InvalidShapeError("Tensor.stack() requires a non-empty sequence")

        ref = tuple(tensors[0].shape)
        for idx, t in enumerate(tensors):
            if tuple(t.shape) != ref:
                raise InvalidShapeError(
                    f"Tensor.stack() shape mismatch at index {idx}: "
                    f"expected {ref}, got {tuple(t.shape)}",
                    shape=t.shape,
                )

        expanded = [t.unsqueeze(axis) for t in tensors]
        return tensors[0].__class__.cat(expanded, axis=axis)

    def unsqueeze(self: ITensor, axis: int) -> ITensor:
        """Return a view with a new extent-1 axis inserted at `axis`."""
        axis = safe_index(axis, self.ndim + 1)
        shape = list(self.shape)
        shape.insert(axis, 1)
        return self._view(tuple(shape), self.offset)

    def squeeze(self: ITensor, axis: Optional[int] = None) -> ITensor:
        """
        Remove extent-1 axes (all of them, or only `axis`).

        The result shares this tensor's buffer.
        """
        return self._wrap(get_backend().squeeze(self, axis))

    def permute(self: ITensor, *axes: Any) -> ITensor:
        """
        Reorder axes; accepts ``permute(1, 0)`` or ``permute((1, 0))``.

        The result is a contiguous copy.
        """
        if len(axes) == 1 and isinstance(axes[0], (list, tuple)):
            axes = tuple(axes[0])
        return self._wrap(get_backend().transpose(self, axes))

    def transpose(self: ITensor) -> ITensor:
        """Reverse the axis order (a contiguous copy)."""
        return self._wrap(get_backend().transpose(self))
