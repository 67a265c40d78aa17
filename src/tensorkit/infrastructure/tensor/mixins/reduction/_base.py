"""
Reduction mixin defining norms, statistics, top-k and masked pooling.

`norm`, `normalize`, `topk` and `mean_pooling` are computed here through
explicit index math over the logical elements. `mean`, `min`, `max`,
`argmin` and `argmax` are delegated to the backend provider's `reduce`
kernel, which returns a keep-dims result; the reduced axis is then stripped
unless `keep_shape` is requested.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Optional, Tuple, Union

from .....domain._backend import KernelResult
from .....domain._dtype import DType
from .....domain._errors import (
    InvalidShapeError,
    OutOfRangeError,
    UnsupportedOperationError,
)
from .....domain._tensor import ITensor
from .....domain.utils._index_math import numel, reduced_index, safe_index
from ....backends import get_backend
from ._tensor_topk import topk_row

_EPSILON = 1e-12


def _real_kind(dtype: DType) -> DType:
    """Element kind of magnitudes computed from `dtype` elements."""
    return DType.FLOAT64 if dtype in (DType.FLOAT64, DType.COMPLEX128) else DType.FLOAT32


class TensorMixinReduction:
    """
    Reduction operations for the concrete Tensor implementation.

    Notes
    -----
    Assumes the host class provides `shape`, `dtype`, `to_flat_list()`,
    `_from_parts(...)` and `_wrap(result)`.
    """

    def norm(
        self: ITensor,
        ord: Union[int, float] = 2,
        axis: Optional[int] = None,
        keep_shape: bool = False,
    ) -> ITensor:
        """
        Compute the p-norm ``(sum |x|^p)^(1/p)``.

        Parameters
        ----------
        ord : Union[int, float], optional
            Order ``p > 0``, or ``math.inf`` for ``max |x|``. Defaults to 2.
        axis : Optional[int], optional
            Axis to reduce. None reduces every element into a rank-0 tensor.
        keep_shape : bool, optional
            Keep the reduced axis with extent 1. Defaults to False.

        Returns
        -------
        ITensor
            Norms as FLOAT32 (FLOAT64 for 64-bit float/complex inputs).

        Raises
        ------
        UnsupportedOperationError
            If ``ord <= 0``.
        OutOfRangeError
            If `axis` is out of bounds.
        """
        if ord != math.inf and not ord > 0:
            raise UnsupportedOperationError("norm", f"Unsupported norm order: {ord}")

        values = [abs(v) for v in self.to_flat_list()]
        kind = _real_kind(self.dtype)
        backend = get_backend()

        if axis is None:
            if ord == math.inf:
                total = max(values, default=0.0)
            else:
                total = sum(v ** ord for v in values)
                if ord != 1:
                    total = total ** (1.0 / ord)
            out = backend.allocate(1, kind)
            out[0] = total
            return type(self)._from_parts(out, kind, (), 0, backend)

        axis = safe_index(axis, self.ndim)
        out_shape = list(self.shape)
        out_shape[axis] = 1
        acc = [0.0] * numel(out_shape)
        for i, v in enumerate(values):
            r = reduced_index(i, self.shape, axis)
            if ord == math.inf:
                acc[r] = max(acc[r], v)
            else:
                acc[r] += v ** ord
        if ord not in (1, math.inf):
            acc = [a ** (1.0 / ord) for a in acc]

        out = backend.allocate(len(acc), kind)
        for i, a in enumerate(acc):
            out[i] = a
        if not keep_shape:
            del out_shape[axis]
        return type(self)._from_parts(out, kind, tuple(out_shape), 0, backend)

    def normalize(self: ITensor, p: Union[int, float] = 2, axis: Optional[int] = None) -> ITensor:
        """
        Divide every element by its p-norm.

        With `axis`, each element is divided by the norm of its line along
        that axis; otherwise by the norm of the whole tensor. Norms below
        ``1e-12`` are clamped to ``1e-12``.

        Examples
        --------
        >>> Tensor([3, 4]).normalize().to_list()
        [0.6000000238418579, 0.800000011920929]
        """
        kind = self.dtype if (self.dtype.is_float or self.dtype.is_complex) else DType.FLOAT32
        values = self.to_flat_list()
        backend = get_backend()
        out = backend.allocate(len(values), kind)

        if axis is None:
            denom = max(self.norm(p).item(), _EPSILON)
            for i, v in enumerate(values):
                out[i] = v / denom
        else:
            axis = safe_index(axis, self.ndim)
            norms = self.norm(p, axis, keep_shape=True).to_flat_list()
            for i, v in enumerate(values):
                out[i] = v / max(norms[reduced_index(i, self.shape, axis)], _EPSILON)

        return type(self)._from_parts(out, kind, self.shape, 0, backend)

    def _reduce(self: ITensor, op: str, axis: Optional[int], keep_shape: bool) -> Any:
        result = get_backend().reduce(self, op, axis)
        if not isinstance(result, KernelResult):
            return result
        shape = list(result.shape)
        if not keep_shape:
            del shape[safe_index(axis, self.ndim)]
        return self._wrap(result._replace(shape=tuple(shape)))

    def mean(self, axis: Optional[int] = None, keep_shape: bool = False) -> Any:
        """
        Arithmetic mean over all elements (a Python scalar) or along `axis`.
        """
        return self._reduce("mean", axis, keep_shape)

    def min(self, axis: Optional[int] = None, keep_shape: bool = False) -> Any:
        return self._reduce("min", axis, keep_shape)

    def max(self, axis: Optional[int] = None, keep_shape: bool = False) -> Any:
        return self._reduce("max", axis, keep_shape)

    def argmin(self, axis: Optional[int] = None, keep_shape: bool = False) -> Any:
        """Flat position of the minimum, or INT32 positions along `axis`."""
        return self._reduce("argmin", axis, keep_shape)

    def argmax(self, axis: Optional[int] = None, keep_shape: bool = False) -> Any:
        """Flat position of the maximum, or INT32 positions along `axis`."""
        return self._reduce("argmax", axis, keep_shape)

    def topk(self: ITensor, k: Optional[int] = None, sorted: bool = True) -> Tuple[ITensor, ITensor]:
        """
        Select the k largest values of each row.

        Parameters
        ----------
        k : Optional[int], optional
            Number of values per row. Defaults to the row length.
        sorted : bool, optional
            Order each row's result largest first. Defaults to True.

        Returns
        -------
        tuple[ITensor, ITensor]
            ``(values, indices)`` of shape ``[k]`` for rank-1 inputs or
            ``[m, k]`` for rank-2 inputs. Indices are INT32 positions within
            the row.

        Raises
        ------
        UnsupportedOperationError
            If the tensor is not rank 1 or 2, or holds complex values.
        OutOfRangeError
            If `k` is outside ``[0, n]``.

        Examples
        --------
        >>> values, indices = Tensor([3, 1, 4, 1, 5, 9, 2, 6]).topk(3)
        >>> values.to_list(), indices.to_list()
        ([9.0, 6.0, 5.0], [5, 7, 4])
        """
        if self.ndim not in (1, 2):
            raise UnsupportedOperationError(
                "topk", "TopK is only supported for 1D and 2D tensors."
            )
        if self.dtype.is_complex:
            raise UnsupportedOperationError("topk", "complex values are not ordered")

        m, n = (1, self.shape[0]) if self.ndim == 1 else self.shape
        if k is None:
            k = n
        if isinstance(k, bool) or not isinstance(k, numbers.Integral) or not 0 <= k <= n:
            raise OutOfRangeError(
                f"k must be between 0 and the row length {n}, got {k!r}", index=k, size=n
            )
        k = int(k)

        values = self.to_flat_list()
        backend = get_backend()
        out_values = backend.allocate(m * k, self.dtype)
        out_indices = backend.allocate(m * k, DType.INT32)
        for row in range(m):
            entries = topk_row(values[row * n:(row + 1) * n], k, sorted)
            for j, (value, index) in enumerate(entries):
                out_values[row * k + j] = value
                out_indices[row * k + j] = index

        shape = (k,) if self.ndim == 1 else (m, k)
        cls = type(self)
        return (
            cls._from_parts(out_values, self.dtype, shape, 0, backend),
            cls._from_parts(out_indices, DType.INT32, shape, 0, backend),
        )

    def mean_pooling(self: ITensor, mask: ITensor) -> ITensor:
        """
        Average token embeddings over the positions selected by a mask.

        Parameters
        ----------
        mask : ITensor
            ``[batch, seq]`` tensor of 0/1 weights.

        Returns
        -------
        ITensor
            ``[batch, embed]`` tensor. Rows whose mask is all zero are 0.

        Raises
        ------
        InvalidShapeError
            If the tensor is not ``[batch, seq, embed]`` or the mask shape is
            not ``[batch, seq]``.
        """
        if self.ndim != 3:
            raise InvalidShapeError(
                f"mean_pooling expects [batch, seq, embed], got {self.shape}",
                shape=self.shape,
            )
        if tuple(mask.shape) != self.shape[:2]:
            raise InvalidShapeError(
                f"Mask shape {tuple(mask.shape)} does not match {self.shape[:2]}",
                shape=mask.shape,
            )
        batch, seq, embed = self.shape
        values = self.to_flat_list()
        weights = mask.to_flat_list()
        kind = self.dtype if self.dtype.is_float else DType.FLOAT32
        backend = get_backend()
        out = backend.allocate(batch * embed, kind)

        for b in range(batch):
            count = sum(weights[b * seq:(b + 1) * seq])
            if not count:
                continue
            for e in range(embed):
                total = 0.0
                for s in range(seq):
                    w = weights[b * seq + s]
                    if w:
                        total += values[(b * seq + s) * embed + e] * w
                out[b * embed + e] = total / count

        return type(self)._from_parts(out, kind, (batch, embed), 0, backend)
