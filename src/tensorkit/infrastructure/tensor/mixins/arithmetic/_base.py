"""
Arithmetic mixin delegating elementwise and linear-algebra work to the
active backend provider.

The tensor side only validates operands and wraps the provider's
`KernelResult`; no numeric loop runs here.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Union

from .....domain._dtype import DType
from .....domain._errors import UnsupportedOperationError
from .....domain._tensor import ITensor
from ....backends import get_backend

Number = Union[int, float, complex]
"""Scalar types accepted by Tensor arithmetic operators."""


def _sigmoid(x: float) -> float:
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def _round_half_away(x: float) -> float:
    return math.copysign(math.floor(abs(x) + 0.5), x)


class TensorMixinArithmetic:
    """
    Kernel-backed arithmetic for the concrete Tensor implementation.

    Notes
    -----
    - Tensor operands must have exactly the same shape (no broadcasting).
    - Integer inputs whose result is not integral come back as FLOAT32.
    """

    def add(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        """Elementwise sum with a scalar or a same-shape tensor."""
        return self._wrap(get_backend().elementwise_op(self, "+", other))

    def multiply(self: ITensor, scalar: Number) -> ITensor:
        """Scale every element by `scalar`."""
        return self._wrap(get_backend().scale(scalar, self))

    def divide(self: ITensor, scalar: Number) -> ITensor:
        """
        Divide every element by `scalar`.

        Raises
        ------
        ZeroDivisionError
            If `scalar` is zero.
        """
        if scalar == 0:
            raise ZeroDivisionError("Tensor division by zero")
        return self._wrap(get_backend().scale(1 / scalar, self))

    def sigmoid(self: ITensor) -> ITensor:
        return self._wrap(get_backend().elementwise_map(self, _sigmoid))

    def clamp(self: ITensor, lo: Number, hi: Number) -> ITensor:
        """Limit every element to ``[lo, hi]``."""
        if lo > hi:
            raise ValueError(f"clamp bounds are reversed: lo={lo}, hi={hi}")
        return self._wrap(
            get_backend().elementwise_map(self, lambda x: min(max(x, lo), hi))
        )

    def round(self: ITensor) -> ITensor:
        """
        Round every element half away from zero.

        Integer and bool tensors are returned as a copy.
        """
        if not self.dtype.is_float:
            if self.dtype.is_complex:
                raise UnsupportedOperationError("round", "complex values cannot be rounded")
            return self._wrap(get_backend().astype(self, self.dtype))
        return self._wrap(get_backend().elementwise_map(self, _round_half_away))

    def to(self: ITensor, dtype: Any) -> ITensor:
        """
        Convert to another element kind.

        Returns this tensor unchanged when the kind already matches.
        """
        kind = DType.resolve(dtype)
        if kind is self.dtype:
            return self
        return self._wrap(get_backend().astype(self, kind))

    def dot(self: ITensor, other: ITensor) -> Number:
        """Inner product of the flattened elements (a Python scalar)."""
        return get_backend().dot(self, other)

    def cross(self: ITensor, other: ITensor) -> ITensor:
        """Cross product along the last axis (extent 2 or 3)."""
        return self._wrap(get_backend().cross(self, other))

    def softmax(self: ITensor) -> ITensor:
        """
        Softmax over the last axis of a rank-1 or rank-2 tensor.

        Raises
        ------
        UnsupportedOperationError
            For any other rank.
        """
        if self.ndim == 1:
            return self.unsqueeze(0).softmax().squeeze(0)
        if self.ndim != 2:
            raise UnsupportedOperationError(
                "softmax", f"expects a rank-1 or rank-2 tensor, got rank {self.ndim}"
            )
        return self._wrap(get_backend().softmax(self))

    def __add__(self, other: Union[ITensor, Number]) -> ITensor:
        return self.add(other)

    def __radd__(self, other: Number) -> ITensor:
        return self.add(other)

    def __mul__(self, other: Number) -> ITensor:
        if not isinstance(other, numbers.Number):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other: Number) -> ITensor:
        return self.__mul__(other)

    def __truediv__(self, other: Number) -> ITensor:
        if not isinstance(other, numbers.Number):
            return NotImplemented
        return self.divide(other)
