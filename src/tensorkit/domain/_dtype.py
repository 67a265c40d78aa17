"""
Element kind definitions.

`DType` is a closed enumeration of the element kinds a buffer may hold. Each
member's value is the stable integer tag written into serialized tensors, so
tags must never be renumbered.

The enum also centralizes scalar classification (bool / real / complex) used
by tensor construction and element assignment, so every call site handles
the same fixed set of kinds instead of inspecting runtime types ad hoc.
"""

from __future__ import annotations

import numbers
from enum import Enum
from typing import Any

import numpy as np

from ._errors import InvalidDTypeError


class DType(Enum):
    """
    Supported element kinds.

    Attributes
    ----------
    BOOL, INT8, INT16, INT32, INT64, UINT8, UINT16, UINT32, UINT64 : DType
        Boolean and fixed-width integer kinds.
    FLOAT32, FLOAT64 : DType
        IEEE-754 floating point kinds.
    COMPLEX64, COMPLEX128 : DType
        Complex kinds made of two float32 / float64 components.
    """

    BOOL = 1
    INT8 = 2
    INT16 = 3
    INT32 = 4
    INT64 = 5
    UINT8 = 6
    UINT16 = 7
    UINT32 = 8
    UINT64 = 9
    FLOAT32 = 12
    FLOAT64 = 13
    COMPLEX64 = 33
    COMPLEX128 = 34

    @property
    def tag(self) -> int:
        """Integer tag used on the wire."""
        return self.value

    @property
    def numpy(self) -> np.dtype:
        """
        Return the little-endian NumPy dtype for this kind.

        Returns
        -------
        np.dtype
            Matching NumPy dtype with explicit little-endian byte order
            (bool and 1-byte integers have no byte order).
        """
        return _NUMPY_DTYPES[self]

    @property
    def itemsize(self) -> int:
        return int(self.numpy.itemsize)

    @property
    def is_bool(self) -> bool:
        return self is DType.BOOL

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_KINDS

    @property
    def is_float(self) -> bool:
        return self in (DType.FLOAT32, DType.FLOAT64)

    @property
    def is_complex(self) -> bool:
        return self in (DType.COMPLEX64, DType.COMPLEX128)

    @classmethod
    def resolve(cls, dtype: Any) -> "DType":
        """
        Normalize a user-facing dtype specification into a `DType`.

        Parameters
        ----------
        dtype : Any
            A `DType`, a kind name (``"float32"``), an integer wire tag, or
            anything accepted by ``np.dtype``.

        Returns
        -------
        DType
            The matching element kind.

        Raises
        ------
        InvalidDTypeError
            If `dtype` does not name a supported kind.
        """
        if isinstance(dtype, DType):
            return dtype
        if isinstance(dtype, bool):
            raise InvalidDTypeError(f"Unknown dtype: {dtype!r}", dtype=dtype)
        if isinstance(dtype, int):
            try:
                return cls(dtype)
            except ValueError:
                raise InvalidDTypeError(
                    f"Unknown dtype tag: {dtype}", dtype=dtype
                ) from None
        if isinstance(dtype, str) and dtype.upper() in cls.__members__:
            return cls[dtype.upper()]
        try:
            np_dtype = np.dtype(dtype)
        except TypeError:
            raise InvalidDTypeError(f"Unknown dtype: {dtype!r}", dtype=dtype) from None
        kind = _BY_NUMPY_NAME.get(np_dtype.name)
        if kind is None:
            raise InvalidDTypeError(f"Unsupported dtype: {np_dtype}", dtype=dtype)
        return kind

    @classmethod
    def infer_scalar(cls, value: Any, dtype: Any = None) -> "DType":
        """
        Infer (or validate) the element kind used to store a single scalar.

        Without an explicit `dtype`, reals map to FLOAT32, bools to BOOL and
        complex numbers to COMPLEX64. With an explicit `dtype`, bool values
        require BOOL and complex values require a complex kind; real values
        are accepted by every kind.

        Raises
        ------
        InvalidDTypeError
            If `value` is not a scalar, or does not fit the requested kind.
        """
        category = scalar_category(value)
        if category is None:
            raise InvalidDTypeError(
                f"Expected a scalar value, got {type(value).__name__}", value=value
            )

        if dtype is None:
            return {
                "bool": cls.BOOL,
                "real": cls.FLOAT32,
                "complex": cls.COMPLEX64,
            }[category]

        kind = cls.resolve(dtype)
        if category == "bool" and not kind.is_bool:
            raise InvalidDTypeError(
                "unmatch dtype with bool value", dtype=kind, value=value
            )
        if category == "complex" and not kind.is_complex:
            raise InvalidDTypeError(
                "unmatch dtype with complex value", dtype=kind, value=value
            )
        return kind

    def check_scalar(self, value: Any) -> None:
        """
        Validate a value before it is written into a buffer of this kind.

        Complex kinds accept only complex values; every other kind accepts
        bool and real scalars.

        Raises
        ------
        InvalidDTypeError
            If the value does not match this element kind.
        """
        category = scalar_category(value)
        if self.is_complex:
            if category != "complex":
                raise InvalidDTypeError("Must be complex type", dtype=self, value=value)
            return
        if category not in ("bool", "real"):
            raise InvalidDTypeError("Must be scalar type", dtype=self, value=value)

    def __str__(self) -> str:
        return self.name.lower()


def scalar_category(value: Any) -> Any:
    """
    Classify a value as ``"bool"``, ``"real"``, ``"complex"`` or None.

    NumPy scalars are classified like their Python counterparts.
    """
    if isinstance(value, (bool, np.bool_)):
        return "bool"
    if isinstance(value, numbers.Real):
        return "real"
    if isinstance(value, numbers.Complex):
        return "complex"
    return None


_NUMPY_DTYPES = {
    DType.BOOL: np.dtype("?"),
    DType.INT8: np.dtype("i1"),
    DType.INT16: np.dtype("<i2"),
    DType.INT32: np.dtype("<i4"),
    DType.INT64: np.dtype("<i8"),
    DType.UINT8: np.dtype("u1"),
    DType.UINT16: np.dtype("<u2"),
    DType.UINT32: np.dtype("<u4"),
    DType.UINT64: np.dtype("<u8"),
    DType.FLOAT32: np.dtype("<f4"),
    DType.FLOAT64: np.dtype("<f8"),
    DType.COMPLEX64: np.dtype("<c8"),
    DType.COMPLEX128: np.dtype("<c16"),
}

_BY_NUMPY_NAME = {np_dtype.name: kind for kind, np_dtype in _NUMPY_DTYPES.items()}

_INTEGER_KINDS = frozenset(
    (
        DType.INT8,
        DType.INT16,
        DType.INT32,
        DType.INT64,
        DType.UINT8,
        DType.UINT16,
        DType.UINT32,
        DType.UINT64,
    )
)
