"""
Concrete Tensor implementation.

A `Tensor` is a shape plus an offset into a flat element buffer owned by a
backend provider. Row-major strides are always derived from the shape, so
views (integer/range indexing, reshape, unsqueeze) are new `Tensor` objects
sharing the same buffer object with a different offset and shape.

Design notes
------------
- Numeric kernels are never computed here: operations validate their inputs,
  call the active backend provider, and wrap the returned `KernelResult`
  without copying (`_wrap`).
- Serialization goes through `tensorkit.infrastructure.codec`; cloning and
  cross-backend transfer branch on the provider's declared capability tier.
- Pickling is routed through `serialize`/`unserialize`, so a pickled tensor
  round-trips through the same byte format.
"""

from __future__ import annotations

import numbers
from typing import Any, Optional, Sequence, Union

import numpy as np
from typing_extensions import Self

from ...domain._backend import IBackend, KernelResult
from ...domain._buffer import IBuffer
from ...domain._dtype import DType
from ...domain._errors import InvalidDTypeError, InvalidShapeError
from ...domain.utils._index_math import assert_shape, numel, strides
from .._config import get_config
from ..backends import backend_for_buffer, get_backend
from ..codec import decode, duplicate, encode, transfer
from .mixins.arithmetic import TensorMixinArithmetic
from .mixins.indexing import TensorMixinIndexing
from .mixins.reduction import TensorMixinReduction
from .mixins.structure import TensorMixinStructure


def _is_sequence(value: Any) -> bool:
    if isinstance(value, np.ndarray):
        return value.ndim > 0
    return isinstance(value, (list, tuple))


def _flatten(value: Any) -> tuple[list[Any], tuple[int, ...]]:
    """
    Flatten a nested sequence and infer its shape.

    Raises
    ------
    InvalidShapeError
        If sibling sub-sequences do not share the same shape.
    """
    if not _is_sequence(value):
        return [value], ()
    if len(value) == 0:
        return [], (0,)
    values: list[Any] = []
    inner: Optional[tuple[int, ...]] = None
    for item in value:
        item_values, item_shape = _flatten(item)
        if inner is None:
            inner = item_shape
        elif item_shape != inner:
            raise InvalidShapeError(
                "The shape of the dimension is broken", shape=item_shape
            )
        values.extend(item_values)
    return values, (len(value),) + inner


class Tensor(
    TensorMixinIndexing,
    TensorMixinReduction,
    TensorMixinStructure,
    TensorMixinArithmetic,
):
    """
    N-dimensional array over a flat, backend-owned element buffer.

    Parameters
    ----------
    array : Any, optional
        One of:

        - None: allocate a zero-filled buffer for `shape`;
        - an `IBuffer`: wrap it without copying (`shape` required, `offset`
          defaults to 0);
        - a nested list/tuple (or NumPy array): copy its elements into a new
          buffer, inferring the shape;
        - a bool/real/complex scalar: build a single-element tensor
          (rank 0 unless `shape` says otherwise).
    dtype : Any, optional
        Element kind (`DType`, name, tag or NumPy dtype). Defaults to the
        buffer's kind for buffers, to the inferred kind for scalars, and to
        FLOAT32 otherwise.
    shape : Sequence[int], optional
        Logical shape. Overrides the inferred shape of sequences.
    offset : int, optional
        Position of the first element inside a wrapped buffer (required when
        `array` is a buffer).

    Raises
    ------
    InvalidShapeError
        If the shape is malformed, nested sequences are ragged, or the buffer
        cannot hold `size()` elements past `offset`.
    InvalidDTypeError
        If a scalar or sequence does not fit the requested element kind.

    Examples
    --------
    >>> Tensor([[1, 2], [3, 4]]).shape
    (2, 2)
    >>> Tensor(shape=(3,), dtype="int32").to_list()
    [0, 0, 0]
    >>> Tensor(2.5).shape
    ()
    """

    def __init__(
        self,
        array: Any = None,
        dtype: Any = None,
        shape: Optional[Sequence[int]] = None,
        offset: Optional[int] = None,
    ) -> None:
        backend = get_backend()
        if isinstance(array, np.ndarray) and array.ndim == 0:
            array = array.item()

        if array is None:
            if shape is None:
                raise InvalidShapeError("Tensor requires an array or a shape")
            shape = assert_shape(shape)
            kind = DType.FLOAT32 if dtype is None else DType.resolve(dtype)
            buffer = backend.allocate(numel(shape), kind)
            offset = 0

        elif isinstance(array, Tensor):
            kind = array.dtype if dtype is None else DType.resolve(dtype)
            buffer = backend.wrap(array.to_numpy().astype(kind.numpy), kind)
            shape = array.shape if shape is None else assert_shape(shape)
            offset = 0

        elif isinstance(array, IBuffer):
            if shape is None:
                raise InvalidShapeError("shape must be given when wrapping a buffer")
            if offset is None:
                raise InvalidShapeError("Must specify offset with the buffer")
            if isinstance(offset, bool) or not isinstance(offset, numbers.Integral):
                raise InvalidShapeError(
                    f"Offset must be integer. It gives {type(offset).__name__}"
                )
            kind = array.dtype if dtype is None else DType.resolve(dtype)
            if kind is not array.dtype:
                raise InvalidDTypeError(
                    f"Unmatched dtype with buffer: {kind} vs {array.dtype}", dtype=kind
                )
            shape = assert_shape(shape)
            buffer = array
            offset = int(offset)
            backend = backend_for_buffer(buffer)

        elif _is_sequence(array):
            if isinstance(array, np.ndarray):
                values, inferred = array.ravel().tolist(), tuple(array.shape)
            else:
                values, inferred = _flatten(array)
            shape = inferred if shape is None else assert_shape(shape)
            kind = DType.FLOAT32 if dtype is None else DType.resolve(dtype)
            if not kind.is_complex and any(
                isinstance(v, numbers.Complex) and not isinstance(v, numbers.Real)
                for v in values
            ):
                raise InvalidDTypeError(
                    "unmatch dtype with complex value", dtype=kind
                )
            try:
                buffer = backend.wrap(np.asarray(values, dtype=kind.numpy), kind)
            except (TypeError, ValueError) as exc:
                raise InvalidDTypeError(
                    f"Invalid element for dtype {kind}: {exc}", dtype=kind
                ) from exc
            offset = 0

        elif isinstance(array, numbers.Number) or isinstance(array, np.bool_):
            kind = DType.infer_scalar(array, dtype)
            shape = () if shape is None else assert_shape(shape)
            if numel(shape) != 1:
                raise InvalidShapeError(
                    f"A scalar needs a single-element shape, got {shape}", shape=shape
                )
            buffer = backend.allocate(1, kind)
            buffer[0] = array
            offset = 0

        else:
            raise InvalidShapeError(
                f"Invalid type of array: {type(array).__name__}"
            )

        self._init_fields(buffer, kind, shape, offset, backend)

    def _init_fields(
        self,
        buffer: IBuffer,
        dtype: DType,
        shape: tuple[int, ...],
        offset: int,
        backend: IBackend,
    ) -> None:
        if offset < 0 or len(buffer) - offset < numel(shape):
            raise InvalidShapeError(
                f"Invalid dimension size: buffer of {len(buffer)} elements cannot "
                f"hold shape {shape} at offset {offset}",
                shape=shape,
            )
        self._buffer = buffer
        self._dtype = dtype
        self._shape = tuple(shape)
        self._offset = int(offset)
        self._backend = backend
        self._portable_serialize = get_config().portable_serialize

    @classmethod
    def _from_parts(
        cls,
        buffer: IBuffer,
        dtype: DType,
        shape: Sequence[int],
        offset: int = 0,
        backend: Optional[IBackend] = None,
    ) -> Self:
        """
        Build a tensor over an existing buffer, bypassing `__init__`.

        Shape and offset are trusted; only the capacity invariant is checked.
        """
        obj = cls.__new__(cls)
        obj._init_fields(
            buffer,
            dtype,
            tuple(int(d) for d in shape),
            offset,
            get_backend() if backend is None else backend,
        )
        return obj

    def _view(self, shape: Sequence[int], offset: int) -> Self:
        """Return a tensor sharing this tensor's buffer."""
        return type(self)._from_parts(
            self._buffer, self._dtype, shape, offset, self._backend
        )

    def _wrap(self, result: KernelResult) -> Self:
        """Wrap a kernel result without copying."""
        return type(self)._from_parts(
            result.buffer,
            result.dtype,
            result.shape,
            result.offset,
            backend_for_buffer(result.buffer),
        )

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def buffer(self) -> IBuffer:
        return self._buffer

    @property
    def backend(self) -> IBackend:
        """The provider that owns `buffer`."""
        return self._backend

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def portable_serialize_mode(self) -> bool:
        """
        Whether `serialize` emits the element-listing ``linear-array`` mode.

        Defaults to ``TENSORKIT_PORTABLE_SERIALIZE`` at construction time.
        """
        return self._portable_serialize

    @portable_serialize_mode.setter
    def portable_serialize_mode(self, value: bool) -> None:
        self._portable_serialize = bool(value)

    def size(self) -> int:
        return numel(self._shape)

    def stride(self) -> tuple[int, ...]:
        return strides(self._shape)

    def __len__(self) -> int:
        return self._shape[0] if self._shape else 0

    def reshape(self, shape: Sequence[int]) -> Self:
        """
        Return a view with a new shape over the same elements.

        Raises
        ------
        InvalidShapeError
            If ``product(shape) != size()``.
        """
        shape = assert_shape(shape)
        if numel(shape) != self.size():
            raise InvalidShapeError(
                f"Unmatched size to reshape: {self._shape} -> {shape}", shape=shape
            )
        return self._view(shape, self._offset)

    # ------------------------------------------------------------------
    # Host interop
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """
        Return the logical elements as a NumPy array.

        For `NumpyBuffer` storage the result is a view of the buffer.
        """
        start = self._offset
        flat = self._buffer.to_numpy(start, start + self.size())
        return np.asarray(flat, dtype=self._dtype.numpy).reshape(self._shape)

    def to_flat_list(self) -> list[Any]:
        return self.to_numpy().ravel().tolist()

    def to_list(self) -> Any:
        """
        Return the elements as nested Python lists (a scalar for rank 0).
        """
        if not self._shape:
            return self._buffer[self._offset]
        return self.to_numpy().tolist()

    def item(self) -> Any:
        """
        Return the single element of a one-element tensor.

        Raises
        ------
        InvalidShapeError
            If the tensor does not hold exactly one element.
        """
        if self.size() != 1:
            raise InvalidShapeError(
                f"item() requires a single element, got shape {self._shape}",
                shape=self._shape,
            )
        return self._buffer[self._offset]

    @classmethod
    def from_numpy(cls, array: np.ndarray) -> Self:
        """Copy a NumPy array into a tensor of the matching element kind."""
        array = np.array(array, copy=True)
        kind = DType.resolve(array.dtype)
        backend = get_backend()
        return cls._from_parts(backend.wrap(array, kind), kind, array.shape, 0, backend)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def full(cls, shape: Sequence[int], value: Any, dtype: Any = None) -> Self:
        """Return a tensor of `shape` filled with `value`."""
        shape = assert_shape(shape)
        kind = DType.infer_scalar(value, dtype)
        return cls._from_parts(*get_backend().fill(shape, value, kind))

    @classmethod
    def zeros(cls, shape: Sequence[int], dtype: Any = None) -> Self:
        kind = DType.FLOAT32 if dtype is None else DType.resolve(dtype)
        return cls.full(shape, 0, kind)

    @classmethod
    def ones(cls, shape: Sequence[int], dtype: Any = None) -> Self:
        kind = DType.FLOAT32 if dtype is None else DType.resolve(dtype)
        return cls.full(shape, True if kind.is_bool else 1, kind)

    @classmethod
    def zeros_like(cls, other: Any) -> Self:
        return cls.zeros(other.shape, other.dtype)

    @classmethod
    def ones_like(cls, other: Any) -> Self:
        return cls.ones(other.shape, other.dtype)

    @classmethod
    def from_array(
        cls, array: Any, dtype: Any = None, shape: Optional[Sequence[int]] = None
    ) -> Self:
        """
        Build a tensor from a tensor, nested sequence or NumPy array.

        An existing tensor is returned as a view (optionally reshaped) when no
        dtype conversion is requested. An empty sequence yields a shape
        ``(0,)`` tensor.
        """
        if isinstance(array, Tensor):
            if dtype is not None and DType.resolve(dtype) is not array.dtype:
                array = array.to(dtype)
            return array if shape is None else array.reshape(shape)
        if isinstance(array, np.ndarray) and dtype is None and shape is None:
            return cls.from_numpy(array)
        return cls(array, dtype=dtype, shape=shape)

    # ------------------------------------------------------------------
    # Serialization, cloning, transfer
    # ------------------------------------------------------------------
    def serialize(self) -> bytes:
        """
        Encode the tensor into the ``NDArray:`` tagged byte format.

        The whole buffer is written together with the offset, so views
        round-trip with their offset intact.
        """
        return encode(self, portable=self._portable_serialize)

    @classmethod
    def unserialize(cls, data: Union[bytes, bytearray, str, "Tensor"]) -> Self:
        """
        Rebuild a tensor from `serialize` output into the active provider.

        A `Tensor` argument is re-materialized into the active provider when
        its buffer is owned by another one (and returned unchanged otherwise).

        Raises
        ------
        CorruptedStateError
            If the data is not a well-formed serialized tensor.
        UnsupportedOperationError
            If the serialized mode is unknown.
        """
        if isinstance(data, Tensor):
            return data.to_backend()
        backend = get_backend()
        return cls._from_parts(*decode(data, backend), backend)

    def to_backend(self, backend: Union[IBackend, str, None] = None) -> Self:
        """
        Return this tensor re-materialized into another provider.

        Parameters
        ----------
        backend : Union[IBackend, str, None], optional
            Target provider (instance or registered name). Defaults to the
            active provider.

        Raises
        ------
        BackendMismatchError
            If either provider declares capability NONE.
        """
        if backend is None or isinstance(backend, str):
            backend = get_backend(backend)
        if backend is self._backend:
            return self
        buffer = transfer(self._buffer, self._backend, backend)
        return type(self)._from_parts(
            buffer, self._dtype, self._shape, self._offset, backend
        )

    def clone(self) -> Self:
        """
        Return a tensor over an independent copy of the buffer.

        Raises
        ------
        CloneUnsupportedError
            If the owning provider declares capability NONE.
        """
        out = type(self)._from_parts(
            duplicate(self._buffer, self._backend),
            self._dtype,
            self._shape,
            self._offset,
            self._backend,
        )
        out._portable_serialize = self._portable_serialize
        return out

    duplicate = clone

    def __copy__(self) -> Self:
        return self.clone()

    def __deepcopy__(self, memo: dict) -> Self:
        out = self.clone()
        memo[id(self)] = out
        return out

    def __reduce__(self):
        return (type(self).unserialize, (self.serialize(),))

    def __repr__(self) -> str:
        return (
            f"Tensor(shape={self._shape}, dtype={self._dtype}, "
            f"offset={self._offset}, backend={self._backend.name!r})"
        )
