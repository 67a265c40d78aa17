"""
Tensor-related exceptions for tensorkit.

This module defines the error kinds raised by the tensor core. Every error
derives from :class:`TensorError` and additionally from the closest built-in
exception type, so callers may catch either the tensorkit-specific class or
the familiar Python base (e.g., ``IndexError`` for out-of-range indices).

All errors are synchronous and locally non-recoverable: the core performs no
retries and never reports partial success. An operation either completes or
raises before writing into its own output.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class TensorError(Exception):
    """
    Base class for all tensorkit errors.
    """


class InvalidShapeError(TensorError, ValueError):
    """
    Raised when a shape is malformed or inconsistent with the data.

    Typical causes are negative or non-integer shape entries, nested input
    sequences whose siblings disagree in length, a buffer whose capacity
    (from the offset) cannot cover ``product(shape)``, or a reshape to a shape
    with a different element count.

    Attributes
    ----------
    shape : Optional[Sequence[Any]]
        The offending shape, when one is available.
    """

    def __init__(self, message: str, shape: Optional[Sequence[Any]] = None) -> None:
        """
        Initialize the InvalidShapeError.

        Parameters
        ----------
        message : str
            Human-readable description of the failure.
        shape : Optional[Sequence[Any]], optional
            The shape that triggered the error.
        """
        super().__init__(message)
        self.shape = None if shape is None else tuple(shape)


class InvalidDTypeError(TensorError, TypeError):
    """
    Raised when a value's kind is incompatible with a requested element kind.

    Examples include constructing a bool tensor from a float scalar with an
    explicit non-bool dtype, writing a complex value into a real tensor, or
    naming an element kind that does not exist.

    Attributes
    ----------
    dtype : Any
        The requested element kind.
    value : Any
        The value that could not be represented.
    """

    def __init__(self, message: str, dtype: Any = None, value: Any = None) -> None:
        super().__init__(message)
        self.dtype = dtype
        self.value = value


class OutOfRangeError(TensorError, IndexError):
    """
    Raised when an index or range falls outside the addressed axis.

    This includes malformed ranges where ``start > limit`` and ranges using a
    non-unit step.

    Attributes
    ----------
    index : Any
        The index or range specification that was rejected.
    size : Optional[int]
        Extent of the addressed axis, when known.
    axis : Optional[int]
        The addressed axis, when known.
    """

    def __init__(
        self,
        message: str,
        index: Any = None,
        size: Optional[int] = None,
        axis: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.size = size
        self.axis = axis


class UnsupportedOperationError(TensorError, NotImplementedError):
    """
    Raised when an operation is not defined for the given input.

    Used for range assignment, deletion through an index, unsupported ranks
    (top-k, softmax), and unknown serialization modes.

    Attributes
    ----------
    op : str
        Name of the rejected operation.
    """

    def __init__(self, op: str, reason: str) -> None:
        super().__init__(f"{op}: {reason}")
        self.op = op


class CorruptedStateError(TensorError, ValueError):
    """
    Raised when a serialized payload cannot be decoded.

    A payload is corrupted when it lacks the required marker, is not valid
    JSON, or is missing one of the required record fields.
    """


class BackendMismatchError(TensorError, RuntimeError):
    """
    Raised when a buffer cannot be transferred between two backends.

    Attributes
    ----------
    source : str
        Name of the backend that owns the buffer.
    target : str
        Name of the backend the buffer was being transferred to.
    """

    def __init__(self, source: str, target: str, reason: str) -> None:
        super().__init__(
            f"Cannot transfer buffer from backend '{source}' to '{target}': {reason}"
        )
        self.source = source
        self.target = target


class CloneUnsupportedError(TensorError, RuntimeError):
    """
    Raised when the active backend offers no buffer copy primitive.

    Attributes
    ----------
    backend : str
        Name of the backend whose capability tier is too low.
    """

    def __init__(self, backend: str) -> None:
        super().__init__(f"Buffers of backend '{backend}' are uncloneable.")
        self.backend = backend
