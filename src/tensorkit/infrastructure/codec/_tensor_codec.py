"""
Tensor serialization codec and buffer duplication.

Wire format
-----------
A serialized tensor is the literal marker ``b"NDArray:"`` followed by a UTF-8
JSON record::

    {
      "m": "machine",          # mode tag
      "s": [2, 3],             # shape
      "o": 0,                  # offset into the buffer
      "t": 12,                 # DType wire tag
      "z": 6,                  # declared buffer length (slots)
      "b": "<payload>"
    }

Modes
-----
- ``"machine"``: ``b`` is the base64 of the buffer's raw little-endian bytes.
- ``"rindow_openblas"``: written by older producers, decoded like
  ``"machine"``.
- ``"linear-array"``: legacy/portable; ``b`` lists every buffer element
  (complex elements as ``[real, imag]``).

The whole buffer is written (not only the tensor's window), so a decoded
tensor keeps the original offset.

Capability tiers
----------------
Bulk byte transfer (`dump`/`load`) is only used when the participating
backends declare `BackendCapability.ADVANCED`; BASIC backends are read and
written element by element; NONE backends cannot be cloned or transferred.
"""

from __future__ import annotations

import json
from typing import Any, Union

import numpy as np

from ...domain._backend import BackendCapability, IBackend, KernelResult
from ...domain._buffer import IBuffer
from ...domain._dtype import DType
from ...domain._errors import (
    BackendMismatchError,
    CloneUnsupportedError,
    CorruptedStateError,
    InvalidDTypeError,
    InvalidShapeError,
    UnsupportedOperationError,
)
from ...domain.utils._index_math import assert_shape, numel
from .._logging import get_logger
from ..encoding._b64 import (
    b64_str_to_bytes,
    bytes_to_b64_str,
    elements_to_payload,
    payload_to_elements,
)

logger = get_logger("codec")

SERIALIZE_MARKER = b"NDArray:"

MODE_MACHINE = "machine"
MODE_OPENBLAS = "rindow_openblas"
MODE_LINEAR_ARRAY = "linear-array"

_MACHINE_MODES = (MODE_MACHINE, MODE_OPENBLAS)
_RECORD_KEYS = ("m", "s", "o", "t", "z", "b")


def _raw_bytes(buffer: IBuffer, backend: IBackend) -> bytes:
    if backend.capability >= BackendCapability.ADVANCED:
        return buffer.dump()
    return np.ascontiguousarray(buffer.to_numpy(), dtype=buffer.dtype.numpy).tobytes()


def encode(tensor: Any, portable: bool = False) -> bytes:
    """
    Serialize a tensor into the tagged byte format.

    Parameters
    ----------
    tensor : ITensor
        Tensor to encode. Its whole buffer is written.
    portable : bool, optional
        Emit the element-listing ``linear-array`` mode instead of the raw
        ``machine`` dump. Defaults to False.

    Returns
    -------
    bytes
        ``SERIALIZE_MARKER`` followed by the JSON record.
    """
    buffer = tensor.buffer
    dtype = tensor.dtype
    if portable:
        mode = MODE_LINEAR_ARRAY
        payload: Any = elements_to_payload(list(buffer), dtype)
    else:
        mode = MODE_MACHINE
        payload = bytes_to_b64_str(_raw_bytes(buffer, tensor.backend))

    record = {
        "m": mode,
        "s": list(tensor.shape),
        "o": int(tensor.offset),
        "t": dtype.tag,
        "z": len(buffer),
        "b": payload,
    }
    return SERIALIZE_MARKER + json.dumps(record, separators=(",", ":")).encode("utf-8")


def _parse(data: Union[bytes, bytearray, str]) -> dict[str, Any]:
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not isinstance(data, (bytes, bytearray)):
        raise CorruptedStateError(
            f"Invalid saved data: expected bytes, got {type(data).__name__}"
        )
    if not data.startswith(SERIALIZE_MARKER):
        raise CorruptedStateError("Invalid saved data: missing NDArray marker")
    try:
        record = json.loads(bytes(data[len(SERIALIZE_MARKER):]).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CorruptedStateError(f"Invalid saved data: {exc}") from exc
    if not isinstance(record, dict) or any(k not in record for k in _RECORD_KEYS):
        raise CorruptedStateError(
            f"Invalid saved data: record must contain keys {list(_RECORD_KEYS)}"
        )
    return record


def decode(data: Union[bytes, bytearray, str], backend: IBackend) -> KernelResult:
    """
    Decode a serialized tensor into a buffer of `backend`.

    Parameters
    ----------
    data : Union[bytes, bytearray, str]
        Output of `encode` (a ``str`` is encoded as UTF-8 first).
    backend : IBackend
        Provider that allocates the decoded buffer.

    Returns
    -------
    KernelResult
        Buffer, dtype, shape and offset of the decoded tensor.

    Raises
    ------
    CorruptedStateError
        If the marker is missing or the record is malformed.
    UnsupportedOperationError
        If the mode tag is not recognized.
    """
    record = _parse(data)
    mode = record["m"]

    try:
        shape = assert_shape(record["s"])
        dtype = DType.resolve(record["t"])
    except (InvalidShapeError, InvalidDTypeError) as exc:
        raise CorruptedStateError(f"Invalid saved data: {exc}") from exc
    offset, size = record["o"], record["z"]
    if any(isinstance(v, bool) or not isinstance(v, int) or v < 0 for v in (offset, size)):
        raise CorruptedStateError(
            f"Invalid saved data: offset={offset!r}, length={size!r}"
        )
    if offset + numel(shape) > size:
        raise CorruptedStateError(
            f"Invalid saved data: buffer of {size} elements cannot hold shape "
            f"{shape} at offset {offset}"
        )

    logger.debug(
        "decoding mode=%s shape=%s dtype=%s into backend '%s'",
        mode, shape, dtype, backend.name,
    )

    if mode in _MACHINE_MODES:
        raw = b64_str_to_bytes(str(record["b"]))
        buffer = backend.allocate(size, dtype)
        if backend.capability >= BackendCapability.ADVANCED:
            buffer.load(raw)
        else:
            if len(raw) != size * dtype.itemsize:
                raise CorruptedStateError(
                    f"Buffer payload has {len(raw)} bytes, expected {size * dtype.itemsize}"
                )
            for i, value in enumerate(np.frombuffer(raw, dtype=dtype.numpy).tolist()):
                buffer[i] = value
    elif mode == MODE_LINEAR_ARRAY:
        # Compatibility with older producers.
        if not isinstance(record["b"], list) or len(record["b"]) > size:
            raise CorruptedStateError("Invalid saved data: malformed element listing")
        buffer = backend.allocate(size, dtype)
        try:
            for i, value in enumerate(payload_to_elements(record["b"], dtype)):
                buffer[i] = value
        except (TypeError, ValueError) as exc:
            raise CorruptedStateError(f"Invalid saved data: {exc}") from exc
    else:
        raise UnsupportedOperationError("unserialize", f"Illegal save mode: {mode}")

    return KernelResult(buffer, dtype, shape, offset)


def transfer(buffer: IBuffer, source: IBackend, target: IBackend) -> IBuffer:
    """
    Re-materialize a buffer owned by `source` into a buffer of `target`.

    Bytes are bulk-copied when both providers are ADVANCED; otherwise the
    buffer is copied element by element.

    Raises
    ------
    BackendMismatchError
        If either provider declares `BackendCapability.NONE`.
    """
    if BackendCapability.NONE in (source.capability, target.capability):
        raise BackendMismatchError(
            source.name, target.name, "capability tier NONE offers no copy primitive"
        )
    new_buffer = target.allocate(len(buffer), buffer.dtype)
    if (
        source.capability >= BackendCapability.ADVANCED
        and target.capability >= BackendCapability.ADVANCED
    ):
        logger.debug("bulk transfer %s -> %s", source.name, target.name)
        new_buffer.load(buffer.dump())
    else:
        logger.debug("element-wise transfer %s -> %s", source.name, target.name)
        for i in range(len(buffer)):
            new_buffer[i] = buffer[i]
    return new_buffer


def duplicate(buffer: IBuffer, backend: IBackend) -> IBuffer:
    """
    Copy a buffer according to the owning provider's capability tier.

    Parameters
    ----------
    buffer : IBuffer
        Buffer to copy.
    backend : IBackend
        Provider that owns `buffer`.

    Returns
    -------
    IBuffer
        An independent buffer with identical contents.

    Raises
    ------
    CloneUnsupportedError
        If the provider declares `BackendCapability.NONE`.
    """
    capability = backend.capability
    logger.debug("cloning buffer on '%s' (capability=%s)", backend.name, capability.name)
    if capability >= BackendCapability.ADVANCED:
        new_buffer = backend.allocate(len(buffer), buffer.dtype)
        new_buffer.load(buffer.dump())
        return new_buffer
    if capability >= BackendCapability.BASIC:
        return buffer.copy()
    raise CloneUnsupportedError(backend.name)
