from __future__ import annotations

import base64
import binascii
from typing import Any, List

from ...domain._dtype import DType
from ...domain._errors import CorruptedStateError


def bytes_to_b64_str(b: bytes) -> str:
    """
    Encode raw bytes into a base64 ASCII string (JSON-safe).
    """
    return base64.b64encode(b).decode("ascii")


def b64_str_to_bytes(s: str) -> bytes:
    """
    Decode a base64 ASCII string back into raw bytes.

    Raises
    ------
    CorruptedStateError
        If `s` is not valid base64.
    """
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, AttributeError) as exc:
        raise CorruptedStateError(f"Invalid base64 payload: {exc}") from exc


def elements_to_payload(values: List[Any], dtype: DType) -> List[Any]:
    """
    Convert buffer elements into a JSON-safe element listing.

    Complex values become ``[real, imag]`` pairs; every other kind is already
    a JSON scalar.
    """
    if dtype.is_complex:
        return [[float(v.real), float(v.imag)] for v in values]
    return list(values)


def payload_to_elements(payload: List[Any], dtype: DType) -> List[Any]:
    """
    Inverse of `elements_to_payload`.

    Raises
    ------
    CorruptedStateError
        If a complex entry is not a ``[real, imag]`` pair.
    """
    if not dtype.is_complex:
        return list(payload)
    out = []
    for item in payload:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise CorruptedStateError(f"Invalid complex element: {item!r}")
        out.append(complex(item[0], item[1]))
    return out
