from ._tensor_codec import (
    SERIALIZE_MARKER,
    MODE_MACHINE,
    MODE_OPENBLAS,
    MODE_LINEAR_ARRAY,
    encode,
    decode,
    transfer,
    duplicate,
)

__all__ = [
    "SERIALIZE_MARKER",
    "MODE_MACHINE",
    "MODE_OPENBLAS",
    "MODE_LINEAR_ARRAY",
    encode.__name__,
    decode.__name__,
    transfer.__name__,
    duplicate.__name__,
]
