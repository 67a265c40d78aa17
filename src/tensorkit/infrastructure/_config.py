"""
Process-wide tensor configuration.

Settings are read once from ``TENSORKIT_*`` environment variables and can be
overridden at runtime:

- ``TENSORKIT_BACKEND``: name of the default backend provider
  (``"numpy"`` or ``"python"``; default ``"numpy"``).
- ``TENSORKIT_RANGE_STYLE``: ``"default"`` (exclusive upper bound) or
  ``"inclusive"`` for ``[start, limit]`` index pairs.
- ``TENSORKIT_PORTABLE_SERIALIZE``: when truthy, newly created tensors
  serialize in the element-list (``linear-array``) mode.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from ..domain._range import RangeStyle

BACKEND_ENV = "TENSORKIT_BACKEND"
RANGE_STYLE_ENV = "TENSORKIT_RANGE_STYLE"
PORTABLE_SERIALIZE_ENV = "TENSORKIT_PORTABLE_SERIALIZE"

_FALSY = ("", "0", "false", "no", "off")


@dataclass
class TensorConfig:
    """
    Mutable configuration shared by all tensors in the process.

    Attributes
    ----------
    backend : str
        Name of the backend selected when nothing was set explicitly.
    range_style : RangeStyle
        How the upper bound of ``[start, limit]`` pairs is interpreted.
    portable_serialize : bool
        Default value of `Tensor.portable_serialize_mode` for new tensors.
    """

    backend: str = "numpy"
    range_style: RangeStyle = RangeStyle.DEFAULT
    portable_serialize: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TensorConfig":
        """
        Build a configuration from environment variables.

        Parameters
        ----------
        environ : Optional[Mapping[str, str]], optional
            Mapping to read from. Defaults to ``os.environ``.

        Raises
        ------
        ValueError
            If ``TENSORKIT_RANGE_STYLE`` names an unknown style.
        """
        env = os.environ if environ is None else environ
        style_name = env.get(RANGE_STYLE_ENV, "default").strip().upper()
        if style_name not in RangeStyle.__members__:
            raise ValueError(
                f"Invalid {RANGE_STYLE_ENV} '{style_name.lower()}'. "
                "Expected 'default' or 'inclusive'"
            )
        return cls(
            backend=env.get(BACKEND_ENV, "numpy").strip().lower() or "numpy",
            range_style=RangeStyle[style_name],
            portable_serialize=env.get(PORTABLE_SERIALIZE_ENV, "0").strip().lower()
            not in _FALSY,
        )


_config: Optional[TensorConfig] = None


def get_config() -> TensorConfig:
    """Return the process configuration, reading the environment on first use."""
    global _config
    if _config is None:
        _config = TensorConfig.from_env()
    return _config


def set_range_style(style: Union[RangeStyle, str]) -> None:
    """
    Change how ``[start, limit]`` index pairs are interpreted.

    Parameters
    ----------
    style : Union[RangeStyle, str]
        A `RangeStyle` or its name (case-insensitive).
    """
    if not isinstance(style, RangeStyle):
        style = RangeStyle[str(style).upper()]
    get_config().range_style = style


def reset_config() -> None:
    """Forget runtime overrides; the next access re-reads the environment."""
    global _config
    _config = None
