"""
Half-open range specification used for single-axis range indexing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ._errors import OutOfRangeError


class RangeStyle(Enum):
    """
    Interpretation of the upper bound of ``[start, limit]`` index pairs.

    Attributes
    ----------
    DEFAULT : RangeStyle
        ``limit`` is exclusive (``[start, limit)``).
    INCLUSIVE : RangeStyle
        ``limit`` is inclusive (``[start, limit]``).
    """

    DEFAULT = 0
    INCLUSIVE = 1


@dataclass(frozen=True)
class Range:
    """
    A ``[start, limit)`` interval with a unit step.

    Parameters
    ----------
    start : int
        First index in the range.
    limit : int
        One past the last index in the range.
    delta : int, optional
        Step between indices. Only 1 is supported. Defaults to 1.

    Raises
    ------
    OutOfRangeError
        If ``start > limit`` or ``delta != 1``.
    """

    start: int
    limit: int
    delta: int = 1

    def __post_init__(self) -> None:
        if self.start > self.limit or self.delta != 1:
            det = f":[{self.start},{self.limit}"
            if self.delta != 1:
                det += f",{self.delta}"
            raise OutOfRangeError(f"Illegal range specification.{det}]", index=self)

    def __len__(self) -> int:
        return self.limit - self.start
