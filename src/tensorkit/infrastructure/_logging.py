"""
Package logger configuration.

All tensorkit modules log through children of the ``tensorkit`` logger
(e.g., ``tensorkit.codec``). The root package logger gets a single stream
handler on first use; its level comes from ``TENSORKIT_LOG_LEVEL`` and
defaults to WARNING.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LOGGER_NAME = "tensorkit"
LOG_LEVEL_ENV = "TENSORKIT_LOG_LEVEL"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return the package logger, or one of its children.

    Parameters
    ----------
    name : Optional[str], optional
        Child name relative to ``tensorkit`` (e.g., ``"codec"``).

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    root = logging.getLogger(LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
        root.setLevel(getattr(logging, level_name, logging.WARNING))

    if name is None:
        return root
    return root.getChild(name)
