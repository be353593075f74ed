"""
Runtime settings and logger setup for KeyGrad.

Settings are read from environment variables once and frozen:

- ``KEYGRAD_LOG_LEVEL``: level of the ``keygrad`` logger (default ``WARNING``).
- ``KEYGRAD_DEFAULT_DTYPE``: element dtype of tensors created without an
  explicit dtype, ``float32`` (default) or ``float64``.

Every module logs through ``logging.getLogger(__name__)``; the handler and
level live on the package logger configured by `get_logger`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

import numpy as np

LOGGER_NAME = "keygrad"

_LOG_FORMAT = "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"
_SUPPORTED_DTYPES = ("float32", "float64")


@dataclass(frozen=True)
class Settings:
    """
    Frozen KeyGrad runtime settings.

    Attributes
    ----------
    log_level : str
        Name of the logging level applied to the ``keygrad`` logger.
    default_dtype : str
        Name of the NumPy dtype used when a tensor is created without one.
    """

    log_level: str = "WARNING"
    default_dtype: str = "float32"

    @property
    def numpy_dtype(self) -> np.dtype:
        """Return `default_dtype` as a NumPy dtype."""
        return np.dtype(self.default_dtype)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from an environment mapping.

    Parameters
    ----------
    environ : Optional[Mapping[str, str]], optional
        Source of variables. Defaults to ``os.environ``.

    Returns
    -------
    Settings
        Parsed settings.

    Raises
    ------
    ValueError
        If ``KEYGRAD_DEFAULT_DTYPE`` names an unsupported dtype.
    """
    env = os.environ if environ is None else environ

    level = _parse_log_level(env)
    dtype = env.get("KEYGRAD_DEFAULT_DTYPE", "float32").strip().lower() or "float32"
    if dtype not in _SUPPORTED_DTYPES:
        raise ValueError(
            f"KEYGRAD_DEFAULT_DTYPE must be one of {_SUPPORTED_DTYPES}, got {dtype!r}"
        )

    return Settings(log_level=level, default_dtype=dtype)


def _parse_log_level(env: Mapping[str, str]) -> str:
    level = env.get("KEYGRAD_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    if not isinstance(logging.getLevelName(level), int):
        return "WARNING"
    return level


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """
    Return the process-wide settings, read from ``os.environ`` on first use.

    Notes
    -----
    Call ``get_settings.cache_clear()`` after changing the environment to
    pick up new values.
    """
    return load_settings()


def get_logger() -> logging.Logger:
    """
    Return the ``keygrad`` package logger, configuring it on first use.

    A single stream handler is attached the first time. The level is re-read
    from ``KEYGRAD_LOG_LEVEL`` on every call. No other setting is parsed, so a
    bad ``KEYGRAD_DEFAULT_DTYPE`` only surfaces when a tensor needs it.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(_parse_log_level(os.environ))
    return logger
