"""
Scoped device context switching.

Gradient accumulation must run on the device that holds the incoming
gradient. `device_guard` makes that device current for the duration of a
``with`` block and restores the previous one on exit, on the error path too.

The current device is thread-local. CPU ordinals (negative values) leave the
context untouched, so on a CPU-only build the guard is a no-op.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from ...domain.device._device import CPU_DEVICE_INDEX

logger = logging.getLogger(__name__)

_state = threading.local()


def current_device() -> int:
    """
    Return the CUDA ordinal current on this thread, or ``-1`` if none is set.
    """
    return getattr(_state, "device", CPU_DEVICE_INDEX)


def _set_device(index: int) -> None:
    _state.device = index


@contextmanager
def device_guard(index: int) -> Iterator[int]:
    """
    Make CUDA device `index` current within the block.

    Parameters
    ----------
    index : int
        CUDA ordinal to switch to. Negative values (the CPU) do nothing.

    Yields
    ------
    int
        The ordinal current inside the block.
    """
    if index < 0:
        yield current_device()
        return

    previous = current_device()
    if previous != index:
        logger.debug("switching device context %d -> %d", previous, index)
    _set_device(index)
    try:
        yield index
    finally:
        _set_device(previous)
