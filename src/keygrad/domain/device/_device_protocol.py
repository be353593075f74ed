"""
Duck-typed device contract.

Tensor backends may bring their own device descriptor type. The variable core
only relies on the members listed in `DeviceLike`, so any descriptor that
provides them can flow through `Variable.is_cuda` and the device guard
without an `isinstance` check against the concrete `Device` class.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class DeviceLike(Protocol):
    """
    Structural device contract.

    Notes
    -----
    `ordinal` is the integer the device guard switches to: the CUDA ordinal,
    or ``-1`` for the CPU.
    """

    type: object
    index: Optional[int]

    @property
    def ordinal(self) -> int: ...

    def is_cpu(self) -> bool: ...
    def is_cuda(self) -> bool: ...
    def __str__(self) -> str: ...
