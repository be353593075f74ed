"""
Tensor interface definitions.

This module defines the domain-level contract the variable core expects from
a tensor backend. The core never performs tensor arithmetic of its own: it
only copies tensors (deeply or shallowly), adds one tensor into another in
place while accumulating gradients, and asks where a tensor lives.

Notes
-----
- The protocol is structural (`typing.Protocol`) so that any backend, not
  only the bundled NumPy `Tensor`, can be wrapped by a `Variable`.
- `clone` and `clone_shallow` differ in storage sharing, not in object
  identity: both return a new tensor object. Only `clone` promises that later
  mutation of the source is invisible through the copy.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .device._device_protocol import DeviceLike


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface consumed by the variable core.

    Notes
    -----
    Implementations are free to expose far more (arithmetic, reductions, IO);
    these members are the whole surface `Variable` and `SavedVariable` touch.
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the tensor.

        Returns
        -------
        tuple[int, ...]
            The tensor's shape.
        """
        ...

    @property
    def device(self) -> DeviceLike:
        """
        Return the device on which this tensor resides.

        Returns
        -------
        DeviceLike
            The tensor's device placement descriptor.
        """
        ...

    def clone(self) -> "ITensor":
        """
        Return a deep copy of this tensor.

        Returns
        -------
        ITensor
            A tensor with independent storage. Mutating either tensor
            afterwards never changes the values observed through the other.
        """
        ...

    def clone_shallow(self) -> "ITensor":
        """
        Return a new tensor header over the same storage.

        Returns
        -------
        ITensor
            A distinct tensor object that may alias this tensor's storage.
            Its validity after in-place mutation is governed by the version
            counter protocol, not by the storage itself.
        """
        ...

    def add_(self, other: "ITensor") -> "ITensor":
        """
        Add `other` into this tensor element-wise, in place.

        Parameters
        ----------
        other : ITensor
            Tensor of the same shape and device.

        Returns
        -------
        ITensor
            `self`, after the update.
        """
        ...

    def is_cuda(self) -> bool:
        """
        Return True if the tensor's storage lives on a CUDA device.
        """
        ...

    def get_device(self) -> int:
        """
        Return the CUDA ordinal of the tensor, or ``-1`` on the CPU.
        """
        ...

    def to_numpy(self) -> Any:
        """
        Return the tensor's values as a backend-native host array.
        """
        ...
