"""
Concrete Tensor implementation (NumPy backend).

This module provides the tensor collaborator wrapped by `Variable`. It
satisfies the domain-level `ITensor` protocol and implements exactly the
storage semantics the variable core relies on:

- `clone()` copies storage, so later mutation of either side is invisible
  through the other;
- `clone_shallow()` returns a new tensor object over the *same* ndarray, so
  in-place writes through the original remain visible through the copy;
- `add_()` adds element-wise into existing storage.

Design notes
------------
- CPU tensors are backed by NumPy arrays. CUDA tensors carry a device
  descriptor but no storage; every data operation on them raises
  `DeviceNotSupportedError`.
- Broadcasting is intentionally not implemented; `add_` requires an exact
  shape match, like KeyDNN's binary ops.
- The tensor knows nothing about autograd. Version tracking lives on the
  `Variable` that wraps it.
"""

from __future__ import annotations

from typing import Any, Optional, Union

import numpy as np

from ...domain._errors import (
    DeviceMismatchError,
    DeviceNotSupportedError,
    InvalidArgumentError,
)
from ...domain._tensor import ITensor
from ...domain.device._device import CPU_DEVICE_INDEX, Device
from .._config import get_settings

Number = Union[int, float]


class Tensor(ITensor):
    """
    Concrete tensor (NumPy CPU backend, CUDA placeholder).

    Parameters
    ----------
    shape : tuple[int, ...]
        Tensor shape.
    device : Device, optional
        Target device placement. Defaults to the CPU.
    dtype : np.dtype, optional
        Element dtype. Defaults to the configured ``KEYGRAD_DEFAULT_DTYPE``.

    Notes
    -----
    - For CPU tensors, `_data` is a NumPy ndarray initialized to zeros.
    - For CUDA tensors, `_data` is None.
    """

    __slots__ = ("_shape", "_device", "_dtype", "_data")

    def __init__(
        self,
        shape: tuple[int, ...],
        device: Optional[Device] = None,
        *,
        dtype: Optional[np.dtype] = None,
    ) -> None:
        self._shape = tuple(int(d) for d in shape)
        self._device = Device("cpu") if device is None else device
        self._dtype = (
            get_settings().numpy_dtype if dtype is None else np.dtype(dtype)
        )
        self._data: Optional[np.ndarray] = None
        if self._device.is_cpu():
            self._data = np.zeros(self._shape, dtype=self._dtype)

    @classmethod
    def from_numpy(
        cls,
        arr: Any,
        *,
        device: Optional[Device] = None,
        dtype: Optional[np.dtype] = None,
    ) -> "Tensor":
        """
        Construct a CPU tensor holding a copy of `arr`.

        Parameters
        ----------
        arr : array-like
            Source values. The tensor takes the array's shape.
        device : Optional[Device], optional
            Target device. Only the CPU can hold values.
        dtype : Optional[np.dtype], optional
            Element dtype. Defaults to the configured default dtype.

        Returns
        -------
        Tensor
            A newly allocated tensor containing a copy of `arr`.
        """
        src = np.asarray(arr)
        out = cls(src.shape, device, dtype=dtype)
        out.copy_from_numpy(src)
        return out

    @classmethod
    def _wrap_storage(cls, storage: np.ndarray, device: Device) -> "Tensor":
        # Bypasses allocation; the new header aliases `storage`.
        obj = cls.__new__(cls)
        obj._shape = tuple(storage.shape)
        obj._device = device
        obj._dtype = storage.dtype
        obj._data = storage
        return obj

    def __repr__(self) -> str:
        return f"Tensor(shape={self._shape}, device={self._device}, dtype={self._dtype})"

    @property
    def shape(self) -> tuple[int, ...]:
        """Return the tensor shape."""
        return self._shape

    @property
    def device(self) -> Device:
        """Return the device on which this tensor resides."""
        return self._device

    @property
    def dtype(self) -> np.dtype:
        """Return the element dtype of this tensor."""
        return self._dtype

    @property
    def data(self) -> np.ndarray:
        """
        Return the backing NumPy array (CPU only).

        Raises
        ------
        DeviceNotSupportedError
            If the tensor is not on the CPU.
        """
        return self._storage("data")

    def numel(self) -> int:
        """Return the number of elements."""
        n = 1
        for d in self._shape:
            n *= d
        return n

    def _raise_device_not_supported(self, op: str) -> "None":
        raise DeviceNotSupportedError(op=op, device=str(self._device))

    def _storage(self, op: str) -> np.ndarray:
        if self._data is None:
            self._raise_device_not_supported(op)
        return self._data

    # ------------------------------------------------------------------
    # Host interop
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        """
        Return a copy of the tensor's values as a NumPy array.

        Raises
        ------
        DeviceNotSupportedError
            If the tensor is not on the CPU.
        """
        return self._storage("to_numpy").copy()

    def copy_from_numpy(self, arr: Any) -> None:
        """
        Overwrite this tensor's values with `arr`.

        Parameters
        ----------
        arr : array-like
            Values to copy. Must match this tensor's shape exactly.

        Raises
        ------
        InvalidArgumentError
            If the array shape does not match.
        DeviceNotSupportedError
            If the tensor is not on the CPU.
        """
        storage = self._storage("copy_from_numpy")
        src = np.asarray(arr)
        if src.shape != self._shape:
            raise InvalidArgumentError(
                f"Shape mismatch in copy_from_numpy: expected {self._shape}, got {src.shape}"
            )
        storage[...] = src.astype(self._dtype, copy=False)

    def fill(self, value: Number) -> None:
        """Fill the tensor with a scalar value, in place."""
        self._storage("fill").fill(value)

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------
    def clone(self) -> "Tensor":
        """
        Deep copy of tensor data into a new Tensor.

        Returns
        -------
        Tensor
            A tensor with its own storage.
        """
        return Tensor._wrap_storage(self._storage("clone").copy(), self._device)

    def clone_shallow(self) -> "Tensor":
        """
        New tensor header sharing this tensor's storage.

        Returns
        -------
        Tensor
            A distinct object whose writes and reads go to the same ndarray.
        """
        return Tensor._wrap_storage(self._storage("clone_shallow"), self._device)

    def shares_storage(self, other: "Tensor") -> bool:
        """Return True if `other` aliases this tensor's storage."""
        if self._data is None or other._data is None:
            return False
        return np.shares_memory(self._data, other._data)

    # ------------------------------------------------------------------
    # In-place arithmetic
    # ------------------------------------------------------------------
    def add_(self, other: "Tensor") -> "Tensor":
        """
        Add `other` into this tensor element-wise, in place.

        Parameters
        ----------
        other : Tensor
            Tensor of identical shape on the same device.

        Returns
        -------
        Tensor
            `self`.

        Raises
        ------
        DeviceMismatchError
            If the tensors live on different devices.
        InvalidArgumentError
            If the shapes differ.
        DeviceNotSupportedError
            If the tensors are not on the CPU.
        """
        if self._device != other.device:
            raise DeviceMismatchError(str(self._device), str(other.device))
        if self._shape != other.shape:
            raise InvalidArgumentError(
                f"Shape mismatch in add_: {self._shape} vs {other.shape}"
            )
        storage = self._storage("add_")
        storage += other._storage("add_")
        return self

    # ------------------------------------------------------------------
    # Device queries
    # ------------------------------------------------------------------
    def is_cuda(self) -> bool:
        """Return True if this tensor lives on a CUDA device."""
        return self._device.is_cuda()

    def get_device(self) -> int:
        """Return the CUDA ordinal, or ``-1`` for CPU tensors."""
        if self._device.is_cpu():
            return CPU_DEVICE_INDEX
        return self._device.ordinal
