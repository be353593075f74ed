"""
Device descriptors.

`Device` names where a tensor's storage lives. KeyGrad only needs two facts
about a device: whether it is a CUDA device and, if so, its ordinal. The
variable core uses the ordinal to enter the right device context before it
accumulates a gradient.

Device ordinals follow the convention of the underlying tensor library:
CUDA devices are numbered from 0, and the CPU reports ``-1``.
"""

from enum import Enum
import re

CPU_DEVICE_INDEX = -1


class DeviceType(Enum):
    """
    Enumeration of supported device categories.

    Attributes
    ----------
    CPU : DeviceType
        Central Processing Unit.
    CUDA : DeviceType
        NVIDIA CUDA-enabled Graphics Processing Unit.
    """

    CPU = "cpu"
    CUDA = "cuda"


class Device:
    """
    Normalized computation device descriptor.

    Parameters
    ----------
    device : str
        Device identifier string: ``"cpu"``, ``"cuda"`` (shorthand for
        ``"cuda:0"``) or ``"cuda:<index>"``.

    Raises
    ------
    ValueError
        If the device string does not match a supported format.
    """

    __slots__ = ("type", "index")

    _CUDA_PATTERN = re.compile(r"^cuda(?::(\d+))?$")

    def __init__(self, device: str):
        if device == "cpu":
            self.type = DeviceType.CPU
            self.index = None
            return

        m = self._CUDA_PATTERN.match(device)
        if not m:
            raise ValueError(
                f"Invalid device '{device}'. Expected 'cpu' or 'cuda:<index>'"
            )
        self.type = DeviceType.CUDA
        self.index = int(m.group(1) or 0)

    @classmethod
    def from_index(cls, index: int) -> "Device":
        """
        Build a device from a tensor-library ordinal.

        Parameters
        ----------
        index : int
            ``-1`` (or any negative value) for the CPU, otherwise the CUDA
            ordinal.

        Returns
        -------
        Device
            The matching descriptor.
        """
        if index < 0:
            return cls("cpu")
        return cls(f"cuda:{int(index)}")

    @property
    def ordinal(self) -> int:
        """CUDA ordinal, or ``-1`` for the CPU."""
        return CPU_DEVICE_INDEX if self.index is None else self.index

    def __str__(self) -> str:
        return "cpu" if self.type is DeviceType.CPU else f"cuda:{self.index}"

    def __repr__(self) -> str:
        return f"Device('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return (self.type, self.index) == (other.type, other.index)

    def __hash__(self) -> int:
        return hash((self.type, self.index))

    def is_cpu(self) -> bool:
        """Return True if this device is the CPU."""
        return self.type is DeviceType.CPU

    def is_cuda(self) -> bool:
        """Return True if this device is a CUDA GPU."""
        return self.type is DeviceType.CUDA
