from ._device import CPU_DEVICE_INDEX, Device, DeviceType
from ._device_protocol import DeviceLike

__all__ = [
    "CPU_DEVICE_INDEX",
    Device.__name__,
    DeviceType.__name__,
    DeviceLike.__name__,
]
