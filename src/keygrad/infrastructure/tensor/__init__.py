from ._device_guard import current_device, device_guard
from ._tensor import Tensor

__all__ = [
    Tensor.__name__,
    current_device.__name__,
    device_guard.__name__,
]
