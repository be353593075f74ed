"""
KeyGrad: bookkeeping core of a reverse-mode automatic-differentiation engine.

Public surface
--------------
- `Variable`: differentiable value (leaf or internal) with gradient
  accumulation (`backward`, `apply`) and snapshots (`save`, `save_opt`).
- `SavedVariable`: snapshot validated against in-place mutation on `unpack`.
- `VersionCounter` / `SavedVersionRef`: shared generation counters.
- `Function`: graph node base class.
- `Tensor`, `Device`, `device_guard`: minimal tensor and device collaborators.
"""

from .domain._errors import (
    DeviceMismatchError,
    DeviceNotSupportedError,
    InplaceModificationError,
    InvalidArgumentError,
    InvariantViolationError,
)
from .domain._function import Function, IFunction
from .domain.device._device import Device, DeviceType
from .infrastructure._config import Settings, get_logger, get_settings, load_settings
from .infrastructure.autograd import (
    SavedVariable,
    SavedVersionRef,
    Variable,
    VersionCounter,
)
from .infrastructure.tensor import Tensor, current_device, device_guard

get_logger()

__version__ = "0.1.0"

__all__ = [
    "DeviceMismatchError",
    "DeviceNotSupportedError",
    "InplaceModificationError",
    "InvalidArgumentError",
    "InvariantViolationError",
    "Function",
    "IFunction",
    "Device",
    "DeviceType",
    "Settings",
    "get_logger",
    "get_settings",
    "load_settings",
    "SavedVariable",
    "SavedVersionRef",
    "Variable",
    "VersionCounter",
    "Tensor",
    "current_device",
    "device_guard",
]
