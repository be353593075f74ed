from ._errors import (
    DeviceMismatchError,
    DeviceNotSupportedError,
    InplaceModificationError,
    InvalidArgumentError,
    InvariantViolationError,
)
from ._function import Function, IFunction
from ._tensor import ITensor
from ._variable import IBackwardHook, IVariable

__all__ = [
    DeviceMismatchError.__name__,
    DeviceNotSupportedError.__name__,
    InplaceModificationError.__name__,
    InvalidArgumentError.__name__,
    InvariantViolationError.__name__,
    Function.__name__,
    IFunction.__name__,
    ITensor.__name__,
    IBackwardHook.__name__,
    IVariable.__name__,
]
