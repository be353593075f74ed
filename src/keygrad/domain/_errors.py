"""
Autograd- and device-related exceptions for KeyGrad.

This module defines the custom errors raised by the variable bookkeeping
core and its tensor collaborator. Every error signals a programming mistake
in how a computation graph was built or mutated, not a transient condition,
so none of them is caught or retried inside the library.

Error kinds
-----------
- `InvalidArgumentError`: malformed input to a core operation (missing
  tensor data, wrong number of gradients, incompatible shapes).
- `InvariantViolationError`: a graph invariant does not hold at call time
  (e.g., gradient accumulation into a non-leaf or a mutated leaf).
- `InplaceModificationError`: a value saved for backward was mutated in
  place after it was captured.
- `DeviceNotSupportedError` / `DeviceMismatchError`: device misuse in the
  tensor backend.
"""

from typing import Optional


class InvalidArgumentError(ValueError):
    """
    Raised when a core operation receives an argument it cannot accept.

    Typical causes are constructing a `Variable` without tensor data, calling
    `Variable.apply` with a gradient list whose length is not exactly one, or
    adding tensors of different shapes in place.
    """


class InvariantViolationError(RuntimeError):
    """
    Raised when a structural invariant of the computation graph is broken.

    The gradient accumulator of a leaf may only run on a value that is still
    a true leaf at call time: it has no creator and its version counter still
    reads zero.
    """


class InplaceModificationError(RuntimeError):
    """
    Raised when a saved value is unpacked after an in-place modification.

    Attributes
    ----------
    expected_version : int
        Version recorded when the value was saved.
    current_version : int
        Version observed through the saved reference at unpack time.
    """

    def __init__(
        self,
        expected_version: int,
        current_version: int,
        what: Optional[str] = None,
    ) -> None:
        """
        Initialize the InplaceModificationError.

        Parameters
        ----------
        expected_version : int
            Version number recorded at save time.
        current_version : int
            Version number observed at unpack time.
        what : Optional[str], optional
            Optional description of the saved value, included in the message.
        """
        subject = f" ({what})" if what else ""
        super().__init__(
            "one of the variables needed for gradient computation has been "
            f"modified by an inplace operation{subject}: is at version "
            f"{current_version}; expected version {expected_version} instead."
        )
        self.expected_version = expected_version
        self.current_version = current_version


class DeviceNotSupportedError(RuntimeError):
    """
    Raised by `Tensor` when an operation needs host storage the device does
    not provide.

    The NumPy tensor only holds CPU storage, so `Tensor.clone`,
    `Tensor.clone_shallow` and `Tensor.add_` raise this for CUDA tensors.
    Device queries (`is_cuda`, `get_device`) keep working.

    Attributes
    ----------
    op : str
        Name of the tensor method that was called, such as "add_".
    device : str
        String representation of the device on which the operation
        was attempted.
    """

    def __init__(self, op: str, device: str) -> None:
        """
        Initialize the DeviceNotSupportedError.

        Parameters
        ----------
        op : str
            The operation name that is not supported on the given device.
        device : str
            The device identifier (e.g., "cuda:0").
        """
        super().__init__(f"{op} is not implemented for device '{device}'.")
        self.op = op
        self.device = device


class DeviceMismatchError(RuntimeError):
    """
    Raised by `Tensor.add_` when the addend lives on a different device
    than the buffer it is added into, for example a CUDA gradient pushed into a
    CPU accumulation buffer.
    """

    def __init__(self, device_a: str, device_b: str) -> None:
        """
        Initialize the DeviceMismatchError.

        Parameters
        ----------
        device_a : str
            Device identifier of the first operand.
        device_b : str
            Device identifier of the second operand.
        """
        super().__init__(f"Device mismatch: '{device_a}' vs '{device_b}'.")
        self.device_a = device_a
        self.device_b = device_b
