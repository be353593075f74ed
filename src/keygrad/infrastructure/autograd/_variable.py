"""
Differentiable value wrapper.

`Variable` wraps a tensor with the bookkeeping reverse-mode differentiation
needs:

- where the value came from: nothing for a *leaf*, or ``(creator,
  output_nr)`` for an *internal* value produced by a graph node;
- how often its tensor has been mutated in place (`version_counter`);
- the running sum of every gradient pushed into it (`grad`), optionally
  passed through a backward hook first.

It also implements the two entry points an external backward-pass driver
calls on values: `backward` (accumulate one gradient) and `apply` (the same,
behind the leaf-accumulator checks, shaped like a graph node's backward step).

Design notes
------------
- `Variable` subclasses `Function`: a leaf is a zero-output graph node whose
  `apply` terminates the traversal. Its own `num_outputs` therefore stays 0.
- The first gradient is adopted as a clone, never aliased. Later gradients
  are added in place.
- No locking: callers serialize `backward` on a given variable.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ...domain._errors import InvalidArgumentError, InvariantViolationError
from ...domain._function import Function, IFunction
from ...domain._tensor import ITensor
from ...domain._variable import IBackwardHook, IVariable
from ..tensor._device_guard import device_guard
from ._saved_variable import SavedVariable
from ._version_counter import VersionCounter

logger = logging.getLogger(__name__)


class Variable(Function):
    """
    Tensor-carrying node of the computation graph.

    Parameters
    ----------
    data : ITensor
        Tensor owned by this variable. Must not be None.
    requires_grad : bool, optional
        Whether this leaf needs a gradient. Defaults to False.
    is_volatile : bool, optional
        Whether this leaf is exempt from graph tracking. Defaults to False.

    Raises
    ------
    InvalidArgumentError
        If `data` is None.

    Notes
    -----
    - The constructor builds a leaf. Use `Variable.from_creator` for values
      produced by a graph node.
    - `pyobj` is an opaque slot for host-language bindings; the core never
      reads it.
    """

    def __init__(
        self,
        data: ITensor,
        requires_grad: bool = False,
        is_volatile: bool = False,
    ) -> None:
        _check_data(data)
        super().__init__(is_volatile=is_volatile, requires_grad=requires_grad)
        self._init_state(data, creator=None, output_nr=0)

    @classmethod
    def from_creator(cls, data: ITensor, creator: IFunction) -> "Variable":
        """
        Wrap an output of graph node `creator`.

        The new value's output index is the creator's current `num_outputs`,
        which is then incremented. Outputs of one node must therefore be
        wrapped in a fixed order. `is_volatile` and `requires_grad` are copied
        from the creator and fixed from then on.

        Parameters
        ----------
        data : ITensor
            Output tensor. Must not be None.
        creator : IFunction
            Node that produced `data`.

        Returns
        -------
        Variable
            The internal value.

        Raises
        ------
        InvalidArgumentError
            If `data` is None. The creator is left untouched in that case.
        """
        _check_data(data)

        output_nr = creator.num_outputs
        obj = cls.__new__(cls)
        Function.__init__(
            obj,
            is_volatile=creator.is_volatile,
            requires_grad=creator.requires_grad,
            previous_functions=[(creator, output_nr)],
        )
        obj._init_state(data, creator=creator, output_nr=output_nr)
        creator.num_outputs = output_nr + 1
        return obj

    def _init_state(
        self, data: ITensor, *, creator: Optional[IFunction], output_nr: int
    ) -> None:
        self._data: ITensor = data
        self.creator: Optional[IFunction] = creator
        self.output_nr: int = output_nr
        self.version_counter: VersionCounter = VersionCounter()
        self._grad: Optional[Variable] = None
        self.backward_hook: Optional[IBackwardHook] = None
        self.pyobj: Any = None

    def __repr__(self) -> str:
        kind = "leaf" if self.creator is None else f"output {self.output_nr}"
        return (
            f"Variable({self._data!r}, {kind}, requires_grad={self.requires_grad}, "
            f"version={self.version_counter.read()})"
        )

    # ------------------------------------------------------------------
    # Data and metadata
    # ------------------------------------------------------------------
    @property
    def data(self) -> ITensor:
        """Return the wrapped tensor."""
        return self._data

    @data.setter
    def data(self, value: ITensor) -> None:
        """
        Replace the wrapped tensor.

        Existing snapshots keep the tensor they captured.

        Raises
        ------
        InvalidArgumentError
            If `value` is None.
        """
        _check_data(value)
        self._data = value

    @property
    def grad(self) -> Optional["Variable"]:
        """Return the accumulated gradient, or None."""
        return self._grad

    @property
    def is_leaf(self) -> bool:
        """Return True if no graph node produced this value."""
        return self.creator is None

    @property
    def requires_grad(self) -> bool:
        """Return whether this value needs a gradient."""
        return self._requires_grad

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        """
        Set `requires_grad` on a leaf.

        Raises
        ------
        InvariantViolationError
            If this value has a creator. Its flags are inherited and fixed.
        """
        self._set_flag("_requires_grad", "requires_grad", value)

    @property
    def is_volatile(self) -> bool:
        """Return whether this value is exempt from graph tracking."""
        return self._is_volatile

    @is_volatile.setter
    def is_volatile(self, value: bool) -> None:
        """
        Set `is_volatile` on a leaf.

        Raises
        ------
        InvariantViolationError
            If this value has a creator. Its flags are inherited and fixed.
        """
        self._set_flag("_is_volatile", "is_volatile", value)

    def _set_flag(self, attr: str, name: str, value: bool) -> None:
        # `creator` is unset while Function.__init__ assigns the initial flags.
        if getattr(self, "creator", None) is not None:
            raise InvariantViolationError(
                f"{name} of a non-leaf variable is inherited from its creator "
                "and cannot be changed"
            )
        setattr(self, attr, bool(value))

    @property
    def version(self) -> int:
        """Return the current reading of the version counter."""
        return self.version_counter.read()

    def mark_dirty(self) -> None:
        """
        Record that `data` was just mutated in place.

        Any snapshot saved before this call becomes invalid, and a leaf stops
        accepting gradients through `apply`.
        """
        self.version_counter.increment()

    def is_cuda(self) -> bool:
        """Return True if the wrapped tensor lives on a CUDA device."""
        return self._data.is_cuda()

    def zero_grad(self) -> None:
        """Drop the accumulated gradient."""
        self._grad = None

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    def register_hook(self, hook: IBackwardHook) -> None:
        """
        Install `hook` as the backward hook, replacing any previous one.

        Parameters
        ----------
        hook : IBackwardHook
            Callable mapping the incoming gradient to the gradient to
            accumulate. Returning None keeps the incoming gradient.

        Raises
        ------
        TypeError
            If `hook` is not callable.
        """
        if not callable(hook):
            raise TypeError(f"hook must be callable, got {type(hook)!r}")
        self.backward_hook = hook

    def remove_hook(self) -> None:
        """Remove the backward hook, if any."""
        self.backward_hook = None

    # ------------------------------------------------------------------
    # Gradient accumulation
    # ------------------------------------------------------------------
    def backward(self, grad_output: IVariable) -> None:
        """
        Accumulate one incoming gradient into `grad`.

        Parameters
        ----------
        grad_output : IVariable
            Gradient of the loss with respect to this value.

        Notes
        -----
        - The backward hook, if set, runs first and may replace the gradient.
        - The first gradient is stored as a clone wrapped in a new variable
          with ``requires_grad=False, is_volatile=True``.
        - Later gradients are added into that buffer in place.

        Raises
        ------
        InvalidArgumentError
            If `grad_output` is None.
        """
        if grad_output is None:
            raise InvalidArgumentError(f"missing gradient for {self!r}")

        if self.backward_hook is not None:
            hooked = self.backward_hook(grad_output)
            if hooked is not None:
                grad_output = hooked

        with device_guard(grad_output.data.get_device()):
            if self._grad is None:
                self._grad = Variable(
                    grad_output.data.clone(), requires_grad=False, is_volatile=True
                )
                logger.debug("adopted first gradient for %r", self)
            else:
                self._grad.data.add_(grad_output.data)
                logger.debug("accumulated gradient into %r", self)

    def apply(self, grad_outputs: Sequence[IVariable]) -> list[IVariable]:
        """
        Leaf gradient accumulator, called by the backward driver.

        Parameters
        ----------
        grad_outputs : Sequence[IVariable]
            Incoming gradients. Must contain exactly one entry.

        Returns
        -------
        list[IVariable]
            Always empty: leaves produce no further gradients.

        Raises
        ------
        InvariantViolationError
            If this value has a creator, or was mutated in place since it was
            created.
        InvalidArgumentError
            If `grad_outputs` does not hold exactly one gradient, or that
            gradient is None.
        """
        if self.creator is not None or self.version_counter.read() != 0:
            raise InvariantViolationError(
                "leaf variable was used in an inplace operation"
            )
        if len(grad_outputs) != 1:
            raise InvalidArgumentError(
                f"incorrect number of grad_outputs: expected 1, got {len(grad_outputs)}"
            )
        self.backward(grad_outputs[0])
        return []

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def save(self) -> SavedVariable:
        """
        Capture this value for use in a later backward step.

        Returns
        -------
        SavedVariable
            Shallow clone of `data`, the current version, and a saved
            reference to the version counter.
        """
        saved = SavedVariable(
            data=self._data.clone_shallow(),
            expected_version=self.version_counter.read(),
            version=self.version_counter.new_saved_ref(),
        )
        logger.debug("saved %r at version %d", self, saved.expected_version)
        return saved

    @staticmethod
    def save_opt(var: Optional["Variable"]) -> SavedVariable:
        """
        Save an optional value.

        Parameters
        ----------
        var : Optional[Variable]
            Value to save, or None.

        Returns
        -------
        SavedVariable
            An empty snapshot if `var` is None, otherwise ``var.save()``.
        """
        return SavedVariable() if var is None else var.save()


def _check_data(data: Optional[ITensor]) -> None:
    if data is None:
        raise InvalidArgumentError("Variable data is None")
