"""
Differentiable value interface definitions.

This module defines the domain-level contracts for differentiable values and
for backward hooks. The concrete implementation lives in
`keygrad.infrastructure.autograd._variable`.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from ._tensor import ITensor


@runtime_checkable
class IBackwardHook(Protocol):
    """
    Gradient transformation invoked once per `Variable.backward` call.

    A hook receives the incoming gradient and returns the gradient to
    accumulate instead (e.g., rescaled or clipped). Returning None keeps the
    incoming gradient unchanged. Hooks must not hold on to the gradient they
    receive and mutate it later.
    """

    def __call__(self, grad: "IVariable") -> Optional["IVariable"]: ...


@runtime_checkable
class IVariable(Protocol):
    """
    Domain-level interface for differentiable values.

    Notes
    -----
    - A leaf has no creator; an internal value records the node that
      produced it and its output index on that node.
    - `grad` is itself an `IVariable` holding the running sum of every
      gradient passed to `backward`.
    """

    @property
    def data(self) -> ITensor:
        """
        Return the wrapped tensor. Never None.
        """
        ...

    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this value needs a gradient.
        """
        ...

    @property
    def is_volatile(self) -> bool:
        """
        Indicate whether this value is exempt from graph tracking.
        """
        ...

    @property
    def grad(self) -> Optional["IVariable"]:
        """
        Return the accumulated gradient, or None before the first backward.
        """
        ...

    @property
    def is_leaf(self) -> bool:
        """
        Return True if no graph node produced this value.
        """
        ...

    def is_cuda(self) -> bool:
        """
        Return True if the wrapped tensor lives on a CUDA device.
        """
        ...

    def backward(self, grad_output: "IVariable") -> None:
        """
        Accumulate one incoming gradient into `grad`.
        """
        ...

    def apply(self, grad_outputs: Sequence["IVariable"]) -> Sequence["IVariable"]:
        """
        Leaf gradient-accumulator entry point used by the backward driver.
        """
        ...
