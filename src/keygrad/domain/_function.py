"""
Graph node interface definitions.

A graph node (a `Function`) is the operation that produced one or more
values during the forward pass. The variable core treats nodes as opaque:
it reads their `is_volatile` / `requires_grad` flags and increments their
`num_outputs` counter whenever a new output value is wrapped. Computing a
node's backward step is the business of the node itself and of an external
backward-pass driver.

`Variable` is also a `Function`: a leaf behaves as a zero-output node whose
`apply` accumulates the incoming gradient and terminates the traversal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, Optional, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from ._variable import IVariable


@runtime_checkable
class IFunction(Protocol):
    """
    Minimal structural contract of a graph node, as read by the core.

    Attributes
    ----------
    num_outputs : int
        Number of output values wrapped so far. Read and incremented once per
        internal `Variable` construction.
    is_volatile : bool
        Whether outputs of this node are exempt from graph tracking.
    requires_grad : bool
        Whether outputs of this node need gradients.
    """

    num_outputs: int
    is_volatile: bool
    requires_grad: bool


class Function(ABC):
    """
    Abstract base class for nodes of the backward graph.

    Parameters
    ----------
    is_volatile : bool, optional
        Marks outputs of this node as exempt from graph tracking.
        Defaults to False.
    requires_grad : bool, optional
        Whether outputs of this node require gradients. Defaults to False.
    previous_functions : Iterable[tuple[Function, int]], optional
        Predecessor edges ``(node, output_index)`` feeding this node.

    Notes
    -----
    - `num_outputs` always starts at 0. Output indices are handed out in
      construction order of the output values, so an operation must wrap its
      outputs in a fixed, reproducible order.
    - Subclasses implement `apply`, the backward step. The core never calls
      it on anything but a `Variable`.
    """

    def __init__(
        self,
        *,
        is_volatile: bool = False,
        requires_grad: bool = False,
        previous_functions: Iterable[tuple["Function", int]] = (),
    ) -> None:
        self.num_outputs: int = 0
        self.is_volatile: bool = bool(is_volatile)
        self.requires_grad: bool = bool(requires_grad)
        self.previous_functions: list[tuple["Function", int]] = list(
            previous_functions
        )

    @abstractmethod
    def apply(
        self, grad_outputs: Sequence["IVariable"]
    ) -> Sequence[Optional["IVariable"]]:
        """
        Run the backward step of this node.

        Parameters
        ----------
        grad_outputs : Sequence[IVariable]
            Gradients with respect to each output of this node, ordered by
            output index.

        Returns
        -------
        Sequence[Optional[IVariable]]
            Gradients with respect to each entry of `previous_functions`, in
            the same order. Entries may be None for predecessors that do not
            require gradients. A driver skips those entries: `Variable.apply`
            rejects a None gradient.
        """
        ...
