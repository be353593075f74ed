"""
Version counters for in-place mutation tracking.

Every `Variable` owns a `VersionCounter` that is incremented each time its
tensor is mutated in place. A `SavedVersionRef` is a read-only handle onto
the same counter cell: it observes every later increment but cannot make one.
`SavedVariable` compares the value read through its handle against the value
recorded at save time to detect stale snapshots.

The cell is shared by reference, so it stays alive for as long as any
handle, the live counter or a saved reference, is alive.
"""

from __future__ import annotations


class _VersionCell:
    """Mutable integer shared between a counter and its saved references."""

    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value: int = 0


class SavedVersionRef:
    """
    Read-only view of a `VersionCounter`.

    Notes
    -----
    Instances are created by `VersionCounter.new_saved_ref` only. They alias
    the counter's cell rather than copying its value.
    """

    __slots__ = ("_cell",)

    def __init__(self, cell: _VersionCell) -> None:
        self._cell = cell

    def read(self) -> int:
        """Return the current version of the observed counter."""
        return self._cell.value

    def __int__(self) -> int:
        return self._cell.value

    def __repr__(self) -> str:
        return f"SavedVersionRef(version={self._cell.value})"


class VersionCounter:
    """
    Live generation counter of a single value.

    Only the owning value increments it. Reads are available here and on
    every `SavedVersionRef` minted from it.
    """

    __slots__ = ("_cell",)

    def __init__(self) -> None:
        self._cell = _VersionCell()

    def increment(self) -> None:
        """
        Advance the counter by one.

        All outstanding saved references observe the new value immediately.
        """
        self._cell.value += 1

    def read(self) -> int:
        """Return the current version."""
        return self._cell.value

    def __int__(self) -> int:
        return self._cell.value

    def new_saved_ref(self) -> SavedVersionRef:
        """
        Return a read-only reference that aliases this counter.

        Returns
        -------
        SavedVersionRef
            A handle observing the same cell.
        """
        return SavedVersionRef(self._cell)

    def __repr__(self) -> str:
        return f"VersionCounter(version={self._cell.value})"
