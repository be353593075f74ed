"""
Snapshots of variables saved for the backward pass.

A `SavedVariable` is produced by `Variable.save` during the forward pass and
consumed by a node's backward step through `unpack`. It holds:

- a shallow clone of the variable's tensor, so the snapshot survives later
  reassignment of `Variable.data`;
- the version observed at save time;
- a `SavedVersionRef` onto the variable's live version counter, so any later
  in-place mutation of the original becomes visible.

`unpack` refuses to hand out the tensor once the two versions disagree. This
turns stale data silently feeding a gradient computation into an immediate
`InplaceModificationError` at the point of use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ...domain._errors import InplaceModificationError
from ...domain._tensor import ITensor
from ._version_counter import SavedVersionRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedVariable:
    """
    Immutable snapshot of a variable's data and version.

    Attributes
    ----------
    data : Optional[ITensor]
        Shallow clone of the saved tensor, or None for an empty snapshot
        ("nothing was saved").
    expected_version : int
        Version of the source variable at save time.
    version : Optional[SavedVersionRef]
        Read-only reference into the source variable's version counter.
    """

    data: Optional[ITensor] = None
    expected_version: int = 0
    version: Optional[SavedVersionRef] = None

    @property
    def is_empty(self) -> bool:
        """Return True if this snapshot holds no data."""
        return self.data is None

    def unpack(self) -> Optional[ITensor]:
        """
        Return the saved tensor after checking it is still current.

        Returns
        -------
        Optional[ITensor]
            The saved tensor, or None for an empty snapshot.

        Raises
        ------
        InplaceModificationError
            If the source variable was modified in place after it was saved.
        """
        if self.data is None:
            return None

        current = self.version.read()
        if current != self.expected_version:
            logger.warning(
                "saved %r is stale: version %d, expected %d",
                self.data,
                current,
                self.expected_version,
            )
            raise InplaceModificationError(
                expected_version=self.expected_version,
                current_version=current,
                what=repr(self.data),
            )
        return self.data
