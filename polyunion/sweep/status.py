"""Sweep-line status structure: active edges ordered bottom to top."""

import logging
from typing import List, Optional

from .events import SweepEvent
from .segments import compare_segments

logger = logging.getLogger(__name__)


class SweepLine:
    """Ordered list of the left events whose edges currently cross the sweep line.

    Insertion uses binary search with :func:`compare_segments`; removal finds
    the event by binary search and confirms it by identity, so edges shortened
    by a split stay findable.
    """

    def __init__(self):
        self._edges: List[SweepEvent] = []

    def __len__(self) -> int:
        return len(self._edges)

    def insert(self, event: SweepEvent) -> int:
        """Insert ``event`` and return its position."""
        lo, hi = 0, len(self._edges)
        while lo < hi:
            mid = (lo + hi) // 2
            if compare_segments(event, self._edges[mid]) < 0:
                hi = mid
            else:
                lo = mid + 1
        self._edges.insert(lo, event)
        return lo

    def index(self, event: SweepEvent) -> Optional[int]:
        """Position of ``event``, or None if it is not in the status."""
        lo, hi = 0, len(self._edges)
        while lo < hi:
            mid = (lo + hi) // 2
            if compare_segments(self._edges[mid], event) < 0:
                lo = mid + 1
            else:
                hi = mid

        for i in range(max(lo - 2, 0), min(lo + 3, len(self._edges))):
            if self._edges[i] is event:
                return i

        # Splits can leave the order inconsistent around the event
        for i, candidate in enumerate(self._edges):
            if candidate is event:
                logger.debug("Status lookup fell back to a scan for %r", event)
                return i
        return None

    def remove_at(self, index: int) -> SweepEvent:
        return self._edges.pop(index)

    def below(self, index: int) -> Optional[SweepEvent]:
        """Edge directly below position ``index``, if any."""
        if index > 0:
            return self._edges[index - 1]
        return None

    def above(self, index: int) -> Optional[SweepEvent]:
        """Edge directly above position ``index``, if any."""
        if index + 1 < len(self._edges):
            return self._edges[index + 1]
        return None


__all__ = ['SweepLine']
