"""Sweep events: the edge model of the union engine.

Every polygon edge is represented by two :class:`SweepEvent` objects, one per
endpoint, linked through ``other``. The endpoint met first by the sweep line
is the *left* event and carries the edge's classification flags; the right
event only marks where the edge leaves the sweep line.

Sweep direction: events are processed by increasing x, then increasing y.
At the same point a right endpoint comes before a left endpoint, so edges
ending at a vertex leave the status structure before edges starting there
enter it. Two left (or two right) events at the same point are ordered by
the edge that lies below first; collinear ties put the subject operand's
edge first.
"""

from __future__ import annotations

import heapq
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.geometry_utils import Coordinate


class EdgeType(Enum):
    """Classification of an edge that coincides with an edge of the other operand.

    Attributes:
        NORMAL: Edge shared with nothing
        NON_CONTRIBUTING: Duplicate of a coincident edge, never in the result
        SAME_TRANSITION: Coincident edges with both interiors on the same side
        DIFFERENT_TRANSITION: Coincident edges with interiors on opposite
            sides (adjacent polygons), cancelled in a union
    """
    NORMAL = 0
    NON_CONTRIBUTING = 1
    SAME_TRANSITION = 2
    DIFFERENT_TRANSITION = 3


def signed_area(p0: Coordinate, p1: Coordinate, p2: Coordinate) -> float:
    """Twice the signed area of the triangle ``p0 p1 p2`` (positive when CCW)."""
    return (p0[0] - p2[0]) * (p1[1] - p2[1]) - (p1[0] - p2[0]) * (p0[1] - p2[1])


class SweepEvent:
    """Endpoint event of a directed edge.

    Attributes:
        point: Endpoint coordinate
        left: True if this is the left endpoint of the edge
        other: Event at the opposite endpoint
        is_subject: True for edges of the left operand of the union step,
            False for the right operand
        contour_id: Identifier of the input polygon the edge comes from
        edge_type: Overlap classification (see :class:`EdgeType`)
        in_out: True if the edge is an inside-outside transition of its own
            operand for a vertical ray coming from below
        other_in_out: Same flag for the closest edge of the other operand
            below this one
        result_transition: +1 if the result's interior is above the edge
            (left of it, walking from the left to the right endpoint), -1 if
            below, 0 if the edge is not part of the result
    """

    __slots__ = (
        'point', 'left', 'other', 'is_subject', 'contour_id', 'edge_type',
        'in_out', 'other_in_out', 'result_transition',
    )

    def __init__(
        self,
        point: Coordinate,
        left: bool,
        other: Optional[SweepEvent],
        is_subject: bool,
        edge_type: EdgeType = EdgeType.NORMAL
    ):
        self.point = point
        self.left = left
        self.other = other
        self.is_subject = is_subject
        self.contour_id = 0
        self.edge_type = edge_type
        self.in_out = False
        self.other_in_out = False
        self.result_transition = 0

    @property
    def in_result(self) -> bool:
        return self.result_transition != 0

    def is_below(self, p: Coordinate) -> bool:
        """True if the edge passes below point ``p``."""
        p0 = self.point
        p1 = self.other.point
        if self.left:
            return signed_area(p0, p1, p) > 0
        return signed_area(p1, p0, p) > 0

    def is_above(self, p: Coordinate) -> bool:
        return not self.is_below(p)

    def is_vertical(self) -> bool:
        return self.point[0] == self.other.point[0]

    def __lt__(self, other: SweepEvent) -> bool:
        return compare_events(self, other) < 0

    def __repr__(self) -> str:
        side = 'L' if self.left else 'R'
        operand = 'subject' if self.is_subject else 'clipping'
        other = self.other.point if self.other is not None else None
        return (f"SweepEvent({side} {self.point} -> {other}, {operand}, "
                f"{self.edge_type.name})")


def compare_events(e1: SweepEvent, e2: SweepEvent) -> int:
    """Sweep order of two events; negative if ``e1`` is processed first."""
    p1 = e1.point
    p2 = e2.point

    if p1[0] != p2[0]:
        return 1 if p1[0] > p2[0] else -1

    if p1[1] != p2[1]:
        return 1 if p1[1] > p2[1] else -1

    # Same point: right endpoints first
    if e1.left != e2.left:
        return 1 if e1.left else -1

    # Same point, same side: the edge below goes first
    if signed_area(p1, e1.other.point, e2.other.point) != 0:
        return -1 if e1.is_below(e2.other.point) else 1

    # Collinear
    return 1 if (not e1.is_subject and e2.is_subject) else -1


class EventQueue:
    """Priority queue of sweep events ordered by :func:`compare_events`."""

    def __init__(self, events: Iterable[SweepEvent] = ()):
        self._heap: List[SweepEvent] = list(events)
        heapq.heapify(self._heap)

    def push(self, event: SweepEvent) -> None:
        heapq.heappush(self._heap, event)

    def pop(self) -> SweepEvent:
        return heapq.heappop(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


def _add_ring_edges(
    coords: Sequence[Coordinate],
    is_subject: bool,
    contour_id: int,
    queue: EventQueue
) -> int:
    added = 0
    for i in range(len(coords) - 1):
        s1 = coords[i]
        s2 = coords[i + 1]
        if s1 == s2:
            continue

        e1 = SweepEvent(s1, False, None, is_subject)
        e2 = SweepEvent(s2, False, e1, is_subject)
        e1.other = e2
        e1.contour_id = e2.contour_id = contour_id

        if compare_events(e1, e2) > 0:
            e2.left = True
        else:
            e1.left = True

        queue.push(e1)
        queue.push(e2)
        added += 1
    return added


def build_event_queue(
    subject: Sequence[Sequence[Sequence[Coordinate]]],
    clipping: Sequence[Sequence[Sequence[Coordinate]]],
) -> Tuple[EventQueue, int]:
    """Decompose both operands into sweep events.

    Args:
        subject: Left operand as a list of polygons, each a list of closed
            rings (exterior first)
        clipping: Right operand in the same layout

    Returns:
        Tuple of (event_queue, edge_count)
    """
    queue = EventQueue()
    contour_id = 0
    edges = 0

    for is_subject, polygons in ((True, subject), (False, clipping)):
        for rings in polygons:
            contour_id += 1
            for ring in rings:
                edges += _add_ring_edges(ring, is_subject, contour_id, queue)

    return queue, edges


__all__ = [
    'EdgeType',
    'SweepEvent',
    'EventQueue',
    'signed_area',
    'compare_events',
    'build_event_queue',
]
