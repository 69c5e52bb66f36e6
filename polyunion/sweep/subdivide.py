"""Sweep over the event queue: split intersecting edges and classify them.

This is the heart of the union engine. Events are popped in sweep order;
left events enter the status structure and are tested against their new
neighbours, right events leave it and bring their former neighbours
together. Whenever two edges cross or overlap they are split at the shared
point(s) and the new sub-edges are queued, so that by the end of the sweep no
two retained edges cross and coincident edges from adjacent polygons are
recognised as shared.

Each left event is classified with the in/out flags of the Martinez-Rueda
algorithm: ``in_out`` tells whether the edge is an inside-outside transition
of its own operand, ``other_in_out`` whether the region just below it is
outside the other operand. For a union an edge belongs to the result when
the other operand does not cover it, or when it coincides with an edge of the
other operand and both interiors lie on the same side.
"""

import logging
from typing import List, Optional

from ..cancellation import CancellationToken, check_cancelled
from ..core.geometry_utils import Coordinate
from .events import EdgeType, EventQueue, SweepEvent, compare_events
from .segments import segment_intersection
from .status import SweepLine

logger = logging.getLogger(__name__)

NO_INTERSECTION = 0
CROSSING = 1
SHARED_LEFT = 2
OVERLAP = 3


def in_union(event: SweepEvent) -> bool:
    """Decide if the edge of a left event lies on the union boundary."""
    if event.edge_type == EdgeType.NORMAL:
        return event.other_in_out
    return event.edge_type == EdgeType.SAME_TRANSITION


def _result_transition(event: SweepEvent) -> int:
    # A union edge has its own operand's interior on the union side
    return -1 if event.in_out else 1


def compute_fields(event: SweepEvent, prev: Optional[SweepEvent]) -> None:
    """Fill in the in/out flags of ``event`` from the edge ``prev`` below it."""
    if prev is None:
        event.in_out = False
        event.other_in_out = True
    else:
        if event.is_subject == prev.is_subject:
            event.in_out = not prev.in_out
            event.other_in_out = prev.other_in_out
        else:
            event.in_out = not prev.other_in_out
            event.other_in_out = (not prev.in_out) if prev.is_vertical() else prev.in_out

    if in_union(event):
        event.result_transition = _result_transition(event)
    else:
        event.result_transition = 0


def divide_segment(se: SweepEvent, p: Coordinate, queue: EventQueue) -> None:
    """Split the edge of left event ``se`` at ``p`` and queue both halves."""
    r = SweepEvent(p, False, se, se.is_subject)
    l = SweepEvent(p, True, se.other, se.is_subject)
    r.contour_id = l.contour_id = se.contour_id

    if se.point == se.other.point:
        logger.debug("Splitting collapsed edge at %s", se.point)

    # Rounding can push the split point past the right endpoint
    if compare_events(l, se.other) > 0:
        se.other.left = True
        l.left = False

    se.other.other = l
    se.other = r

    queue.push(l)
    queue.push(r)


def possible_intersection(se1: SweepEvent, se2: SweepEvent, queue: EventQueue) -> int:
    """Split two neighbouring edges where they meet.

    Returns:
        ``NO_INTERSECTION``, ``CROSSING``, ``SHARED_LEFT`` (overlapping edges
        that share their left endpoint, their fields must be recomputed) or
        ``OVERLAP``
    """
    inter = segment_intersection(
        se1.point, se1.other.point,
        se2.point, se2.other.point,
    )
    count = len(inter) if inter else 0
    if count == 0:
        return NO_INTERSECTION

    # Touching at a common endpoint
    if count == 1 and (se1.point == se2.point or se1.other.point == se2.other.point):
        return NO_INTERSECTION

    # Overlapping edges of the same operand cannot change the union
    if count == 2 and se1.is_subject == se2.is_subject:
        return NO_INTERSECTION

    if count == 1:
        point = inter[0]
        if se1.point != point and se1.other.point != point:
            divide_segment(se1, point, queue)
        if se2.point != point and se2.other.point != point:
            divide_segment(se2, point, queue)
        return CROSSING

    # Collinear overlap
    events: List[SweepEvent] = []
    left_coincide = False
    right_coincide = False

    if se1.point == se2.point:
        left_coincide = True
    elif compare_events(se1, se2) == 1:
        events.extend((se2, se1))
    else:
        events.extend((se1, se2))

    if se1.other.point == se2.other.point:
        right_coincide = True
    elif compare_events(se1.other, se2.other) == 1:
        events.extend((se2.other, se1.other))
    else:
        events.extend((se1.other, se2.other))

    if left_coincide:
        # Both edges equal, or sharing the left endpoint
        se2.edge_type = EdgeType.NON_CONTRIBUTING
        se1.edge_type = (
            EdgeType.SAME_TRANSITION if se2.in_out == se1.in_out
            else EdgeType.DIFFERENT_TRANSITION
        )
        if not right_coincide:
            divide_segment(events[1].other, events[0].point, queue)
        return SHARED_LEFT

    if right_coincide:
        divide_segment(events[0], events[1].point, queue)
        return OVERLAP

    if events[0] is not events[3].other:
        # Partial overlap
        divide_segment(events[0], events[1].point, queue)
        divide_segment(events[1], events[2].point, queue)
        return OVERLAP

    # One edge contains the other
    divide_segment(events[0], events[1].point, queue)
    divide_segment(events[3].other, events[2].point, queue)
    return OVERLAP


def subdivide(
    queue: EventQueue,
    cancel_token: Optional[CancellationToken] = None
) -> List[SweepEvent]:
    """Run the sweep and return every processed event in sweep order.

    Raises:
        Cancelled: If ``cancel_token`` is set between two events
    """
    sweep_line = SweepLine()
    sorted_events: List[SweepEvent] = []

    while queue:
        check_cancelled(cancel_token)
        event = queue.pop()
        sorted_events.append(event)

        if event.left:
            index = sweep_line.insert(event)
            prev = sweep_line.below(index)
            nxt = sweep_line.above(index)

            compute_fields(event, prev)

            if nxt is not None:
                if possible_intersection(event, nxt, queue) == SHARED_LEFT:
                    compute_fields(event, prev)
                    compute_fields(nxt, event)

            if prev is not None:
                if possible_intersection(prev, event, queue) == SHARED_LEFT:
                    prevprev = sweep_line.below(index - 1)
                    compute_fields(prev, prevprev)
                    compute_fields(event, prev)
        else:
            left_event = event.other
            index = sweep_line.index(left_event)
            if index is None:
                continue
            prev = sweep_line.below(index)
            nxt = sweep_line.above(index)
            sweep_line.remove_at(index)
            if prev is not None and nxt is not None:
                possible_intersection(prev, nxt, queue)

    return sorted_events


__all__ = [
    'in_union',
    'compute_fields',
    'divide_segment',
    'possible_intersection',
    'subdivide',
]
