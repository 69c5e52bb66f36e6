"""Segment intersection and sweep-line ordering of active edges."""

from __future__ import annotations

from typing import List, Optional

from ..core.geometry_utils import Coordinate
from .events import SweepEvent, compare_events, signed_area


def _cross(a: Coordinate, b: Coordinate) -> float:
    return a[0] * b[1] - a[1] * b[0]


def _dot(a: Coordinate, b: Coordinate) -> float:
    return a[0] * b[0] + a[1] * b[1]


def _along(p: Coordinate, s: float, d: Coordinate) -> Coordinate:
    return (p[0] + s * d[0], p[1] + s * d[1])


def segment_intersection(
    a1: Coordinate,
    a2: Coordinate,
    b1: Coordinate,
    b2: Coordinate
) -> Optional[List[Coordinate]]:
    """Intersect segments ``a1a2`` and ``b1b2``.

    Returns:
        None when the segments do not meet, a one-element list with the
        crossing (or touching) point, or a two-element list with the
        endpoints of the shared stretch when the segments are collinear and
        overlap.

    Examples:
        >>> segment_intersection((0, 0), (2, 2), (0, 2), (2, 0))
        [(1.0, 1.0)]
        >>> segment_intersection((0, 0), (2, 0), (1, 0), (3, 0))
        [(1.0, 0.0), (2.0, 0.0)]
    """
    va = (a2[0] - a1[0], a2[1] - a1[1])
    vb = (b2[0] - b1[0], b2[1] - b1[1])
    e = (b1[0] - a1[0], b1[1] - a1[1])

    kross = _cross(va, vb)
    sqr_len_a = _dot(va, va)

    if kross * kross > 0:
        s = _cross(e, vb) / kross
        if s < 0 or s > 1:
            return None
        t = _cross(e, va) / kross
        if t < 0 or t > 1:
            return None
        if s == 0 or s == 1:
            return [_along(a1, s, va)]
        if t == 0 or t == 1:
            return [_along(b1, t, vb)]
        return [_along(a1, s, va)]

    # Parallel: only collinear segments can share points
    kross = _cross(e, va)
    if kross * kross > 0:
        return None

    sa = _dot(va, e) / sqr_len_a
    sb = sa + _dot(va, vb) / sqr_len_a
    smin = min(sa, sb)
    smax = max(sa, sb)

    if smin <= 1 and smax >= 0:
        if smin == 1:
            return [_along(a1, smin if smin > 0 else 0, va)]
        if smax == 0:
            return [_along(a1, smax if smax < 1 else 1, va)]
        return [
            _along(a1, smin if smin > 0 else 0, va),
            _along(a1, smax if smax < 1 else 1, va),
        ]

    return None


def compare_segments(le1: SweepEvent, le2: SweepEvent) -> int:
    """Vertical order of two left events in the sweep-line status.

    Negative when the edge of ``le1`` lies below the edge of ``le2`` at the
    current sweep position.
    """
    if le1 is le2:
        return 0

    if (signed_area(le1.point, le1.other.point, le2.point) != 0
            or signed_area(le1.point, le1.other.point, le2.other.point) != 0):
        # Not collinear
        if le1.point == le2.point:
            return -1 if le1.is_below(le2.other.point) else 1

        if le1.point[0] == le2.point[0]:
            return -1 if le1.point[1] < le2.point[1] else 1

        # le1 entered the status after le2
        if compare_events(le1, le2) == 1:
            # A left endpoint lying on the other edge says nothing: use the right one
            if signed_area(le2.point, le2.other.point, le1.point) == 0:
                return -1 if le2.is_above(le1.other.point) else 1
            return -1 if le2.is_above(le1.point) else 1

        if signed_area(le1.point, le1.other.point, le2.point) == 0:
            return -1 if le1.is_below(le2.other.point) else 1
        return -1 if le1.is_below(le2.point) else 1

    if le1.is_subject == le2.is_subject:
        # Collinear edges of the same operand
        if le1.point == le2.point:
            if le1.other.point == le2.other.point:
                return 0
            return 1 if le1.contour_id > le2.contour_id else -1
    else:
        # Collinear edges of different operands: subject below
        return -1 if le1.is_subject else 1

    return 1 if compare_events(le1, le2) == 1 else -1


__all__ = ['segment_intersection', 'compare_segments']
