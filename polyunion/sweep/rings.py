"""Ring reconstruction: from retained sweep events to nested polygons.

After the sweep, the events whose edges lie on the union boundary are linked
at shared endpoints into closed contours. A contour can visit the same vertex
twice (two components touching at a corner, a hole touching its exterior);
such contours are split into simple loops. Loops are then nested by
containment: a loop inside an even number of other loops is an exterior, a
loop inside an odd number is a hole of its smallest container.
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.errors import UnionComputationError
from ..core.geometry_utils import (
    BOUNDARY,
    INSIDE,
    Coordinate,
    coords_bounds,
    locate_point,
    orient_ring,
    remove_collinear_vertices,
    remove_consecutive_duplicates,
    rotate_to_lowest,
    signed_area,
)
from .events import SweepEvent

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi

RingCoords = List[Coordinate]


@dataclass
class Loop:
    """Closed simple loop awaiting its exterior/hole role."""
    coords: RingCoords
    area: float
    bounds: Tuple[float, float, float, float]
    depth: int = 0
    parent: Optional['Loop'] = None
    holes: List['Loop'] = field(default_factory=list)


def oriented_edges(sorted_events: Sequence[SweepEvent]) -> List[Tuple[Coordinate, Coordinate]]:
    """Result edges directed so that the union interior lies on their left."""
    edges = []
    for event in sorted_events:
        if not event.left or not event.in_result:
            continue
        start, end = event.point, event.other.point
        if start == end:
            continue
        if event.result_transition < 0:
            start, end = end, start
        edges.append((start, end))
    return edges


def _direction(edge: Tuple[Coordinate, Coordinate]) -> float:
    (x0, y0), (x1, y1) = edge
    return math.atan2(y1 - y0, x1 - x0)


def _clockwise_turn(back: float, outgoing: float) -> float:
    turn = (back - outgoing) % TWO_PI
    return turn if turn > 0 else TWO_PI


def connect_edges(sorted_events: Sequence[SweepEvent]) -> List[RingCoords]:
    """Walk the result edges into closed contours.

    Every edge keeps the union interior on its left. At a vertex shared by
    several contours the walk takes the outgoing edge met first when turning
    clockwise from the way it came, so it hugs the interior it is tracing and
    never cuts across a touching component or hole. Contours touching
    themselves come back through the same vertex and are split later by
    :func:`split_pinched`.

    Raises:
        UnionComputationError: If a contour cannot be closed
    """
    edges = oriented_edges(sorted_events)
    directions = [_direction(e) for e in edges]
    outgoing: Dict[Coordinate, List[int]] = defaultdict(list)
    balance: Dict[Coordinate, int] = defaultdict(int)
    for i, (start, end) in enumerate(edges):
        outgoing[start].append(i)
        balance[start] += 1
        balance[end] -= 1

    for point, count in balance.items():
        if count != 0:
            raise UnionComputationError(f"Open contour at {point}")

    used = [False] * len(edges)
    contours: List[RingCoords] = []

    for first in range(len(edges)):
        if used[first]:
            continue

        current = first
        points: RingCoords = [edges[first][0]]
        for _ in range(len(edges)):
            used[current] = True
            arrived = edges[current][1]
            points.append(arrived)

            back = directions[current] + math.pi
            current = min(
                outgoing[arrived],
                key=lambda i: _clockwise_turn(back, directions[i])
            )
            if current == first:
                break
            if used[current]:
                raise UnionComputationError(f"Open contour at {arrived}")
        else:
            raise UnionComputationError(
                f"Contour starting at {edges[first][0]} does not close"
            )

        contours.append(points)

    logger.debug("Connected %d result edges into %d contours", len(edges), len(contours))
    return contours


def split_pinched(contour: Sequence[Coordinate]) -> List[RingCoords]:
    """Split a closed contour at repeated vertices into closed simple loops.

    Examples:
        >>> figure_eight = [(0, 0), (1, 0), (1, 1), (2, 1), (2, 2), (1, 2),
        ...                 (1, 1), (0, 1), (0, 0)]
        >>> len(split_pinched(figure_eight))
        2
    """
    path: List[Coordinate] = []
    seen: Dict[Coordinate, int] = {}
    loops: List[RingCoords] = []

    for point in remove_consecutive_duplicates(list(contour[:-1])):
        if point in seen:
            start = seen[point]
            loop = path[start:] + [point]
            for removed in path[start + 1:]:
                del seen[removed]
            path = path[:start + 1]
            loops.append(loop)
        else:
            seen[point] = len(path)
            path.append(point)

    if path:
        loops.append(path + [path[0]])
    return loops


def _bounds_within(inner, outer) -> bool:
    return (inner[0] >= outer[0] and inner[1] >= outer[1]
            and inner[2] <= outer[2] and inner[3] <= outer[3])


def _is_inside(loop: Loop, container: Loop) -> bool:
    if not _bounds_within(loop.bounds, container.bounds):
        return False
    for vertex in loop.coords[:-1]:
        location = locate_point(vertex, container.coords)
        if location != BOUNDARY:
            return location == INSIDE
    # Every vertex touches the container: fall back to edge midpoints
    for a, b in zip(loop.coords[:-1], loop.coords[1:]):
        mid = ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)
        location = locate_point(mid, container.coords)
        if location != BOUNDARY:
            return location == INSIDE
    return False


def build_loops(
    contours: Sequence[Sequence[Coordinate]],
    remove_collinear: bool = True
) -> Tuple[List[Loop], int]:
    """Turn contours into simple loops with non-zero area.

    Returns:
        Tuple of (loops, dropped_count) where dropped_count is the number of
        zero-area loops discarded
    """
    loops: List[Loop] = []
    dropped = 0
    for contour in contours:
        for coords in split_pinched(contour):
            if remove_collinear:
                coords = remove_collinear_vertices(coords)
            if len(coords) < 4:
                dropped += 1
                continue
            area = abs(signed_area(coords))
            if area == 0.0:
                dropped += 1
                continue
            loops.append(Loop(coords=coords, area=area, bounds=coords_bounds(coords)))
    return loops, dropped


def nest_loops(loops: List[Loop]) -> List[Loop]:
    """Assign exterior/hole roles by containment.

    Returns:
        The exterior loops (even depth); holes are attached to their
        exterior's ``holes`` list
    """
    ordered = sorted(loops, key=lambda lp: lp.area, reverse=True)
    placed: List[Loop] = []
    exteriors: List[Loop] = []

    for loop in ordered:
        parent = None
        # Later entries are smaller, so the first hit is the tightest container
        for candidate in reversed(placed):
            if candidate.area > loop.area and _is_inside(loop, candidate):
                parent = candidate
                break

        loop.parent = parent
        loop.depth = parent.depth + 1 if parent is not None else 0
        if loop.depth % 2 == 0:
            exteriors.append(loop)
        else:
            parent.holes.append(loop)
        placed.append(loop)

    return exteriors


def normalized_ring(coords: Sequence[Coordinate], ccw: bool) -> RingCoords:
    """Orient a ring and start it at its smallest vertex."""
    return rotate_to_lowest(orient_ring(coords, ccw))


def assemble(loops: List[Loop]) -> List[Tuple[RingCoords, List[RingCoords]]]:
    """Nest loops and return ``(exterior, holes)`` coordinate pairs in a stable order."""
    shells = []
    for exterior in nest_loops(loops):
        holes = sorted(normalized_ring(h.coords, ccw=False) for h in exterior.holes)
        shells.append((normalized_ring(exterior.coords, ccw=True), holes))
    shells.sort(key=lambda shell: shell[0][0])
    return shells


__all__ = [
    'Loop',
    'oriented_edges',
    'connect_edges',
    'split_pinched',
    'build_loops',
    'nest_loops',
    'normalized_ring',
    'assemble',
]
