"""Validation helpers shared by the primitives and the union engine.

Structural checks (closure, vertex counts) are plain Python; topological
checks (ring simplicity, hole containment, hole overlap) are delegated to
Shapely predicates.
"""

import math
from typing import List, Sequence

from shapely.geometry import LinearRing, Polygon as ShapelyPolygon
from shapely.strtree import STRtree
from shapely.validation import explain_validity

from .errors import InvalidPolygon, InvalidRing, SelfIntersectingInput
from .geometry_utils import Coordinate, remove_consecutive_duplicates, signed_area

MIN_RING_COORDS = 4
MIN_DISTINCT_VERTICES = 3


def is_ring_closed(coords: Sequence[Coordinate]) -> bool:
    """Check if a coordinate ring is closed (first == last, exact comparison).

    Examples:
        >>> is_ring_closed([(0, 0), (1, 0), (1, 1), (0, 0)])
        True
        >>> is_ring_closed([(0, 0), (1, 0), (1, 1)])
        False
    """
    if len(coords) < 2:
        return False
    return tuple(coords[0]) == tuple(coords[-1])


def clean_ring_coords(coords: Sequence[Sequence[float]]) -> List[Coordinate]:
    """Convert raw input to a validated, duplicate-free closed coordinate list.

    Args:
        coords: Sequence of ``[x, y]`` pairs, first and last equal

    Returns:
        List of float ``(x, y)`` tuples with consecutive duplicates removed

    Raises:
        InvalidRing: If the ring is malformed, open, too short or has no area
    """
    try:
        points = [(float(c[0]), float(c[1])) for c in coords]
    except (TypeError, ValueError, IndexError) as exc:
        raise InvalidRing(f"Ring coordinates must be [x, y] number pairs: {exc}") from exc

    for x, y in points:
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidRing(f"Ring has a non-finite coordinate ({x}, {y})")

    if not is_ring_closed(points):
        raise InvalidRing(
            f"Ring is not closed ({len(points)} coordinates, first != last)"
        )

    cleaned = remove_consecutive_duplicates(points)
    if len(cleaned) < MIN_RING_COORDS:
        raise InvalidRing(
            f"Ring has {len(cleaned)} coordinates after removing duplicates, "
            f"at least {MIN_RING_COORDS} required"
        )

    distinct = len(set(cleaned[:-1]))
    if distinct < MIN_DISTINCT_VERTICES:
        raise InvalidRing(
            f"Ring has {distinct} distinct vertices, "
            f"at least {MIN_DISTINCT_VERTICES} required"
        )

    if signed_area(cleaned) == 0.0:
        raise InvalidRing("Ring has zero area")

    return cleaned


def check_ring_simple(coords: Sequence[Coordinate]) -> None:
    """Raise :class:`SelfIntersectingInput` if the ring crosses or touches itself."""
    ring = LinearRing(coords)
    if ring.is_simple:
        return
    reason = explain_validity(ShapelyPolygon(coords))
    location = None
    if '[' in reason:
        try:
            x, y = reason[reason.index('[') + 1:reason.index(']')].split()[:2]
            location = (float(x), float(y))
        except ValueError:
            location = None
    raise SelfIntersectingInput(f"Ring is not simple: {reason}", location=location)


def check_simple(geometry) -> None:
    """Check every ring of a Ring, Polygon or MultiPolygon for simplicity.

    Raises:
        SelfIntersectingInput: On the first non-simple ring found
    """
    for ring in geometry.rings:
        check_ring_simple(ring.coords)


def check_holes(
    exterior: Sequence[Coordinate],
    holes: Sequence[Sequence[Coordinate]]
) -> None:
    """Validate hole placement for a polygon.

    Every hole must lie inside the exterior (touching its boundary is
    allowed) and hole interiors must not intersect each other.

    Raises:
        InvalidPolygon: If a hole escapes the exterior or two holes overlap
    """
    if not holes:
        return

    shell = ShapelyPolygon(exterior)
    hole_polys = [ShapelyPolygon(h) for h in holes]

    for i, hole in enumerate(hole_polys):
        if not shell.contains(hole):
            raise InvalidPolygon(f"Hole {i} is not contained in the exterior ring")

    if len(hole_polys) < 2:
        return

    tree = STRtree(hole_polys)
    for i, hole in enumerate(hole_polys):
        for j in tree.query(hole, predicate='intersects'):
            if j <= i:
                continue
            # Interiors intersect: the holes overlap rather than touch
            if hole.relate_pattern(hole_polys[j], 'T********'):
                raise InvalidPolygon(f"Holes {i} and {j} overlap")


__all__ = [
    'MIN_RING_COORDS',
    'MIN_DISTINCT_VERTICES',
    'is_ring_closed',
    'clean_ring_coords',
    'check_ring_simple',
    'check_simple',
    'check_holes',
]
