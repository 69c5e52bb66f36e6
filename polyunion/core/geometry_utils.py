"""Coordinate-level geometry helpers.

These functions work on plain coordinate sequences (lists or tuples of
``(x, y)`` pairs, closed rings repeat their first coordinate at the end) and
are shared by the primitive types and the union engine.
"""

from typing import List, Sequence, Tuple

import numpy as np

Coordinate = Tuple[float, float]

INSIDE = 1
BOUNDARY = 0
OUTSIDE = -1


def signed_area(coords: Sequence[Coordinate]) -> float:
    """Return the signed area of a closed ring using the shoelace formula.

    Positive for counter-clockwise rings, negative for clockwise rings.

    Examples:
        >>> signed_area([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        1.0
    """
    if len(coords) < 4:
        return 0.0
    arr = np.asarray(coords, dtype=float)
    x = arr[:, 0]
    y = arr[:, 1]
    return float(0.5 * (np.dot(x[:-1], y[1:]) - np.dot(x[1:], y[:-1])))


def coords_bounds(coords: Sequence[Coordinate]) -> Tuple[float, float, float, float]:
    """Return ``(minx, miny, maxx, maxy)`` of a coordinate sequence."""
    arr = np.asarray(coords, dtype=float)
    minx, miny = arr.min(axis=0)
    maxx, maxy = arr.max(axis=0)
    return float(minx), float(miny), float(maxx), float(maxy)


def orient(a: Coordinate, b: Coordinate, c: Coordinate) -> float:
    """Cross product ``(b - a) x (c - a)``; zero when the points are collinear."""
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def on_segment(a: Coordinate, b: Coordinate, p: Coordinate) -> bool:
    """Check whether ``p`` lies on the closed segment ``ab`` (exact arithmetic)."""
    if orient(a, b, p) != 0:
        return False
    return (min(a[0], b[0]) <= p[0] <= max(a[0], b[0])
            and min(a[1], b[1]) <= p[1] <= max(a[1], b[1]))


def locate_point(point: Coordinate, coords: Sequence[Coordinate]) -> int:
    """Locate ``point`` relative to a closed ring by ray casting.

    Args:
        point: Query point
        coords: Closed ring coordinates

    Returns:
        ``INSIDE`` (1), ``BOUNDARY`` (0) or ``OUTSIDE`` (-1)

    Examples:
        >>> square = [(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)]
        >>> locate_point((1, 1), square)
        1
        >>> locate_point((2, 1), square)
        0
    """
    x, y = point
    inside = False
    for i in range(len(coords) - 1):
        x1, y1 = coords[i]
        x2, y2 = coords[i + 1]
        if on_segment((x1, y1), (x2, y2), (x, y)):
            return BOUNDARY
        if (y1 > y) != (y2 > y):
            x_cross = (x2 - x1) * (y - y1) / (y2 - y1) + x1
            if x_cross > x:
                inside = not inside
    return INSIDE if inside else OUTSIDE


def remove_consecutive_duplicates(coords: Sequence[Coordinate]) -> List[Coordinate]:
    """Drop coordinates equal to their predecessor.

    Examples:
        >>> remove_consecutive_duplicates([(0, 0), (0, 0), (1, 0)])
        [(0, 0), (1, 0)]
    """
    cleaned: List[Coordinate] = []
    for coord in coords:
        if not cleaned or cleaned[-1] != coord:
            cleaned.append(coord)
    return cleaned


def snap_coords(coords: Sequence[Coordinate], tolerance: float) -> List[Coordinate]:
    """Snap coordinates to a square grid of ``tolerance`` spacing.

    Near-duplicate vertices from neighbouring rings land on the same grid
    node, so edges that should coincide become exactly equal. A tolerance of
    zero returns the coordinates unchanged.

    Examples:
        >>> snap_coords([(0.0001, 0.9999), (1.0, 1.0)], 0.001)
        [(0.0, 1.0), (1.0, 1.0)]
    """
    if tolerance <= 0:
        return [(float(x), float(y)) for x, y in coords]
    arr = np.asarray(coords, dtype=float)
    snapped = np.round(arr / tolerance) * tolerance
    # Avoid negative zero so snapped coordinates compare and print cleanly
    snapped = snapped + 0.0
    return [(float(x), float(y)) for x, y in snapped]


def remove_collinear_vertices(coords: Sequence[Coordinate]) -> List[Coordinate]:
    """Remove vertices lying on the straight line through their neighbours.

    Works on closed rings and keeps the result closed. Spikes (the ring
    doubling back on itself) are collinear too and are removed the same way.
    Returns fewer than four coordinates when the ring has no area left.
    """
    ring = remove_consecutive_duplicates(list(coords[:-1]))
    changed = True
    while changed and len(ring) >= 3:
        changed = False
        kept: List[Coordinate] = []
        n = len(ring)
        for i in range(n):
            prev = kept[-1] if kept else ring[i - 1]
            nxt = ring[(i + 1) % n]
            if orient(prev, ring[i], nxt) == 0:
                changed = True
                continue
            kept.append(ring[i])
        ring = remove_consecutive_duplicates(kept)
        if len(ring) > 1 and ring[0] == ring[-1]:
            ring.pop()
    if len(ring) < 3:
        return ring
    return ring + [ring[0]]


def rotate_to_lowest(coords: Sequence[Coordinate]) -> List[Coordinate]:
    """Rotate a closed ring so it starts at its lexicographically smallest vertex."""
    open_ring = list(coords[:-1])
    if not open_ring:
        return list(coords)
    start = min(range(len(open_ring)), key=lambda i: open_ring[i])
    rotated = open_ring[start:] + open_ring[:start]
    return rotated + [rotated[0]]


def orient_ring(coords: Sequence[Coordinate], ccw: bool) -> List[Coordinate]:
    """Return the ring with the requested orientation."""
    area = signed_area(coords)
    if (area > 0) == ccw:
        return list(coords)
    return list(reversed(coords))


__all__ = [
    'Coordinate',
    'INSIDE',
    'BOUNDARY',
    'OUTSIDE',
    'signed_area',
    'coords_bounds',
    'orient',
    'on_segment',
    'locate_point',
    'remove_consecutive_duplicates',
    'snap_coords',
    'remove_collinear_vertices',
    'rotate_to_lowest',
    'orient_ring',
]
