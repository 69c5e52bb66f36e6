"""Immutable geometry primitives: Ring, Polygon and MultiPolygon.

Primitives are value objects built from input data. They validate themselves
on construction, so any instance that exists is structurally sound: rings are
closed with at least three distinct vertices and a non-zero area, polygon
holes lie inside the exterior and do not overlap. Ring simplicity is checked
separately with :func:`polyunion.core.validation_utils.check_simple` because
it is comparatively expensive and the engine only needs it once per operand.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from shapely.geometry import LinearRing
from shapely.geometry import MultiPolygon as ShapelyMultiPolygon
from shapely.geometry import Polygon as ShapelyPolygon

from .geometry_utils import (
    BOUNDARY,
    INSIDE,
    Coordinate,
    coords_bounds,
    locate_point,
    orient_ring,
    signed_area,
)
from .validation_utils import check_holes, clean_ring_coords

Bounds = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Ring:
    """Closed ring of coordinates.

    Attributes:
        coords: Closed tuple of ``(x, y)`` float pairs (first == last) with
            consecutive duplicates removed

    Raises:
        InvalidRing: If the coordinates do not form a valid ring

    Examples:
        >>> ring = Ring([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        >>> ring.area
        1.0
        >>> ring.is_ccw
        True
    """
    coords: Tuple[Coordinate, ...]

    def __post_init__(self):
        object.__setattr__(self, 'coords', tuple(clean_ring_coords(self.coords)))

    def __len__(self) -> int:
        return len(self.coords)

    def __iter__(self):
        return iter(self.coords)

    @property
    def signed_area(self) -> float:
        return signed_area(self.coords)

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    @property
    def is_ccw(self) -> bool:
        return self.signed_area > 0

    @property
    def bounds(self) -> Bounds:
        return coords_bounds(self.coords)

    @property
    def rings(self) -> Tuple[Ring, ...]:
        return (self,)

    def oriented(self, ccw: bool = True) -> Ring:
        """Return this ring with the requested orientation."""
        if self.is_ccw == ccw:
            return self
        return Ring(tuple(reversed(self.coords)))

    def locate(self, point: Coordinate) -> int:
        """Locate a point: 1 inside, 0 on the boundary, -1 outside."""
        return locate_point(point, self.coords)

    def contains_point(self, point: Coordinate) -> bool:
        return self.locate(point) == INSIDE

    def to_shapely(self) -> LinearRing:
        return LinearRing(self.coords)

    @property
    def coordinates(self) -> List[List[float]]:
        return [[x, y] for x, y in self.coords]


@dataclass(frozen=True)
class Polygon:
    """Polygon made of one exterior ring and zero or more holes.

    The exterior is normalised to counter-clockwise orientation and holes to
    clockwise orientation on construction.

    Attributes:
        exterior: Outer boundary
        holes: Interior rings, each strictly inside the exterior

    Raises:
        InvalidPolygon: If a hole lies outside the exterior or holes overlap

    Examples:
        >>> poly = Polygon.from_coords(
        ...     [(0, 0), (4, 0), (4, 4), (0, 4), (0, 0)],
        ...     holes=[[(1, 1), (2, 1), (2, 2), (1, 2), (1, 1)]],
        ... )
        >>> poly.area
        15.0
    """
    exterior: Ring
    holes: Tuple[Ring, ...] = ()

    def __post_init__(self):
        exterior = self.exterior.oriented(ccw=True)
        holes = tuple(h.oriented(ccw=False) for h in self.holes)
        check_holes(exterior.coords, [h.coords for h in holes])
        object.__setattr__(self, 'exterior', exterior)
        object.__setattr__(self, 'holes', holes)

    @classmethod
    def from_coords(
        cls,
        exterior: Sequence[Sequence[float]],
        holes: Iterable[Sequence[Sequence[float]]] = ()
    ) -> Polygon:
        """Build a polygon from raw coordinate sequences.

        Raises:
            InvalidRing: If any ring is malformed
            InvalidPolygon: If the holes are misplaced
        """
        return cls(Ring(exterior), tuple(Ring(h) for h in holes))

    @property
    def rings(self) -> Tuple[Ring, ...]:
        return (self.exterior,) + self.holes

    @property
    def polygons(self) -> Tuple[Polygon, ...]:
        return (self,)

    @property
    def area(self) -> float:
        return self.exterior.area - sum(h.area for h in self.holes)

    @property
    def bounds(self) -> Bounds:
        return self.exterior.bounds

    @property
    def is_empty(self) -> bool:
        return False

    def contains_point(self, point: Coordinate) -> bool:
        """True if ``point`` lies in the interior (not on any boundary)."""
        if self.exterior.locate(point) != INSIDE:
            return False
        for hole in self.holes:
            if hole.locate(point) in (INSIDE, BOUNDARY):
                return False
        return True

    def to_shapely(self) -> ShapelyPolygon:
        return ShapelyPolygon(self.exterior.coords, [h.coords for h in self.holes])

    @property
    def coordinates(self) -> List[List[List[float]]]:
        return [ring.coordinates for ring in self.rings]


@dataclass(frozen=True)
class MultiPolygon:
    """Ordered collection of polygons with pairwise disjoint interiors.

    Disjointness is guaranteed by the union engine for its own output and is
    not re-checked here.
    """
    polygons: Tuple[Polygon, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'polygons', tuple(self.polygons))

    def __len__(self) -> int:
        return len(self.polygons)

    def __iter__(self):
        return iter(self.polygons)

    @property
    def rings(self) -> Tuple[Ring, ...]:
        return tuple(ring for poly in self.polygons for ring in poly.rings)

    @property
    def area(self) -> float:
        return sum(p.area for p in self.polygons)

    @property
    def bounds(self) -> Bounds:
        if not self.polygons:
            raise ValueError("Empty MultiPolygon has no bounds")
        all_bounds = [p.bounds for p in self.polygons]
        return (
            min(b[0] for b in all_bounds),
            min(b[1] for b in all_bounds),
            max(b[2] for b in all_bounds),
            max(b[3] for b in all_bounds),
        )

    @property
    def is_empty(self) -> bool:
        return not self.polygons

    def contains_point(self, point: Coordinate) -> bool:
        return any(p.contains_point(point) for p in self.polygons)

    def to_shapely(self) -> ShapelyMultiPolygon:
        return ShapelyMultiPolygon([p.to_shapely() for p in self.polygons])

    @property
    def coordinates(self) -> List[List[List[List[float]]]]:
        return [p.coordinates for p in self.polygons]


Geometry = Union[Polygon, MultiPolygon]


def as_polygons(geometry: Geometry) -> Tuple[Polygon, ...]:
    """Return the component polygons of a Polygon or MultiPolygon."""
    if isinstance(geometry, Polygon):
        return (geometry,)
    if isinstance(geometry, MultiPolygon):
        return geometry.polygons
    raise TypeError(f"Expected Polygon or MultiPolygon, got {type(geometry).__name__}")


def geometry_type(geometry: Geometry) -> str:
    """GeoJSON type name of a primitive geometry."""
    return 'Polygon' if isinstance(geometry, Polygon) else 'MultiPolygon'


__all__ = [
    'Bounds',
    'Ring',
    'Polygon',
    'MultiPolygon',
    'Geometry',
    'as_polygons',
    'geometry_type',
]
