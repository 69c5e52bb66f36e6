"""Input records for the grouping driver.

A record assigns one member polygon to a group. Three layouts are accepted:

- ``{"groupKey": "Chaco", "polygon": {"outerRing": [...], "holes": [...]}}``
- ``("Chaco", {"outerRing": [...], "holes": [...]})``
- either of the above with a GeoJSON geometry
  ``{"type": "Polygon", "coordinates": [outer, *holes]}`` as the polygon

An optional ``"name"`` entry on a mapping record labels the member in
diagnostics. Geometry is not validated here; the driver validates each member
when it builds the group so that a bad member becomes a diagnostic instead
of aborting the whole batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from .core.errors import InvalidPolygon
from .core.primitives import Polygon

RawRing = Sequence[Sequence[float]]


@dataclass(frozen=True)
class MemberRecord:
    """One member of a group, as supplied by the caller.

    Attributes:
        group_key: Key of the group the member belongs to
        polygon: Polygon mapping (``outerRing``/``holes`` or GeoJSON layout)
        name: Optional label used in log messages and diagnostics
    """
    group_key: str
    polygon: Any
    name: Optional[str] = None

    def rings(self) -> Tuple[RawRing, List[RawRing]]:
        """Return ``(outer_ring, holes)`` as raw coordinate sequences."""
        return polygon_rings(self.polygon)

    def to_polygon(self) -> Polygon:
        """Build and validate the member polygon.

        Raises:
            InvalidRing: If a ring is malformed
            InvalidPolygon: If the mapping layout is unknown or holes are
                misplaced
        """
        outer, holes = self.rings()
        return Polygon.from_coords(outer, holes)

    @property
    def label(self) -> str:
        return self.name if self.name is not None else '<unnamed>'


def polygon_rings(polygon: Any) -> Tuple[RawRing, List[RawRing]]:
    """Extract outer ring and holes from a polygon mapping.

    Args:
        polygon: ``{"outerRing": ring, "holes": [ring, ...]}`` or a GeoJSON
            Polygon geometry mapping

    Returns:
        Tuple of (outer_ring, holes)

    Raises:
        InvalidPolygon: If the mapping matches neither layout

    Examples:
        >>> polygon_rings({"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [0, 1], [0, 0]]]})
        ([[0, 0], [1, 0], [0, 1], [0, 0]], [])
    """
    if not isinstance(polygon, Mapping):
        raise InvalidPolygon(
            f"Polygon must be a mapping, got {type(polygon).__name__}"
        )

    if 'outerRing' in polygon:
        holes = polygon.get('holes') or []
        return polygon['outerRing'], list(holes)

    if polygon.get('type') == 'Polygon':
        coordinates = polygon.get('coordinates') or []
        if not coordinates:
            raise InvalidPolygon("GeoJSON Polygon has no rings")
        return coordinates[0], list(coordinates[1:])

    if 'type' in polygon:
        raise InvalidPolygon(f"Unsupported geometry type {polygon['type']!r}")
    raise InvalidPolygon("Polygon mapping needs 'outerRing' or GeoJSON 'coordinates'")


def _parse_one(record: Any, position: int) -> MemberRecord:
    if isinstance(record, MemberRecord):
        return record

    if isinstance(record, Mapping):
        if 'groupKey' not in record:
            raise ValueError(f"Record {position} has no 'groupKey'")
        return MemberRecord(
            group_key=record['groupKey'],
            polygon=record.get('polygon'),
            name=record.get('name'),
        )

    if isinstance(record, (tuple, list)) and len(record) in (2, 3):
        name = record[2] if len(record) == 3 else None
        return MemberRecord(group_key=record[0], polygon=record[1], name=name)

    raise ValueError(
        f"Record {position} must be a mapping, a (key, polygon) tuple or a "
        f"MemberRecord, got {type(record).__name__}"
    )


def parse_records(records: Iterable[Any]) -> List[MemberRecord]:
    """Normalise caller records into :class:`MemberRecord` objects.

    Raises:
        ValueError: If a record has no group key or an unknown layout. Bad
            geometry is not an error at this stage.
    """
    parsed = []
    for position, record in enumerate(records):
        member = _parse_one(record, position)
        if member.group_key is None:
            raise ValueError(f"Record {position} has a null group key")
        parsed.append(member)
    return parsed


__all__ = ['MemberRecord', 'polygon_rings', 'parse_records']
