"""Union result: a tagged Polygon or MultiPolygon plus diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .core.primitives import Geometry, MultiPolygon, Polygon, as_polygons
from .core.types import ResultKind
from .diagnostics import Diagnostic


@dataclass(frozen=True)
class UnionResult:
    """Outcome of a union: the merged geometry and what happened on the way.

    Attributes:
        kind: ``ResultKind.POLYGON`` or ``ResultKind.MULTIPOLYGON``
        geometry: The merged geometry, matching ``kind``
        diagnostics: Degenerate-input warnings collected while computing it

    Examples:
        >>> result = union(square_a, square_b)
        >>> result.kind
        <ResultKind.POLYGON: 'Polygon'>
        >>> result.to_geojson()['type']
        'Polygon'
    """
    kind: ResultKind
    geometry: Geometry
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @classmethod
    def from_polygons(
        cls,
        polygons: Sequence[Polygon],
        diagnostics: Sequence[Diagnostic] = ()
    ) -> UnionResult:
        """Tag one polygon as POLYGON and several as MULTIPOLYGON."""
        if not polygons:
            raise ValueError("A union result needs at least one polygon")
        if len(polygons) == 1:
            return cls(ResultKind.POLYGON, polygons[0], list(diagnostics))
        return cls(ResultKind.MULTIPOLYGON, MultiPolygon(tuple(polygons)), list(diagnostics))

    @classmethod
    def from_geometry(cls, geometry: Geometry) -> UnionResult:
        return cls.from_polygons(as_polygons(geometry))

    @property
    def polygons(self):
        return as_polygons(self.geometry)

    @property
    def area(self) -> float:
        return self.geometry.area

    @property
    def is_multi(self) -> bool:
        return self.kind == ResultKind.MULTIPOLYGON

    def to_geojson(self) -> Dict[str, Any]:
        """GeoJSON geometry mapping of the result."""
        return {
            'type': self.kind.value,
            'coordinates': self.geometry.coordinates,
        }


__all__ = ['UnionResult']
