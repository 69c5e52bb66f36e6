"""Shared measurement helpers for union results.

The driver reports a handful of scalar metrics per group so callers can
judge a union without re-reading its geometry: how much area went in, how
much came out, how many components and holes the result has. Centralizing the
logic here keeps the driver free from ad-hoc area bookkeeping.
"""

from __future__ import annotations

from typing import Dict, Optional

from shapely.geometry.base import BaseGeometry

from .core.primitives import Geometry, as_polygons


def _safe_is_valid(geometry: BaseGeometry) -> bool:
    try:
        return bool(geometry.is_valid)
    except Exception:
        return False


def count_components(geometry: Geometry) -> int:
    return len(as_polygons(geometry))


def count_holes(geometry: Geometry) -> int:
    return sum(len(p.holes) for p in as_polygons(geometry))


def count_vertices(geometry: Geometry) -> int:
    """Number of distinct ring vertices (closing coordinates excluded)."""
    return sum(len(ring.coords) - 1 for ring in geometry.rings)


def measure_geometry(
    geometry: Geometry,
    original_area: Optional[float] = None,
    check_valid: bool = True,
) -> Dict[str, Optional[float]]:
    """Return core metrics for ``geometry``.

    Args:
        geometry: Polygon or MultiPolygon primitive
        original_area: Summed area of the inputs, used for ``area_ratio``
        check_valid: Run Shapely's validity check. Pass False for geometry
            the union engine has already validated; ``is_valid`` is then None

    Returns:
        Dict with ``is_valid``, ``area``, ``area_ratio``, ``components``,
        ``holes`` and ``vertices``
    """
    area = geometry.area
    area_ratio: Optional[float] = None
    if original_area and original_area > 0:
        area_ratio = area / original_area

    is_valid = _safe_is_valid(geometry.to_shapely()) if check_valid else None

    return {
        "is_valid": is_valid,
        "area": area,
        "area_ratio": area_ratio,
        "components": count_components(geometry),
        "holes": count_holes(geometry),
        "vertices": count_vertices(geometry),
    }


__all__ = [
    "count_components",
    "count_holes",
    "count_vertices",
    "measure_geometry",
]
