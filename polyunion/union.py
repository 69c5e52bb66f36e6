"""Pairwise polygon union.

:func:`union` merges two operands (Polygon or MultiPolygon) with a
Martinez-Rueda sweep:

1. optional snapping of both operands to a tolerance grid
2. operand validation (empty area, ring simplicity)
3. event queue construction, one pair of events per edge
4. sweep with intersection splitting and in/out classification
5. reconstruction of closed rings from the retained edges
6. nesting of rings into exteriors and holes

Every failure raises a :class:`~polyunion.core.errors.UnionError` subclass
carrying the identifiers of both operands. Nothing is retried and no partial
state leaks out of a failed call.
"""

import logging
from typing import Any, List, Optional, Sequence, Tuple

from shapely.validation import explain_validity

from .cancellation import CancellationToken, check_cancelled
from .config import DEFAULT_CONFIG, UnionConfig
from .core.errors import (
    DegenerateUnion,
    InvalidRing,
    SelfIntersectingInput,
    UnionComputationError,
    ValidationError,
)
from .core.geometry_utils import Coordinate, coords_bounds, remove_collinear_vertices, snap_coords
from .core.primitives import Geometry, Polygon, Ring, as_polygons
from .core.types import DiagnosticReason
from .core.validation_utils import check_ring_simple, clean_ring_coords
from .diagnostics import Diagnostic, MemberRef
from .result import UnionResult
from .sweep.events import build_event_queue
from .sweep.rings import assemble, build_loops, connect_edges, normalized_ring
from .sweep.subdivide import subdivide

logger = logging.getLogger(__name__)

OperandRings = List[List[List[Coordinate]]]


def flatten_ids(operand_ids: Sequence[Any]) -> MemberRef:
    """Collapse operand identifiers to a sorted tuple of member indices.

    Examples:
        >>> flatten_ids([(0, 1), 3])
        (0, 1, 3)
    """
    flat = []
    for ident in operand_ids:
        if isinstance(ident, (tuple, list)):
            flat.extend(ident)
        else:
            flat.append(ident)
    if all(isinstance(i, int) for i in flat):
        return tuple(sorted(set(flat)))
    return tuple(flat)


def _operand_rings(
    geometry: Geometry,
    operand_id: Any,
    config: UnionConfig,
    diagnostics: List[Diagnostic],
) -> OperandRings:
    """Snap, validate and flatten one operand into rings per polygon."""
    polygons = as_polygons(geometry)
    tolerance = config.snap_tolerance
    result: OperandRings = []

    for poly in polygons:
        rings: List[List[Coordinate]] = []
        for ring_index, ring in enumerate(poly.rings):
            coords = list(ring.coords)
            if tolerance > 0:
                try:
                    coords = clean_ring_coords(snap_coords(coords, tolerance))
                except InvalidRing as exc:
                    diagnostics.append(Diagnostic(
                        '', DiagnosticReason.SNAP_COLLAPSE,
                        flatten_ids([operand_id]),
                        f"{'Exterior' if ring_index == 0 else 'Hole'} ring collapsed "
                        f"when snapped to {tolerance}: {exc}",
                    ))
                    if ring_index == 0:
                        rings = []
                        break
                    continue

            if config.check_simple:
                try:
                    check_ring_simple(coords)
                except SelfIntersectingInput as exc:
                    raise SelfIntersectingInput(
                        f"Operand {operand_id!r}: {exc}", location=exc.location
                    ) from exc
            rings.append(coords)

        if rings:
            result.append(rings)

    if not result:
        raise DegenerateUnion(
            f"Operand {operand_id!r} has no area left after validation",
            operand_ids=(operand_id,),
        )
    return result


def _rings_bounds(operand: OperandRings) -> Tuple[float, float, float, float]:
    exterior_points = [pt for rings in operand for pt in rings[0]]
    return coords_bounds(exterior_points)


def _disjoint(b1, b2) -> bool:
    return b1[2] < b2[0] or b2[2] < b1[0] or b1[3] < b2[1] or b2[3] < b1[1]


def _build_polygons(shells) -> List[Polygon]:
    return [
        Polygon(Ring(exterior), tuple(Ring(h) for h in holes))
        for exterior, holes in shells
    ]


def _trivial_shells(operands: Sequence[OperandRings], remove_collinear: bool):
    shells = []
    for operand in operands:
        for rings in operand:
            normalized = []
            for coords in rings:
                if remove_collinear:
                    coords = remove_collinear_vertices(coords)
                normalized.append(coords)
            exterior, holes = normalized[0], normalized[1:]
            shells.append((
                normalized_ring(exterior, ccw=True),
                sorted(normalized_ring(h, ccw=False) for h in holes),
            ))
    shells.sort(key=lambda shell: shell[0][0])
    return shells


def union(
    a: Geometry,
    b: Geometry,
    config: Optional[UnionConfig] = None,
    cancel_token: Optional[CancellationToken] = None,
    operand_ids: Optional[Sequence[Any]] = None,
) -> UnionResult:
    """Compute the union of two polygonal geometries.

    Args:
        a: Left operand (Polygon or MultiPolygon)
        b: Right operand (Polygon or MultiPolygon)
        config: Engine settings (snapping, validation, collinear cleanup)
        cancel_token: Checked between sweep events
        operand_ids: Identifiers of ``a`` and ``b`` used in errors and
            diagnostics (defaults to ``('a', 'b')``)

    Returns:
        UnionResult tagged POLYGON for one connected component,
        MULTIPOLYGON otherwise

    Raises:
        DegenerateUnion: If an operand has no area after snapping
        SelfIntersectingInput: If an operand ring is not simple
        UnionComputationError: If ring reconstruction fails or the result
            is invalid
        Cancelled: If ``cancel_token`` is set during the sweep

    Examples:
        >>> left = Polygon.from_coords([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        >>> right = Polygon.from_coords([(1, 0), (2, 0), (2, 1), (1, 1), (1, 0)])
        >>> union(left, right).geometry.coordinates
        [[[0.0, 0.0], [2.0, 0.0], [2.0, 1.0], [0.0, 1.0], [0.0, 0.0]]]
    """
    config = config or DEFAULT_CONFIG
    ids = tuple(operand_ids) if operand_ids is not None else ('a', 'b')
    diagnostics: List[Diagnostic] = []

    check_cancelled(cancel_token)
    subject = _operand_rings(a, ids[0], config, diagnostics)
    clipping = _operand_rings(b, ids[1], config, diagnostics)

    try:
        if _disjoint(_rings_bounds(subject), _rings_bounds(clipping)):
            logger.debug("Operands %r and %r have disjoint bounds", ids[0], ids[1])
            shells = _trivial_shells((subject, clipping), config.remove_collinear)
        else:
            queue, edge_count = build_event_queue(subject, clipping)
            logger.debug(
                "Sweeping %d edges of operands %r and %r", edge_count, ids[0], ids[1]
            )
            sorted_events = subdivide(queue, cancel_token)
            contours = connect_edges(sorted_events)
            loops, dropped = build_loops(contours, config.remove_collinear)
            if dropped:
                diagnostics.append(Diagnostic(
                    '', DiagnosticReason.ZERO_AREA_COMPONENT, flatten_ids(ids),
                    f"Dropped {dropped} zero-area loop(s) from the union boundary",
                ))
            shells = assemble(loops)

        polygons = _build_polygons(shells)
    except UnionComputationError as exc:
        raise UnionComputationError(
            f"Union of {ids[0]!r} and {ids[1]!r} failed: {exc}", operand_ids=ids
        ) from exc
    except ValidationError as exc:
        raise UnionComputationError(
            f"Union of {ids[0]!r} and {ids[1]!r} produced an invalid ring: {exc}",
            operand_ids=ids,
        ) from exc

    if not polygons:
        raise UnionComputationError(
            f"Union of {ids[0]!r} and {ids[1]!r} produced no polygon", operand_ids=ids
        )

    result = UnionResult.from_polygons(polygons, diagnostics)

    if config.validate_result:
        shape = result.geometry.to_shapely()
        if not shape.is_valid:
            raise UnionComputationError(
                f"Union of {ids[0]!r} and {ids[1]!r} is invalid: {explain_validity(shape)}",
                operand_ids=ids,
            )

    return result


def normalize(
    geometry: Geometry,
    config: Optional[UnionConfig] = None,
    operand_id: Any = 'a',
) -> UnionResult:
    """Bring a single operand into the canonical output form.

    Applies the same snapping, validation and ring ordering as :func:`union`
    without a second operand, for groups that reduce to one member.

    Raises:
        DegenerateUnion: If the geometry has no area after snapping
        SelfIntersectingInput: If a ring is not simple
    """
    config = config or DEFAULT_CONFIG
    diagnostics: List[Diagnostic] = []
    rings = _operand_rings(geometry, operand_id, config, diagnostics)
    shells = _trivial_shells((rings,), config.remove_collinear)
    return UnionResult.from_polygons(_build_polygons(shells), diagnostics)


__all__ = ['union', 'normalize', 'flatten_ids']
