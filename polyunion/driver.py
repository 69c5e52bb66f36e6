"""Grouping driver: union the members of every group into one geometry.

Typical use, with departments grouped by province::

    report = union_by_group(records, config=UnionConfig(max_workers=4))
    for province, result in report.results.items():
        print(province, result.kind.value, result.area)
    for entry in report.diagnostics_as_dicts():
        print(entry)

Every group is processed independently. Invalid members are excluded and
recorded as diagnostics; a group with no valid member, a cancelled group or a
group whose final result cannot be built gets a failure entry and no result,
and never affects the other groups.
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .cancellation import CancellationToken, check_cancelled
from .config import DEFAULT_CONFIG, UnionConfig
from .core.errors import (
    Cancelled,
    DegenerateUnion,
    EmptyGroupAfterFiltering,
    InvalidPolygon,
    InvalidRing,
    PolyunionError,
    SelfIntersectingInput,
    ValidationError,
)
from .core.primitives import Polygon
from .core.types import DiagnosticReason
from .core.validation_utils import check_simple
from .diagnostics import Diagnostic, merge_diagnostics
from .metrics import measure_geometry
from .records import MemberRecord, parse_records
from .reduce import engine_union_fn, finalize, reduce_operands
from .result import UnionResult

logger = logging.getLogger(__name__)

_VALIDATION_REASONS = (
    (SelfIntersectingInput, DiagnosticReason.SELF_INTERSECTING_INPUT),
    (InvalidRing, DiagnosticReason.INVALID_RING),
    (InvalidPolygon, DiagnosticReason.INVALID_POLYGON),
)


def _validation_reason(exc: ValidationError) -> DiagnosticReason:
    for error_type, reason in _VALIDATION_REASONS:
        if isinstance(exc, error_type):
            return reason
    return DiagnosticReason.INVALID_POLYGON


@dataclass
class GroupStats:
    """Per-group counters.

    Attributes:
        member_count: Members supplied for the group
        excluded_count: Members rejected by validation
        input_area: Summed area of the valid members
        union_area: Area of the union (None when the group failed)
        components: Polygons in the union
        holes: Holes in the union
        vertices: Distinct ring vertices in the union
    """
    member_count: int = 0
    excluded_count: int = 0
    input_area: float = 0.0
    union_area: Optional[float] = None
    components: int = 0
    holes: int = 0
    vertices: int = 0

    @property
    def valid_count(self) -> int:
        return self.member_count - self.excluded_count

    @property
    def area_ratio(self) -> Optional[float]:
        """Union area over summed member area (1.0 for members that only share edges)."""
        if self.union_area is None or self.input_area <= 0:
            return None
        return self.union_area / self.input_area

    def to_dict(self) -> Dict[str, Any]:
        return {
            'memberCount': self.member_count,
            'excludedCount': self.excluded_count,
            'inputArea': self.input_area,
            'unionArea': self.union_area,
            'components': self.components,
            'holes': self.holes,
            'vertices': self.vertices,
        }


@dataclass
class GroupOutcome:
    """Everything :func:`union_group` produced for one key."""
    key: str
    result: Optional[UnionResult] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    stats: GroupStats = field(default_factory=GroupStats)
    error: Optional[PolyunionError] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


@dataclass
class UnionReport:
    """Result set of :func:`union_by_group`.

    Attributes:
        results: Group key to UnionResult, in first-seen key order. Failed
            groups have no entry.
        diagnostics: Every diagnostic of every group, grouped by key in the
            same order
        failures: Group key to the exception that prevented a result
        stats: Group key to :class:`GroupStats`, for every group
    """
    results: Dict[str, UnionResult] = field(default_factory=dict)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    failures: Dict[str, PolyunionError] = field(default_factory=dict)
    stats: Dict[str, GroupStats] = field(default_factory=dict)

    @property
    def keys(self) -> List[str]:
        """Every group key seen in the input, in first-seen order."""
        return list(self.stats)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_geojson(self) -> Dict[str, Dict[str, Any]]:
        """Map each successful group key to a GeoJSON geometry mapping."""
        return {key: result.to_geojson() for key, result in self.results.items()}

    def diagnostics_as_dicts(self) -> List[Dict[str, object]]:
        return [d.to_dict() for d in self.diagnostics]


def group_records(records: Iterable[Any]) -> Dict[str, List[MemberRecord]]:
    """Group records by key, preserving first-seen key order and member order.

    Args:
        records: Raw records or :class:`MemberRecord` objects (see
            :mod:`polyunion.records`)

    Returns:
        Dict of group key to its members

    Examples:
        >>> groups = group_records([("B", square), ("A", square), ("B", square)])
        >>> list(groups), len(groups["B"])
        (['B', 'A'], 2)
    """
    groups: Dict[str, List[MemberRecord]] = {}
    for member in parse_records(records):
        groups.setdefault(member.group_key, []).append(member)
    return groups


def build_members(
    key: str,
    members: Sequence[MemberRecord],
    config: Optional[UnionConfig] = None,
) -> Tuple[List[Tuple[int, Polygon]], List[Diagnostic]]:
    """Construct and validate the member polygons of a group.

    Args:
        key: Group key, attached to the diagnostics
        members: The group's members in input order
        config: ``check_simple`` decides whether ring simplicity is checked

    Returns:
        Tuple of (valid ``(member_index, polygon)`` pairs, diagnostics for
        the excluded members)
    """
    config = config or DEFAULT_CONFIG
    valid: List[Tuple[int, Polygon]] = []
    diagnostics: List[Diagnostic] = []

    for index, member in enumerate(members):
        try:
            polygon = member.to_polygon()
            if config.check_simple:
                check_simple(polygon)
        except ValidationError as exc:
            reason = _validation_reason(exc)
            logger.warning(
                "Excluding member %d (%s) of group %r: %s",
                index, member.label, key, exc
            )
            diagnostics.append(Diagnostic(
                key, reason, index, f"Member {member.label}: {exc}"
            ))
            continue
        valid.append((index, polygon))

    return valid, diagnostics


def _failure_reason(exc: PolyunionError) -> DiagnosticReason:
    if isinstance(exc, Cancelled):
        return DiagnosticReason.CANCELLED
    if isinstance(exc, EmptyGroupAfterFiltering):
        return DiagnosticReason.EMPTY_GROUP
    if isinstance(exc, DegenerateUnion):
        return DiagnosticReason.DEGENERATE_UNION
    if isinstance(exc, SelfIntersectingInput):
        return DiagnosticReason.SELF_INTERSECTING_INPUT
    return DiagnosticReason.UNION_FAILED


def union_group(
    key: str,
    members: Sequence[MemberRecord],
    config: Optional[UnionConfig] = None,
    cancel_token: Optional[CancellationToken] = None,
    executor: Optional[Executor] = None,
) -> GroupOutcome:
    """Union the members of one group.

    Args:
        key: Group key
        members: Members in input order
        config: Engine and reduction settings
        cancel_token: Checked between sweep events and reduction steps
        executor: Optional executor for sibling unions of the balanced tree

    Returns:
        GroupOutcome with either a result or an error, never raising for
        library errors
    """
    config = config or DEFAULT_CONFIG
    outcome = GroupOutcome(key=key)
    outcome.stats.member_count = len(members)

    try:
        check_cancelled(cancel_token)
        valid, diagnostics = build_members(key, members, config)
        outcome.diagnostics.extend(diagnostics)
        outcome.stats.excluded_count = len(members) - len(valid)

        if not valid:
            raise EmptyGroupAfterFiltering(key, excluded=outcome.stats.excluded_count)

        outcome.stats.input_area = sum(polygon.area for _, polygon in valid)
        logger.debug(
            "Group %r: reducing %d member(s) with %s",
            key, len(valid), config.reduction.value
        )

        operands = [(polygon, (index,)) for index, polygon in valid]
        final, step_diagnostics = reduce_operands(
            operands,
            engine_union_fn(config, cancel_token),
            strategy=config.reduction,
            executor=executor,
            cancel_token=cancel_token,
        )
        result = finalize(final, step_diagnostics, config)
    except PolyunionError as exc:
        reason = _failure_reason(exc)
        logger.warning("Group %r failed: %s", key, exc)
        outcome.error = exc
        outcome.diagnostics.append(Diagnostic(key, reason, None, str(exc)))
        return outcome

    keyed = [d.with_group(key) for d in result.diagnostics]
    outcome.diagnostics.extend(keyed)
    outcome.result = UnionResult(result.kind, result.geometry, keyed)

    # Output validity is checked by union() when validate_result is set
    metrics = measure_geometry(
        result.geometry, original_area=outcome.stats.input_area, check_valid=False
    )
    outcome.stats.union_area = metrics['area']
    outcome.stats.components = metrics['components']
    outcome.stats.holes = metrics['holes']
    outcome.stats.vertices = metrics['vertices']

    logger.info(
        "Group %r: %d member(s), %d excluded, %s with %d component(s), area %.6g",
        key, outcome.stats.member_count, outcome.stats.excluded_count,
        result.kind.value, outcome.stats.components, outcome.stats.union_area
    )
    return outcome


def union_by_group(
    records: Iterable[Any],
    config: Optional[UnionConfig] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> UnionReport:
    """Group records by key and union each group.

    Args:
        records: Raw records or :class:`MemberRecord` objects
        config: Engine, reduction and concurrency settings
            (``config.max_workers`` > 1 processes groups in parallel)
        cancel_token: Cancels every group that has not finished yet

    Returns:
        UnionReport with results, diagnostics, failures and stats, all in
        first-seen key order

    Raises:
        ValueError: If a record has no group key or an unknown layout

    Examples:
        >>> records = [
        ...     {"groupKey": "P", "polygon": {"outerRing": [[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]}},
        ...     {"groupKey": "P", "polygon": {"outerRing": [[1, 0], [2, 0], [2, 1], [1, 1], [1, 0]]}},
        ... ]
        >>> union_by_group(records).to_geojson()["P"]["coordinates"]
        [[[0.0, 0.0], [2.0, 0.0], [2.0, 1.0], [0.0, 1.0], [0.0, 0.0]]]
    """
    config = config or DEFAULT_CONFIG
    groups = group_records(records)
    logger.info(
        "Unioning %d group(s) with %d worker(s)", len(groups), config.max_workers
    )

    outcomes: List[GroupOutcome]
    if config.max_workers > 1 and len(groups) > 1:
        # Group-level parallelism; tree levels stay sequential inside a group
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            futures = [
                pool.submit(union_group, key, members, config, cancel_token)
                for key, members in groups.items()
            ]
            outcomes = [f.result() for f in futures]
    elif config.max_workers > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            outcomes = [
                union_group(key, members, config, cancel_token, executor=pool)
                for key, members in groups.items()
            ]
    else:
        outcomes = [
            union_group(key, members, config, cancel_token)
            for key, members in groups.items()
        ]

    report = UnionReport()
    for outcome in outcomes:
        report.stats[outcome.key] = outcome.stats
        if outcome.result is not None:
            report.results[outcome.key] = outcome.result
        else:
            report.failures[outcome.key] = outcome.error
    report.diagnostics = merge_diagnostics([o.diagnostics for o in outcomes])

    logger.info(
        "Finished %d group(s): %d succeeded, %d failed, %d diagnostic(s)",
        len(outcomes), len(report.results), len(report.failures),
        len(report.diagnostics)
    )
    return report


__all__ = [
    'GroupStats',
    'GroupOutcome',
    'UnionReport',
    'group_records',
    'build_members',
    'union_group',
    'union_by_group',
]
