"""Type definitions for polyunion operations.

This module defines enums for strategy parameters and result tags used
throughout the library.
"""

from enum import Enum
from typing import Type, TypeVar, Union

from .errors import ConfigurationError

E = TypeVar('E', bound=Enum)


class ReductionStrategy(Enum):
    """Strategy for reducing the members of a group to one geometry.

    Attributes:
        LEFT_FOLD: Union members one after the other in input order
        BALANCED_TREE: Union neighbouring pairs level by level (default,
            shorter chains of intermediate results, sibling unions can run
            in parallel)

    Examples:
        >>> from polyunion import union_by_group, UnionConfig, ReductionStrategy
        >>> config = UnionConfig(reduction=ReductionStrategy.LEFT_FOLD)
        >>> report = union_by_group(records, config=config)
    """
    LEFT_FOLD = 'left_fold'
    BALANCED_TREE = 'balanced_tree'


class ResultKind(Enum):
    """Tag of a union result geometry.

    Attributes:
        POLYGON: Single connected component
        MULTIPOLYGON: Two or more components
    """
    POLYGON = 'Polygon'
    MULTIPOLYGON = 'MultiPolygon'


class DiagnosticReason(Enum):
    """Reason attached to a diagnostic entry.

    Attributes:
        INVALID_RING: Member ring failed structural validation (excluded)
        INVALID_POLYGON: Member holes not contained or overlapping (excluded)
        SELF_INTERSECTING_INPUT: Member ring is not simple (excluded)
        DEGENERATE_UNION: An operand had no area left
        UNION_FAILED: A pairwise union step failed, right operand dropped
        SNAP_COLLAPSE: A ring collapsed when snapped to the tolerance grid
        ZERO_AREA_COMPONENT: A reconstructed loop had no area and was dropped
        EMPTY_GROUP: No valid member remained in the group
        CANCELLED: The group computation was cancelled
    """
    INVALID_RING = 'invalid_ring'
    INVALID_POLYGON = 'invalid_polygon'
    SELF_INTERSECTING_INPUT = 'self_intersecting_input'
    DEGENERATE_UNION = 'degenerate_union'
    UNION_FAILED = 'union_failed'
    SNAP_COLLAPSE = 'snap_collapse'
    ZERO_AREA_COMPONENT = 'zero_area_component'
    EMPTY_GROUP = 'empty_group'
    CANCELLED = 'cancelled'


def coerce_enum(value: Union[E, str], enum_type: Type[E]) -> E:
    """Convert a string literal to ``enum_type``, passing enum members through.

    Args:
        value: Enum member or its string value (case insensitive)
        enum_type: Target enum class

    Returns:
        Matching enum member

    Raises:
        ConfigurationError: If ``value`` names no member of ``enum_type``

    Examples:
        >>> coerce_enum('left_fold', ReductionStrategy)
        <ReductionStrategy.LEFT_FOLD: 'left_fold'>
    """
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        for member in enum_type:
            if member.value.lower() == lowered or member.name.lower() == lowered:
                return member
    choices = ', '.join(m.value for m in enum_type)
    raise ConfigurationError(
        f"Unknown {enum_type.__name__}: {value!r} (expected one of: {choices})"
    )


__all__ = [
    'ReductionStrategy',
    'ResultKind',
    'DiagnosticReason',
    'coerce_enum',
]
