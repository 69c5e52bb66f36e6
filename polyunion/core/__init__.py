"""Core types and utilities for polyunion.

This module provides the geometry primitives, enums, exceptions and
validation helpers used throughout the library.
"""

from .types import (
    ReductionStrategy,
    ResultKind,
    DiagnosticReason,
    coerce_enum,
)

from .errors import (
    PolyunionError,
    ValidationError,
    InvalidRing,
    InvalidPolygon,
    SelfIntersectingInput,
    UnionError,
    DegenerateUnion,
    UnionComputationError,
    EmptyGroupAfterFiltering,
    Cancelled,
    ConfigurationError,
)

from .primitives import (
    Ring,
    Polygon,
    MultiPolygon,
    Geometry,
    as_polygons,
    geometry_type,
)

from .validation_utils import check_simple

__all__ = [
    # Enums
    'ReductionStrategy',
    'ResultKind',
    'DiagnosticReason',
    'coerce_enum',

    # Exceptions
    'PolyunionError',
    'ValidationError',
    'InvalidRing',
    'InvalidPolygon',
    'SelfIntersectingInput',
    'UnionError',
    'DegenerateUnion',
    'UnionComputationError',
    'EmptyGroupAfterFiltering',
    'Cancelled',
    'ConfigurationError',

    # Primitives
    'Ring',
    'Polygon',
    'MultiPolygon',
    'Geometry',
    'as_polygons',
    'geometry_type',
    'check_simple',
]
