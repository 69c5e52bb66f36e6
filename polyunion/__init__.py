"""Polyunion - Polygon union library.

This library merges adjacent or overlapping polygons into their topological
union with a sweep-line engine, and unions whole groups of polygons (for
example departments per province) with per-member diagnostics.
"""


# Pairwise and n-ary union
from .union import union, normalize
from .reduce import reduce_operands, union_all

# Grouping driver
from .driver import (
    union_by_group,
    union_group,
    group_records,
    build_members,
    UnionReport,
    GroupOutcome,
    GroupStats,
)

# Records and results
from .records import MemberRecord, parse_records
from .result import UnionResult
from .diagnostics import Diagnostic

# Configuration and cancellation
from .config import UnionConfig
from .cancellation import CancellationToken

# Metrics
from .metrics import measure_geometry

# Core types (enums)
from .core import (
    ReductionStrategy,
    ResultKind,
    DiagnosticReason,
)

# Core primitives
from .core import (
    Ring,
    Polygon,
    MultiPolygon,
    check_simple,
)

# Core exceptions
from .core import (
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

__all__ = [

    # Union
    'union',
    'normalize',
    'reduce_operands',
    'union_all',

    # Grouping driver
    'union_by_group',
    'union_group',
    'group_records',
    'build_members',
    'UnionReport',
    'GroupOutcome',
    'GroupStats',

    # Records and results
    'MemberRecord',
    'parse_records',
    'UnionResult',
    'Diagnostic',

    # Configuration
    'UnionConfig',
    'CancellationToken',

    # Metrics
    'measure_geometry',

    # Core types (enums)
    'ReductionStrategy',
    'ResultKind',
    'DiagnosticReason',

    # Core primitives
    'Ring',
    'Polygon',
    'MultiPolygon',
    'check_simple',

    # Core exceptions
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
]
