"""Exception hierarchy for polyunion.

All library errors derive from :class:`PolyunionError` so callers can catch
everything raised by the engine with a single ``except`` clause, while still
being able to tell member-level validation failures apart from failures of a
whole union step or a whole group.
"""

from typing import Optional, Sequence, Tuple


class PolyunionError(Exception):
    """Base class for all polyunion errors."""
    pass


class ValidationError(PolyunionError):
    """Raised when an input primitive fails structural validation.

    Validation errors are local to one member polygon; the grouping driver
    recovers from them by excluding the member and recording a diagnostic.
    """
    pass


class InvalidRing(ValidationError):
    """Raised when a coordinate sequence cannot form a valid ring.

    A ring must be closed, have at least four coordinates after removing
    consecutive duplicates, at least three distinct vertices, finite
    coordinates and a non-zero area.
    """
    pass


class InvalidPolygon(ValidationError):
    """Raised when holes are not contained in the exterior or overlap."""
    pass


class SelfIntersectingInput(ValidationError):
    """Raised when a ring crosses or touches itself.

    Self intersections are reported, never repaired.
    """

    def __init__(self, message: str, location: Optional[Tuple[float, float]] = None):
        super().__init__(message)
        self.location = location


class UnionError(PolyunionError):
    """Base class for failures of a single pairwise union step."""

    def __init__(self, message: str, operand_ids: Optional[Sequence] = None):
        super().__init__(message)
        self.operand_ids = tuple(operand_ids) if operand_ids is not None else ()


class DegenerateUnion(UnionError):
    """Raised when an operand has no retainable area."""
    pass


class UnionComputationError(UnionError):
    """Raised when intersection handling or ring reconstruction fails."""
    pass


class EmptyGroupAfterFiltering(PolyunionError):
    """Raised when every member of a group was excluded by validation."""

    def __init__(self, group_key: str, excluded: int = 0):
        super().__init__(
            f"Group {group_key!r} has no valid members left "
            f"({excluded} excluded)"
        )
        self.group_key = group_key
        self.excluded = excluded


class Cancelled(PolyunionError):
    """Raised when a computation is cooperatively cancelled."""
    pass


class ConfigurationError(PolyunionError, ValueError):
    """Raised when a configuration value is out of range or of the wrong type."""
    pass


__all__ = [
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
