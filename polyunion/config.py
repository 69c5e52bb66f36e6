"""Configuration for the union engine and the grouping driver."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Mapping, Union

from .core.errors import ConfigurationError
from .core.types import ReductionStrategy, coerce_enum


@dataclass
class UnionConfig:
    """Settings shared by :func:`polyunion.union` and :func:`polyunion.union_by_group`.

    Attributes:
        snap_tolerance: Grid spacing used to snap coordinates before the
            sweep. 0.0 (default) means exact coordinates, no snapping.
        reduction: How each group is reduced (enum or string value).
        check_simple: Reject operands with self-intersecting rings.
        validate_result: Check every union result with Shapely ``is_valid``.
        remove_collinear: Drop vertices that lie on a straight line between
            their neighbours in the output rings.
        max_workers: Worker threads used to process groups in parallel
            (1 = sequential).

    Examples:
        >>> config = UnionConfig(snap_tolerance=1e-9, reduction='left_fold')
        >>> config.reduction
        <ReductionStrategy.LEFT_FOLD: 'left_fold'>
    """

    snap_tolerance: float = 0.0
    reduction: Union[ReductionStrategy, str] = ReductionStrategy.BALANCED_TREE
    check_simple: bool = True
    validate_result: bool = True
    remove_collinear: bool = True
    max_workers: int = 1

    def __post_init__(self):
        self.reduction = coerce_enum(self.reduction, ReductionStrategy)

        try:
            self.snap_tolerance = float(self.snap_tolerance)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"snap_tolerance must be a number: {exc}") from exc
        if not math.isfinite(self.snap_tolerance) or self.snap_tolerance < 0:
            raise ConfigurationError(
                f"snap_tolerance must be a finite value >= 0, got {self.snap_tolerance}"
            )

        if not isinstance(self.max_workers, int) or self.max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be a positive integer, got {self.max_workers!r}"
            )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> UnionConfig:
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(values))


DEFAULT_CONFIG = UnionConfig()


__all__ = ['UnionConfig', 'DEFAULT_CONFIG']
