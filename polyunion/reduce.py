"""Reduction of many operands to one geometry by pairwise union.

Two strategies are available (see :class:`~polyunion.core.types.ReductionStrategy`):

- ``LEFT_FOLD`` unions the operands one after another in input order:
  ``((m0 | m1) | m2) | m3``.
- ``BALANCED_TREE`` unions neighbouring pairs level by level:
  ``(m0 | m1) | (m2 | m3)``. Intermediate results stay smaller and the
  unions of one level are independent, so they can run on an executor.

Both strategies recover from a failing pairwise step the same way: the left
operand is kept, the right one is dropped and a ``UNION_FAILED`` diagnostic
names the member indices of both.
"""

import logging
from concurrent.futures import Executor
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .cancellation import CancellationToken, check_cancelled
from .config import DEFAULT_CONFIG, UnionConfig
from .core.errors import SelfIntersectingInput, UnionError
from .core.primitives import Geometry
from .core.types import DiagnosticReason, ReductionStrategy, coerce_enum
from .diagnostics import Diagnostic
from .result import UnionResult
from .union import flatten_ids, normalize, union

logger = logging.getLogger(__name__)

Operand = Tuple[Geometry, Tuple[Any, ...]]
UnionFn = Callable[[Operand, Operand], UnionResult]
StepOutcome = Tuple[Operand, List[Diagnostic]]

RECOVERABLE_ERRORS = (UnionError, SelfIntersectingInput)


def union_step(left: Operand, right: Operand, union_fn: UnionFn) -> StepOutcome:
    """Union two operands, keeping ``left`` if the union fails.

    Args:
        left: ``(geometry, member_ids)`` of the left operand
        right: ``(geometry, member_ids)`` of the right operand
        union_fn: Callable computing the union of two operands

    Returns:
        Tuple of (merged operand, diagnostics of this step)
    """
    try:
        result = union_fn(left, right)
    except RECOVERABLE_ERRORS as exc:
        logger.warning(
            "Union of members %s and %s failed, keeping %s: %s",
            list(left[1]), list(right[1]), list(left[1]), exc
        )
        diagnostic = Diagnostic(
            '',
            DiagnosticReason.UNION_FAILED,
            flatten_ids([left[1], right[1]]),
            f"Union of members {list(left[1])} and {list(right[1])} failed "
            f"({type(exc).__name__}: {exc}); members {list(right[1])} dropped",
        )
        return left, [diagnostic]

    return (result.geometry, left[1] + right[1]), list(result.diagnostics)


def _left_fold(
    operands: Sequence[Operand],
    union_fn: UnionFn,
    cancel_token: Optional[CancellationToken],
) -> StepOutcome:
    diagnostics: List[Diagnostic] = []
    current = operands[0]
    for operand in operands[1:]:
        check_cancelled(cancel_token)
        current, step_diagnostics = union_step(current, operand, union_fn)
        diagnostics.extend(step_diagnostics)
    return current, diagnostics


def _balanced_tree(
    operands: Sequence[Operand],
    union_fn: UnionFn,
    executor: Optional[Executor],
    cancel_token: Optional[CancellationToken],
) -> StepOutcome:
    diagnostics: List[Diagnostic] = []
    level = list(operands)
    depth = 0

    while len(level) > 1:
        check_cancelled(cancel_token)
        pairs = [(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]
        carry = [level[-1]] if len(level) % 2 else []

        if executor is not None and len(pairs) > 1:
            futures = [executor.submit(union_step, a, b, union_fn) for a, b in pairs]
            outcomes = [f.result() for f in futures]
        else:
            outcomes = [union_step(a, b, union_fn) for a, b in pairs]

        level = []
        for merged, step_diagnostics in outcomes:
            level.append(merged)
            diagnostics.extend(step_diagnostics)
        level.extend(carry)

        depth += 1
        logger.debug("Reduction level %d: %d operand(s) left", depth, len(level))

    return level[0], diagnostics


def reduce_operands(
    operands: Sequence[Operand],
    union_fn: UnionFn,
    strategy=ReductionStrategy.BALANCED_TREE,
    executor: Optional[Executor] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> StepOutcome:
    """Reduce operands to one by repeated pairwise union.

    Args:
        operands: Non-empty sequence of ``(geometry, member_ids)``
        union_fn: Callable computing the union of two operands
        strategy: ``ReductionStrategy`` member or its string value
        executor: Optional executor for the unions of one tree level
            (ignored by ``LEFT_FOLD``)
        cancel_token: Checked between reduction steps

    Returns:
        Tuple of (final operand, diagnostics in reduction order)

    Raises:
        ValueError: If ``operands`` is empty
        Cancelled: If ``cancel_token`` is set during the reduction
    """
    if not operands:
        raise ValueError("Cannot reduce an empty operand list")

    strategy = coerce_enum(strategy, ReductionStrategy)
    if strategy == ReductionStrategy.LEFT_FOLD:
        return _left_fold(operands, union_fn, cancel_token)
    return _balanced_tree(operands, union_fn, executor, cancel_token)


def engine_union_fn(
    config: UnionConfig,
    cancel_token: Optional[CancellationToken] = None
) -> UnionFn:
    """Bind :func:`polyunion.union` to ``config`` for use with :func:`reduce_operands`."""
    def union_fn(left: Operand, right: Operand) -> UnionResult:
        return union(
            left[0], right[0],
            config=config,
            cancel_token=cancel_token,
            operand_ids=(left[1], right[1]),
        )
    return union_fn


def finalize(
    operand: Operand,
    diagnostics: List[Diagnostic],
    config: UnionConfig,
) -> UnionResult:
    """Turn the final operand of a reduction into a :class:`UnionResult`.

    An operand that never went through a successful union (a single member,
    or a first member whose every union failed) is normalised so that all
    results share the same canonical ring layout.
    """
    geometry, ids = operand
    if len(ids) == 1:
        normalized = normalize(geometry, config, operand_id=ids)
        diagnostics = diagnostics + normalized.diagnostics
        geometry = normalized.geometry
    result = UnionResult.from_geometry(geometry)
    return UnionResult(result.kind, result.geometry, list(diagnostics))


def union_all(
    geometries: Sequence[Geometry],
    config: Optional[UnionConfig] = None,
    cancel_token: Optional[CancellationToken] = None,
    executor: Optional[Executor] = None,
) -> UnionResult:
    """Union any number of geometries.

    Operands are identified by their position in ``geometries``; failed
    steps show up as ``UNION_FAILED`` diagnostics on the result.

    Args:
        geometries: Non-empty sequence of Polygon / MultiPolygon
        config: Engine and reduction settings
        cancel_token: Checked between sweep events and reduction steps
        executor: Optional executor for balanced-tree levels

    Returns:
        UnionResult of all geometries

    Examples:
        >>> squares = [Polygon.from_coords([(i, 0), (i + 1, 0), (i + 1, 1), (i, 1), (i, 0)])
        ...            for i in range(4)]
        >>> union_all(squares).area
        4.0
    """
    config = config or DEFAULT_CONFIG
    operands = [(geom, (i,)) for i, geom in enumerate(geometries)]
    final, diagnostics = reduce_operands(
        operands,
        engine_union_fn(config, cancel_token),
        strategy=config.reduction,
        executor=executor,
        cancel_token=cancel_token,
    )
    return finalize(final, diagnostics, config)


__all__ = [
    'Operand',
    'union_step',
    'reduce_operands',
    'engine_union_fn',
    'finalize',
    'union_all',
]
