"""Tests for n-ary reduction by pairwise union."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from shapely.ops import unary_union

from polyunion import (
    CancellationToken,
    Cancelled,
    DiagnosticReason,
    Polygon,
    ReductionStrategy,
    ResultKind,
    UnionConfig,
    reduce_operands,
    union,
    union_all,
)
from polyunion.core.errors import UnionComputationError
from polyunion.reduce import union_step


def square(x0, y0, size=1.0):
    return [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size), (x0, y0)]


def row(n):
    """n unit squares side by side along the x axis."""
    return [Polygon.from_coords(square(i, 0)) for i in range(n)]


def ring_of_squares():
    """Eight unit squares around an empty centre cell."""
    return [
        Polygon.from_coords(square(i, j))
        for j in range(3) for i in range(3)
        if (i, j) != (1, 1)
    ]


def engine(left, right):
    return union(left[0], right[0], operand_ids=(left[1], right[1]))


def failing_on(bad_member):
    """Union function that fails whenever the right operand holds ``bad_member``."""
    def union_fn(left, right):
        if bad_member in right[1]:
            raise UnionComputationError("boom", operand_ids=(left[1], right[1]))
        return engine(left, right)
    return union_fn


def operands(polygons):
    return [(p, (i,)) for i, p in enumerate(polygons)]


class TestUnionStep:
    """Tests for a single recoverable union step."""

    def test_success_merges_ids(self):
        """Test that a successful step concatenates member ids."""
        a, b = operands(row(2))

        (geometry, ids), diagnostics = union_step(a, b, engine)

        assert ids == (0, 1)
        assert geometry.area == 2.0
        assert diagnostics == []

    def test_failure_keeps_left(self):
        """Test that a failed step keeps the left operand and reports both."""
        a, b = operands(row(2))

        merged, diagnostics = union_step(a, b, failing_on(1))

        assert merged is a
        assert len(diagnostics) == 1
        assert diagnostics[0].reason == DiagnosticReason.UNION_FAILED
        assert diagnostics[0].member_index == (0, 1)
        assert "boom" in diagnostics[0].message


class TestReduceOperands:
    """Tests for reduce_operands strategies."""

    def test_left_fold_row(self):
        """Test left fold of a row of squares."""
        (geometry, ids), diagnostics = reduce_operands(
            operands(row(4)), engine, strategy=ReductionStrategy.LEFT_FOLD
        )

        assert ids == (0, 1, 2, 3)
        assert geometry.coordinates == [
            [[0.0, 0.0], [4.0, 0.0], [4.0, 1.0], [0.0, 1.0], [0.0, 0.0]]
        ]
        assert diagnostics == []

    def test_tree_row(self):
        """Test balanced tree of an odd number of squares."""
        (geometry, ids), _ = reduce_operands(operands(row(5)), engine, strategy='balanced_tree')

        assert sorted(ids) == [0, 1, 2, 3, 4]
        assert geometry.area == 5.0

    def test_left_fold_failure(self):
        """Test that a failing member is dropped from a left fold."""
        (geometry, ids), diagnostics = reduce_operands(
            operands(row(3)), failing_on(1), strategy=ReductionStrategy.LEFT_FOLD
        )

        assert ids == (0, 2)
        assert geometry.area == 2.0
        assert [d.member_index for d in diagnostics] == [(0, 1)]

    def test_tree_failure(self):
        """Test that a failing subtree keeps its left side."""
        (geometry, ids), diagnostics = reduce_operands(
            operands(row(4)), failing_on(3), strategy=ReductionStrategy.BALANCED_TREE
        )

        assert ids == (0, 1, 2)
        assert geometry.area == 3.0
        assert [d.member_index for d in diagnostics] == [(2, 3)]

    def test_single_operand(self):
        """Test that a single operand is returned unchanged."""
        only = operands(row(1))

        final, diagnostics = reduce_operands(only, engine)

        assert final is only[0]
        assert diagnostics == []

    def test_empty(self):
        """Test that an empty operand list is rejected."""
        with pytest.raises(ValueError):
            reduce_operands([], engine)

    def test_executor(self):
        """Test that tree levels on an executor give the sequential result."""
        with ThreadPoolExecutor(max_workers=4) as pool:
            (parallel, _), _ = reduce_operands(operands(row(6)), engine, executor=pool)
        (sequential, _), _ = reduce_operands(operands(row(6)), engine)

        assert parallel == sequential

    def test_cancelled(self):
        """Test that a cancelled token stops the reduction."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(Cancelled):
            reduce_operands(operands(row(2)), engine, cancel_token=token)


class TestUnionAll:
    """Tests for union_all."""

    @pytest.mark.parametrize("strategy", ["left_fold", "balanced_tree"])
    def test_ring_of_squares_has_hole(self, strategy):
        """Test that eight squares around a gap union to a polygon with one hole."""
        result = union_all(ring_of_squares(), config=UnionConfig(reduction=strategy))

        assert result.kind == ResultKind.POLYGON
        assert result.area == pytest.approx(8.0)
        assert result.geometry.coordinates == [
            [[0.0, 0.0], [3.0, 0.0], [3.0, 3.0], [0.0, 3.0], [0.0, 0.0]],
            [[1.0, 1.0], [1.0, 2.0], [2.0, 2.0], [2.0, 1.0], [1.0, 1.0]],
        ]

    def test_strategies_agree(self):
        """Test that left fold and balanced tree give the same geometry."""
        shapes = ring_of_squares() + [Polygon.from_coords(square(0.5, 0.5, size=2))]

        fold = union_all(shapes, config=UnionConfig(reduction='left_fold'))
        tree = union_all(shapes, config=UnionConfig(reduction='balanced_tree'))

        assert fold.area == pytest.approx(tree.area)
        assert fold.area == pytest.approx(9.0)

    @pytest.mark.parametrize("strategy", ["left_fold", "balanced_tree"])
    def test_cells_around_enclosed_gap(self, strategy):
        """Test cells around a gap, some of them touching only at corners."""
        cells = [(0, 2), (0, 3), (1, 3), (2, 2), (1, 1)]
        shapes = [Polygon.from_coords(square(x, y)) for x, y in cells]

        result = union_all(shapes, config=UnionConfig(reduction=strategy))

        assert result.diagnostics == []
        assert result.area == pytest.approx(5.0)
        assert result.kind == ResultKind.MULTIPOLYGON
        assert sorted(p.area for p in result.polygons) == [1.0, 1.0, 3.0]
        assert result.geometry.to_shapely().is_valid
        expected = unary_union([s.to_shapely() for s in shapes])
        assert result.geometry.to_shapely().symmetric_difference(expected).area == pytest.approx(0.0)

    def test_three_disjoint_squares(self):
        """Test that disjoint members give a MultiPolygon."""
        shapes = [Polygon.from_coords(square(3 * i, 0)) for i in range(3)]

        result = union_all(shapes)

        assert result.kind == ResultKind.MULTIPOLYGON
        assert len(result.polygons) == 3
        assert result.area == 3.0

    def test_single_geometry_normalised(self):
        """Test that a lone member comes back in canonical form."""
        lone = Polygon.from_coords([(1, 1), (0, 1), (0, 0), (1, 0), (1, 1)])

        result = union_all([lone])

        assert result.kind == ResultKind.POLYGON
        assert result.geometry.exterior.coords[0] == (0.0, 0.0)

    def test_idempotent(self):
        """Test that unioning a result with its own members changes nothing."""
        shapes = ring_of_squares()
        once = union_all(shapes)
        twice = union_all([once.geometry] + shapes)

        assert twice.geometry == once.geometry
