"""Tests for the sweep-line building blocks."""

import pytest

from polyunion.core.errors import UnionComputationError
from polyunion.sweep import (
    EdgeType,
    SweepEvent,
    build_event_queue,
    compare_events,
    compare_segments,
    connect_edges,
    segment_intersection,
    split_pinched,
)
from polyunion.sweep.status import SweepLine
from polyunion.sweep.rings import assemble, build_loops, nest_loops


def square(x0, y0, size=1.0):
    return [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size), (x0, y0)]


def edge(p, q, is_subject=True):
    """Return the left event of edge pq."""
    e1 = SweepEvent(p, False, None, is_subject)
    e2 = SweepEvent(q, False, e1, is_subject)
    e1.other = e2
    if compare_events(e1, e2) > 0:
        e2.left = True
        return e2
    e1.left = True
    return e1


def result_edges(*rings):
    """Left events of the ring edges, flagged with the interior on the ring's left."""
    events = []
    for ring in rings:
        for p, q in zip(ring, ring[1:]):
            event = edge(p, q)
            event.result_transition = 1 if event.point == p else -1
            events.append(event)
    return events


class TestSegmentIntersection:
    """Tests for segment_intersection."""

    def test_crossing(self):
        """Test two diagonals crossing in the middle."""
        assert segment_intersection((0, 0), (2, 2), (0, 2), (2, 0)) == [(1.0, 1.0)]

    def test_disjoint(self):
        """Test segments that do not meet."""
        assert segment_intersection((0, 0), (1, 0), (0, 1), (1, 1)) is None

    def test_shared_endpoint(self):
        """Test segments touching at an endpoint."""
        assert segment_intersection((0, 0), (1, 0), (1, 0), (1, 1)) == [(1.0, 0.0)]

    def test_t_junction(self):
        """Test an endpoint lying inside the other segment."""
        assert segment_intersection((0, 0), (2, 0), (1, 0), (1, 1)) == [(1.0, 0.0)]

    def test_collinear_overlap(self):
        """Test collinear segments sharing a stretch."""
        assert segment_intersection((0, 0), (2, 0), (1, 0), (3, 0)) == [(1.0, 0.0), (2.0, 0.0)]

    def test_collinear_touching(self):
        """Test collinear segments meeting at a single point."""
        assert segment_intersection((0, 0), (1, 0), (1, 0), (2, 0)) == [(1.0, 0.0)]

    def test_collinear_apart(self):
        """Test collinear segments with a gap."""
        assert segment_intersection((0, 0), (1, 0), (2, 0), (3, 0)) is None

    def test_parallel(self):
        """Test parallel, non collinear segments."""
        assert segment_intersection((0, 0), (1, 1), (0, 1), (1, 2)) is None


class TestCompareEvents:
    """Tests for the sweep order of events."""

    def test_x_then_y(self):
        """Test ordering by x first, then y."""
        a = edge((0, 5), (3, 5))
        b = edge((1, 0), (3, 0))
        c = edge((0, 1), (3, 1))

        assert compare_events(a, b) < 0
        assert compare_events(c, a) < 0

    def test_right_before_left(self):
        """Test that edges ending at a point go before edges starting there."""
        ending = edge((0, 0), (1, 0)).other
        starting = edge((1, 0), (2, 0))

        assert compare_events(ending, starting) < 0
        assert compare_events(starting, ending) > 0

    def test_lower_edge_first(self):
        """Test that the lower of two edges sharing a left endpoint goes first."""
        lower = edge((0, 0), (2, 0))
        upper = edge((0, 0), (2, 1))

        assert compare_events(lower, upper) < 0
        assert compare_events(upper, lower) > 0

    def test_collinear_subject_first(self):
        """Test that collinear edges put the subject before the clipping edge."""
        subject = edge((0, 0), (1, 0), is_subject=True)
        clipping = edge((0, 0), (1, 0), is_subject=False)

        assert compare_events(subject, clipping) < 0
        assert compare_events(clipping, subject) > 0


class TestCompareSegments:
    """Tests for the vertical order of active edges."""

    def test_left_endpoint_on_edge_above(self):
        """Test an edge starting on an active edge and leaving upwards."""
        host = edge((0, 2), (4, 0))
        upper = edge((2, 1), (3, 1))

        assert compare_segments(upper, host) > 0
        assert compare_segments(host, upper) < 0

    def test_left_endpoint_on_edge_below(self):
        """Test an edge starting on an active edge and leaving downwards."""
        host = edge((0, 2), (4, 0))
        lower = edge((2, 1), (3, 0))

        assert compare_segments(lower, host) < 0
        assert compare_segments(host, lower) > 0

    def test_shared_left_endpoint(self):
        """Test edges fanning out from one point."""
        lower = edge((0, 0), (2, 0))
        upper = edge((0, 0), (2, 1))

        assert compare_segments(lower, upper) < 0
        assert compare_segments(upper, lower) > 0


class TestSweepLine:
    """Tests for the status structure."""

    def test_index_by_identity(self):
        """Test that every inserted edge is found at its own position."""
        line = SweepLine()
        edges = [edge((0, y), (5, y + 0.5)) for y in (3, 0, 4, 1, 2)]
        for e in edges:
            line.insert(e)

        positions = [line.index(e) for e in edges]

        assert sorted(positions) == [0, 1, 2, 3, 4]
        assert positions == [3, 0, 4, 1, 2]

    def test_missing_edge(self):
        """Test that an edge not in the status is reported as None."""
        line = SweepLine()
        line.insert(edge((0, 0), (1, 0)))

        assert line.index(edge((0, 1), (1, 1))) is None


class TestConnectEdges:
    """Tests for walking result edges into contours."""

    def test_single_square(self):
        """Test that a square's edges close into one counter-clockwise contour."""
        [contour] = connect_edges(result_edges(square(0, 0)))

        assert contour[0] == contour[-1]
        assert len(contour) == 5
        assert set(contour) == set(square(0, 0))

    def test_corner_touch_separated(self):
        """Test that squares sharing a corner become two contours."""
        contours = connect_edges(result_edges(square(0, 0), square(1, 1)))

        assert len(contours) == 2
        assert sorted(len(c) for c in contours) == [5, 5]
        assert sorted(min(c) for c in contours) == [(0, 0), (1, 1)]

    def test_hole_touching_at_corners(self):
        """Test four cells around a gap, each touching two others at a corner."""
        cells = [square(1, 0), square(0, 1), square(2, 1), square(1, 2)]

        contours = connect_edges(result_edges(*cells))

        assert len(contours) == 4
        assert all(len(c) == 5 for c in contours)

    def test_open_contour(self):
        """Test that a dangling edge is rejected."""
        events = result_edges(square(0, 0))[:3]

        with pytest.raises(UnionComputationError, match="Open contour"):
            connect_edges(events)


class TestEventQueue:
    """Tests for build_event_queue."""

    def test_edge_count(self):
        """Test that each ring edge yields two events."""
        queue, edges = build_event_queue([[square(0, 0)]], [[square(1, 0)]])

        assert edges == 8
        assert len(queue) == 16

    def test_events_pop_in_order(self):
        """Test that popped events are sorted by compare_events."""
        queue, _ = build_event_queue([[square(0, 0)]], [[square(0.5, 0.5)]])
        popped = []
        while queue:
            popped.append(queue.pop())

        for first, second in zip(popped, popped[1:]):
            assert compare_events(first, second) < 0

    def test_default_edge_type(self):
        """Test that fresh events are NORMAL and not in the result."""
        queue, _ = build_event_queue([[square(0, 0)]], [])
        event = queue.pop()

        assert event.edge_type == EdgeType.NORMAL
        assert not event.in_result


class TestSplitPinched:
    """Tests for splitting contours at repeated vertices."""

    def test_simple_contour_unchanged(self):
        """Test that a simple contour yields itself."""
        loops = split_pinched(square(0, 0))

        assert len(loops) == 1
        assert loops[0][0] == loops[0][-1]
        assert len(loops[0]) == 5

    def test_figure_eight(self):
        """Test that two squares touching at a corner are separated."""
        contour = [(0, 0), (1, 0), (1, 1), (2, 1), (2, 2), (1, 2), (1, 1), (0, 1), (0, 0)]

        loops = split_pinched(contour)

        assert len(loops) == 2
        assert all(loop[0] == loop[-1] for loop in loops)
        assert sorted(len(loop) for loop in loops) == [5, 5]


class TestNesting:
    """Tests for exterior/hole assignment."""

    def test_hole_inside_exterior(self):
        """Test that a smaller loop inside a larger one becomes its hole."""
        loops, dropped = build_loops([square(0, 0, size=4), square(1, 1)])
        exteriors = nest_loops(loops)

        assert dropped == 0
        assert len(exteriors) == 1
        assert len(exteriors[0].holes) == 1

    def test_island_in_hole(self):
        """Test that a loop inside a hole is an exterior again."""
        loops, _ = build_loops([square(0, 0, size=10), square(2, 2, size=6), square(4, 4)])
        exteriors = nest_loops(loops)

        assert len(exteriors) == 2
        assert sorted(len(e.holes) for e in exteriors) == [0, 1]

    def test_zero_area_loop_dropped(self):
        """Test that slivers are counted and discarded."""
        loops, dropped = build_loops([square(0, 0), [(5, 5), (6, 5), (7, 5), (5, 5)]])

        assert len(loops) == 1
        assert dropped == 1

    def test_assemble_canonical_layout(self):
        """Test orientation and start vertex of assembled rings."""
        outer = list(reversed([(1, 0), (4, 0), (4, 4), (0, 4), (0, 0), (1, 0)]))
        loops, _ = build_loops([outer, square(1, 1)])

        [(exterior, holes)] = assemble(loops)

        assert exterior[0] == (0, 0)
        assert exterior[1] == (4, 0)
        assert holes[0][0] == (1, 1)
        assert holes[0][1] == (1, 2)

    def test_assemble_orders_polygons(self):
        """Test that polygons are sorted by their first vertex."""
        loops, _ = build_loops([square(5, 0), square(0, 0)])

        shells = assemble(loops)

        assert [shell[0][0] for shell in shells] == [(0, 0), (5, 0)]
