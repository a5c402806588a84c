"""Unit tests for the router module."""

import math

import pytest

from blockflow.graph import Edge
from blockflow.models import LayoutStyle, Point, Rect, Stroke
from blockflow.router import (
    EdgeRouter,
    RoutingError,
    bezier_point,
    end_triangle,
    flatten_bezier,
)


@pytest.fixture
def router():
    """EdgeRouter with default style."""
    return EdgeRouter()


@pytest.fixture
def stacked_rects():
    """Two boxes of equal width, one above the other."""
    return {0: Rect(0, 0, 62, 26), 1: Rect(0, 46, 62, 26)}


class TestBezierHelpers:
    """Tests for bezier evaluation helpers."""

    def test_endpoints(self):
        """t=0 and t=1 hit the curve ends."""
        curve = (Point(0, 0), Point(10, 0), Point(10, 10), Point(20, 10))
        assert bezier_point(curve, 0) == Point(0, 0)
        assert bezier_point(curve, 1) == Point(20, 10)

    def test_midpoint(self):
        """The midpoint weights the points 1:3:3:1."""
        curve = (Point(31, 26), Point(61, 26), Point(-9, 36), Point(21, 36))
        mid = bezier_point(curve, 0.5)
        assert mid.x == pytest.approx(26)
        assert mid.y == pytest.approx(31)

    def test_flatten(self):
        """Flattening yields segments + 1 points from start to end."""
        curve = (Point(0, 0), Point(0, 5), Point(5, 5), Point(5, 10))
        points = flatten_bezier(curve, segments=8)
        assert len(points) == 9
        assert points[0] == Point(0, 0)
        assert points[-1] == Point(5, 10)


class TestEndTriangle:
    """Tests for the arrowhead construction."""

    def test_tip_is_middle_point(self):
        """The polygon is corner, tip, corner."""
        triangle = end_triangle(Point(21, 36), Point(29, 44), 0.5)
        assert triangle[1] == Point(29, 44)

    def test_corners(self):
        """Corners are the base centre +/- the rotated direction."""
        first, _, second = end_triangle(Point(21, 36), Point(29, 44), 0.5)
        assert first == Point(25, 32)
        assert second == Point(17, 40)

    def test_base_is_perpendicular(self):
        """The base is perpendicular to base-centre -> tip."""
        base = Point(3, 4)
        tip = Point(10, -2)
        first, _, second = end_triangle(base, tip, 0.5)
        direction = tip - base
        across = second - first
        assert direction.x * across.x + direction.y * across.y == pytest.approx(0)

    def test_base_width_scales(self):
        """The base half-width is the scale times the arrow length."""
        first, _, second = end_triangle(Point(0, 0), Point(0, 10), 0.5)
        assert math.dist(first.as_tuple(), second.as_tuple()) == pytest.approx(10)


class TestEdgeRouter:
    """Tests for EdgeRouter class."""

    def test_forward_edge_geometry(self, router, stacked_rects):
        """A downward edge matches the reference construction."""
        route = router.route_edge(0, Edge(0, 1), stacked_rects[0], stacked_rects[1])
        assert route.curve == (
            Point(31, 26),
            Point(61, 26),
            Point(-9, 36),
            Point(21, 36),
        )
        assert route.arrowhead == (Point(25, 32), Point(29, 44), Point(17, 40))
        assert route.label_position.x == pytest.approx(26)
        assert route.label_position.y == pytest.approx(31)

    def test_control_offset_minimum_for_vertical_edge(self, router):
        """Vertically aligned anchors still get the minimum offset."""
        assert router.control_offset(Point(50, 0), Point(50, 100)) == 30

    def test_control_offset_never_below_minimum(self, router, stacked_rects):
        """Stacked boxes with equal centres use the minimum offset."""
        route = router.route_edge(0, Edge(0, 1), stacked_rects[0], stacked_rects[1])
        start, control1, control2, end = route.curve
        assert control1.x - start.x == 30
        assert end.x - control2.x == 30

    def test_control_offset_grows_with_distance(self, router):
        """Far apart anchors use half the horizontal distance."""
        assert router.control_offset(Point(0, 0), Point(200, 50)) == 100
        assert router.control_offset(Point(200, 0), Point(0, 50)) == 100

    def test_configured_minimum(self):
        """The minimum offset comes from the style."""
        router = EdgeRouter(LayoutStyle(min_control_offset=12))
        assert router.control_offset(Point(0, 0), Point(0, 9)) == 12

    def test_back_edge_is_routed(self, router, stacked_rects):
        """An upward edge produces finite geometry."""
        route = router.route_edge(0, Edge(1, 0), stacked_rects[1], stacked_rects[0])
        assert route.curve[0] == Point(31, 72)
        assert route.curve[3] == Point(21, -10)
        for point in route.curve + route.arrowhead:
            assert math.isfinite(point.x) and math.isfinite(point.y)

    def test_self_loop_is_routed(self, router, stacked_rects):
        """A self-loop uses the same formula."""
        rect = stacked_rects[0]
        route = router.route_edge(0, Edge(0, 0), rect, rect)
        assert route.is_self_loop
        assert route.curve[0] == Point(31, 26)
        assert route.curve[3] == Point(21, -10)

    def test_degenerate_rects(self, router):
        """Zero-size boxes at the same spot do not break routing."""
        rect = Rect(0, 0, 0, 0)
        route = router.route_edge(0, Edge(0, 1), rect, rect)
        assert route.curve[1].x - route.curve[0].x == 30
        for point in route.curve + route.arrowhead:
            assert math.isfinite(point.x) and math.isfinite(point.y)

    def test_edge_metadata(self, router, stacked_rects):
        """Label, stroke and marker radius are carried through."""
        route = router.route_edge(
            4, Edge(0, 1, "otherwise"), stacked_rects[0], stacked_rects[1]
        )
        assert route.index == 4
        assert route.label == "otherwise"
        assert route.stroke == Stroke()
        assert route.anchor_radius == 2

    def test_route_edges_preserves_order(self, router, stacked_rects):
        """Geometries follow the edge list, parallel edges included."""
        edges = [Edge(0, 1, "a"), Edge(1, 0), Edge(0, 1, "b")]
        routes = router.route_edges(edges, stacked_rects)
        assert [r.index for r in routes] == [0, 1, 2]
        assert [(r.source, r.target, r.label) for r in routes] == [
            (0, 1, "a"),
            (1, 0, None),
            (0, 1, "b"),
        ]

    def test_route_edges_missing_rect(self, router, stacked_rects):
        """An edge to an unplaced node is an error."""
        with pytest.raises(RoutingError, match="no rectangle for 7"):
            router.route_edges([Edge(0, 7)], stacked_rects)
