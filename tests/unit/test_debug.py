"""
Tests for the debug module.

These tests verify the debug utilities including RecordingSurface,
TracedSurface and diagram_diff.
"""

from dataclasses import replace

from blockflow.debug import RecordingSurface, TracedSurface, diagram_diff
from blockflow.models import DEFAULT_STYLE, Point, Rect, Stroke
from blockflow.surface import paint_diagram
from blockflow.tracer import LayoutTrace


class TestRecordingSurface:
    """Tests for RecordingSurface."""

    def test_records_in_order(self):
        """Calls are kept in the order they were made."""
        surface = RecordingSurface()
        surface.draw_text(Point(0, 0), "a", (0, 0, 0))
        surface.draw_circle_outline(Point(1, 1), 2, Stroke())
        assert surface.methods() == ["draw_text", "draw_circle_outline"]

    def test_args(self):
        """Arguments are recorded as given."""
        surface = RecordingSurface()
        rect = Rect(0, 0, 10, 10)
        surface.draw_rounded_rect_with_text(rect, "bb 0", ("return",), DEFAULT_STYLE)
        assert surface.calls[0].args == (rect, "bb 0", ("return",))

    def test_count(self):
        """count() counts one method."""
        surface = RecordingSurface()
        points = [Point(0, 0), Point(1, 0), Point(1, 1), Point(2, 2)]
        surface.draw_cubic_curve(points, Stroke())
        surface.draw_cubic_curve(points, Stroke())
        assert surface.count("draw_cubic_curve") == 2
        assert surface.count("draw_text") == 0


class TestTracedSurface:
    """Tests for TracedSurface wrapper."""

    def test_forwards_calls(self):
        """Every call reaches the wrapped surface."""
        inner = RecordingSurface()
        traced = TracedSurface(inner, LayoutTrace())
        traced.draw_text(Point(3, 4), "hi", (0, 0, 0))
        assert inner.methods() == ["draw_text"]
        assert inner.calls[0].args == (Point(3, 4), "hi", (0, 0, 0))

    def test_inferred_sources(self):
        """Sources are inferred from the method."""
        trace = LayoutTrace()
        traced = TracedSurface(RecordingSurface(), trace)
        stroke = Stroke()
        traced.draw_rounded_rect_with_text(Rect(0, 0, 1, 1), "bb 1", (), DEFAULT_STYLE)
        traced.draw_cubic_curve([Point(0, 0)] * 4, stroke)
        traced.draw_circle_outline(Point(0, 0), 2, stroke)
        traced.draw_filled_polygon([Point(0, 0)] * 3, stroke.color, stroke)
        traced.draw_text(Point(0, 0), "x", stroke.color)
        assert [call.source for call in trace.draw_calls] == [
            "box bb 1",
            "edge",
            "anchor",
            "arrowhead",
            "text",
        ]

    def test_set_source(self):
        """An explicit source overrides the inferred one."""
        trace = LayoutTrace()
        traced = TracedSurface(RecordingSurface(), trace)
        traced.set_source("heading")
        traced.draw_text(Point(0, 0), "main", (0, 0, 0))
        traced.set_source("")
        traced.draw_text(Point(0, 0), "0", (0, 0, 0))
        assert [call.source for call in trace.draw_calls] == ["heading", "text"]

    def test_paint_through_traced_surface(self, generator, diamond_graph):
        """Painting a diagram records one call per primitive."""
        diagram = generator.layout(diamond_graph)
        trace = LayoutTrace()
        inner = RecordingSurface()
        paint_diagram(diagram, TracedSurface(inner, trace))
        assert len(trace.draw_calls) == len(inner.calls)
        assert len(trace.get_draw_calls("draw_rounded_rect_with_text")) == 4
        assert len(trace.get_draw_calls("draw_filled_polygon")) == 4


class TestDiagramDiff:
    """Tests for diagram_diff."""

    def test_identical(self, generator, chain_graph):
        """Equal diagrams are reported as identical."""
        diagram = generator.layout(chain_graph)
        assert diagram_diff(diagram, diagram) == "Diagrams are identical."

    def test_moved_node(self, generator, chain_graph):
        """A moved box is reported with both rectangles."""
        diagram = generator.layout(chain_graph)
        moved = replace(
            diagram,
            nodes=(replace(diagram.nodes[0], rect=Rect(1, 1, 1, 1)),)
            + diagram.nodes[1:],
        )
        result = diagram_diff(diagram, moved)
        assert "node 0" in result
        assert "Rect(x=1, y=1, width=1, height=1)" in result

    def test_different_rows_and_edges(self, generator, chain_graph, diamond_graph):
        """Different graphs differ in rows and edge geometry."""
        result = diagram_diff(
            generator.layout(chain_graph), generator.layout(diamond_graph)
        )
        assert result.startswith("rows:")
        assert "node 2" in result
        assert "edge count: expected 3, got 4" in result

    def test_edge_count(self, generator, chain_graph):
        """A dropped edge changes the edge count."""
        diagram = generator.layout(chain_graph)
        fewer = replace(diagram, edges=diagram.edges[:-1])
        assert "edge count: expected 3, got 2" in diagram_diff(diagram, fewer)
