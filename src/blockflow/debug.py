"""
Debug utilities for blockflow.

This module provides tools for understanding and troubleshooting diagram
painting and layout without a real backend.

Key Components:
- RecordingSurface: Surface that only records the calls made on it
- TracedSurface: Surface wrapper that logs every draw call to a LayoutTrace
- diagram_diff: Compare two diagrams node by node and edge by edge

Usage:
    >>> surface = RecordingSurface()
    >>> paint_diagram(diagram, surface)
    >>> surface.count("draw_cubic_curve")

    # For comparing two layouts:
    >>> from blockflow.debug import diagram_diff
    >>> print(diagram_diff(expected, actual))
"""

from typing import Any, List, Sequence, Tuple

from .models import Color, Diagram, LayoutStyle, Point, Rect, Stroke
from .surface import DrawingSurface
from .tracer import DrawCall, LayoutTrace


class RecordingSurface:
    """
    Drawing surface that records every call instead of drawing.

    Attributes:
        calls: Recorded calls in the order they were made.
    """

    def __init__(self):
        self.calls: List[DrawCall] = []

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append(DrawCall(method, args))

    def draw_rounded_rect_with_text(
        self, rect: Rect, title: str, lines: Tuple[str, ...], style: LayoutStyle
    ) -> None:
        self._record("draw_rounded_rect_with_text", rect, title, lines)

    def draw_cubic_curve(self, points: Sequence[Point], stroke: Stroke) -> None:
        self._record("draw_cubic_curve", tuple(points), stroke)

    def draw_filled_polygon(
        self, points: Sequence[Point], fill: Color, stroke: Stroke
    ) -> None:
        self._record("draw_filled_polygon", tuple(points), fill, stroke)

    def draw_circle_outline(self, center: Point, radius: float, stroke: Stroke) -> None:
        self._record("draw_circle_outline", center, radius, stroke)

    def draw_text(self, position: Point, text: str, color: Color) -> None:
        self._record("draw_text", position, text, color)

    def methods(self) -> List[str]:
        """Names of the recorded calls, in order."""
        return [call.method for call in self.calls]

    def count(self, method: str) -> int:
        """Number of recorded calls of one method."""
        return sum(1 for call in self.calls if call.method == method)


class TracedSurface:
    """
    Surface wrapper that records every draw call in a LayoutTrace.

    Calls are forwarded unchanged to the wrapped surface. The source of each
    call is inferred from its arguments unless set_source() was used.

    Example:
        >>> trace = LayoutTrace()
        >>> traced = TracedSurface(PNGSurface(400, 300), trace)
        >>> paint_diagram(diagram, traced)
        >>> print(trace.summary())
    """

    def __init__(self, surface: DrawingSurface, trace: LayoutTrace):
        """
        Initialize a TracedSurface.

        Args:
            surface: The underlying surface to wrap
            trace: The LayoutTrace to record calls to
        """
        self._surface = surface
        self._trace = trace
        self._current_source = ""

    def set_source(self, source: str) -> None:
        """Set an explicit source label for the following calls."""
        self._current_source = source

    def _source(self, default: str) -> str:
        return self._current_source or default

    def draw_rounded_rect_with_text(
        self, rect: Rect, title: str, lines: Tuple[str, ...], style: LayoutStyle
    ) -> None:
        self._trace.add_draw_call(
            "draw_rounded_rect_with_text",
            (rect, title, lines),
            self._source(f"box {title}"),
        )
        self._surface.draw_rounded_rect_with_text(rect, title, lines, style)

    def draw_cubic_curve(self, points: Sequence[Point], stroke: Stroke) -> None:
        self._trace.add_draw_call(
            "draw_cubic_curve", tuple(points), self._source("edge")
        )
        self._surface.draw_cubic_curve(points, stroke)

    def draw_filled_polygon(
        self, points: Sequence[Point], fill: Color, stroke: Stroke
    ) -> None:
        self._trace.add_draw_call(
            "draw_filled_polygon", tuple(points), self._source("arrowhead")
        )
        self._surface.draw_filled_polygon(points, fill, stroke)

    def draw_circle_outline(self, center: Point, radius: float, stroke: Stroke) -> None:
        self._trace.add_draw_call(
            "draw_circle_outline", (center, radius), self._source("anchor")
        )
        self._surface.draw_circle_outline(center, radius, stroke)

    def draw_text(self, position: Point, text: str, color: Color) -> None:
        self._trace.add_draw_call("draw_text", (position, text), self._source("text"))
        self._surface.draw_text(position, text, color)


def diagram_diff(expected: Diagram, actual: Diagram) -> str:
    """
    Compare two diagrams and describe every difference.

    Args:
        expected: The expected diagram
        actual: The actual diagram

    Returns:
        A string listing differing rows, nodes and edges, or a message saying
        the diagrams are identical.
    """
    lines: List[str] = []

    if expected.rows != actual.rows:
        lines.append(f"rows: expected {expected.rows}, got {actual.rows}")

    expected_rects = expected.rects()
    actual_rects = actual.rects()
    for node_id in list(expected_rects) + [
        n for n in actual_rects if n not in expected_rects
    ]:
        want = expected_rects.get(node_id)
        got = actual_rects.get(node_id)
        if want != got:
            lines.append(f"node {node_id!r}: expected {want}, got {got}")

    if len(expected.edges) != len(actual.edges):
        lines.append(
            f"edge count: expected {len(expected.edges)}, got {len(actual.edges)}"
        )
    for want, got in zip(expected.edges, actual.edges):
        if want != got:
            lines.append(
                f"edge {want.index} ({want.source!r} -> {want.target!r}) differs"
            )

    if not lines:
        return "Diagrams are identical."
    return "\n".join(lines)
