"""
Drawing surface protocol and diagram painting.

The layout engine never talks to a toolkit. It produces a Diagram; any object
implementing DrawingSurface can then be painted with paint_diagram. Boxes are
painted before edges so curves are never hidden behind boxes.
"""

from typing import Protocol, Sequence, Tuple

from .models import DEFAULT_STYLE, Color, Diagram, LayoutStyle, Point, Rect, Stroke


class DrawingSurface(Protocol):
    """Capabilities a backend must provide to paint a diagram."""

    def draw_rounded_rect_with_text(
        self, rect: Rect, title: str, lines: Tuple[str, ...], style: LayoutStyle
    ) -> None:
        """Draw a filled rounded box with a title and text lines."""
        ...

    def draw_cubic_curve(self, points: Sequence[Point], stroke: Stroke) -> None:
        """Draw an unfilled cubic bezier (start, control1, control2, end)."""
        ...

    def draw_filled_polygon(
        self, points: Sequence[Point], fill: Color, stroke: Stroke
    ) -> None:
        """Draw a filled convex polygon."""
        ...

    def draw_circle_outline(self, center: Point, radius: float, stroke: Stroke) -> None:
        """Draw an unfilled circle."""
        ...

    def draw_text(self, position: Point, text: str, color: Color) -> None:
        """Draw a single line of text with its top-left at position."""
        ...


def paint_diagram(
    diagram: Diagram, surface: DrawingSurface, style: LayoutStyle = DEFAULT_STYLE
) -> None:
    """
    Paint a diagram onto a surface.

    Order: heading, boxes in row order, then per edge its curve, source anchor
    marker, arrowhead and label.
    """
    if diagram.label:
        surface.draw_text(diagram.origin, diagram.label, style.text_color)

    for placed in diagram.nodes:
        surface.draw_rounded_rect_with_text(
            placed.rect, placed.title, placed.lines, style
        )

    for edge in diagram.edges:
        surface.draw_cubic_curve(edge.curve, edge.stroke)
        surface.draw_circle_outline(edge.curve[0], edge.anchor_radius, edge.stroke)
        surface.draw_filled_polygon(edge.arrowhead, edge.stroke.color, edge.stroke)
        if edge.label and edge.label_position is not None:
            surface.draw_text(edge.label_position, edge.label, style.text_color)
