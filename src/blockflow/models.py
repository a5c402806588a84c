"""
Data models for diagram layout.

This module contains the value types that flow through the layout pipeline.
Every type is a frozen dataclass built from tuples, so a finished layout can be
compared, hashed and cached without defensive copies.

Classes:
    Point: A 2D point in diagram coordinates.
    Rect: An axis-aligned rectangle (x, y, width, height).
    Box: The size of a node box before it is positioned.
    PlacedNode: A node with its final rectangle and pass-through text.
    Stroke: Line colour and width.
    EdgeGeometry: Bezier curve and arrowhead for one edge.
    Diagram: The complete layout of one graph.
    LayoutStyle: All styling constants used by sizing, placement and routing.
"""

from dataclasses import dataclass, field, replace
from typing import Hashable, Optional, Tuple

Color = Tuple[int, int, int]

# Palette of the original block viewer.
BOX_FILL: Color = (204, 201, 231)
BOX_OUTLINE: Color = (46, 49, 56)
EDGE_COLOR: Color = (96, 70, 59)
TEXT_COLOR: Color = (20, 20, 24)
BACKGROUND: Color = (255, 255, 255)


@dataclass(frozen=True)
class Point:
    """A point in diagram coordinates (y grows downwards)."""

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def scale(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)

    def rot90(self) -> "Point":
        """Rotate by 90 degrees, turning +x into +y."""
        return Point(-self.y, self.x)

    def rot270(self) -> "Point":
        """Rotate by 270 degrees, turning +x into -y."""
        return Point(self.y, -self.x)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Horizontal extent (may be zero).
        height: Vertical extent (may be zero).
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def center_top(self) -> Point:
        return Point(self.x + self.width / 2, self.y)

    def center_bottom(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height)

    def translate(self, dx: float, dy: float) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def union(self, other: "Rect") -> "Rect":
        """Smallest rectangle containing both rectangles."""
        left = min(self.x, other.x)
        top = min(self.y, other.y)
        return Rect(
            left,
            top,
            max(self.right, other.right) - left,
            max(self.bottom, other.bottom) - top,
        )


@dataclass(frozen=True)
class Box:
    """Rendered size of a node box, independent of its position."""

    width: float
    height: float


@dataclass(frozen=True)
class PlacedNode:
    """A node after placement: its rectangle plus title and lines to draw."""

    node_id: Hashable
    rect: Rect
    title: str = ""
    lines: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Stroke:
    """Line style used for edges and box outlines."""

    color: Color = EDGE_COLOR
    width: float = 2.0


@dataclass(frozen=True)
class EdgeGeometry:
    """
    Drawable geometry of one edge.

    Attributes:
        index: Position of the edge in the emitted edge list.
        source: Source node id.
        target: Target node id.
        curve: Cubic bezier as (start, control1, control2, end).
        arrowhead: Triangle as (corner, tip, corner).
        stroke: Stroke used for the curve and the arrowhead outline.
        label: Optional edge label.
        label_position: Point where the label is drawn (curve midpoint).
        anchor_radius: Radius of the circle marking the source anchor.
    """

    index: int
    source: Hashable
    target: Hashable
    curve: Tuple[Point, Point, Point, Point]
    arrowhead: Tuple[Point, Point, Point]
    stroke: Stroke = field(default_factory=Stroke)
    label: Optional[str] = None
    label_position: Optional[Point] = None
    anchor_radius: float = 2.0

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def translate(self, dx: float, dy: float) -> "EdgeGeometry":
        offset = Point(dx, dy)
        return replace(
            self,
            curve=tuple(p + offset for p in self.curve),
            arrowhead=tuple(p + offset for p in self.arrowhead),
            label_position=(
                self.label_position + offset
                if self.label_position is not None
                else None
            ),
        )


@dataclass(frozen=True)
class Diagram:
    """
    Complete layout of one graph.

    Nodes are kept in row order and edges in edge-list order, which is also the
    order in which they should be painted (boxes first, then edges).

    Attributes:
        label: Heading of the diagram (e.g. the function name).
        rows: Node ids per row, top to bottom.
        nodes: Placed nodes in row order.
        edges: Edge geometries in edge-list order.
        origin: Top-left corner of the diagram, including its heading band.
    """

    label: str = ""
    rows: Tuple[Tuple[Hashable, ...], ...] = ()
    nodes: Tuple[PlacedNode, ...] = ()
    edges: Tuple[EdgeGeometry, ...] = ()
    origin: Point = Point(0, 0)

    def node(self, node_id: Hashable) -> PlacedNode:
        """Return the placed node with the given id."""
        for placed in self.nodes:
            if placed.node_id == node_id:
                return placed
        raise KeyError(node_id)

    def rects(self) -> dict:
        """Mapping of node id to rectangle."""
        return {placed.node_id: placed.rect for placed in self.nodes}

    def bounds(self) -> Rect:
        """
        Bounding rectangle of the diagram.

        Covers the origin, every box and every curve/arrowhead point, so the
        control points of wide curves are included as well.
        """
        result = Rect(self.origin.x, self.origin.y, 0, 0)
        for placed in self.nodes:
            result = result.union(placed.rect)
        for edge in self.edges:
            for point in edge.curve + edge.arrowhead:
                result = result.union(Rect(point.x, point.y, 0, 0))
        return result

    def translate(self, dx: float, dy: float) -> "Diagram":
        """Return a copy of the diagram shifted by (dx, dy)."""
        return replace(
            self,
            nodes=tuple(
                replace(placed, rect=placed.rect.translate(dx, dy))
                for placed in self.nodes
            ),
            edges=tuple(edge.translate(dx, dy) for edge in self.edges),
            origin=self.origin + Point(dx, dy),
        )


@dataclass(frozen=True)
class LayoutStyle:
    """
    Styling constants for sizing, placement and routing.

    Defaults reproduce the original block viewer: 15/5 box margins, a 5 unit
    gap between boxes in a row, 20 units between rows, curves inset by 10 at
    the destination and a control offset of at least 30.

    Attributes:
        char_width: Advance of one monospace character.
        line_height: Height of one statement line.
        title_height: Height of the block title line.
        title_char_width: Advance of one title character.
        padding_x: Horizontal padding inside a box.
        padding_y: Vertical padding inside a box.
        section_spacing: Space between the title and the statements.
        min_box_width: Smallest box width.
        min_box_height: Smallest box height.
        horizontal_gap: Space between boxes within a row.
        vertical_gap: Space between rows.
        destination_inset: Offset of the curve end from the target top-centre.
        tip_inset: Offset of the arrow tip from the target top-centre.
        min_control_offset: Lower bound of the horizontal control offset.
        arrow_base_scale: Half-width of the arrow base relative to its length.
        anchor_radius: Radius of the source anchor marker.
        corner_radius: Rounding of box corners.
        heading_height: Height reserved above a diagram for its label.
        function_gap: Space between diagrams laid out side by side.
        box_fill: Box background colour.
        box_outline: Box border colour.
        box_outline_width: Box border width.
        text_color: Colour of titles, statements and labels.
        edge_stroke: Stroke for edge curves and arrowheads.
        background: Canvas background colour for raster backends.
    """

    char_width: float = 7.0
    line_height: float = 14.0
    title_height: float = 16.0
    title_char_width: float = 8.0
    padding_x: float = 15.0
    padding_y: float = 5.0
    section_spacing: float = 5.0
    min_box_width: float = 40.0
    min_box_height: float = 24.0
    horizontal_gap: float = 5.0
    vertical_gap: float = 20.0
    destination_inset: float = 10.0
    tip_inset: float = 2.0
    min_control_offset: float = 30.0
    arrow_base_scale: float = 0.5
    anchor_radius: float = 2.0
    corner_radius: float = 5.0
    heading_height: float = 28.0
    function_gap: float = 40.0
    box_fill: Color = BOX_FILL
    box_outline: Color = BOX_OUTLINE
    box_outline_width: float = 1.0
    text_color: Color = TEXT_COLOR
    edge_stroke: Stroke = field(default_factory=Stroke)
    background: Color = BACKGROUND

    def replace(self, **changes) -> "LayoutStyle":
        """Return a copy of this style with the given fields changed."""
        return replace(self, **changes)


DEFAULT_STYLE = LayoutStyle()
