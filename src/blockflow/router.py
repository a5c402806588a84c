"""
Edge routing module for diagram generation.

Every edge is drawn as a cubic bezier from the bottom-centre of its source box
to just above the top-centre of its target box, ending in a filled triangle.
Forward edges, back edges and self-loops all use the same construction.
"""

import logging
from typing import Dict, Hashable, List, Sequence, Tuple

from .graph import Edge
from .models import DEFAULT_STYLE, EdgeGeometry, LayoutStyle, Point, Rect

logger = logging.getLogger(__name__)


class RoutingError(Exception):
    """Raised when an edge endpoint has no placed rectangle."""

    pass


def bezier_point(curve: Sequence[Point], t: float) -> Point:
    """Evaluate a cubic bezier at parameter t in [0, 1]."""
    p0, p1, p2, p3 = curve
    u = 1 - t
    a = u * u * u
    b = 3 * u * u * t
    c = 3 * u * t * t
    d = t * t * t
    return Point(
        a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def flatten_bezier(curve: Sequence[Point], segments: int = 24) -> List[Point]:
    """Approximate a cubic bezier by a polyline of ``segments`` pieces."""
    return [bezier_point(curve, i / segments) for i in range(segments + 1)]


def end_triangle(
    base_center: Point, tip: Point, base_scale: float
) -> Tuple[Point, Point, Point]:
    """
    Arrowhead triangle pointing from ``base_center`` to ``tip``.

    The base corners are the base centre offset by the direction vector
    rotated by +/-90 degrees and scaled by ``base_scale``.
    """
    direction = tip - base_center
    first = base_center + direction.rot270().scale(base_scale)
    second = base_center + direction.rot90().scale(base_scale)
    return (first, tip, second)


class EdgeRouter:
    """
    Computes curve and arrowhead geometry for edges between placed boxes.

    Attributes:
        destination_inset: Offset of the curve end from the target top-centre.
        tip_inset: Offset of the arrow tip from the target top-centre.
        min_control_offset: Smallest horizontal control-point offset.
        arrow_base_scale: Arrow base half-width relative to arrow length.
    """

    def __init__(self, style: LayoutStyle = DEFAULT_STYLE):
        self.style = style
        self.destination_inset = style.destination_inset
        self.tip_inset = style.tip_inset
        self.min_control_offset = style.min_control_offset
        self.arrow_base_scale = style.arrow_base_scale

    def control_offset(self, source: Point, destination: Point) -> float:
        """Horizontal distance of the control points from their anchors."""
        return max(abs(destination.x - source.x) / 2, self.min_control_offset)

    def route_edge(
        self, index: int, edge: Edge, source_rect: Rect, target_rect: Rect
    ) -> EdgeGeometry:
        """Route a single edge between two rectangles."""
        inset = Point(self.destination_inset, self.destination_inset)
        source = source_rect.center_bottom()
        destination = target_rect.center_top() - inset

        offset = self.control_offset(source, destination)
        shift = Point(offset, 0)
        curve = (source, source + shift, destination - shift, destination)

        tip = target_rect.center_top() - Point(self.tip_inset, self.tip_inset)
        arrowhead = end_triangle(destination, tip, self.arrow_base_scale)

        return EdgeGeometry(
            index=index,
            source=edge.source,
            target=edge.target,
            curve=curve,
            arrowhead=arrowhead,
            stroke=self.style.edge_stroke,
            label=edge.label,
            label_position=bezier_point(curve, 0.5),
            anchor_radius=self.style.anchor_radius,
        )

    def route_edges(
        self, edges: Sequence[Edge], rects: Dict[Hashable, Rect]
    ) -> List[EdgeGeometry]:
        """
        Route all edges, preserving their order.

        Args:
            edges: Edges in emission order
            rects: Rectangle of every node an edge touches

        Returns:
            List of EdgeGeometry objects, one per edge

        Raises:
            RoutingError: If an endpoint has no rectangle
        """
        routes: List[EdgeGeometry] = []
        for index, edge in enumerate(edges):
            for node_id in (edge.source, edge.target):
                if node_id not in rects:
                    raise RoutingError(
                        f"Edge {edge.source!r} -> {edge.target!r}: "
                        f"no rectangle for {node_id!r}"
                    )
            routes.append(
                self.route_edge(index, edge, rects[edge.source], rects[edge.target])
            )

        logger.debug("routed %d edge(s)", len(routes))
        return routes
