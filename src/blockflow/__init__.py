"""
blockflow - Control-flow graph diagrams

A Python library that lays out control-flow graphs as top-down rows of boxes
joined by bezier curves, and paints them onto any drawing surface.

Example:
    >>> from blockflow import DiagramGenerator, create_graph
    >>> graph = create_graph([(0, 1), (0, 2), (1, 3), (2, 3)])
    >>> diagram = DiagramGenerator().layout(graph)
    >>> diagram.rows
    ((0,), (1, 2), (3,))

Debug Mode Example:
    >>> generator = DiagramGenerator()
    >>> diagram = generator.layout(graph, debug=True)
    >>> print(generator.get_trace().summary())
"""

from .debug import RecordingSurface, TracedSurface, diagram_diff
from .generator import DiagramGenerator
from .graph import (
    Edge,
    GraphModel,
    InvalidGraph,
    Node,
    Program,
    block_lines,
    create_graph,
    default_statement_filter,
)
from .layout import LayeringEngine, LayeringResult, compute_layering
from .models import (
    Box,
    Diagram,
    EdgeGeometry,
    LayoutStyle,
    PlacedNode,
    Point,
    Rect,
    Stroke,
)
from .parser import ParseError, Parser, parse_graph, parse_program
from .png_renderer import PNGRenderer, PNGSurface, render_to_png
from .positioning import RowLayout
from .router import EdgeRouter, RoutingError
from .sizing import BoxSizer, MonospaceMetrics, PillowFontMetrics
from .surface import DrawingSurface, paint_diagram
from .svg_renderer import SvgRenderer, SvgSurface, render_svg
from .tracer import DrawCall, LayoutTrace, PipelineStage

__version__ = "0.1.0"

__all__ = [
    # Main API
    "DiagramGenerator",
    # Graph model
    "GraphModel",
    "Node",
    "Edge",
    "Program",
    "InvalidGraph",
    "create_graph",
    "block_lines",
    "default_statement_filter",
    # Parser
    "Parser",
    "ParseError",
    "parse_graph",
    "parse_program",
    # Layout pipeline
    "LayeringEngine",
    "LayeringResult",
    "compute_layering",
    "BoxSizer",
    "MonospaceMetrics",
    "PillowFontMetrics",
    "RowLayout",
    "EdgeRouter",
    "RoutingError",
    # Geometry
    "Point",
    "Rect",
    "Box",
    "PlacedNode",
    "Stroke",
    "EdgeGeometry",
    "Diagram",
    "LayoutStyle",
    # Drawing
    "DrawingSurface",
    "paint_diagram",
    "PNGRenderer",
    "PNGSurface",
    "render_to_png",
    "SvgRenderer",
    "SvgSurface",
    "render_svg",
    # Debug/Tracing (for development and debugging)
    "LayoutTrace",
    "PipelineStage",
    "DrawCall",
    "RecordingSurface",
    "TracedSurface",
    "diagram_diff",
]
