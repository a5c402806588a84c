"""
Main diagram generator module.

Combines layering, sizing, placement and routing to turn control-flow graphs
into drawable diagrams, and hands those diagrams to the drawing backends.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .debug import TracedSurface
from .graph import GraphModel, Program
from .layout import LayeringEngine, rows_as_tuples
from .models import DEFAULT_STYLE, Diagram, LayoutStyle, PlacedNode, Point
from .png_renderer import PNGRenderer
from .positioning import RowLayout
from .router import EdgeRouter
from .sizing import BoxSizer, TextMetrics
from .surface import DrawingSurface, paint_diagram
from .svg_renderer import SvgRenderer
from .tracer import LayoutTrace

logger = logging.getLogger(__name__)


class DiagramGenerator:
    """
    Generate diagrams from control-flow graphs.

    The last layout is memoised: laying out an unchanged graph again returns
    the cached Diagram, and a different graph or label replaces it. The same
    holds for the last program layout and its selection. All outputs are
    immutable, so cached results can be shared freely.

    Example:
        >>> generator = DiagramGenerator()
        >>> graph = create_graph([(0, 1), (1, 2), (2, 0)])
        >>> diagram = generator.layout(graph)
        >>> [edge.target for edge in diagram.edges]
        [1, 2, 0]

    Debug Mode Example:
        >>> diagram = generator.layout(graph, debug=True)
        >>> print(generator.get_trace().summary())
    """

    def __init__(
        self,
        style: LayoutStyle = DEFAULT_STYLE,
        metrics: Optional[TextMetrics] = None,
        cache: bool = True,
    ):
        """
        Initialize the diagram generator.

        Args:
            style: Sizes, gaps, insets and colours used by every stage
            metrics: Text measurement for box sizing (monospace by default)
            cache: Whether to memoise the last layout
        """
        self.style = style
        self.use_cache = cache

        self.layering_engine = LayeringEngine()
        self.box_sizer = BoxSizer(style=style, metrics=metrics)
        self.row_layout = RowLayout(style=style)
        self.edge_router = EdgeRouter(style=style)

        # Single-entry memos: only the most recent input is kept.
        self._cache: Dict[Tuple[GraphModel, str], Diagram] = {}
        self._program_cache: Dict[Tuple, Tuple[Diagram, ...]] = {}
        self._traces: List[LayoutTrace] = []

    def layout(
        self, graph: GraphModel, label: str = "", debug: bool = False
    ) -> Diagram:
        """
        Lay out a graph.

        Args:
            graph: The graph to lay out
            label: Optional heading; when set, a heading band is reserved
                above the first row
            debug: If True, record a LayoutTrace retrievable via get_trace()
                (bypasses the cache)

        Returns:
            Diagram with rows, placed nodes and edge geometries
        """
        if debug:
            self._traces = [LayoutTrace(label=label)]
            return self._layout(graph, label, self._traces[0])

        key = (graph, label)
        if self.use_cache and key in self._cache:
            logger.debug("layout cache hit for %r", label or "(unnamed)")
            return self._cache[key]

        diagram = self._layout(graph, label, None)
        if self.use_cache:
            self._cache = {key: diagram}
        return diagram

    def _layout(
        self, graph: GraphModel, label: str, trace: Optional[LayoutTrace]
    ) -> Diagram:
        """Run the full pipeline once."""
        layering = self.layering_engine.layout(graph)
        rows = rows_as_tuples(layering)
        if trace is not None:
            trace.add_stage(
                "layering",
                {
                    "rows": rows,
                    "edges": [(e.source, e.target) for e in layering.edges],
                    "back_edges": [(e.source, e.target) for e in layering.back_edges],
                    "unreachable": layering.unreachable,
                },
            )

        boxes = self.box_sizer.size_all(graph, layering.depth)
        if trace is not None:
            trace.add_stage("sizing", {"boxes": boxes})

        rects = self.row_layout.place(rows, boxes)
        if trace is not None:
            trace.add_stage("placement", {"rects": rects})

        routes = self.edge_router.route_edges(layering.edges, rects)
        if trace is not None:
            trace.add_stage(
                "routing",
                {"curves": [(r.source, r.target, r.curve) for r in routes]},
            )

        nodes = tuple(
            PlacedNode(
                node_id=node_id,
                rect=rect,
                title=graph.node(node_id).title,
                lines=graph.node(node_id).lines,
            )
            for node_id, rect in rects.items()
        )
        diagram = Diagram(label=label, rows=rows, nodes=nodes, edges=tuple(routes))

        if label:
            # Keep the heading at the origin, push the rows below it.
            diagram = replace(
                diagram.translate(0, self.style.heading_height), origin=Point(0, 0)
            )

        logger.debug(
            "laid out %r: %d row(s), %d box(es), %d edge(s)",
            label or "(unnamed)",
            len(rows),
            len(nodes),
            len(routes),
        )
        return diagram

    def layout_program(
        self,
        program: Program,
        selected: Optional[Iterable[str]] = None,
        debug: bool = False,
    ) -> List[Diagram]:
        """
        Lay out the selected functions of a program side by side.

        Functions are placed left to right in program order, separated by the
        style's function gap. Each diagram carries its function name as label.

        Args:
            program: The functions to choose from
            selected: Names of the functions to lay out (all when None), or
                a single function name
            debug: If True, record one LayoutTrace per function

        Returns:
            List of diagrams in program order

        Raises:
            KeyError: If a selected name is not a function of the program
        """
        if isinstance(selected, str):
            selected = [selected]

        if selected is None:
            chosen = set(program.names())
        else:
            chosen = set(selected)
            unknown = sorted(chosen - set(program.names()))
            if unknown:
                raise KeyError(f"Unknown function(s): {', '.join(unknown)}")

        key = (tuple(program), tuple(sorted(chosen)))
        if not debug and self.use_cache and key in self._program_cache:
            logger.debug("program cache hit for %s", ", ".join(sorted(chosen)))
            return list(self._program_cache[key])

        traces: List[LayoutTrace] = []
        diagrams: List[Diagram] = []
        x = 0.0
        for name, graph in program:
            if name not in chosen:
                continue
            if debug:
                diagram = self.layout(graph, label=name, debug=True)
                traces.extend(self._traces)
            else:
                diagram = self._layout(graph, name, None)

            bounds = diagram.bounds()
            diagram = diagram.translate(x - bounds.x, 0)
            x = diagram.bounds().right + self.style.function_gap
            diagrams.append(diagram)

        if debug:
            self._traces = traces
        elif self.use_cache:
            self._program_cache = {key: tuple(diagrams)}
        return diagrams

    def paint(
        self,
        diagrams: Union[Diagram, Sequence[Diagram]],
        surface: DrawingSurface,
        debug: bool = False,
    ) -> None:
        """
        Paint diagrams onto any drawing surface.

        Args:
            diagrams: A diagram or a sequence of diagrams
            surface: The backend to draw on
            debug: If True, record the draw calls in the current trace
        """
        if isinstance(diagrams, Diagram):
            diagrams = [diagrams]

        if debug:
            if not self._traces:
                self._traces = [LayoutTrace()]
            surface = TracedSurface(surface, self._traces[-1])

        for diagram in diagrams:
            paint_diagram(diagram, surface, self.style)

    def render_png(
        self,
        diagrams: Union[Diagram, Sequence[Diagram]],
        output_path: str = "diagram.png",
        **kwargs,
    ) -> str:
        """
        Save diagrams as a PNG image.

        Args:
            diagrams: A diagram or a sequence of diagrams
            output_path: Output filename
            **kwargs: Additional parameters for PNGRenderer (scale, margin, ...)

        Returns:
            Path to the saved PNG file
        """
        renderer = PNGRenderer(style=self.style, **kwargs)
        return renderer.render(diagrams, output_path)

    def render_svg(self, diagrams: Union[Diagram, Sequence[Diagram]], **kwargs) -> str:
        """Render diagrams as an SVG string."""
        return SvgRenderer(style=self.style, **kwargs).render(diagrams)

    def get_trace(self) -> Optional[LayoutTrace]:
        """
        Get the trace of the last debug layout.

        Returns None if no debug layout has been run.
        """
        return self._traces[-1] if self._traces else None

    def get_traces(self) -> List[LayoutTrace]:
        """All traces of the last debug call (one per laid-out function)."""
        return list(self._traces)

    def clear_cache(self) -> None:
        """Forget memoised layouts."""
        self._cache.clear()
        self._program_cache.clear()
