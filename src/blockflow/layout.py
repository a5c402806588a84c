"""
Layering module: assigns the blocks of a control-flow graph to rows.

Rows are breadth-first discovery depths from the entry block. The traversal is
an iterative frontier keyed by node id, so cycles, back edges and self-loops
terminate naturally and every reachable block lands in exactly one row.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Set, Tuple

from .graph import Edge, GraphModel

logger = logging.getLogger(__name__)


@dataclass
class LayeringResult:
    """Result of the layering pass."""

    rows: List[List[Hashable]] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    depth: Dict[Hashable, int] = field(default_factory=dict)
    back_edges: List[Edge] = field(default_factory=list)
    unreachable: List[Hashable] = field(default_factory=list)

    def row_of(self, node_id: Hashable) -> int:
        """Row index of a reachable node."""
        return self.depth[node_id]


class LayeringEngine:
    """
    Breadth-first row assignment.

    Every node of the current frontier is visited in frontier order and its
    outgoing edges in declaration order. Each traversed edge is recorded; a
    target that has not been assigned yet joins the next frontier. The first
    discovery wins, so a node takes the row of its shortest path from the
    entry.
    """

    def layout(self, graph: GraphModel) -> LayeringResult:
        """
        Compute rows and the full edge list for a graph.

        Args:
            graph: The graph to layer

        Returns:
            LayeringResult with rows, traversed edges and back edges
        """
        result = LayeringResult()
        if graph.entry is None:
            return result

        assigned: Set[Hashable] = {graph.entry}
        frontier: List[Hashable] = [graph.entry]

        while frontier:
            row_idx = len(result.rows)
            next_frontier: List[Hashable] = []

            for node_id in frontier:
                result.depth[node_id] = row_idx
                for edge in graph.outgoing(node_id):
                    result.edges.append(edge)
                    if edge.target not in assigned:
                        assigned.add(edge.target)
                        next_frontier.append(edge.target)

            result.rows.append(frontier)
            frontier = next_frontier

        result.back_edges = self._find_back_edges(result.edges, result.depth)
        reachable = graph.reachable_ids()
        result.unreachable = [
            node_id for node_id in graph.node_ids() if node_id not in reachable
        ]

        if result.unreachable:
            logger.debug(
                "dropping %d unreachable block(s): %s",
                len(result.unreachable),
                result.unreachable,
            )
        logger.debug(
            "layered %d block(s) into %d row(s), %d edge(s), %d back edge(s)",
            len(result.depth),
            len(result.rows),
            len(result.edges),
            len(result.back_edges),
        )
        return result

    def _find_back_edges(
        self, edges: List[Edge], depth: Dict[Hashable, int]
    ) -> List[Edge]:
        """Edges whose target is not in a lower row than their source."""
        return [edge for edge in edges if depth[edge.target] <= depth[edge.source]]


def compute_layering(graph: GraphModel) -> LayeringResult:
    """Convenience function to layer a graph."""
    return LayeringEngine().layout(graph)


def rows_as_tuples(result: LayeringResult) -> Tuple[Tuple[Hashable, ...], ...]:
    """Freeze the rows of a layering result."""
    return tuple(tuple(row) for row in result.rows)
