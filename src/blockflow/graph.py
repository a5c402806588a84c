"""
Graph module for control-flow diagrams.

Provides the immutable graph model consumed by the layout pipeline, the
helpers that turn block statements into display lines, and a small container
for several named graphs (one per function).
"""

from dataclasses import dataclass, field
from typing import (
    Callable,
    Dict,
    Hashable,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
)

import networkx as nx

NodeId = Hashable

# Pseudo-statements that only track storage lifetimes.
BOOKKEEPING_STATEMENTS = ("StorageLive", "StorageDead")


class InvalidGraph(Exception):
    """Raised when a graph references node ids it does not contain."""

    pass


@dataclass(frozen=True)
class Node:
    """A basic block: stable id, display title and text lines."""

    id: NodeId
    title: str = ""
    lines: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any sequence of lines but store a tuple.
        object.__setattr__(self, "lines", tuple(self.lines))


@dataclass(frozen=True)
class Edge:
    """A directed control transfer between two node ids."""

    source: NodeId
    target: NodeId
    label: Optional[str] = None


@dataclass(frozen=True)
class GraphModel:
    """
    Immutable directed graph with a designated entry node.

    Nodes keep their declaration order and edges keep theirs; both orders are
    significant for layering. Parallel edges and self-loops are allowed.

    Raises:
        InvalidGraph: If the entry or an edge endpoint is not a node id, or if
            two nodes share an id.
    """

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    entry: Optional[NodeId] = None
    _index: Dict[NodeId, Node] = field(
        init=False, repr=False, compare=False, hash=False
    )
    _outgoing: Dict[NodeId, Tuple[Edge, ...]] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self):
        nodes = tuple(self.nodes)
        edges = tuple(self.edges)
        object.__setattr__(self, "nodes", nodes)
        object.__setattr__(self, "edges", edges)

        index: Dict[NodeId, Node] = {}
        for node in nodes:
            if node.id in index:
                raise InvalidGraph(f"Duplicate node id: {node.id!r}")
            index[node.id] = node

        if self.entry is None:
            if nodes:
                raise InvalidGraph("Entry node id is required for a non-empty graph")
        elif self.entry not in index:
            raise InvalidGraph(f"Entry node {self.entry!r} is not in the graph")

        outgoing: Dict[NodeId, List[Edge]] = {node_id: [] for node_id in index}
        for edge in edges:
            if edge.source not in index:
                raise InvalidGraph(
                    f"Edge {edge.source!r} -> {edge.target!r}: "
                    f"unknown source {edge.source!r}"
                )
            if edge.target not in index:
                raise InvalidGraph(
                    f"Edge {edge.source!r} -> {edge.target!r}: "
                    f"unknown target {edge.target!r}"
                )
            outgoing[edge.source].append(edge)

        object.__setattr__(self, "_index", index)
        object.__setattr__(
            self,
            "_outgoing",
            {node_id: tuple(out) for node_id, out in outgoing.items()},
        )

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: NodeId) -> bool:
        return node_id in self._index

    def node(self, node_id: NodeId) -> Node:
        """Return the node with the given id."""
        return self._index[node_id]

    def node_ids(self) -> List[NodeId]:
        """Return node ids in declaration order."""
        return [node.id for node in self.nodes]

    def outgoing(self, node_id: NodeId) -> Tuple[Edge, ...]:
        """Get the edges leaving a node, in declaration order."""
        return self._outgoing.get(node_id, ())

    def to_networkx(self) -> nx.MultiDiGraph:
        """Build a networkx view of the graph (parallel edges preserved)."""
        graph = nx.MultiDiGraph()
        for node in self.nodes:
            graph.add_node(node.id, title=node.title, lines=node.lines)
        for edge in self.edges:
            graph.add_edge(edge.source, edge.target, label=edge.label)
        return graph

    def reachable_ids(self) -> Set[NodeId]:
        """Ids of every node reachable from the entry, entry included."""
        if self.entry is None:
            return set()
        graph = self.to_networkx()
        return nx.descendants(graph, self.entry) | {self.entry}

    def has_cycles(self) -> bool:
        """Check if the graph contains a cycle (self-loops count)."""
        if not self.nodes:
            return False
        return not nx.is_directed_acyclic_graph(self.to_networkx())


def default_statement_filter(statement: str) -> bool:
    """Keep every statement except storage-lifetime bookkeeping."""
    head = statement.strip().split("(", 1)[0].strip()
    return head not in BOOKKEEPING_STATEMENTS


def block_lines(
    statements: Iterable[str],
    terminator: Optional[str] = None,
    keep: Callable[[str], bool] = default_statement_filter,
) -> Tuple[str, ...]:
    """
    Build the display lines of a block.

    Args:
        statements: Statements in program order.
        terminator: Optional head of the block terminator, appended last.
        keep: Predicate selecting which statements are shown.

    Returns:
        Tuple of lines to display inside the node box.
    """
    lines = [statement for statement in statements if keep(statement)]
    if terminator is not None:
        lines.append(terminator)
    return tuple(lines)


def block_title(node_id: NodeId) -> str:
    """Default title of a block: ``bb N`` for integer ids, else the id."""
    if isinstance(node_id, int):
        return f"bb {node_id}"
    return str(node_id)


def create_graph(
    connections: Sequence[Tuple],
    entry: Optional[NodeId] = None,
    contents: Optional[Dict[NodeId, Sequence[str]]] = None,
) -> GraphModel:
    """
    Create a GraphModel from a list of connections.

    Nodes are created in order of first appearance. The entry defaults to the
    first node seen.

    Args:
        connections: List of (source, target) or (source, target, label) tuples
        entry: Entry node id
        contents: Optional mapping of node id to its text lines; ids that only
            appear here become isolated nodes

    Returns:
        GraphModel object
    """
    contents = contents or {}
    order: List[NodeId] = []
    seen: Set[NodeId] = set()
    edges: List[Edge] = []

    def visit(node_id: NodeId) -> None:
        if node_id not in seen:
            seen.add(node_id)
            order.append(node_id)

    for connection in connections:
        source, target = connection[0], connection[1]
        label = connection[2] if len(connection) > 2 else None
        visit(source)
        visit(target)
        edges.append(Edge(source, target, label))

    for node_id in contents:
        visit(node_id)
    if entry is not None:
        visit(entry)

    nodes = tuple(
        Node(node_id, block_title(node_id), tuple(contents.get(node_id, ())))
        for node_id in order
    )
    if entry is None and order:
        entry = order[0]
    return GraphModel(nodes=nodes, edges=tuple(edges), entry=entry)


class Program:
    """
    Ordered collection of named graphs, one per function.

    Example:
        >>> program = Program()
        >>> program.add("main", create_graph([(0, 1)]))
        >>> program.names()
        ['main']
    """

    def __init__(self, functions: Optional[Iterable[Tuple[str, GraphModel]]] = None):
        self.functions: Dict[str, GraphModel] = {}
        for name, graph in functions or ():
            self.add(name, graph)

    def add(self, name: str, graph: GraphModel) -> None:
        """Add a function graph; names must be unique."""
        if name in self.functions:
            raise InvalidGraph(f"Duplicate function name: {name!r}")
        self.functions[name] = graph

    def names(self) -> List[str]:
        return list(self.functions)

    def __getitem__(self, name: str) -> GraphModel:
        return self.functions[name]

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def __iter__(self):
        return iter(self.functions.items())

    def __len__(self) -> int:
        return len(self.functions)
