"""NetworkX graph conversion utilities.

Converts between NetworkX graphs and :class:`~flowtrace.model.graph.FlowGraph`
and exports step snapshots as annotated NetworkX graphs for drawing or further
analysis.

Example:
    >>> import networkx as nx
    >>> from flowtrace import calc_max_flow
    >>> from flowtrace.lib.nx import from_networkx, to_networkx
    >>>
    >>> G = nx.DiGraph()
    >>> G.add_edge("S", "A", capacity=10)
    >>> G.add_edge("A", "T", capacity=5)
    >>> graph = from_networkx(G, "S", "T")
    >>>
    >>> # Back to NetworkX, annotated with the final step of a run
    >>> result = calc_max_flow(graph)
    >>> G_out = to_networkx(graph, result.final_graph)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Union

import networkx as nx

from flowtrace.model.graph import Edge, FlowGraph
from flowtrace.types.base import Capacity, NodeID

if TYPE_CHECKING:
    from flowtrace.types.dto import Step

NxGraph = Union[nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph]


def from_networkx(
    G: NxGraph,
    source: NodeID,
    sink: NodeID,
    *,
    capacity_attr: str = "capacity",
    default_capacity: Optional[Capacity] = None,
    sort_nodes: bool = False,
) -> FlowGraph:
    """Convert a NetworkX graph to a :class:`FlowGraph`.

    Node names are converted with ``str()``. Node order follows the graph's
    insertion order unless ``sort_nodes`` is set; the order decides how ties
    between equally short augmenting paths are broken. Undirected graphs
    contribute one edge per direction.

    Args:
        G: NetworkX graph (DiGraph, MultiDiGraph, Graph, or MultiGraph).
        source: Source node.
        sink: Sink node.
        capacity_attr: Edge attribute holding the capacity.
        default_capacity: Capacity for edges missing ``capacity_attr``. When
            None, such edges are rejected.
        sort_nodes: Order nodes by name instead of insertion order.

    Returns:
        Validated FlowGraph.

    Raises:
        TypeError: If G is not a NetworkX graph.
        GraphValidationError: If the resulting graph is invalid.
        ValueError: If an edge has no capacity and no default is given.
    """
    if not isinstance(G, (nx.DiGraph, nx.MultiDiGraph, nx.Graph, nx.MultiGraph)):
        raise TypeError(
            f"Expected NetworkX graph (DiGraph, MultiDiGraph, Graph, MultiGraph), "
            f"got {type(G).__name__}"
        )

    names = [str(n) for n in G.nodes()]
    if sort_nodes:
        names.sort()

    edges: List[Edge] = []
    for u, v, data in G.edges(data=True):
        capacity = data.get(capacity_attr, default_capacity)
        if capacity is None:
            raise ValueError(f"Edge {u}->{v} has no '{capacity_attr}' attribute.")
        edges.append(Edge(str(u), str(v), capacity))
        if not G.is_directed():
            edges.append(Edge(str(v), str(u), capacity))

    return FlowGraph(tuple(names), tuple(edges), str(source), str(sink))


def to_networkx(
    graph: FlowGraph,
    step: Optional[Step] = None,
    *,
    capacity_attr: str = "capacity",
) -> nx.MultiDiGraph:
    """Convert a :class:`FlowGraph` to a NetworkX MultiDiGraph.

    Edge keys are the edge indices of ``graph``. When ``step`` is given, its
    node and edge annotations are copied onto the NetworkX graph as attributes
    (``flow``, ``label``, ``is_in_path``, ``saturated``, ``blocked``,
    ``is_backward_edge`` on edges; ``is_source``, ``is_sink``, ``is_in_path`` on
    nodes).

    Args:
        graph: Graph to convert.
        step: Optional snapshot to annotate with.
        capacity_attr: Edge attribute name for capacity.

    Returns:
        nx.MultiDiGraph with graph-level ``source`` and ``sink`` attributes.
    """
    G = nx.MultiDiGraph(source=graph.source, sink=graph.sink)
    for name in graph.nodes:
        G.add_node(name, is_source=name == graph.source, is_sink=name == graph.sink)
    for i, edge in enumerate(graph.edges):
        G.add_edge(edge.source, edge.target, key=i, **{capacity_attr: edge.capacity})

    if step is not None:
        _annotate(G, step)
    return G


def _annotate(G: nx.MultiDiGraph, step: Step) -> None:
    for node in step.nodes:
        G.nodes[node.id].update(
            is_source=node.is_source, is_sink=node.is_sink, is_in_path=node.is_in_path
        )
    for edge in step.edges:
        attrs: dict[str, Any] = G.edges[edge.source, edge.target, edge.index]
        attrs.update(
            flow=edge.flow,
            label=edge.label,
            is_in_path=edge.is_in_path,
            saturated=edge.saturated,
            blocked=edge.blocked,
            is_backward_edge=edge.is_backward_edge,
        )
    G.graph.update(
        step=step.index, phase=step.phase.name, total_flow=step.total_flow
    )
