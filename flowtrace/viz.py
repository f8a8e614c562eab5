"""Drawing of step snapshots with NetworkX and matplotlib.

``draw_step`` renders one snapshot: path nodes and edges highlighted,
saturated edges drawn dashed, edges labelled ``flow/capacity``.
``render_frames`` writes one image per step so a run can be played back as an
animation. Nodes are placed in breadth-first layers from the source.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import matplotlib.pyplot as plt
import networkx as nx

from flowtrace.lib.nx import to_networkx
from flowtrace.logging import get_logger
from flowtrace.model.graph import FlowGraph
from flowtrace.types.dto import MaxFlowResult, Step

logger = get_logger(__name__)

Position = Dict[str, Tuple[float, float]]

NODE_COLOR = "#666666"
SOURCE_COLOR = "#2e7d32"
SINK_COLOR = "#c62828"
PATH_COLOR = "#1565c0"
EDGE_COLOR = "#999999"
BACKWARD_COLOR = "#ef6c00"


def layered_layout(graph: FlowGraph) -> Position:
    """Place nodes in columns by breadth-first distance from the source.

    Nodes unreachable from the source share a final column.
    """
    G = nx.DiGraph()
    G.add_nodes_from(graph.nodes)
    G.add_edges_from(edge.pair for edge in graph.edges)
    distance = nx.single_source_shortest_path_length(G, graph.source)
    last = max(distance.values()) + 1
    for name in graph.nodes:
        G.nodes[name]["layer"] = distance.get(name, last)
    return nx.multipartite_layout(G, subset_key="layer")


def draw_step(
    graph: FlowGraph,
    step: Step,
    ax: Optional[plt.Axes] = None,
    pos: Optional[Position] = None,
) -> plt.Axes:
    """Draw a single snapshot on ``ax`` (a new figure when omitted).

    Args:
        graph: Graph the step belongs to.
        step: Snapshot to draw.
        ax: Target axes.
        pos: Node positions; defaults to :func:`layered_layout`.

    Returns:
        The axes drawn on.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8.0, 5.0))
    if pos is None:
        pos = layered_layout(graph)

    G = to_networkx(graph, step)
    # Multigraph drawing support differs across networkx releases, so edges are
    # drawn one at a time on a plain DiGraph holding the same node pairs
    D = nx.DiGraph()
    D.add_nodes_from(G.nodes)
    D.add_edges_from((u, v) for u, v in G.edges())

    node_colors: List[str] = []
    for name in G.nodes:
        attrs = G.nodes[name]
        if attrs["is_source"]:
            node_colors.append(SOURCE_COLOR)
        elif attrs["is_sink"]:
            node_colors.append(SINK_COLOR)
        elif attrs.get("is_in_path"):
            node_colors.append(PATH_COLOR)
        else:
            node_colors.append(NODE_COLOR)
    nx.draw_networkx_nodes(D, pos, ax=ax, node_color=node_colors, node_size=600)
    nx.draw_networkx_labels(D, pos, ax=ax, font_color="white")

    labels: Dict[Tuple[str, str], str] = {}
    for u, v, key, attrs in G.edges(keys=True, data=True):
        if attrs["is_in_path"]:
            color, width = PATH_COLOR, 3.0
        elif attrs["is_backward_edge"]:
            color, width = BACKWARD_COLOR, 3.0
        else:
            color, width = EDGE_COLOR, 1.5
        nx.draw_networkx_edges(
            D,
            pos,
            ax=ax,
            edgelist=[(u, v)],
            edge_color=color,
            width=width,
            style="dashed" if attrs["saturated"] and not attrs["blocked"] else "solid",
            arrows=True,
            arrowstyle="-|>",
            node_size=600,
            connectionstyle=f"arc3,rad={0.1 + 0.1 * _rank(graph, key)}",
        )
        # Parallel edges share one label position
        if (u, v) in labels:
            labels[(u, v)] = f"{labels[(u, v)]}, {attrs['label']}"
        else:
            labels[(u, v)] = attrs["label"]

    nx.draw_networkx_edge_labels(D, pos, edge_labels=labels, ax=ax, font_size=8)

    ax.set_title(step.description)
    ax.set_axis_off()
    return ax


def _rank(graph: FlowGraph, index: int) -> int:
    """Position of edge ``index`` among the edges sharing its node pair."""
    pair = graph.edges[index].pair
    return sum(1 for edge in graph.edges[:index] if edge.pair == pair)


def render_frames(
    graph: FlowGraph,
    result: MaxFlowResult,
    output_dir: Union[str, Path],
    *,
    prefix: str = "step",
    fmt: str = "png",
    dpi: int = 100,
) -> List[Path]:
    """Write one image per step into ``output_dir``.

    Files are named ``<prefix>_<index>.<fmt>`` with zero-padded indices so
    lexical order matches playback order. All frames share one layout.

    Returns:
        Written file paths in step order.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    pos = layered_layout(graph)
    width = len(str(max(len(result.steps) - 1, 0)))

    written: List[Path] = []
    for step in result.steps:
        fig, ax = plt.subplots(figsize=(8.0, 5.0))
        try:
            draw_step(graph, step, ax=ax, pos=pos)
            path = out / f"{prefix}_{step.index:0{width}d}.{fmt}"
            fig.savefig(path, dpi=dpi, bbox_inches="tight")
        finally:
            plt.close(fig)
        written.append(path)
    logger.info("Wrote %d frames to %s", len(written), out)
    return written
