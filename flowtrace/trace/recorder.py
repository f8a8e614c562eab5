"""Snapshot recording for max-flow runs.

``TraceRecorder`` turns the engine's residual state into immutable
:class:`~flowtrace.types.dto.Step` objects. It only reads the state.

Per-edge flows are derived from the net flow on each ordered node pair. When
several parallel edges share a pair, the pair's positive net flow is assigned
to them greedily in edge-index order, each up to its own capacity. This keeps
``0 <= flow <= capacity`` for every logical edge and preserves conservation at
intermediate nodes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence, Set, Tuple

from flowtrace.config import TRACE_CONFIG, TraceConfig
from flowtrace.logging import get_logger
from flowtrace.model.graph import FlowGraph
from flowtrace.types.base import Capacity, FlowPhase
from flowtrace.types.dto import EdgeState, NodeState, Step

if TYPE_CHECKING:
    from flowtrace.algorithms.residual import ResidualState

logger = get_logger(__name__)


def format_quantity(value: Capacity, precision: int = 3) -> str:
    """Return a compact string for a flow or capacity value.

    Integers print as-is. Floats keep up to ``precision`` decimals with
    trailing zeros and the decimal point trimmed. Non-zero values that would
    round to zero switch to ``precision`` significant digits instead.

    Examples:
        5 -> "5"; 2.5 -> "2.5"; 10.0 -> "10"; 0.1 + 0.2 -> "0.3"; 1e-11 -> "1e-11".
    """
    if isinstance(value, int):
        return str(value)
    s = f"{value:.{precision}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s in ("0", "-0"):
        return f"{value:.{precision}g}" if value != 0 else "0"
    return s


def _plural(n: int, singular: str, plural: Optional[str] = None) -> str:
    if n == 1:
        return singular
    return plural or (singular + "s")


class TraceRecorder:
    """Build step snapshots for one run of one graph.

    The recorder numbers steps in the order :meth:`record` is called.
    """

    def __init__(self, graph: FlowGraph, config: Optional[TraceConfig] = None):
        self.graph = graph
        self.config = config or TRACE_CONFIG
        self._count = 0
        self._edge_ids = self._build_edge_ids(graph)
        self.tolerance = self.config.effective_tolerance(graph.capacities)

    @staticmethod
    def _build_edge_ids(graph: FlowGraph) -> Tuple[str, ...]:
        ids: List[str] = []
        seen: Set[Tuple[str, str]] = set()
        for i, edge in enumerate(graph.edges):
            base = f"{edge.source}-{edge.target}"
            ids.append(base if edge.pair not in seen else f"{base}#{i}")
            seen.add(edge.pair)
        return tuple(ids)

    #
    # Derived quantities
    #
    def edge_flows(self, state: ResidualState) -> Tuple[Capacity, ...]:
        """Return the flow carried by each logical edge, aligned with the edges.

        Pair flow at or below the tolerance is float drift and shows as 0.
        """
        flows: List[Capacity] = [0] * len(self.graph.edges)
        for (u, v), edge_ids in self.graph.edges_by_pair.items():
            remaining = state.flow[u][v]
            if u == v or not remaining > self.tolerance:
                continue
            for i in edge_ids:
                capacity = self.graph.edges[i].capacity
                assigned = capacity if capacity < remaining else remaining
                flows[i] = assigned
                remaining -= assigned
                if not remaining > self.tolerance:
                    break
        return tuple(flows)

    def describe(
        self,
        phase: FlowPhase,
        path: Sequence[str] = (),
        path_flow: Capacity = 0,
        total_flow: Capacity = 0,
        iterations: int = 0,
    ) -> str:
        """Return the deterministic narrative sentence for a step."""
        precision = self.config.float_precision
        if phase == FlowPhase.INITIAL:
            return "Initial state: all flows are zero"
        if phase == FlowPhase.PATH_FOUND:
            route = self.config.path_separator.join(path)
            return (
                f"Augmenting path found: {route}, "
                f"bottleneck {format_quantity(path_flow, precision)}"
            )
        if phase == FlowPhase.FLOW_UPDATED:
            return f"Flows updated, cumulative flow = {format_quantity(total_flow, precision)}"
        return (
            f"Final state, flow = {format_quantity(total_flow, precision)} "
            f"after {iterations} {_plural(iterations, 'iteration')}"
        )

    #
    # Snapshot
    #
    def record(
        self,
        state: ResidualState,
        phase: FlowPhase,
        path: Optional[Sequence[int]] = None,
        path_flow: Capacity = 0,
        total_flow: Capacity = 0,
        iterations: int = 0,
    ) -> Step:
        """Capture the current state as a :class:`Step`.

        Args:
            state: Residual state of the run (read only).
            phase: Transition being recorded.
            path: Node indices of the current augmenting path, if any.
            path_flow: Bottleneck of ``path``; 0 for bookkeeping steps.
            total_flow: Cumulative flow pushed so far.
            iterations: Augmenting paths found so far.

        Returns:
            Immutable snapshot.
        """
        graph = self.graph
        tolerance = self.tolerance
        precision = self.config.float_precision
        path = list(path or ())
        on_path = set(path)
        path_pairs = set(zip(path, path[1:]))

        nodes = tuple(
            NodeState(
                id=name,
                is_source=name == graph.source,
                is_sink=name == graph.sink,
                is_in_path=i in on_path,
            )
            for i, name in enumerate(graph.nodes)
        )

        flows = self.edge_flows(state)
        edges: List[EdgeState] = []
        for (i, u, v), edge_id, flow in zip(graph.edge_pairs(), self._edge_ids, flows):
            edge = graph.edges[i]
            capacity = edge.capacity
            edges.append(
                EdgeState(
                    id=edge_id,
                    index=i,
                    source=edge.source,
                    target=edge.target,
                    flow=flow,
                    capacity=capacity,
                    label=(
                        f"{format_quantity(flow, precision)}/"
                        f"{format_quantity(capacity, precision)}"
                    ),
                    is_in_path=(u, v) in path_pairs,
                    saturated=capacity - flow <= tolerance,
                    blocked=capacity == 0,
                    is_backward_edge=(v, u) in path_pairs and flow > tolerance,
                )
            )

        labels = tuple(graph.nodes[i] for i in path)
        step = Step(
            index=self._count,
            phase=phase,
            flows=flows,
            path_flow=path_flow,
            path=labels,
            total_flow=total_flow,
            description=self.describe(phase, labels, path_flow, total_flow, iterations),
            nodes=nodes,
            edges=tuple(edges),
        )
        self._count += 1
        logger.debug("Recorded step %d: %s", step.index, step.description)
        return step

