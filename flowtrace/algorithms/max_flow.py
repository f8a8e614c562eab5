"""Maximum-flow computation with a recorded step trace.

Implements Edmonds-Karp: repeatedly find a shortest augmenting path with
breadth-first search over the residual matrix, push its bottleneck, and record
snapshots around every transition so the run can be replayed as an animation.

The engine is a small state machine::

    INIT -> SEARCHING -> (FOUND_PATH -> UPDATING -> SEARCHING)* -> TERMINATED

Each run allocates its own :class:`ResidualState`; nothing is shared between
runs, so the public functions are pure with respect to their inputs.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from flowtrace.algorithms.bfs import find_augmenting_path
from flowtrace.algorithms.residual import ResidualState
from flowtrace.config import TRACE_CONFIG, TraceConfig
from flowtrace.exceptions import IterationCapExceededError
from flowtrace.logging import get_logger
from flowtrace.model.graph import FlowGraph
from flowtrace.trace.recorder import TraceRecorder
from flowtrace.types.base import Capacity, EngineState, FlowPhase, NodeID
from flowtrace.types.dto import MaxFlowResult, Step

logger = get_logger(__name__)


class MaxFlowEngine:
    """Drive one max-flow run over a validated graph.

    Use :meth:`run` to iterate over steps as they are produced, then
    :meth:`result` for the final value. An engine instance runs once.

    Attributes:
        graph: Input graph (read only).
        config: Engine configuration.
        state: Current orchestrator state.
        steps: Steps recorded so far, in order.
        total_flow: Flow pushed so far.
        iterations: Augmenting paths found so far.
    """

    def __init__(self, graph: FlowGraph, config: Optional[TraceConfig] = None):
        self.graph = graph
        self.config = config or TRACE_CONFIG
        self.state = EngineState.INIT
        self.steps: List[Step] = []
        self.total_flow: Capacity = 0
        self.iterations = 0
        self.cap = self.config.iteration_cap(graph.size, len(graph.edges))
        self.tolerance = self.config.effective_tolerance(graph.capacities)
        self._residual: Optional[ResidualState] = None
        self._recorder = TraceRecorder(graph, self.config)

    @property
    def residual_state(self) -> Optional[ResidualState]:
        """Residual matrices of the run; None before :meth:`run` starts."""
        return self._residual

    def _record(self, phase: FlowPhase, path: Sequence[int] = (), path_flow=0) -> Step:
        assert self._residual is not None
        step = self._recorder.record(
            self._residual,
            phase,
            path=path,
            path_flow=path_flow,
            total_flow=self.total_flow,
            iterations=self.iterations,
        )
        self.steps.append(step)
        return step

    def run(self) -> Iterator[Step]:
        """Execute the run, yielding each step right after it is recorded.

        Raises:
            RuntimeError: If the engine has already been started.
            IterationCapExceededError: If more augmenting phases than the cap
                allows are attempted. The partial result is attached.
        """
        if self.state != EngineState.INIT:
            raise RuntimeError("MaxFlowEngine.run() can only be called once.")

        graph = self.graph
        source = graph.source_index
        sink = graph.sink_index
        tolerance = self.tolerance

        self._residual = ResidualState.from_graph(graph)
        residual = self._residual
        logger.debug(
            "Starting max-flow run: %d nodes, %d edges, %s -> %s, cap=%d",
            graph.size,
            len(graph.edges),
            graph.source,
            graph.sink,
            self.cap,
        )
        self.state = EngineState.SEARCHING
        yield self._record(FlowPhase.INITIAL)

        while True:
            path = find_augmenting_path(
                residual.residual, source, sink, graph.size, tolerance
            )
            if path is None:
                break

            if self.iterations >= self.cap:
                partial = self._build_result(is_final=False)
                logger.error(
                    "Iteration cap %d exceeded with flow %s; graph is likely malformed",
                    self.cap,
                    self.total_flow,
                )
                raise IterationCapExceededError(
                    f"Max-flow run exceeded its iteration cap of {self.cap} "
                    f"augmenting paths (flow so far: {self.total_flow}).",
                    partial_result=partial,
                    cap=self.cap,
                )

            self.state = EngineState.FOUND_PATH
            self.iterations += 1
            bottleneck = residual.bottleneck(path)
            step = self._record(FlowPhase.PATH_FOUND, path, bottleneck)
            logger.debug("Iteration %d: %s", self.iterations, step.description)
            yield step

            self.state = EngineState.UPDATING
            pushed = residual.push_flow(path, bottleneck)
            self.total_flow += pushed
            yield self._record(FlowPhase.FLOW_UPDATED)
            self.state = EngineState.SEARCHING

        self.state = EngineState.TERMINATED
        final = self._record(FlowPhase.FINAL)
        logger.debug(final.description)
        yield final

    def _build_result(self, is_final: bool) -> MaxFlowResult:
        assert self._residual is not None
        graph = self.graph
        reachable = self._residual.reachable(graph.source_index, self.tolerance)
        min_cut = tuple(
            i
            for i, u, v in graph.edge_pairs()
            if u in reachable and v not in reachable
        )
        return MaxFlowResult(
            max_flow=self.total_flow,
            steps=tuple(self.steps),
            iterations=self.iterations,
            is_final=is_final,
            reachable=tuple(graph.nodes[i] for i in sorted(reachable)),
            min_cut=min_cut,
        )

    def result(self) -> MaxFlowResult:
        """Return the result of a finished run.

        Raises:
            RuntimeError: If the run has not terminated.
        """
        if self.state != EngineState.TERMINATED:
            raise RuntimeError(
                f"Max-flow run has not terminated (state: {self.state.name})."
            )
        return self._build_result(is_final=True)


def calc_max_flow(
    graph: FlowGraph, *, config: Optional[TraceConfig] = None
) -> MaxFlowResult:
    """Compute the maximum flow of ``graph`` and its full step trace.

    Args:
        graph: Validated flow graph.
        config: Optional engine configuration; defaults to ``TRACE_CONFIG``.

    Returns:
        MaxFlowResult with ``is_final=True``.

    Raises:
        IterationCapExceededError: If the run hits its iteration cap.

    Examples:
        >>> g = FlowGraph.from_lists(["S", "T"], [("S", "T")], [5], "S", "T")
        >>> calc_max_flow(g).max_flow
        5
    """
    engine = MaxFlowEngine(graph, config)
    for _ in engine.run():
        pass
    result = engine.result()
    logger.info(
        "Max flow %s -> %s = %s after %d iterations (%d steps)",
        graph.source,
        graph.sink,
        result.max_flow,
        result.iterations,
        len(result.steps),
    )
    return result


def iter_max_flow_steps(
    graph: FlowGraph, *, config: Optional[TraceConfig] = None
) -> Iterator[Step]:
    """Yield the steps of a max-flow run as they are produced.

    Steps arrive in generation order. Abandoning the iterator abandons the run.
    """
    yield from MaxFlowEngine(graph, config).run()


def compute_max_flow(
    nodes: Sequence[NodeID],
    edges: Sequence[Sequence[NodeID]],
    capacities: Sequence[Capacity],
    source: NodeID,
    sink: NodeID,
    *,
    config: Optional[TraceConfig] = None,
) -> MaxFlowResult:
    """Validate parallel-list input and compute its max flow with a trace.

    Args:
        nodes: Node names; order defines tie-breaking in the path search.
        edges: ``(source, target)`` pairs.
        capacities: Capacities aligned 1:1 with ``edges``.
        source: Source node name.
        sink: Sink node name.
        config: Optional engine configuration.

    Raises:
        GraphValidationError: If the input violates the graph contract. No
            computation is attempted.
        IterationCapExceededError: If the run hits its iteration cap.
    """
    graph = FlowGraph.from_lists(nodes, edges, capacities, source, sink)
    return calc_max_flow(graph, config=config)
