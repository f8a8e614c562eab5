"""Immutable snapshot containers produced by a max-flow run.

A run emits a sequence of :class:`Step` objects, each holding per-node and
per-edge annotations for one point in time, and finishes with a
:class:`MaxFlowResult`. All containers are frozen and expose ``to_dict()``
returning JSON-safe primitives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from flowtrace.types.base import Capacity, FlowPhase, NodeID


@dataclass(frozen=True)
class NodeState:
    """Annotated node within a step.

    Attributes:
        id: Node name.
        is_source: True for the run's source node.
        is_sink: True for the run's sink node.
        is_in_path: True when the node lies on the step's current path.
    """

    id: NodeID
    is_source: bool = False
    is_sink: bool = False
    is_in_path: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "is_source": self.is_source,
            "is_sink": self.is_sink,
            "is_in_path": self.is_in_path,
        }


@dataclass(frozen=True)
class EdgeState:
    """Annotated logical edge within a step.

    Attributes:
        id: Display identifier, ``"<source>-<target>"`` with a ``#<index>``
            suffix for repeated pairs.
        index: Position of the edge in the input edge sequence.
        source: Tail node.
        target: Head node.
        flow: Flow carried by this edge.
        capacity: Original capacity of this edge.
        label: ``"<flow>/<capacity>"``.
        is_in_path: The current path traverses ``source -> target``.
        saturated: ``flow == capacity``.
        blocked: ``capacity == 0``.
        is_backward_edge: The current path traverses ``target -> source``,
            cancelling flow on this edge through its reverse residual.
    """

    id: str
    index: int
    source: NodeID
    target: NodeID
    flow: Capacity
    capacity: Capacity
    label: str
    is_in_path: bool = False
    saturated: bool = False
    blocked: bool = False
    is_backward_edge: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "index": self.index,
            "source": self.source,
            "target": self.target,
            "flow": self.flow,
            "capacity": self.capacity,
            "label": self.label,
            "is_in_path": self.is_in_path,
            "saturated": self.saturated,
            "blocked": self.blocked,
            "is_backward_edge": self.is_backward_edge,
        }


@dataclass(frozen=True)
class Step:
    """Point-in-time snapshot of a max-flow run.

    Attributes:
        index: 0-based position in the step sequence.
        phase: Transition that produced this step.
        flows: Per-edge flow aligned with the graph's edge sequence.
        path_flow: Bottleneck about to be pushed (``PATH_FOUND`` steps only;
            0 for bookkeeping steps).
        path: Node names of the current augmenting path, or empty.
        total_flow: Cumulative flow pushed when the step was recorded.
        description: Human-readable narrative of the transition.
        nodes: Node annotations in graph order.
        edges: Edge annotations in graph order.
    """

    index: int
    phase: FlowPhase
    flows: Tuple[Capacity, ...]
    path_flow: Capacity
    path: Tuple[NodeID, ...]
    total_flow: Capacity
    description: str
    nodes: Tuple[NodeState, ...] = field(default=(), repr=False)
    edges: Tuple[EdgeState, ...] = field(default=(), repr=False)

    @property
    def is_augmenting(self) -> bool:
        """True for steps that announce an augmenting path."""
        return self.phase == FlowPhase.PATH_FOUND

    def to_elements(self) -> List[Dict[str, Dict[str, Any]]]:
        """Return Cytoscape-style elements: nodes first, then edges.

        Keys use the camelCase names expected by browser graph renderers.
        """
        elements: List[Dict[str, Dict[str, Any]]] = [
            {
                "data": {
                    "id": node.id,
                    "isSource": node.is_source,
                    "isSink": node.is_sink,
                    "isInPath": node.is_in_path,
                }
            }
            for node in self.nodes
        ]
        for edge in self.edges:
            elements.append(
                {
                    "data": {
                        "id": edge.id,
                        "source": edge.source,
                        "target": edge.target,
                        "capacity": edge.capacity,
                        "flow": edge.flow,
                        "label": edge.label,
                        "isInPath": edge.is_in_path,
                        "pathFlow": self.path_flow if edge.is_in_path else 0,
                        "isBackwardEdge": edge.is_backward_edge,
                        "saturated": edge.saturated,
                        "blocked": edge.blocked,
                    }
                }
            )
        return elements

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "phase": self.phase.name,
            "flows": list(self.flows),
            "path_flow": self.path_flow,
            "path": list(self.path),
            "total_flow": self.total_flow,
            "description": self.description,
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


@dataclass(frozen=True)
class MaxFlowResult:
    """Outcome of a max-flow run.

    Attributes:
        max_flow: Total flow pushed from source to sink.
        steps: Ordered snapshots; the first is the initial state and the last
            the final state.
        iterations: Number of augmenting paths found.
        is_final: False when the run stopped at its iteration cap and the value
            is a lower bound only.
        reachable: Nodes reachable from the source in the final residual graph.
        min_cut: Indices of edges crossing from ``reachable`` to the rest.
    """

    max_flow: Capacity
    steps: Tuple[Step, ...]
    iterations: int
    is_final: bool = True
    reachable: Tuple[NodeID, ...] = ()
    min_cut: Tuple[int, ...] = ()

    @property
    def final_graph(self) -> Optional[Step]:
        """Snapshot of the last recorded step."""
        return self.steps[-1] if self.steps else None

    @property
    def augmenting_steps(self) -> Tuple[Step, ...]:
        """Steps that announce an augmenting path, in order."""
        return tuple(step for step in self.steps if step.is_augmenting)

    @property
    def paths(self) -> Tuple[Tuple[NodeID, ...], ...]:
        """Augmenting paths in the order they were found."""
        return tuple(step.path for step in self.augmenting_steps)

    def to_dict(self, include_steps: bool = True) -> Dict[str, Any]:
        """Return a JSON-safe representation.

        Args:
            include_steps: When False only the final snapshot is emitted.
        """
        final = self.final_graph
        data: Dict[str, Any] = {
            "max_flow": self.max_flow,
            "iterations": self.iterations,
            "is_final": self.is_final,
            "reachable": list(self.reachable),
            "min_cut": list(self.min_cut),
            "final_graph": final.to_dict() if final is not None else None,
        }
        if include_steps:
            data["steps"] = [step.to_dict() for step in self.steps]
        return data
