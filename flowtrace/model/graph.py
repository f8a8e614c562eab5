"""Immutable flow-network model.

``FlowGraph`` describes the input of one max-flow run: ordered nodes, ordered
directed edges with capacities, and the designated source/sink. Node order is
significant: it fixes the matrix index of each node and therefore the
tie-break order of the path search.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import cached_property
from numbers import Real
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from flowtrace.exceptions import GraphValidationError
from flowtrace.types.base import Capacity, NodeID


@dataclass(frozen=True)
class Edge:
    """One directed edge.

    Attributes:
        source (str): Tail node name.
        target (str): Head node name.
        capacity (int | float): Non-negative finite capacity.
    """

    source: NodeID
    target: NodeID
    capacity: Capacity = 0

    @property
    def pair(self) -> Tuple[NodeID, NodeID]:
        return (self.source, self.target)


def _check_capacity(value: Any, where: str) -> Capacity:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise GraphValidationError(
            f"Capacity of {where} must be a number, got {value!r}."
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise GraphValidationError(f"Capacity of {where} must be finite, got {value}.")
    if value < 0:
        raise GraphValidationError(
            f"Capacity of {where} must be non-negative, got {value}."
        )
    return value


@dataclass(frozen=True)
class FlowGraph:
    """A validated capacitated directed multigraph with a source and a sink.

    Instances validate themselves on construction and never change afterwards.

    Attributes:
        nodes (Tuple[str, ...]): Node names in index order.
        edges (Tuple[Edge, ...]): Edges in input order; parallel edges allowed.
        source (str): Source node name.
        sink (str): Sink node name.
    """

    nodes: Tuple[NodeID, ...]
    edges: Tuple[Edge, ...]
    source: NodeID
    sink: NodeID
    _index: Dict[NodeID, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        self.validate()
        object.__setattr__(
            self, "_index", {name: i for i, name in enumerate(self.nodes)}
        )

    @classmethod
    def from_lists(
        cls,
        nodes: Sequence[NodeID],
        edges: Sequence[Sequence[NodeID]],
        capacities: Sequence[Capacity],
        source: NodeID,
        sink: NodeID,
    ) -> FlowGraph:
        """Build a graph from the parallel-list form.

        Args:
            nodes: Node names in index order.
            edges: ``(source, target)`` pairs.
            capacities: Capacities aligned 1:1 with ``edges``.
            source: Source node name.
            sink: Sink node name.

        Raises:
            GraphValidationError: If the lists are inconsistent or the graph
                violates any invariant.
        """
        if len(edges) != len(capacities):
            raise GraphValidationError(
                f"Got {len(edges)} edges but {len(capacities)} capacities; "
                "each edge needs exactly one capacity."
            )
        built: List[Edge] = []
        for i, (pair, capacity) in enumerate(zip(edges, capacities)):
            if len(pair) != 2:
                raise GraphValidationError(
                    f"Edge #{i} must be a (source, target) pair, got {pair!r}."
                )
            built.append(Edge(pair[0], pair[1], capacity))
        return cls(tuple(nodes), tuple(built), source, sink)

    def validate(self) -> None:
        """Check every graph invariant.

        Raises:
            GraphValidationError: On the first violation found.
        """
        if not self.nodes:
            raise GraphValidationError("Graph must contain at least one node.")

        seen = set()
        for name in self.nodes:
            if not isinstance(name, str) or not name:
                raise GraphValidationError(
                    f"Node names must be non-empty strings, got {name!r}."
                )
            if name in seen:
                raise GraphValidationError(f"Node '{name}' is listed more than once.")
            seen.add(name)

        if self.source not in seen:
            raise GraphValidationError(f"Source node '{self.source}' not found in nodes.")
        if self.sink not in seen:
            raise GraphValidationError(f"Sink node '{self.sink}' not found in nodes.")
        if self.source == self.sink:
            raise GraphValidationError(
                f"Source and sink must differ, both are '{self.source}'."
            )

        for i, edge in enumerate(self.edges):
            if not isinstance(edge, Edge):
                raise GraphValidationError(f"Edge #{i} is not an Edge: {edge!r}.")
            where = f"edge #{i} ({edge.source}->{edge.target})"
            if edge.source not in seen:
                raise GraphValidationError(
                    f"Node '{edge.source}' referenced by {where} is missing."
                )
            if edge.target not in seen:
                raise GraphValidationError(
                    f"Node '{edge.target}' referenced by {where} is missing."
                )
            _check_capacity(edge.capacity, where)

    #
    # Lookups
    #
    def index_of(self, node: NodeID) -> int:
        """Return the matrix index of a node.

        Raises:
            KeyError: If the node is not part of the graph.
        """
        return self._index[node]

    @property
    def size(self) -> int:
        return len(self.nodes)

    @property
    def source_index(self) -> int:
        return self._index[self.source]

    @property
    def sink_index(self) -> int:
        return self._index[self.sink]

    @property
    def capacities(self) -> Tuple[Capacity, ...]:
        return tuple(edge.capacity for edge in self.edges)

    @cached_property
    def edges_by_pair(self) -> Dict[Tuple[int, int], Tuple[int, ...]]:
        """Map ``(u_index, v_index)`` to the indices of edges on that pair."""
        grouped: Dict[Tuple[int, int], List[int]] = {}
        for i, edge in enumerate(self.edges):
            key = (self._index[edge.source], self._index[edge.target])
            grouped.setdefault(key, []).append(i)
        return {key: tuple(ids) for key, ids in grouped.items()}

    def edge_pairs(self) -> Iterable[Tuple[int, int, int]]:
        """Yield ``(edge_index, u_index, v_index)`` for every edge in order."""
        for i, edge in enumerate(self.edges):
            yield i, self._index[edge.source], self._index[edge.target]

    def cut_capacity(self, source_side: Iterable[NodeID]) -> Capacity:
        """Return the capacity of the cut whose source side is ``source_side``.

        Sums capacities of edges leaving ``source_side``.
        """
        side = set(source_side)
        return sum(
            (
                edge.capacity
                for edge in self.edges
                if edge.source in side and edge.target not in side
            ),
            0,
        )
