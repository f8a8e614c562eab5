"""Residual state and flow updates for augmenting-path max flow.

``ResidualState`` holds three square matrices indexed by node position:

- ``capacity[u][v]``: aggregate original capacity of all ``u -> v`` edges.
- ``flow[u][v]``: net flow pushed ``u -> v``; antisymmetric, so a negative
  value means flow runs ``v -> u``.
- ``residual[u][v]``: capacity still pushable ``u -> v``, including the
  reverse capacity created by earlier ``v -> u`` flow.

At all times ``residual[u][v] == capacity[u][v] - flow[u][v] >= 0``.
A state is allocated per run from a :class:`~flowtrace.model.graph.FlowGraph`
and only :meth:`ResidualState.push_flow` mutates it.
"""

from __future__ import annotations

from typing import List, Sequence, Set

from flowtrace.model.graph import FlowGraph
from flowtrace.types.base import Capacity

Matrix = List[List[Capacity]]


class ResidualState:
    """Mutable capacity/flow/residual matrices for one run."""

    def __init__(self, size: int) -> None:
        """Allocate all-zero matrices for ``size`` nodes.

        Args:
            size: Number of nodes.
        """
        self.size = size
        self.capacity: Matrix = [[0] * size for _ in range(size)]
        self.flow: Matrix = [[0] * size for _ in range(size)]
        self.residual: Matrix = [[0] * size for _ in range(size)]

    @classmethod
    def from_graph(cls, graph: FlowGraph) -> ResidualState:
        """Build a fresh state with zero flow and residual equal to capacity.

        Parallel edges on the same ordered pair add up.
        """
        state = cls(graph.size)
        for i, u, v in graph.edge_pairs():
            capacity = graph.edges[i].capacity
            state.capacity[u][v] += capacity
            state.residual[u][v] += capacity
        return state

    def bottleneck(self, path: Sequence[int]) -> Capacity:
        """Return the minimum residual capacity along ``path``.

        Args:
            path: Node indices from source to sink.

        Raises:
            ValueError: If the path has fewer than two nodes or crosses a pair
                with no residual capacity.
        """
        if len(path) < 2:
            raise ValueError(f"Path must contain at least two nodes, got {list(path)}.")
        residual = self.residual
        result = residual[path[0]][path[1]]
        for u, v in zip(path, path[1:]):
            value = residual[u][v]
            if value <= 0:
                raise ValueError(
                    f"Path pair ({u}, {v}) has no residual capacity ({value})."
                )
            if value < result:
                result = value
        return result

    def push_flow(self, path: Sequence[int], amount: Capacity | None = None) -> Capacity:
        """Push ``amount`` units along ``path`` and update residuals symmetrically.

        For every consecutive pair ``(u, v)``: forward flow and reverse residual
        grow by ``amount``, reverse flow and forward residual shrink by it.

        Args:
            path: Node indices from source to sink.
            amount: Units to push. Defaults to the path's bottleneck.

        Returns:
            The amount pushed.

        Raises:
            ValueError: If the path is malformed or ``amount`` exceeds the
                bottleneck or is not positive.
        """
        bottleneck = self.bottleneck(path)
        if amount is None:
            amount = bottleneck
        elif amount <= 0 or amount > bottleneck:
            raise ValueError(
                f"Cannot push {amount} along a path with bottleneck {bottleneck}."
            )

        flow = self.flow
        residual = self.residual
        for u, v in zip(path, path[1:]):
            flow[u][v] += amount
            flow[v][u] -= amount
            residual[u][v] -= amount
            residual[v][u] += amount
        return amount

    def reachable(self, start: int, tolerance: float = 0) -> Set[int]:
        """Return node indices reachable from ``start`` over positive residuals."""
        seen = {start}
        stack = [start]
        while stack:
            u = stack.pop()
            for v, value in enumerate(self.residual[u]):
                if value > tolerance and v not in seen:
                    seen.add(v)
                    stack.append(v)
        return seen
