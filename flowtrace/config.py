"""Configuration classes for flowtrace runs."""

from dataclasses import dataclass
from typing import Iterable, Optional

from flowtrace.types.base import Capacity


@dataclass
class TraceConfig:
    """Tunables for the max-flow engine and the trace recorder."""

    # Relative threshold: residuals at or below tolerance * largest capacity
    # count as exhausted. All-integer graphs use an exact threshold of 0.
    tolerance: float = 1e-10

    # Explicit phase cap; None derives the cap from the graph size
    max_iterations: Optional[int] = None

    # Multiplier applied to node_count * edge_count when deriving the cap
    iteration_cap_factor: int = 1

    # Separator used when rendering a path in step descriptions
    path_separator: str = "→"

    # Decimal places kept when formatting float quantities in labels
    float_precision: int = 3

    def effective_tolerance(self, capacities: Iterable[Capacity]) -> float:
        """Return the residual threshold for a graph with these capacities.

        All-integer inputs cannot drift, so their threshold is 0. Otherwise
        ``tolerance`` is scaled by the largest capacity, so the threshold guards
        against float drift without hiding small capacities of the input.
        """
        values = list(capacities)
        if all(isinstance(c, int) for c in values):
            return 0
        return self.tolerance * max(values, default=0)

    def iteration_cap(self, node_count: int, edge_count: int) -> int:
        """Return the maximum number of augmenting phases allowed for a run.

        Edmonds-Karp needs at most O(V * E) augmentations, so the derived cap
        only trips on malformed input.
        """
        if self.max_iterations is not None:
            return self.max_iterations
        return max(1, self.iteration_cap_factor * node_count * max(edge_count, 1))


# Global configuration instance
TRACE_CONFIG = TraceConfig()
