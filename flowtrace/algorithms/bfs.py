from __future__ import annotations

from collections import deque
from typing import List, Optional, Sequence

from flowtrace.types.base import Capacity


def find_augmenting_path(
    residual: Sequence[Sequence[Capacity]],
    source: int,
    sink: int,
    size: Optional[int] = None,
    tolerance: float = 0,
) -> Optional[List[int]]:
    """
    Breadth-first search for a shortest augmenting path in a residual matrix.

    Neighbours are scanned in index order and the first discoverer of a node
    becomes its parent, so the returned path is the lexicographically first
    among those with the fewest edges. The search stops as soon as the sink is
    discovered.

    Returns the path as node indices from ``source`` to ``sink``, or None when
    the sink is unreachable.
    """
    if size is None:
        size = len(residual)
    parent = [-1] * size
    visited = [False] * size
    visited[source] = True
    queue = deque([source])

    while queue:
        u = queue.popleft()
        row = residual[u]
        for v in range(size):
            if visited[v] or not row[v] > tolerance:
                continue
            visited[v] = True
            parent[v] = u
            if v == sink:
                return _unwind(parent, source, sink)
            queue.append(v)
    return None


def _unwind(parent: List[int], source: int, sink: int) -> List[int]:
    path = [sink]
    node = sink
    while node != source:
        node = parent[node]
        path.append(node)
    path.reverse()
    return path
