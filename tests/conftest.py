"""Global pytest configuration and shared sample graphs.

Each fixture returns a validated ``FlowGraph``. Node order matters: it fixes
the tie-break order of the breadth-first path search.
"""

from __future__ import annotations

import matplotlib
import pytest

from flowtrace.model.graph import FlowGraph

# Headless backend for the drawing tests
matplotlib.use("Agg")


@pytest.fixture
def two_paths():
    # Capacity:
    #       [10]       [10]
    #   ┌────────►A─────────┐
    #   │                   ▼
    #   S                   T
    #   │                   ▲
    #   └────────►B─────────┘
    #       [10]       [10]
    return FlowGraph.from_lists(
        ["S", "A", "B", "T"],
        [("S", "A"), ("S", "B"), ("A", "T"), ("B", "T")],
        [10, 10, 10, 10],
        "S",
        "T",
    )


@pytest.fixture
def single_edge():
    #      [5]
    #  S────────►T
    return FlowGraph.from_lists(["S", "T"], [("S", "T")], [5], "S", "T")


@pytest.fixture
def disconnected():
    #      [5]
    #  S────────►A        T
    return FlowGraph.from_lists(["S", "A", "T"], [("S", "A")], [5], "S", "T")


@pytest.fixture
def diamond_bottleneck():
    # Capacity:
    #       [1]        [100]
    #   ┌────────►A─────────┐
    #   │                   ▼
    #   S                   T
    #   │                   ▲
    #   └────────►B─────────┘
    #      [100]       [1]
    return FlowGraph.from_lists(
        ["S", "A", "B", "T"],
        [("S", "A"), ("A", "T"), ("S", "B"), ("B", "T")],
        [1, 100, 100, 1],
        "S",
        "T",
    )


@pytest.fixture
def needs_cancellation():
    # The first (shortest) path S-X-Y-T blocks both remaining routes; the
    # second augmentation must cancel X->Y through its reverse residual:
    #
    #   S──►X──►Y──►T          S-X-P-Q-T and S-R-Y-T carry the optimum
    #   │   │   ▲   ▲
    #   ▼   ▼   │   │
    #   R───┼───┘   │
    #       P──►Q───┘
    #
    # All capacities are 1. Greedy augmentation without reverse edges stops
    # at 1; the true maximum is 2.
    return FlowGraph.from_lists(
        ["S", "X", "R", "Y", "P", "Q", "T"],
        [
            ("S", "X"),
            ("S", "R"),
            ("X", "Y"),
            ("Y", "T"),
            ("X", "P"),
            ("P", "Q"),
            ("Q", "T"),
            ("R", "Y"),
        ],
        [1, 1, 1, 1, 1, 1, 1, 1],
        "S",
        "T",
    )


@pytest.fixture
def textbook():
    # Six-node textbook network (max flow 23)
    return FlowGraph.from_lists(
        ["s", "v1", "v2", "v3", "v4", "t"],
        [
            ("s", "v1"),
            ("s", "v2"),
            ("v1", "v3"),
            ("v2", "v1"),
            ("v2", "v4"),
            ("v3", "v2"),
            ("v3", "t"),
            ("v4", "v3"),
            ("v4", "t"),
        ],
        [16, 13, 12, 4, 14, 9, 20, 7, 4],
        "s",
        "t",
    )


@pytest.fixture
def parallel_edges():
    # Two parallel S->A edges, antiparallel A<->B, and a zero-capacity edge
    #
    #      [3]
    #   ┌───────┐      [4]        [6]
    #   S       A◄────────►B─────────►T
    #   └───────┘      [2]
    #      [2]
    #   S──►T [0]
    return FlowGraph.from_lists(
        ["S", "A", "B", "T"],
        [("S", "A"), ("S", "A"), ("A", "B"), ("B", "A"), ("B", "T"), ("S", "T")],
        [3, 2, 4, 2, 6, 0],
        "S",
        "T",
    )
