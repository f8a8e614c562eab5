"""flowtrace: maximum flow with a step-by-step execution trace.

flowtrace computes the maximum flow of a capacitated directed graph with the
Edmonds-Karp algorithm and records an immutable snapshot after every
transition, so the run can be replayed as an animation.

Primary API:
    compute_max_flow() - Validate parallel-list input and run the engine
    calc_max_flow() - Run the engine on a FlowGraph
    iter_max_flow_steps() - Yield steps as they are produced
    FlowGraph, Edge - Input model
    MaxFlowResult, Step - Output snapshots

Example:
    from flowtrace import compute_max_flow

    result = compute_max_flow(
        ["S", "A", "B", "T"],
        [("S", "A"), ("S", "B"), ("A", "T"), ("B", "T")],
        [10, 10, 10, 10],
        "S",
        "T",
    )
    result.max_flow  # 20
    for step in result.steps:
        print(step.description)
"""

from __future__ import annotations

from flowtrace import cli, logging
from flowtrace._version import __version__
from flowtrace.algorithms import (
    MaxFlowEngine,
    ResidualState,
    calc_max_flow,
    compute_max_flow,
    find_augmenting_path,
    iter_max_flow_steps,
)
from flowtrace.config import TRACE_CONFIG, TraceConfig
from flowtrace.exceptions import (
    FlowTraceError,
    GraphValidationError,
    IterationCapExceededError,
)
from flowtrace.io import graph_from_dict, load_graph, parse_form_fields
from flowtrace.lib.nx import from_networkx, to_networkx
from flowtrace.model import Edge, FlowGraph
from flowtrace.types import EdgeState, FlowPhase, MaxFlowResult, NodeState, Step

__all__ = [
    # Version
    "__version__",
    # Model
    "Edge",
    "FlowGraph",
    # Engine (primary API)
    "compute_max_flow",
    "calc_max_flow",
    "iter_max_flow_steps",
    "MaxFlowEngine",
    "ResidualState",
    "find_augmenting_path",
    # Types
    "FlowPhase",
    "NodeState",
    "EdgeState",
    "Step",
    "MaxFlowResult",
    # Configuration
    "TraceConfig",
    "TRACE_CONFIG",
    # Errors
    "FlowTraceError",
    "GraphValidationError",
    "IterationCapExceededError",
    # I/O
    "load_graph",
    "graph_from_dict",
    "parse_form_fields",
    # Library integrations (NetworkX)
    "from_networkx",
    "to_networkx",
    # Utilities
    "cli",
    "logging",
]
