"""Max-flow algorithms: residual state, path search and the orchestrating engine."""

from flowtrace.algorithms.bfs import find_augmenting_path
from flowtrace.algorithms.max_flow import (
    MaxFlowEngine,
    calc_max_flow,
    compute_max_flow,
    iter_max_flow_steps,
)
from flowtrace.algorithms.residual import ResidualState

__all__ = [
    "ResidualState",
    "find_augmenting_path",
    "MaxFlowEngine",
    "calc_max_flow",
    "compute_max_flow",
    "iter_max_flow_steps",
]
