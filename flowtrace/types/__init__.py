"""Shared types for flowtrace.

Enums, aliases and the frozen snapshot containers returned by the engine.
Contains no algorithmic logic.
"""

from flowtrace.types.base import Capacity, EngineState, FlowPhase, NodeID
from flowtrace.types.dto import EdgeState, MaxFlowResult, NodeState, Step

__all__ = [
    # Enums
    "FlowPhase",
    "EngineState",
    # Type aliases
    "Capacity",
    "NodeID",
    # DTOs
    "NodeState",
    "EdgeState",
    "Step",
    "MaxFlowResult",
]
