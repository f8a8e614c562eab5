"""Input model: the immutable flow network handed to the engine."""

from flowtrace.model.graph import Edge, FlowGraph

__all__ = ["Edge", "FlowGraph"]
