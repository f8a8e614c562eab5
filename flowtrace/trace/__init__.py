"""Step recording for animated max-flow traces."""

from flowtrace.trace.recorder import TraceRecorder, format_quantity

__all__ = ["TraceRecorder", "format_quantity"]
