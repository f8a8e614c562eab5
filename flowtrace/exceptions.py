"""Exception hierarchy for flowtrace.

Validation problems subclass ``ValueError`` and internal faults subclass
``RuntimeError`` so callers that only know the builtin types still catch them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowtrace.types.dto import MaxFlowResult


class FlowTraceError(Exception):
    """Base class for all flowtrace errors."""


class GraphValidationError(FlowTraceError, ValueError):
    """Raised when a graph violates the input contract.

    Raised before any computation starts; no partial result exists.
    """


class IterationCapExceededError(FlowTraceError, RuntimeError):
    """Raised when a run exceeds its augmenting-phase cap.

    Attributes:
        partial_result: Result accumulated so far, with ``is_final=False``.
        cap: The phase cap that was exceeded.
    """

    def __init__(self, message: str, partial_result: MaxFlowResult, cap: int):
        super().__init__(message)
        self.partial_result = partial_result
        self.cap = cap
