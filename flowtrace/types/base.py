"""Base aliases and enums shared by the engine and the trace recorder."""

from __future__ import annotations

from enum import IntEnum
from typing import Union

#: Node identifier as entered by the user.
NodeID = str

#: Edge capacity; integers stay exact, floats stay floats.
Capacity = Union[int, float]


class FlowPhase(IntEnum):
    """Kind of transition a recorded step captures.

    Mirrors the engine's state machine: one ``INITIAL`` step, then a
    ``PATH_FOUND``/``FLOW_UPDATED`` pair per augmentation, then ``FINAL``.
    """

    INITIAL = 1
    PATH_FOUND = 2
    FLOW_UPDATED = 3
    FINAL = 4

    @classmethod
    def from_string(cls, value: str) -> "FlowPhase":
        """Parse a case-insensitive phase name.

        Raises:
            ValueError: If the string doesn't match any member.
        """
        try:
            return cls[value.upper()]
        except KeyError:
            valid = ", ".join(e.name for e in cls)
            raise ValueError(
                f"Invalid phase '{value}'. Valid values are: {valid}"
            ) from None


class EngineState(IntEnum):
    """States of the orchestrator loop."""

    INIT = 1
    SEARCHING = 2
    FOUND_PATH = 3
    UPDATING = 4
    TERMINATED = 5
