"""Phases, events and the transition function of the cycle state machine.

Transitions
-----------
BEGIN   --working-->    WORKING   (the work wait runs here)
WORKING                 RESTING   (entered once the work wait elapses)
BEGIN   --working-->    END       (target cycle count already reached)
RESTING --resting-->    BEGIN     (after the rest wait and the increment)
END     --finalizing--> END       (terminal)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import StateTransitionError

LONG_REST_INTERVAL = 4


class Phase(Enum):
    """Position of the scheduler inside a cycle."""

    BEGIN = "begin"
    WORKING = "working"
    RESTING = "resting"
    END = "end"


class Event(Enum):
    """Named events that drive the state machine."""

    WORKING = "working"
    RESTING = "resting"
    FINALIZING = "finalizing"


def next_phase(phase: Phase, event: Event) -> Phase:
    """Return the phase entered when ``event`` fires in ``phase``.

    Raises:
        StateTransitionError: If ``event`` is not accepted in ``phase``.
    """
    if phase is Phase.BEGIN and event is Event.WORKING:
        return Phase.WORKING
    if phase is Phase.RESTING and event is Event.RESTING:
        return Phase.BEGIN
    if phase is Phase.END and event is Event.FINALIZING:
        return Phase.END
    raise StateTransitionError(event, phase)


def event_for(phase: Phase) -> Event | None:
    """Return the single event the driving loop fires in ``phase``.

    WORKING only exists while the work wait is in progress, so it has none.
    """
    if phase is Phase.BEGIN:
        return Event.WORKING
    if phase is Phase.RESTING:
        return Event.RESTING
    if phase is Phase.END:
        return Event.FINALIZING
    return None


def is_long_rest(completed_cycles: int) -> bool:
    """Whether the cycle about to complete earns the long rest."""
    return (completed_cycles + 1) % LONG_REST_INTERVAL == 0


@dataclass
class SchedulerState:
    """Mutable run state, owned by a single scheduler."""

    completed_cycles: int = 0
    phase: Phase = Phase.BEGIN

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and display."""
        return {
            "completed_cycles": self.completed_cycles,
            "phase": self.phase.value,
        }
