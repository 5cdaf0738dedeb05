"""Error types raised by the cycle scheduler."""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every scheduler failure."""


class StateTransitionError(SchedulerError):
    """An event was fired that is not valid for the current phase."""

    def __init__(self, event, phase):
        if event is None:
            message = f"No event can be fired in phase '{phase.value}'"
        else:
            message = f"Event '{event.value}' is not valid in phase '{phase.value}'"
        super().__init__(message)
        self.event = event
        self.phase = phase


class InvalidConfiguration(SchedulerError, ValueError):
    """Scheduler configuration failed validation before the run started."""


class RunCancelled(SchedulerError):
    """A timed wait was cancelled, aborting the whole run."""

    def __init__(self, completed_cycles: int | None = None):
        message = "Run cancelled"
        if completed_cycles is not None:
            message += f" after {completed_cycles} completed cycle(s)"
        super().__init__(message)
        self.completed_cycles = completed_cycles
