"""Cycle scheduler - the work/rest state machine behind pomocycle."""

from .config import SchedulerConfig, to_timedelta
from .errors import (
    InvalidConfiguration,
    RunCancelled,
    SchedulerError,
    StateTransitionError,
)
from .scheduler import CycleScheduler, PhaseRecord, RunSummary, plan
from .state import LONG_REST_INTERVAL, Event, Phase, SchedulerState, next_phase
from .waiter import Waiter

__all__ = [
    "CycleScheduler",
    "Event",
    "InvalidConfiguration",
    "LONG_REST_INTERVAL",
    "Phase",
    "PhaseRecord",
    "RunCancelled",
    "RunSummary",
    "SchedulerConfig",
    "SchedulerError",
    "SchedulerState",
    "StateTransitionError",
    "Waiter",
    "next_phase",
    "plan",
    "to_timedelta",
]
