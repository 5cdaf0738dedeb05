"""Cycle scheduler: sequences work and rest phases until the target is reached."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta

from .config import SchedulerConfig
from .errors import RunCancelled, SchedulerError, StateTransitionError
from .state import Event, Phase, SchedulerState, event_for, is_long_rest, next_phase
from .waiter import Waiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseRecord:
    """One timed phase, recorded as it starts."""

    phase: Phase
    cycle: int  # 1-based number of the cycle this phase belongs to
    duration: timedelta
    long_rest: bool = False


@dataclass
class RunSummary:
    """Outcome of a completed run."""

    starting_completed_cycles: int
    completed_cycles: int
    records: list[PhaseRecord] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def work_phases(self) -> int:
        return sum(1 for r in self.records if r.phase is Phase.WORKING)

    @property
    def rest_phases(self) -> int:
        return sum(1 for r in self.records if r.phase is Phase.RESTING)

    @property
    def rest_durations(self) -> list[timedelta]:
        return [r.duration for r in self.records if r.phase is Phase.RESTING]

    @property
    def total_work(self) -> timedelta:
        return sum(
            (r.duration for r in self.records if r.phase is Phase.WORKING),
            timedelta(0),
        )

    @property
    def total_rest(self) -> timedelta:
        return sum(self.rest_durations, timedelta(0))


class CycleScheduler:
    """Drives BEGIN -> WORKING -> RESTING -> BEGIN until enough cycles completed.

    A scheduler is built for one run and discarded afterwards. The only
    blocking calls are the work and rest waits, both delegated to ``waiter``.

    Args:
        config: Run configuration.
        waiter: Object with a ``wait(timedelta)`` method. Defaults to a
            cancellable :class:`Waiter`.
        on_phase: Called with each :class:`PhaseRecord` right before its wait.
    """

    def __init__(
        self,
        config: SchedulerConfig,
        *,
        waiter: Waiter | None = None,
        on_phase: Callable[[PhaseRecord], None] | None = None,
    ):
        self.config = config
        self._state = SchedulerState(
            completed_cycles=config.starting_completed_cycles
        )
        self._waiter = waiter if waiter is not None else Waiter()
        self._on_phase = on_phase
        self._records: list[PhaseRecord] = []
        self._lock = threading.Lock()
        self._has_run = False

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def completed_cycles(self) -> int:
        return self._state.completed_cycles

    @property
    def records(self) -> list[PhaseRecord]:
        return list(self._records)

    @property
    def is_finished(self) -> bool:
        return self._state.completed_cycles >= self.config.total_cycles

    def run(self) -> RunSummary:
        """Run every remaining cycle and return a summary.

        Raises:
            StateTransitionError: If the state machine is handed an event that
                its current phase does not accept.
            RunCancelled: If a wait was cancelled.
            SchedulerError: If this scheduler is already running or has run.
        """
        if not self._lock.acquire(blocking=False):
            raise SchedulerError("Scheduler is already running")
        try:
            if self._has_run:
                raise SchedulerError("A scheduler can only run once")
            self._has_run = True
            return self._run()
        finally:
            self._lock.release()

    def _run(self) -> RunSummary:
        started = time.monotonic()
        logger.info(
            "run started: total_cycles=%d completed_cycles=%d",
            self.config.total_cycles,
            self._state.completed_cycles,
        )
        try:
            while not self.is_finished:
                self._step()
            self._finish()
        except RunCancelled as e:
            logger.warning(
                "run cancelled: completed_cycles=%d phase=%s",
                self._state.completed_cycles,
                self._state.phase.value,
            )
            raise RunCancelled(self._state.completed_cycles) from e

        elapsed = time.monotonic() - started
        logger.info(
            "run completed: completed_cycles=%d (%.3fs)",
            self._state.completed_cycles,
            elapsed,
        )
        return RunSummary(
            starting_completed_cycles=self.config.starting_completed_cycles,
            completed_cycles=self._state.completed_cycles,
            records=list(self._records),
            elapsed_seconds=elapsed,
        )

    def _step(self) -> None:
        """Fire the one event that applies to the current phase."""
        if self._state.phase is Phase.END:
            raise SchedulerError(
                f"Reached the end with {self._state.completed_cycles} of "
                f"{self.config.total_cycles} cycles completed"
            )
        event = event_for(self._state.phase)
        if event is None:
            raise StateTransitionError(None, self._state.phase)
        self.fire(event)

    def _finish(self) -> None:
        # BEGIN re-checks the target and moves to END without waiting
        if self._state.phase is Phase.BEGIN:
            self.fire(Event.WORKING)
        if self._state.phase is Phase.END:
            self.fire(Event.FINALIZING)

    def fire(self, event: Event) -> None:
        """Fire ``event``, running the action attached to it.

        Raises:
            StateTransitionError: If the current phase does not accept
                ``event``. State is left untouched.
        """
        target = next_phase(self._state.phase, event)
        if event is Event.WORKING:
            self._working(target)
        elif event is Event.RESTING:
            self._resting(target)
        else:
            self._finalizing(target)

    def _working(self, target: Phase) -> None:
        if self.is_finished:
            self._state.phase = Phase.END
            return

        self._state.phase = target
        duration = self.config.work_duration
        self._enter(
            Event.WORKING,
            PhaseRecord(
                phase=Phase.WORKING,
                cycle=self._state.completed_cycles + 1,
                duration=duration,
            ),
        )
        self._waiter.wait(duration)
        self._state.phase = Phase.RESTING

    def _resting(self, target: Phase) -> None:
        long_rest = is_long_rest(self._state.completed_cycles)
        duration = self.config.rest_duration(long_rest)
        self._enter(
            Event.RESTING,
            PhaseRecord(
                phase=Phase.RESTING,
                cycle=self._state.completed_cycles + 1,
                duration=duration,
                long_rest=long_rest,
            ),
        )
        self._waiter.wait(duration)
        self._state.completed_cycles += 1
        self._state.phase = target

    def _finalizing(self, target: Phase) -> None:
        logger.debug(
            "finalizing: completed_cycles=%d",
            self._state.completed_cycles,
            extra={
                "event": Event.FINALIZING.value,
                "completed_cycles": self._state.completed_cycles,
                "phase": self._state.phase.value,
            },
        )
        self._state.phase = target

    def _enter(self, event: Event, record: PhaseRecord) -> None:
        verb = "Working" if event is Event.WORKING else "Resting"
        logger.debug(
            "%s for %s: completed_cycles=%d phase=%s",
            verb,
            record.duration,
            self._state.completed_cycles,
            self._state.phase.value,
            extra={
                "event": event.value,
                "completed_cycles": self._state.completed_cycles,
                "phase": self._state.phase.value,
                "timeout": record.duration.total_seconds(),
            },
        )
        self._records.append(record)
        if self._on_phase is not None:
            self._on_phase(record)


class _NoWait:
    def wait(self, duration: timedelta) -> None:
        return None


def plan(config: SchedulerConfig) -> list[PhaseRecord]:
    """Return the phases a run with ``config`` would perform, without waiting."""
    return CycleScheduler(config, waiter=_NoWait()).run().records
