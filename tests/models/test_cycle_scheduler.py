"""Unit tests for CycleScheduler.

Waits go through a recording fake so runs are instant and the exact
sequence of work/rest durations can be asserted.
"""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from pomocycle_cli.models.cycle import (
    CycleScheduler,
    Event,
    Phase,
    RunCancelled,
    SchedulerConfig,
    SchedulerError,
    StateTransitionError,
    plan,
)

WORK = timedelta(minutes=25)
SHORT = timedelta(minutes=3)
LONG = timedelta(minutes=15)


def _config(total: int, starting: int = 0) -> SchedulerConfig:
    return SchedulerConfig(
        total_cycles=total,
        work_duration=WORK,
        short_rest_duration=SHORT,
        long_rest_duration=LONG,
        starting_completed_cycles=starting,
    )


def _rest_waits(waits: list[timedelta]) -> list[timedelta]:
    # waits alternate work, rest, work, rest, ...
    return waits[1::2]


# ---------------------------------------------------------------------------
# Immediate termination
# ---------------------------------------------------------------------------


class TestNothingToDo:
    def test_zero_cycles_performs_no_wait(self, waiter) -> None:
        scheduler = CycleScheduler(_config(0), waiter=waiter)

        summary = scheduler.run()

        assert waiter.waits == []
        assert summary.completed_cycles == 0
        assert summary.records == []

    @pytest.mark.parametrize("total,starting", [(3, 3), (2, 5), (0, 1)])
    def test_starting_count_at_or_above_target(self, waiter, total, starting) -> None:
        scheduler = CycleScheduler(_config(total, starting), waiter=waiter)

        summary = scheduler.run()

        assert waiter.waits == []
        assert summary.completed_cycles == starting
        assert scheduler.completed_cycles == starting

    def test_ends_in_terminal_phase(self, waiter) -> None:
        scheduler = CycleScheduler(_config(0), waiter=waiter)

        scheduler.run()

        assert scheduler.phase is Phase.END


# ---------------------------------------------------------------------------
# Full runs
# ---------------------------------------------------------------------------


class TestRun:
    @pytest.mark.parametrize("total", [1, 2, 5, 9])
    def test_performs_one_work_and_one_rest_per_cycle(self, waiter, total) -> None:
        scheduler = CycleScheduler(_config(total), waiter=waiter)

        summary = scheduler.run()

        assert summary.completed_cycles == total
        assert summary.work_phases == total
        assert summary.rest_phases == total
        assert len(waiter.waits) == 2 * total
        assert waiter.waits[0::2] == [WORK] * total
        assert scheduler.phase is Phase.END

    def test_four_cycles_long_rest_last(self, waiter) -> None:
        CycleScheduler(_config(4), waiter=waiter).run()

        assert _rest_waits(waiter.waits) == [SHORT, SHORT, SHORT, LONG]

    def test_eight_cycles_long_rest_on_fourth_and_eighth(self, waiter) -> None:
        CycleScheduler(_config(8), waiter=waiter).run()

        assert _rest_waits(waiter.waits) == [
            SHORT, SHORT, SHORT, LONG, SHORT, SHORT, SHORT, LONG,
        ]

    def test_zero_durations_five_cycles(self) -> None:
        """Instant run: rest sequence still short, short, short, long, short."""
        config = SchedulerConfig(
            total_cycles=5,
            work_duration=timedelta(0),
            short_rest_duration=timedelta(0),
            long_rest_duration=timedelta(0),
        )
        scheduler = CycleScheduler(config)

        summary = scheduler.run()

        assert summary.completed_cycles == 5
        assert [r.long_rest for r in summary.records if r.phase is Phase.RESTING] == [
            False, False, False, True, False,
        ]
        assert summary.elapsed_seconds < 5

    def test_resumed_count_uses_absolute_cycle_numbers(self, waiter) -> None:
        """Starting at 2 of 6: cycles 3..6 run and cycle 4 gets the long rest."""
        summary = CycleScheduler(_config(6, starting=2), waiter=waiter).run()

        assert summary.completed_cycles == 6
        assert summary.work_phases == 4
        assert _rest_waits(waiter.waits) == [SHORT, LONG, SHORT, SHORT]
        assert [r.cycle for r in summary.records if r.phase is Phase.RESTING] == [3, 4, 5, 6]

    def test_identical_configs_give_identical_sequences(self, make_waiter) -> None:
        first, second = make_waiter(), make_waiter()

        CycleScheduler(_config(6), waiter=first).run()
        CycleScheduler(_config(6), waiter=second).run()

        assert first.waits == second.waits

    def test_summary_totals(self, waiter) -> None:
        summary = CycleScheduler(_config(4), waiter=waiter).run()

        assert summary.total_work == WORK * 4
        assert summary.total_rest == SHORT * 3 + LONG
        assert summary.rest_durations == [SHORT, SHORT, SHORT, LONG]

    def test_run_only_once(self, waiter) -> None:
        scheduler = CycleScheduler(_config(1), waiter=waiter)
        scheduler.run()

        with pytest.raises(SchedulerError, match="only run once"):
            scheduler.run()


# ---------------------------------------------------------------------------
# Counting
# ---------------------------------------------------------------------------


class TestCounting:
    def test_count_is_monotonic_and_steps_by_one_after_rest(self) -> None:
        observed: list[tuple[Phase, int]] = []

        class SpyWaiter:
            def wait(self, duration):
                observed.append((scheduler.phase, scheduler.completed_cycles))

        scheduler = CycleScheduler(_config(5), waiter=SpyWaiter())
        scheduler.run()

        counts = [count for _, count in observed]
        assert counts == sorted(counts)
        # The count during the rest wait is not yet incremented
        assert observed == [
            (Phase.WORKING, 0), (Phase.RESTING, 0),
            (Phase.WORKING, 1), (Phase.RESTING, 1),
            (Phase.WORKING, 2), (Phase.RESTING, 2),
            (Phase.WORKING, 3), (Phase.RESTING, 3),
            (Phase.WORKING, 4), (Phase.RESTING, 4),
        ]
        assert scheduler.completed_cycles == 5

    def test_on_phase_receives_each_record_before_wait(self, waiter) -> None:
        seen = []
        scheduler = CycleScheduler(
            _config(2),
            waiter=waiter,
            on_phase=lambda record: seen.append((record, len(waiter.waits))),
        )

        scheduler.run()

        assert [(r.phase, r.cycle) for r, _ in seen] == [
            (Phase.WORKING, 1), (Phase.RESTING, 1),
            (Phase.WORKING, 2), (Phase.RESTING, 2),
        ]
        assert [waits_before for _, waits_before in seen] == [0, 1, 2, 3]


# ---------------------------------------------------------------------------
# Invalid transitions
# ---------------------------------------------------------------------------


class TestInvalidTransitions:
    def test_resting_in_begin_raises_and_keeps_count(self, waiter) -> None:
        scheduler = CycleScheduler(_config(3), waiter=waiter)

        with pytest.raises(StateTransitionError):
            scheduler.fire(Event.RESTING)

        assert scheduler.completed_cycles == 0
        assert scheduler.phase is Phase.BEGIN
        assert waiter.waits == []

    def test_finalizing_in_begin_raises(self, waiter) -> None:
        scheduler = CycleScheduler(_config(3), waiter=waiter)

        with pytest.raises(StateTransitionError):
            scheduler.fire(Event.FINALIZING)

    def test_forced_working_phase_aborts_run(self, waiter) -> None:
        scheduler = CycleScheduler(_config(2), waiter=waiter)
        scheduler.state.phase = Phase.WORKING

        with pytest.raises(StateTransitionError, match="working"):
            scheduler.run()

        assert scheduler.completed_cycles == 0

    def test_forced_end_before_target_aborts_run(self, waiter) -> None:
        scheduler = CycleScheduler(_config(2), waiter=waiter)
        scheduler.state.phase = Phase.END

        with pytest.raises(SchedulerError, match="0 of 2"):
            scheduler.run()

        assert waiter.waits == []

    def test_manual_firing_follows_the_cycle(self, waiter) -> None:
        scheduler = CycleScheduler(_config(1), waiter=waiter)

        scheduler.fire(Event.WORKING)
        assert scheduler.phase is Phase.RESTING

        scheduler.fire(Event.RESTING)
        assert scheduler.phase is Phase.BEGIN
        assert scheduler.completed_cycles == 1

        # target reached: working now goes straight to END without waiting
        scheduler.fire(Event.WORKING)
        assert scheduler.phase is Phase.END
        assert len(waiter.waits) == 2

        scheduler.fire(Event.FINALIZING)
        assert scheduler.phase is Phase.END


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class TestCancellation:
    def test_cancel_during_first_work_wait(self, make_waiter) -> None:
        waiter = make_waiter(cancel_after=0)
        scheduler = CycleScheduler(_config(3), waiter=waiter)

        with pytest.raises(RunCancelled) as exc_info:
            scheduler.run()

        assert exc_info.value.completed_cycles == 0
        assert scheduler.completed_cycles == 0

    def test_cancel_during_rest_does_not_count_cycle(self, make_waiter) -> None:
        # waits: work(0) rest(1) work(2) rest(3) -> cancel in second rest
        waiter = make_waiter(cancel_after=3)
        scheduler = CycleScheduler(_config(3), waiter=waiter)

        with pytest.raises(RunCancelled) as exc_info:
            scheduler.run()

        assert exc_info.value.completed_cycles == 1
        assert "1 completed cycle" in str(exc_info.value)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestLogging:
    def test_debug_records_for_work_and_rest(self, waiter, caplog) -> None:
        logger = logging.getLogger("pomocycle_cli")
        logger.propagate = True
        try:
            with caplog.at_level(logging.DEBUG, logger="pomocycle_cli"):
                CycleScheduler(_config(1), waiter=waiter).run()
        finally:
            logger.propagate = False

        events = [
            (r.event, r.phase, r.completed_cycles, r.timeout)
            for r in caplog.records
            if getattr(r, "timeout", None) is not None
        ]
        assert events == [
            ("working", "working", 0, WORK.total_seconds()),
            ("resting", "resting", 0, SHORT.total_seconds()),
        ]
        assert any(getattr(r, "event", None) == "finalizing" for r in caplog.records)


# ---------------------------------------------------------------------------
# plan()
# ---------------------------------------------------------------------------


class TestPlan:
    def test_plan_matches_recorded_run(self, waiter) -> None:
        config = _config(5, starting=1)

        planned = plan(config)
        summary = CycleScheduler(config, waiter=waiter).run()

        assert planned == summary.records

    def test_plan_empty_when_nothing_to_do(self) -> None:
        assert plan(_config(2, starting=2)) == []
