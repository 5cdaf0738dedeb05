"""Run command - execute Pomodoro work/rest cycles."""

import logging
from typing import Optional

import typer
from pydantic import ValidationError

from pomocycle_cli.config import Config, TimerConfig, get_config_manager
from pomocycle_cli.models.cycle import (
    CycleScheduler,
    InvalidConfiguration,
    RunCancelled,
    SchedulerConfig,
    Waiter,
    plan,
)
from pomocycle_cli.utils.logger import (
    disable_file_logging,
    enable_console_logging,
    get_logger,
    set_level,
)
from pomocycle_cli.utils.ui.console import get_console
from pomocycle_cli.utils.ui.formatters import (
    OUTPUT_FORMATS,
    format_output,
    format_phase_start,
    format_summary,
    plan_rows,
)

from .decorators import command_wrapper

console = get_console()

CyclesOption = typer.Option(None, "--cycles", "-c", help="Number of cycles to run")
CompletedOption = typer.Option(
    None, "--completed-cycles", help="Number of cycles already completed"
)
WorkOption = typer.Option(None, "--work-time", "-w", help="Time to work")
ShortRestOption = typer.Option(
    None, "--short-rest-time", "-s", help="Short time to rest"
)
LongRestOption = typer.Option(
    None, "--long-rest-time", "-l", help="Long time to rest (every 4th cycle)"
)
UnitOption = typer.Option(
    None, "--unit", "-u", help="Unit of the time options: minutes or seconds"
)
ProfileOption = typer.Option("default", "--profile", help="Profile name")


def resolve_timer_config(
    base: TimerConfig,
    *,
    cycles: Optional[int] = None,
    completed_cycles: Optional[int] = None,
    work_time: Optional[float] = None,
    short_rest_time: Optional[float] = None,
    long_rest_time: Optional[float] = None,
    unit: Optional[str] = None,
) -> SchedulerConfig:
    """Merge command-line overrides into ``base`` and validate the result.

    Raises:
        InvalidConfiguration: If any resulting value is out of range.
    """
    overrides = {
        "cycles": cycles,
        "completed_cycles": completed_cycles,
        "work_time": work_time,
        "short_rest_time": short_rest_time,
        "long_rest_time": long_rest_time,
        "unit": unit,
    }
    data = base.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        timer = TimerConfig(**data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidConfiguration(problems) from e

    return timer.to_scheduler_config().require_positive_durations()


def _load_profile(profile: str) -> Config:
    return get_config_manager(profile).config


def _apply_logging(config: Config, verbose: bool = False) -> None:
    set_level(logging.DEBUG if verbose else config.logging.level)
    if not config.logging.file:
        disable_file_logging()
    if verbose:
        enable_console_logging()


@command_wrapper
def run(
    cycles: Optional[int] = CyclesOption,
    completed_cycles: Optional[int] = CompletedOption,
    work_time: Optional[float] = WorkOption,
    short_rest_time: Optional[float] = ShortRestOption,
    long_rest_time: Optional[float] = LongRestOption,
    unit: Optional[str] = UnitOption,
    profile: str = ProfileOption,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Print debug log lines to stderr"
    ),
) -> None:
    """Run the Pomodoro clock until the requested cycles are completed."""
    config = _load_profile(profile)
    _apply_logging(config, verbose)

    scheduler_config = resolve_timer_config(
        config.timer,
        cycles=cycles,
        completed_cycles=completed_cycles,
        work_time=work_time,
        short_rest_time=short_rest_time,
        long_rest_time=long_rest_time,
        unit=unit,
    )
    get_logger().debug("resolved run configuration: %s", scheduler_config)

    waiter = Waiter()
    scheduler = CycleScheduler(
        scheduler_config,
        waiter=waiter,
        on_phase=lambda record: format_phase_start(
            record, scheduler_config.total_cycles
        ),
    )

    try:
        summary = scheduler.run()
    except KeyboardInterrupt as e:
        waiter.cancel()
        raise RunCancelled(scheduler.completed_cycles) from e

    format_summary(summary)


@command_wrapper
def show_plan(
    cycles: Optional[int] = CyclesOption,
    completed_cycles: Optional[int] = CompletedOption,
    work_time: Optional[float] = WorkOption,
    short_rest_time: Optional[float] = ShortRestOption,
    long_rest_time: Optional[float] = LongRestOption,
    unit: Optional[str] = UnitOption,
    profile: str = ProfileOption,
    output: str = typer.Option(
        "table", "--output", "-o", help=f"Output format: {', '.join(OUTPUT_FORMATS)}"
    ),
) -> None:
    """Show the phases a run would perform, without waiting."""
    config = _load_profile(profile)
    _apply_logging(config)
    scheduler_config = resolve_timer_config(
        config.timer,
        cycles=cycles,
        completed_cycles=completed_cycles,
        work_time=work_time,
        short_rest_time=short_rest_time,
        long_rest_time=long_rest_time,
        unit=unit,
    )

    records = plan(scheduler_config)
    if not records:
        console.print(
            f"[yellow]Nothing to do:[/yellow] {scheduler_config.starting_completed_cycles} "
            f"of {scheduler_config.total_cycles} cycle(s) already completed"
        )
        return

    format_output(plan_rows(records), output)
