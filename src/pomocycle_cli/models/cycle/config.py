"""Run configuration for the cycle scheduler."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Literal

from .errors import InvalidConfiguration

TimeUnit = Literal["minutes", "seconds"]

DEFAULT_CYCLES = 1
DEFAULT_COMPLETED_CYCLES = 0
DEFAULT_WORK_TIME = 25
DEFAULT_SHORT_REST_TIME = 3
DEFAULT_LONG_REST_TIME = 15

# Longest timeout threading.Event.wait accepts
MAX_DURATION = timedelta(seconds=threading.TIMEOUT_MAX)


def to_timedelta(value: float, unit: TimeUnit = "minutes") -> timedelta:
    """Convert a raw number in ``unit`` to a timedelta."""
    if unit not in ("minutes", "seconds"):
        raise InvalidConfiguration(f"Unknown time unit '{unit}'")
    try:
        return timedelta(**{unit: value})
    except (OverflowError, ValueError) as e:
        raise InvalidConfiguration(f"{value!r} {unit} is not a usable duration") from e


@dataclass(frozen=True)
class SchedulerConfig:
    """Immutable configuration for one scheduler run.

    Zero durations are accepted here so that instant runs are possible;
    callers taking user input should also call
    :meth:`require_positive_durations`.
    """

    total_cycles: int = DEFAULT_CYCLES
    work_duration: timedelta = field(
        default_factory=lambda: timedelta(minutes=DEFAULT_WORK_TIME)
    )
    short_rest_duration: timedelta = field(
        default_factory=lambda: timedelta(minutes=DEFAULT_SHORT_REST_TIME)
    )
    long_rest_duration: timedelta = field(
        default_factory=lambda: timedelta(minutes=DEFAULT_LONG_REST_TIME)
    )
    starting_completed_cycles: int = DEFAULT_COMPLETED_CYCLES

    def __post_init__(self) -> None:
        for name in ("total_cycles", "starting_completed_cycles"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidConfiguration(f"{name} must be >= 0, got {value}")

        for name in ("work_duration", "short_rest_duration", "long_rest_duration"):
            value = getattr(self, name)
            if not isinstance(value, timedelta):
                raise InvalidConfiguration(f"{name} must be a timedelta, got {value!r}")
            if value < timedelta(0):
                raise InvalidConfiguration(f"{name} must not be negative, got {value}")
            if value > MAX_DURATION:
                raise InvalidConfiguration(
                    f"{name} must not exceed {MAX_DURATION}, got {value}"
                )

    @classmethod
    def from_units(
        cls,
        *,
        total_cycles: int = DEFAULT_CYCLES,
        work_time: float = DEFAULT_WORK_TIME,
        short_rest_time: float = DEFAULT_SHORT_REST_TIME,
        long_rest_time: float = DEFAULT_LONG_REST_TIME,
        starting_completed_cycles: int = DEFAULT_COMPLETED_CYCLES,
        unit: TimeUnit = "minutes",
    ) -> "SchedulerConfig":
        """Build a config from raw numbers expressed in ``unit``."""
        return cls(
            total_cycles=total_cycles,
            work_duration=to_timedelta(work_time, unit),
            short_rest_duration=to_timedelta(short_rest_time, unit),
            long_rest_duration=to_timedelta(long_rest_time, unit),
            starting_completed_cycles=starting_completed_cycles,
        )

    @property
    def remaining_cycles(self) -> int:
        """Cycles a run with this config will perform."""
        return max(0, self.total_cycles - self.starting_completed_cycles)

    def require_positive_durations(self) -> "SchedulerConfig":
        """Reject zero-length phases. Returns ``self`` for chaining."""
        for name in ("work_duration", "short_rest_duration", "long_rest_duration"):
            if getattr(self, name) <= timedelta(0):
                raise InvalidConfiguration(f"{name} must be positive")
        return self

    def rest_duration(self, long_rest: bool) -> timedelta:
        return self.long_rest_duration if long_rest else self.short_rest_duration
