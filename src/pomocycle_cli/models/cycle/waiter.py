"""Cancellable sleep primitive used for the work and rest waits."""

from __future__ import annotations

import threading
from datetime import timedelta

from .errors import RunCancelled


class Waiter:
    """Blocks for a duration unless cancelled.

    The wait is a single ``Event.wait(timeout)`` call, so nothing runs while
    it is in progress. Setting the cancel event wakes it immediately.
    """

    def __init__(self, cancel_event: threading.Event | None = None):
        self._cancel_event = cancel_event or threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Abort the wait in progress and every later one."""
        self._cancel_event.set()

    def wait(self, duration: timedelta) -> None:
        """Block for ``duration``.

        Raises:
            RunCancelled: If the cancel event is set before or during the wait.
        """
        if self._cancel_event.is_set():
            raise RunCancelled()

        seconds = duration.total_seconds()
        if seconds <= 0:
            return

        if self._cancel_event.wait(timeout=seconds):
            raise RunCancelled()
