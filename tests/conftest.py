"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and from
wall-clock waiting.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from unittest.mock import patch

import pytest

from pomocycle_cli.models.cycle.errors import RunCancelled


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point config and log directories at *tmp_path* for every test."""
    import pomocycle_cli.config as config_mod
    import pomocycle_cli.utils.logger as logger_mod

    config_dir = tmp_path / "config"
    log_dir = tmp_path / "logs"

    config_mod._config_manager = None
    logger_mod._logger = None
    logging.getLogger("pomocycle_cli").handlers.clear()

    with patch("pomocycle_cli.config.user_config_dir", return_value=str(config_dir)):
        with patch("pomocycle_cli.utils.logger.user_log_dir", return_value=str(log_dir)):
            yield tmp_path

    config_mod._config_manager = None
    logger_mod._logger = None
    for handler in logging.getLogger("pomocycle_cli").handlers:
        handler.close()
    logging.getLogger("pomocycle_cli").handlers.clear()


# ---------------------------------------------------------------------------
# Fake waiter
# ---------------------------------------------------------------------------


class RecordingWaiter:
    """Waiter stand-in that records durations instead of sleeping.

    If ``cancel_after`` is set, the wait with that (0-based) index raises
    :class:`RunCancelled`.
    """

    def __init__(self, cancel_after: int | None = None):
        self.waits: list[timedelta] = []
        self.cancel_after = cancel_after

    def wait(self, duration: timedelta) -> None:
        if self.cancel_after is not None and len(self.waits) == self.cancel_after:
            raise RunCancelled()
        self.waits.append(duration)


@pytest.fixture()
def waiter() -> RecordingWaiter:
    return RecordingWaiter()


@pytest.fixture()
def make_waiter():
    """Factory for RecordingWaiter instances with custom cancellation."""
    return RecordingWaiter
