"""Decorators for command functions."""

import functools
import time
import traceback
from collections.abc import Callable

import typer

from pomocycle_cli.models.cycle import (
    InvalidConfiguration,
    RunCancelled,
    StateTransitionError,
)
from pomocycle_cli.utils.exit_codes import (
    ERROR_CANCELLED,
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_STATE_TRANSITION,
)
from pomocycle_cli.utils.logger import get_logger
from pomocycle_cli.utils.ui.formatters import format_error, format_warning


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def command_wrapper(func: Callable):
    """Wrap a command with logging and error-to-exit-code mapping."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            result = func(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except typer.Exit:
            # Re-raise Typer's own exits (like --help or explicit Exit(0))
            raise

        except (RunCancelled, KeyboardInterrupt) as e:
            elapsed = time.monotonic() - start
            logger.warning("command cancelled: %s (%.3fs)", cmd, elapsed)
            format_warning(str(e) or "Run cancelled")
            raise typer.Exit(code=ERROR_CANCELLED) from e

        except InvalidConfiguration as e:
            logger.error("command failed: %s - invalid configuration: %s", cmd, e)
            format_error(f"Invalid configuration: {e}")
            raise typer.Exit(code=ERROR_INVALID_ARGS) from e

        except StateTransitionError as e:
            logger.critical("command failed: %s - %s", cmd, e)
            format_error(str(e))
            raise typer.Exit(code=ERROR_STATE_TRANSITION) from e

        except AppError as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s",
                cmd,
                elapsed,
                str(e),
            )
            format_error(str(e))
            raise typer.Exit(code=e.exit_code) from e

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            # Generic fallback for unexpected crashes
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=ERROR_GENERAL) from e

    return wrapper
