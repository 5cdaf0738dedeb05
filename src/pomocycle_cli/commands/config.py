"""Configuration management commands."""

from typing import Optional

import typer

from pomocycle_cli.config import get_config_manager
from pomocycle_cli.utils.exit_codes import ERROR_INVALID_ARGS
from pomocycle_cli.utils.typer_helpers import SuggestingGroup
from pomocycle_cli.utils.ui.console import get_console
from pomocycle_cli.utils.ui.formatters import format_error, format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console()


def _parse_value(value: str) -> str | int | float | bool:
    """Convert a command-line string to the most likely config type."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


@app.command("view")
@command_wrapper
def view_config(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    config_manager = get_config_manager(profile)
    format_output(config_manager.config.model_dump(), output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.work_time)"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Get a configuration value."""
    config_manager = get_config_manager(profile)
    value = config_manager.get(key)
    if value is None:
        raise AppError(f"Configuration key '{key}' not found", ERROR_INVALID_ARGS)
    console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.work_time)"),
    value: str = typer.Argument(..., help="Configuration value"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Set a configuration value."""
    config_manager = get_config_manager(profile)
    parsed_value = _parse_value(value)
    try:
        config_manager.set(key, parsed_value)
    except ValueError as e:
        raise AppError(str(e), ERROR_INVALID_ARGS) from e
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Configuration key to reset"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        confirm = typer.confirm(f"Are you sure you want to reset {msg}?")
        if not confirm:
            format_error("Cancelled")
            raise typer.Exit(0)

    config_manager = get_config_manager(profile)
    try:
        config_manager.reset(key)
    except ValueError as e:
        raise AppError(str(e), ERROR_INVALID_ARGS) from e

    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")


@app.command("list")
@command_wrapper
def list_profiles(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """List all configuration profiles."""
    config_manager = get_config_manager(profile)
    profiles = config_manager.list_profiles()

    if not profiles:
        console.print("[yellow]No profiles found[/yellow]")
        return

    for prof in profiles:
        marker = " *" if prof == profile else ""
        console.print(f"{prof}{marker}")
