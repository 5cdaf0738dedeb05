"""Output formatters for different formats."""

import json
from datetime import timedelta
from typing import Any

import yaml
from rich.table import Table

from pomocycle_cli.models.cycle import Phase, PhaseRecord, RunSummary
from pomocycle_cli.utils.ui.console import get_console

console = get_console()

OUTPUT_FORMATS = ("table", "json", "yaml")


def format_output(data: Any, output_format: str = "table") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    else:
        format_table(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        if isinstance(data[0], dict):
            format_dict_table(data)
        else:
            for item in data:
                console.print(item)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())

    for item in items:
        table.add_row(*(_format_value(item.get(col, "")) for col in columns))

    console.print(table)


def format_single_item(item: dict, prefix: str = "") -> None:
    """Format a (possibly nested) dict as dotted key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in _flatten(item, prefix):
        table.add_row(key, _format_value(value))

    console.print(table)


def _flatten(item: dict, prefix: str = ""):
    for key, value in item.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            yield from _flatten(value, f"{full_key}.")
        else:
            yield full_key, value


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, timedelta):
        return format_duration(value)
    if value is None:
        return "-"
    return str(value)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


def format_duration(duration: timedelta) -> str:
    """Render a duration compactly, e.g. ``1h 5m``, ``25m``, ``30s``.

    Whole seconds are rounded; anything under a second keeps one decimal.
    """
    seconds = duration.total_seconds()
    if seconds <= 0:
        return "0s"
    if seconds < 1:
        return f"{max(seconds, 0.1):.1f}s"

    total = round(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs:
        parts.append(f"{secs}s")
    return " ".join(parts)


def phase_label(record: PhaseRecord) -> str:
    """Human label for a phase record."""
    if record.phase is Phase.WORKING:
        return "Work"
    return "Long rest" if record.long_rest else "Short rest"


def format_phase_start(record: PhaseRecord, total_cycles: int) -> None:
    """Announce a phase as it starts."""
    icon = "🍅" if record.phase is Phase.WORKING else "☕"
    color = "red" if record.phase is Phase.WORKING else "green"
    console.print(
        f"{icon} [bold {color}]{phase_label(record)}[/bold {color}] "
        f"for {format_duration(record.duration)} "
        f"[dim](cycle {record.cycle}/{total_cycles})[/dim]"
    )


def plan_rows(records: list[PhaseRecord]) -> list[dict]:
    """Rows describing each planned or recorded phase."""
    return [
        {
            "cycle": record.cycle,
            "phase": phase_label(record),
            "duration": format_duration(record.duration),
        }
        for record in records
    ]


def format_summary(summary: RunSummary) -> None:
    """Display the outcome of a completed run."""
    if not summary.records:
        console.print(
            f"[yellow]Nothing to do:[/yellow] {summary.completed_cycles} "
            "cycle(s) already completed"
        )
        return

    console.print(
        f"\n[bold green]🎉 Completed {summary.completed_cycles} cycle(s)[/bold green]"
    )
    format_single_item(
        {
            "cycles_run": summary.completed_cycles
            - summary.starting_completed_cycles,
            "work_phases": summary.work_phases,
            "rest_phases": summary.rest_phases,
            "total_work": format_duration(summary.total_work),
            "total_rest": format_duration(summary.total_rest),
        }
    )
