"""Main entry point for pomocycle."""

import typer

from pomocycle_cli import __version__
from pomocycle_cli.commands import config, run_command
from pomocycle_cli.utils.typer_helpers import SuggestingGroup
from pomocycle_cli.utils.ui.console import get_console

# Create main app with custom group class
app = typer.Typer(
    name="pomocycle",
    cls=SuggestingGroup,
    help="Pomodoro clock: alternate work and rest intervals for a number of cycles",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(config.app, name="config", help="Configuration management")

# Add top-level commands
app.command("run")(run_command.run)
app.command("plan")(run_command.show_plan)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]pomocycle[/bold] version [cyan]{__version__}[/cyan]")


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
