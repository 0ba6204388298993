# ==============================================================================
# Voicetime CLI
# ==============================================================================
"""
Command-line interface for voice-channel presence reporting.

Usage:
    voicetime --help
    voicetime status
    voicetime config show
    voicetime report run --date 2024-08-06 --send
    voicetime report file activity.csv --date 2024-08-06
"""

# ==============================================================================
# App Configuration
# ==============================================================================
# Set consistent terminal width for help output formatting
import os

import typer

if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="voicetime",
    help="Voice channel presence reporting CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

report_app = typer.Typer(
    help="Presence report operations",
    no_args_is_help=True,
)
app.add_typer(report_app, name="report")

# Register report commands from cli.report module
from voicetime.cli.report import report_file, report_run

report_app.command("run")(report_run)
report_app.command("file")(report_file)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Register config commands from cli.config module
from voicetime.cli.config import config_show

config_app.command("show")(config_show)


# Status command is imported from voicetime.cli.status
from voicetime.cli.status import show_status

app.command("status")(show_status)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
