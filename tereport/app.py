# ==============================================================================
# Teacher-Edition Report CLI
# ==============================================================================
"""
Command-line interface for Teacher-Edition usage reports.

Usage:
    tereport --help
    tereport report usage --log-file log.json
    tereport report session --request-json "$JSON" --signature "$SIG" -o session.csv
    tereport modules show "activity: 100"
    tereport config show
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
    name="tereport",
    help="Teacher-Edition usage and session reports",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

report_app = typer.Typer(
    help="Generate CSV reports from an event log",
    no_args_is_help=True,
)
app.add_typer(report_app, name="report")

# Register report commands from cli.report module
from tereport.cli.report import report_session, report_usage

report_app.command("usage")(report_usage)
report_app.command("session")(report_session)

modules_app = typer.Typer(
    help="Inspect content modules",
    no_args_is_help=True,
)
app.add_typer(modules_app, name="modules")

from tereport.cli.modules import modules_show

modules_app.command("show")(modules_show)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

from tereport.cli.config import config_show

config_app.command("show")(config_show)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
