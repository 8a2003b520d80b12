#!/usr/bin/env python3
"""
yis - Year in Sport CLI

A terminal-native year-in-review for your Strava activities.

Usage:
    yis import activities.csv     # Stats from a Strava data export
    yis years activities.csv      # Years present in an export
    yis stats                     # Stats fetched live from Strava
    yis auth login                # Authenticate with Strava
"""

import logging

import typer
from rich.console import Console

from src.cli import __version__
from src.cli.commands import auth, stats

# Create the main app
app = typer.Typer(
    name="yis",
    help="Your year in sport, from the terminal.",
    no_args_is_help=True,
    add_completion=True,
)

# Add command groups
app.add_typer(auth.app, name="auth", help="Authentication commands")

# Console for output
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"yis version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", callback=version_callback, help="Show version"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """
    yis - Your year in sport, from the terminal.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands directly on the app
app.command(name="import")(stats.import_export)
app.command(name="years")(stats.years)
app.command(name="stats")(stats.live)


def cli() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
