"""Main CLI entry point for the complaint tracker."""

import logging
from typing import Annotated

import typer

from src.cli.complaints import app as complaint_app
from src.cli.remind import app as remind_app

# Create main Typer app
app = typer.Typer(
    name="complaints",
    help="Track maintenance complaints and send rate-limited reminders.",
    no_args_is_help=True,
)

# Register subcommands
app.add_typer(complaint_app, name="complaint")
app.add_typer(remind_app, name="remind")


@app.callback()
def configure(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Entry point for the complaints CLI."""
    app()


if __name__ == "__main__":
    main()
