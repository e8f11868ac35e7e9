"""
CLI application for Trade Journal.

Provides commands for replaying trade history into FIFO positions.
"""

from __future__ import annotations

from typing import Annotated

import typer
from dotenv import find_dotenv, load_dotenv

from trade_journal.cli.positions import app as positions_app
from trade_journal.cli.utils import console
from trade_journal.logging import configure_structlog

app = typer.Typer(
    name="trade-journal",
    help="Trade Journal CLI - FIFO position tracking for journaled trades.",
    add_completion=False,
)

app.add_typer(positions_app, name="positions")


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Log level for stderr diagnostics (overrides TRADE_JOURNAL_LOG_LEVEL).",
        ),
    ] = None,
) -> None:
    """Trade Journal CLI."""
    load_dotenv(find_dotenv(usecwd=True))
    configure_structlog(log_level)


@app.command()
def version() -> None:
    """Show version information."""
    from trade_journal import __version__

    console.print(f"trade-journal v{__version__}")


if __name__ == "__main__":
    app()
