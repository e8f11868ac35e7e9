"""Typer CLI commands for FIFO position tracking.

This package provides position commands for the trade-journal CLI:
- calculate: Replay a trades file into open and closed FIFO positions
- summary: View position metrics and per-symbol rollups
- validate-grouping: Check a manual trade-to-position grouping
"""

import typer

from trade_journal.cli.positions.calculate import positions_calculate
from trade_journal.cli.positions.grouping import positions_validate_grouping
from trade_journal.cli.positions.summary import positions_summary

app = typer.Typer(help="FIFO position tracking commands.")

app.command("calculate")(positions_calculate)
app.command("summary")(positions_summary)
app.command("validate-grouping")(positions_validate_grouping)

__all__ = [
    "app",
    "positions_calculate",
    "positions_summary",
    "positions_validate_grouping",
]
