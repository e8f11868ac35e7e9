"""Positions validate-grouping command - check a manual trade grouping."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - Required at runtime for Typer introspection
from typing import Annotated

import typer

from trade_journal.cli.positions._helpers import load_trades
from trade_journal.cli.utils import console, load_json_file


def positions_validate_grouping(
    trades_file: Annotated[Path, typer.Argument(help="JSON file with trade records.")],
    grouping_file: Annotated[
        Path,
        typer.Argument(help="JSON file mapping position ids to lists of trade ids."),
    ],
) -> None:
    """Validate a manual position grouping against the trades it covers."""
    from trade_journal.positions import validate_manual_grouping

    trades = load_trades(trades_file)
    grouping = load_json_file(grouping_file, kind="Grouping")
    if not isinstance(grouping, dict) or not all(
        isinstance(ids, list) and all(isinstance(i, str) for i in ids) for ids in grouping.values()
    ):
        console.print(
            f"[red]Error:[/red] Grouping file must map position ids to lists of trade ids: "
            f"{grouping_file}"
        )
        raise typer.Exit(1)

    result = validate_manual_grouping(trades, grouping)
    if result.valid:
        console.print(f"[green]✓[/green] Grouping is valid ({len(grouping)} positions)")
        return

    console.print("[red]Grouping is invalid:[/red]")
    for error in result.errors:
        console.print(f"  - {error}")
    raise typer.Exit(1)
