"""Positions calculate command - replay trades into FIFO positions."""

from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003 - Required at runtime for Typer introspection
from typing import Annotated

import typer
from rich.table import Table

from trade_journal.cli.positions._helpers import (
    format_quantity,
    format_signed_amount,
    load_symbol_resolver,
    load_trades,
    print_diagnostics,
)
from trade_journal.cli.utils import console


def positions_calculate(
    trades_file: Annotated[Path, typer.Argument(help="JSON file with trade records.")],
    wallet: Annotated[
        str | None,
        typer.Option("--wallet", "-w", help="Only calculate positions for this wallet."),
    ] = None,
    status: Annotated[
        str | None,
        typer.Option("--status", "-s", help="Show only 'open' or 'closed' positions."),
    ] = None,
    symbols_file: Annotated[
        Path | None,
        typer.Option("--symbols", help="JSON file mapping token addresses to symbols."),
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Calculate FIFO positions from a trades file."""
    from trade_journal.config import TrackerConfig
    from trade_journal.positions import (
        FifoPositionTracker,
        PositionFilter,
        PositionStatus,
        filter_positions,
    )

    status_filter: PositionStatus | None = None
    if status is not None:
        try:
            status_filter = PositionStatus(status.strip().lower())
        except ValueError:
            console.print(
                f"[red]Error:[/red] Invalid status '{status}'. Expected 'open' or 'closed'."
            )
            raise typer.Exit(1) from None

    trades = load_trades(trades_file)
    if wallet is not None:
        trades = [t for t in trades if t.wallet_address == wallet]

    try:
        config = TrackerConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    tracker = FifoPositionTracker(symbol_resolver=load_symbol_resolver(symbols_file), config=config)
    result = tracker.calculate(trades, wallet)
    positions = filter_positions(result.positions, PositionFilter(status=status_filter))

    if output_json:
        shown_ids = {p.id for p in positions}
        payload = {
            "positions": [p.model_dump(mode="json") for p in positions],
            "position_trades": [
                pt.model_dump(mode="json")
                for pt in result.position_trades
                if pt.position_id in shown_ids
            ],
            "errors": result.errors,
            "warnings": result.warnings,
        }
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    if not positions:
        console.print("[yellow]No positions found.[/yellow]")
    else:
        table = Table(title="FIFO Positions")
        table.add_column("Symbol", style="cyan")
        table.add_column("Wallet", style="dim")
        table.add_column("Status")
        table.add_column("Quantity", justify="right")
        table.add_column("Avg Entry", justify="right")
        table.add_column("Avg Exit", justify="right")
        table.add_column("Realized P&L", justify="right")
        table.add_column("Fees", justify="right")
        table.add_column("Opened")
        table.add_column("Closed")

        for position in positions:
            table.add_row(
                position.symbol,
                position.wallet_address,
                position.status.value,
                format_quantity(position.total_quantity),
                f"{position.avg_entry_price:,.4f}",
                f"{position.avg_exit_price:,.4f}" if position.avg_exit_price is not None else "-",
                format_signed_amount(position.realized_pnl),
                f"{position.fees:,.4f}",
                position.open_date.strftime("%Y-%m-%d %H:%M"),
                position.close_date.strftime("%Y-%m-%d %H:%M") if position.close_date else "-",
            )

        console.print(table)

    print_diagnostics(result.errors, result.warnings)
