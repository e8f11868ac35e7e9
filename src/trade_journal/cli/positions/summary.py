"""Positions summary command - aggregate metrics and per-symbol rollups."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path  # noqa: TC003 - Required at runtime for Typer introspection
from typing import Annotated

import typer
from rich.table import Table

from trade_journal.cli.positions._helpers import (
    format_signed_amount,
    load_symbol_resolver,
    load_trades,
    print_diagnostics,
)
from trade_journal.cli.utils import console


def positions_summary(
    trades_file: Annotated[Path, typer.Argument(help="JSON file with trade records.")],
    wallet: Annotated[
        str | None,
        typer.Option("--wallet", "-w", help="Only summarize this wallet."),
    ] = None,
    symbols_file: Annotated[
        Path | None,
        typer.Option("--symbols", help="JSON file mapping token addresses to symbols."),
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show position metrics and per-symbol summaries."""
    from trade_journal.config import TrackerConfig
    from trade_journal.positions import (
        FifoPositionTracker,
        calculate_position_metrics,
        summarize_positions_by_symbol,
    )

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
    metrics = calculate_position_metrics(result.positions)
    summaries = summarize_positions_by_symbol(result.positions)

    if output_json:
        payload = {
            "metrics": asdict(metrics),
            "summaries": [asdict(s) for s in summaries],
            "errors": result.errors,
            "warnings": result.warnings,
        }
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    metrics_table = Table(title="Position Metrics", show_header=False)
    metrics_table.add_column("Metric", style="cyan")
    metrics_table.add_column("Value", justify="right")
    metrics_table.add_row("Positions:", str(metrics.total_positions))
    metrics_table.add_row("Open / Closed:", f"{metrics.open_positions} / {metrics.closed_positions}")
    metrics_table.add_row("Realized P&L:", format_signed_amount(metrics.total_realized_pnl))
    metrics_table.add_row("Net P&L:", format_signed_amount(metrics.total_net_pnl))
    metrics_table.add_row("Win Rate:", f"{metrics.win_rate:.1f}%")
    metrics_table.add_row("Avg Duration:", f"{metrics.avg_duration_hours:.1f}h")
    metrics_table.add_row("Largest Win:", format_signed_amount(metrics.largest_win))
    metrics_table.add_row("Largest Loss:", format_signed_amount(metrics.largest_loss))
    metrics_table.add_row("Total Fees:", f"{metrics.total_fees:,.4f}")
    console.print(metrics_table)

    if summaries:
        table = Table(title="By Symbol")
        table.add_column("Symbol", style="cyan")
        table.add_column("Positions", justify="right")
        table.add_column("Open", justify="right")
        table.add_column("Realized P&L", justify="right")
        table.add_column("Win Rate", justify="right")
        table.add_column("Volume", justify="right")
        for summary in summaries:
            table.add_row(
                summary.symbol,
                str(summary.total_positions),
                str(summary.open_positions),
                format_signed_amount(summary.total_realized_pnl),
                f"{summary.win_rate:.1f}%",
                f"{summary.total_volume:,.2f}",
            )
        console.print(table)

    print_diagnostics(result.errors, result.warnings)
