"""Shared helper functions for position CLI commands."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import typer
from pydantic import ValidationError

from trade_journal.cli.utils import console, load_json_file
from trade_journal.positions import StaticSymbolResolver, TradeRecord

if TYPE_CHECKING:
    from pathlib import Path

    from trade_journal.positions import TokenSymbolResolver


def load_trades(path: Path) -> list[TradeRecord]:
    """Load trade records from a JSON list or an object with a `trades` list.

    Raises:
        typer.Exit: If the file is missing, malformed, or holds an invalid record.
    """
    raw = load_json_file(path, kind="Trades")
    if isinstance(raw, dict):
        raw = raw.get("trades")
    if not isinstance(raw, list):
        console.print(
            f"[red]Error:[/red] Trades file must contain a JSON list or "
            f"an object with a 'trades' list: {path}"
        )
        raise typer.Exit(1)

    trades: list[TradeRecord] = []
    for index, item in enumerate(raw):
        try:
            trades.append(TradeRecord.model_validate(item))
        except ValidationError as e:
            console.print(f"[red]Error:[/red] Invalid trade record at index {index}:")
            console.print(str(e), markup=False)
            raise typer.Exit(1) from None
    return trades


def load_symbol_resolver(path: Path | None) -> TokenSymbolResolver | None:
    """Build a resolver from a JSON `{token_address: symbol}` file, if one is given."""
    if path is None:
        return None

    raw = load_json_file(path, kind="Symbols")
    if not isinstance(raw, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in raw.items()
    ):
        console.print(
            f"[red]Error:[/red] Symbols file must map token addresses to symbols: {path}"
        )
        raise typer.Exit(1)
    return StaticSymbolResolver(raw)


def format_signed_amount(value: Decimal) -> str:
    """Format a P&L amount with sign and color markup."""
    text = f"{value:,.2f}"
    if value > 0:
        return f"[green]+{text}[/green]"
    if value < 0:
        return f"[red]{text}[/red]"
    return text


def format_quantity(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"{value.normalize():f}" if value == value.to_integral_value() else f"{value:.6f}"


def print_diagnostics(errors: list[str], warnings: list[str]) -> None:
    """Print calculation warnings and errors after the main output."""
    for warning in warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    for error in errors:
        console.print(f"[red]Error:[/red] {error}")
