"""Shared utilities for CLI commands (console output, JSON file loading)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import typer
from rich.console import Console

if TYPE_CHECKING:
    from pathlib import Path

console = Console()


def load_json_file(path: Path, *, kind: str) -> Any:
    """Load a JSON input file, exiting with a readable error if it is missing or invalid."""
    if not path.exists():
        console.print(f"[red]Error:[/red] {kind} file not found: {path}")
        raise typer.Exit(1)

    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] {kind} file is not valid JSON: {path} ({e})")
        raise typer.Exit(1) from None
