"""Shared helpers for CLI commands."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console

from fincoach.core.exceptions import SnapshotFormatError, SnapshotNotFoundError
from fincoach.core.models import Snapshot
from fincoach.core.snapshot import load_snapshot

_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£"}


def format_currency(amount: Decimal, currency: str) -> str:
    """Format an amount for display, e.g. ``$1,234.50``."""
    symbol = _SYMBOLS.get(currency, f"{currency} ")
    if amount < 0:
        return f"-{symbol}{abs(amount):,.2f}"
    return f"{symbol}{amount:,.2f}"


def format_percentage(value: Decimal | int | None) -> str:
    """Format a percentage with sign, ``n/a`` for None."""
    if value is None:
        return "n/a"
    return f"{Decimal(value):+.1f}%"


def open_snapshot(path: Path, console: Console) -> Snapshot:
    """Load a snapshot or exit with an error message."""
    try:
        return load_snapshot(path)
    except SnapshotNotFoundError:
        console.print(f"[red]Error:[/red] Snapshot file not found: {path}")
        raise typer.Exit(1)
    except SnapshotFormatError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def parse_today(value: str | None, console: Console) -> date:
    """Parse --today (YYYY-MM-DD), defaulting to the current date."""
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid date '{value}', expected YYYY-MM-DD")
        raise typer.Exit(1)
