"""Implementation of 'fincoach unmark' command.

Clears the subscription flag for a merchant's charge in a snapshot file.
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from rich.console import Console

from fincoach.cli.utils import open_snapshot
from fincoach.core.snapshot import save_snapshot
from fincoach.engine.detectors import set_subscription_flag

console = Console()


def unmark_command(
    snapshot: Path = typer.Argument(..., help="Snapshot JSON file"),
    merchant: str = typer.Option(..., "--merchant", "-m", help="Merchant name (exact)"),
    amount: str = typer.Option(..., "--amount", "-a", help="Charge amount, e.g. 15.99"),
) -> None:
    """Mark a merchant's charge as not a subscription."""
    try:
        value = Decimal(amount)
    except InvalidOperation:
        console.print(f"[red]Error:[/red] Invalid amount '{amount}'")
        raise typer.Exit(1)

    data = open_snapshot(snapshot, console)
    updated = set_subscription_flag(data.transactions, merchant, value, False)

    changed = sum(1 for old, new in zip(data.transactions, updated) if old is not new)
    if changed == 0:
        console.print(f"[yellow]No transactions matched {merchant} {value}[/yellow]")
        raise typer.Exit(0)

    save_snapshot(data.model_copy(update={"transactions": updated}), snapshot)
    console.print(f"[green]Marked {changed} transaction(s) as not a subscription[/green]")
