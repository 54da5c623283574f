"""Implementation of 'fincoach categorize' command.

Asks the insight collaborator to fill in categories for uncategorized
transactions and writes them back to the snapshot file.
"""

from pathlib import Path

import typer
from rich.console import Console

from fincoach.cli.utils import open_snapshot
from fincoach.core.config import get_settings
from fincoach.core.snapshot import save_snapshot
from fincoach.insights.categorize import categorize_transactions, needs_category

console = Console()


def categorize_command(
    snapshot: Path = typer.Argument(..., help="Snapshot JSON file"),
) -> None:
    """Auto-categorize uncategorized transactions."""
    data = open_snapshot(snapshot, console)

    pending = sum(1 for tx in data.transactions if needs_category(tx))
    if pending == 0:
        console.print("[yellow]No uncategorized transactions[/yellow]")
        raise typer.Exit(0)

    updated = categorize_transactions(data.transactions, settings=get_settings())

    changed = sum(1 for old, new in zip(data.transactions, updated) if old is not new)
    if changed == 0:
        console.print(
            f"[yellow]{pending} transaction(s) left uncategorized; "
            "the categorization service is unavailable[/yellow]"
        )
        raise typer.Exit(0)

    save_snapshot(data.model_copy(update={"transactions": updated}), snapshot)
    console.print(f"[green]Categorized {changed} of {pending} transaction(s)[/green]")
