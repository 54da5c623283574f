"""Implementation of 'fincoach detect' command.

Lists likely subscriptions and small gray charges.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from fincoach.cli.utils import format_currency, open_snapshot
from fincoach.core.config import get_settings
from fincoach.dashboard import DashboardDataProvider

console = Console()


def detect_command(
    snapshot: Path = typer.Argument(..., help="Snapshot JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Detect recurring subscriptions and gray charges."""
    data = open_snapshot(snapshot, console)
    currency = get_settings().currency

    report = DashboardDataProvider(data).get_detection_report()

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
        return

    if not report.detected_subscriptions and not report.gray_charges:
        console.print("[green]No subscriptions or gray charges detected[/green]")
        return

    if report.detected_subscriptions:
        table = Table(title="Detected subscriptions")
        table.add_column("Merchant")
        table.add_column("Amount", justify="right")
        table.add_column("Count", justify="right")
        for rec in sorted(report.detected_subscriptions, key=lambda r: r.merchant.lower()):
            table.add_row(rec.merchant, format_currency(rec.amount, currency), str(rec.count))
        console.print(table)

    if report.gray_charges:
        table = Table(title="Gray charges")
        table.add_column("Merchant")
        table.add_column("Description")
        table.add_column("Amount", justify="right")
        for gray in report.gray_charges:
            table.add_row(gray.merchant, gray.description, format_currency(gray.amount, currency))
        console.print(table)
