"""Implementation of 'fincoach goals' command."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from fincoach.cli.utils import format_currency, open_snapshot, parse_today
from fincoach.core.config import get_settings
from fincoach.core.models import GoalStatus
from fincoach.dashboard import DashboardDataProvider

console = Console()

_STATUS_STYLE = {
    GoalStatus.ON_TRACK: "green",
    GoalStatus.BEHIND: "red",
    GoalStatus.UNKNOWN: "yellow",
}


def goals_command(
    snapshot: Path = typer.Argument(..., help="Snapshot JSON file"),
    today: str = typer.Option(
        None,
        "--today",
        "-t",
        help="Reference date for forecasts (default: today)",
    ),
) -> None:
    """Forecast progress towards each savings goal."""
    data = open_snapshot(snapshot, console)
    ref = parse_today(today, console)
    currency = get_settings().currency

    goals = DashboardDataProvider(data).get_enriched_goals(ref)
    if not goals:
        console.print("[yellow]No goals defined[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Goal forecast as of {ref.isoformat()}")
    table.add_column("Goal")
    table.add_column("Target", justify="right")
    table.add_column("Months left", justify="right")
    table.add_column("Required / month", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Status")

    for goal in goals:
        style = _STATUS_STYLE[goal.status]
        table.add_row(
            goal.name,
            format_currency(goal.target_amount, currency),
            str(goal.months_left),
            format_currency(goal.required_per_month, currency),
            f"{goal.progress_pct}%",
            f"[{style}]{goal.status.value}[/{style}]",
        )

    console.print(table)
    if goals[0].status != GoalStatus.UNKNOWN:
        console.print(
            f"Average monthly savings: {format_currency(goals[0].avg_monthly_savings, currency)}"
        )
