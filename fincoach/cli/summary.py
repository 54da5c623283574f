"""Implementation of 'fincoach summary' command.

Shows spending for the latest month, the top category, subscriptions,
goal forecasts and coaching insights.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from fincoach.cli.utils import format_currency, format_percentage, open_snapshot, parse_today
from fincoach.core.config import get_settings
from fincoach.dashboard import DashboardDataProvider

console = Console()


def summary_command(
    snapshot: Path = typer.Argument(..., help="Snapshot JSON file"),
    today: str = typer.Option(
        None,
        "--today",
        "-t",
        help="Reference date for goal forecasts (default: today)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show the dashboard summary for a snapshot."""
    data = open_snapshot(snapshot, console)
    ref = parse_today(today, console)
    currency = get_settings().currency

    summary = DashboardDataProvider(data).get_dashboard_summary(ref)

    if as_json:
        typer.echo(summary.model_dump_json(indent=2))
        return

    console.print()
    title = summary.current_month_label or "No transactions yet"
    console.print(Panel(f"[bold]Spending summary: {title}[/bold]", style="cyan"))
    console.print()

    console.print("[bold]Spending[/bold]")
    console.print(f"  This month:   {format_currency(summary.current_month_spending, currency):>12}")
    console.print(f"  Last month:   {format_currency(summary.last_month_spending, currency):>12}")
    console.print(f"  Change:       {format_percentage(summary.month_over_month_change_pct):>12}")
    console.print(f"  Avg savings:  {format_currency(summary.projected_savings, currency):>12} / month")
    console.print()

    if summary.most_spent_category:
        top = summary.most_spent_category
        console.print(
            f"[bold]Top category:[/bold] {top.name} "
            f"{format_currency(top.amount, currency)} ({top.percent}%)"
        )
        console.print()

    subs = summary.subscriptions
    if subs.items:
        console.print("[bold]Subscriptions[/bold]")
        for item in subs.items:
            console.print(f"  {item.merchant}: {format_currency(item.monthly_amount, currency)}")
        console.print(
            f"  Total: {format_currency(subs.total_monthly, currency)} / month, "
            f"{format_currency(subs.total_yearly, currency)} / year"
        )
        console.print()

    if summary.enriched_goals:
        console.print(f"[bold]Goals ({summary.active_goals})[/bold]")
        for goal in summary.enriched_goals:
            console.print(
                f"  {goal.name}: {goal.progress_pct}% "
                f"({goal.status.value}, {goal.months_left} months left)"
            )
        console.print()

    console.print("[bold]Coach[/bold]")
    for text in (summary.main_insight, summary.goal_insight, summary.saving_suggestion):
        if text:
            console.print(f"  {text}")
    for tip in summary.coach_feed:
        console.print(f"  - {tip}")
    if summary.insights_fallback:
        console.print("[dim]Insight service unavailable, showing default tips[/dim]")
