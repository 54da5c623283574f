"""FinCoach command-line entry point."""

import typer

from fincoach.cli.categorize import categorize_command
from fincoach.cli.detect import detect_command
from fincoach.cli.goals import goals_command
from fincoach.cli.summary import summary_command
from fincoach.cli.unmark import unmark_command
from fincoach.core.config import get_settings
from fincoach.logging_setup import configure_logging

app = typer.Typer(
    name="fincoach",
    help="Spending analytics, subscription detection and savings goal forecasts.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: FINCOACH_LOG_LEVEL or INFO)",
    ),
) -> None:
    """FinCoach: understand where your money goes."""
    configure_logging(log_level or get_settings().log_level)


app.command(name="summary")(summary_command)
app.command(name="detect")(detect_command)
app.command(name="goals")(goals_command)
app.command(name="unmark")(unmark_command)
app.command(name="categorize")(categorize_command)


if __name__ == "__main__":
    app()
