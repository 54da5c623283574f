"""Savings goal forecasting.

Projects each goal against its deadline using the trailing average of
monthly net savings. The projection is shared: every goal assumes the
whole savings rate goes to it.
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from fincoach.core.models import EnrichedGoal, Goal, GoalStatus, Transaction
from fincoach.engine.calculator import average_monthly_net_savings, round_half_up
from fincoach.engine.periods import months_between


def calculate_months_left(deadline: date, today: date) -> int:
    """Calendar months until the deadline, never less than 1.

    Goals already past their deadline also get 1.
    """
    return max(1, months_between(today, deadline))


def calculate_progress_pct(amount_saved: Decimal, target: Decimal) -> int:
    """Saved share of the target as a whole percent in [0, 100]."""
    pct = round_half_up(amount_saved / target * 100)
    return min(100, max(0, pct))


def classify_goal_status(avg_monthly_savings: Decimal, required_per_month: Decimal) -> GoalStatus:
    """ON_TRACK when the savings rate covers the required rate, else BEHIND."""
    if avg_monthly_savings >= required_per_month:
        return GoalStatus.ON_TRACK
    return GoalStatus.BEHIND


def forecast_goal(goal: Goal, avg_monthly_savings: Decimal, today: date) -> EnrichedGoal:
    """Enrich one goal given the shared average savings rate.

    Args:
        goal: Validated goal (positive target).
        avg_monthly_savings: Trailing average net savings per month.
        today: Reference date for months left / months since creation.

    Returns:
        EnrichedGoal with amount_saved_so_far capped at the target.
    """
    months_left = calculate_months_left(goal.deadline, today)
    required = goal.target_amount / months_left

    months_since_creation = max(0, months_between(goal.created_at, today))
    saved = min(goal.target_amount, avg_monthly_savings * months_since_creation)

    return EnrichedGoal(
        **goal.model_dump(),
        months_left=months_left,
        required_per_month=required,
        avg_monthly_savings=avg_monthly_savings,
        amount_saved_so_far=saved,
        progress_pct=calculate_progress_pct(saved, goal.target_amount),
        status=classify_goal_status(avg_monthly_savings, required),
    )


def unknown_goal(goal: Goal, today: date) -> EnrichedGoal:
    """Enrich a goal when there is no transaction history to forecast from."""
    months_left = calculate_months_left(goal.deadline, today)
    return EnrichedGoal(
        **goal.model_dump(),
        months_left=months_left,
        required_per_month=goal.target_amount / months_left,
        avg_monthly_savings=Decimal(0),
        amount_saved_so_far=Decimal(0),
        progress_pct=0,
        status=GoalStatus.UNKNOWN,
    )


def forecast_goals(
    goals: Sequence[Goal],
    transactions: Sequence[Transaction],
    today: date,
) -> list[EnrichedGoal]:
    """Forecast every goal against the transaction history.

    The average savings rate is computed once and shared by all goals.
    With no transactions at all, every goal reports status UNKNOWN.
    """
    if not transactions:
        return [unknown_goal(goal, today) for goal in goals]

    avg = average_monthly_net_savings(transactions)
    return [forecast_goal(goal, avg, today) for goal in goals]
