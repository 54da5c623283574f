"""Dashboard data provider.

Collects and combines all data needed for the dashboard view.
"""

from datetime import date

from fincoach.core.models import (
    DashboardSummary,
    DetectionReport,
    EnrichedGoal,
    Goal,
    GoalBrief,
    InsightRequest,
    Snapshot,
    SpendingSummary,
    Transaction,
)
from fincoach.engine.calculator import average_monthly_net_savings, compute_spending_summary
from fincoach.engine.detectors import detect_gray_charges, detect_recurring_charges
from fincoach.engine.forecaster import forecast_goals
from fincoach.insights.generator import InsightGenerator
from fincoach.logging_setup import get_logger

_logger = get_logger("fincoach.dashboard.data_provider")

NO_DATA_GOAL_INSIGHT = (
    "Once you upload some transactions, I can forecast how your goals are tracking."
)


class DashboardDataProvider:
    """Provides all data needed for the dashboard.

    Each call works on the snapshot it was given and keeps no state
    between calls, apart from the insight generator it holds.
    """

    def __init__(self, snapshot: Snapshot, generator: InsightGenerator | None = None):
        """Initialize data provider.

        Args:
            snapshot: Transactions and goals to analyze.
            generator: Insight generator. Built from settings on first use
                when omitted.
        """
        self.snapshot = snapshot
        self._generator = generator

    @property
    def generator(self) -> InsightGenerator:
        if self._generator is None:
            self._generator = InsightGenerator()
        return self._generator

    def get_detection_report(self) -> DetectionReport:
        """Run both detectors over the transactions, oldest first."""
        ordered = sorted(self.snapshot.transactions, key=lambda tx: tx.date)
        return DetectionReport(
            detected_subscriptions=detect_recurring_charges(ordered),
            gray_charges=detect_gray_charges(ordered),
        )

    def get_enriched_goals(self, today: date) -> list[EnrichedGoal]:
        return forecast_goals(self.snapshot.goals, self.snapshot.transactions, today)

    def get_dashboard_summary(self, today: date) -> DashboardSummary:
        """Get complete dashboard data.

        Args:
            today: Reference date for goal forecasts. Spending figures use
                the latest transaction's month instead.

        Returns:
            DashboardSummary. Without transactions the insight generator
            is not called and fixed empty-state text is returned.
        """
        transactions = self.snapshot.transactions
        enriched_goals = self.get_enriched_goals(today)

        if not transactions:
            return DashboardSummary(
                active_goals=len(enriched_goals),
                goal_insight=NO_DATA_GOAL_INSIGHT,
                enriched_goals=enriched_goals,
            )

        spending = compute_spending_summary(transactions)
        request = build_insight_request(spending, enriched_goals)
        outcome = self.generator.generate(request)
        if outcome.used_fallback:
            _logger.info("Dashboard built with fallback insights")

        return DashboardSummary(
            total_spending=spending.current_month_spending,
            projected_savings=average_monthly_net_savings(transactions),
            active_goals=len(enriched_goals),
            most_spent_category=spending.most_spent_category,
            subscriptions=spending.subscriptions,
            main_insight=outcome.insights.main_insight,
            goal_insight=outcome.insights.goal_insight,
            saving_suggestion=outcome.insights.saving_suggestion,
            coach_feed=list(outcome.insights.coach_feed),
            insights_fallback=outcome.used_fallback,
            current_month_spending=spending.current_month_spending,
            last_month_spending=spending.last_month_spending,
            month_over_month_change_pct=spending.month_over_month_change_pct,
            current_month_label=spending.current_month_label,
            enriched_goals=enriched_goals,
        )


def build_insight_request(
    spending: SpendingSummary,
    enriched_goals: list[EnrichedGoal],
) -> InsightRequest:
    """Summarize engine output for the insight generator."""
    return InsightRequest(
        total_spending=spending.current_month_spending,
        category_totals=dict(spending.category_totals),
        subscriptions_total=spending.subscriptions.total_monthly,
        transaction_count=spending.transaction_count,
        goals=[
            GoalBrief(
                name=g.name,
                target_amount=g.target_amount,
                months_left=g.months_left,
                required_per_month=g.required_per_month,
                status=g.status,
            )
            for g in enriched_goals
        ],
    )


def build_dashboard_summary(
    transactions: list[Transaction],
    goals: list[Goal],
    today: date,
    generator: InsightGenerator | None = None,
) -> DashboardSummary:
    """Convenience wrapper around DashboardDataProvider."""
    snapshot = Snapshot(transactions=transactions, goals=goals)
    return DashboardDataProvider(snapshot, generator).get_dashboard_summary(today)


def build_detection_report(transactions: list[Transaction]) -> DetectionReport:
    """Convenience wrapper running both detectors."""
    return DashboardDataProvider(Snapshot(transactions=transactions)).get_detection_report()
