"""Tests for dashboard assembly."""

import json
from datetime import date
from decimal import Decimal

from openai import OpenAIError

from fincoach.core.models import Goal, GoalStatus, Snapshot, Transaction
from fincoach.dashboard.data_provider import (
    NO_DATA_GOAL_INSIGHT,
    DashboardDataProvider,
    build_dashboard_summary,
    build_detection_report,
    build_insight_request,
)
from fincoach.engine.calculator import compute_spending_summary
from fincoach.insights.generator import DEFAULT_MAIN_INSIGHT, InsightGenerator

from conftest import ChatStub

GOAL = Goal(
    name="Laptop",
    target_amount=Decimal("1500"),
    deadline=date(2024, 9, 1),
    created_at=date(2024, 1, 1),
)


def _transactions() -> list[Transaction]:
    transactions = []
    for month in (1, 2, 3):
        transactions += [
            Transaction(
                date=date(2024, month, 1),
                description="Payroll",
                amount=Decimal("2000"),
                category="Income",
            ),
            Transaction(
                date=date(2024, month, 5),
                description="NETFLIX.COM",
                merchant="Netflix",
                amount=Decimal("-15.99"),
                category="Subscriptions",
                is_subscription=True,
            ),
            Transaction(
                date=date(2024, month, 9),
                description="Account service fee",
                merchant="Bank",
                amount=Decimal("-2.00"),
                category="Bills",
            ),
        ]
    transactions.append(
        Transaction(
            date=date(2024, 3, 20),
            description="Groceries",
            merchant="Safeway",
            amount=Decimal("-300.00"),
            category="Groceries",
        )
    )
    return transactions


class TestDashboardSummary:
    """Tests for DashboardDataProvider.get_dashboard_summary."""

    def test_no_transactions(self, llm_settings) -> None:
        """Test the empty state: no insight request, unknown goals."""
        stub = ChatStub(reply="{}")
        generator = InsightGenerator(settings=llm_settings, client=stub)

        summary = build_dashboard_summary([], [GOAL], date(2024, 6, 1), generator)

        assert stub.calls == []
        assert summary.total_spending == Decimal(0)
        assert summary.projected_savings == Decimal(0)
        assert summary.active_goals == 1
        assert summary.most_spent_category is None
        assert summary.month_over_month_change_pct is None
        assert summary.current_month_label is None
        assert summary.main_insight == ""
        assert summary.goal_insight == NO_DATA_GOAL_INSIGHT
        assert summary.saving_suggestion == ""
        assert summary.coach_feed == []
        assert summary.enriched_goals[0].status == GoalStatus.UNKNOWN

    def test_no_transactions_no_goals(self) -> None:
        """Test an entirely empty snapshot."""
        summary = DashboardDataProvider(Snapshot()).get_dashboard_summary(date(2024, 6, 1))
        assert summary.active_goals == 0
        assert summary.enriched_goals == []

    def test_with_generated_insights(self, llm_settings) -> None:
        """Test figures and generated text are combined."""
        reply = json.dumps(
            {
                "mainInsight": "Groceries dominate March.",
                "goalInsight": "Laptop is on track.",
                "savingSuggestion": "Review the bank fee.",
                "coachFeed": ["Tip"],
            }
        )
        stub = ChatStub(reply=reply)
        provider = DashboardDataProvider(
            Snapshot(transactions=_transactions(), goals=[GOAL]),
            InsightGenerator(settings=llm_settings, client=stub),
        )

        summary = provider.get_dashboard_summary(date(2024, 3, 25))

        assert summary.current_month_label == "March 2024"
        assert summary.total_spending == Decimal("317.99")
        assert summary.current_month_spending == Decimal("317.99")
        assert summary.last_month_spending == Decimal("17.99")
        assert summary.most_spent_category.name == "Groceries"
        assert summary.subscriptions.total_monthly == Decimal("47.97")
        assert summary.main_insight == "Groceries dominate March."
        assert summary.coach_feed == ["Tip"]
        assert summary.insights_fallback is False
        # (1982.01 + 1982.01 + 1682.01) / 3
        assert summary.projected_savings == Decimal("1882.01")
        assert summary.enriched_goals[0].status == GoalStatus.ON_TRACK
        assert len(stub.calls) == 1

    def test_collaborator_failure_keeps_analytics(self, llm_settings) -> None:
        """Test that a failing collaborator only affects the text fields."""
        generator = InsightGenerator(
            settings=llm_settings, client=ChatStub(error=OpenAIError("down"))
        )
        summary = build_dashboard_summary(_transactions(), [GOAL], date(2024, 3, 25), generator)

        assert summary.insights_fallback is True
        assert summary.main_insight == DEFAULT_MAIN_INSIGHT
        assert summary.coach_feed == []
        assert summary.current_month_spending == Decimal("317.99")
        assert summary.enriched_goals[0].months_left == 6


def test_build_insight_request() -> None:
    """Test the structured summary sent to the collaborator."""
    transactions = _transactions()
    spending = compute_spending_summary(transactions)
    provider = DashboardDataProvider(Snapshot(transactions=transactions, goals=[GOAL]))

    request = build_insight_request(spending, provider.get_enriched_goals(date(2024, 3, 25)))

    assert request.total_spending == Decimal("317.99")
    assert request.subscriptions_total == Decimal("47.97")
    assert request.transaction_count == 10
    assert request.category_totals["Bills"] == Decimal("6.00")
    assert [g.name for g in request.goals] == ["Laptop"]
    assert request.goals[0].required_per_month == Decimal(250)


def test_detection_report_sorts_by_date() -> None:
    """Test both detectors run over date-ordered transactions."""
    transactions = list(reversed(_transactions()))
    report = build_detection_report(transactions)

    # The monthly bank fee recurs too, so it is both a subscription and a gray charge
    assert [(d.merchant, d.count) for d in report.detected_subscriptions] == [
        ("Netflix", 3),
        ("Bank", 3),
    ]
    assert [g.merchant for g in report.gray_charges] == ["Bank", "Bank", "Bank"]
    assert [g.amount for g in report.gray_charges] == [Decimal("2.00")] * 3
