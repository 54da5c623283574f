"""Domain models for FinCoach.

All financial data structures are defined here using Pydantic v2 for validation.
Input models are frozen: the engine never mutates the snapshot it is given.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

DEFAULT_CATEGORY = "Uncategorized"


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class GoalStatus(str, Enum):
    """Forecast status of a savings goal.

    ON_TRACK: Average monthly savings cover the required monthly amount.
    BEHIND: Average monthly savings fall short of the required amount.
    UNKNOWN: No transaction history to forecast from.
    """

    ON_TRACK = "on_track"
    BEHIND = "behind"
    UNKNOWN = "unknown"


class Confidence(str, Enum):
    """How sure a detector is about a flagged charge."""

    HIGH = "high"
    MEDIUM = "medium"


# -----------------------------------------------------------------------------
# Input Models
# -----------------------------------------------------------------------------


class Transaction(BaseModel):
    """A single financial transaction.

    Attributes:
        date: Transaction date (no time-of-day semantics).
        description: Free-text description from the statement.
        merchant: Merchant name, None when the statement has none.
        amount: Signed amount. Negative = expense, positive = income.
        category: Spending category, defaults to "Uncategorized".
        is_subscription: True if a human flagged this as a subscription.

    Transactions are immutable. Toggling is_subscription produces a copy
    (see fincoach.engine.detectors.set_subscription_flag).
    """

    model_config = ConfigDict(frozen=True)

    date: date
    description: str
    merchant: str | None = None
    amount: Decimal
    category: str = DEFAULT_CATEGORY
    is_subscription: bool = False

    @field_validator("merchant", mode="before")
    @classmethod
    def blank_merchant_is_none(cls, value: object) -> object:
        """Treat empty merchant strings as absent."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("category", mode="before")
    @classmethod
    def blank_category_is_default(cls, value: object) -> object:
        """Fall back to the default category for empty values."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CATEGORY
        return value


class Goal(BaseModel):
    """A savings goal set by the user.

    target_amount must be positive; invalid goals are rejected here,
    before they ever reach the forecaster.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    target_amount: Annotated[Decimal, Field(gt=0)]
    deadline: date
    created_at: date


class Snapshot(BaseModel):
    """Everything the engine needs for one invocation."""

    transactions: list[Transaction] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Aggregated Data Models
# -----------------------------------------------------------------------------


class MonthlyBucket(BaseModel):
    """Income and expense totals for one calendar month."""

    year: int
    month: int = Field(ge=1, le=12)
    income: Decimal = Decimal(0)
    expenses: Decimal = Decimal(0)  # Absolute value of negative amounts

    @computed_field  # type: ignore[misc]
    @property
    def net(self) -> Decimal:
        """Net savings for the month (income - expenses)."""
        return self.income - self.expenses


class MostSpentCategory(BaseModel):
    """The category with the highest total expense."""

    name: str
    amount: Decimal
    percent: int  # Share of all categorized expense, rounded


class SubscriptionItem(BaseModel):
    """Flagged subscription spending for one merchant."""

    merchant: str
    monthly_amount: Decimal


class SubscriptionsSummary(BaseModel):
    """Roll-up of transactions flagged as subscriptions."""

    items: list[SubscriptionItem] = Field(default_factory=list)
    total_monthly: Decimal = Decimal(0)
    total_yearly: Decimal = Decimal(0)


class SpendingSummary(BaseModel):
    """Spending aggregates relative to a reference month.

    The reference month is the month of the latest transaction, so the
    summary is reproducible against historical data.
    """

    reference_date: date | None = None
    current_month_label: str | None = None  # "January 2024"

    current_month_spending: Decimal = Decimal(0)
    last_month_spending: Decimal = Decimal(0)
    month_over_month_change_pct: Decimal | None = None  # None when last month is 0

    total_income: Decimal = Decimal(0)
    total_expenses: Decimal = Decimal(0)

    category_totals: dict[str, Decimal] = Field(default_factory=dict)
    most_spent_category: MostSpentCategory | None = None
    subscriptions: SubscriptionsSummary = Field(default_factory=SubscriptionsSummary)

    transaction_count: int = 0


# -----------------------------------------------------------------------------
# Detection Models
# -----------------------------------------------------------------------------


class RecurringDetection(BaseModel):
    """A merchant/amount pair that recurs at a monthly cadence."""

    merchant: str
    amount: Decimal  # Absolute amount of the first occurrence
    count: int
    confidence: Confidence = Confidence.HIGH
    reason: str


class GrayChargeDetection(BaseModel):
    """A small fee-like charge that may have been overlooked."""

    merchant: str
    description: str
    amount: Decimal
    confidence: Confidence = Confidence.MEDIUM
    reason: str


class DetectionReport(BaseModel):
    """Output of both detectors over one snapshot."""

    detected_subscriptions: list[RecurringDetection] = Field(default_factory=list)
    gray_charges: list[GrayChargeDetection] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Forecast Models
# -----------------------------------------------------------------------------


class EnrichedGoal(Goal):
    """A goal with forecast fields, recomputed on every request.

    amount_saved_so_far is a projection from the average savings rate,
    not a ledger of contributions. Several goals share the same pool.
    """

    months_left: int = Field(ge=1)
    required_per_month: Decimal
    avg_monthly_savings: Decimal
    amount_saved_so_far: Decimal
    progress_pct: int = Field(ge=0, le=100)
    status: GoalStatus


# -----------------------------------------------------------------------------
# Insight Models
# -----------------------------------------------------------------------------


class GoalBrief(BaseModel):
    """Goal forecast fields shared with the insight generator."""

    name: str
    target_amount: Decimal
    months_left: int
    required_per_month: Decimal
    status: GoalStatus


class InsightRequest(BaseModel):
    """Structured summary sent to the insight generator."""

    total_spending: Decimal
    category_totals: dict[str, Decimal] = Field(default_factory=dict)
    subscriptions_total: Decimal = Decimal(0)
    transaction_count: int = 0
    goals: list[GoalBrief] = Field(default_factory=list)


class Insights(BaseModel):
    """Free-text coaching returned by the insight generator."""

    main_insight: str
    goal_insight: str
    saving_suggestion: str
    coach_feed: list[str] = Field(default_factory=list)


class InsightOutcome(BaseModel):
    """Result of asking the insight generator.

    Either the generated insights, or the fixed defaults together with
    the reason the generator could not be used.
    """

    insights: Insights
    used_fallback: bool = False
    error: str | None = None


# -----------------------------------------------------------------------------
# Dashboard Data Models
# -----------------------------------------------------------------------------


class DashboardSummary(BaseModel):
    """Complete data container for the dashboard view."""

    total_spending: Decimal = Decimal(0)  # Current month spending
    projected_savings: Decimal = Decimal(0)  # Average monthly net savings
    active_goals: int = 0
    most_spent_category: MostSpentCategory | None = None
    subscriptions: SubscriptionsSummary = Field(default_factory=SubscriptionsSummary)

    main_insight: str = ""
    goal_insight: str = ""
    saving_suggestion: str = ""
    coach_feed: list[str] = Field(default_factory=list)
    insights_fallback: bool = False

    current_month_spending: Decimal = Decimal(0)
    last_month_spending: Decimal = Decimal(0)
    month_over_month_change_pct: Decimal | None = None
    current_month_label: str | None = None

    enriched_goals: list[EnrichedGoal] = Field(default_factory=list)
