"""Spending calculation engine.

Buckets transactions by calendar month and computes spending aggregates
relative to a reference month. All functions are pure.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from fincoach.core.models import (
    MonthlyBucket,
    MostSpentCategory,
    SpendingSummary,
    SubscriptionItem,
    SubscriptionsSummary,
    Transaction,
)
from fincoach.engine.periods import MonthKey, format_month, month_key, previous_month

# Number of most recent months used for the trailing savings average
SAVINGS_WINDOW = 3


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def bucketize_by_month(transactions: Iterable[Transaction]) -> dict[MonthKey, MonthlyBucket]:
    """Group transactions into calendar-month buckets.

    Args:
        transactions: Transactions in any order.

    Returns:
        Mapping of (year, month) to a MonthlyBucket with income (sum of
        positive amounts) and expenses (sum of absolute negative amounts).
        Zero-amount transactions create no bucket.
    """
    buckets: dict[MonthKey, MonthlyBucket] = {}

    for tx in transactions:
        if tx.amount == 0:
            continue

        key = month_key(tx.date)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = MonthlyBucket(year=key[0], month=key[1])

        if tx.amount > 0:
            bucket.income += tx.amount
        else:
            bucket.expenses += abs(tx.amount)

    return buckets


def latest_transaction_date(transactions: Iterable[Transaction]) -> date | None:
    """Return the date of the most recent transaction, None if empty."""
    return max((tx.date for tx in transactions), default=None)


def calculate_change_pct(current: Decimal, previous: Decimal) -> Decimal | None:
    """Percent change from previous to current.

    Returns:
        (current - previous) / previous * 100, or None if previous is 0.
    """
    if previous == 0:
        return None
    return (current - previous) / previous * 100


def category_totals(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Total expense per category.

    Categories are grouped case-insensitively; the first spelling seen is
    used as the key. Income transactions are excluded.
    """
    totals: dict[str, Decimal] = {}
    display: dict[str, str] = {}

    for tx in transactions:
        if tx.amount >= 0:
            continue
        norm = tx.category.casefold()
        name = display.setdefault(norm, tx.category)
        totals[name] = totals.get(name, Decimal(0)) + abs(tx.amount)

    return totals


def find_most_spent_category(totals: dict[str, Decimal]) -> MostSpentCategory | None:
    """Pick the category with the largest total.

    The maximum is only replaced on strict improvement, so on a tie the
    category that comes first in ``totals`` wins.
    """
    grand_total = sum(totals.values(), Decimal(0))

    best: MostSpentCategory | None = None
    best_amount = Decimal(0)
    for name, amount in totals.items():
        if amount > best_amount:
            best_amount = amount
            percent = round_half_up(amount / grand_total * 100) if grand_total > 0 else 0
            best = MostSpentCategory(name=name, amount=amount, percent=percent)

    return best


def summarize_subscriptions(transactions: Iterable[Transaction]) -> SubscriptionsSummary:
    """Roll up expenses flagged as subscriptions.

    Grouped by merchant, or by description when the merchant is absent.
    The yearly total is the monthly total times twelve.
    """
    amounts: dict[str, Decimal] = {}
    display: dict[str, str] = {}

    for tx in transactions:
        if not tx.is_subscription or tx.amount >= 0:
            continue
        label = tx.merchant or tx.description
        name = display.setdefault(label.casefold(), label)
        amounts[name] = amounts.get(name, Decimal(0)) + abs(tx.amount)

    items = [
        SubscriptionItem(merchant=merchant, monthly_amount=amount)
        for merchant, amount in amounts.items()
    ]
    total_monthly = sum((item.monthly_amount for item in items), Decimal(0))

    return SubscriptionsSummary(
        items=items,
        total_monthly=total_monthly,
        total_yearly=total_monthly * 12,
    )


def compute_spending_summary(
    transactions: Sequence[Transaction],
    reference_date: date | None = None,
) -> SpendingSummary:
    """Compute spending aggregates for the reference month.

    Args:
        transactions: Full transaction snapshot.
        reference_date: Date whose month is "current". Defaults to the date
            of the latest transaction; the system clock is never used.

    Returns:
        SpendingSummary. Empty input gives an all-zero summary.
    """
    if reference_date is None:
        reference_date = latest_transaction_date(transactions)

    totals = category_totals(transactions)
    subscriptions = summarize_subscriptions(transactions)

    total_income = sum((tx.amount for tx in transactions if tx.amount > 0), Decimal(0))
    total_expenses = sum((abs(tx.amount) for tx in transactions if tx.amount < 0), Decimal(0))

    if reference_date is None:
        return SpendingSummary(
            category_totals=totals,
            subscriptions=subscriptions,
            transaction_count=len(transactions),
        )

    current_key = month_key(reference_date)
    last_key = previous_month(current_key)
    buckets = bucketize_by_month(transactions)

    current = buckets[current_key].expenses if current_key in buckets else Decimal(0)
    last = buckets[last_key].expenses if last_key in buckets else Decimal(0)

    return SpendingSummary(
        reference_date=reference_date,
        current_month_label=format_month(current_key),
        current_month_spending=current,
        last_month_spending=last,
        month_over_month_change_pct=calculate_change_pct(current, last),
        total_income=total_income,
        total_expenses=total_expenses,
        category_totals=totals,
        most_spent_category=find_most_spent_category(totals),
        subscriptions=subscriptions,
        transaction_count=len(transactions),
    )


def average_monthly_net_savings(
    transactions: Sequence[Transaction],
    window: int = SAVINGS_WINDOW,
) -> Decimal:
    """Trailing average of monthly net savings.

    Averages income - expenses over the ``window`` most recent calendar
    months that have transactions (fewer if history is shorter). With no
    monthly buckets at all, falls back to all-time income - expenses.
    """
    buckets = bucketize_by_month(transactions)

    if not buckets:
        income = sum((tx.amount for tx in transactions if tx.amount > 0), Decimal(0))
        expenses = sum((abs(tx.amount) for tx in transactions if tx.amount < 0), Decimal(0))
        return income - expenses

    recent = [buckets[key].net for key in sorted(buckets)[-window:]]
    return sum(recent, Decimal(0)) / len(recent)
