"""Subscription and gray charge detection.

Recurring detection is deliberately strict: a single irregular gap
disqualifies a merchant/amount group, trading missed subscriptions for
fewer false positives.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from fincoach.core.models import (
    Confidence,
    GrayChargeDetection,
    RecurringDetection,
    Transaction,
)
from fincoach.engine.calculator import round_half_up

RecurringKey = tuple[str, int]

MIN_OCCURRENCES = 3
MIN_GAP_DAYS = 20
MAX_GAP_DAYS = 40

GRAY_CHARGE_MAX_AMOUNT = Decimal(10)
GRAY_CHARGE_KEYWORDS = ("fee", "charge", "service", "processing")

RECURRING_REASON = "Recurring monthly charge detected across multiple months"
GRAY_CHARGE_REASON = "Small unexplained transaction, possible gray charge"
UNKNOWN_MERCHANT = "Unknown"


def group_recurring_candidates(
    transactions: Iterable[Transaction],
) -> dict[RecurringKey, list[Transaction]]:
    """Group transactions by (lowercased merchant, rounded absolute amount).

    Transactions without a merchant or with a zero amount are skipped.
    Groups keep the order in which their members were encountered.
    """
    groups: dict[RecurringKey, list[Transaction]] = {}

    for tx in transactions:
        if not tx.merchant:
            continue
        amount = abs(tx.amount)
        if amount == 0:
            continue

        key = (tx.merchant.lower(), round_half_up(amount))
        groups.setdefault(key, []).append(tx)

    return groups


def is_monthly_cadence(dates: Iterable[date]) -> bool:
    """Check that every consecutive gap is within 20..40 days.

    Dates are sorted first. One gap outside the range fails the check.
    """
    ordered = sorted(dates)
    return all(
        MIN_GAP_DAYS <= (later - earlier).days <= MAX_GAP_DAYS
        for earlier, later in zip(ordered, ordered[1:])
    )


def detect_recurring_charges(transactions: Iterable[Transaction]) -> list[RecurringDetection]:
    """Find merchant/amount pairs charged at a monthly cadence.

    A group qualifies with at least three members whose gaps all pass
    is_monthly_cadence. The record uses the merchant and absolute amount
    of the group's first member, not an average.

    Returns:
        Detections in grouping order. Callers needing a stable order
        must sort explicitly.
    """
    detected: list[RecurringDetection] = []

    for members in group_recurring_candidates(transactions).values():
        if len(members) < MIN_OCCURRENCES:
            continue
        if not is_monthly_cadence(tx.date for tx in members):
            continue

        sample = members[0]
        detected.append(
            RecurringDetection(
                merchant=sample.merchant,
                amount=abs(sample.amount),
                count=len(members),
                confidence=Confidence.HIGH,
                reason=RECURRING_REASON,
            )
        )

    return detected


def is_gray_charge(tx: Transaction) -> bool:
    """Small (0 < |amount| <= 10) charge with a fee-like description."""
    amount = abs(tx.amount)
    if not 0 < amount <= GRAY_CHARGE_MAX_AMOUNT:
        return False
    description = tx.description.lower()
    return any(keyword in description for keyword in GRAY_CHARGE_KEYWORDS)


def detect_gray_charges(transactions: Iterable[Transaction]) -> list[GrayChargeDetection]:
    """Flag every small fee-like transaction.

    No grouping: a fee charged every month is reported once per charge.
    """
    return [
        GrayChargeDetection(
            merchant=tx.merchant or UNKNOWN_MERCHANT,
            description=tx.description,
            amount=abs(tx.amount),
            confidence=Confidence.MEDIUM,
            reason=GRAY_CHARGE_REASON,
        )
        for tx in transactions
        if is_gray_charge(tx)
    ]


def set_subscription_flag(
    transactions: Sequence[Transaction],
    merchant: str,
    amount: Decimal,
    flag: bool,
) -> list[Transaction]:
    """Return a copy of the snapshot with is_subscription set for a charge.

    Matches transactions whose merchant equals ``merchant`` and whose
    amount is the expense ``-abs(amount)``. The input is left untouched.
    """
    expense = -abs(amount)
    return [
        tx.model_copy(update={"is_subscription": flag})
        if tx.merchant == merchant and tx.amount == expense
        else tx
        for tx in transactions
    ]
