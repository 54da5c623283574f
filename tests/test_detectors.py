"""Tests for subscription and gray charge detection."""

from datetime import date
from decimal import Decimal

from fincoach.core.models import Confidence, Transaction
from fincoach.engine.detectors import (
    detect_gray_charges,
    detect_recurring_charges,
    group_recurring_candidates,
    is_monthly_cadence,
    set_subscription_flag,
)


def _charge(d: date, amount: str, merchant: str | None = "Netflix", description: str = "NETFLIX.COM") -> Transaction:
    return Transaction(
        date=d,
        description=description,
        merchant=merchant,
        amount=Decimal(amount),
        category="Entertainment",
    )


class TestGroupRecurringCandidates:
    """Tests for group_recurring_candidates function."""

    def test_key_is_lowercased_merchant_and_rounded_amount(self) -> None:
        """Test grouping key normalization."""
        transactions = [
            _charge(date(2024, 1, 5), "-15.99", merchant="Netflix"),
            _charge(date(2024, 2, 5), "-16.20", merchant="NETFLIX"),
            _charge(date(2024, 3, 5), "-15.49", merchant="netflix"),
        ]
        groups = group_recurring_candidates(transactions)
        assert set(groups) == {("netflix", 16), ("netflix", 15)}
        assert len(groups[("netflix", 16)]) == 2

    def test_half_rounds_up(self) -> None:
        """Test that x.50 rounds to the next whole unit."""
        groups = group_recurring_candidates([_charge(date(2024, 1, 5), "-15.50")])
        assert list(groups) == [("netflix", 16)]

    def test_skips_missing_merchant_and_zero_amount(self) -> None:
        """Test that merchantless and zero transactions are not grouped."""
        transactions = [
            _charge(date(2024, 1, 5), "-15.99", merchant=None),
            _charge(date(2024, 1, 6), "-15.99", merchant="  "),
            _charge(date(2024, 1, 7), "0.00"),
        ]
        assert group_recurring_candidates(transactions) == {}


class TestIsMonthlyCadence:
    """Tests for is_monthly_cadence function."""

    def test_boundaries_inclusive(self) -> None:
        """Test that gaps of exactly 20 and 40 days pass."""
        dates = [date(2024, 1, 1), date(2024, 1, 21), date(2024, 3, 1)]
        assert is_monthly_cadence(dates)

    def test_gap_below_range(self) -> None:
        """Test that a 19-day gap fails."""
        assert not is_monthly_cadence([date(2024, 1, 1), date(2024, 1, 20)])

    def test_gap_above_range(self) -> None:
        """Test that a 41-day gap fails."""
        assert not is_monthly_cadence([date(2024, 1, 1), date(2024, 2, 11)])

    def test_sorts_dates(self) -> None:
        """Test that input order does not matter."""
        dates = [date(2024, 3, 5), date(2024, 1, 5), date(2024, 2, 5)]
        assert is_monthly_cadence(dates)


class TestDetectRecurringCharges:
    """Tests for detect_recurring_charges function."""

    def test_empty(self) -> None:
        """Test with no transactions."""
        assert detect_recurring_charges([]) == []

    def test_monthly_netflix(self) -> None:
        """Test three monthly charges produce one detection."""
        transactions = [
            _charge(date(2024, 1, 5), "-15.99"),
            _charge(date(2024, 2, 4), "-15.99"),
            _charge(date(2024, 3, 6), "-15.99"),
        ]
        detected = detect_recurring_charges(transactions)

        assert len(detected) == 1
        record = detected[0]
        assert record.merchant == "Netflix"
        assert record.amount == Decimal("15.99")
        assert record.count == 3
        assert record.confidence == "high"
        assert record.confidence is Confidence.HIGH
        assert record.reason

    def test_single_irregular_gap_disqualifies(self) -> None:
        """Test that one gap outside 20..40 days drops the group."""
        transactions = [
            _charge(date(2024, 1, 5), "-15.99"),
            _charge(date(2024, 2, 4), "-15.99"),
            _charge(date(2024, 4, 20), "-15.99"),
        ]
        assert detect_recurring_charges(transactions) == []

    def test_needs_three_occurrences(self) -> None:
        """Test that two monthly charges are not enough."""
        transactions = [
            _charge(date(2024, 1, 5), "-15.99"),
            _charge(date(2024, 2, 4), "-15.99"),
        ]
        assert detect_recurring_charges(transactions) == []

    def test_uses_first_member_not_average(self) -> None:
        """Test merchant spelling and amount come from the first charge."""
        transactions = [
            _charge(date(2024, 1, 5), "-10.20", merchant="Spotify"),
            _charge(date(2024, 2, 5), "-9.80", merchant="SPOTIFY"),
            _charge(date(2024, 3, 5), "-10.00", merchant="spotify"),
        ]
        detected = detect_recurring_charges(transactions)

        assert len(detected) == 1
        assert detected[0].merchant == "Spotify"
        assert detected[0].amount == Decimal("10.20")

    def test_independent_groups(self) -> None:
        """Test that each qualifying group yields its own record."""
        transactions = []
        for month in (1, 2, 3):
            transactions.append(_charge(date(2024, month, 5), "-15.99", merchant="Netflix"))
            transactions.append(_charge(date(2024, month, 12), "-49.00", merchant="Gym"))
            transactions.append(_charge(date(2024, month, 20 + month * 2), "-30.00", merchant="Cafe"))
        transactions.append(_charge(date(2024, 3, 1), "-30.00", merchant="Cafe"))

        merchants = sorted(r.merchant for r in detect_recurring_charges(transactions))
        assert merchants == ["Gym", "Netflix"]

    def test_idempotent(self) -> None:
        """Test that repeated calls give identical results."""
        transactions = [
            _charge(date(2024, 1, 5), "-15.99"),
            _charge(date(2024, 2, 4), "-15.99"),
            _charge(date(2024, 3, 6), "-15.99"),
        ]
        first = [d.model_dump_json() for d in detect_recurring_charges(transactions)]
        second = [d.model_dump_json() for d in detect_recurring_charges(transactions)]
        assert first == second
        assert len(first) == 1


class TestDetectGrayCharges:
    """Tests for detect_gray_charges function."""

    def test_small_processing_fee(self) -> None:
        """Test a small fee is flagged with medium confidence."""
        tx = _charge(date(2024, 1, 5), "-4.50", merchant=None, description="Processing Fee")
        detected = detect_gray_charges([tx])

        assert len(detected) == 1
        assert detected[0].amount == Decimal("4.50")
        assert detected[0].confidence == "medium"
        assert detected[0].merchant == "Unknown"
        assert detected[0].description == "Processing Fee"

    def test_large_fee_not_flagged(self) -> None:
        """Test that amounts above 10 are not gray charges."""
        tx = _charge(date(2024, 1, 5), "-50.00", description="Processing Fee")
        assert detect_gray_charges([tx]) == []

    def test_amount_boundary(self) -> None:
        """Test that exactly 10 qualifies and 10.01 does not."""
        transactions = [
            _charge(date(2024, 1, 5), "-10.00", description="Service charge"),
            _charge(date(2024, 1, 6), "-10.01", description="Service charge"),
            _charge(date(2024, 1, 7), "0.00", description="Service charge"),
        ]
        detected = detect_gray_charges(transactions)
        assert [d.amount for d in detected] == [Decimal("10.00")]

    def test_requires_keyword(self) -> None:
        """Test that small purchases without fee-like wording pass."""
        tx = _charge(date(2024, 1, 5), "-3.00", description="Bagel")
        assert detect_gray_charges([tx]) == []

    def test_keyword_matches_inside_words(self) -> None:
        """Test that keywords match as substrings: 'Coffee' contains 'fee'."""
        tx = _charge(date(2024, 1, 5), "-3.00", merchant="Cafe", description="Coffee")
        detected = detect_gray_charges([tx])
        assert [(d.merchant, d.amount) for d in detected] == [("Cafe", Decimal("3.00"))]

    def test_idempotent(self) -> None:
        """Test that repeated calls give identical results."""
        transactions = [
            _charge(date(2024, 1, 5), "-4.50", description="Processing Fee"),
            _charge(date(2024, 2, 5), "-1.00", merchant=None, description="Service charge"),
        ]
        first = [d.model_dump_json() for d in detect_gray_charges(transactions)]
        second = [d.model_dump_json() for d in detect_gray_charges(transactions)]
        assert first == second
        assert len(first) == 2

    def test_keyword_case_insensitive(self) -> None:
        """Test keyword matching ignores case."""
        tx = _charge(date(2024, 1, 5), "-1.99", merchant="Bank", description="MONTHLY SERVICE")
        detected = detect_gray_charges([tx])
        assert len(detected) == 1
        assert detected[0].merchant == "Bank"

    def test_every_occurrence_reported(self) -> None:
        """Test that a recurring fee appears once per charge."""
        transactions = [
            _charge(date(2024, m, 1), "-2.00", merchant="Bank", description="Account fee")
            for m in (1, 2, 3)
        ]
        assert len(detect_gray_charges(transactions)) == 3


class TestSetSubscriptionFlag:
    """Tests for set_subscription_flag function."""

    def test_returns_new_list_and_leaves_input(self) -> None:
        """Test that matching charges are copied with the new flag."""
        original = [
            _charge(date(2024, 1, 5), "-15.99").model_copy(update={"is_subscription": True}),
            _charge(date(2024, 1, 6), "-9.99").model_copy(update={"is_subscription": True}),
            _charge(date(2024, 1, 7), "-15.99", merchant="Hulu").model_copy(
                update={"is_subscription": True}
            ),
        ]
        updated = set_subscription_flag(original, "Netflix", Decimal("15.99"), False)

        assert [tx.is_subscription for tx in updated] == [False, True, True]
        assert all(tx.is_subscription for tx in original)
        assert updated[1] is original[1]
