"""
Tests for the pure balance calculator.

No database: these cover the sign conventions, the exact
balancing rule and the Posting variant on their own.
"""

from decimal import Decimal

import pytest

from bookkeeping.errors import InvalidEntry
from bookkeeping.models.enums import AccountType, EntryType
from bookkeeping.models.types import MONEY_MAX
from bookkeeping.services.balance_calculator import (
    Posting,
    balance_delta,
    is_balanced,
    split_for_display,
    totals,
)


class TestBalanceDelta:

    @pytest.mark.parametrize("account_type", [AccountType.ASSET, AccountType.EXPENSE])
    def test_debit_normal_types(self, account_type):
        """Asset and expense: +debit - credit."""
        assert balance_delta(
            account_type, Decimal("100.00"), Decimal("30.00")
        ) == Decimal("70.00")

    @pytest.mark.parametrize(
        "account_type",
        [AccountType.LIABILITY, AccountType.EQUITY, AccountType.REVENUE],
    )
    def test_credit_normal_types(self, account_type):
        """Liability, equity, revenue: +credit - debit."""
        assert balance_delta(
            account_type, Decimal("100.00"), Decimal("30.00")
        ) == Decimal("-70.00")

    def test_credit_increases_liability(self):
        assert balance_delta(
            AccountType.LIABILITY, Decimal("0"), Decimal("250.00")
        ) == Decimal("250.00")


class TestIsBalanced:

    def test_equal_totals_balance(self):
        entries = [Posting.debit(Decimal("500.00")), Posting.credit(Decimal("500.00"))]
        assert is_balanced(entries) is True

    def test_unequal_totals_do_not_balance(self):
        entries = [Posting.debit(Decimal("100.00")), Posting.credit(Decimal("90.00"))]
        assert is_balanced(entries) is False

    def test_exact_comparison_has_no_tolerance(self):
        """A single ten-thousandth is enough to unbalance."""
        entries = [
            Posting.debit(Decimal("100.0001")),
            Posting.credit(Decimal("100.00")),
        ]
        assert is_balanced(entries) is False

    def test_amounts_that_fail_in_float_still_balance(self):
        """0.1 + 0.2 == 0.3 holds for Decimal, not for float."""
        entries = [
            Posting.debit(Decimal("0.1")),
            Posting.debit(Decimal("0.2")),
            Posting.credit(Decimal("0.3")),
        ]
        assert is_balanced(entries) is True

    def test_totals_split_sides(self):
        entries = [
            Posting.debit(Decimal("40.00")),
            Posting.debit(Decimal("60.00")),
            Posting.credit(Decimal("100.00")),
        ]
        assert totals(entries) == (Decimal("100.00"), Decimal("100.00"))


class TestSplitForDisplay:

    def test_asset_balance_in_debit_column(self):
        assert split_for_display(
            AccountType.ASSET, Decimal("500.00")
        ) == (Decimal("500.00"), Decimal("0"))

    def test_revenue_balance_in_credit_column(self):
        assert split_for_display(
            AccountType.REVENUE, Decimal("500.00")
        ) == (Decimal("0"), Decimal("500.00"))

    def test_zero_balance(self):
        assert split_for_display(
            AccountType.LIABILITY, Decimal("0")
        ) == (Decimal("0"), Decimal("0"))

    def test_overdrawn_asset_moves_to_credit_column(self):
        assert split_for_display(
            AccountType.ASSET, Decimal("-20.00")
        ) == (Decimal("0"), Decimal("20.00"))

    def test_negative_liability_moves_to_debit_column(self):
        assert split_for_display(
            AccountType.LIABILITY, Decimal("-15.00")
        ) == (Decimal("15.00"), Decimal("0"))


class TestPosting:

    def test_debit_from_amounts(self):
        posting = Posting.from_amounts(Decimal("10.00"), None)
        assert posting.side == EntryType.DEBIT
        assert posting.debit_amount == Decimal("10.00")
        assert posting.credit_amount == Decimal("0")

    def test_zero_on_other_side_is_allowed(self):
        posting = Posting.from_amounts(Decimal("0"), Decimal("10.00"))
        assert posting.side == EntryType.CREDIT

    def test_both_sides_rejected(self):
        with pytest.raises(InvalidEntry, match="both"):
            Posting.from_amounts(Decimal("10.00"), Decimal("10.00"))

    def test_neither_side_rejected(self):
        with pytest.raises(InvalidEntry, match="either"):
            Posting.from_amounts(None, Decimal("0"))

    def test_negative_amount_rejected(self):
        with pytest.raises(InvalidEntry, match="positive"):
            Posting.from_amounts(Decimal("-5.00"), None)

    def test_float_rejected(self):
        with pytest.raises(InvalidEntry, match="Decimal"):
            Posting.debit(10.5)

    def test_more_than_four_places_rejected(self):
        with pytest.raises(InvalidEntry, match="decimal places"):
            Posting.credit(Decimal("1.00001"))

    def test_trailing_zeros_beyond_scale_accepted(self):
        assert Posting.credit(Decimal("1.500000")).amount == Decimal("1.5")

    def test_largest_storable_amount_accepted(self):
        assert Posting.debit(MONEY_MAX).amount == MONEY_MAX

    def test_amount_beyond_storable_range_rejected(self):
        with pytest.raises(InvalidEntry, match="exceeds the maximum"):
            Posting.debit(Decimal("1000000000000000"))
