"""Unit tests for the budget comfort score"""

import pytest
from decimal import Decimal
from finance_tracker.domain import budget


def test_monthly_equivalent_by_recurrence():
    assert budget.monthly_equivalent(Decimal("100"), "weekly") == Decimal("433")
    assert budget.monthly_equivalent(Decimal("10"), "daily") == Decimal("304.4")
    yearly = budget.monthly_equivalent(Decimal("1200"), "yearly")
    assert yearly.quantize(Decimal("0.01")) == Decimal("100.00")
    assert budget.monthly_equivalent(Decimal("75"), "monthly") == Decimal("75")
    assert budget.monthly_equivalent(Decimal("500"), "once") == Decimal("0")


def test_monthly_recurring_expenses_skips_one_off_bills(make_bill):
    bills = [
        make_bill(id="rent", amount=Decimal("1000"), recurring="monthly"),
        make_bill(id="coffee", amount=Decimal("20"), recurring="weekly"),
        make_bill(id="tv", amount=Decimal("800"), recurring="once"),
    ]
    assert budget.monthly_recurring_expenses(bills) == Decimal("1086.6")


def test_estimated_income_with_adjustment():
    assert budget.estimated_monthly_income(Decimal("1000")) == Decimal("1500")
    assert budget.estimated_monthly_income(Decimal("1000"), Decimal("-200")) == Decimal("1300")


@pytest.mark.parametrize(
    "income,expenses,expected",
    [
        ("1500", "1000", 95),  # default estimate, margin 1/3
        ("100", "80", 85),  # ratio 0.20
        ("100", "0", 100),  # capped
        ("100", "90", 70),  # ratio 0.10
        ("100", "85", 77),
        ("100", "100", 50),  # break-even
        ("100", "120", 25),
        ("100", "200", 0),  # floored
        ("0", "100", 50),  # no income treated as zero margin
    ],
)
def test_comfort_score_curve(income, expenses, expected):
    assert budget.comfort_score(Decimal(income), Decimal(expenses)) == expected


@pytest.mark.parametrize(
    "score,label",
    [
        (100, "Very Comfortable"),
        (85, "Very Comfortable"),
        (84, "Comfortable"),
        (70, "Comfortable"),
        (69, "Tight"),
        (50, "Tight"),
        (49, "Overextended"),
        (0, "Overextended"),
    ],
)
def test_comfort_label(score, label):
    assert budget.comfort_label(score) == label
