"""Unit tests for debt payoff projections"""

from datetime import date
from decimal import Decimal
from finance_tracker.domain import amortization
from finance_tracker.domain.models import Account
from finance_tracker.domain.rules import PayoffRules


def debt(make_bill, amount, interest, **overrides):
    return make_bill(
        10,
        amount=Decimal(amount),
        interest=Decimal(interest) if interest is not None else None,
        category="debt",
        recurring="monthly",
        **overrides,
    )


def test_standard_plan_zero_interest(make_bill, today):
    """$1000 at 0% with the 10% minimum pays off in 10 months"""
    plan = amortization.standard_plan(debt(make_bill, "1000", "0"), today)

    assert plan.strategy == "standard"
    assert plan.monthly_payment == Decimal("100")
    assert plan.months == 10
    assert plan.total_interest_paid == Decimal("0")
    assert plan.converged is True
    assert plan.payoff_date == date(2025, 1, 15)


def test_standard_plan_matches_direct_recurrence(make_bill, today):
    plan = amortization.standard_plan(debt(make_bill, "2500", "16.99"), today)

    balance = Decimal("2500")
    rate = Decimal("16.99") / Decimal(100) / Decimal(12)
    payment = Decimal("250")
    months, interest_total = 0, Decimal("0")
    while balance > 0:
        interest = balance * rate
        interest_total += interest
        balance = balance + interest - payment
        months += 1

    assert plan.months == months == 11
    assert plan.total_interest_paid == interest_total
    assert plan.converged is True


def test_lump_sum_covering_balance_pays_off_immediately(make_bill, today):
    plan = amortization.lump_sum_plan(debt(make_bill, "2500", "16.99"), Decimal("2500"), today)

    assert plan.months == 0
    assert plan.total_interest_paid == Decimal("0")
    assert plan.converged is True
    assert plan.payoff_date == today


def test_lump_sum_larger_than_balance(make_bill, today):
    plan = amortization.lump_sum_plan(debt(make_bill, "500", "10"), Decimal("900"), today)
    assert plan.months == 0
    assert plan.starting_balance == Decimal("0")


def test_lump_sum_plan_keeps_standard_payment(make_bill, today):
    plan = amortization.lump_sum_plan(debt(make_bill, "1000", "0"), Decimal("300"), today)

    assert plan.strategy == "lump_sum"
    assert plan.starting_balance == Decimal("700")
    assert plan.monthly_payment == Decimal("100")
    assert plan.months == 7


def test_increased_payment_plan(make_bill, today):
    plan = amortization.increased_payment_plan(
        debt(make_bill, "1000", "0"), Decimal("200"), Decimal("100"), today
    )

    assert plan.strategy == "increased_payment"
    assert plan.starting_balance == Decimal("800")
    assert plan.monthly_payment == Decimal("200")
    assert plan.months == 4


def test_payment_below_interest_hits_month_cap(today):
    """5% monthly interest on $1000 outgrows a $10 payment"""
    plan = amortization.simulate(Decimal("1000"), Decimal("60"), Decimal("10"), today)

    assert plan.months == 360
    assert plan.converged is False
    assert plan.payoff_date is None
    assert plan.total_interest_paid > 0


def test_month_cap_comes_from_rules(today):
    plan = amortization.simulate(
        Decimal("1000"), Decimal("0"), Decimal("10"), today, rules=PayoffRules(max_months=12)
    )
    assert plan.months == 12
    assert plan.converged is False


def test_missing_or_invalid_inputs_are_zeroed(today):
    assert amortization.simulate(Decimal("1000"), None, Decimal("100"), today).months == 10
    assert amortization.simulate(Decimal("1000"), Decimal("-5"), Decimal("100"), today).months == 10
    assert amortization.simulate(Decimal("1000"), "NaN", Decimal("100"), today).months == 10
    assert amortization.simulate(Decimal("1000"), "abc", Decimal("100"), today).months == 10


def test_non_positive_balance_is_immediate_payoff(today):
    for balance in (Decimal("0"), Decimal("-50")):
        plan = amortization.simulate(balance, Decimal("20"), Decimal("10"), today)
        assert plan.months == 0
        assert plan.converged is True
        assert plan.payoff_date == today


def test_negative_lump_sum_and_extra_are_ignored(make_bill, today):
    plan = amortization.increased_payment_plan(
        debt(make_bill, "1000", "0"), Decimal("-100"), Decimal("-50"), today
    )
    assert plan.starting_balance == Decimal("1000")
    assert plan.monthly_payment == Decimal("100")


def test_liquid_balance_counts_checking_and_savings():
    accounts = [
        Account(id="a1", name="Checking", type="checking", balance=Decimal("100")),
        Account(id="a2", name="Savings", type="savings", balance=Decimal("50")),
        Account(id="a3", name="Card", type="credit", balance=Decimal("-500")),
        Account(id="a4", name="Brokerage", type="investment", balance=Decimal("9000")),
    ]
    assert amortization.liquid_balance(accounts) == Decimal("150")


def test_affordability_check(make_bill):
    target = make_bill(5, id="loan", amount=Decimal("1000"), category="debt", recurring="monthly")
    bills = [
        target,
        make_bill(5, id="rent", amount=Decimal("300"), recurring="monthly"),
        make_bill(5, id="tv", amount=Decimal("1000"), recurring="once"),
        make_bill(5, id="gym", amount=Decimal("40"), recurring="monthly", paid=True),
    ]

    # 300 committed + 100 proposed
    assert amortization.affordability_check(bills, target, Decimal("100"), Decimal("350")) is True
    assert amortization.affordability_check(bills, target, Decimal("100"), Decimal("400")) is False
    assert amortization.affordability_check(bills, target, Decimal("100"), Decimal("-20")) is True


def test_debt_candidates(make_bill):
    bills = [
        make_bill(5, id="loan", category="Debt", recurring="monthly"),
        make_bill(5, id="once", category="debt", recurring="once"),
        make_bill(5, id="paid", category="debt", recurring="monthly", paid=True),
        make_bill(5, id="rent", category="housing", recurring="monthly"),
    ]
    assert [b.id for b in amortization.debt_candidates(bills)] == ["loan"]
