"""Debt payoff projections using declining-balance monthly compounding"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Union

from finance_tracker.domain.models import LIQUID_ACCOUNT_TYPES, Account, Bill, PayoffPlan
from finance_tracker.domain.rules import DEFAULT_PAYOFF_RULES, PayoffRules
from finance_tracker.utils.date_utils import add_months

ZERO = Decimal("0")
Number = Union[Decimal, float, int, str, None]


def _non_negative(value: Number) -> Decimal:
    """Coerce money/rate input to Decimal; missing, NaN or negative -> 0"""
    if value is None:
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO
    if amount.is_nan() or amount < 0:
        return ZERO
    return amount


def standard_monthly_payment(bill: Bill, rules: PayoffRules = DEFAULT_PAYOFF_RULES) -> Decimal:
    """Minimum-payment heuristic: a fixed share of the bill's principal"""
    return _non_negative(bill.amount) * rules.minimum_payment_ratio


def simulate(
    balance: Number,
    annual_rate: Number,
    monthly_payment: Number,
    today: date,
    strategy: str = "standard",
    rules: PayoffRules = DEFAULT_PAYOFF_RULES,
) -> PayoffPlan:
    """
    Run the month-by-month amortization recurrence.

    Each month:
        interest = balance * (rate / 100 / 12)
        balance  = balance + interest - payment

    The loop stops when the balance reaches zero or `rules.max_months` is
    hit. Hitting the cap with a balance left is reported as converged=False
    and no payoff date, since the payment never retires the debt.

    No rounding happens inside the loop; callers round for display.
    """
    starting_balance = _non_negative(balance)
    payment = _non_negative(monthly_payment)
    monthly_rate = _non_negative(annual_rate) / Decimal(100) / Decimal(12)

    if starting_balance <= 0:
        return PayoffPlan(
            strategy=strategy,
            starting_balance=ZERO,
            monthly_payment=payment,
            months=0,
            total_interest_paid=ZERO,
            converged=True,
            payoff_date=today,
        )

    remaining = starting_balance
    total_interest = ZERO
    months = 0
    while remaining > 0 and months < rules.max_months:
        interest = remaining * monthly_rate
        total_interest += interest
        remaining = remaining + interest - payment
        months += 1

    converged = remaining <= 0
    return PayoffPlan(
        strategy=strategy,
        starting_balance=starting_balance,
        monthly_payment=payment,
        months=months,
        total_interest_paid=total_interest,
        converged=converged,
        payoff_date=add_months(today, months) if converged else None,
    )


def standard_plan(bill: Bill, today: date, rules: PayoffRules = DEFAULT_PAYOFF_RULES) -> PayoffPlan:
    return simulate(
        bill.amount,
        bill.interest,
        standard_monthly_payment(bill, rules),
        today,
        strategy="standard",
        rules=rules,
    )


def lump_sum_plan(
    bill: Bill, lump_sum: Number, today: date, rules: PayoffRules = DEFAULT_PAYOFF_RULES
) -> PayoffPlan:
    """Pay `lump_sum` up front, then the standard monthly payment"""
    remaining = max(_non_negative(bill.amount) - _non_negative(lump_sum), ZERO)
    return simulate(
        remaining,
        bill.interest,
        standard_monthly_payment(bill, rules),
        today,
        strategy="lump_sum",
        rules=rules,
    )


def increased_payment_plan(
    bill: Bill,
    lump_sum: Number,
    extra_monthly: Number,
    today: date,
    rules: PayoffRules = DEFAULT_PAYOFF_RULES,
) -> PayoffPlan:
    """Lump sum up front plus `extra_monthly` on top of the standard payment"""
    remaining = max(_non_negative(bill.amount) - _non_negative(lump_sum), ZERO)
    payment = standard_monthly_payment(bill, rules) + _non_negative(extra_monthly)
    return simulate(
        remaining,
        bill.interest,
        payment,
        today,
        strategy="increased_payment",
        rules=rules,
    )


def liquid_balance(accounts: Iterable[Account]) -> Decimal:
    """Sum of checking and savings balances"""
    return sum((a.balance for a in accounts if a.type in LIQUID_ACCOUNT_TYPES), ZERO)


def affordability_check(
    all_bills: Iterable[Bill],
    bill: Bill,
    proposed_monthly_payment: Number,
    available_balance: Number,
) -> bool:
    """
    Warn when committed recurring bills plus the proposed payment exceed
    the liquid balance. Returns True when the plan looks unaffordable.

    Only a signal for the caller; it never blocks a simulation.
    """
    committed = sum(
        (
            _non_negative(b.amount)
            for b in all_bills
            if b.id != bill.id and not b.paid and b.recurring != "once"
        ),
        ZERO,
    )
    # Liquid balance is signed (overdrawn checking counts against it)
    try:
        available = Decimal(str(available_balance)) if available_balance is not None else ZERO
    except (InvalidOperation, ValueError):
        available = ZERO
    return committed + _non_negative(proposed_monthly_payment) > available


def debt_candidates(bills: Iterable[Bill]) -> List[Bill]:
    """Bills eligible for payoff planning: unpaid, recurring debt"""
    return [b for b in bills if not b.paid and b.is_debt and b.recurring != "once"]
