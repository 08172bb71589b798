"""Budget comfort score derived from recurring bill load"""

from decimal import Decimal
from typing import Iterable

from finance_tracker.domain.models import Bill

# Average periods per month
MONTHLY_FACTORS = {
    "daily": Decimal("30.44"),
    "weekly": Decimal("4.33"),
    "monthly": Decimal("1"),
    "yearly": Decimal("1") / Decimal("12"),
}

# Without real income data, income is estimated as 1.5x recurring expenses
ESTIMATED_INCOME_MULTIPLIER = Decimal("1.5")


def monthly_equivalent(amount: Decimal, recurring: str) -> Decimal:
    """Normalize a bill amount to a per-month figure; one-off bills count as 0"""
    factor = MONTHLY_FACTORS.get(recurring)
    if factor is None:
        return Decimal("0")
    return amount * factor


def monthly_recurring_expenses(bills: Iterable[Bill]) -> Decimal:
    return sum(
        (monthly_equivalent(b.amount, b.recurring) for b in bills if b.recurring != "once"),
        Decimal("0"),
    )


def estimated_monthly_income(expenses: Decimal, adjustment: Decimal = Decimal("0")) -> Decimal:
    return expenses * ESTIMATED_INCOME_MULTIPLIER + adjustment


def comfort_score(income: Decimal, expenses: Decimal) -> int:
    """
    Map the margin ratio (income - expenses) / income onto 0-100.

    Bands:
    - ratio >= 0.20: 85-100 (Very Comfortable)
    - ratio >= 0.10: 70-84  (Comfortable)
    - ratio >= 0:    50-69  (Tight)
    - ratio <  0:    0-49   (Overextended)
    """
    ratio = float((income - expenses) / income) if income > 0 else 0.0

    if ratio >= 0.20:
        score = min(100.0, 85 + (ratio - 0.20) * 75)
    elif ratio >= 0.10:
        score = 70 + (ratio - 0.10) * 140
    elif ratio >= 0:
        score = 50 + ratio * 200
    else:
        score = max(0.0, 50 + ratio * 125)

    return round(score)


def comfort_label(score: int) -> str:
    if score >= 85:
        return "Very Comfortable"
    elif score >= 70:
        return "Comfortable"
    elif score >= 50:
        return "Tight"
    else:
        return "Overextended"
