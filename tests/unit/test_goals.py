"""Unit tests for savings goal progress and status"""

import pytest
from decimal import Decimal
from finance_tracker.domain.exceptions import ValidationError
from finance_tracker.domain.goals import apply_contribution, progress_percent, resolve_status
from finance_tracker.domain.models import SavingsGoal


def make_goal(current="0", target="1000", status="in-progress") -> SavingsGoal:
    return SavingsGoal(
        id="goal_1",
        name="Emergency fund",
        target_amount=Decimal(target),
        current_amount=Decimal(current),
        category="Emergency",
        status=status,
    )


def test_progress_percent():
    assert progress_percent(make_goal("250")) == 25.0
    assert progress_percent(make_goal("1500")) == 100.0
    assert progress_percent(make_goal("10", target="0")) == 0.0


def test_resolve_status_completes_funded_goal():
    assert resolve_status(make_goal("1000")).status == "completed"
    assert resolve_status(make_goal("999.99")).status == "in-progress"


def test_resolve_status_keeps_paused_goal():
    assert resolve_status(make_goal("1200", status="paused")).status == "paused"


def test_contribution_completes_goal():
    goal = apply_contribution(make_goal("900"), Decimal("100"))
    assert goal.current_amount == Decimal("1000")
    assert goal.status == "completed"


def test_withdrawal_reduces_balance():
    goal = apply_contribution(make_goal("300"), Decimal("-100"))
    assert goal.current_amount == Decimal("200")
    assert goal.status == "in-progress"


def test_withdrawal_below_zero_rejected():
    with pytest.raises(ValidationError, match="can't be negative"):
        apply_contribution(make_goal("50"), Decimal("-51"))
