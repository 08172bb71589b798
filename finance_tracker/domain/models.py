"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

RECURRENCES = ("once", "daily", "weekly", "monthly", "yearly")
ACCOUNT_TYPES = ("checking", "savings", "credit", "investment", "other")
GOAL_STATUSES = ("in-progress", "completed", "paused")
LIQUID_ACCOUNT_TYPES = ("checking", "savings")
DEBT_CATEGORY = "debt"


def normalize_recurring(value: Optional[str]) -> str:
    """Unknown recurrence labels fall back to a one-off bill"""
    return value if value in RECURRENCES else "once"


def normalize_account_type(value: Optional[str]) -> str:
    return value if value in ACCOUNT_TYPES else "other"


@dataclass
class Bill:
    """A payable obligation. Recurrence is a display label only."""

    id: str
    name: str
    amount: Decimal
    due_date: date
    recurring: str = "once"
    paid: bool = False
    category: str = "other"
    notes: Optional[str] = None
    interest: Optional[Decimal] = None  # annual percent, meaningful for debt
    snoozed_until: Optional[date] = None
    original_due_date: Optional[date] = None
    past_due_days: int = 0

    @property
    def is_debt(self) -> bool:
        return self.category.strip().lower() == DEBT_CATEGORY


@dataclass
class Account:
    """Cash, credit or investment account; balance is authoritative state"""

    id: str
    name: str
    type: str
    balance: Decimal
    currency: str = "$"
    color: str = "#3b82f6"
    external_account_id: Optional[str] = None
    external_item_id: Optional[str] = None
    last_updated: Optional[datetime] = None


@dataclass
class SavingsGoal:
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    category: str
    status: str = "in-progress"
    deadline: Optional[date] = None
    notes: Optional[str] = None
    account_id: Optional[str] = None


@dataclass
class Transaction:
    """Account activity; negative amounts are outflows"""

    id: str
    account_id: str
    date: date
    description: str
    amount: Decimal
    category: str
    currency: str = "USD"
    external_transaction_id: Optional[str] = None


class BillState(str, Enum):
    """Temporal/payment state of a bill, highest precedence first"""

    PAID = "paid"
    CRITICAL = "critical"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_SOON = "due_soon"
    UPCOMING = "upcoming"


@dataclass
class BillStatus:
    """Derived view of a bill for a given day"""

    state: BillState
    snoozed: bool  # overlay badge, not exclusive with state
    urgent: bool
    past_due_days: int
    days_until_due: int


@dataclass
class BillSummary:
    """Totals shown in the dashboard summary strip"""

    month_to_date_paid: Decimal
    next_7_days_due: Decimal
    overdue_count: int
    critical_count: int
    unpaid_total: Decimal


@dataclass
class PayoffPlan:
    """Projected payoff of a single debt under one payment strategy"""

    strategy: str
    starting_balance: Decimal
    monthly_payment: Decimal
    months: int
    total_interest_paid: Decimal
    converged: bool  # False when the month cap was hit with a balance left
    payoff_date: Optional[date] = None


@dataclass
class SyncItemResult:
    """Outcome of refreshing one linked institution through the aggregator"""

    item_id: str
    success: bool
    accounts_updated: bool = False
    transactions_updated: bool = False
    new_transactions: int = 0
    error: Optional[str] = None
