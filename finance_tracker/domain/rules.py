"""Named thresholds for the bill lifecycle and payoff engines"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LifecycleRules:
    """Day-count thresholds used to classify bills"""

    critical_past_due_days: int = 30
    urgent_past_due_days: int = 20
    urgent_window_days: int = 5
    due_soon_days: int = 2
    reminder_window_days: int = 7
    min_snooze_days: int = 1
    max_snooze_days: int = 29


@dataclass(frozen=True)
class PayoffRules:
    """Parameters for amortization projections"""

    minimum_payment_ratio: Decimal = Decimal("0.10")
    max_months: int = 360


DEFAULT_LIFECYCLE_RULES = LifecycleRules()
DEFAULT_PAYOFF_RULES = PayoffRules()
