"""Bill lifecycle engine - status, urgency, past-due tracking and snoozing"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable, List

from finance_tracker.domain.exceptions import ValidationError
from finance_tracker.domain.models import Bill, BillState, BillStatus, BillSummary
from finance_tracker.domain.rules import DEFAULT_LIFECYCLE_RULES, LifecycleRules
from finance_tracker.utils.date_utils import add_days, days_between, is_same_month


def compute_past_due_days(bill: Bill, today: date) -> int:
    """
    Whole days elapsed since an unpaid bill's due date.

    Returns 0 for paid bills and for bills due today or later.
    """
    if bill.paid or bill.due_date >= today:
        return 0
    return days_between(bill.due_date, today)


def effective_past_due_days(bill: Bill, today: date) -> int:
    """Cached past-due count, or the live count if the cache is behind"""
    if bill.paid:
        return 0
    return max(bill.past_due_days or 0, compute_past_due_days(bill, today))


def refresh_past_due_days(bill: Bill, today: date) -> Bill:
    """Return the bill with its cached past_due_days recomputed for today"""
    return replace(bill, past_due_days=compute_past_due_days(bill, today))


def is_urgent(bill: Bill, today: date, rules: LifecycleRules = DEFAULT_LIFECYCLE_RULES) -> bool:
    """
    Decide whether an unpaid bill needs attention now.

    Any one of these makes a bill urgent:
    - it has been snoozed
    - it is at least `urgent_past_due_days` past due
    - it is due within `urgent_window_days` (today and past dates included)
    """
    if bill.paid:
        return False
    if bill.snoozed_until is not None:
        return True
    if effective_past_due_days(bill, today) >= rules.urgent_past_due_days:
        return True
    return days_between(today, bill.due_date) <= rules.urgent_window_days


def classify(bill: Bill, today: date, rules: LifecycleRules = DEFAULT_LIFECYCLE_RULES) -> BillStatus:
    """
    Derive the display state of a bill.

    Precedence: Paid > Critical > Overdue > DueToday > DueSoon > Upcoming.
    Snoozed is reported as an overlay since the snoozed due date already
    places the bill in its temporal bucket.
    """
    days_until_due = days_between(today, bill.due_date)
    past_due_days = effective_past_due_days(bill, today)

    if bill.paid:
        state = BillState.PAID
    elif past_due_days >= rules.critical_past_due_days:
        state = BillState.CRITICAL
    elif days_until_due < 0:
        state = BillState.OVERDUE
    elif days_until_due == 0:
        state = BillState.DUE_TODAY
    elif days_until_due <= rules.due_soon_days:
        state = BillState.DUE_SOON
    else:
        state = BillState.UPCOMING

    return BillStatus(
        state=state,
        snoozed=not bill.paid and bill.snoozed_until is not None,
        urgent=is_urgent(bill, today, rules),
        past_due_days=past_due_days,
        days_until_due=days_until_due,
    )


def snooze(bill: Bill, days: int, today: date, rules: LifecycleRules = DEFAULT_LIFECYCLE_RULES) -> Bill:
    """
    Push a bill's due date forward by `days` calendar days.

    The pre-snooze due date is captured in original_due_date the first time
    only; later snoozes keep it. `today` is accepted so callers thread a
    single clock through every lifecycle call.

    Raises:
        ValidationError: days outside the allowed snooze range
    """
    if not rules.min_snooze_days <= days <= rules.max_snooze_days:
        raise ValidationError(
            f"Snooze days out of range: {days} "
            f"(allowed {rules.min_snooze_days}-{rules.max_snooze_days})"
        )

    original_due_date = bill.original_due_date or bill.due_date
    new_due_date = add_days(bill.due_date, days)

    return replace(
        bill,
        due_date=new_due_date,
        snoozed_until=new_due_date,
        original_due_date=original_due_date,
    )


def mark_paid(bill: Bill) -> Bill:
    return replace(bill, paid=True)


def mark_unpaid(bill: Bill) -> Bill:
    # Snooze and past-due bookkeeping survive so the bill resumes its schedule
    return replace(bill, paid=False)


def due_today(bills: Iterable[Bill], today: date) -> List[Bill]:
    return [b for b in bills if not b.paid and b.due_date == today]


def due_within_days(bills: Iterable[Bill], today: date, days: int) -> List[Bill]:
    """Unpaid bills due after today and no later than today + days"""
    return [b for b in bills if not b.paid and 0 < days_between(today, b.due_date) <= days]


def past_due(bills: Iterable[Bill], today: date) -> List[Bill]:
    return [b for b in bills if effective_past_due_days(b, today) > 0]


def urgent(bills: Iterable[Bill], today: date, rules: LifecycleRules = DEFAULT_LIFECYCLE_RULES) -> List[Bill]:
    return [b for b in bills if is_urgent(b, today, rules)]


def reminders(bills: Iterable[Bill], today: date, rules: LifecycleRules = DEFAULT_LIFECYCLE_RULES) -> List[Bill]:
    """Unpaid bills due on or before the end of the reminder window"""
    horizon = add_days(today, rules.reminder_window_days)
    return sorted(
        (b for b in bills if not b.paid and b.due_date <= horizon),
        key=lambda b: b.due_date,
    )


def summarize(bills: Iterable[Bill], today: date, rules: LifecycleRules = DEFAULT_LIFECYCLE_RULES) -> BillSummary:
    """
    Aggregate totals for the dashboard summary strip.

    - Month-to-date paid: paid bills whose due date falls in today's month
    - Next 7 days: unpaid bills due from today up to (not including) today + 7
    - Overdue / critical counts use the same rules as classify()
    """
    bills = list(bills)
    week_ahead = add_days(today, 7)

    mtd_paid = sum(
        (b.amount for b in bills if b.paid and is_same_month(b.due_date, today)),
        Decimal("0"),
    )
    next_week_due = sum(
        (b.amount for b in bills if not b.paid and today <= b.due_date < week_ahead),
        Decimal("0"),
    )
    unpaid_total = sum((b.amount for b in bills if not b.paid), Decimal("0"))

    overdue_count = sum(1 for b in bills if not b.paid and b.due_date < today)
    critical_count = sum(
        1 for b in bills if effective_past_due_days(b, today) >= rules.critical_past_due_days
    )

    return BillSummary(
        month_to_date_paid=mtd_paid,
        next_7_days_due=next_week_due,
        overdue_count=overdue_count,
        critical_count=critical_count,
        unpaid_total=unpaid_total,
    )
