"""Domain object -> response schema conversion"""

from datetime import date

from finance_tracker.api.v1.schemas import (
    AccountResponse,
    BillResponse,
    BillStatusSchema,
    GoalResponse,
    PayoffPlanSchema,
    TransactionResponse,
    money,
)
from finance_tracker.domain.goals import progress_percent
from finance_tracker.domain.lifecycle import classify
from finance_tracker.domain.models import Account, Bill, PayoffPlan, SavingsGoal, Transaction
from finance_tracker.domain.rules import LifecycleRules


def bill_response(bill: Bill, today: date, rules: LifecycleRules) -> BillResponse:
    status = classify(bill, today, rules)
    return BillResponse(
        id=bill.id,
        name=bill.name,
        amount=money(bill.amount),
        due_date=bill.due_date,
        recurring=bill.recurring,
        paid=bill.paid,
        category=bill.category,
        notes=bill.notes,
        interest=float(bill.interest) if bill.interest is not None else None,
        snoozed_until=bill.snoozed_until,
        original_due_date=bill.original_due_date,
        past_due_days=bill.past_due_days,
        status=BillStatusSchema(
            state=status.state.value,
            snoozed=status.snoozed,
            urgent=status.urgent,
            past_due_days=status.past_due_days,
            days_until_due=status.days_until_due,
        ),
    )


def plan_schema(plan: PayoffPlan) -> PayoffPlanSchema:
    return PayoffPlanSchema(
        strategy=plan.strategy,
        starting_balance=money(plan.starting_balance),
        monthly_payment=money(plan.monthly_payment),
        months=plan.months,
        total_interest_paid=money(plan.total_interest_paid),
        converged=plan.converged,
        payoff_date=plan.payoff_date,
    )


def account_response(account: Account) -> AccountResponse:
    return AccountResponse(
        id=account.id,
        name=account.name,
        type=account.type,
        balance=money(account.balance),
        currency=account.currency,
        color=account.color,
        external_account_id=account.external_account_id,
        external_item_id=account.external_item_id,
        last_updated=account.last_updated,
    )


def goal_response(goal: SavingsGoal) -> GoalResponse:
    return GoalResponse(
        id=goal.id,
        name=goal.name,
        target_amount=money(goal.target_amount),
        current_amount=money(goal.current_amount),
        category=goal.category,
        status=goal.status,
        deadline=goal.deadline,
        notes=goal.notes,
        account_id=goal.account_id,
        progress_percent=round(progress_percent(goal), 1),
    )


def transaction_response(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=transaction.id,
        account_id=transaction.account_id,
        date=transaction.date,
        description=transaction.description,
        amount=money(transaction.amount),
        category=transaction.category,
        currency=transaction.currency,
        external_transaction_id=transaction.external_transaction_id,
    )
