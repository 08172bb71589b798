"""Data access layer for bills, accounts, savings goals and transactions"""

from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy.orm import Session
from finance_tracker.infrastructure.database.models import (
    AccountRecord,
    BillRecord,
    SavingsGoalRecord,
    TransactionRecord,
)
from finance_tracker.domain.models import (
    Account,
    Bill,
    SavingsGoal,
    Transaction,
    normalize_account_type,
    normalize_recurring,
)

BILL_FIELDS = (
    "name",
    "amount",
    "due_date",
    "recurring",
    "paid",
    "category",
    "notes",
    "interest",
    "snoozed_until",
    "original_due_date",
    "past_due_days",
)
ACCOUNT_FIELDS = (
    "name",
    "type",
    "balance",
    "currency",
    "color",
    "external_account_id",
    "external_item_id",
    "last_updated",
)
GOAL_FIELDS = (
    "name",
    "target_amount",
    "current_amount",
    "category",
    "status",
    "deadline",
    "notes",
    "account_id",
)


def _apply(record: Any, fields: Dict[str, Any], allowed: Iterable[str]) -> None:
    for key, value in fields.items():
        if key in allowed:
            setattr(record, key, value)


def bill_to_domain(record: BillRecord) -> Bill:
    return Bill(
        id=record.id,
        name=record.name,
        amount=record.amount,
        due_date=record.due_date,
        recurring=normalize_recurring(record.recurring),
        paid=record.paid,
        category=record.category,
        notes=record.notes,
        interest=record.interest,
        snoozed_until=record.snoozed_until,
        original_due_date=record.original_due_date,
        past_due_days=record.past_due_days or 0,
    )


def account_to_domain(record: AccountRecord) -> Account:
    return Account(
        id=record.id,
        name=record.name,
        type=normalize_account_type(record.type),
        balance=record.balance,
        currency=record.currency,
        color=record.color,
        external_account_id=record.external_account_id,
        external_item_id=record.external_item_id,
        last_updated=record.last_updated,
    )


def goal_to_domain(record: SavingsGoalRecord) -> SavingsGoal:
    return SavingsGoal(
        id=record.id,
        name=record.name,
        target_amount=record.target_amount,
        current_amount=record.current_amount,
        category=record.category,
        status=record.status,
        deadline=record.deadline,
        notes=record.notes,
        account_id=record.account_id,
    )


def transaction_to_domain(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=record.id,
        account_id=record.account_id,
        date=record.date,
        description=record.description,
        amount=record.amount,
        category=record.category,
        currency=record.currency,
        external_transaction_id=record.external_transaction_id,
    )


class BillRepository:
    """Repository for bills"""

    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, user_id: str, bill_id: str) -> Optional[BillRecord]:
        return (
            self.db.query(BillRecord)
            .filter(BillRecord.user_id == user_id, BillRecord.id == bill_id)
            .first()
        )

    def list_for_user(self, user_id: str, unpaid_only: bool = False) -> List[Bill]:
        query = self.db.query(BillRecord).filter(BillRecord.user_id == user_id)
        if unpaid_only:
            query = query.filter(BillRecord.paid.is_(False))
        return [bill_to_domain(r) for r in query.order_by(BillRecord.due_date).all()]

    def get(self, user_id: str, bill_id: str) -> Optional[Bill]:
        record = self._get_record(user_id, bill_id)
        return bill_to_domain(record) if record else None

    def create(self, user_id: str, bill: Bill) -> Bill:
        """Insert a bill; original_due_date stays empty until the first snooze"""
        record = BillRecord(user_id=user_id)
        if bill.id:
            record.id = bill.id
        _apply(record, {k: getattr(bill, k) for k in BILL_FIELDS}, BILL_FIELDS)
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return bill_to_domain(record)

    def create_many(self, user_id: str, bills: Iterable[Bill]) -> List[Bill]:
        return [self.create(user_id, bill) for bill in bills]

    def update(self, user_id: str, bill_id: str, fields: Dict[str, Any]) -> Optional[Bill]:
        """Partial update; unknown keys are ignored"""
        record = self._get_record(user_id, bill_id)
        if record is None:
            return None
        _apply(record, fields, BILL_FIELDS)
        self.db.flush()
        return bill_to_domain(record)

    def save(self, user_id: str, bill: Bill) -> Optional[Bill]:
        """Persist every mutable field of a domain bill"""
        return self.update(user_id, bill.id, {k: getattr(bill, k) for k in BILL_FIELDS})

    def delete(self, user_id: str, bill_id: str) -> bool:
        record = self._get_record(user_id, bill_id)
        if record is None:
            return False
        self.db.delete(record)
        return True


class AccountRepository:
    """Repository for accounts"""

    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, user_id: str, account_id: str) -> Optional[AccountRecord]:
        return (
            self.db.query(AccountRecord)
            .filter(AccountRecord.user_id == user_id, AccountRecord.id == account_id)
            .first()
        )

    def list_for_user(self, user_id: str) -> List[Account]:
        records = (
            self.db.query(AccountRecord)
            .filter(AccountRecord.user_id == user_id)
            .order_by(AccountRecord.created_at)
            .all()
        )
        return [account_to_domain(r) for r in records]

    def get(self, user_id: str, account_id: str) -> Optional[Account]:
        record = self._get_record(user_id, account_id)
        return account_to_domain(record) if record else None

    def create(self, user_id: str, fields: Dict[str, Any]) -> Account:
        record = AccountRecord(user_id=user_id)
        _apply(record, fields, ACCOUNT_FIELDS)
        record.type = normalize_account_type(record.type)
        self.db.add(record)
        self.db.flush()
        return account_to_domain(record)

    def update(self, user_id: str, account_id: str, fields: Dict[str, Any]) -> Optional[Account]:
        record = self._get_record(user_id, account_id)
        if record is None:
            return None
        _apply(record, fields, ACCOUNT_FIELDS)
        record.type = normalize_account_type(record.type)
        self.db.flush()
        return account_to_domain(record)

    def delete(self, user_id: str, account_id: str) -> bool:
        record = self._get_record(user_id, account_id)
        if record is None:
            return False
        self.db.delete(record)
        return True


class SavingsGoalRepository:
    """Repository for savings goals"""

    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, user_id: str, goal_id: str) -> Optional[SavingsGoalRecord]:
        return (
            self.db.query(SavingsGoalRecord)
            .filter(SavingsGoalRecord.user_id == user_id, SavingsGoalRecord.id == goal_id)
            .first()
        )

    def list_for_user(self, user_id: str) -> List[SavingsGoal]:
        records = (
            self.db.query(SavingsGoalRecord)
            .filter(SavingsGoalRecord.user_id == user_id)
            .order_by(SavingsGoalRecord.created_at)
            .all()
        )
        return [goal_to_domain(r) for r in records]

    def get(self, user_id: str, goal_id: str) -> Optional[SavingsGoal]:
        record = self._get_record(user_id, goal_id)
        return goal_to_domain(record) if record else None

    def create(self, user_id: str, fields: Dict[str, Any]) -> SavingsGoal:
        record = SavingsGoalRecord(user_id=user_id)
        _apply(record, fields, GOAL_FIELDS)
        self.db.add(record)
        self.db.flush()
        return goal_to_domain(record)

    def update(self, user_id: str, goal_id: str, fields: Dict[str, Any]) -> Optional[SavingsGoal]:
        record = self._get_record(user_id, goal_id)
        if record is None:
            return None
        _apply(record, fields, GOAL_FIELDS)
        self.db.flush()
        return goal_to_domain(record)

    def save(self, user_id: str, goal: SavingsGoal) -> Optional[SavingsGoal]:
        return self.update(user_id, goal.id, {k: getattr(goal, k) for k in GOAL_FIELDS})

    def delete(self, user_id: str, goal_id: str) -> bool:
        record = self._get_record(user_id, goal_id)
        if record is None:
            return False
        self.db.delete(record)
        return True


class TransactionRepository:
    """Repository for account transactions"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_user(
        self, user_id: str, account_id: Optional[str] = None, limit: Optional[int] = None
    ) -> List[Transaction]:
        """Newest first, optionally narrowed to one account"""
        query = self.db.query(TransactionRecord).filter(TransactionRecord.user_id == user_id)
        if account_id:
            query = query.filter(TransactionRecord.account_id == account_id)
        query = query.order_by(TransactionRecord.date.desc(), TransactionRecord.created_at.desc())
        if limit:
            query = query.limit(limit)
        return [transaction_to_domain(r) for r in query.all()]

    def find_external(self, user_id: str, external_transaction_id: str) -> Optional[Transaction]:
        record = (
            self.db.query(TransactionRecord)
            .filter(
                TransactionRecord.user_id == user_id,
                TransactionRecord.external_transaction_id == external_transaction_id,
            )
            .first()
        )
        return transaction_to_domain(record) if record else None

    def create(self, user_id: str, transaction: Transaction) -> Transaction:
        record = TransactionRecord(
            user_id=user_id,
            account_id=transaction.account_id,
            date=transaction.date,
            description=transaction.description,
            amount=transaction.amount,
            category=transaction.category,
            currency=transaction.currency,
            external_transaction_id=transaction.external_transaction_id,
        )
        self.db.add(record)
        self.db.flush()
        return transaction_to_domain(record)

    def create_if_new(self, user_id: str, transaction: Transaction) -> tuple[Transaction, bool]:
        """Idempotent insert keyed on the external transaction id.

        Returns (transaction, created).
        """
        if transaction.external_transaction_id:
            existing = self.find_external(user_id, transaction.external_transaction_id)
            if existing is not None:
                return existing, False
        return self.create(user_id, transaction), True
