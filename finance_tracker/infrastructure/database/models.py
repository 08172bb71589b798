"""SQLAlchemy ORM models for the finance tables"""

import uuid
from sqlalchemy import (
    Column,
    String,
    Boolean,
    Date,
    DateTime,
    Integer,
    ForeignKey,
    Numeric,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class BillRecord(Base):
    """Tracked bill, including snooze and past-due bookkeeping"""

    __tablename__ = "bills"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    recurring = Column(Text, nullable=False, default="once")
    paid = Column(Boolean, nullable=False, default=False)
    category = Column(Text, nullable=False, default="other")
    notes = Column(Text, nullable=True)
    interest = Column(Numeric(7, 3), nullable=True)
    snoozed_until = Column(Date, nullable=True)
    original_due_date = Column(Date, nullable=True)
    past_due_days = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class AccountRecord(Base):
    """User account; balances may be refreshed by the aggregator proxy"""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False, default="other")
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(Text, nullable=False, default="$")
    color = Column(Text, nullable=False, default="#3b82f6")
    external_account_id = Column(Text, nullable=True, index=True)
    external_item_id = Column(Text, nullable=True)
    last_updated = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    transactions = relationship(
        "TransactionRecord", back_populates="account", cascade="all, delete-orphan"
    )


class SavingsGoalRecord(Base):
    __tablename__ = "savings_goals"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    target_amount = Column(Numeric(14, 2), nullable=False)
    current_amount = Column(Numeric(14, 2), nullable=False, default=0)
    category = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="in-progress")
    deadline = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRecord(Base):
    """Account activity; external ids dedupe aggregator imports"""

    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint("user_id", "external_transaction_id", name="uq_transactions_user_external"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    category = Column(Text, nullable=False, default="Other")
    currency = Column(Text, nullable=False, default="USD")
    external_transaction_id = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    account = relationship("AccountRecord", back_populates="transactions")
