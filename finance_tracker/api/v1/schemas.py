"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

Recurring = Literal["once", "daily", "weekly", "monthly", "yearly"]
AccountType = Literal["checking", "savings", "credit", "investment", "other"]
GoalStatus = Literal["in-progress", "completed", "paused"]


def money(value: Decimal) -> float:
    """Round to cents for presentation"""
    return round(float(value), 2)


# Bills


class BillCreate(BaseModel):
    """Request body for POST /v1/bills"""

    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    due_date: date
    recurring: Recurring = "once"
    paid: bool = False
    category: str = Field("other", min_length=1)
    notes: Optional[str] = None
    interest: Optional[Decimal] = Field(None, ge=0, description="Annual percentage rate")


class BillUpdate(BaseModel):
    """Request body for PATCH /v1/bills/{bill_id}; omitted fields are untouched"""

    name: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, ge=0)
    due_date: Optional[date] = None
    recurring: Optional[Recurring] = None
    paid: Optional[bool] = None
    category: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = None
    interest: Optional[Decimal] = Field(None, ge=0)


class SnoozeRequest(BaseModel):
    # Range is enforced by the lifecycle rules so the error names the limits
    days: int


class BillStatusSchema(BaseModel):
    state: str
    snoozed: bool
    urgent: bool
    past_due_days: int
    days_until_due: int


class BillResponse(BaseModel):
    id: str
    name: str
    amount: float
    due_date: date
    recurring: str
    paid: bool
    category: str
    notes: Optional[str] = None
    interest: Optional[float] = None
    snoozed_until: Optional[date] = None
    original_due_date: Optional[date] = None
    past_due_days: int
    status: BillStatusSchema


class BillListResponse(BaseModel):
    bills: List[BillResponse]


class RemindersResponse(BaseModel):
    """Response for GET /v1/bills/reminders"""

    due_today: List[BillResponse]
    upcoming: List[BillResponse]
    urgent: List[BillResponse]
    past_due: List[BillResponse]
    reminders: List[BillResponse]


class ComfortScoreSchema(BaseModel):
    monthly_expenses: float
    estimated_monthly_income: float
    score: int
    label: str


class SummaryResponse(BaseModel):
    """Response for GET /v1/bills/summary"""

    month_to_date_paid: float
    next_7_days_due: float
    overdue_count: int
    critical_count: int
    unpaid_total: float
    comfort: ComfortScoreSchema


class PastDueRefreshResponse(BaseModel):
    updated: int


class BillImportRequest(BaseModel):
    """Spreadsheet rows keyed by column header"""

    rows: List[Dict[str, Any]] = Field(..., min_length=1)


class RejectedRowSchema(BaseModel):
    index: int
    reason: str


class BillImportResponse(BaseModel):
    imported: List[BillResponse]
    rejected: List[RejectedRowSchema]


# Payoff


class PayoffPlanSchema(BaseModel):
    strategy: str
    starting_balance: float
    monthly_payment: float
    months: int
    total_interest_paid: float
    converged: bool
    payoff_date: Optional[date] = None


class PayoffResponse(BaseModel):
    """Response for GET /v1/bills/{bill_id}/payoff"""

    bill_id: str
    standard: PayoffPlanSchema
    lump_sum: PayoffPlanSchema
    increased_payment: PayoffPlanSchema
    liquid_balance: float
    affordability_warning: bool


# Accounts


class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: AccountType = "other"
    balance: Decimal = Decimal("0")
    currency: str = "$"
    color: str = "#3b82f6"
    external_account_id: Optional[str] = None
    external_item_id: Optional[str] = None


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[AccountType] = None
    balance: Optional[Decimal] = None
    currency: Optional[str] = None
    color: Optional[str] = None


class AccountResponse(BaseModel):
    id: str
    name: str
    type: str
    balance: float
    currency: str
    color: str
    external_account_id: Optional[str] = None
    external_item_id: Optional[str] = None
    last_updated: Optional[datetime] = None


class AccountListResponse(BaseModel):
    accounts: List[AccountResponse]
    total_balance: float
    liquid_balance: float


class LinkTokenResponse(BaseModel):
    link_token: str


class ExchangeRequest(BaseModel):
    public_token: str = Field(..., min_length=1)


class SyncItemSchema(BaseModel):
    item_id: str
    success: bool
    accounts_updated: bool
    transactions_updated: bool
    new_transactions: int
    error: Optional[str] = None


class SyncResponse(BaseModel):
    results: List[SyncItemSchema]
    accounts: List[AccountResponse]


# Savings goals


class GoalCreate(BaseModel):
    name: str = Field(..., min_length=1)
    target_amount: Decimal = Field(..., gt=0)
    current_amount: Decimal = Field(Decimal("0"), ge=0)
    category: str = Field(..., min_length=1)
    status: GoalStatus = "in-progress"
    deadline: Optional[date] = None
    notes: Optional[str] = None
    account_id: Optional[str] = None


class GoalUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    target_amount: Optional[Decimal] = Field(None, gt=0)
    current_amount: Optional[Decimal] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1)
    status: Optional[GoalStatus] = None
    deadline: Optional[date] = None
    notes: Optional[str] = None
    account_id: Optional[str] = None


class ContributionRequest(BaseModel):
    amount: Decimal


class GoalResponse(BaseModel):
    id: str
    name: str
    target_amount: float
    current_amount: float
    category: str
    status: str
    deadline: Optional[date] = None
    notes: Optional[str] = None
    account_id: Optional[str] = None
    progress_percent: float


class GoalListResponse(BaseModel):
    goals: List[GoalResponse]


# Transactions


class TransactionCreate(BaseModel):
    account_id: str = Field(..., min_length=1)
    date: date
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., description="Negative for outflows")
    category: str = "Other"
    currency: str = "USD"
    external_transaction_id: Optional[str] = None


class TransactionResponse(BaseModel):
    id: str
    account_id: str
    date: date
    description: str
    amount: float
    category: str
    currency: str
    external_transaction_id: Optional[str] = None


class TransactionCreatedResponse(BaseModel):
    transaction: TransactionResponse
    created: bool


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]
