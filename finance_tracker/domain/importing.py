"""Bulk bill import - validates spreadsheet-style rows into bills"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

from finance_tracker.domain.models import RECURRENCES, Bill

REQUIRED_COLUMNS = ("name", "amount", "dueDate", "recurring", "category")

# Tried in order; ambiguous day/month strings resolve month-first
DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%m-%d-%Y",
    "%d-%m-%Y",
    "%Y%m%d",
)

# Spreadsheet serial day 0 (accounts for the 1900 leap-year bug)
SPREADSHEET_EPOCH = date(1899, 12, 30)

_TRUE_STRINGS = {"true", "yes", "1", "y", "paid"}


@dataclass
class RejectedRow:
    index: int
    reason: str


@dataclass
class ImportResult:
    bills: List[Bill] = field(default_factory=list)
    rejected: List[RejectedRow] = field(default_factory=list)


def parse_date_value(value: Any) -> Optional[date]:
    """
    Parse a due date cell.

    Accepts spreadsheet serial numbers, date objects and strings in the
    formats listed in DATE_FORMATS. Falls back to reading 8 bare digits as
    yyyyMMdd after stripping separators. Returns None when nothing matches.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not value > 0:  # also rejects NaN
            return None
        try:
            return SPREADSHEET_EPOCH + timedelta(days=int(value))
        except (OverflowError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    digits = re.sub(r"[^\d]", "", text)
    if len(digits) == 8:
        try:
            return datetime.strptime(digits, "%Y%m%d").date()
        except ValueError:
            return None
    return None


def _parse_amount(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def validate_row(row: Dict[str, Any]) -> Tuple[Optional[Bill], Optional[str]]:
    """Return (bill, None) for a valid row or (None, reason) otherwise"""
    for column in REQUIRED_COLUMNS:
        if row.get(column) in (None, ""):
            return None, f"missing required column '{column}'"

    amount = _parse_amount(row["amount"])
    if amount is None:
        return None, "amount is not a number"
    if amount < 0:
        return None, "amount must not be negative"

    due_date = parse_date_value(row["dueDate"])
    if due_date is None:
        return None, f"unrecognized due date '{row['dueDate']}'"

    recurring = str(row["recurring"]).strip()
    if recurring not in RECURRENCES:
        return None, f"recurring must be one of {', '.join(RECURRENCES)}"

    interest = None
    if row.get("interest") not in (None, ""):
        interest = _parse_amount(row["interest"])
        if interest is None or interest < 0:
            return None, "interest must be a non-negative number"

    notes = row.get("notes")
    bill = Bill(
        id="",
        name=str(row["name"]).strip(),
        amount=amount,
        due_date=due_date,
        recurring=recurring,
        paid=_parse_bool(row.get("paid", False)),
        category=str(row["category"]).strip(),
        notes=str(notes) if notes not in (None, "") else None,
        interest=interest,
    )
    return bill, None


def parse_rows(rows: List[Dict[str, Any]]) -> ImportResult:
    """Validate every row; valid rows become bills, the rest are reported"""
    result = ImportResult()
    for index, row in enumerate(rows):
        bill, reason = validate_row(row)
        if bill is None:
            result.rejected.append(RejectedRow(index=index, reason=reason or "invalid row"))
        else:
            result.bills.append(bill)
    return result
