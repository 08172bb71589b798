"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from finance_tracker.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_snooze(request_id: str, user_id: str, bill_id: str, days: int, new_due_date: str) -> None:
    logging.info(
        "Bill snoozed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "bill_id": bill_id,
            "step": "bill_snooze",
            "snooze_days": days,
            "new_due_date": new_due_date,
        },
    )


def log_payoff(
    request_id: str,
    user_id: str,
    bill_id: str,
    converged: bool,
    months: int,
    affordability_warning: bool,
) -> None:
    """Log standard-plan outcome so stagnant debts show up in analysis"""
    logging.info(
        "Payoff projection completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "bill_id": bill_id,
            "step": "payoff_projection",
            "outcome": "converged" if converged else "not_converged",
            "months": months,
            "affordability_warning": affordability_warning,
        },
    )


def log_sync(request_id: str, user_id: str, items: int, new_transactions: int, duration_ms: float) -> None:
    logging.info(
        "Account sync completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "account_sync",
            "items": items,
            "new_transactions": new_transactions,
            "duration_ms": duration_ms,
        },
    )


def log_request(
    request_id: str,
    user_id: Optional[str],
    method: str,
    endpoint: str,
    status: int,
    duration_ms: float,
) -> None:
    """One access line per request; 5xx responses log at error level"""
    logging.log(
        logging.ERROR if status >= 500 else logging.INFO,
        "Request completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "http_request",
            "method": method,
            "endpoint": endpoint,
            "status": status,
            "duration_ms": duration_ms,
        },
    )
