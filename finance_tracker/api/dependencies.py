"""Dependency injection for FastAPI endpoints"""

from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import Header, Request
from finance_tracker.config import settings
from finance_tracker.domain.rules import LifecycleRules, PayoffRules
from finance_tracker.infrastructure.clients.aggregator import AggregatorClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(x_user_id: str = Header(..., min_length=1, description="Authenticated user id")) -> str:
    """User id asserted by the auth provider in front of the service"""
    return x_user_id


def get_authorization(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Caller's bearer token, forwarded to the aggregator proxy"""
    return authorization


def get_today() -> date:
    """Local calendar date; overridden in tests to pin the clock"""
    return date.today()


def get_lifecycle_rules() -> LifecycleRules:
    return LifecycleRules(
        critical_past_due_days=settings.critical_past_due_days,
        urgent_past_due_days=settings.urgent_past_due_days,
        urgent_window_days=settings.urgent_window_days,
        due_soon_days=settings.due_soon_days,
        reminder_window_days=settings.reminder_window_days,
        max_snooze_days=settings.max_snooze_days,
    )


def get_payoff_rules() -> PayoffRules:
    return PayoffRules(
        minimum_payment_ratio=Decimal(str(settings.minimum_payment_ratio)),
        max_months=settings.amortization_max_months,
    )


def get_aggregator_client() -> AggregatorClient:
    """Provide bank aggregation proxy client instance"""
    return AggregatorClient()
