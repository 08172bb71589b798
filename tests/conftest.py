"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from finance_tracker.api.main import create_app
from finance_tracker.api.dependencies import get_today
from finance_tracker.infrastructure.database.models import Base
from finance_tracker.infrastructure.database.session import build_engine, get_db
from finance_tracker.domain.models import Bill


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Pinned clock shared by the API overrides and the domain tests
TODAY = date(2024, 3, 15)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a fixed 'today'"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


@pytest.fixture
def headers() -> dict:
    return {"X-User-ID": "user_1"}


@pytest.fixture
def make_bill():
    """Factory for domain bills due relative to TODAY"""

    def _make(days_from_today: int = 10, **overrides) -> Bill:
        fields = {
            "id": "bill_1",
            "name": "Electric",
            "amount": Decimal("120.00"),
            "due_date": TODAY + timedelta(days=days_from_today),
        }
        fields.update(overrides)
        return Bill(**fields)

    return _make


@pytest.fixture
def sample_bills(make_bill) -> list[Bill]:
    """A mix of paid, overdue, upcoming and recurring bills"""
    return [
        make_bill(-40, id="b_critical", name="Old Loan", amount=Decimal("300"), category="Debt", recurring="monthly"),
        make_bill(-3, id="b_overdue", name="Water", amount=Decimal("45.50")),
        make_bill(0, id="b_today", name="Internet", amount=Decimal("60"), recurring="monthly"),
        make_bill(2, id="b_soon", name="Phone", amount=Decimal("35")),
        make_bill(6, id="b_week", name="Gym", amount=Decimal("25"), recurring="monthly"),
        make_bill(20, id="b_later", name="Insurance", amount=Decimal("200"), recurring="yearly"),
        make_bill(-10, id="b_paid", name="Rent", amount=Decimal("1500"), paid=True, recurring="monthly"),
    ]
