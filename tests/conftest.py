"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from cashflow_planner.api.main import create_app
from cashflow_planner.api.dependencies import get_today
from cashflow_planner.infrastructure.database.models import Base
from cashflow_planner.infrastructure.database.session import get_db
from cashflow_planner.domain.models import (
    Account,
    Event,
    EventPriority,
    EventStatus,
    EventType,
)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Every API test plans from this day
FIXED_TODAY = date(2024, 1, 15)


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
def today() -> date:
    return FIXED_TODAY


@pytest.fixture
def client(db: Session, today: date) -> TestClient:
    """Create FastAPI test client with test database and a pinned calendar day"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: today
    return TestClient(app)


@pytest.fixture
def checking_account() -> Account:
    return Account(id="acc-1", name="Checking", initial_balance_cents=100000)


@pytest.fixture
def sample_events() -> list[Event]:
    """A January with salary, rent, an investment and a skipped dinner"""
    return [
        Event(
            id="salary",
            description="Salary",
            amount_cents=500000,
            type=EventType.INCOME,
            status=EventStatus.CONFIRMED,
            date=date(2024, 1, 1),
            account_id="acc-1",
        ),
        Event(
            id="rent",
            description="Rent",
            amount_cents=-150000,
            type=EventType.EXPENSE,
            status=EventStatus.PLANNED,
            date=date(2024, 1, 5),
            account_id="acc-1",
            priority=EventPriority.REQUIRED,
        ),
        Event(
            id="etf",
            description="ETF contribution",
            amount_cents=-50000,
            type=EventType.INVESTMENT,
            status=EventStatus.PLANNED,
            date=date(2024, 1, 7),
            account_id="acc-1",
        ),
        Event(
            id="dinner",
            description="Dinner out",
            amount_cents=-20000,
            type=EventType.EXPENSE,
            status=EventStatus.SKIPPED,
            date=date(2024, 1, 5),
            account_id="acc-1",
            priority=EventPriority.OPTIONAL,
        ),
    ]
