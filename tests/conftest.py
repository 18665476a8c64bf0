"""Pytest fixtures for testing"""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("ALERT_BACKOFF_BASE", "0")
os.environ.setdefault("ALERT_MAX_RETRIES", "3")

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from welth_engine.api.dependencies import get_now
from welth_engine.api.main import create_app
from welth_engine.infrastructure.database.models import (
    AccountRecord,
    Base,
    BudgetRecord,
    FinancialProfileRecord,
    TransactionRecord,
)
from welth_engine.infrastructure.database.session import get_db
from welth_engine.domain.models import Account, AccountType, Transaction, TransactionType

# Mid-month so "current month" windows are unambiguous
NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)

# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def now() -> datetime:
    return NOW


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
def client(db: Session, now: datetime) -> TestClient:
    """Create FastAPI test client with test database and a frozen clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: now
    return TestClient(app)


@pytest.fixture
def make_txn(now: datetime) -> Callable[..., Transaction]:
    """Build a domain transaction dated `days_ago` days before now"""

    def _make(days_ago: float, amount, type: str = "EXPENSE", category: str | None = None) -> Transaction:
        return Transaction(
            date=now - timedelta(days=days_ago),
            amount=Decimal(str(amount)),
            type=TransactionType(type),
            category=category,
        )

    return _make


@pytest.fixture
def make_account() -> Callable[..., Account]:
    def _make(balance, type: str = "CURRENT", is_default: bool = False, account_id: str | None = None) -> Account:
        return Account(
            balance=Decimal(str(balance)),
            type=AccountType(type),
            is_default=is_default,
            account_id=account_id,
        )

    return _make


@pytest.fixture
def seed_ledger(db: Session, now: datetime) -> Callable[..., None]:
    """
    Persist a user's ledger.

    accounts: (balance, type, is_default) tuples
    transactions: (days_ago, amount, type, category) tuples
    """

    def _seed(
        user_id: str,
        accounts=(),
        transactions=(),
        budget: tuple | None = None,
        profile: dict | None = None,
    ) -> None:
        for balance, acc_type, is_default in accounts:
            db.add(
                AccountRecord(
                    user_id=user_id,
                    name=f"{acc_type.title()} account",
                    type=acc_type,
                    balance=Decimal(str(balance)),
                    is_default=is_default,
                )
            )
        for days_ago, amount, txn_type, category in transactions:
            db.add(
                TransactionRecord(
                    user_id=user_id,
                    type=txn_type,
                    amount=Decimal(str(amount)),
                    category=category,
                    description="Seeded",
                    date=now - timedelta(days=days_ago),
                )
            )
        if budget is not None:
            amount, is_locked = budget
            db.add(BudgetRecord(user_id=user_id, amount=Decimal(str(amount)), is_locked=is_locked))
        if profile is not None:
            db.add(FinancialProfileRecord(user_id=user_id, **profile))
        db.commit()

    return _seed
