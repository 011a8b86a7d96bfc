"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SESSION_SECRET", "test-secret")

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from bill_tracker.api.dependencies import get_clock
from bill_tracker.api.main import create_app
from bill_tracker.infrastructure.database.models import Base
from bill_tracker.infrastructure.database.session import get_db
from bill_tracker.domain.models import DatedRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 2024-03-05 10:00 at UTC-5: payment period of the February 2024 cycle
FIXED_NOW = datetime(2024, 3, 5, 15, 0, tzinfo=timezone.utc)


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
def now() -> datetime:
    return FIXED_NOW


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
    app.dependency_overrides[get_clock] = lambda: (lambda: now)
    return TestClient(app)


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    """Test client holding a logged-in session"""
    credentials = {"email": "ana@example.com", "password": "s3cret-pass"}
    assert client.post("/v1/auth/register", json=credentials).status_code == 201
    assert client.post("/v1/auth/login", json=credentials).status_code == 200
    return client


def _make_record(
    amount: str | None,
    occurred_at: datetime | None,
    category: str | None = "Food",
    record_id: str = "r1",
    name: str = "Test",
) -> DatedRecord:
    """Build a domain record; amounts are given as strings to stay exact"""
    return DatedRecord(
        id=record_id,
        name=name,
        amount=Decimal(amount) if amount is not None else None,
        category=category,
        occurred_at=occurred_at,
    )


@pytest.fixture
def make_record():
    """Factory for domain records"""
    return _make_record
