"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from rental_ledger.api.main import create_app
from rental_ledger.infrastructure.database.models import Base
from rental_ledger.api.dependencies import DatabaseSnapshotSource, get_snapshot_source
from rental_ledger.domain.models import RentalContract, RentalStatus
from rental_ledger.domain.reconciliation import clear_cache


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def fresh_evaluation_cache():
    """Each test starts from an empty evaluation cache"""
    clear_cache()
    yield
    clear_cache()


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
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_snapshot_source():
        yield DatabaseSnapshotSource(db)

    app.dependency_overrides[get_snapshot_source] = override_get_snapshot_source
    return TestClient(app)


@pytest.fixture
def make_contract() -> Callable[..., RentalContract]:
    """Factory for rental contracts; amounts in kuruş, everything overridable"""

    def _make(**overrides) -> RentalContract:
        fields = dict(
            rental_id="rental_1",
            vehicle_id="vehicle_1",
            customer_id="customer_1",
            start_date=date(2025, 3, 1),
            end_date=date(2025, 3, 10),
            days=10,
            daily_rate_cents=50_000,  # 500.00 TL
            status=RentalStatus.COMPLETED,
            created_at=datetime(2025, 3, 1, 9, 0),
        )
        fields.update(overrides)
        return RentalContract(**fields)

    return _make
