import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
# Force dev mode for default test app; production validation tests override settings
os.environ["APP_ENV"] = "dev"
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("NOTIFICATIONS_DRY_RUN", "true")
os.environ.setdefault("AI_RESPONDER_ENABLED", "false")

from lead_qualifier.db.base import Base
from lead_qualifier.db.deps import get_db
# Import all models so Base.metadata includes every table
import lead_qualifier.db.models as _models  # noqa: F401
from lead_qualifier.db.models import Customer
from lead_qualifier.main import app

SQLALCHEMY_DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///:memory:")

# SQLite in-memory needs StaticPool so every session sees the same database
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Make the app (startup create_all, get_db) use the same DB
import lead_qualifier.db.session as _db_session

_db_session.engine = engine
_db_session.SessionLocal = TestingSessionLocal


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def customer(db):
    """A customer with the reference thresholds: 90210, $75,000, 12 months."""
    customer = Customer(
        customer_id="CUSTOMER_1757835381571NCBTR",
        company_name="Test Remodeling Co",
        contact_email="owner@testremodeling.com",
        service_areas="90210",
        minimum_budget=75000,
        timeline_threshold=12,
    )
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer
