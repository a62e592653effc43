"""Pytest configuration and fixtures."""

import os
from contextlib import nullcontext
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.api.dependencies import get_email_sender, get_run_lock
from src.config import Settings, get_settings
from src.database import Base, get_db
from src.main import app
from src.models import InventoryAlertRecipient, InventoryItem, InventoryLocation, Profile
from src.models.enums import ProfileRole
from src.services.auth import create_access_token
from src.services.email_service import EmailSendError

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace(
        "/fleet_inventory", "/fleet_inventory_test"
    )
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def as_utc(value: datetime | None) -> datetime | None:
    """Normalise a datetime read back from the database to aware UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class RecordingEmailSender:
    """Email sender that records messages instead of calling Resend."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail_with: str | None = None

    def send(self, to, subject, html_body):
        if self.fail_with:
            raise EmailSendError(self.fail_with)
        self.sent.append({"to": list(to), "subject": subject, "html": html_body})


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def test_settings():
    """Settings with email configured and no cron secret."""
    return Settings(
        resend_api_key="re_test_key",
        alert_from_email="alerts@example.com",
        business_timezone="America/Chicago",
    )


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture(scope="function")
def client(db, test_settings, email_sender):
    """Create a test client with database, settings, email and lock overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    app.dependency_overrides[get_run_lock] = lambda: nullcontext
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_profile(db):
    """Factory for profiles."""

    def _make(email: str | None, role: ProfileRole = ProfileRole.EMPLOYEE, name: str = "Test"):
        profile = Profile(email=email, full_name=name, role=role)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def make_item(db):
    """Factory for active inventory items."""

    def _make(
        item_id: str,
        quantity: int,
        minimum_quantity: int,
        name: str | None = None,
        category: str | None = "Parts",
        location: InventoryLocation | None = None,
        is_active: bool = True,
    ):
        item = InventoryItem(
            id=item_id,
            name=name or item_id,
            category=category,
            quantity=quantity,
            minimum_quantity=minimum_quantity,
            location_id=location.id if location else None,
            is_active=is_active,
        )
        db.add(item)
        db.commit()
        return item

    return _make


@pytest.fixture
def recipient(db, make_profile):
    """An enabled alert recipient."""
    profile = make_profile("shop.manager@example.com", ProfileRole.OWNER, "Shop Manager")
    db.add(InventoryAlertRecipient(profile_id=profile.id, is_enabled=True))
    db.commit()
    return profile


@pytest.fixture
def manager_headers(make_profile):
    profile = make_profile("owner@example.com", ProfileRole.OWNER, "Owner")
    return {"Authorization": f"Bearer {create_access_token(profile.id, profile.email)}"}


@pytest.fixture
def employee_headers(make_profile):
    profile = make_profile("employee@example.com", ProfileRole.EMPLOYEE, "Employee")
    return {"Authorization": f"Bearer {create_access_token(profile.id, profile.email)}"}
