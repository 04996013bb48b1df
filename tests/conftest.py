"""Global test configuration and fixtures."""

import os
from datetime import date, timedelta
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["LOG_FORMAT"] = "text"
os.environ["PROMETHEUS_METRICS_ENABLED"] = "false"

from peniel.api.schemas import EventInput, InspirationInput, SermonInput, ServiceInput
from peniel.application.services import ActivityLogger, ContentService
from peniel.core.config import settings
from peniel.core.security import security_service
from peniel.domain.entities import ServiceIcon
from tests._helpers.fakes import (
    ADMIN_EMAIL,
    ADMIN_PASSWORD,
    FakeActivityLogRepository,
    FakeEmailSender,
    FakeEventRepository,
    FakeInspirationRepository,
    FakeSermonRepository,
    FakeServiceRepository,
    FakeSiteContentRepository,
)


@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    """Bcrypt is slow, hash the test password once."""
    return security_service.hash_password(ADMIN_PASSWORD)


@pytest.fixture
def admin_settings(monkeypatch, admin_password_hash):
    monkeypatch.setattr(settings, "admin_email", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "admin_password_hash", admin_password_hash)
    return settings


@pytest.fixture
def admin_token() -> str:
    return security_service.create_access_token(
        data={"sub": ADMIN_EMAIL, "role": "admin"}, expires_delta=timedelta(hours=1)
    )


@pytest.fixture
def expired_admin_token() -> str:
    return security_service.create_access_token(
        data={"sub": ADMIN_EMAIL, "role": "admin"},
        expires_delta=timedelta(seconds=-1),  # Already expired
    )


@pytest.fixture
def auth_headers(admin_token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


# Service fixtures


@pytest.fixture
def activity_repo() -> FakeActivityLogRepository:
    return FakeActivityLogRepository()


@pytest.fixture
def content_service(activity_repo) -> ContentService:
    """ContentService over in-memory repositories."""
    return ContentService(
        sermon_repo=FakeSermonRepository(),
        event_repo=FakeEventRepository(),
        service_repo=FakeServiceRepository(),
        inspiration_repo=FakeInspirationRepository(),
        site_content_repo=FakeSiteContentRepository(),
        activity=ActivityLogger(activity_repo, retention=20),
    )


@pytest.fixture
def fake_email_sender() -> FakeEmailSender:
    return FakeEmailSender()


# Form data


@pytest.fixture
def sermon_input() -> SermonInput:
    return SermonInput(
        title="Walking in Faith",
        speaker="Pastor Debra",
        topic="Faith",
        date=date(2024, 5, 12),
        video_url="https://www.youtube.com/watch?v=abc123",
        audio_url="",
        thumbnail_url="http://localhost:8000/storage/sermons/1715500000000.png",
        description="How trust grows through small daily steps.",
    )


@pytest.fixture
def event_input() -> EventInput:
    return EventInput(
        title="Community Picnic",
        location="Riverside Park",
        date=date(2099, 7, 4),
        time="12:00 PM",
        description="Food, games and fellowship for the whole family.",
        image_url="http://localhost:8000/storage/events/1715500000001.jpg",
    )


@pytest.fixture
def service_input() -> ServiceInput:
    return ServiceInput(
        title="Sunday Worship",
        schedule="Sundays at 10:00 AM",
        details="Join us for praise, worship and the Word.",
        icon=ServiceIcon.CHURCH,
    )


@pytest.fixture
def inspiration_input() -> InspirationInput:
    return InspirationInput(prompt="  Pray for someone who has hurt you.  ")


# API testing fixtures


@pytest_asyncio.fixture
async def test_app(tmp_path):
    """Application wired to an in-memory database and a temporary storage root."""
    from peniel.core import dependencies
    from peniel.infrastructure.db.database import Database
    from peniel.infrastructure.storage.file_storage import LocalFileStorage
    from peniel.main import app

    # ASGITransport does not run the lifespan, wire dependencies by hand
    dependencies.database = Database("sqlite+aiosqlite:///:memory:", echo=False)
    await dependencies.database.initialize()
    await dependencies.database.create_all()

    dependencies.file_storage = LocalFileStorage(
        root=str(tmp_path),
        public_base_url="http://testserver/storage",
        buckets=["sermons", "events", "content", "inspirations"],
        clock_ms=lambda: 1715500000000,
    )

    yield app

    app.dependency_overrides.clear()
    await dependencies.database.close()
    dependencies.database = None
    dependencies.file_storage = None


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app), base_url="http://testserver"
    ) as ac:
        yield ac
