import os
from collections.abc import AsyncGenerator
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from passlib.context import CryptContext

# Load environment variables from .env file
load_dotenv()

ADMIN_EMAIL = "admin@scttrusthospital.test"
ADMIN_PASSWORD = "correct horse battery"

# Settings are read at import time; give the app a self-contained configuration
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ["ADMIN_EMAIL"] = ADMIN_EMAIL
os.environ["ADMIN_PASSWORD_HASH"] = CryptContext(schemes=["bcrypt"], bcrypt__rounds=4).hash(
    ADMIN_PASSWORD
)
os.environ.setdefault("RECAPTCHA_SECRET_KEY", "test-recaptcha-secret")
os.environ.setdefault("LOG_FORMAT", "console")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from clinic_api.core.captcha import CaptchaResult  # noqa: E402
from clinic_api.core.redis_client import get_redis_client  # noqa: E402
from clinic_api.core.security import create_session_token  # noqa: E402
from clinic_api.database import get_db  # noqa: E402
from clinic_api.main import app  # noqa: E402
from clinic_api.models import metadata  # noqa: E402
from tests.helpers import open_day  # noqa: E402

# Test database URL - a private in-memory SQLite database unless overridden
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
TEST_DATABASE_URL = TEST_DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")

if TEST_DATABASE_URL.startswith("sqlite"):
    # One shared connection so every session sees the same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    from sqlalchemy.pool import NullPool

    test_engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on freshly created tables."""
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)


@pytest.fixture
def mock_redis() -> MagicMock:
    """Redis stand-in: empty cache, first hit of every rate-limit window."""
    redis_client = MagicMock()
    redis_client.get.return_value = None
    redis_client.incr.return_value = 1
    return redis_client


@pytest.fixture
def captcha() -> AsyncMock:
    """reCAPTCHA verification that passes unless a test says otherwise."""
    verifier = AsyncMock(
        return_value=CaptchaResult(success=True, score=0.9, action="appointment_booking")
    )
    with patch("clinic_api.services.appointment_service.verify_recaptcha", verifier):
        yield verifier


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    mock_redis: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = lambda: mock_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict:
    """Authorization headers carrying a valid admin session."""
    token = create_session_token(
        {"sub": "1", "email": ADMIN_EMAIL, "name": "Admin User"},
        expires_delta=timedelta(minutes=30),
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def booking_data() -> dict:
    """Sample booking form submission."""
    return {
        "name": "Priya Sharma",
        "email": "priya@example.com",
        "phone": "+91 98765 43210",
        "service": "Antenatal consultation",
        "date": open_day(3).isoformat(),
        "time": "11:00 AM",
        "message": "First visit",
        "captchaToken": "token-from-widget",
    }


@pytest.fixture
def admin_credentials() -> dict:
    """Dashboard login matching the configured admin."""
    return {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
