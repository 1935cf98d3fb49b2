"""
Pytest configuration and shared fixtures.
"""

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from flugzeug.config import clear_settings_cache
from flugzeug.infrastructure.database.connection import Base
from flugzeug.infrastructure.database.query_builder import QueryBuilder
from flugzeug.infrastructure.database.repositories import PostgresFlugzeugRepository


TEST_API_KEY = "test-api-key"


# ============================================================
# Database Fixtures
# ============================================================

@pytest_asyncio.fixture
async def async_engine():
    """Create async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for testing."""
    async_session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def flugzeug_repo(db_session) -> PostgresFlugzeugRepository:
    """Flugzeug repository on the SQLite test session."""
    return PostgresFlugzeugRepository(db_session, QueryBuilder("sqlite"))


# ============================================================
# Mock Fixtures
# ============================================================

@pytest.fixture
def mock_mail_service():
    """Create mock mail service."""
    service = AsyncMock()
    service.send_mail = AsyncMock(return_value=True)
    service.close = AsyncMock()
    return service


@pytest.fixture
def mock_flugzeug_repo():
    """Create mock Flugzeug repository."""
    repo = AsyncMock()
    repo.find_by_id = AsyncMock(return_value=None)
    repo.find = AsyncMock(return_value=[])
    repo.save = AsyncMock()
    repo.delete_aggregate = AsyncMock(return_value=True)
    return repo


# ============================================================
# Domain Entity Factories
# ============================================================

@pytest.fixture
def flugzeug_factory():
    """Factory for creating test Flugzeug entities."""
    from flugzeug.domain.entities import Flugzeug, Modell, Sitzplatz

    def create(
        preis: Decimal = Decimal("99.99"),
        einsatzbereit: bool = True,
        baujahr: date = date(2022, 2, 28),
        modell: str = "Titelpost",
        sitzplaetze: tuple[str, ...] = ("Klasse 1",),
        **kwargs,
    ) -> Flugzeug:
        return Flugzeug(
            preis=preis,
            einsatzbereit=einsatzbereit,
            baujahr=baujahr,
            modell=Modell(modell=modell),
            sitzplaetze=[Sitzplatz(sitzplatzklasse=s) for s in sitzplaetze],
            **kwargs,
        )

    return create


# ============================================================
# Settings Override
# ============================================================

@pytest.fixture(autouse=True)
def override_settings(monkeypatch):
    """Override settings for testing."""
    monkeypatch.setenv("DB_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("SECURITY_API_KEY", TEST_API_KEY)
    monkeypatch.setenv("MAIL_ENABLED", "false")
    monkeypatch.setenv("LOG_FORMAT", "console")
    clear_settings_cache()

    yield

    clear_settings_cache()


# ============================================================
# API Client
# ============================================================

@pytest_asyncio.fixture
async def api_client(db_session, mock_mail_service) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, bound to the test session."""
    from flugzeug.presentation.api.dependencies import get_db_session, get_mail_sender
    from flugzeug.presentation.api.main import create_app

    app = create_app()

    async def override_db_session():
        yield db_session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_mail_sender] = lambda: mock_mail_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
