"""Service test fixtures — async DB, FastAPI test client, vendor fakes, seeded tenants.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager initialized for background tasks that bypass get_db
    - Every vendor provider (storage, fal, replicate, stripe, mailer, ffmpeg, fetcher)
      is overridden with the fakes from tests/services/fakes.py
    - `admin` owns `project`; `other_admin` owns nothing in the seed data

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - db_manager patched: project deletion runs in a background task that uses
      db_manager.session() directly
    - Tokens issued through admin_accounts.issue_token: the same code path as login
"""

from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from photobooth.api import dependencies
from photobooth.config import get_settings
from photobooth.core.security import hash_password
from photobooth.db.base import Base
from photobooth.infrastructure.database import get_db, DatabaseSessionManager
import photobooth.infrastructure.database as db_module
from photobooth.main import app
from photobooth.models import AdminUser, Project, Style
from photobooth.services import admin_accounts

from tests.services.fakes import (
    FakeFal, FakeFetcher, FakeFfmpeg, FakeMailer, FakeReplicate, FakeStorage, FakeStripe,
)

ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fakes():
    """Vendor fakes shared by the client and the test body."""
    return SimpleNamespace(
        storage=FakeStorage(),
        fetcher=FakeFetcher(),
        fal=FakeFal(),
        replicate=FakeReplicate(),
        stripe=FakeStripe(),
        mailer=FakeMailer(),
        ffmpeg=FakeFfmpeg(),
    )


@pytest.fixture
async def client(test_engine, test_session_factory, fakes):
    """FastAPI test client with DB and vendor dependencies overridden."""
    # Override get_db for route-level dependency injection
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[dependencies.get_storage] = lambda: fakes.storage
    app.dependency_overrides[dependencies.get_fetcher] = lambda: fakes.fetcher
    app.dependency_overrides[dependencies.get_fal] = lambda: fakes.fal
    app.dependency_overrides[dependencies.get_replicate] = lambda: fakes.replicate
    app.dependency_overrides[dependencies.get_stripe] = lambda: fakes.stripe
    app.dependency_overrides[dependencies.get_mailer] = lambda: fakes.mailer
    app.dependency_overrides[dependencies.get_ffmpeg] = lambda: fakes.ffmpeg

    # Patch db_manager for background tasks that use it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def override_settings():
    """Swap route-level settings: override_settings(stripe_webhook_secret="...")."""
    def _override(**changes):
        patched = get_settings().model_copy(update=changes)
        app.dependency_overrides[get_settings] = lambda: patched
        return patched
    return _override


# ─── Seed data ──────────────────────────────────────────────────

async def _seed_admin(db: AsyncSession, email: str) -> AdminUser:
    admin = AdminUser(email=email, password_hash=hash_password(ADMIN_PASSWORD))
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    return admin


def _headers_for(admin: AdminUser) -> dict:
    token, _ = admin_accounts.issue_token(admin, get_settings())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def admin(test_db):
    return await _seed_admin(test_db, "owner@studio.example.com")


@pytest.fixture
async def other_admin(test_db):
    return await _seed_admin(test_db, "rival@studio.example.com")


@pytest.fixture
def auth_headers(admin):
    return _headers_for(admin)


@pytest.fixture
def other_headers(other_admin):
    return _headers_for(other_admin)


@pytest.fixture
async def project(test_db, admin):
    project = Project(
        name="Gala 2025", slug="gala", created_by=admin.id,
        photobooth_type="standard",
    )
    test_db.add(project)
    await test_db.commit()
    await test_db.refresh(project)
    return project


@pytest.fixture
async def style(test_db, project):
    style = Style(
        project_id=project.id, name="Pirate", gender="f", style_key="pirate",
        prompt="Turn the person into a pirate captain",
        preview_image="https://cdn.test/styles/pirate.png",
    )
    test_db.add(style)
    await test_db.commit()
    await test_db.refresh(style)
    return style
