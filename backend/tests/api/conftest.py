"""API test infrastructure — async httpx client with SQLite test database."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.dialects.postgresql import UUID as PG_UUID, JSONB

from app.models.database import Base, get_db

# ---------------------------------------------------------------------------
# SQLite compatibility for PostgreSQL column types
# ---------------------------------------------------------------------------

@compiles(PG_UUID, "sqlite")
def _compile_uuid_sqlite(type_, compiler, **kw):
    return "CHAR(36)"


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_, compiler, **kw):
    return "JSON"


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def storage_dir(tmp_path: Path, monkeypatch) -> Path:
    """Uploaded templates and covers land under a per-test directory."""
    from app.config import settings

    root = tmp_path / "storage"
    monkeypatch.setattr(settings, "storage_dir", root)
    return root


# ---------------------------------------------------------------------------
# FastAPI app with overridden dependencies
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def app(db_engine, storage_dir):
    from app.main import create_app

    application = create_app()

    factory = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async def _override_get_db():
        async with factory() as session:
            yield session

    application.dependency_overrides[get_db] = _override_get_db

    # Reset rate limiters between tests
    from app.core.rate_limit import export_limiter, upload_limiter
    export_limiter.reset()
    upload_limiter.reset()

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Template and report helpers
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def uploaded_template(client: AsyncClient, template_pdf: Path) -> dict:
    """Upload the two-page template PDF and return the template response."""
    resp = await client.post(
        "/api/v1/templates/",
        files={"template": ("standard.pdf", template_pdf.read_bytes(), "application/pdf")},
        data={"name": "Standard"},
    )
    assert resp.status_code == 201
    return resp.json()


@pytest_asyncio.fixture
async def created_report(client: AsyncClient, uploaded_template: dict) -> dict:
    """Create a report from the uploaded template."""
    resp = await client.post(
        f"/api/v1/templates/{uploaded_template['id']}/reports",
        json={"name": "Maple Street"},
    )
    assert resp.status_code == 201
    return resp.json()
