import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from kickoff_backend.core.database import get_db
from kickoff_backend.main import app


@pytest.mark.asyncio
async def test_health_check(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.json()["database"] == "ok"
    assert r.json()["background_tasks"] == 0


@pytest.mark.asyncio
async def test_database_failure_is_503(tmp_path):
    # The parent directory does not exist, so SQLite cannot open the file
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'kickoff.db'}")
    broken = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with broken() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            r = await ac.get("/teams/")
    finally:
        app.dependency_overrides.clear()
        await engine.dispose()

    assert r.status_code == 503
    assert r.json() == {"detail": "Database unavailable"}
