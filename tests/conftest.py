# Shared fixtures: a fresh SQLite database per test and an httpx client bound to the app.
import os
import tempfile

# Must be set before kickoff_backend is imported (config is read at import time)
_tmp = tempfile.mkdtemp(prefix="kickoff-tests-")
os.environ.setdefault("KICKOFF_DB_PATH", os.path.join(_tmp, "kickoff.db"))
os.environ.setdefault("KICKOFF_AVATAR_DIR", os.path.join(_tmp, "media"))
os.environ["KICKOFF_SEED_ON_STARTUP"] = "0"
os.environ["KICKOFF_ENABLE_BACKGROUND_SWEEPS"] = "0"

import io
from datetime import datetime, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from kickoff_backend.core.database import get_db
from kickoff_backend.core.match_clock import local_now
from kickoff_backend.main import app
from kickoff_backend.models import Team, Match, Loan, MatchStatus, LoanStatus

# Saturday 20 December 2025, 11:46 local time
FIXED_NOW = datetime(2025, 12, 20, 11, 46)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def today(now):
    return now.date()


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker, now):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[local_now] = lambda: now

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# -----------------------------
# Row factories
# -----------------------------

@pytest.fixture
def add_team(db):
    async def _add_team(team_name="Wolfsburg", captain_name="Maximilian Arnold",
                        captain_phone="+49 5361 890 001", **kwargs):
        team = Team(team_name=team_name, captain_name=captain_name, captain_phone=captain_phone, **kwargs)
        db.add(team)
        await db.commit()
        await db.refresh(team)
        return team
    return _add_team


@pytest.fixture
def add_match(db, today):
    async def _add_match(home, away, match_time=time(15, 30), match_date=None,
                         status=MatchStatus.NOT_STARTED, league="Bundesliga", country="Germany", **kwargs):
        match = Match(
            home_team_id=home.id,
            away_team_id=away.id,
            match_date=match_date or today,
            match_time=match_time,
            status=status,
            league=league,
            country=country,
            **kwargs,
        )
        db.add(match)
        await db.commit()
        await db.refresh(match)
        return match
    return _add_match


@pytest.fixture
def add_loan(db):
    async def _add_loan(team, match, number_of_players=2, status=LoanStatus.PENDING):
        loan = Loan(team_id=team.id, match_id=match.id, number_of_players=number_of_players, status=status)
        db.add(loan)
        await db.commit()
        await db.refresh(loan)
        return loan
    return _add_loan


@pytest_asyncio.fixture
async def two_teams(add_team):
    home = await add_team("Wolfsburg", "Maximilian Arnold", "+49 5361 890 001")
    away = await add_team("St. Pauli", "Jackson Irvine", "+49 40 317 874 001")
    return home, away


@pytest.fixture
def make_image():
    def _make_image(image_format="PNG"):
        buf = io.BytesIO()
        Image.new("RGB", (4, 4), (22, 110, 68)).save(buf, image_format)
        return buf.getvalue()
    return _make_image
