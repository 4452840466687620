# kickoff_backend/routes/match_routes.py
# Defines API routes for matches: CRUD, the day schedule, the match clock and the auto-finish sweep.

from typing import List, Optional
from datetime import date, datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from kickoff_backend.core.auth import get_current_user_id
from kickoff_backend.core.database import get_db
from kickoff_backend.core.match_clock import local_now, is_in_past
from kickoff_backend.models.loan_model import Loan
from kickoff_backend.models.match_model import (
    Match, MatchStatus, MatchCreate, MatchUpdate, MatchRead, MatchClock, MatchSchedule
)
from kickoff_backend.models.team_model import Team
from kickoff_backend.services.match_service import (
    get_all_matches, get_matches_by_date, build_match_reads, build_clock,
    filter_matches, group_by_league
)
from kickoff_backend.services.match_lifecycle_service import safe_sweep, sweep_matches_for_date

router = APIRouter()


# ---------------------------------------------
# Helpers
# ---------------------------------------------
async def _get_match_or_404(db: AsyncSession, match_id: int) -> Match:
    match = await db.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=404, detail=f"Match {match_id} not found.")
    return match


async def _validate_teams(db: AsyncSession, home_team_id: int, away_team_id: int) -> None:
    if home_team_id == away_team_id:
        raise HTTPException(status_code=400, detail="Home and away team must be different.")
    for team_id in (home_team_id, away_team_id):
        if not await db.get(Team, team_id):
            raise HTTPException(status_code=400, detail=f"Team {team_id} does not exist.")


async def _load_day(db: AsyncSession, match_date: date, now: datetime) -> List[Match]:
    """
    Load a day's matches, finish the overdue ones, then re-read the day
    so the response reflects the sweep.
    """
    matches = await get_matches_by_date(db, match_date)
    result = await safe_sweep(db, matches, now)
    if result and result["finished"] > 0:
        matches = await get_matches_by_date(db, match_date)
    return matches


# =========================================
# LIST / SCHEDULE
# =========================================
@router.get("/", response_model=List[MatchRead])
async def list_matches(
    match_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(local_now),
):
    """
    All matches (earliest date first), or one day's matches when match_date is given.
    Loading a day also runs the auto-finish sweep over it.
    """
    if match_date is None:
        matches = await get_all_matches(db)
    else:
        matches = await _load_day(db, match_date, now)
    return await build_match_reads(db, matches, now)


@router.get("/schedule", response_model=MatchSchedule)
async def get_schedule(
    match_date: Optional[date] = None,
    team_id: Optional[int] = None,
    q: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(local_now),
):
    """
    A day's matches (today by default) grouped by league.
    - team_id: only matches where this team plays home or away
    - q: case-insensitive search over both team names and the league
    """
    day = match_date or now.date()
    matches = await _load_day(db, day, now)
    reads = await build_match_reads(db, matches, now)
    return group_by_league(day, filter_matches(reads, team_id=team_id, query=q))


@router.post("/sweep")
async def sweep_matches(
    match_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(local_now),
):
    """
    Manually run the auto-finish sweep for one day, or for every
    unfinished match up to today when no date is given.
    """
    return await sweep_matches_for_date(db, match_date, now)


# =========================================
# SINGLE MATCH
# =========================================
@router.get("/{match_id}", response_model=MatchRead)
async def get_match(match_id: int, db: AsyncSession = Depends(get_db), now: datetime = Depends(local_now)):
    match = await _get_match_or_404(db, match_id)
    return (await build_match_reads(db, [match], now))[0]


@router.get("/{match_id}/clock", response_model=MatchClock)
async def get_match_clock(match_id: int, db: AsyncSession = Depends(get_db), now: datetime = Depends(local_now)):
    """
    Has the match started, how long has it been running, and is it due to be finished.
    """
    match = await _get_match_or_404(db, match_id)
    return build_clock(match, now)


@router.post("/", response_model=MatchRead, status_code=201)
async def create_match(
    data: MatchCreate,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(local_now),
    user_id: Optional[int] = Depends(get_current_user_id),
):
    """
    Schedule a new match. It always starts as NS with a 0-0 score.
    """
    await _validate_teams(db, data.home_team_id, data.away_team_id)
    if is_in_past(data.match_date, data.match_time, now):
        raise HTTPException(status_code=400, detail="Cannot schedule a match in the past.")

    new_match = Match(
        home_team_id=data.home_team_id,
        away_team_id=data.away_team_id,
        home_score=0,
        away_score=0,
        status=MatchStatus.NOT_STARTED,
        league=data.league.strip(),
        country=data.country.strip(),
        match_date=data.match_date,
        match_time=data.match_time,
        location=(data.location or "").strip() or None,
        user_id=user_id,
    )
    db.add(new_match)
    await db.commit()
    await db.refresh(new_match)

    return (await build_match_reads(db, [new_match], now))[0]


@router.patch("/{match_id}", response_model=MatchRead)
async def update_match(
    match_id: int,
    data: MatchUpdate,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(local_now),
):
    """
    Partial update: scores, status, teams, schedule, league, country, location.
    Whether a started match may still be rescheduled is left to the client
    (the response carries has_started).
    """
    match = await _get_match_or_404(db, match_id)
    changes = data.model_dump(exclude_unset=True)

    # Teams
    home_team_id = changes.get("home_team_id") or match.home_team_id
    away_team_id = changes.get("away_team_id") or match.away_team_id
    if "home_team_id" in changes or "away_team_id" in changes:
        await _validate_teams(db, home_team_id, away_team_id)
    match.home_team_id = home_team_id
    match.away_team_id = away_team_id

    # Schedule
    if "match_date" in changes or "match_time" in changes:
        new_date = changes.get("match_date") or match.match_date
        new_time = changes["match_time"] if "match_time" in changes else match.match_time
        if (new_date, new_time) != (match.match_date, match.match_time) and is_in_past(new_date, new_time, now):
            raise HTTPException(status_code=400, detail="Cannot schedule a match in the past.")
        match.match_date = new_date
        match.match_time = new_time

    # Score and status
    for field in ("home_score", "away_score", "status"):
        if changes.get(field) is not None:
            setattr(match, field, changes[field])

    # Competition / venue
    for field in ("league", "country"):
        if changes.get(field) is not None:
            setattr(match, field, changes[field].strip())
    if "location" in changes:
        match.location = (changes["location"] or "").strip() or None

    match.updated_at = datetime.utcnow()
    db.add(match)
    await db.commit()
    await db.refresh(match)

    return (await build_match_reads(db, [match], now))[0]


@router.delete("/{match_id}")
async def delete_match(match_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete a match together with the loans that reference it.
    """
    match = await _get_match_or_404(db, match_id)

    result = await db.execute(select(Loan).where(Loan.match_id == match_id))
    loans = result.scalars().all()
    for loan in loans:
        await db.delete(loan)

    await db.delete(match)
    await db.commit()

    return {"message": f"Match {match_id} deleted.", "deleted_loans": len(loans)}
