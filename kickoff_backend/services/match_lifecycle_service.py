# kickoff_backend/services/match_lifecycle_service.py
# Background sweep that moves overdue matches to FT (full time).

import asyncio
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from kickoff_backend.core.config import SWEEP_INTERVAL_SECONDS, TEST_MODE
from kickoff_backend.core.database import async_session_maker
from kickoff_backend.core.match_clock import local_now, should_auto_finish
from kickoff_backend.models.match_model import Match, MatchStatus
from kickoff_backend.services.match_service import get_matches_by_date, get_unfinished_matches


async def auto_finish_matches(db: AsyncSession, matches: List[Match], now: Optional[datetime] = None) -> dict:
    """
    Set status FT on every given match that has run past the auto-finish threshold.
    Matches already at FT are left alone, so repeated sweeps are harmless.
    Loans of the finished matches are NOT touched here; the loan completion
    sweep picks them up on its own cycle.
    """
    now = now or local_now()
    finished_ids = []

    for match in matches:
        if TEST_MODE:
            print(f"   ⏱️ Checking match {match.id} ({match.status}) scheduled {match.match_date} {match.match_time}")

        if not should_auto_finish(match.match_date, match.match_time, match.status, now):
            continue

        match.status = MatchStatus.FINISHED
        match.updated_at = datetime.utcnow()
        db.add(match)
        finished_ids.append(match.id)

    if finished_ids:
        await db.commit()

    return {
        "checked": len(matches),
        "finished": len(finished_ids),
        "match_ids": finished_ids,
    }


async def sweep_matches_for_date(
    db: AsyncSession,
    match_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Run the auto-finish check over one day's matches.
    Without a date every unfinished match up to today is checked, so a late
    kick-off that only reaches the threshold after midnight is still finished.
    """
    now = now or local_now()
    if match_date is None:
        matches = await get_unfinished_matches(db, now.date())
    else:
        matches = await get_matches_by_date(db, match_date)
    return await auto_finish_matches(db, matches, now)


async def safe_sweep(db: AsyncSession, matches: List[Match], now: Optional[datetime] = None) -> Optional[dict]:
    """
    Best-effort sweep used when a day's matches are loaded.
    A failure is printed and ignored; the next load or background cycle retries.
    """
    try:
        return await auto_finish_matches(db, matches, now)
    except Exception as e:
        await db.rollback()
        print(f"[{datetime.utcnow()}] Match auto-finish error: {str(e)}")
        return None


async def trigger_match_sweep() -> dict:
    """
    Run one sweep of every overdue match in its own session.
    """
    async with async_session_maker() as session:
        return await sweep_matches_for_date(session)


async def run_match_sweep_loop(interval_seconds: int = SWEEP_INTERVAL_SECONDS):
    """
    Background loop that finishes overdue matches every interval.
    Runs until the task is cancelled.
    """
    while True:
        try:
            result = await trigger_match_sweep()

            if result["finished"] > 0:
                print(f"[{datetime.utcnow()}] ⚽ Match sweep: {result['finished']} of {result['checked']} matches set to FT {result['match_ids']}")

        except Exception as e:
            print(f"[{datetime.utcnow()}] Match sweep error: {str(e)}")

        await asyncio.sleep(interval_seconds)
