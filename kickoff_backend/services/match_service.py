# kickoff_backend/services/match_service.py
# Match queries, schedule filtering and response building.

from datetime import date, datetime
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from kickoff_backend.core import match_clock
from kickoff_backend.models.match_model import (
    Match, MatchStatus, MatchClock, MatchRead, LeagueGroup, MatchSchedule
)
from kickoff_backend.models.team_model import TeamSummary
from kickoff_backend.services.team_service import load_team_summaries, missing_team_summary


async def get_all_matches(db: AsyncSession) -> List[Match]:
    """All matches, earliest date first; newest entries first within a day."""
    result = await db.execute(
        select(Match).order_by(Match.match_date.asc(), Match.created_at.desc(), Match.id.desc())
    )
    return list(result.scalars().all())


async def get_matches_by_date(db: AsyncSession, match_date: date) -> List[Match]:
    result = await db.execute(
        select(Match)
        .where(Match.match_date == match_date)
        .order_by(Match.created_at.desc(), Match.id.desc())
    )
    return list(result.scalars().all())


async def get_unfinished_matches(db: AsyncSession, up_to: date) -> List[Match]:
    """Every match not yet at FT scheduled on or before up_to."""
    result = await db.execute(
        select(Match)
        .where(Match.status != MatchStatus.FINISHED, Match.match_date <= up_to)
        .order_by(Match.match_date.asc(), Match.id.asc())
    )
    return list(result.scalars().all())


def build_clock(match: Match, now: datetime) -> MatchClock:
    return MatchClock(
        match_id=match.id,
        status=match.status,
        has_started=match_clock.has_started(match.match_date, match.match_time, now),
        elapsed_minutes=match_clock.elapsed_minutes(match.match_date, match.match_time, now),
        elapsed_display=match_clock.format_elapsed(match.match_date, match.match_time, now, match.status),
        should_auto_finish=match_clock.should_auto_finish(match.match_date, match.match_time, match.status, now),
    )


def to_match_read(match: Match, teams: Dict[int, TeamSummary], now: datetime) -> MatchRead:
    return MatchRead(
        id=match.id,
        home_team_id=match.home_team_id,
        away_team_id=match.away_team_id,
        home_team=teams.get(match.home_team_id) or missing_team_summary(match.home_team_id),
        away_team=teams.get(match.away_team_id) or missing_team_summary(match.away_team_id),
        home_score=match.home_score,
        away_score=match.away_score,
        status=match.status,
        league=match.league,
        country=match.country,
        match_date=match.match_date,
        match_time=match.match_time,
        location=match.location,
        user_id=match.user_id,
        created_at=match.created_at,
        updated_at=match.updated_at,
        has_started=match_clock.has_started(match.match_date, match.match_time, now),
        elapsed_minutes=match_clock.elapsed_minutes(match.match_date, match.match_time, now),
        elapsed_display=match_clock.format_elapsed(match.match_date, match.match_time, now, match.status),
        start_time_display=match_clock.format_match_start_time(match.match_date, match.match_time),
        date_display=match_clock.format_match_date(match.match_date),
    )


async def build_match_reads(db: AsyncSession, matches: List[Match], now: datetime) -> List[MatchRead]:
    team_ids = [m.home_team_id for m in matches] + [m.away_team_id for m in matches]
    teams = await load_team_summaries(db, team_ids)
    return [to_match_read(m, teams, now) for m in matches]


def filter_matches(
    matches: List[MatchRead],
    team_id: Optional[int] = None,
    query: Optional[str] = None,
) -> List[MatchRead]:
    """
    Keep matches involving team_id (home or away) whose team names or league
    contain the search query (case-insensitive).
    """
    filtered = []
    needle = (query or "").strip().lower()
    for match in matches:
        if team_id is not None and team_id not in (match.home_team_id, match.away_team_id):
            continue
        if needle and not (
            needle in match.home_team.team_name.lower()
            or needle in match.away_team.team_name.lower()
            or needle in match.league.lower()
        ):
            continue
        filtered.append(match)
    return filtered


def group_by_league(match_date: date, matches: List[MatchRead]) -> MatchSchedule:
    """
    Group a day's matches by league, keeping first-seen league order.
    The country shown for a league is the one of its first match.
    """
    groups: Dict[str, LeagueGroup] = {}
    for match in matches:
        group = groups.get(match.league)
        if group is None:
            group = LeagueGroup(league=match.league, country=match.country, matches=[])
            groups[match.league] = group
        group.matches.append(match)

    return MatchSchedule(
        match_date=match_date,
        date_display=match_clock.format_match_date(match_date),
        leagues=list(groups.values()),
    )
