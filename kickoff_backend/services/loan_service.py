# kickoff_backend/services/loan_service.py
# Loan queries and response building (team and match resolved for display).

from datetime import datetime
from typing import Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from kickoff_backend.core.match_clock import has_started
from kickoff_backend.models.loan_model import Loan, LoanRead, LoanMatchSummary
from kickoff_backend.models.match_model import Match
from kickoff_backend.services.team_service import load_team_summaries, missing_team_summary


async def get_all_loans(db: AsyncSession) -> List[Loan]:
    result = await db.execute(select(Loan).order_by(Loan.created_at.desc(), Loan.id.desc()))
    return list(result.scalars().all())


async def build_loan_reads(db: AsyncSession, loans: List[Loan], now: datetime) -> List[LoanRead]:
    """
    Resolve each loan's team and match (with both sides of the match) in bulk.
    Loans whose match no longer exists are skipped.
    """
    match_ids = {loan.match_id for loan in loans}
    matches: Dict[int, Match] = {}
    if match_ids:
        result = await db.execute(select(Match).where(Match.id.in_(match_ids)))
        matches = {m.id: m for m in result.scalars().all()}

    team_ids = [loan.team_id for loan in loans]
    for match in matches.values():
        team_ids.extend([match.home_team_id, match.away_team_id])
    teams = await load_team_summaries(db, team_ids)

    reads = []
    for loan in loans:
        match = matches.get(loan.match_id)
        if match is None:
            continue
        reads.append(LoanRead(
            id=loan.id,
            team_id=loan.team_id,
            match_id=loan.match_id,
            team=teams.get(loan.team_id) or missing_team_summary(loan.team_id),
            match=LoanMatchSummary(
                id=match.id,
                home_team=teams.get(match.home_team_id) or missing_team_summary(match.home_team_id),
                away_team=teams.get(match.away_team_id) or missing_team_summary(match.away_team_id),
                match_date=match.match_date,
                match_time=match.match_time,
                location=match.location,
                status=match.status,
                has_started=has_started(match.match_date, match.match_time, now),
            ),
            number_of_players=loan.number_of_players,
            status=loan.status,
            user_id=loan.user_id,
            created_at=loan.created_at,
            updated_at=loan.updated_at,
        ))
    return reads
