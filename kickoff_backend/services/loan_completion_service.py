# kickoff_backend/services/loan_completion_service.py
# Background service that completes loans once their match is at full time

import asyncio
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from kickoff_backend.core.config import SWEEP_INTERVAL_SECONDS
from kickoff_backend.core.database import async_session_maker
from kickoff_backend.models.loan_model import Loan, LoanStatus
from kickoff_backend.models.match_model import Match, MatchStatus


async def complete_loans_for_finished_matches(db: AsyncSession) -> dict:
    """
    Find every loan whose match is FT but which is not completed yet,
    and mark it completed.
    Returns summary of completed loans.
    """
    result = await db.execute(
        select(Loan)
        .join(Match, Match.id == Loan.match_id)
        .where(
            Match.status == MatchStatus.FINISHED,
            Loan.status != LoanStatus.COMPLETED,
        )
    )
    loans = result.scalars().all()

    if not loans:
        return {
            "completed_loans": 0,
            "loan_ids": []
        }

    loan_ids = []
    for loan in loans:
        loan.status = LoanStatus.COMPLETED
        loan.updated_at = datetime.utcnow()
        db.add(loan)
        loan_ids.append(loan.id)

    await db.commit()

    return {
        "completed_loans": len(loan_ids),
        "loan_ids": loan_ids
    }


async def trigger_loan_completion() -> dict:
    """
    Run one loan completion pass in its own session.
    """
    async with async_session_maker() as session:
        return await complete_loans_for_finished_matches(session)


async def run_loan_completion_loop(interval_seconds: int = SWEEP_INTERVAL_SECONDS):
    """
    Background loop that completes loans of finished matches every interval.
    Independent from the match sweep: a match can sit at FT for up to one
    interval before its loans follow.
    """
    while True:
        try:
            result = await trigger_loan_completion()

            if result["completed_loans"] > 0:
                print(f"[{datetime.utcnow()}] 📋 Loan completion: {result['completed_loans']} loans completed {result['loan_ids']}")

        except Exception as e:
            print(f"[{datetime.utcnow()}] Loan completion error: {str(e)}")

        # Wait before checking again
        await asyncio.sleep(interval_seconds)
