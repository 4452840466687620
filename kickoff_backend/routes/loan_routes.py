# kickoff_backend/routes/loan_routes.py
# Defines API routes for player loans

from typing import List, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from kickoff_backend.core.auth import get_current_user_id
from kickoff_backend.core.database import get_db
from kickoff_backend.core.match_clock import local_now, has_started
from kickoff_backend.models.loan_model import Loan, LoanCreate, LoanUpdate, LoanRead
from kickoff_backend.models.match_model import Match
from kickoff_backend.models.team_model import Team
from kickoff_backend.services.loan_service import get_all_loans, build_loan_reads
from kickoff_backend.services.loan_completion_service import complete_loans_for_finished_matches

router = APIRouter()


async def _get_loan_or_404(db: AsyncSession, loan_id: int) -> Loan:
    loan = await db.get(Loan, loan_id)
    if not loan:
        raise HTTPException(status_code=404, detail=f"Loan {loan_id} not found.")
    return loan


async def _get_upcoming_match(db: AsyncSession, match_id: int, now: datetime) -> Match:
    """
    Loans can only be tied to a match that exists and has not kicked off yet.
    """
    match = await db.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=400, detail=f"Match {match_id} does not exist.")
    if has_started(match.match_date, match.match_time, now):
        raise HTTPException(status_code=400, detail="Match has already started.")
    return match


async def _read_one(db: AsyncSession, loan: Loan, now: datetime) -> LoanRead:
    reads = await build_loan_reads(db, [loan], now)
    if not reads:
        raise HTTPException(status_code=404, detail=f"Match for loan {loan.id} not found.")
    return reads[0]


@router.get("/", response_model=List[LoanRead])
async def list_loans(db: AsyncSession = Depends(get_db), now: datetime = Depends(local_now)):
    """
    Returns all loans, newest first, with team and match details.
    """
    loans = await get_all_loans(db)
    return await build_loan_reads(db, loans, now)


@router.post("/sync-completed")
async def sync_completed_loans(db: AsyncSession = Depends(get_db)):
    """
    Manually complete the loans of every finished (FT) match.
    """
    return await complete_loans_for_finished_matches(db)


@router.get("/{loan_id}", response_model=LoanRead)
async def get_loan(loan_id: int, db: AsyncSession = Depends(get_db), now: datetime = Depends(local_now)):
    loan = await _get_loan_or_404(db, loan_id)
    return await _read_one(db, loan, now)


@router.post("/", response_model=LoanRead, status_code=201)
async def create_loan(
    data: LoanCreate,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(local_now),
    user_id: Optional[int] = Depends(get_current_user_id),
):
    if not await db.get(Team, data.team_id):
        raise HTTPException(status_code=400, detail=f"Team {data.team_id} does not exist.")
    await _get_upcoming_match(db, data.match_id, now)

    new_loan = Loan(
        team_id=data.team_id,
        match_id=data.match_id,
        number_of_players=data.number_of_players,
        status=data.status,
        user_id=user_id,
    )
    db.add(new_loan)
    await db.commit()
    await db.refresh(new_loan)

    return await _read_one(db, new_loan, now)


@router.patch("/{loan_id}", response_model=LoanRead)
async def update_loan(
    loan_id: int,
    data: LoanUpdate,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(local_now),
):
    loan = await _get_loan_or_404(db, loan_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("team_id") is not None and changes["team_id"] != loan.team_id:
        if not await db.get(Team, changes["team_id"]):
            raise HTTPException(status_code=400, detail=f"Team {changes['team_id']} does not exist.")
        loan.team_id = changes["team_id"]

    if changes.get("match_id") is not None and changes["match_id"] != loan.match_id:
        await _get_upcoming_match(db, changes["match_id"], now)
        loan.match_id = changes["match_id"]

    if changes.get("number_of_players") is not None:
        loan.number_of_players = changes["number_of_players"]
    if changes.get("status") is not None:
        loan.status = changes["status"]

    loan.updated_at = datetime.utcnow()
    db.add(loan)
    await db.commit()
    await db.refresh(loan)

    return await _read_one(db, loan, now)


@router.delete("/{loan_id}")
async def delete_loan(loan_id: int, db: AsyncSession = Depends(get_db)):
    loan = await _get_loan_or_404(db, loan_id)
    await db.delete(loan)
    await db.commit()
    return {"message": f"Loan {loan_id} deleted."}
