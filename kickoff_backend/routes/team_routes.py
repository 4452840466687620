# kickoff_backend/routes/team_routes.py
# Defines API routes for teams (CRUD and avatar upload)

from typing import List, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import or_
from sqlmodel import select

from kickoff_backend.core.auth import get_current_user_id
from kickoff_backend.core.config import TEST_MODE
from kickoff_backend.core.database import get_db
from kickoff_backend.models.loan_model import Loan
from kickoff_backend.models.match_model import Match
from kickoff_backend.models.team_model import Team, TeamCreate, TeamUpdate, TeamRead, normalize_avatar_url
from kickoff_backend.services.storage_service import upload_image, delete_image, validate_image
from kickoff_backend.services.team_service import to_team_read

router = APIRouter()


async def _get_team_or_404(db: AsyncSession, team_id: int) -> Team:
    team = await db.get(Team, team_id)
    if not team:
        raise HTTPException(status_code=404, detail=f"Team {team_id} not found.")
    return team


@router.get("/", response_model=List[TeamRead])
async def list_teams(db: AsyncSession = Depends(get_db)):
    """
    Returns all teams, newest first.
    """
    result = await db.execute(select(Team).order_by(Team.created_at.desc(), Team.id.desc()))
    return [to_team_read(team) for team in result.scalars().all()]


@router.get("/{team_id}", response_model=TeamRead)
async def get_team(team_id: int, db: AsyncSession = Depends(get_db)):
    team = await _get_team_or_404(db, team_id)
    return to_team_read(team)


@router.post("/", response_model=TeamRead, status_code=201)
async def create_team(
    data: TeamCreate,
    db: AsyncSession = Depends(get_db),
    user_id: Optional[int] = Depends(get_current_user_id),
):
    new_team = Team(
        team_name=data.team_name.strip(),
        captain_name=data.captain_name.strip(),
        captain_phone=data.captain_phone.strip(),
        avatar_url=normalize_avatar_url(data.avatar_url),
        user_id=user_id,
    )
    db.add(new_team)
    await db.commit()
    await db.refresh(new_team)
    return to_team_read(new_team)


@router.patch("/{team_id}", response_model=TeamRead)
async def update_team(team_id: int, data: TeamUpdate, db: AsyncSession = Depends(get_db)):
    """
    Partial update.
    - Omitted avatar_url keeps the stored avatar.
    - An empty or data: avatar_url clears it (the default avatar is shown).
    """
    team = await _get_team_or_404(db, team_id)
    changes = data.model_dump(exclude_unset=True)

    for field in ("team_name", "captain_name", "captain_phone"):
        if changes.get(field) is not None:
            setattr(team, field, changes[field].strip())

    if "avatar_url" in changes:
        team.avatar_url = normalize_avatar_url(changes["avatar_url"])

    if TEST_MODE:
        print(f"[DEBUG] Team {team_id} update payload: {changes}")

    team.updated_at = datetime.utcnow()
    db.add(team)
    await db.commit()
    await db.refresh(team)
    return to_team_read(team)


@router.delete("/{team_id}")
async def delete_team(team_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete a team. Refused while matches or loans still reference it.
    """
    team = await _get_team_or_404(db, team_id)

    match_ref = await db.execute(
        select(Match.id).where(or_(Match.home_team_id == team_id, Match.away_team_id == team_id))
    )
    loan_ref = await db.execute(select(Loan.id).where(Loan.team_id == team_id))
    if match_ref.first() or loan_ref.first():
        raise HTTPException(status_code=409, detail="Team is still referenced by matches or loans.")

    avatar_url = team.avatar_url
    await db.delete(team)
    await db.commit()

    delete_image(avatar_url)
    return {"message": f"Team {team_id} deleted."}


# === AVATAR ===

@router.post("/{team_id}/avatar", response_model=TeamRead)
async def upload_team_avatar(team_id: int, file: UploadFile = File(...), db: AsyncSession = Depends(get_db)):
    """
    Upload a new avatar image (PNG, JPEG, GIF or WebP, max 5MB) and replace the previous one.
    """
    team = await _get_team_or_404(db, team_id)

    content = await file.read()
    try:
        ext = validate_image(file.content_type, content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    old_url = team.avatar_url
    team.avatar_url = upload_image(content, ext)
    team.updated_at = datetime.utcnow()
    db.add(team)
    await db.commit()
    await db.refresh(team)

    delete_image(old_url)
    return to_team_read(team)


@router.delete("/{team_id}/avatar", response_model=TeamRead)
async def remove_team_avatar(team_id: int, db: AsyncSession = Depends(get_db)):
    team = await _get_team_or_404(db, team_id)

    old_url = team.avatar_url
    team.avatar_url = None
    team.updated_at = datetime.utcnow()
    db.add(team)
    await db.commit()
    await db.refresh(team)

    delete_image(old_url)
    return to_team_read(team)
