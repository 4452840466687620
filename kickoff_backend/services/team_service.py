# kickoff_backend/services/team_service.py
# Team lookups and response building shared by the team, match and loan routes.

from typing import Dict, Iterable
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from kickoff_backend.models.team_model import Team, TeamRead, TeamSummary
from kickoff_backend.services.storage_service import get_default_avatar_url


def to_team_read(team: Team) -> TeamRead:
    return TeamRead(
        id=team.id,
        team_name=team.team_name,
        captain_name=team.captain_name,
        captain_phone=team.captain_phone,
        avatar_url=team.avatar_url,
        display_avatar_url=team.avatar_url or get_default_avatar_url(),
        user_id=team.user_id,
        created_at=team.created_at,
        updated_at=team.updated_at,
    )


def to_team_summary(team: Team) -> TeamSummary:
    return TeamSummary(id=team.id, team_name=team.team_name, avatar_url=team.avatar_url)


def missing_team_summary(team_id: int) -> TeamSummary:
    # A reference to a deleted team still renders, just without a name.
    return TeamSummary(id=team_id, team_name="", avatar_url=None)


async def load_team_summaries(db: AsyncSession, team_ids: Iterable[int]) -> Dict[int, TeamSummary]:
    """
    Resolve a set of team ids to summaries with a single query.
    """
    ids = {tid for tid in team_ids if tid is not None}
    if not ids:
        return {}
    result = await db.execute(select(Team).where(Team.id.in_(ids)))
    return {team.id: to_team_summary(team) for team in result.scalars().all()}
