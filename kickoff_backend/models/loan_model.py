# loan_model.py
# Defines the Loan model: a team's request for players for one specific match.

from typing import Optional
from datetime import date, datetime, time
from enum import Enum
from pydantic import BaseModel, Field as PydanticField
from sqlmodel import SQLModel, Field

from kickoff_backend.models.team_model import TeamSummary
from kickoff_backend.models.match_model import MatchStatus


class LoanStatus(str, Enum):
    """Current status of a loan"""
    PENDING = "pending"       # Requested, not yet confirmed
    ACTIVE = "active"         # Confirmed for the match
    COMPLETED = "completed"   # The match is over (set automatically once the match is FT)


class Loan(SQLModel, table=True):
    """
    Ties a team's need for players to an upcoming match.
    Should only be created for a match that has not started yet.
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    team_id: int = Field(foreign_key="team.id")
    match_id: int = Field(foreign_key="match.id", index=True)

    number_of_players: int = Field(default=1, ge=1)
    status: LoanStatus = Field(default=LoanStatus.PENDING)

    user_id: Optional[int] = Field(default=None, foreign_key="user.id")

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# -------------------------------
# Pydantic schemas for API requests/responses
# -------------------------------

class LoanCreate(BaseModel):
    team_id: int
    match_id: int
    number_of_players: int = PydanticField(..., ge=1)
    status: LoanStatus = LoanStatus.PENDING


class LoanUpdate(BaseModel):
    team_id: Optional[int] = None
    match_id: Optional[int] = None
    number_of_players: Optional[int] = PydanticField(default=None, ge=1)
    status: Optional[LoanStatus] = None


class LoanMatchSummary(BaseModel):
    """The match a loan belongs to, as shown in the loan list."""
    id: int
    home_team: TeamSummary
    away_team: TeamSummary
    match_date: date
    match_time: Optional[time] = None
    location: Optional[str] = None
    status: MatchStatus
    has_started: bool


class LoanRead(BaseModel):
    id: int
    team_id: int
    match_id: int
    team: TeamSummary
    match: LoanMatchSummary
    number_of_players: int
    status: LoanStatus
    user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
