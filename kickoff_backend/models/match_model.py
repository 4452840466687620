# match_model.py
# Defines the Match model (fixtures, scores and status) and the schemas used by the match routes.

from typing import List, Optional
from datetime import date, datetime, time
from enum import Enum
from pydantic import BaseModel, Field as PydanticField
from sqlmodel import SQLModel, Field

from kickoff_backend.models.team_model import TeamSummary


class MatchStatus(str, Enum):
    """Lifecycle status of a match"""
    NOT_STARTED = "NS"    # Initial status
    LIVE = "LIVE"         # Set manually at kick-off / after half-time
    HALF_TIME = "HT"      # Set manually at the break
    FINISHED = "FT"       # Terminal; also set automatically by the sweep


class Match(SQLModel, table=True):
    """
    A scheduled fixture between two teams.
    Created as NS with a 0-0 score; the auto-finish sweep moves it to FT.
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    # Foreign keys
    home_team_id: int = Field(foreign_key="team.id")
    away_team_id: int = Field(foreign_key="team.id")

    # Score and status
    home_score: int = Field(default=0, ge=0)
    away_score: int = Field(default=0, ge=0)
    status: MatchStatus = Field(default=MatchStatus.NOT_STARTED)

    # Competition
    league: str = ""
    country: str = ""

    # Schedule
    match_date: date = Field(index=True)
    match_time: Optional[time] = None                      # No time means start of day
    location: Optional[str] = None

    user_id: Optional[int] = Field(default=None, foreign_key="user.id")

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# -------------------------------
# Pydantic schemas for API requests/responses
# -------------------------------

class MatchCreate(BaseModel):
    home_team_id: int
    away_team_id: int
    league: str = ""
    country: str = ""
    match_date: date
    match_time: Optional[time] = None
    location: Optional[str] = None


class MatchUpdate(BaseModel):
    """Partial update of a match (score edits, status changes, rescheduling)."""
    home_team_id: Optional[int] = None
    away_team_id: Optional[int] = None
    home_score: Optional[int] = PydanticField(default=None, ge=0)
    away_score: Optional[int] = PydanticField(default=None, ge=0)
    status: Optional[MatchStatus] = None
    league: Optional[str] = None
    country: Optional[str] = None
    match_date: Optional[date] = None
    match_time: Optional[time] = None
    location: Optional[str] = None


class MatchClock(BaseModel):
    """Wall-clock derived state of a match."""
    match_id: int
    status: MatchStatus
    has_started: bool
    elapsed_minutes: Optional[int] = None
    elapsed_display: Optional[str] = None
    should_auto_finish: bool


class MatchRead(BaseModel):
    id: int
    home_team_id: int
    away_team_id: int
    home_team: TeamSummary
    away_team: TeamSummary
    home_score: int
    away_score: int
    status: MatchStatus
    league: str
    country: str
    match_date: date
    match_time: Optional[time] = None
    location: Optional[str] = None
    user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    # Derived from the clock at response time
    has_started: bool
    elapsed_minutes: Optional[int] = None
    elapsed_display: Optional[str] = None
    start_time_display: Optional[str] = None
    date_display: str


class LeagueGroup(BaseModel):
    """Matches of one league on the schedule view."""
    league: str
    country: str
    matches: List[MatchRead]


class MatchSchedule(BaseModel):
    match_date: date
    date_display: str
    leagues: List[LeagueGroup]
