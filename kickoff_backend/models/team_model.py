# team_model.py
# Defines the Team model (a club side with its captain contact) and its API schemas.

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field as PydanticField
from sqlmodel import SQLModel, Field


class Team(SQLModel, table=True):
    """
    A team that can play matches (home or away) and request loan players.
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    team_name: str
    captain_name: str
    captain_phone: str
    avatar_url: Optional[str] = None                       # Public URL of the uploaded avatar

    user_id: Optional[int] = Field(default=None, foreign_key="user.id")  # Owner who created it

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


def normalize_avatar_url(value: Optional[str]) -> Optional[str]:
    """
    Only real URLs are stored. Empty values and data: URLs (the default
    avatar) are stored as None.
    """
    if value is None:
        return None
    value = value.strip()
    if not value or value.startswith("data:"):
        return None
    return value


# -------------------------------
# Pydantic schemas for API requests/responses
# -------------------------------

class TeamCreate(BaseModel):
    team_name: str = PydanticField(..., min_length=1)
    captain_name: str = PydanticField(..., min_length=1)
    captain_phone: str = PydanticField(..., min_length=1)
    avatar_url: Optional[str] = None

    class Config:
        str_strip_whitespace = True  # "   " fails min_length


class TeamUpdate(BaseModel):
    """Partial update. Omitted fields keep their stored value."""
    team_name: Optional[str] = PydanticField(default=None, min_length=1)
    captain_name: Optional[str] = PydanticField(default=None, min_length=1)
    captain_phone: Optional[str] = PydanticField(default=None, min_length=1)
    avatar_url: Optional[str] = None

    class Config:
        str_strip_whitespace = True


class TeamSummary(BaseModel):
    """Minimal team info embedded in match and loan responses."""
    id: int
    team_name: str
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class TeamRead(BaseModel):
    id: int
    team_name: str
    captain_name: str
    captain_phone: str
    avatar_url: Optional[str] = None
    display_avatar_url: str
    user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
