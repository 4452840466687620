# user_model.py
# Users (local or external identity provider) and their bearer sessions.

from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: Optional[str] = None      # None for provider-only accounts
    name: Optional[str] = None
    image: Optional[str] = None

    provider: str = "local"                  # "local", "google", ...
    provider_id: Optional[str] = Field(default=None, index=True)

    last_login_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class UserSession(SQLModel, table=True):
    """Opaque bearer token issued on login."""
    id: Optional[int] = Field(default=None, primary_key=True)
    token: str = Field(index=True, unique=True)
    user_id: int = Field(foreign_key="user.id")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class UserRegister(SQLModel):
    email: str
    password: str
    name: Optional[str] = None


class UserLogin(SQLModel):
    email: str
    password: str


class ProviderLogin(BaseModel):
    """Identity handed over by an external provider after it authenticated the user."""
    provider: str = "google"
    provider_id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None


class UserRead(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    provider: str
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserRead
