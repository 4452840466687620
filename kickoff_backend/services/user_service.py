# kickoff_backend/services/user_service.py
# User records and bearer sessions.

import secrets
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from kickoff_backend.models.user_model import User, UserSession


def normalize_email(email: str) -> str:
    return email.lower().strip()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalars().first()


async def get_user_by_provider_id(db: AsyncSession, provider: str, provider_id: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.provider == provider, User.provider_id == provider_id)
    )
    return result.scalars().first()


async def create_or_update_user(
    db: AsyncSession,
    provider: str,
    provider_id: str,
    email: str,
    name: Optional[str] = None,
    image: Optional[str] = None,
) -> User:
    """
    Save an externally authenticated user on first login, or refresh
    name/image/last login on later ones.
    Users are matched on (provider, provider_id) only, never on email.
    Raises ValueError when the provider id or email is missing, or when
    the email already belongs to another account.
    """
    if not provider_id or not email or not email.strip():
        raise ValueError("Missing required user data: id or email")

    user = await get_user_by_provider_id(db, provider, provider_id)
    now = datetime.utcnow()

    if user:
        user.name = name or None
        user.image = image or None
        user.last_login_at = now
        print(f"👤 User updated: {user.email}")
    else:
        if await get_user_by_email(db, email):
            raise ValueError("Email is already registered with another account")

        user = User(
            email=normalize_email(email),
            name=name or None,
            image=image or None,
            provider=provider,
            provider_id=provider_id,
            last_login_at=now,
        )
        print(f"👤 New provider login saved: {normalize_email(email)}")

    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def create_session(db: AsyncSession, user: User) -> str:
    token = secrets.token_urlsafe(32)
    db.add(UserSession(token=token, user_id=user.id))
    await db.commit()
    return token


async def get_user_for_token(db: AsyncSession, token: str) -> Optional[User]:
    result = await db.execute(select(UserSession).where(UserSession.token == token))
    session = result.scalars().first()
    if not session:
        return None
    return await db.get(User, session.user_id)


async def delete_session(db: AsyncSession, token: str) -> bool:
    result = await db.execute(select(UserSession).where(UserSession.token == token))
    session = result.scalars().first()
    if not session:
        return False
    await db.delete(session)
    await db.commit()
    return True
