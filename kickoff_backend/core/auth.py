import secrets
from typing import Optional
from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession
from passlib.context import CryptContext

from kickoff_backend.core.config import PROVIDER_LOGIN_SECRET
from kickoff_backend.core.database import get_db
from kickoff_backend.models.user_model import (
    User, UserRegister, UserLogin, ProviderLogin, UserRead, LoginResponse
)
from kickoff_backend.services.user_service import (
    normalize_email, get_user_by_email, create_or_update_user,
    create_session, get_user_for_token, delete_session
)

router = APIRouter()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# === CURRENT USER ===

def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    return token.strip()


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Anonymous requests (no Authorization header) resolve to None.
    An unknown token is rejected.
    """
    token = _bearer_token(authorization)
    if token is None:
        return None
    user = await get_user_for_token(db, token)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return user


async def get_current_user_id(user: Optional[User] = Depends(get_current_user)) -> Optional[int]:
    """Owner id stamped on created records."""
    return user.id if user else None


# === REGISTER ===

@router.post("/register")
async def register_user(data: UserRegister, db: AsyncSession = Depends(get_db)):
    if not data.email.strip() or not data.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    existing = await get_user_by_email(db, data.email)
    if existing:
        raise HTTPException(status_code=400, detail="User already exists")

    hashed = pwd_context.hash(data.password)
    new_user = User(email=normalize_email(data.email), password_hash=hashed, name=data.name)
    db.add(new_user)
    await db.commit()

    return {"message": "User registered"}


# === LOGIN ===

@router.post("/login", response_model=LoginResponse)
async def login_user(data: UserLogin, db: AsyncSession = Depends(get_db)):
    if not data.email.strip() or not data.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user = await get_user_by_email(db, data.email)
    if not user or not user.password_hash:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not pwd_context.verify(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user.last_login_at = datetime.utcnow()
    db.add(user)
    await db.commit()
    await db.refresh(user)

    token = await create_session(db, user)
    return LoginResponse(message="Login successful", token=token, user=UserRead.model_validate(user))


# === PROVIDER LOGIN ===

def _check_provider_secret(secret: Optional[str]) -> None:
    # Only the trusted sign-in frontend knows the shared secret
    if not PROVIDER_LOGIN_SECRET:
        raise HTTPException(status_code=403, detail="Provider login is disabled")
    if not secret or not secrets.compare_digest(secret.encode(), PROVIDER_LOGIN_SECRET.encode()):
        raise HTTPException(status_code=401, detail="Invalid provider credentials")


@router.post("/provider-login", response_model=LoginResponse)
async def provider_login(
    data: ProviderLogin,
    x_provider_secret: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
):
    """
    Called by the sign-in frontend after an external identity provider (e.g. Google)
    has verified the user. The call must carry the shared X-Provider-Secret header.
    Creates the user on first login and refreshes their profile afterwards.
    An email that already belongs to another account is refused.
    """
    _check_provider_secret(x_provider_secret)

    try:
        user = await create_or_update_user(
            db,
            provider=data.provider,
            provider_id=data.provider_id,
            email=data.email,
            name=data.name,
            image=data.image,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    token = await create_session(db, user)
    return LoginResponse(message="Login successful", token=token, user=UserRead.model_validate(user))


# === SESSION ===

@router.get("/me", response_model=UserRead)
async def read_me(user: Optional[User] = Depends(get_current_user)):
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return UserRead.model_validate(user)


@router.post("/logout")
async def logout(
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
):
    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    await delete_session(db, token)
    return {"message": "Logged out"}
