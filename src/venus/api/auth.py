"""Auth API — registration, login, logout, current user.

Learn: Routes for account authentication:
- POST /auth/register → create account, returns {user, token}
- POST /auth/login → username/password → {user, token}
- POST /auth/logout → clear the token cookie
- GET /auth/user → current account (protected)

Register and login also set the `token` cookie so that plain <img> tags
pointing at /api/images/{id} authenticate without JavaScript.

bcrypt runs on the hashing pool and never while this request holds a
database connection.
"""

from datetime import datetime, timedelta

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from venus.auth.dependencies import CurrentIdentity, get_current_user
from venus.auth.jwt import create_access_token
from venus.auth.password import hash_password_async, verify_password_async
from venus.config import Settings, get_settings
from venus.db.engine import get_db
from venus.db.models import User

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")

INVALID_CREDENTIALS = "Invalid username or password"


# ─── Schemas ─────────────────────────────────────────────


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1, max_length=1024)


class LoginRequest(BaseModel):
    username: str
    password: str


class UserRead(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    user: UserRead
    token: str
    token_type: str = "bearer"


def _issue_token(user_id: int, username: str, settings: Settings) -> str:
    # Same settings object as the cookie and the resolver
    return create_access_token(
        user_id,
        username,
        secret=settings.jwt_secret,
        expires_delta=timedelta(days=settings.token_expire_days),
    )


def _set_token_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.token_cookie_name,
        value=token,
        max_age=settings.token_expire_days * 24 * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create a new account and log it in."""
    password_hash = await hash_password_async(body.password)

    q = select(User).where(
        or_(User.username == body.username, User.email == body.email)
    )
    result = await db.execute(q)
    if result.scalars().first():
        raise HTTPException(status_code=409, detail="Username or email already registered")

    user = User(
        username=body.username,
        email=body.email,
        password_hash=password_hash,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Username or email already registered")
    await db.refresh(user)

    token = _issue_token(user.id, user.username, settings)
    _set_token_cookie(response, token, settings)
    logger.info("auth.registered", user_id=user.id)
    return AuthResponse(user=UserRead.model_validate(user), token=token)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Login with username and password → token."""
    q = select(User).where(User.username == body.username)
    result = await db.execute(q)
    user = result.scalars().first()
    if not user:
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    user_read = UserRead.model_validate(user)
    password_hash = user.password_hash
    # Release the connection before the slow bcrypt check
    await db.rollback()

    if not await verify_password_async(body.password, password_hash):
        logger.info("auth.login_failed", user_id=user_read.id)
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    token = _issue_token(user_read.id, user_read.username, settings)
    _set_token_cookie(response, token, settings)
    logger.info("auth.login", user_id=user_read.id)
    return AuthResponse(user=user_read, token=token)


# ─── Logout ──────────────────────────────────────────────


@router.post("/logout", status_code=204)
async def logout(settings: Settings = Depends(get_settings)):
    """Clear the token cookie. Tokens themselves stay valid until expiry."""
    response = Response(status_code=204)
    response.delete_cookie(key=settings.token_cookie_name, path="/")
    return response


# ─── Current user ───────────────────────────────────────


@router.get("/user", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated account."""
    user = await db.get(User, identity.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
