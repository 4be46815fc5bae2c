"""
postchat.api.routers.auth

Account endpoints.

Responsibilities:
- Register users (validated, normalized email, hashed password) and issue a token.
- Log users in against the stored password hash.
- Return the caller's own profile.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from postchat.api.deps import db_session
from postchat.auth.deps import get_principal, settings_dep
from postchat.auth.jwt import JwtConfig, issue_token
from postchat.auth.models import Principal
from postchat.auth.passwords import hash_password, verify_password
from postchat.db.models import User
from postchat.db.repositories.users import UserRepo
from postchat.observability.logging import get_logger
from postchat.schemas import UserPublic
from postchat.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

NAME_MIN_LENGTH = 2
PASSWORD_MIN_LENGTH = 6


def normalize_email(value: str) -> str:
    return value.strip().lower()


class RegisterRequest(BaseModel):
    # Defaults route missing fields through the validators below so every
    # failure carries the field's own message.
    name: str = Field(default="", validate_default=True)
    email: str = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, v: Any) -> str:
        v = v.strip() if isinstance(v, str) else ""
        if len(v) < NAME_MIN_LENGTH:
            raise PydanticCustomError("name_length", "Name must be at least 2 characters")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise PydanticCustomError("email", "Invalid email")
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("email", "Invalid email") from None
        return normalize_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, v: Any) -> str:
        if not isinstance(v, str) or len(v) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError(
                "password_length", "Password must be at least 6 characters"
            )
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    token: str
    user: UserPublic


def _token_for(user: User, settings: Settings) -> str:
    return issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject=str(user.id),
        ttl=timedelta(minutes=settings.jwt_ttl_minutes),
    )


@router.post("/register", response_model=AuthResponse, status_code=HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuthResponse:
    users = UserRepo(session)
    if await users.get_by_email(body.email) is not None:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="User already exists")

    user = await users.create(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
    )
    await session.commit()
    log.info("user_registered", user_id=str(user.id))
    return AuthResponse(token=_token_for(user, settings), user=UserPublic.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuthResponse:
    user = await UserRepo(session).get_by_email(normalize_email(body.email))
    if user is None:
        log.info("login_failed", reason="unknown_user")
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Invalid credentials")
    if not verify_password(body.password, user.password_hash):
        log.info("login_failed", reason="password_mismatch", user_id=str(user.id))
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Invalid credentials")

    log.info("login_succeeded", user_id=str(user.id))
    return AuthResponse(token=_token_for(user, settings), user=UserPublic.model_validate(user))


@router.get("/me", response_model=UserPublic)
async def me(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> UserPublic:
    user = await UserRepo(session).get(principal.user_id)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    return UserPublic.model_validate(user)
