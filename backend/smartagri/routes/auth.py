"""Account API routes."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.database import get_db
from smartagri.dependencies import get_bearer_token, get_current_user
from smartagri.models import User
from smartagri.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserOut,
)
from smartagri.services.auth_service import (
    Credentials,
    DatabaseIdentityProvider,
    issue_token,
    revoke_token,
    update_profile,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Create an account and sign it in."""
    user = await DatabaseIdentityProvider(session).register(request)
    token = await issue_token(session, user)
    return AuthResponse(user=UserOut.model_validate(user), access_token=token.token)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    session: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Exchange email and password for a bearer token."""
    user = await DatabaseIdentityProvider(session).authenticate(
        Credentials(email=request.email, password=request.password)
    )
    token = await issue_token(session, user)
    logger.info(f"Login successful: user {user.id}")
    return AuthResponse(user=UserOut.model_validate(user), access_token=token.token)


@router.post("/logout")
async def logout(
    token: str = Depends(get_bearer_token),
    session: AsyncSession = Depends(get_db),
) -> dict:
    await revoke_token(session, token)
    return {"success": True}


@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)) -> User:
    return user


@router.patch("/me", response_model=UserOut)
async def update_me(
    update: ProfileUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> User:
    """Update profile fields of the signed-in user."""
    return await update_profile(session, user, update)
