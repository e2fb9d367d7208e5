"""Shared FastAPI dependencies."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.database import get_db
from smartagri.errors import Unauthorized
from smartagri.models import User
from smartagri.services.auth_service import resolve_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise Unauthorized()
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_bearer_token),
    session: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the caller from the Authorization: Bearer header. Raises Unauthorized."""
    return await resolve_token(session, token)
