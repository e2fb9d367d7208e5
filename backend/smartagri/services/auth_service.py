"""Authentication service layer: accounts, password hashing and bearer tokens.

Identity is behind the IdentityProvider protocol so the database-backed
provider can be swapped for an external one without touching the routes.
"""

import base64
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.config import TOKEN_TTL_HOURS
from smartagri.errors import DuplicateUser, InvalidCredentials, Unauthorized
from smartagri.models import AccessToken, User
from smartagri.schemas.auth import ProfileUpdate, RegisterRequest
from smartagri.services._clock import utc_now

__all__ = [
    "Credentials",
    "DatabaseIdentityProvider",
    "IdentityProvider",
    "hash_password",
    "issue_token",
    "resolve_token",
    "revoke_token",
    "update_profile",
    "verify_password",
]

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 260_000
SALT_BYTES = 16


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str


class IdentityProvider(Protocol):
    async def register(self, request: RegisterRequest) -> User:
        """Create an account. Raises DuplicateUser if the email is taken."""
        ...

    async def authenticate(self, credentials: Credentials) -> User:
        """Return the matching account. Raises InvalidCredentials otherwise."""
        ...


# --- Password Hashing ---


def hash_password(password: str) -> str:
    """Hash a password as pbkdf2_sha256$iterations$salt$digest."""
    salt = secrets.token_bytes(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, PBKDF2_ITERATIONS)
    return "$".join(
        [
            "pbkdf2_sha256",
            str(PBKDF2_ITERATIONS),
            base64.b64encode(salt).decode(),
            base64.b64encode(digest).decode(),
        ]
    )


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt_b64, digest_b64 = encoded.split("$")
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False

    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), base64.b64decode(salt_b64), int(iterations)
    )
    return hmac.compare_digest(digest, base64.b64decode(digest_b64))


def _normalize_email(email: str) -> str:
    return email.strip().lower()


# --- Identity Provider ---


class DatabaseIdentityProvider:
    """Accounts stored in the users table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _find_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(self, request: RegisterRequest) -> User:
        email = _normalize_email(request.email)
        if await self._find_by_email(email) is not None:
            raise DuplicateUser()

        user = User(
            name=request.name,
            email=email,
            password_hash=hash_password(request.password),
            farm_location=request.farm_location,
            crop_types=list(request.crop_types),
            soil_type=request.soil_type,
            phone_number=request.phone_number,
            created_at=utc_now(),
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateUser() from e

        await self.session.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, credentials: Credentials) -> User:
        user = await self._find_by_email(_normalize_email(credentials.email))
        if user is None or not verify_password(credentials.password, user.password_hash):
            raise InvalidCredentials()
        return user


# --- Tokens ---


async def issue_token(
    session: AsyncSession,
    user: User,
    now: datetime | None = None,
) -> AccessToken:
    """Create a new bearer token for the user."""
    issued_at = now or utc_now()
    token = AccessToken(
        token=secrets.token_hex(32),
        user_id=user.id,
        created_at=issued_at,
        expires_at=issued_at + timedelta(hours=TOKEN_TTL_HOURS),
    )
    session.add(token)
    await session.commit()
    return token


async def resolve_token(
    session: AsyncSession,
    token: str,
    now: datetime | None = None,
) -> User:
    """Return the user a bearer token belongs to. Raises Unauthorized if unknown or expired."""
    result = await session.execute(select(AccessToken).where(AccessToken.token == token))
    access_token = result.scalar_one_or_none()
    if access_token is None:
        raise Unauthorized("Invalid access token")
    if access_token.expires_at <= (now or utc_now()):
        raise Unauthorized("Access token expired")

    user = await session.get(User, access_token.user_id)
    if user is None:
        raise Unauthorized("Invalid access token")
    return user


async def revoke_token(session: AsyncSession, token: str) -> None:
    await session.execute(delete(AccessToken).where(AccessToken.token == token))
    await session.commit()


async def update_profile(session: AsyncSession, user: User, update: ProfileUpdate) -> User:
    """Apply the fields present in the update to the user's profile."""
    for field, value in update.model_dump(exclude_unset=True).items():
        # Non-nullable columns
        if value is None and field in ("name", "crop_types"):
            continue
        setattr(user, field, value)
    await session.commit()
    await session.refresh(user)
    return user
