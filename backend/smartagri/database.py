"""Async SQLAlchemy database setup."""

from collections.abc import AsyncIterator
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from smartagri.config import DATABASE_ECHO, DATABASE_PATH


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def get_database_url(path: str = DATABASE_PATH) -> str:
    """SQLite URL for path, creating the parent directory if needed."""
    db_path = Path(path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{db_path.resolve()}"


engine = create_async_engine(get_database_url(), echo=DATABASE_ECHO)

# Objects stay readable after commit; services return them to the routes
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped session dependency."""
    async with async_session() as session:
        yield session


async def create_tables() -> None:
    """Create all tables that don't exist yet."""
    import smartagri.models  # noqa: F401 - registers models on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
