"""Shared fixtures: a fresh SQLite database per test and an API client bound to it."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from langchain_core.messages import AIMessage
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import smartagri.models  # noqa: F401 - registers models on Base.metadata
from smartagri.database import Base, get_db
from smartagri.main import app
from smartagri.models import Device, SensorReading, User
from smartagri.services._clock import utc_now
from smartagri.services.auth_service import hash_password, issue_token


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """API client whose requests use the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()


# --- Data helpers ---


async def create_user(session, email="farmer@example.com", password="secret123", name="Test Farmer"):
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        crop_types=["maize"],
        created_at=utc_now(),
    )
    session.add(user)
    await session.commit()
    return user


async def auth_headers_for(session, user) -> dict:
    token = await issue_token(session, user)
    return {"Authorization": f"Bearer {token.token}"}


async def create_device(session, user, device_id="esp32-field-1", is_active=True, **kwargs):
    device = Device(
        device_id=device_id,
        device_name=kwargs.get("device_name", "Field Station"),
        device_type=kwargs.get("device_type", "ESP32"),
        location=kwargs.get("location", "North field"),
        user_id=user.id,
        is_active=is_active,
        created_at=kwargs.get("created_at", utc_now()),
    )
    session.add(device)
    await session.commit()
    return device


async def add_readings(session, device_id, sensor_type, values, unit, end=None, step_minutes=30):
    """Store values (oldest first) spaced step_minutes apart, the last one at end."""
    end = end or utc_now()
    rows = [
        SensorReading(
            device_id=device_id,
            sensor_type=sensor_type,
            value=value,
            unit=unit,
            timestamp=end - timedelta(minutes=step_minutes * (len(values) - 1 - i)),
        )
        for i, value in enumerate(values)
    ]
    session.add_all(rows)
    await session.commit()
    return rows


def fake_llm(content: str) -> MagicMock:
    """Chat model stand-in whose ainvoke returns an AIMessage with the given content."""
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=AIMessage(content=content))
    return llm


# --- Fixtures built on the helpers ---


@pytest.fixture
async def user(session):
    return await create_user(session)


@pytest.fixture
async def auth_headers(session, user):
    return await auth_headers_for(session, user)


@pytest.fixture
async def device(session, user):
    return await create_device(session, user)
