"""Readings service layer: stores incoming sensor readings and fetches recent ones."""

import logging
from datetime import datetime, timedelta

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.errors import Forbidden, NotFound, UpstreamUnavailable
from smartagri.models import Device, SensorReading, User
from smartagri.realtime import INSERT, get_feed
from smartagri.schemas.sensor import SensorDataSubmission, SensorReadingOut
from smartagri.services._clock import to_naive_utc, utc_now
from smartagri.services.device_service import get_device

__all__ = ["fetch_recent_readings", "ingest_readings", "list_latest_readings"]

logger = logging.getLogger(__name__)

# Window and cap used for summaries and advisory generation
RECENT_WINDOW_HOURS = 24
RECENT_READINGS_LIMIT = 50

DEFAULT_LATEST_LIMIT = 20


async def ingest_readings(
    session: AsyncSession,
    submission: SensorDataSubmission,
    now: datetime | None = None,
) -> list[SensorReading]:
    """
    Store a batch of readings from one device.

    The device must exist (NotFound) and be active (Forbidden); otherwise
    nothing is written. The batch is committed as one transaction and each
    row is then published on the change feed.
    """
    device = await get_device(session, submission.device_id)
    if device is None:
        logger.warning(f"Readings for unknown device {submission.device_id}")
        raise NotFound("Device not found or inactive")
    if not device.is_active:
        logger.warning(f"Readings for inactive device {submission.device_id}")
        raise Forbidden("Device is inactive")

    received_at = now or utc_now()
    rows = [
        SensorReading(
            device_id=device.device_id,
            sensor_type=reading.sensor_type,
            value=reading.value,
            unit=reading.unit,
            timestamp=to_naive_utc(reading.timestamp) if reading.timestamp else received_at,
        )
        for reading in submission.sensor_readings
    ]

    session.add_all(rows)
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Error inserting sensor readings: {e}")
        raise UpstreamUnavailable("Failed to store sensor data") from e

    logger.info(f"Stored {len(rows)} readings from {device.device_id}")

    await get_feed().publish_many(
        "sensor_readings",
        INSERT,
        [SensorReadingOut.model_validate(row).model_dump(mode="json") for row in rows],
    )
    return rows


async def fetch_recent_readings(
    session: AsyncSession,
    device_id: str,
    now: datetime | None = None,
    hours: int = RECENT_WINDOW_HOURS,
    limit: int = RECENT_READINGS_LIMIT,
) -> list[SensorReading]:
    """Readings of one device from the trailing window, newest first, capped at limit."""
    end = now or utc_now()
    start = end - timedelta(hours=hours)

    query = (
        select(SensorReading)
        .where(
            and_(
                SensorReading.device_id == device_id,
                SensorReading.timestamp >= start,
            )
        )
        .order_by(SensorReading.timestamp.desc(), SensorReading.id.desc())
        .limit(limit)
    )

    try:
        result = await session.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching readings for {device_id}: {e}")
        raise UpstreamUnavailable("Failed to fetch sensor readings") from e
    return list(result.scalars())


async def list_latest_readings(
    session: AsyncSession,
    owner: User,
    device_id: str | None = None,
    limit: int = DEFAULT_LATEST_LIMIT,
) -> list[SensorReading]:
    """Most recent readings across the caller's devices, optionally for one device."""
    owned_ids = select(Device.device_id).where(Device.user_id == owner.id)

    query = select(SensorReading).where(SensorReading.device_id.in_(owned_ids))
    if device_id is not None:
        query = query.where(SensorReading.device_id == device_id)
    query = query.order_by(SensorReading.timestamp.desc(), SensorReading.id.desc()).limit(limit)

    result = await session.execute(query)
    return list(result.scalars())
