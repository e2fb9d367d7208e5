"""Sensor reading API routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.database import get_db
from smartagri.dependencies import get_current_user
from smartagri.models import User
from smartagri.schemas.sensor import IngestionResponse, SensorDataSubmission, SensorReadingOut
from smartagri.services.readings_service import ingest_readings, list_latest_readings

# Maximum number of readings returned by the listing endpoint
MAX_READINGS_LIMIT = 500

router = APIRouter(prefix="/api", tags=["sensors"])


@router.post("/sensor-data", response_model=IngestionResponse)
async def receive_sensor_data(
    submission: SensorDataSubmission,
    session: AsyncSession = Depends(get_db),
) -> IngestionResponse:
    """Store a batch of readings from a registered, active device."""
    await ingest_readings(session, submission)
    return IngestionResponse()


@router.get("/sensor-readings", response_model=list[SensorReadingOut])
async def get_latest_readings(
    device_id: str | None = Query(None, description="Only readings of this device"),
    limit: int = Query(20, ge=1, le=MAX_READINGS_LIMIT, description="Max readings to return"),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[SensorReadingOut]:
    """Most recent readings across the signed-in user's devices."""
    readings = await list_latest_readings(session, user, device_id=device_id, limit=limit)
    return [SensorReadingOut.model_validate(r) for r in readings]
