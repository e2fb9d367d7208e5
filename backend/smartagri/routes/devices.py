"""Device API routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.database import get_db
from smartagri.dependencies import get_current_user
from smartagri.models import User
from smartagri.schemas.device import (
    DeviceOut,
    DeviceRegistration,
    DeviceStatusUpdate,
    RegisterDeviceResponse,
)
from smartagri.schemas.sensor import SensorSummaryResponse
from smartagri.services.device_service import (
    get_owned_device,
    list_devices,
    register_device,
    set_device_active,
)
from smartagri.services.readings_service import RECENT_WINDOW_HOURS, fetch_recent_readings
from smartagri.services.summary_service import summarize_readings

router = APIRouter(prefix="/api", tags=["devices"])


@router.post("/register-device", response_model=RegisterDeviceResponse)
async def register(
    registration: DeviceRegistration,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> RegisterDeviceResponse:
    """Register a device owned by the signed-in user."""
    device = await register_device(session, user, registration)
    return RegisterDeviceResponse(device=DeviceOut.model_validate(device))


@router.get("/devices", response_model=list[DeviceOut])
async def get_devices(
    active: bool = Query(False, description="Only active devices, ordered by name"),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[DeviceOut]:
    devices = await list_devices(session, user, active_only=active)
    return [DeviceOut.model_validate(d) for d in devices]


@router.patch("/devices/{device_id}", response_model=DeviceOut)
async def update_device_status(
    device_id: str,
    update: DeviceStatusUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> DeviceOut:
    """Activate or deactivate a device. Inactive devices are refused by ingestion."""
    device = await set_device_active(session, user, device_id, update.is_active)
    return DeviceOut.model_validate(device)


@router.get("/devices/{device_id}/summary", response_model=SensorSummaryResponse)
async def get_device_summary(
    device_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> SensorSummaryResponse:
    """Per sensor type statistics over the same window advisory generation uses."""
    device = await get_owned_device(session, user, device_id)
    readings = await fetch_recent_readings(session, device.device_id)
    return SensorSummaryResponse(
        device_id=device.device_id,
        window_hours=RECENT_WINDOW_HOURS,
        readings_count=len(readings),
        sensors=summarize_readings(readings),
    )
