"""Pydantic schemas for device registration and listing."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DeviceRegistration(BaseModel):
    """Body of the register-device endpoint."""

    device_id: str = Field(..., min_length=1, max_length=100)
    device_name: str = Field(..., min_length=1, max_length=100)
    device_type: str | None = Field(None, max_length=50)
    location: str | None = Field(None, max_length=255)


class DeviceStatusUpdate(BaseModel):
    is_active: bool


class DeviceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    device_id: str
    device_name: str
    device_type: str
    location: str | None = None
    user_id: int
    is_active: bool
    created_at: datetime


class RegisterDeviceResponse(BaseModel):
    success: bool = True
    device: DeviceOut
