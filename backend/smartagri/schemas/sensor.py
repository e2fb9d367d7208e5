"""Pydantic schemas for sensor ingestion and summaries."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Trend = Literal["increasing", "decreasing", "stable"]


# --- Ingestion Schemas ---


class ReadingIn(BaseModel):
    """One measurement as sent by a device."""

    sensor_type: str = Field(..., min_length=1, max_length=50)
    value: float = Field(..., allow_inf_nan=False)
    unit: str = Field(..., max_length=20)
    timestamp: datetime | None = None  # Server time when omitted


class SensorDataSubmission(BaseModel):
    """Body of the sensor-data endpoint."""

    device_id: str = Field(..., min_length=1)
    sensor_readings: list[ReadingIn]


class IngestionResponse(BaseModel):
    success: bool = True
    message: str = "Sensor data received"


class SensorReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    device_id: str
    sensor_type: str
    value: float
    unit: str
    timestamp: datetime


# --- Summary Schemas ---


class SensorStatistics(BaseModel):
    """Statistics for one sensor type over the summary window."""

    current: float
    unit: str
    average: float
    min: float
    max: float
    readings_count: int
    trend: Trend


class SensorSummaryResponse(BaseModel):
    """Per sensor type statistics for one device."""

    model_config = ConfigDict(populate_by_name=True)

    device_id: str = Field(alias="deviceId")
    window_hours: int = Field(alias="windowHours")
    readings_count: int = Field(alias="readingsCount")
    sensors: dict[str, SensorStatistics]
