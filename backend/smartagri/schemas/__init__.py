"""Pydantic schemas for API request/response models."""

from smartagri.schemas.auth import AuthResponse, LoginRequest, ProfileUpdate, RegisterRequest, UserOut
from smartagri.schemas.device import (
    DeviceOut,
    DeviceRegistration,
    DeviceStatusUpdate,
    RegisterDeviceResponse,
)
from smartagri.schemas.recommendation import (
    GenerateRequest,
    GenerateResponse,
    MessageResponse,
    RecommendationDraft,
    RecommendationListResponse,
    RecommendationOut,
)
from smartagri.schemas.sensor import (
    IngestionResponse,
    ReadingIn,
    SensorDataSubmission,
    SensorReadingOut,
    SensorStatistics,
    SensorSummaryResponse,
)
from smartagri.schemas.weather import WeatherAdvisoryResponse, WeatherLocation, WeatherObservation

__all__ = [
    # Auth schemas
    "AuthResponse",
    "LoginRequest",
    "ProfileUpdate",
    "RegisterRequest",
    "UserOut",
    # Device schemas
    "DeviceOut",
    "DeviceRegistration",
    "DeviceStatusUpdate",
    "RegisterDeviceResponse",
    # Sensor schemas
    "IngestionResponse",
    "ReadingIn",
    "SensorDataSubmission",
    "SensorReadingOut",
    "SensorStatistics",
    "SensorSummaryResponse",
    # Recommendation schemas
    "GenerateRequest",
    "GenerateResponse",
    "MessageResponse",
    "RecommendationDraft",
    "RecommendationListResponse",
    "RecommendationOut",
    # Weather schemas
    "WeatherAdvisoryResponse",
    "WeatherLocation",
    "WeatherObservation",
]
