"""SQLAlchemy models."""

from smartagri.models.device import Device
from smartagri.models.readings import SensorReading
from smartagri.models.recommendation import Recommendation
from smartagri.models.user import AccessToken, User

__all__ = [
    "User",
    "AccessToken",
    "Device",
    "SensorReading",
    "Recommendation",
]
