"""Pydantic schemas for weather observations and weather-based advisories."""

from pydantic import BaseModel

from smartagri.schemas.recommendation import RecommendationDraft


class WeatherLocation(BaseModel):
    lat: float
    lon: float
    name: str = ""
    country: str = ""


class WeatherObservation(BaseModel):
    """Current conditions or one forecast step, in metric units."""

    temperature: float  # °C, rounded to whole degrees
    humidity: float  # %
    wind_speed: float  # m/s
    pressure: float  # hPa
    visibility: float  # km
    rainfall: float  # mm over the reporting period (1h current, 3h forecast)
    condition: str  # Lower-cased main condition, e.g. "clear", "rain"
    description: str
    location: WeatherLocation
    timestamp: str


class WeatherAdvisoryResponse(BaseModel):
    weather: WeatherObservation
    recommendations: list[RecommendationDraft]
    count: int
