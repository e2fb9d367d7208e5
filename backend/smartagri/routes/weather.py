"""Weather API routes."""

from fastapi import APIRouter, Depends, Query

from smartagri.dependencies import get_current_user
from smartagri.models import User
from smartagri.schemas.weather import WeatherAdvisoryResponse, WeatherObservation
from smartagri.services import weather_service

router = APIRouter(prefix="/api/weather", tags=["weather"])


@router.get("/current", response_model=WeatherObservation)
async def get_current_weather(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    user: User = Depends(get_current_user),
) -> WeatherObservation:
    return await weather_service.fetch_current_weather(lat, lon)


@router.get("/forecast", response_model=list[WeatherObservation])
async def get_forecast(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    days: int = Query(weather_service.MAX_FORECAST_DAYS, ge=1, le=weather_service.MAX_FORECAST_DAYS),
    user: User = Depends(get_current_user),
) -> list[WeatherObservation]:
    return await weather_service.fetch_forecast(lat, lon, days)


@router.get("/advisories", response_model=WeatherAdvisoryResponse)
async def get_weather_advisories(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    user: User = Depends(get_current_user),
) -> WeatherAdvisoryResponse:
    """Current conditions plus the farming advice they trigger. Nothing is stored."""
    weather = await weather_service.fetch_current_weather(lat, lon)
    drafts = weather_service.farming_advisories(weather)
    return WeatherAdvisoryResponse(weather=weather, recommendations=drafts, count=len(drafts))
