"""Weather lookups from OpenWeatherMap and the farming advisories derived from them.

The advisory rules are pure functions of a WeatherObservation so they can be
reused for forecast steps as well as current conditions.
"""

import logging
import math

import httpx

from smartagri.config import WEATHER_API_KEY, WEATHER_API_URL, WEATHER_TIMEOUT
from smartagri.errors import UpstreamUnavailable
from smartagri.schemas.recommendation import RecommendationDraft
from smartagri.schemas.weather import WeatherLocation, WeatherObservation
from smartagri.services._clock import utc_now

logger = logging.getLogger(__name__)

# OpenWeatherMap forecasts come in 3 hour steps
FORECAST_STEPS_PER_DAY = 8
MAX_FORECAST_DAYS = 5

# Rule-based advisories are deterministic
RULE_CONFIDENCE = 1.0


# --- Advisory rules ---


def farming_advisories(weather: WeatherObservation) -> list[RecommendationDraft]:
    """Derive farming advice from one weather observation.

    Each rule group contributes at most one item: temperature extremes,
    humidity extremes, strong wind, rainfall, and optimal growing conditions.
    """
    drafts: list[RecommendationDraft] = []

    def add(title: str, message: str, priority: str, category: str) -> None:
        drafts.append(
            RecommendationDraft(
                title=title,
                message=message,
                priority=priority,
                category=category,
                confidence=RULE_CONFIDENCE,
            )
        )

    if weather.temperature > 35:
        add(
            "Heat Stress Alert",
            "High temperatures detected. Increase irrigation frequency and provide shade for "
            "sensitive crops. Consider early morning or evening activities.",
            "high",
            "irrigation",
        )
    elif weather.temperature < 5:
        add(
            "Frost Protection",
            "Low temperatures may cause frost damage. Cover sensitive plants and consider "
            "using frost protection methods.",
            "high",
            "weather",
        )

    if weather.humidity > 80:
        add(
            "High Humidity Warning",
            "High humidity levels increase disease risk. Improve air circulation and monitor "
            "for fungal diseases.",
            "medium",
            "disease",
        )
    elif weather.humidity < 30:
        add(
            "Low Humidity Alert",
            "Low humidity may stress plants. Increase irrigation and consider misting for "
            "humidity-loving crops.",
            "medium",
            "irrigation",
        )

    if weather.wind_speed > 15:
        add(
            "Strong Wind Alert",
            "High winds may damage crops. Secure tall plants and greenhouses. Avoid spraying "
            "pesticides.",
            "medium",
            "weather",
        )

    if weather.rainfall > 10:
        add(
            "Heavy Rainfall",
            "Significant rainfall detected. Check drainage systems and delay irrigation. "
            "Monitor for waterlogging.",
            "medium",
            "irrigation",
        )
    elif weather.rainfall == 0 and weather.humidity < 50:
        add(
            "Dry Conditions",
            "No rainfall and low humidity. Plan irrigation schedule and monitor soil moisture "
            "levels.",
            "low",
            "irrigation",
        )

    if weather.condition == "clear" and 20 <= weather.temperature <= 30:
        add(
            "Optimal Growing Conditions",
            "Perfect weather for most farming activities. Good time for planting, harvesting, "
            "and field work.",
            "low",
            "general",
        )

    return drafts


# --- OpenWeatherMap client ---


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def _parse_observation(
    entry: dict, location: WeatherLocation, rain_key: str, timestamp: str
) -> WeatherObservation:
    condition = entry["weather"][0]
    return WeatherObservation(
        temperature=_round_half_up(entry["main"]["temp"]),
        humidity=entry["main"]["humidity"],
        wind_speed=(entry.get("wind") or {}).get("speed") or 0,
        pressure=entry["main"]["pressure"],
        visibility=(entry.get("visibility") or 0) / 1000,
        rainfall=(entry.get("rain") or {}).get(rain_key) or 0,
        condition=condition["main"].lower(),
        description=condition.get("description", ""),
        location=location,
        timestamp=timestamp,
    )


async def _request(path: str, params: dict, client: httpx.AsyncClient | None = None) -> dict:
    if not WEATHER_API_KEY:
        raise UpstreamUnavailable("Weather API key not set")

    url = f"{WEATHER_API_URL.rstrip('/')}/{path}"
    query = {**params, "appid": WEATHER_API_KEY, "units": "metric"}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=WEATHER_TIMEOUT) as owned:
                response = await owned.get(url, params=query)
        else:
            response = await client.get(url, params=query)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        logger.warning(f"Weather API returned {e.response.status_code} for {path}")
        raise UpstreamUnavailable(f"Weather API error: {e.response.status_code}") from e
    except httpx.HTTPError as e:
        logger.warning(f"Weather API request failed for {path}: {e}")
        raise UpstreamUnavailable("Weather service unavailable") from e
    except ValueError as e:
        raise UpstreamUnavailable("Unexpected weather API response") from e


async def fetch_current_weather(
    lat: float, lon: float, client: httpx.AsyncClient | None = None
) -> WeatherObservation:
    """Current conditions at a coordinate. Rainfall is the last hour's total."""
    data = await _request("weather", {"lat": lat, "lon": lon}, client)
    try:
        location = WeatherLocation(
            lat=lat,
            lon=lon,
            name=data.get("name") or "",
            country=(data.get("sys") or {}).get("country") or "",
        )
        return _parse_observation(data, location, "1h", utc_now().isoformat())
    except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning(f"Malformed current weather payload: {e!r}")
        raise UpstreamUnavailable("Unexpected weather API response") from e


async def fetch_forecast(
    lat: float,
    lon: float,
    days: int = MAX_FORECAST_DAYS,
    client: httpx.AsyncClient | None = None,
) -> list[WeatherObservation]:
    """3 hourly forecast steps for up to five days. Rainfall is per step."""
    days = max(1, min(days, MAX_FORECAST_DAYS))
    data = await _request(
        "forecast", {"lat": lat, "lon": lon, "cnt": days * FORECAST_STEPS_PER_DAY}, client
    )
    try:
        city = data.get("city") or {}
        location = WeatherLocation(
            lat=lat, lon=lon, name=city.get("name") or "", country=city.get("country") or ""
        )
        return [
            _parse_observation(entry, location, "3h", entry["dt_txt"]) for entry in data["list"]
        ]
    except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning(f"Malformed forecast payload: {e!r}")
        raise UpstreamUnavailable("Unexpected weather API response") from e
