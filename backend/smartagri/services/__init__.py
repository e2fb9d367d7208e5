"""Service layer modules."""

from smartagri.services.auth_service import (
    Credentials,
    DatabaseIdentityProvider,
    issue_token,
    resolve_token,
    revoke_token,
    update_profile,
)
from smartagri.services.device_service import (
    get_device,
    get_owned_device,
    list_devices,
    register_device,
    set_device_active,
)
from smartagri.services.readings_service import (
    fetch_recent_readings,
    ingest_readings,
    list_latest_readings,
)
from smartagri.services.recommendation_service import (
    dismiss_recommendation,
    has_recent_recommendations,
    list_recommendations,
    mark_recommendation_read,
    store_recommendations,
)
from smartagri.services.summary_service import calculate_trend, summarize_readings
from smartagri.services.weather_service import (
    farming_advisories,
    fetch_current_weather,
    fetch_forecast,
)

__all__ = [
    "Credentials",
    "DatabaseIdentityProvider",
    "issue_token",
    "resolve_token",
    "revoke_token",
    "update_profile",
    "get_device",
    "get_owned_device",
    "list_devices",
    "register_device",
    "set_device_active",
    "fetch_recent_readings",
    "ingest_readings",
    "list_latest_readings",
    "dismiss_recommendation",
    "has_recent_recommendations",
    "list_recommendations",
    "mark_recommendation_read",
    "store_recommendations",
    "calculate_trend",
    "summarize_readings",
    "farming_advisories",
    "fetch_current_weather",
    "fetch_forecast",
]
