"""Weather service — maps the hourly forecast at the airport to a condition bucket and extra minutes."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from leaveby.data.airports import AirportInfo
from leaveby.schemas.advisory import WEATHER_UNAVAILABLE
from leaveby.services.google_maps_client import GoogleMapsClient, google_maps_client

logger = logging.getLogger(__name__)

# Condition bucket → extra minutes of travel
WEATHER_EXTRA_MINUTES: dict[str, int] = {
    "Clear": 0,
    "Light rain": 5,
    "Heavy rain": 12,
    "Snow or ice": 18,
    "Severe weather": 25,
}

MAX_FORECAST_HOURS = 240


class WeatherUnavailable(Exception):
    pass


@dataclass(frozen=True)
class WeatherResult:
    summary: str
    extra_minutes: int


UNAVAILABLE = WeatherResult(WEATHER_UNAVAILABLE, 0)


def extra_minutes_for(condition: str) -> int:
    return WEATHER_EXTRA_MINUTES.get(condition, 0)


def summarize_precipitation(precip_type: str | None, chance: int) -> str:
    """Bucket a forecast hour by precipitation type and probability."""
    if chance < 20:
        return "Clear"

    t = (precip_type or "").upper()
    if any(k in t for k in ("SNOW", "SLEET", "FREEZING")):
        return "Snow or ice"
    if "HEAVY_RAIN" in t:
        return "Heavy rain"
    if "RAIN" in t:
        return "Light rain"

    if chance >= 70:
        return "Severe weather"
    return "Light rain"


def _precipitation(hour: dict) -> tuple[str | None, int]:
    probability = (hour.get("precipitation") or {}).get("probability") or {}
    try:
        chance = int(probability.get("percent", 0))
    except (TypeError, ValueError):
        chance = 0
    return probability.get("type"), chance


class WeatherService:
    def __init__(self, maps: GoogleMapsClient | None = None):
        self._maps = maps or google_maps_client

    async def weather_at(self, airport: AirportInfo, arrival: datetime, now: datetime | None = None) -> WeatherResult:
        """Forecast condition for the hour of arrival. Raises on any provider failure."""
        now = now or datetime.now(timezone.utc)
        hours_ahead = int((arrival - now).total_seconds() // 3600)
        offset = min(max(0, hours_ahead), MAX_FORECAST_HOURS - 1)

        hours = await self._maps.hourly_forecast(airport, offset + 1)
        if not hours:
            raise WeatherUnavailable("Weather API returned no forecastHours")

        precip_type, chance = _precipitation(hours[min(offset, len(hours) - 1)])
        summary = summarize_precipitation(precip_type, chance)
        return WeatherResult(summary, extra_minutes_for(summary))

    async def weather_or_unavailable(self, airport: AirportInfo, arrival: datetime, now: datetime | None = None) -> WeatherResult:
        """Same as weather_at, but a failure degrades to zero extra minutes."""
        try:
            return await self.weather_at(airport, arrival, now)
        except Exception as e:
            logger.warning(f"Weather lookup failed for {airport.iata} at {arrival.isoformat()}: {e}")
            return UNAVAILABLE


weather_service = WeatherService()
