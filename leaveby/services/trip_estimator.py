"""Trip estimator — searches for the latest departure that still arrives on time."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from leaveby.data.airports import AirportInfo
from leaveby.services.google_maps_client import GoogleMapsClient, google_maps_client
from leaveby.services.weather_service import WeatherResult, WeatherService, extra_minutes_for, weather_service

logger = logging.getLogger(__name__)

BISECTION_STEPS = 22


@dataclass
class TripEstimate:
    recommended_leave: datetime
    arrival: datetime
    base_travel_minutes: int
    cab_buffer_minutes: int
    weather_extra_minutes: int
    weather_summary: str

    @property
    def total_minutes(self) -> int:
        return self.base_travel_minutes + self.cab_buffer_minutes + self.weather_extra_minutes


class TripEstimator:
    """Combines weather, cab buffer and traffic-aware drive times into a leave time."""

    def __init__(self, maps: GoogleMapsClient | None = None, weather: WeatherService | None = None):
        self._maps = maps or google_maps_client
        self._weather = weather or weather_service

    async def resolve_weather(
        self,
        airport: AirportInfo,
        arrival: datetime,
        use_weather_api: bool,
        weather_condition: str | None,
        now: datetime | None = None,
    ) -> WeatherResult:
        if use_weather_api:
            return await self._weather.weather_or_unavailable(airport, arrival, now)
        return WeatherResult(weather_condition or "Clear", extra_minutes_for(weather_condition or ""))

    async def estimate(
        self,
        airport: AirportInfo,
        arrival: datetime,
        from_address_text: str,
        selected_place_id: str | None,
        cab_buffer_minutes: int,
        weather: WeatherResult,
        now: datetime | None = None,
    ) -> TripEstimate:
        """
        Find the departure time for a desired arrival.

        The car must reach the airport by arrival - cab buffer - weather
        delay. Drive time depends on departure time, so bisect between now
        and that target. If the target has already passed, leave now.
        Raises RoutingError when no drive time can be obtained.
        """
        now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        arrival_utc = arrival.astimezone(timezone.utc)
        target = arrival_utc - timedelta(minutes=cab_buffer_minutes + weather.extra_minutes)

        async def drive_minutes(depart_at: datetime) -> int:
            return await self._maps.route_duration_minutes(depart_at, airport, selected_place_id, from_address_text)

        if target <= now:
            logger.info(f"Target arrival at {airport.iata} already passed, recommending leave now")
            leave, base = now, await drive_minutes(now)
        else:
            lo, hi = now, target
            best: tuple[datetime, int] | None = None
            for _ in range(BISECTION_STEPS):
                mid = lo + (hi - lo) / 2
                minutes = await drive_minutes(mid)
                if mid + timedelta(minutes=minutes) > target:
                    hi = mid
                else:
                    lo = mid
                    best = (mid, minutes)

            if best is None:
                leave, base = now, await drive_minutes(now)
            else:
                leave, base = best

        return TripEstimate(
            recommended_leave=leave,
            arrival=arrival_utc,
            base_travel_minutes=base,
            cab_buffer_minutes=cab_buffer_minutes,
            weather_extra_minutes=weather.extra_minutes,
            weather_summary=weather.summary,
        )


trip_estimator = TripEstimator()
