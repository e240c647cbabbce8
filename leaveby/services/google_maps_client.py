"""Google Maps Platform client — routes, geocoding, places autocomplete and hourly weather, with mock fallback."""

import hashlib
import logging
import math
from datetime import datetime, timezone

import httpx

from leaveby.config import settings
from leaveby.data.airports import MOCK_BASE_TRAVEL_MINUTES, AirportInfo
from leaveby.schemas.advisory import Suggestion

logger = logging.getLogger(__name__)


class RoutingError(Exception):
    """No drive time could be obtained for the trip."""


def parse_duration_minutes(duration: str) -> int:
    """Routes API durations look like "2700s"; round up to whole minutes."""
    seconds = float(duration.strip().rstrip("s"))
    return max(1, math.ceil(seconds / 60))


def _rfc3339(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class GoogleMapsClient:
    """Adapter for the Google Maps Platform REST APIs."""

    PLACE_TYPES = ["street_address", "premise", "subpremise"]

    def __init__(self, api_key: str | None = None):
        self._api_key = settings.google_maps_api_key if api_key is None else api_key
        self._client: httpx.AsyncClient | None = None
        self._use_mock = not self._api_key

    @property
    def use_mock(self) -> bool:
        return self._use_mock

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.provider_timeout_seconds)
        return self._client

    async def route_duration_minutes(
        self,
        depart_at: datetime,
        destination: AirportInfo,
        selected_place_id: str | None,
        from_address_text: str,
    ) -> int:
        """Traffic-aware drive time in minutes when leaving at depart_at."""
        if self._use_mock:
            return MOCK_BASE_TRAVEL_MINUTES[destination.iata]

        try:
            if selected_place_id:
                origin: dict = {"placeId": selected_place_id}
            else:
                lat, lng = await self.geocode(from_address_text)
                origin = {"location": {"latLng": {"latitude": lat, "longitude": lng}}}

            client = await self._get_client()
            resp = await client.post(
                f"{settings.google_routes_url}/directions/v2:computeRoutes",
                json={
                    "origin": origin,
                    "destination": {"location": {"latLng": {
                        "latitude": destination.latitude,
                        "longitude": destination.longitude,
                    }}},
                    "travelMode": "DRIVE",
                    "routingPreference": "TRAFFIC_AWARE",
                    "departureTime": _rfc3339(depart_at),
                },
                headers={
                    "X-Goog-Api-Key": self._api_key,
                    "X-Goog-FieldMask": "routes.duration",
                },
            )
            resp.raise_for_status()
            routes = resp.json().get("routes") or []
            if not routes:
                raise RoutingError("Routes API returned no routes")
            return parse_duration_minutes(routes[0]["duration"])
        except httpx.HTTPError as e:
            raise RoutingError(f"Routes API failed: {e}") from e
        except (KeyError, ValueError) as e:
            raise RoutingError(f"Unexpected Routes API response: {e}") from e

    async def geocode(self, address: str) -> tuple[float, float]:
        """Resolve free text to (lat, lng), biased to New York."""
        address = address.strip()
        if not address:
            raise RoutingError("Cannot geocode an empty address")
        if "ny" not in address.lower():
            address = f"{address}, NY"

        client = await self._get_client()
        resp = await client.get(
            f"{settings.google_geocode_url}/maps/api/geocode/json",
            params={
                "address": address,
                "components": "country:US",
                "region": "us",
                "key": self._api_key,
            },
        )
        resp.raise_for_status()
        data = resp.json()

        status = data.get("status", "UNKNOWN")
        if status != "OK":
            detail = data.get("error_message", "")
            raise RoutingError(f"Geocoding failed. status={status} {detail} address={address}".strip())
        results = data.get("results") or []
        if not results:
            raise RoutingError(f"Geocoding returned 0 results for address={address}")

        loc = results[0]["geometry"]["location"]
        return float(loc["lat"]), float(loc["lng"])

    async def autocomplete(self, query: str) -> list[Suggestion]:
        """US street-address predictions for a partial address."""
        if self._use_mock:
            return self._generate_mock_suggestions(query)

        try:
            client = await self._get_client()
            resp = await client.post(
                f"{settings.google_places_url}/v1/places:autocomplete",
                json={
                    "input": query,
                    "includedPrimaryTypes": self.PLACE_TYPES,
                    "includedRegionCodes": ["US"],
                    "languageCode": "en",
                },
                headers={
                    "X-Goog-Api-Key": self._api_key,
                    "X-Goog-FieldMask": "suggestions.placePrediction.placeId,suggestions.placePrediction.text.text",
                },
            )
            resp.raise_for_status()

            suggestions = []
            for s in resp.json().get("suggestions", []):
                prediction = s.get("placePrediction") or {}
                place_id = prediction.get("placeId")
                label = (prediction.get("text") or {}).get("text")
                if place_id and label:
                    suggestions.append(Suggestion(id=place_id, label=label))
            return suggestions

        except Exception as e:
            logger.error(f"Places autocomplete failed for {query!r}: {e}")
            return []

    async def hourly_forecast(self, airport: AirportInfo, hours: int) -> list[dict]:
        """Raw forecastHours entries starting at the current hour."""
        if self._use_mock:
            return [{"precipitation": {"probability": {"type": "NONE", "percent": 0}}}] * hours

        client = await self._get_client()
        resp = await client.get(
            f"{settings.google_weather_url}/v1/forecast/hours:lookup",
            params={
                "location.latitude": airport.latitude,
                "location.longitude": airport.longitude,
                "hours": hours,
                "key": self._api_key,
            },
        )
        resp.raise_for_status()
        return resp.json().get("forecastHours") or []

    def _generate_mock_suggestions(self, query: str) -> list[Suggestion]:
        """Deterministic street addresses for demo mode."""
        seed = int(hashlib.md5(query.lower().encode()).hexdigest()[:8], 16)
        street = query.strip().title()
        areas = [
            "Brooklyn, NY", "Queens, NY", "New York, NY",
            "Bronx, NY", "Staten Island, NY", "Jersey City, NJ",
        ]
        suggestions = []
        for i, area in enumerate(areas[:5]):
            number = 10 + (seed >> (i * 4)) % 900
            suggestions.append(Suggestion(
                id=f"mock_{seed:08x}_{i}",
                label=f"{number} {street}, {area}, USA",
            ))
        return suggestions

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


google_maps_client = GoogleMapsClient()
