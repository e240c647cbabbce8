"""Estimate backend client — trip estimates, weather previews and address suggestions over HTTP."""

import logging
from enum import Enum

import httpx

from leaveby.config import settings
from leaveby.schemas.advisory import WEATHER_UNAVAILABLE, Suggestion, WeatherPreview
from leaveby.schemas.trip import EstimatePartial, TripRequest
from leaveby.schemas.wire import EstimateResponseBody, WeatherPreviewResponseBody

logger = logging.getLogger(__name__)

ESTIMATE_PATH = "/api/trip/estimate"
SUGGEST_PATH = "/api/places/suggest"

REQUEST_TIMEOUT_SECONDS = 30.0


class RemoteErrorKind(str, Enum):
    NETWORK = "network"      # never got an HTTP response (includes timeouts)
    REJECTED = "rejected"    # 4xx
    SERVER = "server"        # 5xx and other non-2xx
    MALFORMED = "malformed"  # 2xx with a body we can't use


class RemoteError(Exception):
    """The estimate call did not produce a usable answer."""

    def __init__(self, status: int | None, message: str, kind: RemoteErrorKind | None = None):
        super().__init__(message)
        self.status = status
        self.message = message
        if kind is None:
            if status is None:
                kind = RemoteErrorKind.NETWORK
            elif 400 <= status < 500:
                kind = RemoteErrorKind.REJECTED
            else:
                kind = RemoteErrorKind.SERVER
        self.kind = kind

    def __repr__(self) -> str:
        return f"RemoteError(status={self.status!r}, kind={self.kind.value!r}, message={self.message!r})"


def _error_text(resp: httpx.Response) -> str:
    """Pull the server's own error message out of a failed response."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("error", "detail"):
            if isinstance(data.get(key), str):
                return data[key]
    return resp.text[:200] or resp.reason_phrase


def _parse_suggestions(data) -> list[Suggestion]:
    if isinstance(data, dict):
        items = data.get("suggestions") or []
    elif isinstance(data, list):
        items = data
    else:
        items = []
    suggestions = []
    for item in items:
        if not isinstance(item, dict):
            continue
        sid = item.get("id") or item.get("place_id")
        label = item.get("label")
        if isinstance(sid, str) and isinstance(label, str) and label.strip():
            suggestions.append(Suggestion(id=sid, label=label))
    return suggestions


class EstimateClient:
    """Adapter for the trip estimate backend. One attempt per call, no retries."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url or settings.api_base_url
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        client = await self._get_client()
        try:
            resp = await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise RemoteError(None, f"{method} {path} timed out after {self._timeout}s") from e
        except httpx.RequestError as e:
            raise RemoteError(None, f"{method} {path} failed: {e}") from e

        if not resp.is_success:
            raise RemoteError(resp.status_code, _error_text(resp))
        return resp

    async def request_estimate(self, request: TripRequest) -> EstimatePartial:
        """
        Ask the backend for the travel baseline and weather delay of a trip.

        Raises RemoteError on transport failure, non-2xx status, or a body
        that fails schema checks (e.g. missing or non-positive baseTravelMinutes).
        """
        payload = request.model_dump(mode="json", by_alias=True)
        payload["useWeatherApi"] = True

        try:
            resp = await self._send("POST", ESTIMATE_PATH, json=payload)
        except RemoteError as e:
            logger.warning(f"Estimate request failed for {request.airport.value}: {e!r}")
            raise

        try:
            body = EstimateResponseBody.model_validate(resp.json())
        except ValueError as e:
            logger.warning(f"Malformed estimate response: {e}")
            raise RemoteError(resp.status_code, "Malformed estimate response", RemoteErrorKind.MALFORMED) from e

        return EstimatePartial(
            base_travel_minutes=body.breakdown.base_travel_minutes,
            weather_extra_minutes=body.breakdown.weather_extra_minutes,
            weather_summary=body.breakdown.weather_summary,
            arrival_instant=body.arrival_date_time,
            recommended_leave_instant=body.recommended_leave_date_time,
        )

    async def preview_weather(self, airport: str, arrival_date: str, arrival_time: str) -> WeatherPreview:
        """Weather delay at the airport for an arrival time. Raises RemoteError on any failure."""
        resp = await self._send(
            "POST",
            ESTIMATE_PATH,
            json={
                "previewWeather": True,
                "airport": airport,
                "arrivalDate": arrival_date,
                "arrivalTime": arrival_time,
            },
        )
        try:
            body = WeatherPreviewResponseBody.model_validate(resp.json())
        except ValueError as e:
            raise RemoteError(resp.status_code, "Malformed weather preview response", RemoteErrorKind.MALFORMED) from e

        return WeatherPreview(
            summary=body.breakdown.weather_summary or WEATHER_UNAVAILABLE,
            extra_minutes=body.breakdown.weather_extra_minutes,
        )

    async def suggest_places(self, query: str) -> list[Suggestion]:
        """
        Address candidates for free text, in the backend's order.

        A non-2xx answer or an unusable body yields an empty list; only
        transport failures raise.
        """
        try:
            resp = await self._send("GET", SUGGEST_PATH, params={"q": query})
        except RemoteError as e:
            if e.kind is RemoteErrorKind.NETWORK:
                raise
            return []
        try:
            return _parse_suggestions(resp.json())
        except ValueError:
            return []

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


estimate_client = EstimateClient()
