import json

import httpx
import pytest

from leaveby.schemas.trip import Airport, TransportMode, TripRequest
from leaveby.services.estimate_client import EstimateClient


class RecordingBackend:
    """httpx.MockTransport handler that records requests and answers like the estimate backend."""

    def __init__(self, estimate_status=200, estimate_json=None):
        self.estimate_status = estimate_status
        self.estimate_json = estimate_json if estimate_json is not None else {
            "recommendedLeaveDateTime": "2025-01-15T13:53:00Z",
            "arrivalDateTime": "2025-01-15T15:00:00Z",
            "breakdown": {
                "baseTravelMinutes": 45,
                "cabBufferMinutes": 10,
                "weatherExtraMinutes": 12,
                "weatherSummary": "Heavy rain",
                "totalMinutes": 67,
            },
        }
        self.preview_json = {"breakdown": {"weatherSummary": "Heavy rain", "weatherExtraMinutes": 12}}
        self.suggestions = [{"id": "p1", "label": "10 Main St, Brooklyn, NY, USA"}]
        self.estimate_payloads: list[dict] = []
        self.preview_payloads: list[dict] = []
        self.queries: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/places/suggest":
            self.queries.append(request.url.params["q"])
            return httpx.Response(200, json={"suggestions": self.suggestions})

        payload = json.loads(request.content)
        if payload.get("previewWeather"):
            self.preview_payloads.append(payload)
            return httpx.Response(200, json=self.preview_json)

        self.estimate_payloads.append(payload)
        return httpx.Response(self.estimate_status, json=self.estimate_json)


@pytest.fixture
def trip_request():
    return TripRequest(
        from_address_text="10 Main St, Brooklyn, NY",
        airport=Airport.JFK,
        arrival_date="01-15-2025",
        arrival_time="10:00",
        transport_mode=TransportMode.CAB,
        cab_buffer_minutes=10,
    )


@pytest.fixture
def valid_candidate():
    return {
        "from_address_text": "10 Main St, Brooklyn, NY",
        "selected_place_id": None,
        "airport": "JFK",
        "arrival_date": "01-15-2025",
        "arrival_time": "10:00",
        "transport_mode": "cab",
        "cab_buffer_minutes": 10,
    }


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
async def client(backend):
    c = EstimateClient(base_url="http://backend.test", transport=httpx.MockTransport(backend))
    yield c
    await c.close()
