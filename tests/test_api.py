from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import httpx
import pytest

from leaveby.main import app
from leaveby.schemas.trip import Airport, TransportMode, TripRequest
from leaveby.services.estimate_client import EstimateClient, RemoteError, RemoteErrorKind
from leaveby.services.google_maps_client import google_maps_client

NY = ZoneInfo("America/New_York")


@pytest.fixture(autouse=True)
def mock_provider(monkeypatch):
    monkeypatch.setattr(google_maps_client, "_use_mock", True)


@pytest.fixture
async def api():
    c = EstimateClient(base_url="http://test", transport=httpx.ASGITransport(app=app))
    yield c
    await c.close()


@pytest.fixture
async def raw():
    async with httpx.AsyncClient(base_url="http://test", transport=httpx.ASGITransport(app=app)) as c:
        yield c


def _future_date(days=3) -> str:
    return (datetime.now(NY) + timedelta(days=days)).strftime("%m-%d-%Y")


async def test_health(raw):
    resp = await raw.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_suggest_short_query_is_empty(api):
    assert await api.suggest_places("ma") == []


async def test_suggest_returns_mock_addresses(api):
    suggestions = await api.suggest_places("main st")
    assert len(suggestions) == 5
    assert all(s.id.startswith("mock_") for s in suggestions)


async def test_weather_preview_in_mock_mode(api):
    preview = await api.preview_weather("JFK", _future_date(), "10:00")
    assert preview.summary == "Clear"
    assert preview.extra_minutes == 0


async def test_weather_preview_rejects_unknown_airport(api):
    with pytest.raises(RemoteError) as exc:
        await api.preview_weather("BOS", _future_date(), "10:00")
    assert exc.value.kind is RemoteErrorKind.REJECTED
    assert "JFK, LGA, or EWR" in exc.value.message


async def test_full_estimate_uses_airport_baseline(api):
    date = _future_date()
    trip = TripRequest(
        from_address_text="10 Main St, Brooklyn, NY",
        airport=Airport.JFK,
        arrival_date=date,
        arrival_time="10:00",
        transport_mode=TransportMode.CAB,
        cab_buffer_minutes=10,
    )

    partial = await api.request_estimate(trip)

    assert partial.base_travel_minutes == 45
    assert partial.weather_extra_minutes == 0
    assert partial.weather_summary == "Clear"
    arrival = datetime.strptime(f"{date} 10:00", "%m-%d-%Y %H:%M").replace(tzinfo=NY)
    assert partial.arrival_instant == arrival
    expected_leave = arrival - timedelta(minutes=45 + 10)
    assert abs((partial.recommended_leave_instant - expected_leave).total_seconds()) <= 1


async def test_manual_weather_condition(raw):
    resp = await raw.post("/api/trip/estimate", json={
        "fromAddressText": "1 Broadway, New York, NY",
        "airport": "LGA",
        "arrivalDate": _future_date(),
        "arrivalTime": "18:30",
        "transportMode": "self",
        "cabBufferMinutes": 20,
        "useWeatherApi": False,
        "weatherCondition": "Heavy rain",
    })

    assert resp.status_code == 200
    breakdown = resp.json()["breakdown"]
    assert breakdown == {
        "baseTravelMinutes": 35,
        "cabBufferMinutes": 0,
        "weatherExtraMinutes": 12,
        "weatherSummary": "Heavy rain",
        "totalMinutes": 47,
    }


async def test_weather_condition_required_without_weather_api(raw):
    resp = await raw.post("/api/trip/estimate", json={
        "fromAddressText": "1 Broadway, New York, NY",
        "airport": "EWR",
        "arrivalDate": _future_date(),
        "arrivalTime": "07:00",
        "transportMode": "self",
    })
    assert resp.status_code == 400
    assert "weatherCondition" in resp.json()["detail"]


async def test_missing_fields_are_rejected(raw):
    resp = await raw.post("/api/trip/estimate", json={"airport": "JFK", "useWeatherApi": True})

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert "From address is required" in detail


async def test_past_arrival_means_leave_now(raw):
    before = datetime.now(NY)
    yesterday = (before - timedelta(days=1)).strftime("%m-%d-%Y")
    resp = await raw.post("/api/trip/estimate", json={
        "fromAddress": "1 Broadway, New York, NY",
        "airport": "EWR",
        "arrivalDate": yesterday,
        "arrivalTime": "09:00",
        "transportMode": "self",
        "useWeatherApi": True,
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["breakdown"]["baseTravelMinutes"] == 55
    leave = datetime.fromisoformat(body["recommendedLeaveDateTime"].replace("Z", "+00:00"))
    assert leave >= before - timedelta(seconds=1)
