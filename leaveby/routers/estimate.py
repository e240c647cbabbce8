"""Estimate router — full leave-time estimates and arrival weather previews."""

import logging

from fastapi import APIRouter, HTTPException

from leaveby.data.airports import AIRPORTS, get_airport
from leaveby.schemas.wire import (
    EstimateBreakdownBody,
    EstimateRequestBody,
    EstimateResponseBody,
    WeatherBreakdownBody,
    WeatherPreviewResponseBody,
)
from leaveby.services.estimation_engine import arrival_instant, request_arrival_instant
from leaveby.services.google_maps_client import RoutingError
from leaveby.services.trip_estimator import trip_estimator
from leaveby.services.validator import build_trip_request, validate
from leaveby.services.weather_service import weather_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def _preview_weather(body: EstimateRequestBody) -> WeatherPreviewResponseBody:
    """Weather-only mode; a provider failure still answers 200 with a neutral value."""
    airport = (body.airport or "").upper()
    if airport not in AIRPORTS:
        raise HTTPException(status_code=400, detail="airport must be JFK, LGA, or EWR")
    if not body.arrival_date or not body.arrival_time:
        raise HTTPException(status_code=400, detail="arrivalDate and arrivalTime are required")
    try:
        arrival = arrival_instant(body.arrival_date, body.arrival_time)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid arrivalDate/arrivalTime format")

    wx = await weather_service.weather_or_unavailable(get_airport(airport), arrival)
    return WeatherPreviewResponseBody(
        arrival_date_time=arrival,
        breakdown=WeatherBreakdownBody(weather_extra_minutes=wx.extra_minutes, weather_summary=wx.summary),
    )


@router.post("/estimate")
async def estimate_trip(body: EstimateRequestBody):
    """Recommended leave time for a trip, or a weather preview when previewWeather is set."""
    if body.preview_weather:
        return await _preview_weather(body)

    candidate = {
        "from_address_text": body.from_address_text or body.from_address,
        "selected_place_id": body.selected_place_id,
        "airport": body.airport,
        "arrival_date": body.arrival_date,
        "arrival_time": body.arrival_time,
        "transport_mode": body.transport_mode,
        "cab_buffer_minutes": body.cab_buffer_minutes,
    }
    check = validate(candidate)
    if not check.valid:
        raise HTTPException(status_code=400, detail="; ".join(check.field_errors.values()))
    if body.cab_buffer_minutes is not None and body.cab_buffer_minutes < 0:
        raise HTTPException(status_code=400, detail="cabBufferMinutes must be >= 0")
    if not body.use_weather_api and not (body.weather_condition or "").strip():
        raise HTTPException(status_code=400, detail="weatherCondition is required when useWeatherApi=false")

    trip = build_trip_request(candidate)
    airport = get_airport(trip.airport.value)
    arrival = request_arrival_instant(trip)

    wx = await trip_estimator.resolve_weather(airport, arrival, body.use_weather_api, body.weather_condition)
    try:
        est = await trip_estimator.estimate(
            airport=airport,
            arrival=arrival,
            from_address_text=trip.from_address_text,
            selected_place_id=trip.selected_place_id,
            cab_buffer_minutes=trip.cab_buffer_minutes_used,
            weather=wx,
        )
    except RoutingError as e:
        logger.error(f"Estimate failed for {trip.airport.value}: {e}")
        raise HTTPException(status_code=500, detail=f"Estimate failed: {e}")

    return EstimateResponseBody(
        recommended_leave_date_time=est.recommended_leave,
        arrival_date_time=est.arrival,
        breakdown=EstimateBreakdownBody(
            base_travel_minutes=est.base_travel_minutes,
            cab_buffer_minutes=est.cab_buffer_minutes,
            weather_extra_minutes=est.weather_extra_minutes,
            weather_summary=est.weather_summary,
            total_minutes=est.total_minutes,
        ),
    )
