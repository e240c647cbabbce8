"""Estimation engine — turns a desired arrival and a minute breakdown into a leave-by time."""

import re
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from leaveby.config import settings
from leaveby.schemas.trip import EstimateBreakdown, EstimateResult, TripRequest

_DATE_RE = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$")
_TIME_24H_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([AP]M)$", re.IGNORECASE)


def parse_arrival_date(text: str) -> date:
    """
    Parse an arrival date.

    Accepts MM-DD-YYYY (canonical), M-D-YYYY and MM/DD/YYYY.
    Raises ValueError for anything else, including impossible dates like 02-30.
    """
    m = _DATE_RE.match(text.strip())
    if not m:
        raise ValueError(f"Unrecognised date {text!r}, expected MM-DD-YYYY")
    month, day, year = (int(g) for g in m.groups())
    return date(year, month, day)


def parse_arrival_time(text: str) -> time:
    """Parse HH:MM (24h) or h:mm AM/PM. Raises ValueError when out of range."""
    t = text.strip()
    m = _TIME_24H_RE.match(t)
    if m:
        return time(int(m.group(1)), int(m.group(2)))

    m = _TIME_12H_RE.match(t)
    if m:
        hour, minute = int(m.group(1)), int(m.group(2))
        if not 1 <= hour <= 12:
            raise ValueError(f"Hour {hour} out of range for a 12-hour time")
        hour = hour % 12 + (12 if m.group(3).upper() == "PM" else 0)
        return time(hour, minute)

    raise ValueError(f"Unrecognised time {text!r}, expected HH:MM")


def format_wire_date(d: date) -> str:
    return f"{d.month:02d}-{d.day:02d}-{d.year:04d}"


def format_wire_time(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def arrival_instant(arrival_date: str, arrival_time: str, zone: str | None = None) -> datetime:
    """Desired arrival as an aware datetime in the airports' local zone."""
    tz = ZoneInfo(zone or settings.airport_timezone)
    return datetime.combine(parse_arrival_date(arrival_date), parse_arrival_time(arrival_time), tzinfo=tz)


def request_arrival_instant(request: TripRequest) -> datetime:
    return arrival_instant(request.arrival_date, request.arrival_time)


def leave_by(arrival: datetime, total_minutes: int) -> datetime:
    """
    Subtract total_minutes from arrival on the absolute timeline.

    Done in UTC so that DST transitions and day/month/year rollovers come
    out right; the result is expressed in the arrival's own zone.
    """
    if arrival.tzinfo is None:
        raise ValueError("arrival must be timezone-aware")
    leave_utc = arrival.astimezone(timezone.utc) - timedelta(minutes=total_minutes)
    return leave_utc.astimezone(arrival.tzinfo)


def compose(
    arrival: datetime,
    base_travel_minutes: int,
    cab_buffer_minutes_used: int,
    weather_extra_minutes: int,
    weather_summary: str | None = None,
) -> EstimateResult:
    """
    Combine the three components into a breakdown and a recommended leave time.

    totalMinutes is the plain sum with no floor or ceiling. Out-of-range
    components raise ValueError (pydantic's ValidationError).
    """
    breakdown = EstimateBreakdown(
        base_travel_minutes=base_travel_minutes,
        cab_buffer_minutes_used=cab_buffer_minutes_used,
        weather_extra_minutes=weather_extra_minutes,
        total_minutes=base_travel_minutes + cab_buffer_minutes_used + weather_extra_minutes,
        weather_summary=weather_summary,
    )
    return EstimateResult(
        arrival_instant=arrival,
        recommended_leave_instant=leave_by(arrival, breakdown.total_minutes),
        breakdown=breakdown,
    )
