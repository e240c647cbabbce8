"""Trip form validation — field-scoped checks run before anything touches the network."""

from dataclasses import dataclass, field
from typing import Any, Mapping

from leaveby.schemas.trip import Airport, TransportMode, TripRequest
from leaveby.services.estimation_engine import (
    format_wire_date,
    format_wire_time,
    parse_arrival_date,
    parse_arrival_time,
)

# Older clients send "drive" for self-drive
_MODE_ALIASES = {"drive": TransportMode.SELF.value}

_AIRPORTS = {a.value for a in Airport}
_MODES = {m.value for m in TransportMode}


@dataclass
class ValidationResult:
    valid: bool
    field_errors: dict[str, str] = field(default_factory=dict)


def _text(candidate: Mapping[str, Any], key: str) -> str:
    value = candidate.get(key)
    return value.strip() if isinstance(value, str) else ""


def _normalize_mode(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    mode = value.strip().lower()
    return _MODE_ALIASES.get(mode, mode)


def _parse_buffer(value: Any) -> int | None:
    """Non-negative whole minutes from an int or a digit string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        text = value.strip()
        # isdigit() also admits superscripts, which int() rejects
        if text.isascii() and text.isdecimal():
            return int(text)
    return None


def validate(candidate: Mapping[str, Any] | None) -> ValidationResult:
    """
    Check a candidate trip for completeness and shape.

    Never raises: every problem becomes a message keyed by field name, and
    all problems are reported together.
    """
    candidate = candidate or {}
    errors: dict[str, str] = {}

    if not _text(candidate, "from_address_text"):
        errors["from_address_text"] = "From address is required"

    airport = _text(candidate, "airport").upper()
    if not airport:
        errors["airport"] = "Airport selection is required"
    elif airport not in _AIRPORTS:
        errors["airport"] = "Airport must be JFK, LGA, or EWR"

    arrival_date = _text(candidate, "arrival_date")
    if not arrival_date:
        errors["arrival_date"] = "Arrival date is required"
    else:
        try:
            parse_arrival_date(arrival_date)
        except ValueError:
            errors["arrival_date"] = "Arrival date must be a valid date (MM-DD-YYYY)"

    arrival_time = _text(candidate, "arrival_time")
    if not arrival_time:
        errors["arrival_time"] = "Arrival time is required"
    else:
        try:
            parse_arrival_time(arrival_time)
        except ValueError:
            errors["arrival_time"] = "Arrival time must be a valid time (HH:MM)"

    mode = _normalize_mode(candidate.get("transport_mode"))
    if not mode:
        errors["transport_mode"] = "Transportation mode is required"
    elif mode not in _MODES:
        errors["transport_mode"] = "Transportation mode must be self or cab"

    if mode == TransportMode.CAB.value:
        raw_buffer = candidate.get("cab_buffer_minutes")
        if raw_buffer is None or (isinstance(raw_buffer, str) and not raw_buffer.strip()):
            errors["cab_buffer_minutes"] = "Cab pickup buffer is required when using cab or rideshare"
        elif _parse_buffer(raw_buffer) is None:
            errors["cab_buffer_minutes"] = "Cab pickup buffer must be a whole number of minutes"

    return ValidationResult(valid=not errors, field_errors=errors)


def build_trip_request(candidate: Mapping[str, Any]) -> TripRequest:
    """
    Build the immutable TripRequest for a candidate that passed validate().

    Dates and times are rewritten to their canonical wire forms. Raises
    ValueError if the candidate does not validate.
    """
    result = validate(candidate)
    if not result.valid:
        raise ValueError(f"Trip is not valid: {result.field_errors}")

    mode = TransportMode(_normalize_mode(candidate["transport_mode"]))
    buffer = _parse_buffer(candidate.get("cab_buffer_minutes")) if mode is TransportMode.CAB else 0
    place_id = candidate.get("selected_place_id") or None

    return TripRequest(
        from_address_text=_text(candidate, "from_address_text"),
        selected_place_id=place_id,
        airport=Airport(_text(candidate, "airport").upper()),
        arrival_date=format_wire_date(parse_arrival_date(_text(candidate, "arrival_date"))),
        arrival_time=format_wire_time(parse_arrival_time(_text(candidate, "arrival_time"))),
        transport_mode=mode,
        cab_buffer_minutes=buffer or 0,
    )
