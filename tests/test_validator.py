import pytest

from leaveby.schemas.trip import Airport, TransportMode, TripRequest
from leaveby.services.validator import build_trip_request, validate

REQUIRED = {"from_address_text", "airport", "arrival_date", "arrival_time", "transport_mode"}


@pytest.mark.parametrize("candidate", [{}, None])
def test_empty_candidate_reports_every_required_field(candidate):
    result = validate(candidate)
    assert result.valid is False
    assert set(result.field_errors) == REQUIRED


def test_well_formed_candidate_is_valid(valid_candidate):
    result = validate(valid_candidate)
    assert result.valid is True
    assert result.field_errors == {}


def test_whitespace_address_is_missing(valid_candidate):
    valid_candidate["from_address_text"] = "   "
    assert validate(valid_candidate).field_errors == {"from_address_text": "From address is required"}


def test_all_violations_reported_in_one_pass(valid_candidate):
    valid_candidate.update(airport="ORD", arrival_date="02-30-2025", arrival_time="25:00", transport_mode="bus")
    result = validate(valid_candidate)
    assert set(result.field_errors) == {"airport", "arrival_date", "arrival_time", "transport_mode"}


@pytest.mark.parametrize("buffer", [None, "", "  ", "abc", "-3", -3, 2.5, True, "²", "1³"])
def test_cab_requires_whole_minute_buffer(valid_candidate, buffer):
    valid_candidate["cab_buffer_minutes"] = buffer
    result = validate(valid_candidate)
    assert not result.valid
    assert set(result.field_errors) == {"cab_buffer_minutes"}


@pytest.mark.parametrize("buffer", [0, 10, "15"])
def test_cab_buffer_accepted(valid_candidate, buffer):
    valid_candidate["cab_buffer_minutes"] = buffer
    assert validate(valid_candidate).valid


def test_buffer_not_required_when_driving(valid_candidate):
    valid_candidate["transport_mode"] = "self"
    del valid_candidate["cab_buffer_minutes"]
    assert validate(valid_candidate).valid


def test_wrong_types_are_field_errors_not_exceptions():
    result = validate({"from_address_text": 12, "airport": ["JFK"], "arrival_date": 20250115, "transport_mode": None})
    assert set(result.field_errors) == REQUIRED


def test_build_canonicalizes_date_and_time(valid_candidate):
    valid_candidate.update(arrival_date="1/5/2025", arrival_time="7:05 PM", airport="lga")
    request = build_trip_request(valid_candidate)
    assert request.arrival_date == "01-05-2025"
    assert request.arrival_time == "19:05"
    assert request.airport is Airport.LGA


def test_build_maps_drive_to_self_and_drops_buffer(valid_candidate):
    valid_candidate.update(transport_mode="drive", cab_buffer_minutes="25")
    request = build_trip_request(valid_candidate)
    assert request.transport_mode is TransportMode.SELF
    assert request.cab_buffer_minutes == 0
    assert request.cab_buffer_minutes_used == 0


def test_build_keeps_selected_place(valid_candidate):
    valid_candidate["selected_place_id"] = "ChIJ123"
    assert build_trip_request(valid_candidate).selected_place_id == "ChIJ123"


def test_build_rejects_invalid_candidate():
    with pytest.raises(ValueError):
        build_trip_request({"airport": "JFK"})


def test_self_mode_never_uses_cab_buffer():
    request = TripRequest(
        from_address_text="1 Main St",
        airport=Airport.EWR,
        arrival_date="01-15-2025",
        arrival_time="10:00",
        transport_mode=TransportMode.SELF,
        cab_buffer_minutes=30,
    )
    assert request.cab_buffer_minutes_used == 0


def test_wire_form_uses_camel_case(trip_request):
    payload = trip_request.model_dump(mode="json", by_alias=True)
    assert payload == {
        "fromAddressText": "10 Main St, Brooklyn, NY",
        "selectedPlaceId": None,
        "airport": "JFK",
        "arrivalDate": "01-15-2025",
        "arrivalTime": "10:00",
        "transportMode": "cab",
        "cabBufferMinutes": 10,
    }
