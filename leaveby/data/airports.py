"""NYC-area airports served by the estimator — coordinates and display names."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AirportInfo:
    iata: str
    name: str
    latitude: float
    longitude: float


AIRPORTS: dict[str, AirportInfo] = {
    "JFK": AirportInfo("JFK", "John F. Kennedy International", 40.6413111, -73.7781391),
    "LGA": AirportInfo("LGA", "LaGuardia", 40.7769271, -73.8739659),
    "EWR": AirportInfo("EWR", "Newark Liberty International", 40.6895314, -74.1744624),
}

# Drive-time baselines used when no routing provider is configured
MOCK_BASE_TRAVEL_MINUTES: dict[str, int] = {
    "JFK": 45,
    "LGA": 35,
    "EWR": 55,
}


def get_airport(iata: str) -> AirportInfo:
    """Look up an airport by code. Raises KeyError for codes we don't serve."""
    return AIRPORTS[iata.upper()]
