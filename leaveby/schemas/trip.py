from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class Airport(str, Enum):
    JFK = "JFK"
    LGA = "LGA"
    EWR = "EWR"


class TransportMode(str, Enum):
    SELF = "self"
    CAB = "cab"


class TripRequest(BaseModel):
    """A validated trip, in canonical wire form. Immutable once built."""
    from_address_text: str = Field(min_length=1)
    selected_place_id: str | None = None
    airport: Airport
    arrival_date: str = Field(pattern=r"^\d{2}-\d{2}-\d{4}$")   # MM-DD-YYYY
    arrival_time: str = Field(pattern=r"^\d{2}:\d{2}$")         # HH:MM, 24h
    transport_mode: TransportMode
    cab_buffer_minutes: int = Field(default=0, ge=0)

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}

    @property
    def cab_buffer_minutes_used(self) -> int:
        return self.cab_buffer_minutes if self.transport_mode is TransportMode.CAB else 0


class EstimateBreakdown(BaseModel):
    base_travel_minutes: int = Field(gt=0)
    cab_buffer_minutes_used: int = Field(ge=0)
    weather_extra_minutes: int = Field(ge=0)
    total_minutes: int
    weather_summary: str | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _total_is_sum(self) -> "EstimateBreakdown":
        expected = self.base_travel_minutes + self.cab_buffer_minutes_used + self.weather_extra_minutes
        if self.total_minutes != expected:
            raise ValueError(f"total_minutes must be {expected}, got {self.total_minutes}")
        return self


class EstimateResult(BaseModel):
    arrival_instant: datetime
    recommended_leave_instant: datetime
    breakdown: EstimateBreakdown

    model_config = {"frozen": True}


class EstimatePartial(BaseModel):
    """What the estimate service contributes: baseline, weather, and its own echo of the instants."""
    base_travel_minutes: int = Field(gt=0)
    weather_extra_minutes: int = Field(default=0, ge=0)
    weather_summary: str | None = None
    arrival_instant: datetime | None = None
    recommended_leave_instant: datetime | None = None

    model_config = {"frozen": True}
