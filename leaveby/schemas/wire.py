"""JSON bodies exchanged with the estimate backend (camelCase on the wire)."""

from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from leaveby.schemas.advisory import Suggestion


class WireModel(BaseModel):
    model_config = {"populate_by_name": True, "alias_generator": to_camel}


class EstimateRequestBody(WireModel):
    """POST /api/trip/estimate — full estimate, or weather preview when preview_weather is set."""
    from_address_text: str | None = None
    from_address: str | None = None
    selected_place_id: str | None = None
    airport: str | None = None
    arrival_date: str | None = None
    arrival_time: str | None = None
    transport_mode: str | None = None
    cab_buffer_minutes: int | None = None
    weather_condition: str | None = None
    use_weather_api: bool = False
    preview_weather: bool = False


class EstimateBreakdownBody(WireModel):
    base_travel_minutes: int = Field(gt=0, strict=True)
    cab_buffer_minutes: int = Field(default=0, ge=0)
    weather_extra_minutes: int = Field(default=0, ge=0, strict=True)
    weather_summary: str | None = None
    total_minutes: int | None = None


class EstimateResponseBody(WireModel):
    recommended_leave_date_time: datetime | None = None
    arrival_date_time: datetime | None = None
    breakdown: EstimateBreakdownBody


class WeatherBreakdownBody(WireModel):
    weather_extra_minutes: int = Field(default=0, ge=0, strict=True)
    weather_summary: str | None = None


class WeatherPreviewResponseBody(WireModel):
    arrival_date_time: datetime | None = None
    breakdown: WeatherBreakdownBody


class SuggestionsBody(BaseModel):
    suggestions: list[Suggestion] = []
