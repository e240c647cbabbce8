from pydantic import BaseModel, Field

# Neutral summary shown when conditions could not be looked up
WEATHER_UNAVAILABLE = "Weather unavailable"


class Suggestion(BaseModel):
    id: str
    label: str

    model_config = {"frozen": True}


class WeatherPreview(BaseModel):
    summary: str
    extra_minutes: int = Field(default=0, ge=0)

    model_config = {"frozen": True}
