from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Estimate backend the client talks to
    api_base_url: str = "http://localhost:8000"

    # Google Maps Platform (Routes, Geocoding, Places, Weather)
    google_maps_api_key: str = ""
    google_routes_url: str = "https://routes.googleapis.com"
    google_geocode_url: str = "https://maps.googleapis.com"
    google_places_url: str = "https://places.googleapis.com"
    google_weather_url: str = "https://weather.googleapis.com"
    provider_timeout_seconds: float = 7.0

    # Arrival times are wall-clock times at the airports
    airport_timezone: str = "America/New_York"

    # CORS
    cors_origins: str = "http://localhost:5173"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
