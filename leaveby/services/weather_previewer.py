"""Weather preview — debounced lookup of the weather delay for airport + arrival time."""

from typing import Awaitable, Callable

from leaveby.schemas.advisory import WEATHER_UNAVAILABLE, WeatherPreview
from leaveby.services.debounce import DebouncedLookup

WEATHER_QUIESCENCE_SECONDS = 0.350

# Shown when the lookup fails; advisory only, never blocks submission
UNAVAILABLE_PREVIEW = WeatherPreview(summary=WEATHER_UNAVAILABLE, extra_minutes=0)


class WeatherPreviewer(DebouncedLookup[WeatherPreview]):
    name = "weather preview"

    def __init__(
        self,
        lookup: Callable[[str, str, str], Awaitable[WeatherPreview]],
        quiescence: float = WEATHER_QUIESCENCE_SECONDS,
    ):
        super().__init__(lookup, quiescence)
        self.preview: WeatherPreview | None = None

    def on_context_change(self, airport: str | None, arrival_date: str | None, arrival_time: str | None) -> None:
        context = [(v or "").strip() for v in (airport, arrival_date, arrival_time)]
        if not all(context):
            self.reset()
            return
        self.schedule(*context)

    def reset(self) -> None:
        self.invalidate()
        self.preview = None

    def _apply(self, value: WeatherPreview) -> None:
        self.preview = value

    def _apply_failure(self) -> None:
        self.preview = UNAVAILABLE_PREVIEW
