"""Submission controller — form fields, advisory lookups, and the estimate state machine."""

import logging
from dataclasses import asdict, dataclass
from enum import Enum

from leaveby.schemas.advisory import Suggestion
from leaveby.schemas.trip import EstimateResult
from leaveby.services.estimate_client import EstimateClient, RemoteError, RemoteErrorKind, estimate_client
from leaveby.services.estimation_engine import compose, request_arrival_instant
from leaveby.services.suggestion_fetcher import SuggestionFetcher
from leaveby.services.validator import build_trip_request, validate
from leaveby.services.weather_previewer import WeatherPreviewer

logger = logging.getLogger(__name__)

DEFAULT_CAB_BUFFER_MINUTES = 10

USER_MESSAGES: dict[RemoteErrorKind, str] = {
    RemoteErrorKind.NETWORK: "We couldn't reach the estimate service. Check your connection and try again.",
    RemoteErrorKind.REJECTED: "The estimate service couldn't use these trip details. Check the address and try again.",
    RemoteErrorKind.SERVER: "The estimate service ran into a problem. Please try again in a moment.",
    RemoteErrorKind.MALFORMED: "The estimate service sent back an answer we couldn't read. Please try again.",
}


class SubmissionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class TripForm:
    """Raw field values as the user entered them."""
    from_address_text: str = ""
    selected_place_id: str | None = None
    airport: str = ""
    arrival_date: str = ""
    arrival_time: str = ""
    transport_mode: str = ""
    cab_buffer_minutes: int | str = DEFAULT_CAB_BUFFER_MINUTES

    def values(self) -> dict:
        return asdict(self)


class SubmissionController:
    """
    Single writer of submission state.

    idle -> loading -> success | error, and back to idle on reset(). The
    suggestion and weather components own their advisory state; the
    controller only feeds them input and clears them on reset.
    """

    def __init__(
        self,
        client: EstimateClient | None = None,
        suggestions: SuggestionFetcher | None = None,
        weather: WeatherPreviewer | None = None,
    ):
        self._client = client or estimate_client
        self.suggestions = suggestions or SuggestionFetcher(self._client.suggest_places)
        self.weather = weather or WeatherPreviewer(self._client.preview_weather)
        self.form = TripForm()
        self.state = SubmissionState.IDLE
        self.result: EstimateResult | None = None
        self.error_message: str | None = None
        self.field_errors: dict[str, str] = {}

    # Field edits

    def set_from_address(self, text: str) -> None:
        # Typing makes the free text authoritative again
        self.form.from_address_text = text
        self.form.selected_place_id = None
        self.suggestions.on_input_change(text)

    def choose_suggestion(self, suggestion: Suggestion) -> None:
        self.form.from_address_text = suggestion.label
        self.form.selected_place_id = suggestion.id
        self.suggestions.clear()

    def set_airport(self, airport: str) -> None:
        self.form.airport = airport
        self._refresh_weather()

    def set_arrival_date(self, arrival_date: str) -> None:
        self.form.arrival_date = arrival_date
        self._refresh_weather()

    def set_arrival_time(self, arrival_time: str) -> None:
        self.form.arrival_time = arrival_time
        self._refresh_weather()

    def set_transport_mode(self, mode: str) -> None:
        self.form.transport_mode = mode

    def set_cab_buffer(self, minutes: int | str) -> None:
        self.form.cab_buffer_minutes = minutes

    def _refresh_weather(self) -> None:
        self.weather.on_context_change(self.form.airport, self.form.arrival_date, self.form.arrival_time)

    # State machine

    async def submit(self) -> SubmissionState:
        """Validate, call the backend once, and land in success or error."""
        if self.state is SubmissionState.LOADING:
            logger.debug("Submit ignored, estimate already in flight")
            return self.state

        check = validate(self.form.values())
        if not check.valid:
            # State and the outcome on screen stay put until a request goes out
            self.field_errors = check.field_errors
            return self.state

        self.field_errors = {}
        request = build_trip_request(self.form.values())
        self.result = None
        self.error_message = None
        self.state = SubmissionState.LOADING

        try:
            partial = await self._client.request_estimate(request)
        except RemoteError as e:
            logger.info(f"Estimate failed ({e.kind.value}): {e.message}")
            self.error_message = USER_MESSAGES[e.kind]
            self.state = SubmissionState.ERROR
            return self.state

        self.result = compose(
            request_arrival_instant(request),
            partial.base_travel_minutes,
            request.cab_buffer_minutes_used,
            partial.weather_extra_minutes,
            partial.weather_summary,
        )
        self.state = SubmissionState.SUCCESS
        logger.info(
            f"Leave by {self.result.recommended_leave_instant.isoformat()} "
            f"for {request.airport.value} ({self.result.breakdown.total_minutes} min)"
        )
        return self.state

    def reset(self) -> None:
        """Back to idle, keeping the from-address and airport; everything else reverts."""
        if self.state is SubmissionState.LOADING:
            logger.debug("Reset ignored, estimate already in flight")
            return

        self.form = TripForm(from_address_text=self.form.from_address_text, airport=self.form.airport)
        self.result = None
        self.error_message = None
        self.field_errors = {}
        self.suggestions.clear()
        self.weather.reset()
        self.state = SubmissionState.IDLE
