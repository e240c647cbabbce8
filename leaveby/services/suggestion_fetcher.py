"""Address autocomplete — debounced suggestion lookups while the user types."""

import logging
from typing import Awaitable, Callable

from leaveby.schemas.advisory import Suggestion
from leaveby.services.debounce import DebouncedLookup

logger = logging.getLogger(__name__)

SUGGESTION_QUIESCENCE_SECONDS = 0.300
MIN_QUERY_LENGTH = 3
MAX_SUGGESTIONS = 8


class SuggestionFetcher(DebouncedLookup[list[Suggestion]]):
    """Owns the advisory suggestion list for the from-address field."""

    name = "suggestion lookup"

    def __init__(
        self,
        lookup: Callable[[str], Awaitable[list[Suggestion]]],
        quiescence: float = SUGGESTION_QUIESCENCE_SECONDS,
        min_length: int = MIN_QUERY_LENGTH,
        max_results: int = MAX_SUGGESTIONS,
    ):
        super().__init__(lookup, quiescence)
        self.min_length = min_length
        self.max_results = max_results
        self.suggestions: list[Suggestion] = []
        self.is_open = False

    @property
    def available(self) -> bool:
        """True while a non-empty list should be offered to the user."""
        return self.is_open and bool(self.suggestions)

    def on_input_change(self, text: str) -> None:
        query = (text or "").strip()
        if len(query) < self.min_length:
            self.clear()
            return
        self.is_open = True
        self.schedule(query)

    def dismiss(self) -> None:
        """Hide the list (Escape, click elsewhere) without cancelling anything."""
        self.is_open = False

    def clear(self) -> None:
        self.invalidate()
        self.suggestions = []
        self.is_open = False

    def _apply(self, value: list[Suggestion]) -> None:
        self.suggestions = list(value or [])[: self.max_results]
        logger.debug(f"Showing {len(self.suggestions)} address suggestions")

    def _apply_failure(self) -> None:
        self.suggestions = []
