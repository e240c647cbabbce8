"""Places router — address autocomplete for the from-address field."""

from fastapi import APIRouter, Query

from leaveby.schemas.wire import SuggestionsBody
from leaveby.services.google_maps_client import google_maps_client
from leaveby.services.suggestion_fetcher import MIN_QUERY_LENGTH

router = APIRouter()


@router.get("/suggest", response_model=SuggestionsBody)
async def suggest_places(q: str = Query("")):
    """Address candidates for a partial address; short queries get an empty list."""
    query = q.strip()
    if len(query) < MIN_QUERY_LENGTH:
        return SuggestionsBody()
    return SuggestionsBody(suggestions=await google_maps_client.autocomplete(query))
