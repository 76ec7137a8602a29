"""
Location suggestion API routes.

`/suggest` runs both tiers for one request, `/popular` only the instant
local tier, and `/ws` drives a debounced SuggestionSession for a text field
that streams keystrokes.
"""
import json
import logging
from typing import Any, List, Optional

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from domain.models import Suggestion
from services.location_dataset import is_query_too_short
from services.location_resolver import InvalidArgument, check_limit, get_default_resolver
from services.suggestion_session import SuggestionSession, SuggestionUpdate
from settings import settings

router = APIRouter()
logger = logging.getLogger(__name__)

TOO_SHORT_HINT = "Type at least 2 characters for suggestions"
DEBOUNCE_SECONDS = settings.LOCATION_DEBOUNCE_MS / 1000.0


class LocationSuggestionResponse(BaseModel):
    name: str
    display_name: str
    kind: str
    origin: str
    is_local: bool


class LocationSuggestionsResponse(BaseModel):
    query: str
    too_short: bool
    hint: Optional[str] = None
    suggestions: List[LocationSuggestionResponse]


def suggestion_to_response(suggestion: Suggestion) -> LocationSuggestionResponse:
    return LocationSuggestionResponse(
        name=suggestion.name,
        display_name=suggestion.display_name,
        kind=suggestion.kind.value,
        origin=suggestion.origin.value,
        is_local=suggestion.is_local,
    )


def _build_response(query: str, suggestions: List[Suggestion]) -> LocationSuggestionsResponse:
    too_short = is_query_too_short(query)
    return LocationSuggestionsResponse(
        query=query,
        too_short=too_short,
        hint=TOO_SHORT_HINT if too_short else None,
        suggestions=[suggestion_to_response(s) for s in suggestions],
    )


@router.get("/suggest", response_model=LocationSuggestionsResponse)
def suggest_locations(
    q: str = Query("", description="Partially typed place name"),
    limit: int = Query(settings.LOCATION_SUGGESTION_LIMIT),
):
    """Local matches first, then geocoded matches when the local tier is thin."""
    try:
        suggestions = get_default_resolver().resolve(q, limit)
    except InvalidArgument as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _build_response(q, suggestions)


@router.get("/popular", response_model=LocationSuggestionsResponse)
def popular_locations(
    q: str = Query("", description="Partially typed place name"),
    limit: int = Query(settings.LOCATION_SUGGESTION_LIMIT),
):
    """Instant tier only; never touches the cache or the network."""
    try:
        suggestions = get_default_resolver().resolve_local(q, limit)
    except InvalidArgument as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _build_response(q, suggestions)


def _parse_message(message: str) -> tuple[str, Any]:
    """Accept either a bare query string or {"q": ..., "limit": ...}.

    The limit is passed through as sent; the caller validates it.
    """
    try:
        payload = json.loads(message)
    except ValueError:
        return message, None
    if isinstance(payload, dict):
        return str(payload.get("q") or ""), payload.get("limit")
    if isinstance(payload, str):
        return payload, None
    return message, None


@router.websocket("/ws")
async def suggestions_socket(websocket: WebSocket):
    await websocket.accept()

    async def send_update(update: SuggestionUpdate) -> None:
        await websocket.send_json(update.to_dict())

    session = SuggestionSession(
        get_default_resolver(),
        send_update,
        limit=settings.LOCATION_SUGGESTION_LIMIT,
        debounce_seconds=DEBOUNCE_SECONDS,
    )
    try:
        while True:
            message = await websocket.receive_text()
            query, limit = _parse_message(message)
            try:
                if limit is not None:
                    check_limit(limit)
                    session.limit = limit
                await session.update(query)
            except InvalidArgument as exc:
                await websocket.send_json({"type": "error", "detail": str(exc)})
    except WebSocketDisconnect:
        logger.debug("[LOCATIONS] websocket closed")
    finally:
        await session.close()
