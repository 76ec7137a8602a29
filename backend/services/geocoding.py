"""Forward geocoding helpers using OpenStreetMap Nominatim.

Turns a free-text place query into short, form-ready location labels. The
API surface is intentionally small: one search call plus the helpers that
shape raw Nominatim results into suggestions.
"""

from __future__ import annotations

import logging
import os
import re
import threading
import time
from typing import Any, Dict, List, Optional

import requests

from domain.models import LocationKind, Suggestion, SuggestionOrigin
from settings import settings

NOMINATIM_SEARCH_URL = settings.NOMINATIM_SEARCH_URL
logger = logging.getLogger(__name__)
_session = requests.Session()
_last_request_ts: float = 0.0
_lock = threading.Lock()
_MIN_INTERVAL_SEC = float(os.getenv("NOMINATIM_MIN_INTERVAL", "1.0"))
_logged_ua = False
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT")
NOMINATIM_REFERER = os.getenv("NOMINATIM_REFERER")

FALLBACK_UA = "JobPostingPlatform/1.0"
if NOMINATIM_USER_AGENT is None:
    logger.warning(
        "NOMINATIM_USER_AGENT not set in environment; using fallback UA. "
        "This may violate Nominatim usage policy."
    )


def _redact_email(ua: str) -> str:
    if "@" not in ua:
        return ua
    return re.sub(r"\S+@\S+", "<redacted>", ua)


_ua_value = NOMINATIM_USER_AGENT or FALLBACK_UA
NOMINATIM_HEADERS = {
    "User-Agent": _ua_value,
    "Accept-Language": "en",
}
if NOMINATIM_REFERER:
    NOMINATIM_HEADERS["Referer"] = NOMINATIM_REFERER

# Nominatim "type" values that name a settlement or administrative area.
_CITY_TYPES = frozenset(
    {
        "city",
        "town",
        "village",
        "hamlet",
        "municipality",
        "suburb",
        "borough",
        "quarter",
        "neighbourhood",
        "locality",
        "county",
        "state",
        "province",
        "region",
        "country",
        "administrative",
    }
)
_REMOTE_TYPES = frozenset({"remote"})


class GeocodingError(Exception):
    """Base error for geocoding provider failures."""


class ProviderUnavailable(GeocodingError):
    """Network failure, timeout, or non-2xx response."""


class ProviderMalformed(GeocodingError):
    """Response body did not have the expected shape."""


def map_place_kind(place_type: Optional[str]) -> LocationKind:
    """Map a Nominatim free-text `type` onto LocationKind."""
    if not place_type:
        return LocationKind.UNKNOWN
    normalized = place_type.strip().lower()
    if normalized in _REMOTE_TYPES:
        return LocationKind.REMOTE
    if normalized in _CITY_TYPES:
        return LocationKind.CITY
    return LocationKind.UNKNOWN


def format_location_name(item: Dict[str, Any]) -> str:
    """
    Build the short label for a Nominatim search result.

    city, else town, else village; then state; then country, joined with
    ", ". Without any of those, the first three comma-separated segments of
    the raw display_name are kept as-is.
    """
    address = item.get("address")
    if address is not None and not isinstance(address, dict):
        raise ProviderMalformed(f"address is not an object: {type(address).__name__}")
    address = address or {}

    parts: List[str] = []
    locality = address.get("city") or address.get("town") or address.get("village")
    if locality:
        parts.append(str(locality))
    if address.get("state"):
        parts.append(str(address["state"]))
    if address.get("country"):
        parts.append(str(address["country"]))
    if parts:
        return ", ".join(parts)

    display_name = item.get("display_name")
    if not isinstance(display_name, str) or not display_name:
        raise ProviderMalformed("result has neither address parts nor display_name")
    return ",".join(display_name.split(",")[:3])


def _throttled_get(
    url: str,
    *,
    params: dict[str, Any],
    headers: dict[str, str],
    timeout: float,
) -> requests.Response:
    """Perform a GET request with a simple global rate limit."""
    global _last_request_ts
    with _lock:
        now = time.time()
        delta = now - _last_request_ts
        if delta < _MIN_INTERVAL_SEC:
            time.sleep(_MIN_INTERVAL_SEC - delta)
        _last_request_ts = time.time()
    return _session.get(url, params=params, headers=headers, timeout=timeout)


class NominatimClient:
    """Search client for the Nominatim `/search` endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or NOMINATIM_SEARCH_URL).rstrip("/")
        self.headers = dict(headers or NOMINATIM_HEADERS)
        self.timeout = timeout if timeout is not None else settings.NOMINATIM_TIMEOUT_SECONDS

    def search(self, query: str, limit: int = 3) -> List[Dict[str, Any]]:
        """Return raw Nominatim results for `query`.

        Raises ProviderUnavailable / ProviderMalformed; callers decide how to
        degrade.
        """
        global _logged_ua
        if not _logged_ua:
            logger.debug("Nominatim User-Agent: %s", _redact_email(self.headers.get("User-Agent", "")))
            _logged_ua = True

        params = {
            "q": query,
            "format": "json",
            "addressdetails": "1",
            "limit": str(limit),
            "accept-language": "en",
        }
        try:
            resp = _throttled_get(self.base_url, params=params, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ProviderUnavailable(f"Nominatim search failed for {query!r}: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise ProviderUnavailable(f"Nominatim search returned HTTP {resp.status_code} for {query!r}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderMalformed(f"Nominatim search returned invalid JSON for {query!r}: {exc}") from exc

        if not isinstance(data, list):
            raise ProviderMalformed(f"Nominatim search returned {type(data).__name__}, expected list")
        return data

    def to_suggestions(self, items: List[Dict[str, Any]]) -> List[Suggestion]:
        suggestions: List[Suggestion] = []
        for item in items:
            if not isinstance(item, dict):
                raise ProviderMalformed(f"result item is not an object: {type(item).__name__}")
            name = format_location_name(item)
            display_name = item.get("display_name")
            if display_name is not None and not isinstance(display_name, str):
                raise ProviderMalformed(f"display_name is not a string: {type(display_name).__name__}")
            suggestions.append(
                Suggestion(
                    display_name=display_name or name,
                    name=name,
                    kind=map_place_kind(item.get("type")),
                    origin=SuggestionOrigin.REMOTE,
                )
            )
        return suggestions

    def search_suggestions(self, query: str, limit: int = 3) -> List[Suggestion]:
        return self.to_suggestions(self.search(query, limit=limit))


_default_nominatim_client: Optional[NominatimClient] = None


def get_default_nominatim_client() -> NominatimClient:
    global _default_nominatim_client
    if _default_nominatim_client is None:
        _default_nominatim_client = NominatimClient()
    return _default_nominatim_client
