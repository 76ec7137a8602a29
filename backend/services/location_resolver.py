"""
Hybrid local/remote location suggestions.

Phase 1 scans the curated dataset (no I/O). Phase 2 consults the TTL cache
and, when the local tier found fewer than REMOTE_LOOKUP_THRESHOLD matches,
the geocoding provider. Provider failures never reach the caller: the local
result is returned unchanged.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

import requests

from domain.models import LocationEntry, Suggestion
from services.geocoding import GeocodingError, get_default_nominatim_client
from services.location_cache import build_location_cache
from services.location_dataset import POPULAR_LOCATIONS, is_query_too_short, search_local_locations
from settings import settings

DEFAULT_LIMIT = 5
# Independent of `limit`: with this many local matches the network is skipped.
REMOTE_LOOKUP_THRESHOLD = 3
REMOTE_RESULT_LIMIT = 3

logger = logging.getLogger(__name__)


class InvalidArgument(ValueError):
    """Raised for caller programming errors such as a negative limit."""


class SuggestionProvider(Protocol):
    def search_suggestions(self, query: str, limit: int = 3) -> List[Suggestion]:
        ...


class SuggestionCache(Protocol):
    def get(self, query: str) -> Optional[List[Suggestion]]:
        ...

    def put(self, query: str, value: Sequence[Suggestion]) -> None:
        ...


def check_limit(limit: int) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidArgument(f"limit must be an integer, got {limit!r}")
    if limit < 0:
        raise InvalidArgument(f"limit must be >= 0, got {limit}")


def merge_suggestions(
    local: Sequence[Suggestion],
    remote: Sequence[Suggestion],
    limit: int,
) -> List[Suggestion]:
    """Local first, then remote; first occurrence of a `name` wins; capped at `limit`."""
    merged: List[Suggestion] = []
    seen: set[str] = set()
    for item in list(local) + list(remote):
        if item.name in seen:
            continue
        seen.add(item.name)
        merged.append(item)
        if len(merged) >= limit:
            break
    return merged


class LocationResolver:
    def __init__(
        self,
        cache: SuggestionCache,
        provider: SuggestionProvider,
        dataset: Sequence[LocationEntry] = POPULAR_LOCATIONS,
        remote_enabled: bool = True,
    ):
        self.cache = cache
        self.provider = provider
        self.dataset = dataset
        self.remote_enabled = remote_enabled

    def resolve_local(self, query: str, limit: int = DEFAULT_LIMIT) -> List[Suggestion]:
        """Phase 1: in-memory dataset scan, no I/O."""
        check_limit(limit)
        if is_query_too_short(query) or limit == 0:
            return []
        entries = search_local_locations(query, limit=limit, dataset=self.dataset)
        return [Suggestion.from_entry(entry) for entry in entries]

    def resolve_remote(
        self,
        query: str,
        local: Sequence[Suggestion],
        limit: int = DEFAULT_LIMIT,
    ) -> List[Suggestion]:
        """Phase 2: cache, then provider fallback, merged with the Phase 1 result."""
        check_limit(limit)
        local = list(local)
        if is_query_too_short(query) or limit == 0:
            return []
        if not self.remote_enabled:
            return local[:limit]

        cached = self.cache.get(query)
        if cached is not None:
            logger.debug("[LOCATIONS] cache hit %r (%d remote)", query.lower(), len(cached))
            return merge_suggestions(local, cached, limit)

        # counted against the dataset, not the caller's `limit`
        local_matches = len(search_local_locations(query, limit=REMOTE_LOOKUP_THRESHOLD, dataset=self.dataset))
        if local_matches >= REMOTE_LOOKUP_THRESHOLD:
            logger.debug("[LOCATIONS] %d+ local matches for %r; skipping remote lookup", local_matches, query)
            return local[:limit]

        try:
            remote = self.provider.search_suggestions(query, limit=REMOTE_RESULT_LIMIT)
        except (GeocodingError, requests.RequestException) as exc:
            logger.warning("[LOCATIONS] remote lookup failed for %r, keeping local results: %s", query, exc)
            return local[:limit]

        self.cache.put(query, remote)
        logger.debug("[LOCATIONS] cache store %r (%d remote)", query.lower(), len(remote))
        return merge_suggestions(local, remote, limit)

    def resolve(self, query: str, limit: int = DEFAULT_LIMIT) -> List[Suggestion]:
        """Both phases back to back; returns the final merged list."""
        check_limit(limit)
        if is_query_too_short(query) or limit == 0:
            return []
        local = self.resolve_local(query, limit)
        return self.resolve_remote(query, local, limit)


_default_resolver: Optional[LocationResolver] = None


def get_default_resolver() -> LocationResolver:
    """App-wide resolver, built once from settings."""
    global _default_resolver
    if _default_resolver is None:
        _default_resolver = LocationResolver(
            cache=build_location_cache(settings),
            provider=get_default_nominatim_client(),
            remote_enabled=settings.REMOTE_LOOKUP_ENABLED,
        )
    return _default_resolver
