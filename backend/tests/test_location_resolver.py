"""
Tests for the two-phase location resolver.
"""
import pytest
import requests

from domain.models import LocationKind, Suggestion, SuggestionOrigin
from services.geocoding import ProviderMalformed, ProviderUnavailable
from services.location_cache import LocationCache
from services.location_resolver import (
    InvalidArgument,
    LocationResolver,
    merge_suggestions,
)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class SpyCache(LocationCache):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.gets = []
        self.puts = []

    def get(self, query):
        self.gets.append(query)
        return super().get(query)

    def put(self, query, value):
        self.puts.append((query, list(value)))
        super().put(query, value)


class FakeProvider:
    def __init__(self, results=None, error=None):
        self.results = results or {}
        self.error = error
        self.calls = []

    def search_suggestions(self, query, limit=3):
        self.calls.append((query, limit))
        if self.error is not None:
            raise self.error
        return list(self.results.get(query, []))[:limit]


def _remote(name: str, display_name: str = None) -> Suggestion:
    return Suggestion(
        display_name=display_name or name,
        name=name,
        kind=LocationKind.CITY,
        origin=SuggestionOrigin.REMOTE,
    )


MUMB_REMOTE = [
    _remote("Mumbai, Maharashtra, India", "Mumbai, Mumbai Suburban, Maharashtra, India"),
    _remote("Mumbra, Maharashtra, India"),
    _remote("Mumbwa, Central Province, Zambia"),
]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return SpyCache(ttl_seconds=3600, clock=clock)


def _resolver(cache, provider, **kwargs) -> LocationResolver:
    return LocationResolver(cache=cache, provider=provider, **kwargs)


@pytest.mark.parametrize("query", ["", "M", "x"])
def test_short_query_returns_empty_without_side_effects(cache, query):
    provider = FakeProvider(error=AssertionError("must not be called"))
    resolver = _resolver(cache, provider)

    assert resolver.resolve(query) == []
    assert resolver.resolve_local(query) == []
    assert resolver.resolve_remote(query, []) == []
    assert cache.gets == []
    assert cache.puts == []
    assert provider.calls == []


def test_three_local_matches_skip_remote_even_on_cache_miss(cache):
    provider = FakeProvider(error=AssertionError("must not be called"))
    resolver = _resolver(cache, provider)

    result = resolver.resolve("Texas")
    assert len(result) == 5
    assert all(s.origin == SuggestionOrigin.LOCAL for s in result)
    assert provider.calls == []
    assert cache.puts == []


def test_threshold_is_independent_of_limit(cache):
    provider = FakeProvider(error=AssertionError("must not be called"))
    resolver = _resolver(cache, provider)

    result = resolver.resolve("Texas", limit=10)
    assert len(result) == 5
    assert provider.calls == []


@pytest.mark.parametrize("limit", [1, 2])
def test_small_limit_does_not_trigger_remote_lookup(cache, limit):
    provider = FakeProvider(error=AssertionError("must not be called"))
    resolver = _resolver(cache, provider)

    result = resolver.resolve("Texas", limit=limit)

    assert len(result) == limit
    assert all(s.is_local for s in result)
    assert provider.calls == []
    assert cache.puts == []


def test_mumb_scenario_merges_local_then_remote(cache):
    provider = FakeProvider(results={"Mumb": MUMB_REMOTE})
    resolver = _resolver(cache, provider)

    result = resolver.resolve("Mumb")

    assert provider.calls == [("Mumb", 3)]
    assert [s.name for s in result] == [
        "Mumbai, Maharashtra, India",
        "Navi Mumbai, Maharashtra, India",
        "Mumbra, Maharashtra, India",
        "Mumbwa, Central Province, Zambia",
    ]
    # the local Mumbai beats the remote duplicate
    assert result[0].origin == SuggestionOrigin.LOCAL
    assert result[0].display_name == "Mumbai, Maharashtra, India"
    assert [s.origin for s in result[2:]] == [SuggestionOrigin.REMOTE, SuggestionOrigin.REMOTE]


def test_remote_query_is_passed_raw_and_cached_lower_cased(cache):
    provider = FakeProvider(results={"MuMb": MUMB_REMOTE})
    resolver = _resolver(cache, provider)

    resolver.resolve("MuMb")

    assert provider.calls == [("MuMb", 3)]
    assert cache.get("mumb") is not None


def test_result_never_exceeds_limit_and_local_precedes_remote(cache):
    provider = FakeProvider(results={"Mumb": MUMB_REMOTE})
    resolver = _resolver(cache, provider)

    for limit in range(0, 7):
        result = resolver.resolve("Mumb", limit=limit)
        assert len(result) <= limit
        origins = [s.origin for s in result]
        assert origins == sorted(origins, key=lambda o: o != SuggestionOrigin.LOCAL)


def test_second_resolve_uses_cache(cache):
    provider = FakeProvider(results={"Mumb": MUMB_REMOTE})
    resolver = _resolver(cache, provider)

    first = resolver.resolve("Mumb")
    second = resolver.resolve("Mumb")

    assert first == second
    assert len(provider.calls) == 1


def test_cache_hit_is_merged_and_deduplicated(cache):
    cache.put("mumb", MUMB_REMOTE)
    provider = FakeProvider(error=AssertionError("must not be called"))
    resolver = _resolver(cache, provider)

    result = resolver.resolve("MUMB", limit=3)
    assert [s.name for s in result] == [
        "Mumbai, Maharashtra, India",
        "Navi Mumbai, Maharashtra, India",
        "Mumbra, Maharashtra, India",
    ]


def test_cache_hit_is_served_even_with_enough_local_matches(cache):
    cache.put("texas", [_remote("Texas City, Texas, United States")])
    resolver = _resolver(cache, FakeProvider())

    result = resolver.resolve("Texas", limit=10)
    assert result[-1].name == "Texas City, Texas, United States"
    assert len(result) == 6


def test_expired_entry_triggers_new_remote_lookup(cache, clock):
    provider = FakeProvider(results={"Mumb": MUMB_REMOTE})
    resolver = _resolver(cache, provider)

    resolver.resolve("Mumb")
    clock.now += 3600
    resolver.resolve("Mumb")

    assert len(provider.calls) == 2


def test_delhi_timeout_returns_local_only(cache):
    provider = FakeProvider(error=ProviderUnavailable("timed out"))
    resolver = _resolver(cache, provider)

    result = resolver.resolve("Delhi")

    assert [s.name for s in result] == ["Delhi, Delhi, India"]
    assert result[0].origin == SuggestionOrigin.LOCAL
    assert provider.calls == [("Delhi", 3)]
    assert cache.puts == []
    assert cache.get("delhi") is None


@pytest.mark.parametrize(
    "error",
    [ProviderMalformed("bad body"), requests.ConnectionError("down"), requests.Timeout("slow")],
)
def test_provider_errors_degrade_to_local(cache, error):
    resolver = _resolver(cache, FakeProvider(error=error))
    assert [s.name for s in resolver.resolve("Delhi")] == ["Delhi, Delhi, India"]
    assert cache.puts == []


def test_empty_remote_result_is_cached(cache):
    provider = FakeProvider(results={})
    resolver = _resolver(cache, provider)

    assert resolver.resolve("xyz123notreal") == []
    assert cache.puts == [("xyz123notreal", [])]
    assert cache.get("xyz123notreal") == []

    assert resolver.resolve("xyz123notreal") == []
    assert len(provider.calls) == 1


def test_remote_disabled_is_local_only(cache):
    provider = FakeProvider(error=AssertionError("must not be called"))
    resolver = _resolver(cache, provider, remote_enabled=False)

    assert [s.name for s in resolver.resolve("Delhi")] == ["Delhi, Delhi, India"]
    assert cache.gets == []


def test_invalid_limit_is_rejected(cache):
    resolver = _resolver(cache, FakeProvider())
    with pytest.raises(InvalidArgument):
        resolver.resolve("Delhi", limit=-1)
    with pytest.raises(InvalidArgument):
        resolver.resolve("Delhi", limit="5")
    with pytest.raises(InvalidArgument):
        resolver.resolve_local("D", limit=-3)


def test_zero_limit_returns_empty_without_io(cache):
    provider = FakeProvider(error=AssertionError("must not be called"))
    resolver = _resolver(cache, provider)

    assert resolver.resolve("Delhi", limit=0) == []
    assert cache.gets == []


def test_merge_keeps_first_occurrence_and_is_case_sensitive():
    local = [
        Suggestion("Pune, Maharashtra, India", "Pune, Maharashtra, India", LocationKind.CITY, SuggestionOrigin.LOCAL)
    ]
    remote = [
        _remote("Pune, Maharashtra, India", "Pune, Pune District, Maharashtra, India"),
        _remote("pune, maharashtra, india"),
        _remote("Pune Cantonment, Maharashtra, India"),
    ]

    merged = merge_suggestions(local, remote, limit=5)
    assert [s.name for s in merged] == [
        "Pune, Maharashtra, India",
        "pune, maharashtra, india",
        "Pune Cantonment, Maharashtra, India",
    ]
    assert merged[0].origin == SuggestionOrigin.LOCAL
    assert merge_suggestions(local, remote, limit=1) == local
