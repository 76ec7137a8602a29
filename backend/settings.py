import os

# Basic settings helper to read environment configuration.


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    return int(val)


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    return float(val)


class Settings:
    def __init__(self) -> None:
        self.NOMINATIM_SEARCH_URL: str = os.getenv(
            "NOMINATIM_SEARCH_URL", "https://nominatim.openstreetmap.org/search"
        )
        self.NOMINATIM_TIMEOUT_SECONDS: float = _as_float(os.getenv("NOMINATIM_TIMEOUT_SECONDS"), 5.0)
        self.REMOTE_LOOKUP_ENABLED: bool = _as_bool(os.getenv("REMOTE_LOOKUP_ENABLED"), True)

        # "memory" (per-process) or "sqlite" (shared between workers)
        self.LOCATION_CACHE_BACKEND: str = os.getenv("LOCATION_CACHE_BACKEND", "memory").lower()
        self.LOCATION_CACHE_PATH: str | None = os.getenv("LOCATION_CACHE_PATH")
        self.LOCATION_CACHE_TTL_SECONDS: int = _as_int(os.getenv("LOCATION_CACHE_TTL_SECONDS"), 3600)
        # 0 keeps the cache unbounded
        self.LOCATION_CACHE_MAX_ENTRIES: int = _as_int(os.getenv("LOCATION_CACHE_MAX_ENTRIES"), 0)

        self.LOCATION_DEBOUNCE_MS: int = _as_int(os.getenv("LOCATION_DEBOUNCE_MS"), 300)
        self.LOCATION_SUGGESTION_LIMIT: int = _as_int(os.getenv("LOCATION_SUGGESTION_LIMIT"), 5)
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
