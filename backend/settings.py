import os

# Basic settings helper to read environment configuration.


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.NOMINATIM_BASE_URL: str = os.getenv(
            "NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org"
        ).rstrip("/")
        self.OVERPASS_URL: str = os.getenv("OVERPASS_URL", "https://overpass-api.de/api/interpreter")
        self.NOMINATIM_USER_AGENT: str | None = os.getenv("NOMINATIM_USER_AGENT")
        self.NOMINATIM_REFERER: str | None = os.getenv("NOMINATIM_REFERER")
        self.NOMINATIM_MIN_INTERVAL: float = _as_float(os.getenv("NOMINATIM_MIN_INTERVAL"), 1.1)
        self.NOMINATIM_TIMEOUT: float = _as_float(os.getenv("NOMINATIM_TIMEOUT"), 5.0)
        self.OVERPASS_TIMEOUT: float = _as_float(os.getenv("OVERPASS_TIMEOUT"), 10.0)
        self.POI_SEARCH_RADIUS_M: float = _as_float(os.getenv("POI_SEARCH_RADIUS_M"), 1000.0)
        self.SEARCH_RESULT_LIMIT: int = int(_as_float(os.getenv("SEARCH_RESULT_LIMIT"), 10))
        self.CORS_ORIGIN: str = os.getenv("CORS_ORIGIN", "*")
        self.UPSTREAM_LOOKUPS_ENABLED: bool = _as_bool(os.getenv("UPSTREAM_LOOKUPS_ENABLED"), True)


settings = Settings()
