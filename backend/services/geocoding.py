"""Lightweight Nominatim helpers: reverse geocoding and free-text search.

Both calls return raw upstream records; shaping them into POIs or area
context is left to the POI services so this module stays a thin client.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from functools import lru_cache
from typing import Any, Dict, List, Optional

import requests

from domain.models import BoundingBox
from settings import settings

logger = logging.getLogger(__name__)
_session = requests.Session()
_last_request_ts: float = 0.0
_lock = threading.Lock()
_logged_ua = False

FALLBACK_UA = "city-guide-poi/0.1 (contact: example@example.com)"
if settings.NOMINATIM_USER_AGENT is None:
    logger.warning(
        "NOMINATIM_USER_AGENT not set in environment; using fallback UA. "
        "This may violate Nominatim usage policy."
    )


def _redact_email(ua: str) -> str:
    if "@" not in ua:
        return ua
    return re.sub(r"\S+@\S+", "<redacted>", ua)


_ua_value = settings.NOMINATIM_USER_AGENT or FALLBACK_UA
NOMINATIM_HEADERS = {
    "User-Agent": _ua_value,
    "Accept": "application/json",
}
if settings.NOMINATIM_REFERER:
    NOMINATIM_HEADERS["Referer"] = settings.NOMINATIM_REFERER


def _round_coord(value: float, decimals: int = 5) -> float:
    """Round coordinates before caching / lookup to limit request diversity (~1 m)."""
    return round(value, decimals)


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
        if delta < settings.NOMINATIM_MIN_INTERVAL:
            time.sleep(settings.NOMINATIM_MIN_INTERVAL - delta)
        _last_request_ts = time.time()
    return _session.get(url, params=params, headers=headers, timeout=timeout)


def _log_user_agent_once() -> None:
    global _logged_ua
    if not _logged_ua:
        logger.debug("Nominatim User-Agent: %s", _redact_email(_ua_value))
        _logged_ua = True


@lru_cache(maxsize=512)
def _fetch_reverse(lat: float, lon: float) -> Optional[Dict[str, Any]]:
    """Cached reverse lookup. Raises on transport/JSON errors so failures are not cached."""
    _log_user_agent_once()
    params = {
        "format": "json",
        "lat": str(lat),
        "lon": str(lon),
        "zoom": "18",
        "addressdetails": "1",
    }
    resp = _throttled_get(
        f"{settings.NOMINATIM_BASE_URL}/reverse",
        params=params,
        headers=NOMINATIM_HEADERS,
        timeout=settings.NOMINATIM_TIMEOUT,
    )
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict) or "error" in data:
        return None
    return data


def reverse_geocode(lat: float, lon: float) -> Optional[Dict[str, Any]]:
    """Reverse geocode a coordinate into the raw Nominatim record.

    Returns None on network or parsing errors, or when Nominatim has no match.
    Returns None without a request when upstream lookups are disabled.
    Results are cached on rounded inputs.
    """
    if not settings.UPSTREAM_LOOKUPS_ENABLED:
        return None
    lat_r = _round_coord(lat)
    lon_r = _round_coord(lon)
    try:
        return _fetch_reverse(lat_r, lon_r)
    except (requests.RequestException, ValueError) as exc:
        logger.warning(
            "Nominatim reverse geocode error for lat=%s lon=%s: %s", lat_r, lon_r, exc
        )
        return None


def search_locations(
    query: str,
    bbox: Optional[BoundingBox] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Free-text search; returns raw Nominatim hits, or [] on any failure."""
    if not settings.UPSTREAM_LOOKUPS_ENABLED:
        return []
    _log_user_agent_once()
    params: dict[str, Any] = {
        "q": query,
        "format": "json",
        "addressdetails": "1",
        "limit": str(limit or settings.SEARCH_RESULT_LIMIT),
        "extratags": "1",
    }
    if bbox is not None:
        params["viewbox"] = bbox.viewbox
        params["bounded"] = "1"

    try:
        resp = _throttled_get(
            f"{settings.NOMINATIM_BASE_URL}/search",
            params=params,
            headers=NOMINATIM_HEADERS,
            timeout=settings.NOMINATIM_TIMEOUT,
        )
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Nominatim search error for q=%r: %s", query, exc)
        return []

    if not isinstance(data, list):
        logger.warning("Nominatim search for q=%r returned %s, expected a list", query, type(data).__name__)
        return []
    return data


def clear_cache() -> None:
    _fetch_reverse.cache_clear()
