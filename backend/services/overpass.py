"""
Overpass API client for tagged map nodes around a coordinate.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from services.geocoding import NOMINATIM_HEADERS
from settings import settings

logger = logging.getLogger(__name__)
_session = requests.Session()

DEFAULT_CATEGORIES = ("amenity", "tourism", "shop", "leisure")

# Tag values requested per category; categories not listed match any value.
CATEGORY_VALUE_FILTERS: Dict[str, Sequence[str]] = {
    "amenity": (
        "restaurant", "cafe", "bar", "pub", "fast_food",
        "bank", "atm", "hospital", "pharmacy", "post_office",
    ),
    "tourism": ("attraction", "museum", "monument", "viewpoint", "information", "hotel", "hostel"),
    "shop": ("supermarket", "convenience", "mall", "department_store", "clothes", "books"),
    "leisure": ("park", "garden", "playground", "sports_centre", "swimming_pool"),
}


def _node_clause(category: str, lat: float, lon: float, radius: float) -> str:
    around = f"(around:{radius:g},{lat},{lon})"
    values = CATEGORY_VALUE_FILTERS.get(category)
    if values:
        return f'node["{category}"~"{"|".join(values)}"]{around};'
    return f'node["{category}"]{around};'


def build_overpass_query(
    lat: float,
    lon: float,
    radius: float,
    categories: Sequence[str] = DEFAULT_CATEGORIES,
) -> str:
    """Build an Overpass QL union of node queries, one per category."""
    clauses = "\n".join(_node_clause(c, lat, lon, radius) for c in categories if c)
    return f"[out:json][timeout:25];\n(\n{clauses}\n);\nout geom;"


def fetch_nearby_elements(
    lat: float,
    lon: float,
    radius: Optional[float] = None,
    categories: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch raw tagged-node elements near a coordinate.

    Returns [] on any upstream failure; callers treat that as "no POIs found".
    """
    if not settings.UPSTREAM_LOOKUPS_ENABLED:
        return []
    radius = radius or settings.POI_SEARCH_RADIUS_M
    query = build_overpass_query(lat, lon, radius, categories or DEFAULT_CATEGORIES)
    try:
        resp = _session.post(
            settings.OVERPASS_URL,
            data=query.encode("utf-8"),
            headers={"Content-Type": "text/plain", "User-Agent": NOMINATIM_HEADERS["User-Agent"]},
            timeout=settings.OVERPASS_TIMEOUT,
        )
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Overpass query error for lat=%s lon=%s radius=%s: %s", lat, lon, radius, exc)
        return []

    elements = data.get("elements") if isinstance(data, dict) else None
    if not isinstance(elements, list):
        return []
    logger.debug(
        "fetch_nearby_elements: lat=%.6f lon=%.6f radius_m=%.1f got %d elements",
        lat,
        lon,
        radius,
        len(elements),
    )
    return elements
