"""
Rule-based area context from a reverse-geocode record and nearby POIs.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from domain.models import CityType, ContextualInfo, POI, POICategory

TOURIST_POI_THRESHOLD = 3
DINING_POI_THRESHOLD = 5
DINING_SUBCATEGORIES = frozenset({"restaurant", "cafe", "bar"})
AREA_ADDRESS_FIELDS = ("suburb", "neighbourhood", "city")
UNKNOWN_AREA = "Unknown Area"

TOURIST_SUGGESTIONS = (
    "This appears to be a popular tourist area",
    "Consider visiting multiple attractions within walking distance",
)
DINING_SUGGESTION = "Great dining options in this area"


def _area_label(reverse_geocode: Optional[Mapping[str, Any]]) -> str:
    address = (reverse_geocode or {}).get("address") or {}
    if not isinstance(address, Mapping):
        return UNKNOWN_AREA
    for key in AREA_ADDRESS_FIELDS:
        value = address.get(key)
        if value:
            return str(value)
    return UNKNOWN_AREA


def _is_dining(poi: POI) -> bool:
    return poi.category == POICategory.AMENITY.value and (poi.subcategory or "") in DINING_SUBCATEGORIES


def analyze_context(
    reverse_geocode: Optional[Mapping[str, Any]],
    pois: Sequence[POI],
) -> ContextualInfo:
    """
    Classify the area as residential, tourist or commercial.

    More than 3 tourism POIs marks a tourist area; more than 5 dining POIs
    marks it commercial, overriding the tourist city type (but not the
    tourist_area flag). A missing reverse-geocode record only affects the
    area label.
    """
    pois = pois or ()
    suggestions: list[str] = []
    tourist_area = False
    city_type = CityType.RESIDENTIAL

    tourist_count = sum(1 for p in pois if p.category == POICategory.TOURISM.value)
    dining_count = sum(1 for p in pois if _is_dining(p))

    if tourist_count > TOURIST_POI_THRESHOLD:
        tourist_area = True
        city_type = CityType.TOURIST
        suggestions.extend(TOURIST_SUGGESTIONS)

    if dining_count > DINING_POI_THRESHOLD:
        city_type = CityType.COMMERCIAL
        suggestions.append(DINING_SUGGESTION)

    return ContextualInfo(
        area=_area_label(reverse_geocode),
        city_type=city_type.value,
        tourist_area=tourist_area,
        suggestions=tuple(suggestions),
    )
