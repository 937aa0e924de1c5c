"""
Compose upstream lookups with the POI core for one coordinate.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from domain.models import BoundingBox, Coordinates, LocationContext, POI, RecommendationBundle, UserContext
from services import geocoding, overpass
from services.context_analyzer import analyze_context
from services.poi_normalizer import normalize_pois, normalize_search_results
from services.recommendations import recommend
from settings import settings

logger = logging.getLogger(__name__)


def get_nearby_pois(
    coordinates: Coordinates,
    radius_m: Optional[float] = None,
    categories: Optional[Sequence[str]] = None,
) -> List[POI]:
    """Fetch and normalize tagged nodes around a coordinate."""
    raw = overpass.fetch_nearby_elements(
        coordinates.lat,
        coordinates.lon,
        radius=radius_m or settings.POI_SEARCH_RADIUS_M,
        categories=categories,
    )
    return normalize_pois(raw)


def search_pois(query: str, bbox: Optional[BoundingBox] = None) -> List[POI]:
    """Free-text search normalized into POIs."""
    return normalize_search_results(geocoding.search_locations(query, bbox))


def enrich_location_context(coordinates: Coordinates) -> LocationContext:
    """
    Reverse geocode, fetch nearby POIs and analyze the area.

    Never raises: any failure yields ``LocationContext.empty()``.
    """
    try:
        location_info = geocoding.reverse_geocode(coordinates.lat, coordinates.lon)
        nearby = get_nearby_pois(coordinates, settings.POI_SEARCH_RADIUS_M)
        contextual = analyze_context(location_info, nearby)
    except Exception as exc:
        logger.warning(
            "Error enriching location context for lat=%s lon=%s: %s",
            coordinates.lat,
            coordinates.lon,
            exc,
        )
        return LocationContext.empty()
    return LocationContext(
        location_info=location_info,
        nearby_pois=tuple(nearby),
        contextual_info=contextual,
    )


def recommendations_for(
    coordinates: Coordinates,
    preferences: Optional[Sequence[str]] = None,
    now: Optional[datetime] = None,
) -> Tuple[UserContext, RecommendationBundle]:
    """Build the user context and recommend from the enriched nearby POIs."""
    user_context = UserContext(
        location=coordinates,
        preferences=tuple(preferences) if preferences is not None else None,
    )
    context = enrich_location_context(coordinates)
    return user_context, recommend(user_context, context.nearby_pois, now=now)
