"""
Location API routes.

Thin HTTP layer over the POI services: nearby POIs, reverse geocode info,
enriched area context, free-text search and time-of-day recommendations.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from domain.models import Coordinates
from services import geocoding, location_service
from services.geomath import bbox_around, sort_by_distance
from services.overpass import DEFAULT_CATEGORIES
from settings import settings

router = APIRouter()
logger = logging.getLogger(__name__)


class NearbyResponse(BaseModel):
    location: Dict[str, float]
    radius: float
    categories: List[str]
    count: int
    pois: List[dict]
    timestamp: str


class InfoResponse(BaseModel):
    coordinates: Dict[str, float]
    locationInfo: Optional[dict] = None
    timestamp: str


class ContextResponse(BaseModel):
    coordinates: Dict[str, float]
    locationInfo: Optional[dict] = None
    nearbyPOIs: List[dict]
    contextualInfo: Dict[str, Any]
    timestamp: str


class SearchResponse(BaseModel):
    query: str
    bbox: Optional[Dict[str, float]] = None
    count: int
    results: List[dict]
    timestamp: str


class RecommendationsResponse(BaseModel):
    coordinates: Dict[str, float]
    userContext: Dict[str, Any]
    recommendations: Dict[str, Any]
    timestamp: str


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_float(value: Optional[str], name: str) -> float:
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {value}")
    if not math.isfinite(parsed):
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {value}")
    return parsed


def _parse_coordinates(lat: Optional[str], lon: Optional[str]) -> Coordinates:
    """Validate query-string coordinates, mapping any problem to a 400."""
    if not lat or not lon:
        raise HTTPException(status_code=400, detail="Latitude and longitude are required")
    try:
        return Coordinates(lat=_parse_float(lat, "latitude"), lon=_parse_float(lon, "longitude"))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    parts = [p.strip() for p in value.split(",") if p.strip()]
    return parts or None


@router.get("/nearby", response_model=NearbyResponse)
def nearby(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    radius: Optional[str] = None,
    categories: Optional[str] = None,
):
    """Nearby POIs with distance from the requested point, nearest first."""
    coords = _parse_coordinates(lat, lon)
    search_radius = _parse_float(radius, "radius") if radius else settings.POI_SEARCH_RADIUS_M
    if search_radius <= 0:
        raise HTTPException(status_code=400, detail=f"Invalid radius: {radius}")
    search_categories = _split_csv(categories) or list(DEFAULT_CATEGORIES)

    pois = location_service.get_nearby_pois(coords, search_radius, search_categories)
    payload = []
    for poi, meters in sort_by_distance(coords, pois):
        item = poi.to_dict()
        item["distance"] = meters
        payload.append(item)

    return NearbyResponse(
        location=coords.to_dict(),
        radius=search_radius,
        categories=search_categories,
        count=len(payload),
        pois=payload,
        timestamp=_now_iso(),
    )


@router.get("/info", response_model=InfoResponse)
def info(lat: Optional[str] = None, lon: Optional[str] = None):
    """Raw reverse-geocode record for a point."""
    coords = _parse_coordinates(lat, lon)
    return InfoResponse(
        coordinates=coords.to_dict(),
        locationInfo=geocoding.reverse_geocode(coords.lat, coords.lon),
        timestamp=_now_iso(),
    )


@router.get("/context", response_model=ContextResponse)
def context(lat: Optional[str] = None, lon: Optional[str] = None):
    coords = _parse_coordinates(lat, lon)
    enriched = location_service.enrich_location_context(coords)
    return ContextResponse(
        coordinates=coords.to_dict(),
        timestamp=_now_iso(),
        **enriched.to_dict(),
    )


@router.get("/search", response_model=SearchResponse)
def search(
    q: Optional[str] = None,
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    radius: Optional[str] = None,
):
    """Free-text search, bounded to a box around lat/lon when all three are given."""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")

    bbox = None
    if lat and lon and radius:
        center = _parse_coordinates(lat, lon)
        meters = _parse_float(radius, "radius")
        if meters <= 0:
            raise HTTPException(status_code=400, detail=f"Invalid radius: {radius}")
        bbox = bbox_around(center, meters)

    results = location_service.search_pois(q.strip(), bbox)
    return SearchResponse(
        query=q.strip(),
        bbox=bbox.to_dict() if bbox else None,
        count=len(results),
        results=[poi.to_dict() for poi in results],
        timestamp=_now_iso(),
    )


@router.get("/recommendations", response_model=RecommendationsResponse)
def recommendations(
    lat: Optional[str] = None,
    lon: Optional[str] = None,
    preferences: Optional[str] = None,
):
    coords = _parse_coordinates(lat, lon)
    user_context, bundle = location_service.recommendations_for(coords, _split_csv(preferences))
    logger.debug(
        "recommendations: lat=%s lon=%s immediate=%d nearby=%d",
        coords.lat,
        coords.lon,
        len(bundle.immediate),
        len(bundle.nearby),
    )
    return RecommendationsResponse(
        coordinates=coords.to_dict(),
        userContext=user_context.to_dict(),
        recommendations=bundle.to_dict(),
        timestamp=_now_iso(),
    )
