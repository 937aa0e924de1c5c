"""
Normalize upstream place records into POI values.

Two record shapes are supported:
- tagged nodes from an Overpass query (``id``, ``lat``, ``lon``, ``tags``)
- free-text search hits from Nominatim (``place_id``, ``display_name``,
  ``lat``/``lon`` strings, ``class``/``type``, optional ``extratags``)

Each shape has its own constructor; both produce the same immutable POI.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from domain.models import Coordinates, POI
from services.categories import classify

logger = logging.getLogger(__name__)

NAME_TAGS: Tuple[str, ...] = ("name", "brand")
WEBSITE_TAGS: Tuple[str, ...] = ("website", "contact:website")
PHONE_TAGS: Tuple[str, ...] = ("phone", "contact:phone")
ADDRESS_TAGS: Tuple[str, ...] = ("addr:housenumber", "addr:street", "addr:city", "addr:postcode")


def _describe_cuisine(value: str) -> str:
    return f"Cuisine: {value}"


def _describe_free_text(value: str) -> str:
    return value


def _describe_wikipedia(_value: str) -> str:
    return "Has Wikipedia entry"


# (tag, fragment builder), in the order fragments appear in the description.
DESCRIPTION_TAGS = (
    ("cuisine", _describe_cuisine),
    ("description", _describe_free_text),
    ("wikipedia", _describe_wikipedia),
)


def _clean(value: Any) -> Optional[str]:
    """Return a stripped string, or None for missing/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first_tag(tags: Mapping[str, Any], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = _clean(tags.get(key))
        if value:
            return value
    return None


def _coordinates(raw: Mapping[str, Any]) -> Optional[Coordinates]:
    try:
        return Coordinates(lat=float(raw["lat"]), lon=float(raw["lon"]))
    except (KeyError, TypeError, ValueError):
        return None


def build_description(tags: Mapping[str, Any]) -> Optional[str]:
    """Join description fragments from known tags with '. ', or None if none apply."""
    parts = []
    for key, describe in DESCRIPTION_TAGS:
        value = _clean(tags.get(key))
        if value:
            parts.append(describe(value))
    return ". ".join(parts) or None


def build_address(tags: Mapping[str, Any]) -> Optional[str]:
    """House number, street, city, postcode joined by ', ', skipping missing parts."""
    parts = [v for v in (_clean(tags.get(k)) for k in ADDRESS_TAGS) if v]
    return ", ".join(parts) or None


def from_tagged_node(raw: Mapping[str, Any]) -> Optional[POI]:
    """
    Build a POI from a tagged-node record.

    Returns None when the record has no usable name (name, then brand tag) or
    is malformed (missing id or coordinates).
    """
    if not isinstance(raw, Mapping):
        return None
    tags = raw.get("tags") or {}
    if not isinstance(tags, Mapping):
        tags = {}

    name = _first_tag(tags, NAME_TAGS)
    if name is None:
        return None
    node_id = raw.get("id")
    coords = _coordinates(raw)
    if node_id is None or coords is None:
        logger.debug("Skipping malformed tagged node id=%s name=%s", node_id, name)
        return None

    match = classify(tags)
    return POI(
        id=f"osm_{node_id}",
        name=name,
        coordinates=coords,
        category=match.main,
        subcategory=match.sub,
        description=build_description(tags),
        address=build_address(tags),
        website=_first_tag(tags, WEBSITE_TAGS),
        phone=_first_tag(tags, PHONE_TAGS),
        opening_hours=_clean(tags.get("opening_hours")),
        tags={str(k): str(v) for k, v in tags.items()},
    )


def from_search_result(raw: Mapping[str, Any]) -> POI:
    """
    Build a POI from a free-text geocoder hit.

    The category is the raw ``class`` (not the tag classifier) and
    description/address both carry the full display name.

    Total only over hits that carry parseable coordinates and a display
    name: every such hit becomes a POI. Any other hit raises ValueError;
    ``normalize_search_results`` skips those.
    """
    coords = _coordinates(raw)
    if coords is None:
        raise ValueError(f"search hit {raw.get('place_id')!r} has no usable coordinates")
    display_name = _clean(raw.get("display_name")) or _clean(raw.get("name"))
    if display_name is None:
        raise ValueError(f"search hit {raw.get('place_id')!r} has no display name")

    extratags = raw.get("extratags") or {}
    if not isinstance(extratags, Mapping):
        extratags = {}
    name = display_name.split(",")[0].strip() or display_name
    return POI(
        id=f"nominatim_{raw.get('place_id')}",
        name=name,
        coordinates=coords,
        category=_clean(raw.get("class")) or "location",
        subcategory=_clean(raw.get("type")),
        description=display_name,
        address=display_name,
        tags={str(k): str(v) for k, v in extratags.items() if v is not None},
    )


def normalize_pois(raw_nodes: Iterable[Mapping[str, Any]]) -> List[POI]:
    """Normalize tagged-node records, dropping unnamed or malformed ones."""
    pois: List[POI] = []
    dropped = 0
    for raw in raw_nodes or []:
        poi = from_tagged_node(raw)
        if poi is None:
            dropped += 1
            continue
        pois.append(poi)
    if dropped:
        logger.debug("normalize_pois: kept %d, dropped %d unnamed/malformed nodes", len(pois), dropped)
    return pois


def normalize_search_results(raw_hits: Iterable[Mapping[str, Any]]) -> List[POI]:
    """Normalize geocoder hits, skipping only hits that cannot be placed on a map."""
    pois: List[POI] = []
    for raw in raw_hits or []:
        if not isinstance(raw, Mapping):
            continue
        try:
            pois.append(from_search_result(raw))
        except ValueError as exc:
            logger.debug("normalize_search_results: skipping hit: %s", exc)
    return pois
