"""
Category classification for normalized POIs.

Both the tag-priority order and the bucket table are plain data so they can be
inspected and extended without touching the lookup loops below.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional, Tuple

from domain.models import CategorizedPOISet, CategoryMatch, POI, POIBucket, POICategory

# (tag key, display category), checked in order; first present key wins.
TAG_PRIORITY: Tuple[Tuple[str, POICategory], ...] = (
    ("amenity", POICategory.AMENITY),
    ("tourism", POICategory.TOURISM),
    ("shop", POICategory.SHOPPING),
    ("leisure", POICategory.LEISURE),
)

DINING_SUBCATEGORIES = frozenset({"restaurant", "cafe", "bar", "pub", "fast_food"})

# (category, allowed subcategories or None for any, bucket), first match wins.
BUCKET_RULES: Tuple[Tuple[str, Optional[frozenset], POIBucket], ...] = (
    (POICategory.AMENITY.value, DINING_SUBCATEGORIES, POIBucket.RESTAURANTS),
    (POICategory.AMENITY.value, None, POIBucket.SERVICES),
    (POICategory.TOURISM.value, None, POIBucket.ATTRACTIONS),
    (POICategory.SHOPPING.value, None, POIBucket.SHOPPING),
    ("shop", None, POIBucket.SHOPPING),
    (POICategory.LEISURE.value, None, POIBucket.ATTRACTIONS),
)


def classify(tags: Optional[Mapping[str, str]]) -> CategoryMatch:
    """Map a raw tag dictionary to a (main, sub) category pair."""
    if not tags:
        return CategoryMatch(main=POICategory.OTHER.value)
    for key, category in TAG_PRIORITY:
        value = tags.get(key)
        if value:
            return CategoryMatch(main=category.value, sub=str(value))
    return CategoryMatch(main=POICategory.OTHER.value)


def group(poi: POI) -> POIBucket:
    """Return the single recommendation bucket a POI belongs to."""
    for category, subcategories, bucket in BUCKET_RULES:
        if poi.category != category:
            continue
        if subcategories is None or (poi.subcategory or "") in subcategories:
            return bucket
    return POIBucket.OTHER


def categorize(pois: Iterable[POI]) -> CategorizedPOISet:
    """Partition POIs into buckets, preserving input order within each bucket."""
    result = CategorizedPOISet()
    for poi in pois:
        result.bucket(group(poi)).append(poi)
    return result
