"""
Time-of-day recommendation policy over a categorized POI batch.

The policy is a table: each time bucket lists up to two (bucket, filter, cap)
selectors whose picks are concatenated into ``immediate``. Everything not
picked is offered as ``nearby`` in input order.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from domain.models import POI, POIBucket, POICategory, RecommendationBundle, TimeOfDay, UserContext
from services.categories import categorize

MAX_IMMEDIATE = 5
MAX_NEARBY = 5

# Inclusive hour ranges; any hour outside them is evening.
TIME_WINDOWS: Tuple[Tuple[TimeOfDay, int, int], ...] = (
    (TimeOfDay.MORNING, 7, 10),
    (TimeOfDay.MIDDAY, 11, 14),
    (TimeOfDay.AFTERNOON, 15, 18),
)
DEFAULT_TIME_OF_DAY = TimeOfDay.EVENING

TRUTHY_TAG_VALUES = frozenset({"yes", "true", "1"})

POIFilter = Callable[[POI], bool]


def _any(_poi: POI) -> bool:
    return True


def _subcategory_in(*values: str) -> POIFilter:
    allowed = frozenset(values)

    def check(poi: POI) -> bool:
        return (poi.subcategory or "") in allowed

    return check


def _cafe_or_breakfast(poi: POI) -> bool:
    if poi.subcategory == "cafe":
        return True
    return str(poi.tags.get("breakfast", "")).strip().lower() in TRUTHY_TAG_VALUES


def _open_late_or_tourism(poi: POI) -> bool:
    hours = poi.opening_hours or poi.tags.get("opening_hours") or ""
    return "24/7" in hours or poi.category == POICategory.TOURISM.value


@dataclass(frozen=True)
class Selector:
    bucket: POIBucket
    keep: POIFilter
    cap: int


@dataclass(frozen=True)
class TimePolicy:
    selectors: Tuple[Selector, ...]
    categories: Tuple[str, ...]
    tip: str


POLICIES: Dict[TimeOfDay, TimePolicy] = {
    TimeOfDay.MORNING: TimePolicy(
        selectors=(
            Selector(POIBucket.RESTAURANTS, _cafe_or_breakfast, 3),
            Selector(POIBucket.ATTRACTIONS, _any, 2),
        ),
        categories=("breakfast", "coffee", "morning attractions"),
        tip="Perfect time for a coffee and sightseeing!",
    ),
    TimeOfDay.MIDDAY: TimePolicy(
        selectors=(
            Selector(POIBucket.RESTAURANTS, _subcategory_in("restaurant", "fast_food"), 3),
            Selector(POIBucket.SHOPPING, _any, 2),
        ),
        categories=("lunch", "shopping", "attractions"),
        tip="Great time for lunch and some shopping!",
    ),
    TimeOfDay.AFTERNOON: TimePolicy(
        selectors=(
            Selector(POIBucket.ATTRACTIONS, _any, 3),
            Selector(POIBucket.RESTAURANTS, _subcategory_in("cafe"), 2),
        ),
        categories=("attractions", "coffee", "culture"),
        tip="Perfect time to explore attractions and enjoy a coffee break!",
    ),
    TimeOfDay.EVENING: TimePolicy(
        selectors=(
            Selector(POIBucket.RESTAURANTS, _subcategory_in("restaurant", "bar", "pub"), 3),
            Selector(POIBucket.ATTRACTIONS, _open_late_or_tourism, 2),
        ),
        categories=("dinner", "nightlife", "evening attractions"),
        tip="Time for dinner and evening entertainment!",
    ),
}


def time_of_day(hour: int) -> TimeOfDay:
    """Bucket an hour (0-23) into a time of day; unmatched hours are evening."""
    for bucket, start, end in TIME_WINDOWS:
        if start <= hour <= end:
            return bucket
    return DEFAULT_TIME_OF_DAY


def recommend(
    user_context: Optional[UserContext],
    pois: Sequence[POI],
    now: Optional[datetime] = None,
) -> RecommendationBundle:
    """
    Pick up to five time-appropriate POIs and list the rest as nearby.

    ``user_context.preferences`` is accepted but does not influence selection.
    ``now`` defaults to the current local time; only its hour is used.
    """
    pois = list(pois or [])
    when = now or datetime.now()
    policy = POLICIES[time_of_day(when.hour)]
    categorized = categorize(pois)

    immediate: List[POI] = []
    for selector in policy.selectors:
        picked = [p for p in categorized.bucket(selector.bucket) if selector.keep(p)]
        immediate.extend(picked[: selector.cap])
    immediate = immediate[:MAX_IMMEDIATE]

    chosen_ids = {p.id for p in immediate}
    nearby = [p for p in pois if p.id not in chosen_ids][:MAX_NEARBY]

    return RecommendationBundle(
        immediate=tuple(immediate),
        nearby=tuple(nearby),
        categories=policy.categories,
        tips=(policy.tip,),
    )
