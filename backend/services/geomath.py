"""Great-circle helpers shared by the POI services."""
from __future__ import annotations

import math
from typing import Iterable, List, Tuple

from domain.models import BoundingBox, Coordinates, POI

EARTH_RADIUS_M = 6_371_000.0
# Flat meters-per-degree approximation used for search boxes. It ignores the
# latitude dependence of longitude degrees; search radius behavior relies on it.
METERS_PER_DEGREE = 111_000.0


def distance(a: Coordinates, b: Coordinates) -> int:
    """Haversine distance between two coordinates, rounded to whole meters."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lon - a.lon)
    h = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return int(round(EARTH_RADIUS_M * c))


def bearing(a: Coordinates, b: Coordinates) -> float:
    """Initial compass bearing from a to b, in degrees within [0, 360)."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dlambda = math.radians(b.lon - a.lon)
    y = math.sin(dlambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlambda)
    deg = math.degrees(math.atan2(y, x)) % 360.0
    # -0.0 % 360 and float rounding can both land on 360.0
    return 0.0 if deg >= 360.0 else deg


def bbox_around(center: Coordinates, radius_m: float) -> BoundingBox:
    """Square search box of +/- radius around a point."""
    delta = radius_m / METERS_PER_DEGREE
    return BoundingBox(
        north=center.lat + delta,
        south=center.lat - delta,
        east=center.lon + delta,
        west=center.lon - delta,
    )


def sort_by_distance(origin: Coordinates, pois: Iterable[POI]) -> List[Tuple[POI, int]]:
    """Pair each POI with its distance from origin, nearest first (stable)."""
    pairs = [(poi, distance(origin, poi.coordinates)) for poi in pois]
    pairs.sort(key=lambda pair: pair[1])
    return pairs
