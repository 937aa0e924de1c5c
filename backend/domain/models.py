"""
Core domain models for the city guide POI engine.
These are framework-agnostic value types shared by all services.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


class POICategory(str, Enum):
    """Closed set of display categories a tagged node can map to."""
    AMENITY = "amenity"
    TOURISM = "tourism"
    SHOPPING = "shopping"
    LEISURE = "leisure"
    OTHER = "other"


class POIBucket(str, Enum):
    """Tourist-facing grouping used by recommendations."""
    RESTAURANTS = "restaurants"
    ATTRACTIONS = "attractions"
    SHOPPING = "shopping"
    SERVICES = "services"
    OTHER = "other"


class CityType(str, Enum):
    """Heuristic area type derived from the POI mix around a coordinate."""
    RESIDENTIAL = "residential"
    TOURIST = "tourist"
    COMMERCIAL = "commercial"
    UNKNOWN = "unknown"  # only used by the safe-empty enrichment result


class TimeOfDay(str, Enum):
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    EVENING = "evening"


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 latitude/longitude pair in degrees."""
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"longitude out of range: {self.lon}")

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


@dataclass(frozen=True)
class BoundingBox:
    """
    North/south/east/west bounds in degrees.

    Antimeridian wraparound is not handled: east/west are passed through as-is.
    """
    north: float
    south: float
    east: float
    west: float

    def __post_init__(self) -> None:
        if not self.north > self.south:
            raise ValueError(f"north ({self.north}) must be greater than south ({self.south})")

    @property
    def viewbox(self) -> str:
        """Nominatim viewbox string: west,south,east,north."""
        return f"{self.west},{self.south},{self.east},{self.north}"

    def to_dict(self) -> Dict[str, float]:
        return {"north": self.north, "south": self.south, "east": self.east, "west": self.west}


@dataclass(frozen=True)
class CategoryMatch:
    """Result of classifying a tag dictionary."""
    main: str
    sub: Optional[str] = None


@dataclass(frozen=True)
class POI:
    """
    A named, located place normalized from one upstream record.

    ``id`` is namespaced by source (``osm_<id>``, ``nominatim_<place_id>``).
    Optional attributes are None when absent, never empty strings.
    ``tags`` keeps the raw upstream key/value dictionary as a read-only copy.
    """
    id: str
    name: str
    coordinates: Coordinates
    category: str
    subcategory: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    opening_hours: Optional[str] = None
    tags: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "coordinates": self.coordinates.to_dict(),
            "category": self.category,
        }
        optional = {
            "subcategory": self.subcategory,
            "description": self.description,
            "address": self.address,
            "website": self.website,
            "phone": self.phone,
            "openingHours": self.opening_hours,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        out["tags"] = dict(self.tags)
        return out


@dataclass
class CategorizedPOISet:
    """Partition of a POI batch into the five recommendation buckets."""
    restaurants: List[POI] = field(default_factory=list)
    attractions: List[POI] = field(default_factory=list)
    shopping: List[POI] = field(default_factory=list)
    services: List[POI] = field(default_factory=list)
    other: List[POI] = field(default_factory=list)

    def bucket(self, name: POIBucket) -> List[POI]:
        return getattr(self, POIBucket(name).value)

    def __len__(self) -> int:
        return sum(len(self.bucket(b)) for b in POIBucket)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {b.value: [p.to_dict() for p in self.bucket(b)] for b in POIBucket}


@dataclass(frozen=True)
class ContextualInfo:
    """Rule-based summary of the area around a coordinate."""
    area: str
    city_type: str = CityType.RESIDENTIAL.value
    tourist_area: bool = False
    suggestions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "area": self.area,
            "cityType": self.city_type,
            "touristArea": self.tourist_area,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class UserContext:
    """Request-scoped user input for recommendations."""
    location: Coordinates
    # Accepted but not yet applied to selection.
    preferences: Optional[Tuple[str, ...]] = None
    search_radius: Optional[float] = None
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"location": self.location.to_dict()}
        if self.preferences is not None:
            out["preferences"] = list(self.preferences)
        if self.search_radius is not None:
            out["searchRadius"] = self.search_radius
        if self.language is not None:
            out["language"] = self.language
        return out


@dataclass(frozen=True)
class RecommendationBundle:
    """Policy-selected highlights plus the remaining nearby POIs."""
    immediate: Tuple[POI, ...] = ()
    nearby: Tuple[POI, ...] = ()
    categories: Tuple[str, ...] = ()
    tips: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "immediate": [p.to_dict() for p in self.immediate],
            "nearby": [p.to_dict() for p in self.nearby],
            "categories": list(self.categories),
            "tips": list(self.tips),
        }


@dataclass(frozen=True)
class LocationContext:
    """Everything known about a coordinate after one enrichment pass."""
    location_info: Optional[Dict[str, Any]]
    nearby_pois: Tuple[POI, ...]
    contextual_info: ContextualInfo

    @classmethod
    def empty(cls) -> "LocationContext":
        return cls(
            location_info=None,
            nearby_pois=(),
            contextual_info=ContextualInfo(
                area="Unknown",
                city_type=CityType.UNKNOWN.value,
                tourist_area=False,
                suggestions=(),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "locationInfo": self.location_info,
            "nearbyPOIs": [p.to_dict() for p in self.nearby_pois],
            "contextualInfo": self.contextual_info.to_dict(),
        }
