import pytest

from domain.models import (
    BoundingBox,
    CategorizedPOISet,
    Coordinates,
    LocationContext,
    POI,
    POIBucket,
)


def test_coordinates_reject_out_of_range():
    with pytest.raises(ValueError):
        Coordinates(91.0, 0.0)
    with pytest.raises(ValueError):
        Coordinates(0.0, -180.5)
    with pytest.raises(ValueError):
        Coordinates(float("nan"), 0.0)


def test_bounding_box_requires_north_above_south():
    with pytest.raises(ValueError):
        BoundingBox(north=1.0, south=1.0, east=2.0, west=1.0)
    box = BoundingBox(north=2.0, south=1.0, east=4.0, west=3.0)
    assert box.viewbox == "3.0,1.0,4.0,2.0"


def test_poi_to_dict_omits_absent_optionals():
    poi = POI(
        id="osm_1",
        name="Cafe Luna",
        coordinates=Coordinates(1.0, 2.0),
        category="amenity",
        subcategory="cafe",
        opening_hours="Mo-Fr 08:00-18:00",
        tags={"amenity": "cafe", "name": "Cafe Luna"},
    )
    data = poi.to_dict()
    assert data["openingHours"] == "Mo-Fr 08:00-18:00"
    assert data["coordinates"] == {"lat": 1.0, "lon": 2.0}
    assert "description" not in data
    assert "address" not in data
    assert data["tags"]["amenity"] == "cafe"


def test_poi_is_immutable():
    poi = POI(id="osm_1", name="X", coordinates=Coordinates(0, 0), category="other")
    with pytest.raises(Exception):
        poi.name = "Y"  # type: ignore[misc]


def test_categorized_set_len_counts_all_buckets():
    poi = POI(id="osm_1", name="X", coordinates=Coordinates(0, 0), category="other")
    cats = CategorizedPOISet(other=[poi], services=[poi])
    assert len(cats) == 2
    assert cats.bucket(POIBucket.OTHER) == [poi]
    assert set(cats.to_dict()) == {"restaurants", "attractions", "shopping", "services", "other"}


def test_empty_location_context_matches_safe_default():
    assert LocationContext.empty().to_dict() == {
        "locationInfo": None,
        "nearbyPOIs": [],
        "contextualInfo": {
            "area": "Unknown",
            "cityType": "unknown",
            "touristArea": False,
            "suggestions": [],
        },
    }


def test_poi_tags_are_read_only_copy():
    raw_tags = {"amenity": "cafe"}
    poi = POI(id="osm_1", name="X", coordinates=Coordinates(0, 0), category="amenity", tags=raw_tags)
    with pytest.raises(TypeError):
        poi.tags["amenity"] = "bar"  # type: ignore[index]
    raw_tags["amenity"] = "bar"
    assert poi.tags["amenity"] == "cafe"
    assert poi.tags == {"amenity": "cafe"}
    assert isinstance(poi.to_dict()["tags"], dict)
