import pytest

from domain.models import Coordinates, POI
from services.geomath import bbox_around, bearing, distance, sort_by_distance


def test_distance_zero_for_same_point():
    for lat, lon in [(0.0, 0.0), (48.8584, 2.2945), (-33.86, 151.21), (89.9, -179.9)]:
        a = Coordinates(lat, lon)
        assert distance(a, a) == 0


def test_distance_one_degree_of_longitude_at_equator():
    d = distance(Coordinates(0.0, 0.0), Coordinates(0.0, 1.0))
    assert abs(d - 111_195) <= 50


def test_distance_is_symmetric_and_whole_meters():
    paris = Coordinates(48.8566, 2.3522)
    london = Coordinates(51.5074, -0.1278)
    assert distance(paris, london) == distance(london, paris)
    assert isinstance(distance(paris, london), int)
    # roughly 344 km
    assert 340_000 < distance(paris, london) < 348_000


@pytest.mark.parametrize(
    "dest, expected",
    [
        (Coordinates(1.0, 0.0), 0.0),
        (Coordinates(0.0, 1.0), 90.0),
        (Coordinates(-1.0, 0.0), 180.0),
        (Coordinates(0.0, -1.0), 270.0),
    ],
)
def test_bearing_cardinal_directions(dest, expected):
    assert bearing(Coordinates(0.0, 0.0), dest) == pytest.approx(expected, abs=1e-9)


def test_bearing_always_in_range():
    origin = Coordinates(10.0, 10.0)
    for lat, lon in [(10.0, 9.0), (9.0, 9.0), (11.0, 11.0), (10.0, 10.0)]:
        b = bearing(origin, Coordinates(lat, lon))
        assert 0.0 <= b < 360.0


def test_bbox_around_uses_flat_degree_approximation():
    box = bbox_around(Coordinates(45.0, 7.0), 1110.0)
    assert box.north == pytest.approx(45.01)
    assert box.south == pytest.approx(44.99)
    assert box.east == pytest.approx(7.01)
    assert box.west == pytest.approx(6.99)


def test_sort_by_distance_orders_nearest_first():
    origin = Coordinates(0.0, 0.0)
    far = POI(id="osm_1", name="Far", coordinates=Coordinates(0.0, 0.02), category="tourism")
    near = POI(id="osm_2", name="Near", coordinates=Coordinates(0.0, 0.001), category="tourism")
    pairs = sort_by_distance(origin, [far, near])
    assert [p.name for p, _ in pairs] == ["Near", "Far"]
    assert pairs[0][1] < pairs[1][1]
