from unittest.mock import MagicMock, patch

import requests

from domain.models import BoundingBox
from services import geocoding
from services.geocoding import reverse_geocode, search_locations


def _response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


@patch("services.geocoding._session.get")
def test_reverse_geocode_returns_raw_record(mock_get):
    geocoding.clear_cache()
    record = {"place_id": 1, "address": {"suburb": "Mitte", "city": "Berlin"}}
    mock_get.return_value = _response(record)

    result = reverse_geocode(52.52, 13.405)
    assert result == record
    _, kwargs = mock_get.call_args
    assert kwargs["params"]["zoom"] == "18"
    assert kwargs["params"]["addressdetails"] == "1"
    assert mock_get.call_args[0][0].endswith("/reverse")


@patch("services.geocoding._session.get")
def test_reverse_geocode_is_cached_on_rounded_coords(mock_get):
    geocoding.clear_cache()
    mock_get.return_value = _response({"address": {"city": "Berlin"}})

    reverse_geocode(52.520001, 13.405001)
    reverse_geocode(52.520002, 13.405002)
    assert mock_get.call_count == 1


@patch("services.geocoding._session.get")
def test_reverse_geocode_network_error_returns_none_and_is_not_cached(mock_get):
    geocoding.clear_cache()
    mock_get.side_effect = requests.ConnectionError("boom")
    assert reverse_geocode(1.0, 1.0) is None

    mock_get.side_effect = None
    mock_get.return_value = _response({"address": {"city": "Recovered"}})
    assert reverse_geocode(1.0, 1.0) == {"address": {"city": "Recovered"}}


@patch("services.geocoding._session.get")
def test_reverse_geocode_upstream_error_payload_returns_none(mock_get):
    geocoding.clear_cache()
    mock_get.return_value = _response({"error": "Unable to geocode"})
    assert reverse_geocode(0.0, -150.0) is None


@patch("services.geocoding._session.get")
def test_search_locations_with_bbox(mock_get):
    hits = [{"place_id": 1, "display_name": "A", "lat": "1", "lon": "2"}]
    mock_get.return_value = _response(hits)

    bbox = BoundingBox(north=2.0, south=1.0, east=4.0, west=3.0)
    assert search_locations("museum", bbox) == hits
    params = mock_get.call_args[1]["params"]
    assert params["q"] == "museum"
    assert params["viewbox"] == "3.0,1.0,4.0,2.0"
    assert params["bounded"] == "1"
    assert params["extratags"] == "1"


@patch("services.geocoding._session.get")
def test_search_locations_without_bbox_is_unbounded(mock_get):
    mock_get.return_value = _response([])
    assert search_locations("cafe") == []
    params = mock_get.call_args[1]["params"]
    assert "viewbox" not in params
    assert "bounded" not in params


@patch("services.geocoding._session.get")
def test_search_locations_failures_return_empty(mock_get):
    mock_get.side_effect = requests.Timeout("slow")
    assert search_locations("cafe") == []

    mock_get.side_effect = None
    bad = MagicMock()
    bad.raise_for_status.return_value = None
    bad.json.side_effect = ValueError("not json")
    mock_get.return_value = bad
    assert search_locations("cafe") == []

    mock_get.return_value = _response({"unexpected": True})
    assert search_locations("cafe") == []


@patch("services.geocoding._session.get")
def test_disabled_lookups_make_no_request(mock_get, monkeypatch):
    from settings import settings

    geocoding.clear_cache()
    monkeypatch.setattr(settings, "UPSTREAM_LOOKUPS_ENABLED", False)
    assert reverse_geocode(52.52, 13.405) is None
    assert search_locations("museum") == []
    mock_get.assert_not_called()
