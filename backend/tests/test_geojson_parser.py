"""
Tests for the Saved Places GeoJSON parser.

Run with: pytest tests/test_geojson_parser.py -v
"""
import json

import pytest

from domain.errors import ParseError
from services.geojson_parser import parse_geojson
from services.identity import generate_hash_id


def _feature(name=None, coords=(139.7454, 35.6586), address=None, url=None):
    location = {}
    if name is not None:
        location["name"] = name
    if address is not None:
        location["address"] = address
    properties = {"location": location, "date": "2024-01-01T00:00:00Z"}
    if url is not None:
        properties["google_maps_url"] = url
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": list(coords)},
        "properties": properties,
    }


def _collection(*features):
    return json.dumps({"type": "FeatureCollection", "features": list(features)})


class TestParseGeojson:
    def test_parses_feature(self):
        text = _collection(
            _feature(
                name="東京タワー",
                address="港区芝公園4-2-8",
                url="https://maps.google.com/?cid=12345678",
            )
        )
        places = parse_geojson(text)

        assert len(places) == 1
        place = places[0]
        assert place.id == "cid-12345678"
        assert place.name == "東京タワー"
        assert place.address == "港区芝公園4-2-8"
        assert place.url == "https://maps.google.com/?cid=12345678"

    def test_coordinates_are_swapped_to_lat_lng(self):
        places = parse_geojson(_collection(_feature(name="A", coords=(139.7454, 35.6586))))
        assert (places[0].lat, places[0].lng) == (35.6586, 139.7454)

    def test_feature_without_name_is_dropped(self):
        text = _collection(_feature(name="A"), _feature(name=None), _feature(name="B"))
        assert [p.name for p in parse_geojson(text)] == ["A", "B"]

    def test_feature_without_location_is_dropped(self):
        review = {"type": "Feature", "geometry": None, "properties": {"review_text": "Great"}}
        assert parse_geojson(_collection(review)) == []

    def test_zero_coordinates_fall_back_to_url_query(self):
        text = _collection(_feature(name="A", coords=(0, 0), url="https://maps.google.com/?q=35.1,139.2"))
        place = parse_geojson(text)[0]
        assert (place.lat, place.lng) == (35.1, 139.2)

    def test_zero_coordinates_fall_back_to_url_path(self):
        url = "https://www.google.com/maps/place/X/@35.5,139.5,15z"
        place = parse_geojson(_collection(_feature(name="A", coords=(0, 0), url=url)))[0]
        assert (place.lat, place.lng) == (35.5, 139.5)

    def test_invalid_url_coordinates_stay_sentinel(self):
        url = "https://maps.google.com/?q=.,-"
        place = parse_geojson(_collection(_feature(name="A", coords=(0, 0), url=url)))[0]
        assert (place.lat, place.lng) == (0, 0)
        assert not place.has_coordinates

    def test_zero_coordinates_without_url(self):
        place = parse_geojson(_collection(_feature(name="A", coords=(0, 0))))[0]
        assert (place.lat, place.lng) == (0, 0)
        assert place.url is None

    def test_missing_geometry_is_sentinel(self):
        feature = _feature(name="A")
        feature["geometry"] = None
        place = parse_geojson(_collection(feature))[0]
        assert (place.lat, place.lng) == (0, 0)

    def test_hash_id_without_url(self):
        place = parse_geojson(_collection(_feature(name="A", address="Street 1")))[0]
        assert place.id == generate_hash_id("A", "Street 1")

    def test_pid_from_url(self):
        url = "https://www.google.com/maps/place/!1s0x6001085d20274adf:0x1f05268314935b6d"
        place = parse_geojson(_collection(_feature(name="A", url=url)))[0]
        assert place.id == "pid-0x6001085d20274adf:0x1f05268314935b6d"

    def test_optional_fields_absent(self):
        place = parse_geojson(_collection(_feature(name="A")))[0]
        assert place.url is None
        assert place.address is None
        assert place.tags is None

    def test_empty_feature_list(self):
        assert parse_geojson(_collection()) == []


class TestParseGeojsonErrors:
    def test_malformed_json(self):
        with pytest.raises(ParseError, match="^Failed to parse GeoJSON: "):
            parse_geojson("{not json")

    def test_wrong_type(self):
        with pytest.raises(ParseError, match="^Invalid GeoJSON: expected FeatureCollection"):
            parse_geojson(json.dumps({"type": "Feature", "features": []}))

    def test_features_not_a_list(self):
        with pytest.raises(ParseError, match="^Invalid GeoJSON"):
            parse_geojson(json.dumps({"type": "FeatureCollection", "features": {}}))

    def test_top_level_array(self):
        with pytest.raises(ParseError, match="^Invalid GeoJSON"):
            parse_geojson("[]")


def test_non_string_url_and_address_are_absent():
    feature = _feature(name="A", coords=(139.7, 35.6))
    feature["properties"]["google_maps_url"] = 12345
    feature["properties"]["location"]["address"] = ["Tokyo"]

    place = parse_geojson(_collection(feature))[0]

    assert place.url is None
    assert place.address is None
    assert place.id == generate_hash_id("A", None)


def test_out_of_range_coordinate_is_sentinel():
    text = _collection(_feature(name="A", coords=(10 ** 400, 35.6)))
    place = parse_geojson(text)[0]
    assert (place.lat, place.lng) == (0, 0)
