"""
Tests for merging places that share an ID.
"""
import logging

from domain.models import Place
from services.merge import merge_places_by_id


def test_csv_and_geojson_records_combine():
    from_csv = Place(id="cid-1", name="Cafe", memo="good coffee", tags=["gmap/Cafes"], list="Cafes")
    from_geojson = Place(id="cid-1", name="Cafe Tokyo", lat=35.6, lng=139.7, address="Tokyo",
                         url="https://maps.google.com/?cid=1")

    merged = merge_places_by_id([from_csv, from_geojson])

    assert len(merged) == 1
    place = merged[0]
    assert place.name == "Cafe"
    assert place.list == "Cafes"
    assert (place.lat, place.lng) == (35.6, 139.7)
    assert place.address == "Tokyo"
    assert place.url == "https://maps.google.com/?cid=1"
    assert place.memo == "good coffee"
    assert place.tags == ["gmap/Cafes"]


def test_tags_union_first_seen_order():
    a = Place(id="x", name="A", tags=["gmap/Lunch", "ramen"])
    b = Place(id="x", name="A", tags=["gmap/Dinner", "ramen"])

    merged = merge_places_by_id([a, b])

    assert merged[0].tags == ["gmap/Lunch", "ramen", "gmap/Dinner"]


def test_tags_stay_none_when_no_record_has_tags():
    merged = merge_places_by_id([Place(id="x", name="A"), Place(id="x", name="A")])
    assert merged[0].tags is None


def test_first_coordinates_kept():
    a = Place(id="x", name="A", lat=1.0, lng=2.0)
    b = Place(id="x", name="A", lat=3.0, lng=4.0)
    merged = merge_places_by_id([a, b])
    assert (merged[0].lat, merged[0].lng) == (1.0, 2.0)


def test_conflicting_value_keeps_first_and_logs(caplog):
    a = Place(id="x", name="A", url="https://a")
    b = Place(id="x", name="A", url="https://b")

    with caplog.at_level(logging.DEBUG, logger="services.merge"):
        merged = merge_places_by_id([a, b])

    assert merged[0].url == "https://a"
    assert "keeping first url" in caplog.text


def test_order_of_first_appearance():
    places = [
        Place(id="a", name="A"),
        Place(id="b", name="B"),
        Place(id="a", name="A again"),
        Place(id="c", name="C"),
    ]
    assert [p.id for p in merge_places_by_id(places)] == ["a", "b", "c"]


def test_inputs_not_mutated():
    a = Place(id="x", name="A", tags=["one"])
    b = Place(id="x", name="A", lat=5.0, lng=6.0, memo="memo", tags=["two"])

    merged = merge_places_by_id([a, b])

    assert merged[0] is not a
    assert a.tags == ["one"]
    assert (a.lat, a.lng) == (0.0, 0.0)
    assert a.memo is None
    assert b.tags == ["two"]


def test_geometry_first_sentinel_second_keeps_coordinates():
    from_geojson = Place(id="cid-1", name="Cafe", lat=35.6, lng=139.7)
    from_csv = Place(id="cid-1", name="Cafe", memo="later", tags=["gmap/Cafes"])

    merged = merge_places_by_id([from_geojson, from_csv])

    assert (merged[0].lat, merged[0].lng) == (35.6, 139.7)
    assert merged[0].memo == "later"
    assert merged[0].tags == ["gmap/Cafes"]
