"""
Parser for the takeout "Saved Places" GeoJSON export.

Input: a FeatureCollection whose Point features carry
properties.location.{name,address} and properties.google_maps_url.
Output: Place records in feature order.
"""
from __future__ import annotations

import json
import math
from typing import Any, List, Optional

from domain.errors import ParseError
from domain.models import Place
from services.identity import extract_id_from_url, generate_hash_id
from services.url_coords import extract_coords_from_url


def parse_geojson(text: str) -> List[Place]:
    """
    Parse a GeoJSON document into Place records.

    Raises:
        ParseError: when the text is not JSON, or not a FeatureCollection
            with a features array.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse GeoJSON: {e}") from e

    if (
        not isinstance(data, dict)
        or data.get("type") != "FeatureCollection"
        or not isinstance(data.get("features"), list)
    ):
        raise ParseError("Invalid GeoJSON: expected FeatureCollection with features array")

    places: List[Place] = []
    for feature in data["features"]:
        place = _parse_feature(feature)
        if place is not None:
            places.append(place)
    return places


def _coordinate(coords: Any, index: int) -> float:
    if isinstance(coords, (list, tuple)) and len(coords) > index:
        value = coords[index]
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                number = float(value)
            except OverflowError:
                return 0.0
            return number if math.isfinite(number) else 0.0
    return 0.0


def _text(value: Any) -> Optional[str]:
    """Non-empty string or None; other JSON types count as absent."""
    return value if isinstance(value, str) and value else None


def _parse_feature(feature: Any) -> Optional[Place]:
    if not isinstance(feature, dict):
        return None
    properties = feature.get("properties") or {}
    location = properties.get("location") if isinstance(properties, dict) else None
    if not isinstance(location, dict):
        return None

    name = location.get("name")
    if not name or not isinstance(name, str):
        # Reviews and other non-place exports have no location name.
        return None

    address = _text(location.get("address"))
    url = _text(properties.get("google_maps_url"))

    # GeoJSON order is [lng, lat]
    geometry = feature.get("geometry") or {}
    coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
    lng = _coordinate(coords, 0)
    lat = _coordinate(coords, 1)

    if lat == 0 and lng == 0 and url:
        extracted = extract_coords_from_url(url)
        if extracted:
            lat, lng = extracted

    # A record never carries exactly one coordinate.
    if lat == 0 or lng == 0:
        lat, lng = 0.0, 0.0

    place_id = extract_id_from_url(url) or generate_hash_id(name, address)

    return Place(
        id=place_id,
        name=name,
        url=url,
        lat=lat,
        lng=lng,
        address=address,
    )
