"""
Cross-source merge of places sharing an ID.

The same saved place usually shows up once per list CSV it belongs to and
once more in the GeoJSON export. Merging keeps one record per ID:

- tags: union, first-seen order
- coordinates: a geometry-bearing record fills a sentinel (0, 0) pair
- url/address/memo/comment: filled only while still empty
- id/name/list: first record wins
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from domain.models import Place
from services.tags import unique_tags

logger = logging.getLogger(__name__)

FILL_FIELDS = ("url", "address", "memo", "comment")


def _copy(place: Place) -> Place:
    return replace(place, tags=list(place.tags) if place.tags is not None else None)


def merge_places_by_id(
    places: Iterable[Place],
    log: Optional[logging.Logger] = None,
) -> List[Place]:
    """
    Collapse places into one record per ID, in order of first appearance.

    Input records are never mutated; the result holds new Place objects.
    """
    log = log or logger
    merged: Dict[str, Place] = {}

    for place in places:
        existing = merged.get(place.id)
        if existing is None:
            merged[place.id] = _copy(place)
            continue

        if existing.tags is not None or place.tags is not None:
            existing.tags = unique_tags((existing.tags or []) + (place.tags or []))

        if not existing.has_coordinates and place.has_coordinates:
            existing.lat = place.lat
            existing.lng = place.lng

        for field_name in FILL_FIELDS:
            current = getattr(existing, field_name)
            incoming = getattr(place, field_name)
            if not current and incoming:
                setattr(existing, field_name, incoming)
            elif current and incoming and current != incoming:
                log.debug(
                    "merge: keeping first %s for %s (%r, ignored %r)",
                    field_name, place.id, current, incoming,
                )

    return list(merged.values())
