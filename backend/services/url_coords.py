"""
Coordinate fallback for features exported without geometry.
"""
from __future__ import annotations

import math
import re
from typing import Optional, Tuple

_QUERY_RE = re.compile(r"[?&]q=([-\d.]+),([-\d.]+)")
_AT_RE = re.compile(r"@([-\d.]+),([-\d.]+)")


def _parse_pair(lat_text: str, lng_text: str) -> Optional[Tuple[float, float]]:
    # The capture class also admits strings like "." or "-" or "1.2.3".
    try:
        lat = float(lat_text)
        lng = float(lng_text)
    except ValueError:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return lat, lng


def extract_coords_from_url(url: str) -> Optional[Tuple[float, float]]:
    """
    Extract (lat, lng) from a Maps URL.

    Tries `?q=lat,lng` first, then the `@lat,lng,zoom` path segment. A pattern
    whose captures are not valid numbers yields None.
    """
    match = _QUERY_RE.search(url)
    if match:
        return _parse_pair(match.group(1), match.group(2))

    match = _AT_RE.search(url)
    if match:
        return _parse_pair(match.group(1), match.group(2))

    return None
