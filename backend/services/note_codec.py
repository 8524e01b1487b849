"""
Markdown note codec.

A note starts with a machine-owned YAML front matter block bounded by `---`
lines and is followed by a user-owned body. Creating a note writes the front
matter only; updating rewrites the front matter and keeps the body.

Front matter keys are always written in the same order so that re-importing
unchanged data reproduces the same bytes (given the same timestamp).
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from domain.models import Place
from services.tags import merge_tags, order_tags

FRONTMATTER_DELIMITER = "---"
SOURCE_MARKER = "google-maps-takeout"

_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}
_EXPONENT_PAD_RE = re.compile(r"e([+-])0+(?=\d)")


def escape_yaml_string(value: str) -> str:
    """
    Escape a value for a double-quoted YAML scalar.

    Backslash goes first so later escapes are not doubled.
    """
    return (
        value.replace("\\", "\\\\")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace('"', '\\"')
    )


def unescape_yaml_string(value: str) -> str:
    """Inverse of escape_yaml_string; unknown escapes are left as written."""
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), value)


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T09:30:00.000Z."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def format_number(value: float) -> str:
    """
    Render a coordinate the way JS prints numbers.

    35.0 -> "35", 35.5 -> "35.5", 1e-05 -> "0.00001", 1e-07 -> "1e-7".
    Positional notation covers 1e-6 <= |value| < 1e21.
    """
    value = float(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    if 1e-6 <= abs(value) < 1e21:
        return format(Decimal(text), "f")
    return _EXPONENT_PAD_RE.sub(r"e\1", text)


def _quoted(value: str) -> str:
    return f'"{escape_yaml_string(value)}"'


def build_frontmatter(
    place: Place,
    *,
    tags: Optional[Iterable[str]] = None,
    imported_at: Optional[str] = None,
    include_coordinates: bool = True,
) -> str:
    """
    Build the front matter block for a place, without a trailing newline.

    Args:
        place: The place to serialize.
        tags: Tag set to write; defaults to the place's own tags.
        imported_at: Pre-formatted timestamp; defaults to now.
        include_coordinates: Write `coordinates` when the place has them.
    """
    if imported_at is None:
        imported_at = format_timestamp()
    ordered_tags = order_tags(place.tags or []) if tags is None else order_tags(tags)

    lines: List[str] = [FRONTMATTER_DELIMITER]
    lines.append(f"source: {SOURCE_MARKER}")
    lines.append(f"gmap_id: {_quoted(place.id)}")

    if place.list:
        lines.append(f"list: {_quoted(place.list)}")
    if place.url:
        lines.append(f"gmap_url: {_quoted(place.url)}")
    if include_coordinates and place.has_coordinates:
        lines.append(f"coordinates: [{format_number(place.lat)}, {format_number(place.lng)}]")
    if place.address:
        lines.append(f"address: {_quoted(place.address)}")
    if ordered_tags:
        lines.append("tags: [" + ", ".join(_quoted(t) for t in ordered_tags) + "]")
    if place.memo:
        lines.append(f"memo: {_quoted(place.memo)}")
    if place.comment:
        lines.append(f"comment: {_quoted(place.comment)}")

    lines.append(f"last_imported_at: {_quoted(imported_at)}")
    lines.append(FRONTMATTER_DELIMITER)
    return "\n".join(lines)


def generate_note_content(
    place: Place,
    *,
    imported_at: Optional[str] = None,
    include_coordinates: bool = True,
) -> str:
    """Content for a newly created note: front matter only."""
    frontmatter = build_frontmatter(
        place, imported_at=imported_at, include_coordinates=include_coordinates
    )
    return f"{frontmatter}\n"


def extract_body(content: str) -> str:
    """
    Return the user-owned part of a note.

    Content without front matter, or with an unterminated block, is returned
    unchanged.
    """
    if not content.startswith(FRONTMATTER_DELIMITER):
        return content

    end = content.find("\n---\n", 3)
    if end == -1:
        if content.endswith("\n---") and content.find("\n---", 3) == len(content) - 4:
            return ""
        return content

    return content[end + 5:].lstrip()


def build_updated_content(
    existing_content: str,
    place: Place,
    existing_tags: Optional[Iterable[str]] = None,
    *,
    imported_at: Optional[str] = None,
    include_coordinates: bool = True,
) -> str:
    """
    Rewrite a note's front matter for `place`, keeping its body.

    Tags already on the note are merged with the place's tags.
    """
    body = extract_body(existing_content)
    frontmatter = build_frontmatter(
        place,
        tags=merge_tags(existing_tags, place.tags),
        imported_at=imported_at,
        include_coordinates=include_coordinates,
    )
    if body:
        return f"{frontmatter}\n\n{body}"
    return f"{frontmatter}\n"
