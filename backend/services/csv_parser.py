"""
Parser for the takeout "Saved" list CSV export.

Fixed five-column layout: title, memo, url, tags, comment. The header row is
always skipped. The format carries no geometry, so every place gets the
(0, 0) sentinel.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from domain.models import Place
from services.identity import extract_id_from_url, generate_hash_id

CSV_COLUMNS = ("title", "memo", "url", "tags", "comment")


@dataclass
class CsvRow:
    title: str
    memo: str
    url: str
    tags: str
    comment: str


def parse_csv(text: str) -> List[Place]:
    rows = split_csv_rows(text)
    if len(rows) <= 1:
        return []

    places: List[Place] = []
    for raw in rows[1:]:
        row = parse_csv_line(raw)
        if row is None or row.title.strip() == "":
            continue
        places.append(row_to_place(row))
    return places


def split_csv_rows(text: str) -> List[str]:
    """
    Split CSV text into raw row strings.

    LF, CRLF and bare CR end a row outside quotes; inside quotes they are
    kept as part of the field. Quotes are left in place for parse_fields.
    """
    rows: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    n = len(text)

    while i < n:
        char = text[i]
        if char == '"':
            if in_quotes and i + 1 < n and text[i + 1] == '"':
                current.append('""')
                i += 2
                continue
            in_quotes = not in_quotes
            current.append(char)
        elif char == "\n" and not in_quotes:
            rows.append("".join(current))
            current = []
        elif char == "\r" and not in_quotes:
            if i + 1 < n and text[i + 1] == "\n":
                i += 1
            rows.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    if current:
        rows.append("".join(current))
    return rows


def parse_fields(line: str) -> List[str]:
    """Split one row into fields; `""` inside a quoted field is a literal quote."""
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        char = line[i]
        if in_quotes:
            if char == '"':
                if i + 1 < n and line[i + 1] == '"':
                    current.append('"')
                    i += 2
                    continue
                in_quotes = False
                i += 1
                continue
            current.append(char)
        elif char == '"':
            in_quotes = True
        elif char == ",":
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return fields


def parse_csv_line(line: str) -> Optional[CsvRow]:
    trimmed = line.strip()
    if not trimmed:
        return None

    fields = parse_fields(trimmed)
    if len(fields) < len(CSV_COLUMNS):
        return None

    return CsvRow(*fields[: len(CSV_COLUMNS)])


def row_to_place(row: CsvRow) -> Place:
    place_id = extract_id_from_url(row.url) or generate_hash_id(row.title, "")
    return Place(
        id=place_id,
        name=row.title,
        url=row.url or None,
        lat=0.0,
        lng=0.0,
        memo=row.memo or None,
        tags=[row.tags] if row.tags else None,
        comment=row.comment or None,
    )
