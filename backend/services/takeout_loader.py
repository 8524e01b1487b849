"""
Loading places from takeout export files.

A takeout "Maps (your places)" export holds one GeoJSON file of saved places
and one CSV per saved list. CSV rows are tagged with the list they came from.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from domain.errors import ParseError
from domain.models import Place
from services.csv_parser import parse_csv
from services.geojson_parser import parse_geojson
from services.tags import list_tag, sanitize_tag

logger = logging.getLogger(__name__)

CSV_SUFFIXES = {".csv"}
GEOJSON_SUFFIXES = {".json", ".geojson"}

# Known exports in the same folder that are not saved places.
NON_PLACE_FILES = {
    "reviews.json",
    "クチコミ.json",
    "labeled places.json",
    "ラベル付きの場所.json",
}


@dataclass
class LoadedSources:
    places: List[Place] = field(default_factory=list)
    parsed_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)


def apply_list_provenance(places: Iterable[Place], list_name: str) -> List[Place]:
    """
    Tag CSV places with the list they were saved in.

    The tags cell is kept as a sanitized freeform tag after the list tag.
    """
    namespace_tag = list_tag(list_name)
    result = []
    for place in places:
        tags = [namespace_tag] if namespace_tag else []
        for raw in place.tags or []:
            tag = sanitize_tag(raw)
            if tag and tag not in tags:
                tags.append(tag)
        result.append(replace(place, list=list_name, tags=tags or None))
    return result


def load_places_from_text(file_name: str, text: str) -> List[Place]:
    """
    Parse one export file by extension.

    Raises:
        ParseError: malformed content or unsupported file type.
    """
    path = Path(file_name)
    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        return apply_list_provenance(parse_csv(text), path.stem)
    if suffix in GEOJSON_SUFFIXES:
        return parse_geojson(text)
    raise ParseError(f"Unsupported file type: {path.name}")


def is_place_export(path: Path) -> bool:
    suffix = path.suffix.lower()
    if suffix not in CSV_SUFFIXES and suffix not in GEOJSON_SUFFIXES:
        return False
    return path.name.lower() not in NON_PLACE_FILES


def discover_takeout_files(directory: Union[str, Path]) -> List[Path]:
    """All place export files under `directory`, sorted by path."""
    root = Path(directory)
    return sorted(p for p in root.rglob("*") if p.is_file() and is_place_export(p))


def expand_sources(sources: Iterable[Union[str, Path]]) -> List[Path]:
    """Expand directories into their place export files; files pass through."""
    files: List[Path] = []
    for source in sources:
        path = Path(source)
        if path.is_dir():
            files.extend(discover_takeout_files(path))
        else:
            files.append(path)
    return files


def load_takeout_sources(
    sources: Iterable[Union[str, Path, Tuple[str, str]]],
    log: Optional[logging.Logger] = None,
) -> LoadedSources:
    """
    Parse every source, in order. A source is a path or a (file_name, text) pair.

    A file that fails to parse is logged and counted as skipped; the others
    are still loaded.
    """
    log = log or logger
    loaded = LoadedSources()

    for source in sources:
        if isinstance(source, tuple):
            file_name, text = source
        else:
            file_name = str(source)
            try:
                text = Path(source).read_text(encoding="utf-8-sig")
            except (OSError, UnicodeDecodeError) as e:
                log.warning("Skipping %s: %s", file_name, e)
                loaded.skipped_files.append(file_name)
                continue

        try:
            places = load_places_from_text(file_name, text)
        except ParseError as e:
            log.warning("Skipping %s: %s", file_name, e)
            loaded.skipped_files.append(file_name)
            continue

        log.debug("Parsed %d places from %s", len(places), file_name)
        loaded.places.extend(places)
        loaded.parsed_files.append(file_name)

    return loaded
