"""
Index of notes already present in the output folder.

Each note's gmap_id and tags are taken from the metadata snapshot when it
has them, otherwise parsed from the raw front matter. Notes without an ID
are still indexed so their file names are not reused.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from domain.models import DocumentMetadata, DocumentRef
from services.note_codec import unescape_yaml_string
from storage.file_storage import DocumentStore

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(r"^---\n(.*?)\n---", re.DOTALL)
_DOUBLE_QUOTED = r'"((?:[^"\\]|\\.)+)"'
_SINGLE_QUOTED = r"'((?:[^']|'')+)'"
_GMAP_ID_RE = re.compile(
    rf"^gmap_id:[ \t]*(?:{_DOUBLE_QUOTED}|{_SINGLE_QUOTED}|(\S+))[ \t]*$", re.MULTILINE
)
_TAGS_LIST_RE = re.compile(r"^tags:[ \t]*\[(.*)\][ \t]*$", re.MULTILINE)
_TAGS_ITEM_RE = re.compile(rf"{_DOUBLE_QUOTED}|{_SINGLE_QUOTED}")
_TAGS_BLOCK_RE = re.compile(r"^tags:[ \t]*\n((?:[ \t]*-[ \t]+\S.*(?:\n|$))+)", re.MULTILINE)
_BLOCK_ITEM_RE = re.compile(r"^[ \t]*-[ \t]+(.*?)[ \t]*$", re.MULTILINE)
_TAGS_SCALAR_RE = re.compile(r"^tags:[ \t]*(\S+)[ \t]*$", re.MULTILINE)


class MetadataSnapshot(Protocol):
    """Pre-parsed front matter per note; a shortcut, never required."""

    def lookup(self, ref: DocumentRef) -> Optional[Dict[str, Any]]:
        ...

    def record(self, ref: DocumentRef, gmap_id: Optional[str], tags: Optional[Iterable[str]]) -> None:
        ...


def gmap_id_from_snapshot(raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    stripped = re.sub(r"""^["']|["']$""", "", raw)
    return stripped or None


def tags_from_snapshot(raw: Any) -> Optional[List[str]]:
    if isinstance(raw, (list, tuple)):
        return [t for t in raw if isinstance(t, str)]
    if isinstance(raw, str) and raw:
        return [raw]
    return None


def _frontmatter(content: str) -> Optional[str]:
    match = _FRONTMATTER_RE.match(content)
    return match.group(1) if match and match.group(1) else None


def _quoted_value(double: Optional[str], single: Optional[str]) -> Optional[str]:
    if double is not None:
        return unescape_yaml_string(double)
    if single is not None:
        return single.replace("''", "'")
    return None


def _block_item(raw: str) -> Optional[str]:
    match = _TAGS_ITEM_RE.fullmatch(raw)
    if match:
        return _quoted_value(match.group(1), match.group(2))
    return raw or None


def extract_gmap_id_from_content(content: str) -> Optional[str]:
    frontmatter = _frontmatter(content)
    if frontmatter is None:
        return None
    match = _GMAP_ID_RE.search(frontmatter)
    if not match:
        return None
    return _quoted_value(match.group(1), match.group(2)) or match.group(3)


def extract_tags_from_content(content: str) -> Optional[List[str]]:
    """
    Read tags from the front matter.

    Accepts a flow list (`tags: ["a", 'b']`), a block list (`tags:` followed
    by `- a` lines) or a single bare token (`tags: a`). Quoted items are
    unescaped.
    """
    frontmatter = _frontmatter(content)
    if frontmatter is None:
        return None

    list_match = _TAGS_LIST_RE.search(frontmatter)
    if list_match:
        return [
            _quoted_value(m.group(1), m.group(2))
            for m in _TAGS_ITEM_RE.finditer(list_match.group(1))
        ]

    block_match = _TAGS_BLOCK_RE.search(frontmatter)
    if block_match:
        items = (_block_item(m.group(1)) for m in _BLOCK_ITEM_RE.finditer(block_match.group(1)))
        return [item for item in items if item]

    scalar_match = _TAGS_SCALAR_RE.search(frontmatter)
    if scalar_match and not scalar_match.group(1).startswith("["):
        return [scalar_match.group(1)]

    return None


async def read_note_metadata(
    store: DocumentStore,
    ref: DocumentRef,
    snapshot: Optional[MetadataSnapshot] = None,
    log: Optional[logging.Logger] = None,
) -> DocumentMetadata:
    log = log or logger
    gmap_id: Optional[str] = None
    tags: Optional[List[str]] = None

    if snapshot is not None:
        try:
            fields = snapshot.lookup(ref)
        except Exception:
            log.exception("Snapshot lookup failed for %s", ref.path)
            fields = None
        if fields:
            gmap_id = gmap_id_from_snapshot(fields.get("gmap_id"))
            tags = tags_from_snapshot(fields.get("tags"))

    if gmap_id is None or tags is None:
        try:
            content = await store.read(ref.path)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Could not read %s while indexing: %s", ref.path, e)
        else:
            if gmap_id is None:
                gmap_id = extract_gmap_id_from_content(content)
            if tags is None:
                tags = extract_tags_from_content(content)

    return DocumentMetadata(
        path=ref.path,
        gmap_id=gmap_id,
        tags=tuple(tags) if tags is not None else None,
    )


async def load_note_metadata(
    store: DocumentStore,
    folder: str,
    snapshot: Optional[MetadataSnapshot] = None,
    log: Optional[logging.Logger] = None,
) -> List[DocumentMetadata]:
    """Scan `folder` once and index every note in it."""
    refs = await store.list_documents(folder)
    notes = []
    for ref in refs:
        notes.append(await read_note_metadata(store, ref, snapshot, log))
    return notes


def find_note_by_gmap_id(
    notes: Sequence[DocumentMetadata],
    gmap_id: str,
    folder: str,
) -> Optional[str]:
    """Path of the first note in `folder` with this gmap_id, or None."""
    prefix = folder.strip("/") + "/" if folder.strip("/") else ""
    for note in notes:
        if note.path.startswith(prefix) and note.gmap_id is not None and note.gmap_id == gmap_id:
            return note.path
    return None
