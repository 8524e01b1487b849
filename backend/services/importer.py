"""
Takeout import: reconcile parsed places with the notes in the output folder.

Pipeline stages:
1. Ensure the output folder exists (failure aborts the run)
2. Index existing notes once (gmap_id, tags, file names)
3. Merge places sharing an ID
4. For each place, in order: update the matching note or create a new one

Places are processed strictly one at a time. New file names are allocated
against the pre-run index plus the names created so far in this run.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from domain.errors import SetupError, WriteError
from domain.models import DocumentMetadata, ImportSummary, Place, RecordOutcome
from services.file_names import generate_file_name
from services.merge import merge_places_by_id
from services.note_codec import build_updated_content, format_timestamp, generate_note_content
from services.note_index import MetadataSnapshot, find_note_by_gmap_id, load_note_metadata
from services.tags import merge_tags
from services.takeout_loader import load_takeout_sources
from storage.file_storage import DocumentStore, join_path

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FOLDER = "Google Maps/Places"


async def ensure_output_folder(store: DocumentStore, folder: str) -> None:
    try:
        if not await store.exists(folder):
            await store.create_folder(folder)
    except Exception as e:
        raise SetupError(str(e)) from e


async def _record_snapshot(
    store: DocumentStore,
    snapshot: Optional[MetadataSnapshot],
    path: str,
    gmap_id: str,
    tags: List[str],
    log: logging.Logger,
) -> None:
    if snapshot is None:
        return
    try:
        ref = await store.stat(path)
        snapshot.record(ref, gmap_id, tags)
    except Exception:
        log.exception("Failed to record snapshot for %s", path)


async def update_note(
    store: DocumentStore,
    path: str,
    place: Place,
    existing_tags: Optional[Sequence[str]],
    *,
    imported_at: str,
    include_coordinates: bool = True,
) -> List[str]:
    """Rewrite the front matter of an existing note. Returns the tags written."""
    try:
        content = await store.read(path)
        new_content = build_updated_content(
            content,
            place,
            existing_tags,
            imported_at=imported_at,
            include_coordinates=include_coordinates,
        )
        await store.modify(path, new_content)
    except (OSError, UnicodeDecodeError) as e:
        raise WriteError(f"Failed to update {path}: {e}", path=path) from e
    return merge_tags(existing_tags, place.tags)


async def create_note(
    store: DocumentStore,
    path: str,
    place: Place,
    *,
    imported_at: str,
    include_coordinates: bool = True,
) -> List[str]:
    """Create a new note for a place. Returns the tags written."""
    content = generate_note_content(
        place, imported_at=imported_at, include_coordinates=include_coordinates
    )
    try:
        await store.create(path, content)
    except OSError as e:
        raise WriteError(f"Failed to create {path}: {e}", path=path) from e
    return merge_tags(None, place.tags)


async def sync_place(
    store: DocumentStore,
    place: Place,
    existing: Sequence[DocumentMetadata],
    created_names: Tuple[str, ...],
    *,
    output_folder: str,
    imported_at: str,
    include_coordinates: bool = True,
    snapshot: Optional[MetadataSnapshot] = None,
    log: logging.Logger = logger,
) -> Tuple[RecordOutcome, Tuple[str, ...]]:
    """
    Update or create the note for one place.

    Returns the outcome and the created-names accumulator for the next place.
    """
    match_path = find_note_by_gmap_id(existing, place.id, output_folder)
    try:
        if match_path is not None:
            note = next(n for n in existing if n.path == match_path)
            tags = await update_note(
                store,
                match_path,
                place,
                note.tags,
                imported_at=imported_at,
                include_coordinates=include_coordinates,
            )
            await _record_snapshot(store, snapshot, match_path, place.id, tags, log)
            return RecordOutcome.UPDATED, created_names

        taken = [n.name for n in existing] + list(created_names)
        file_name = generate_file_name(place, taken)
        path = join_path(output_folder, file_name)
        tags = await create_note(
            store,
            path,
            place,
            imported_at=imported_at,
            include_coordinates=include_coordinates,
        )
        await _record_snapshot(store, snapshot, path, place.id, tags, log)
        return RecordOutcome.CREATED, created_names + (file_name,)
    except WriteError as e:
        log.error("%s", e)
        return RecordOutcome.ERROR, created_names


async def sync_places(
    places: Iterable[Place],
    store: DocumentStore,
    *,
    output_folder: str = DEFAULT_OUTPUT_FOLDER,
    snapshot: Optional[MetadataSnapshot] = None,
    log: Optional[logging.Logger] = None,
    imported_at: Optional[str] = None,
    include_coordinates: bool = True,
    summary: Optional[ImportSummary] = None,
) -> ImportSummary:
    """
    Reconcile places with the notes under `output_folder`.

    Raises:
        SetupError: the output folder could not be ensured.
    """
    log = log or logger
    summary = summary or ImportSummary()
    output_folder = output_folder.strip("/") or DEFAULT_OUTPUT_FOLDER
    imported_at = imported_at or format_timestamp()

    await ensure_output_folder(store, output_folder)
    existing = await load_note_metadata(store, output_folder, snapshot, log)

    created_names: Tuple[str, ...] = ()
    for place in merge_places_by_id(places, log):
        outcome, created_names = await sync_place(
            store,
            place,
            existing,
            created_names,
            output_folder=output_folder,
            imported_at=imported_at,
            include_coordinates=include_coordinates,
            snapshot=snapshot,
            log=log,
        )
        summary.record(outcome)

    log.info("Import complete: %s", summary.message())
    return summary


async def import_takeout(
    sources: Iterable[Union[str, Path, Tuple[str, str]]],
    store: DocumentStore,
    *,
    output_folder: str = DEFAULT_OUTPUT_FOLDER,
    snapshot: Optional[MetadataSnapshot] = None,
    log: Optional[logging.Logger] = None,
    imported_at: Optional[str] = None,
    include_coordinates: bool = True,
) -> ImportSummary:
    """
    Parse takeout files and sync the places they contain.

    Files that fail to parse are counted as skipped. When no file yields any
    place the store is left untouched.
    """
    log = log or logger
    loaded = load_takeout_sources(sources, log)
    summary = ImportSummary(
        skipped=len(loaded.skipped_files),
        parsed=len(loaded.places),
        files=list(loaded.parsed_files),
    )
    if not loaded.places:
        log.info("No places found in %d file(s)", len(loaded.parsed_files))
        return summary

    return await sync_places(
        loaded.places,
        store,
        output_folder=output_folder,
        snapshot=snapshot,
        log=log,
        imported_at=imported_at,
        include_coordinates=include_coordinates,
        summary=summary,
    )
