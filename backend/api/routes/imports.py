"""
Import API routes.

Accepts takeout export files and syncs their places into the vault.
"""
from functools import lru_cache
from typing import List

from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel

from db import create_session_factory
from domain.errors import SetupError
from repositories import NoteSnapshotRepository
from services.importer import import_takeout
from settings import settings
from storage.file_storage import FileStorage

router = APIRouter()
storage = FileStorage(settings.VAULT_ROOT)


@lru_cache(maxsize=1)
def get_snapshots() -> NoteSnapshotRepository:
    return NoteSnapshotRepository(create_session_factory(settings.SNAPSHOT_DB))


class ImportSummaryResponse(BaseModel):
    created: int
    updated: int
    skipped: int
    errors: int
    parsed: int
    files: List[str]
    message: str


@router.post("", response_model=ImportSummaryResponse)
async def import_files(files: List[UploadFile] = File(...)):
    """
    Sync places from uploaded GeoJSON/CSV files.

    Files are processed in upload order; a file that fails to parse is
    counted as skipped.
    """
    sources = []
    for upload in files:
        raw = await upload.read()
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise HTTPException(status_code=400, detail=f"File is not UTF-8: {upload.filename}")
        sources.append((upload.filename or "", text))

    try:
        summary = await import_takeout(
            sources,
            storage,
            output_folder=settings.OUTPUT_FOLDER,
            snapshot=get_snapshots(),
            include_coordinates=settings.INCLUDE_COORDINATES,
        )
    except SetupError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if summary.parsed == 0:
        raise HTTPException(status_code=400, detail="No places found in the uploaded files")

    return ImportSummaryResponse(**summary.to_dict(), message=summary.message())
