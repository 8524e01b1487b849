"""Sync a takeout "Saved places" export into a Markdown vault.

Usage:
    takeout-sync <takeout dir or files...> [--vault vault] [--output-folder "Google Maps/Places"]

Directories are searched recursively for .json/.geojson/.csv exports; known
non-place exports (e.g. reviews) are ignored. Existing notes are matched by
gmap_id and only their front matter is rewritten.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from db import create_session_factory
from domain.errors import SetupError
from repositories import NoteSnapshotRepository
from services.importer import import_takeout
from services.takeout_loader import expand_sources
from storage.file_storage import FileStorage

logger = logging.getLogger("sync_takeout")


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync saved places from a takeout export into Markdown notes.")
    parser.add_argument("sources", nargs="+", help="Takeout directory or individual .json/.csv files.")
    parser.add_argument("--vault", default=settings.VAULT_ROOT, help="Vault root folder.")
    parser.add_argument("--output-folder", default=settings.OUTPUT_FOLDER, help="Folder for place notes, relative to the vault.")
    parser.add_argument("--snapshot-db", default=settings.SNAPSHOT_DB, help="SQLite file caching note front matter.")
    parser.add_argument("--no-snapshot", action="store_true", help="Always parse front matter from the notes.")
    parser.add_argument(
        "--no-coordinates",
        dest="include_coordinates",
        action="store_false",
        default=settings.INCLUDE_COORDINATES,
        help="Leave coordinates out of the front matter.",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")
    from settings import Settings

    args = build_parser(Settings()).parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    files = expand_sources(args.sources)
    if not files:
        logger.error("No takeout files found in %s", ", ".join(args.sources))
        return 1

    snapshot = None
    if not args.no_snapshot:
        snapshot = NoteSnapshotRepository(create_session_factory(args.snapshot_db))

    try:
        summary = asyncio.run(
            import_takeout(
                files,
                FileStorage(args.vault),
                output_folder=args.output_folder,
                snapshot=snapshot,
                log=logger,
                include_coordinates=args.include_coordinates,
            )
        )
    except SetupError as e:
        logger.error("Error: %s", e)
        return 1

    if summary.parsed == 0:
        print("No places found in the given files")
        return 1

    print(f"Import complete: {summary.message()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
