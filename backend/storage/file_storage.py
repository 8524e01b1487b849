"""
Document storage abstraction.

Provides a simple async interface for listing, reading and writing notes.
Currently uses local filesystem (an Obsidian-style vault folder).

Paths are POSIX-style and relative to the store root, e.g.
"Google Maps/Places/Cafe.md".
"""
import asyncio
import os
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import List

from domain.models import DocumentRef

NOTE_SUFFIX = ".md"


class DocumentStore(ABC):
    """Capabilities the sync core needs from a note store."""

    @abstractmethod
    async def list_documents(self, prefix: str) -> List[DocumentRef]:
        """List notes under `prefix`, sorted by path."""

    @abstractmethod
    async def read(self, path: str) -> str:
        """Read the full text of a note."""

    @abstractmethod
    async def create(self, path: str, text: str) -> None:
        """Create a new note. Raises FileExistsError if the path is taken."""

    @abstractmethod
    async def modify(self, path: str, text: str) -> None:
        """Overwrite the full text of an existing note."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check whether a note or folder exists."""

    @abstractmethod
    async def create_folder(self, path: str) -> None:
        """Create a folder (and parents) if absent."""

    @abstractmethod
    async def stat(self, path: str) -> DocumentRef:
        """Return the listing entry for one note."""


def join_path(folder: str, name: str) -> str:
    folder = folder.strip("/")
    return f"{folder}/{name}" if folder else name


class FileStorage(DocumentStore):
    """
    Local file storage implementation.

    Blocking filesystem calls run in a worker thread; callers still await
    each operation in order.
    """

    def __init__(self, root: str = "vault"):
        self.root = Path(root)

    def get_absolute_path(self, relative_path: str) -> Path:
        """Convert a store path to absolute, refusing paths outside the root."""
        parts = PurePosixPath(relative_path.strip("/")).parts
        if any(part == ".." for part in parts):
            raise ValueError(f"Path escapes store root: {relative_path}")
        return self.root.joinpath(*parts)

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.root).as_posix()

    def _list_sync(self, prefix: str) -> List[DocumentRef]:
        base = self.get_absolute_path(prefix)
        if not base.is_dir():
            return []
        refs = []
        for dirpath, _dirnames, filenames in os.walk(base):
            for filename in filenames:
                if not filename.endswith(NOTE_SUFFIX):
                    continue
                file_path = Path(dirpath) / filename
                refs.append(DocumentRef(self._relative(file_path), file_path.stat().st_mtime_ns))
        return sorted(refs, key=lambda ref: ref.path)

    def _read_sync(self, path: str) -> str:
        with open(self.get_absolute_path(path), "r", encoding="utf-8", newline="") as f:
            return f.read()

    def _create_sync(self, path: str, text: str) -> None:
        file_path = self.get_absolute_path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        # "x" mode fails if the file already exists
        with open(file_path, "x", encoding="utf-8", newline="") as f:
            f.write(text)

    def _modify_sync(self, path: str, text: str) -> None:
        file_path = self.get_absolute_path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"No such note: {path}")
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            f.write(text)

    def _stat_sync(self, path: str) -> DocumentRef:
        return DocumentRef(path, self.get_absolute_path(path).stat().st_mtime_ns)

    async def list_documents(self, prefix: str) -> List[DocumentRef]:
        return await asyncio.to_thread(self._list_sync, prefix)

    async def read(self, path: str) -> str:
        return await asyncio.to_thread(self._read_sync, path)

    async def create(self, path: str, text: str) -> None:
        await asyncio.to_thread(self._create_sync, path, text)

    async def modify(self, path: str, text: str) -> None:
        await asyncio.to_thread(self._modify_sync, path, text)

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(self.get_absolute_path(path).exists)

    async def create_folder(self, path: str) -> None:
        await asyncio.to_thread(self.get_absolute_path(path).mkdir, parents=True, exist_ok=True)

    async def stat(self, path: str) -> DocumentRef:
        return await asyncio.to_thread(self._stat_sync, path)
