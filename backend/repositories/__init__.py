from .snapshots import NoteSnapshotRepository
from . import models

__all__ = ["NoteSnapshotRepository", "models"]
