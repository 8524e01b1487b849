"""
Note snapshot repository backed by SQLAlchemy/SQLite.

Remembers the gmap_id and tags written to each note together with the note's
modification time. A snapshot is only served while the note is unchanged, so
the raw front matter read stays authoritative.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session, sessionmaker

from domain.models import DocumentRef
from repositories.models import NoteSnapshotORM


class NoteSnapshotRepository:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get_snapshot(self, session: Session, path: str) -> Optional[NoteSnapshotORM]:
        return session.get(NoteSnapshotORM, path)

    def lookup(self, ref: DocumentRef) -> Optional[Dict[str, Any]]:
        """
        Return pre-parsed front matter fields for a note, or None.

        Rows recorded for a different modification time are stale and ignored.
        """
        with self.session_factory() as session:
            orm = self.get_snapshot(session, ref.path)
            if orm is None or orm.modified_ns != ref.modified_ns:
                return None
            fields: Dict[str, Any] = {}
            if orm.gmap_id is not None:
                fields["gmap_id"] = orm.gmap_id
            if orm.tags is not None:
                fields["tags"] = list(orm.tags)
            return fields

    def record(self, ref: DocumentRef, gmap_id: Optional[str], tags: Optional[Iterable[str]]) -> None:
        """Insert or update the snapshot for a note just written."""
        with self.session_factory() as session:
            orm = self.get_snapshot(session, ref.path)
            if orm is None:
                orm = NoteSnapshotORM(path=ref.path)
                session.add(orm)
            orm.modified_ns = ref.modified_ns
            orm.gmap_id = gmap_id
            orm.tags = list(tags) if tags is not None else None
            orm.updated_at = datetime.now(timezone.utc)
            session.commit()
