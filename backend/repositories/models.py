"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime, timezone
from sqlalchemy import BigInteger, Column, DateTime, JSON, String

from db import Base


class NoteSnapshotORM(Base):
    """Front matter fields last written to a note, keyed by note path."""
    __tablename__ = "note_snapshots"

    path = Column(String, primary_key=True, index=True)
    modified_ns = Column(BigInteger, nullable=False)
    gmap_id = Column(String, nullable=True, index=True)
    tags = Column(JSON, nullable=True)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
