"""
Database setup for the note snapshot cache.
Provides SQLAlchemy engine/session utilities for SQLite.
"""
from pathlib import Path
from typing import Union

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def create_session_factory(db_path: Union[str, Path]) -> sessionmaker:
    """Create the engine for `db_path`, ensure tables exist, return a session factory."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    # check_same_thread=False allows usage across FastAPI threads
    engine = create_engine(
        f"sqlite:///{db_path}", connect_args={"check_same_thread": False}
    )
    init_db(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db(engine) -> None:
    """Create tables if they don't exist."""
    from repositories import models  # noqa: F401  Ensures models are registered

    Base.metadata.create_all(bind=engine)
