"""
Database configuration and session management for the fracture service.

This module defines a SQLModel engine targeting a SQLite database stored
in the configured storage directory.  It exposes helper functions to
initialise the schema and to obtain session objects.  Keeping this in
one place isolates database configuration from the mesh services.
"""

from __future__ import annotations

from sqlmodel import SQLModel, create_engine, Session

from ..config import get_settings

# The storage directory holds both the database and the mesh archives.
# It is created eagerly so the engine can open the file on first use.
STORAGE_DIR = get_settings().storage_dir
STORAGE_DIR.mkdir(parents=True, exist_ok=True)

engine = create_engine(
    f"sqlite:///{(STORAGE_DIR / 'fracture.db').as_posix()}", echo=False
)


def create_db_and_tables() -> None:
    """Create all tables in the database.

    Called on application startup.  Safe to call repeatedly.
    """
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    """Return a new SQLModel session bound to the engine.

    Use as a context manager (``with get_session() as session: ...``)
    so connections are closed.
    """
    return Session(engine)
