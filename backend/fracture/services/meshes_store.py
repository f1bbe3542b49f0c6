"""
Metadata records for stored polygon meshes.

This module defines the ``MeshRecord`` SQLModel table and helper
functions to initialise the database and to insert, list, fetch and
delete mesh metadata.  The geometry itself lives in ``.npz`` archives
on disk; a record points to its archive and keeps summary statistics
(vertex, loop and triangle counts and the bounding box) so listings do
not need to load any geometry.  Meshes produced by splitting or
fracturing reference the mesh they were cut from via ``parent_id``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlmodel import SQLModel, Field, select

from .db import create_db_and_tables, get_session


class MeshRecord(SQLModel, table=True):
    """Database model describing one stored polygon mesh."""

    mesh_id: str = Field(primary_key=True)
    name: str = ""
    # import, primitive, split or fracture
    source: str = Field(default="import")
    parent_id: Optional[str] = Field(default=None, index=True)
    mesh_path: str
    vertex_count: int
    loop_count: int
    triangle_count: int
    bbox_min_x: float
    bbox_min_y: float
    bbox_min_z: float
    bbox_max_x: float
    bbox_max_y: float
    bbox_max_z: float
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def init_db() -> None:
    """Initialise the database and create tables if they do not exist."""
    create_db_and_tables()


def insert_mesh_record(record: MeshRecord) -> MeshRecord:
    """Persist a new ``MeshRecord`` and return it refreshed from the database."""
    with get_session() as session:
        session.add(record)
        session.commit()
        session.refresh(record)
        return record


def get_mesh_record(mesh_id: str) -> Optional[MeshRecord]:
    """Retrieve a ``MeshRecord`` by identifier, or ``None`` if unknown."""
    with get_session() as session:
        return session.get(MeshRecord, mesh_id)


def list_mesh_records(parent_id: Optional[str] = None) -> List[MeshRecord]:
    """Return all mesh records, optionally only the children of ``parent_id``."""
    with get_session() as session:
        statement = select(MeshRecord)
        if parent_id is not None:
            statement = statement.where(MeshRecord.parent_id == parent_id)
        return list(session.exec(statement))


def delete_mesh_record(mesh_id: str) -> Optional[MeshRecord]:
    """Delete a mesh record.

    Returns:
        The deleted record, or ``None`` if it did not exist.  Removing the
        archive from disk is left to the caller.
    """
    with get_session() as session:
        record = session.get(MeshRecord, mesh_id)
        if record is None:
            return None
        session.delete(record)
        session.commit()
        return record
