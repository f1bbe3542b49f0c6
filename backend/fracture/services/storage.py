"""
Local storage service for polygon meshes.

Meshes are written as compressed archives to
``<storage_dir>/meshes/{meshId}.npz`` and described by a ``MeshRecord``
row in the metadata database.  Split and fracture results are stored
the same way as imported meshes, with ``parent_id`` pointing at the
mesh they were cut from.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import HTTPException

from ..config import get_settings
from .mesh_cache import load_polygon_mesh, save_polygon_mesh
from .meshes_store import (
    MeshRecord,
    delete_mesh_record,
    get_mesh_record,
    insert_mesh_record,
)
from .polygon_mesh import PolygonMesh

logger = logging.getLogger(__name__)

# Archives live next to the database in the configured storage directory.
STORAGE_MESHES_DIR = get_settings().storage_dir / "meshes"
STORAGE_MESHES_DIR.mkdir(parents=True, exist_ok=True)


def store_polygon_mesh(
    mesh: PolygonMesh,
    name: str = "",
    source: str = "import",
    parent_id: Optional[str] = None,
) -> MeshRecord:
    """Persist a polygon mesh and return its metadata record.

    Args:
        mesh: The mesh to store.
        name: Display name for listings.
        source: How the mesh was produced (import, primitive, split, fracture).
        parent_id: Identifier of the mesh this one was cut from, if any.

    Returns:
        MeshRecord: The inserted record.
    """
    mesh_id = uuid.uuid4().hex
    mesh_path = STORAGE_MESHES_DIR / f"{mesh_id}.npz"
    save_polygon_mesh(mesh_path, mesh)
    bbox_min, bbox_max = mesh.bounds()
    record = MeshRecord(
        mesh_id=mesh_id,
        name=name,
        source=source,
        parent_id=parent_id,
        mesh_path=str(mesh_path),
        vertex_count=mesh.vertex_count,
        loop_count=mesh.loop_count,
        triangle_count=mesh.triangle_count,
        bbox_min_x=bbox_min[0],
        bbox_min_y=bbox_min[1],
        bbox_min_z=bbox_min[2],
        bbox_max_x=bbox_max[0],
        bbox_max_y=bbox_max[1],
        bbox_max_z=bbox_max[2],
    )
    logger.info(
        "Stored mesh %s (%s, %d loops) at %s", mesh_id, source, mesh.loop_count, mesh_path
    )
    return insert_mesh_record(record)


def get_mesh_record_or_404(mesh_id: str) -> MeshRecord:
    """Return the record for ``mesh_id``.

    Raises:
        HTTPException: 404 if the mesh is unknown.
    """
    record = get_mesh_record(mesh_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Mesh not found")
    return record


def load_mesh(mesh_id: str) -> PolygonMesh:
    """Load the polygon mesh stored under ``mesh_id``.

    Raises:
        HTTPException: 404 if the record or its archive is missing.
    """
    record = get_mesh_record_or_404(mesh_id)
    try:
        return load_polygon_mesh(Path(record.mesh_path))
    except FileNotFoundError:
        logger.warning("Archive for mesh %s is missing: %s", mesh_id, record.mesh_path)
        raise HTTPException(status_code=404, detail="Mesh file not found")


def delete_mesh(mesh_id: str) -> bool:
    """Delete a mesh record and its archive.

    Returns:
        ``True`` if a record was deleted, ``False`` if none existed.
    """
    record = delete_mesh_record(mesh_id)
    if record is None:
        return False
    Path(record.mesh_path).unlink(missing_ok=True)
    logger.info("Deleted mesh %s", mesh_id)
    return True
