"""
Routes for mesh import, retrieval and plane splitting.

Meshes enter the service either as triangle soups, which are merged
into convex polygon loops, or as box primitives.  Stored meshes can be
listed, rendered, deleted and split by an arbitrary plane; both halves
of a split are stored as new meshes referencing their parent.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException

from .models import (
    BoxRequest,
    MeshBBox,
    MeshInfo,
    MeshResponse,
    SplitRequest,
    SplitResponse,
    TriangleMeshRequest,
)
from ..config import get_settings
from ..services.mesh_split import split_mesh
from ..services.meshes_store import MeshRecord, list_mesh_records
from ..services.ngon_builder import build_polygon_mesh_from_flat
from ..services.planes import plane_from_normal_and_distance, plane_from_normal_and_point
from ..services.primitives import box_polygon_mesh
from ..services.storage import delete_mesh, get_mesh_record_or_404, load_mesh, store_polygon_mesh

logger = logging.getLogger(__name__)

router = APIRouter()


def mesh_info_from_record(record: MeshRecord) -> MeshInfo:
    """Map a database record to its API representation."""
    return MeshInfo(
        meshId=record.mesh_id,
        name=record.name,
        source=record.source,
        parentId=record.parent_id,
        vertexCount=record.vertex_count,
        loopCount=record.loop_count,
        triangleCount=record.triangle_count,
        bbox=MeshBBox(
            min=[record.bbox_min_x, record.bbox_min_y, record.bbox_min_z],
            max=[record.bbox_max_x, record.bbox_max_y, record.bbox_max_z],
        ),
        createdAt=record.created_at,
    )


@router.post("/meshes", response_model=MeshInfo, status_code=201)
async def create_mesh(body: TriangleMeshRequest) -> MeshInfo:
    """Merge a triangle soup into convex polygon loops and store the result.

    Raises:
        HTTPException: 422 if the buffers are malformed.
    """
    try:
        mesh = build_polygon_mesh_from_flat(
            body.vertices,
            body.indices,
            body.normals,
            body.uvs,
            tolerance=get_settings().plane_tolerance,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    record = store_polygon_mesh(mesh, name=body.name, source="import")
    return mesh_info_from_record(record)


@router.post("/meshes/box", response_model=MeshInfo, status_code=201)
async def create_box(body: BoxRequest) -> MeshInfo:
    """Store an axis aligned box primitive."""
    try:
        mesh = box_polygon_mesh(tuple(body.size), tuple(body.center))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    record = store_polygon_mesh(mesh, name=body.name, source="primitive")
    return mesh_info_from_record(record)


@router.get("/meshes", response_model=List[MeshInfo])
async def list_meshes(parentId: Optional[str] = None) -> List[MeshInfo]:
    """Return all stored meshes, or only the children of ``parentId``."""
    return [mesh_info_from_record(r) for r in list_mesh_records(parentId)]


@router.get("/meshes/{mesh_id}", response_model=MeshInfo)
async def get_mesh(mesh_id: str) -> MeshInfo:
    """Return summary information for a single mesh.

    Raises:
        HTTPException: If the mesh does not exist.
    """
    return mesh_info_from_record(get_mesh_record_or_404(mesh_id))


@router.delete("/meshes/{mesh_id}", status_code=204)
async def remove_mesh(mesh_id: str) -> None:
    """Delete a mesh record together with its archive.

    Meshes derived from it are kept; their ``parentId`` keeps pointing
    at the removed identifier.
    """
    if not delete_mesh(mesh_id):
        raise HTTPException(status_code=404, detail="Mesh not found")
    return None


@router.get("/meshes/{mesh_id}/render", response_model=MeshResponse)
async def render_mesh(mesh_id: str) -> MeshResponse:
    """Return triangulated render buffers together with the polygon loops."""
    mesh = load_mesh(mesh_id)
    buffers = mesh.render_buffers()
    bbox_min, bbox_max = mesh.bounds()
    return MeshResponse(
        meshId=mesh_id,
        vertices=list(buffers.vertices),
        normals=list(buffers.normals),
        uvs=list(buffers.uvs),
        indices=list(buffers.indices),
        loops=list(mesh.loops),
        bbox=MeshBBox(min=list(bbox_min), max=list(bbox_max)),
    )


@router.post("/meshes/{mesh_id}/split", response_model=SplitResponse, status_code=201)
async def split(mesh_id: str, body: SplitRequest) -> SplitResponse:
    """Split a stored mesh by a plane and store both halves.

    The plane is given by its normal and either a point on it or its
    distance.  Without either the plane passes through the origin.

    Raises:
        HTTPException: 404 if the mesh is unknown, 422 if the normal is
            zero or the plane does not split the mesh into two closed parts.
    """
    record = get_mesh_record_or_404(mesh_id)
    mesh = load_mesh(mesh_id)
    try:
        if body.point is not None:
            plane = plane_from_normal_and_point(tuple(body.normal), tuple(body.point))
        else:
            plane = plane_from_normal_and_distance(tuple(body.normal), body.distance or 0.0)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    result = split_mesh(mesh, plane)
    if result is None:
        logger.info("Plane %s does not split mesh %s", plane, mesh_id)
        raise HTTPException(status_code=422, detail="Plane does not split the mesh")
    below, above = result
    below_record = store_polygon_mesh(
        below, name=f"{record.name} below", source="split", parent_id=mesh_id
    )
    above_record = store_polygon_mesh(
        above, name=f"{record.name} above", source="split", parent_id=mesh_id
    )
    return SplitResponse(
        below=mesh_info_from_record(below_record),
        above=mesh_info_from_record(above_record),
    )
