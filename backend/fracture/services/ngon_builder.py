"""
Reconstruct convex polygon structure from a triangle soup.

Meshes arrive as plain triangle lists.  The fracture core however
works on convex planar polygons, so this module regroups triangles
into ngons once, at import time:

1. Triangles are clustered by their supporting plane.  A triangle
   joins an existing cluster when the squared difference of the unit
   normals is within ``PLANE_TOLERANCE``; the cluster collects the
   triangle's vertex indices in a set so shared corners collapse.
2. Each cluster's vertices are ordered into a convex loop with an
   angular scan around the cluster normal (a Graham scan specialised
   to points known to share a plane).
3. One sentinel terminated loop per cluster is emitted, in the order
   the clusters were first seen.

Only convex hulls are supported: two distinct faces with the same
orientation would be merged into a single loop.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..config import get_settings
from .planes import Vec2, Vec3, Plane, dot, length_sq, plane_basis, plane_from_points, signed_angle, sub
from .polygon_mesh import SENTINEL, PolygonMesh, compute_vertex_normals

logger = logging.getLogger(__name__)

# Maximum squared difference between two unit normals for their
# triangles to be treated as coplanar.
PLANE_TOLERANCE: float = 3.16e-3


def cluster_coplanar_triangles(
    vertices: Sequence[Vec3],
    triangles: Sequence[int],
    tolerance: float = PLANE_TOLERANCE,
) -> Dict[Plane, List[int]]:
    """Group triangle vertices by supporting plane.

    Args:
        vertices: Vertex positions.
        triangles: Flat triangle index list.
        tolerance: Squared normal difference below which two planes are
            considered the same.

    Returns:
        An insertion ordered mapping from the first plane seen for each
        cluster to the unique vertex indices of that cluster, in the
        order they were first added.
    """
    clusters: Dict[Plane, Dict[int, None]] = {}
    skipped = 0
    for k in range(0, len(triangles) - 2, 3):
        a, b, c = triangles[k], triangles[k + 1], triangles[k + 2]
        plane = plane_from_points(vertices[a], vertices[b], vertices[c])
        if plane.normal == (0.0, 0.0, 0.0):
            skipped += 1
            continue
        key: Optional[Plane] = None
        for existing in clusters:
            if length_sq(sub(existing.normal, plane.normal)) <= tolerance:
                key = existing
                break
        if key is None:
            key = plane
            clusters[key] = {}
        # dict keys behave as an ordered set
        for index in (a, b, c):
            clusters[key][index] = None
    if skipped and get_settings().debug:
        logger.debug("cluster_coplanar_triangles: skipped %d degenerate triangles", skipped)
    return {plane: list(indices) for plane, indices in clusters.items()}


def convex_loop(vertices: Sequence[Vec3], indices: Sequence[int], normal: Vec3) -> List[int]:
    """Order coplanar vertices into a convex loop around ``normal``.

    The anchor is the vertex with the smallest ``v`` coordinate (ties
    broken by the smallest ``u``) in the plane basis.  Remaining
    vertices are sorted by the signed angle from ``u`` to the direction
    from the anchor, and then walked with a stack that drops the last
    point whenever the candidate edge turns back relative to the
    previous edge.  The result winds counter‑clockwise around
    ``normal``.

    Args:
        vertices: Vertex positions of the whole mesh.
        indices: Indices of the coplanar vertices to order.
        normal: Unit normal shared by the vertices.

    Returns:
        Ordered list of vertex indices forming the convex loop.
    """
    if not indices:
        return []
    u, v = plane_basis(normal)

    def sort_criterion(vec: Vec3) -> float:
        return signed_angle(u, vec, normal)

    ordered = sorted(indices, key=lambda i: (dot(vertices[i], v), dot(vertices[i], u)))
    anchor = ordered[0]
    p0 = vertices[anchor]
    rest = sorted(ordered[1:], key=lambda i: sort_criterion(sub(vertices[i], p0)))

    loop: List[int] = [anchor]
    for index in rest:
        while len(loop) > 1 and sort_criterion(sub(vertices[index], vertices[loop[-1]])) < sort_criterion(
            sub(vertices[loop[-1]], vertices[loop[-2]])
        ):
            loop.pop()
        loop.append(index)
    return loop


def build_polygon_mesh(
    vertices: Sequence[Vec3],
    triangles: Sequence[int],
    normals: Optional[Sequence[Vec3]] = None,
    uvs: Optional[Sequence[Vec2]] = None,
    tolerance: float = PLANE_TOLERANCE,
) -> PolygonMesh:
    """Build a :class:`PolygonMesh` from a triangle soup.

    Args:
        vertices: Vertex positions.
        triangles: Flat triangle index list (three indices per triangle).
        normals: Optional per‑vertex normals.  When omitted, area weighted
            normals are computed from the triangles.
        uvs: Optional per‑vertex texture coordinates.  Defaults to zeros.
        tolerance: Coplanarity tolerance passed to the clustering step.

    Returns:
        PolygonMesh: The mesh with its convex loop stream.  Empty input
        yields an empty loop stream.

    Raises:
        ValueError: If a triangle index is out of range or the optional
            arrays do not match the vertex count.
    """
    count = len(vertices)
    for index in triangles:
        if index < 0 or index >= count:
            raise ValueError(f"triangle index {index} out of range for {count} vertices")
    if normals is None:
        normals = compute_vertex_normals(vertices, triangles)
    if uvs is None:
        uvs = [(0.0, 0.0)] * count

    loops: List[int] = []
    clusters = cluster_coplanar_triangles(vertices, triangles, tolerance)
    for plane, indices in clusters.items():
        loop = convex_loop(vertices, indices, plane.normal)
        if len(loop) < 3:
            continue
        loops.extend(loop)
        loops.append(SENTINEL)

    if get_settings().debug:
        logger.debug(
            "build_polygon_mesh: triangles=%d clusters=%d loop stream length=%d",
            len(triangles) // 3,
            len(clusters),
            len(loops),
        )
    return PolygonMesh(vertices=vertices, normals=normals, uvs=uvs, loops=loops)


def build_polygon_mesh_from_flat(
    vertices: Sequence[float],
    indices: Sequence[int],
    normals: Optional[Sequence[float]] = None,
    uvs: Optional[Sequence[float]] = None,
    tolerance: float = PLANE_TOLERANCE,
) -> PolygonMesh:
    """Convenience wrapper accepting flat coordinate lists.

    Raises:
        ValueError: If a flat list has a length that is not a multiple of
            its component count.
    """
    if len(vertices) % 3:
        raise ValueError("vertices must be a flat list of x, y, z triples")
    if len(indices) % 3:
        raise ValueError("indices must describe whole triangles")
    points = [tuple(vertices[i:i + 3]) for i in range(0, len(vertices), 3)]
    normal_list = None
    if normals:
        if len(normals) != len(vertices):
            raise ValueError("normals must match vertices in length")
        normal_list = [tuple(normals[i:i + 3]) for i in range(0, len(normals), 3)]
    uv_list = None
    if uvs:
        if len(uvs) != 2 * len(points):
            raise ValueError("uvs must hold one (u, v) pair per vertex")
        uv_list = [tuple(uvs[i:i + 2]) for i in range(0, len(uvs), 2)]
    return build_polygon_mesh(points, list(indices), normal_list, uv_list, tolerance)


__all__ = [
    "PLANE_TOLERANCE",
    "cluster_coplanar_triangles",
    "convex_loop",
    "build_polygon_mesh",
    "build_polygon_mesh_from_flat",
]
