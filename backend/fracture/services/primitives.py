"""
Primitive meshes.

Only an axis aligned box is needed: it serves as the default body of
the HTTP API and as the reference solid in tests.  The box is emitted
as a triangle soup over eight shared corners with outward facing,
counter‑clockwise triangles, and can be turned into a polygon mesh
through the ngon builder.
"""

from __future__ import annotations

from typing import List, Tuple

from .ngon_builder import build_polygon_mesh
from .planes import Vec3
from .polygon_mesh import PolygonMesh

# Two triangles per face: -z, +z, -y, +y, -x, +x
BOX_TRIANGLES: Tuple[int, ...] = (
    0, 3, 2, 0, 2, 1,
    4, 5, 6, 4, 6, 7,
    0, 1, 5, 0, 5, 4,
    3, 7, 6, 3, 6, 2,
    0, 4, 7, 0, 7, 3,
    1, 2, 6, 1, 6, 5,
)


def box_triangles(
    size: Vec3 = (1.0, 1.0, 1.0),
    center: Vec3 = (0.0, 0.0, 0.0),
) -> Tuple[List[Vec3], List[int]]:
    """Return ``(vertices, triangles)`` of a box with the given size and centre.

    Raises:
        ValueError: If any size component is not positive.
    """
    if min(size) <= 0.0:
        raise ValueError("box size must be positive along every axis")
    hx, hy, hz = (s * 0.5 for s in size)
    cx, cy, cz = center
    vertices: List[Vec3] = [
        (cx - hx, cy - hy, cz - hz),
        (cx + hx, cy - hy, cz - hz),
        (cx + hx, cy + hy, cz - hz),
        (cx - hx, cy + hy, cz - hz),
        (cx - hx, cy - hy, cz + hz),
        (cx + hx, cy - hy, cz + hz),
        (cx + hx, cy + hy, cz + hz),
        (cx - hx, cy + hy, cz + hz),
    ]
    return vertices, list(BOX_TRIANGLES)


def box_polygon_mesh(
    size: Vec3 = (1.0, 1.0, 1.0),
    center: Vec3 = (0.0, 0.0, 0.0),
) -> PolygonMesh:
    """Box as a polygon mesh: 8 vertices and 6 quad loops."""
    vertices, triangles = box_triangles(size, center)
    return build_polygon_mesh(vertices, triangles)
