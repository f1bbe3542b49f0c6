"""
Plane bisection of convex polygon meshes.

``split_mesh`` cuts a :class:`PolygonMesh` by a plane into two new
meshes and closes each of them with a cap polygon lying on the plane.

Every vertex is classified by the sign of its signed distance: side 1
when the distance is positive, side 0 otherwise.  Each loop is walked
in order, including the wrap‑around edge from its last vertex back to
the first.  Vertices are copied to the output loop of their side, and
whenever an edge changes side an interpolated vertex is appended to
*both* output loops so the two halves share the cut edge.

Because every ngon is convex it crosses the plane either not at all or
exactly twice.  The crossing that enters side 1 and the one that
enters side 0 form one edge of the cap polygon.  Those edges are then
chained into a single closed loop.  Interpolation always runs from the
side 0 endpoint to the side 1 endpoint of an edge, so both polygons
sharing an edge compute bit‑identical crossing points and the chain
can be followed by exact equality.

Nothing is raised for geometric no‑ops: a plane that misses the mesh,
or cut edges that cannot be assembled into a closed loop, both make
``split_mesh`` return ``None`` and leave the input untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..config import get_settings
from .planes import Plane, Vec2, Vec3, lerp, plane_basis, project_to_basis, scale
from .polygon_mesh import SENTINEL, PolygonMesh

logger = logging.getLogger(__name__)


@dataclass
class _SideBuffers:
    """Growing output arrays for one side of the cut."""

    vertices: List[Vec3] = field(default_factory=list)
    normals: List[Vec3] = field(default_factory=list)
    uvs: List[Vec2] = field(default_factory=list)
    loops: List[int] = field(default_factory=list)

    def append(self, position: Vec3, normal: Vec3, uv: Vec2) -> None:
        self.vertices.append(position)
        self.normals.append(normal)
        self.uvs.append(uv)
        self.loops.append(len(self.vertices) - 1)

    def close_loop(self) -> None:
        # Only terminate when this side received vertices since the last sentinel
        if self.loops and self.loops[-1] != SENTINEL:
            self.loops.append(SENTINEL)

    def to_mesh(self) -> PolygonMesh:
        return PolygonMesh(vertices=self.vertices, normals=self.normals, uvs=self.uvs, loops=self.loops)


@dataclass(frozen=True)
class CutEdge:
    """Segment of the cap polygon contributed by one crossed loop.

    Attributes:
        enter: Crossing point where the loop enters side 1.
        leave: Crossing point where the loop enters side 0.
    """

    enter: Vec3
    leave: Vec3


def _interpolate(mesh: PolygonMesh, a: int, da: float, b: int, db: float) -> Tuple[Vec3, Vec3, Vec2]:
    """Crossing vertex on edge ``a``–``b`` where ``a`` lies on side 0 and ``b`` on side 1."""
    t = da / (da - db)
    position = lerp(mesh.vertices[a], mesh.vertices[b], t)
    normal = lerp(mesh.normals[a], mesh.normals[b], t)
    uv = lerp(mesh.uvs[a], mesh.uvs[b], t)
    return position, normal, uv


def build_cap_loop(edges: Sequence[CutEdge]) -> Optional[List[Vec3]]:
    """Chain cut edges into one closed loop of points.

    Starting from the first edge, the walk repeatedly moves to the edge
    whose ``enter`` point equals the current edge's ``leave`` point.
    The walk is limited to ``len(edges)`` steps.

    Args:
        edges: Cut edges collected from the crossed loops.

    Returns:
        The ``enter`` points in walk order, or ``None`` when the walk
        does not return to the first edge after visiting every edge or
        the loop would have fewer than three points.
    """
    if not edges:
        return None
    points: List[Vec3] = []
    current = 0
    for _ in range(len(edges)):
        points.append(edges[current].enter)
        target = edges[current].leave
        following = None
        for candidate, edge in enumerate(edges):
            if edge.enter == target:
                following = candidate
                break
        if following is None:
            return None
        current = following
        if current == 0:
            break
    if current != 0 or len(points) != len(edges) or len(points) < 3:
        return None
    return points


def split_mesh(mesh: PolygonMesh, plane: Plane) -> Optional[Tuple[PolygonMesh, PolygonMesh]]:
    """Bisect ``mesh`` by ``plane``.

    Args:
        mesh: Closed convex polygon mesh.  Not modified.
        plane: Cutting plane.  Its normal points towards side 1.

    Returns:
        ``(below, above)`` where ``below`` holds the geometry with
        non‑positive signed distance (side 0) and ``above`` the geometry
        with positive distance (side 1).  Each is capped with a polygon
        on the plane whose normal faces away from the kept material.
        ``None`` when the plane does not cross the mesh or the cap loop
        cannot be constructed.
    """
    distances = [plane.signed_distance(p) for p in mesh.vertices]
    sides = [1 if d > 0 else 0 for d in distances]
    out = (_SideBuffers(), _SideBuffers())
    cut_edges: List[CutEdge] = []

    def cross_edge(previous: int, current: int) -> Vec3:
        if sides[previous] == 0:
            crossing = _interpolate(mesh, previous, distances[previous], current, distances[current])
        else:
            crossing = _interpolate(mesh, current, distances[current], previous, distances[previous])
        for buffers in out:
            buffers.append(*crossing)
        return crossing[0]

    for loop in mesh.iter_loops():
        enter: Optional[Vec3] = None
        leave: Optional[Vec3] = None
        for position, node in enumerate(loop):
            if position > 0:
                previous = loop[position - 1]
                if sides[previous] != sides[node]:
                    point = cross_edge(previous, node)
                    if sides[node] == 1:
                        enter = point
                    else:
                        leave = point
            out[sides[node]].append(mesh.vertices[node], mesh.normals[node], mesh.uvs[node])
        first, last = loop[0], loop[-1]
        if sides[first] != sides[last]:
            point = cross_edge(last, first)
            if sides[first] == 1:
                enter = point
            else:
                leave = point
        if enter is not None and leave is not None:
            cut_edges.append(CutEdge(enter=enter, leave=leave))
        for buffers in out:
            buffers.close_loop()

    if not cut_edges:
        if get_settings().debug:
            logger.debug("split_mesh: plane %s does not intersect the mesh", plane)
        return None

    cap = build_cap_loop(cut_edges)
    if cap is None:
        if get_settings().debug:
            logger.debug(
                "split_mesh: could not close cap loop from %d cut edges; split aborted",
                len(cut_edges),
            )
        return None

    u, v = plane_basis(plane.normal)
    cap_uvs = [project_to_basis(p, u, v) for p in cap]
    below, above = out
    flipped = scale(plane.normal, -1.0)
    count = len(cap)

    base = len(below.vertices)
    below.vertices.extend(cap)
    below.uvs.extend(cap_uvs)
    below.normals.extend([plane.normal] * count)
    below.loops.extend(base + count - 1 - i for i in range(count))
    below.loops.append(SENTINEL)

    base = len(above.vertices)
    above.vertices.extend(cap)
    above.uvs.extend(cap_uvs)
    above.normals.extend([flipped] * count)
    above.loops.extend(base + i for i in range(count))
    above.loops.append(SENTINEL)

    if get_settings().debug:
        logger.debug(
            "split_mesh: cut %d loops, cap has %d vertices (below=%d verts, above=%d verts)",
            len(cut_edges),
            count,
            len(below.vertices),
            len(above.vertices),
        )
    return below.to_mesh(), above.to_mesh()


__all__ = ["CutEdge", "build_cap_loop", "split_mesh"]
