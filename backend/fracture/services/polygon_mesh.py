"""
Polygon mesh data model.

A ``PolygonMesh`` stores a closed mesh as a set of convex planar
polygons ("ngons").  Vertex positions, normals and texture coordinates
are kept in parallel, index aligned tuples.  The polygon structure
lives in ``loops``: a flat stream of vertex indices in which every
polygon is a run of at least three indices terminated by ``SENTINEL``
(``-1``).  Loops are ordered counter‑clockwise around the polygon's
outward normal.

The triangulated render form is derived, never stored: each loop is
fan triangulated from its first vertex whenever ``triangles`` or
``render_buffers`` is requested.  Instances are immutable; geometric
operations such as splitting always return new meshes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from .planes import Vec2, Vec3, add, cross, normalize, sub

logger = logging.getLogger(__name__)

# Terminator of every loop in the flattened loop stream.  Never a valid index.
SENTINEL: int = -1


@dataclass(frozen=True)
class RenderBuffers:
    """Flat buffers handed to render and collision integrations.

    Attributes:
        vertices: Flat list of vertex positions (x, y, z …).
        normals: Flat list of vertex normals (x, y, z …).
        uvs: Flat list of texture coordinates (u, v …).
        indices: Triangle index buffer; every three entries form a triangle.
    """

    vertices: List[float]
    normals: List[float]
    uvs: List[float]
    indices: List[int]


@dataclass(frozen=True)
class PolygonMesh:
    """Immutable convex polygon mesh.

    Attributes:
        vertices: Vertex positions.
        normals: Vertex normals, parallel to ``vertices``.
        uvs: Texture coordinates, parallel to ``vertices``.
        loops: Sentinel terminated stream of polygon loops.
    """

    vertices: Tuple[Vec3, ...] = ()
    normals: Tuple[Vec3, ...] = ()
    uvs: Tuple[Vec2, ...] = ()
    loops: Tuple[int, ...] = field(default=())

    def __post_init__(self) -> None:
        # Accept any sequences but store tuples so instances stay hashable
        # and cannot be mutated through shared references.
        object.__setattr__(self, "vertices", tuple(tuple(map(float, p)) for p in self.vertices))
        object.__setattr__(self, "normals", tuple(tuple(map(float, n)) for n in self.normals))
        object.__setattr__(self, "uvs", tuple(tuple(map(float, t)) for t in self.uvs))
        object.__setattr__(self, "loops", tuple(int(i) for i in self.loops))
        if not (len(self.vertices) == len(self.normals) == len(self.uvs)):
            raise ValueError(
                "vertices, normals and uvs must have the same length "
                f"({len(self.vertices)}, {len(self.normals)}, {len(self.uvs)})"
            )

    @classmethod
    def empty(cls) -> "PolygonMesh":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.loops

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def loop_count(self) -> int:
        return sum(1 for i in self.loops if i == SENTINEL)

    def iter_loops(self) -> Iterator[Tuple[int, ...]]:
        """Yield every polygon loop as a tuple of vertex indices.

        A trailing run that is not terminated by the sentinel is ignored.
        """
        current: List[int] = []
        for index in self.loops:
            if index == SENTINEL:
                if current:
                    yield tuple(current)
                current = []
            else:
                current.append(index)

    def loop_positions(self) -> List[List[Vec3]]:
        """Return the vertex positions of every loop in loop order."""
        return [[self.vertices[i] for i in loop] for loop in self.iter_loops()]

    @property
    def triangles(self) -> List[int]:
        """Fan triangulation of all loops as a flat index buffer.

        Each loop ``[i0, i1, ..., ik]`` produces the triangles
        ``(i0, i_{j-1}, i_j)`` for ``j = 2..k``.
        """
        tris: List[int] = []
        for loop in self.iter_loops():
            first = loop[0]
            previous = loop[1] if len(loop) > 1 else first
            for current in loop[2:]:
                tris.extend((first, previous, current))
                previous = current
        return tris

    @property
    def triangle_count(self) -> int:
        return sum(max(0, len(loop) - 2) for loop in self.iter_loops())

    def render_buffers(self) -> RenderBuffers:
        """Return flat render buffers (positions, normals, uvs, triangles)."""
        return RenderBuffers(
            vertices=[c for p in self.vertices for c in p],
            normals=[c for n in self.normals for c in n],
            uvs=[c for t in self.uvs for c in t],
            indices=self.triangles,
        )

    def bounds(self) -> Tuple[Vec3, Vec3]:
        """Axis aligned bounding box of the vertices referenced by loops.

        Returns ``((0, 0, 0), (0, 0, 0))`` for an empty mesh.
        """
        used = {i for i in self.loops if i != SENTINEL}
        if not used:
            return (0.0, 0.0, 0.0), (0.0, 0.0, 0.0)
        points = [self.vertices[i] for i in used]
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        zs = [p[2] for p in points]
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    def distinct_positions(self) -> set:
        """Set of distinct vertex positions referenced by the loops."""
        return {self.vertices[i] for i in self.loops if i != SENTINEL}

    def validate(self) -> None:
        """Check the structural invariants of the loop stream.

        Raises:
            ValueError: If a loop is shorter than three indices, an index
                is out of range, or the stream does not end with the
                sentinel.
        """
        if not self.loops:
            return
        if self.loops[-1] != SENTINEL:
            raise ValueError("loop stream must be terminated by the sentinel")
        count = len(self.vertices)
        run = 0
        for position, index in enumerate(self.loops):
            if index == SENTINEL:
                if run < 3:
                    raise ValueError(f"loop ending at position {position} has {run} vertices; at least 3 required")
                run = 0
                continue
            if index < 0 or index >= count:
                raise ValueError(f"loop index {index} at position {position} is out of range for {count} vertices")
            run += 1


def loop_normal(points: Sequence[Vec3]) -> Vec3:
    """Unit normal of a planar polygon using Newell's method."""
    nx = ny = nz = 0.0
    n = len(points)
    for i in range(n):
        x0, y0, z0 = points[i]
        x1, y1, z1 = points[(i + 1) % n]
        nx += (y0 - y1) * (z0 + z1)
        ny += (z0 - z1) * (x0 + x1)
        nz += (x0 - x1) * (y0 + y1)
    return normalize((nx, ny, nz))


def compute_vertex_normals(vertices: Sequence[Vec3], triangles: Sequence[int]) -> List[Vec3]:
    """Area weighted per‑vertex normals accumulated from a triangle list.

    Vertices not referenced by any triangle receive a zero normal.
    """
    accum: List[Vec3] = [(0.0, 0.0, 0.0)] * len(vertices)
    for k in range(0, len(triangles) - 2, 3):
        a, b, c = triangles[k], triangles[k + 1], triangles[k + 2]
        face = cross(sub(vertices[b], vertices[a]), sub(vertices[c], vertices[a]))
        for i in (a, b, c):
            accum[i] = add(accum[i], face)
    return [normalize(n) for n in accum]


__all__ = [
    "SENTINEL",
    "PolygonMesh",
    "RenderBuffers",
    "loop_normal",
    "compute_vertex_normals",
]
