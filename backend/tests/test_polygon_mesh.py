"""
Tests for the PolygonMesh data model: loop iteration, fan triangulation,
render buffers and structural validation.
"""

from __future__ import annotations

import sys
from pathlib import Path
import pytest

# Make the backend package importable when running tests directly via pytest
sys.path.append(str(Path(__file__).resolve().parents[1]))

from fracture.services.polygon_mesh import (
    SENTINEL,
    PolygonMesh,
    compute_vertex_normals,
    loop_normal,
)


def make_mesh(vertices, loops) -> PolygonMesh:
    n = len(vertices)
    return PolygonMesh(
        vertices=vertices,
        normals=[(0.0, 0.0, 1.0)] * n,
        uvs=[(0.0, 0.0)] * n,
        loops=loops,
    )


SQUARE = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]


def test_quad_fan_triangulation() -> None:
    mesh = make_mesh(SQUARE, [0, 1, 2, 3, SENTINEL])
    assert mesh.loop_count == 1
    assert list(mesh.iter_loops()) == [(0, 1, 2, 3)]
    assert mesh.triangles == [0, 1, 2, 0, 2, 3]
    assert mesh.triangle_count == 2


def test_multiple_loops_are_triangulated_independently() -> None:
    pentagon = SQUARE + [(0.5, 1.5, 0.0)]
    mesh = make_mesh(pentagon, [0, 1, 2, 4, 3, SENTINEL, 0, 1, 2, SENTINEL])
    assert mesh.loop_count == 2
    assert mesh.triangles == [0, 1, 2, 0, 2, 4, 0, 4, 3, 0, 1, 2]
    assert mesh.triangle_count == 4


def test_render_buffers_are_flat() -> None:
    mesh = make_mesh(SQUARE, [0, 1, 2, 3, SENTINEL])
    buffers = mesh.render_buffers()
    assert len(buffers.vertices) == 12
    assert len(buffers.normals) == 12
    assert len(buffers.uvs) == 8
    assert buffers.vertices[3:6] == [1.0, 0.0, 0.0]
    assert buffers.indices == mesh.triangles


def test_bounds_ignore_unreferenced_vertices() -> None:
    vertices = SQUARE + [(10.0, 10.0, 10.0)]
    mesh = make_mesh(vertices, [0, 1, 2, 3, SENTINEL])
    lo, hi = mesh.bounds()
    assert lo == (0.0, 0.0, 0.0)
    assert hi == (1.0, 1.0, 0.0)


def test_empty_mesh() -> None:
    mesh = PolygonMesh.empty()
    assert mesh.is_empty
    assert mesh.loop_count == 0
    assert mesh.triangles == []
    assert mesh.bounds() == ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    mesh.validate()


def test_inputs_are_stored_as_tuples() -> None:
    vertices = [list(p) for p in SQUARE]
    mesh = make_mesh(vertices, [0, 1, 2, 3, SENTINEL])
    vertices[0][0] = 99.0
    assert mesh.vertices[0] == (0.0, 0.0, 0.0)
    assert isinstance(mesh.loops, tuple)


def test_mismatched_lengths_raise() -> None:
    with pytest.raises(ValueError):
        PolygonMesh(vertices=SQUARE, normals=[(0.0, 0.0, 1.0)], uvs=[(0.0, 0.0)] * 4, loops=[])


@pytest.mark.parametrize(
    "loops",
    [
        [0, 1, 2, 3],  # missing terminal sentinel
        [0, 1, SENTINEL],  # loop shorter than three
        [0, 1, 7, SENTINEL],  # index out of range
        [0, 1, 2, SENTINEL, SENTINEL],  # empty loop
    ],
)
def test_validate_rejects_malformed_streams(loops) -> None:
    mesh = make_mesh(SQUARE, loops)
    with pytest.raises(ValueError):
        mesh.validate()


def test_distinct_positions() -> None:
    duplicated = SQUARE + [(0.0, 0.0, 0.0)]
    mesh = make_mesh(duplicated, [4, 1, 2, 3, SENTINEL, 0, 1, 2, SENTINEL])
    assert len(mesh.distinct_positions()) == 4


def test_loop_normal_follows_winding() -> None:
    assert loop_normal(SQUARE) == pytest.approx((0.0, 0.0, 1.0))
    assert loop_normal(list(reversed(SQUARE))) == pytest.approx((0.0, 0.0, -1.0))


def test_compute_vertex_normals() -> None:
    normals = compute_vertex_normals(SQUARE + [(5.0, 5.0, 5.0)], [0, 1, 2, 0, 2, 3])
    for n in normals[:4]:
        assert n == pytest.approx((0.0, 0.0, 1.0))
    # Unreferenced vertex
    assert normals[4] == (0.0, 0.0, 0.0)
