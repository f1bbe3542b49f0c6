"""
Tests for saving and loading polygon mesh archives.
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

# Make the backend package importable when running tests directly via pytest
sys.path.append(str(Path(__file__).resolve().parents[1]))

from fracture.services.mesh_cache import load_polygon_mesh, save_polygon_mesh
from fracture.services.mesh_split import split_mesh
from fracture.services.planes import plane_from_normal_and_point
from fracture.services.polygon_mesh import PolygonMesh
from fracture.services.primitives import box_polygon_mesh


def test_split_result_reloads_identically(tmp_path: Path) -> None:
    plane = plane_from_normal_and_point((0.2, 0.7, -0.4), (0.1, 0.0, 0.05))
    below, _ = split_mesh(box_polygon_mesh((2.0, 2.0, 2.0)), plane)
    path = tmp_path / "below.npz"
    save_polygon_mesh(path, below)
    loaded = load_polygon_mesh(path)
    assert loaded == below
    assert loaded.bounds() == below.bounds()
    # A reloaded mesh splits exactly like the in-memory one
    second = plane_from_normal_and_point((1.0, 0.0, 0.0), (-0.5, 0.0, 0.0))
    assert split_mesh(loaded, second) == split_mesh(below, second)


def test_stored_bounding_box(tmp_path: Path) -> None:
    path = tmp_path / "box.npz"
    save_polygon_mesh(path, box_polygon_mesh((2.0, 4.0, 6.0)))
    with np.load(path) as data:
        assert data["bbox_min"].tolist() == [-1.0, -2.0, -3.0]
        assert data["bbox_max"].tolist() == [1.0, 2.0, 3.0]
        assert data["loops"].dtype == np.int32


def test_empty_mesh_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "empty.npz"
    save_polygon_mesh(path, PolygonMesh.empty())
    assert load_polygon_mesh(path) == PolygonMesh.empty()


def test_missing_archive_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_polygon_mesh(tmp_path / "nope.npz")


def test_incomplete_archive_raises(tmp_path: Path) -> None:
    path = tmp_path / "partial.npz"
    np.savez_compressed(path, vertices=np.zeros((3, 3)))
    with pytest.raises(ValueError):
        load_polygon_mesh(path)


def test_invalid_loop_stream_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.npz"
    np.savez_compressed(
        path,
        vertices=np.zeros((3, 3)),
        normals=np.zeros((3, 3)),
        uvs=np.zeros((3, 2)),
        loops=np.array([0, 1, 5, -1], dtype=np.int32),
        bbox_min=np.zeros(3),
        bbox_max=np.zeros(3),
    )
    with pytest.raises(ValueError):
        load_polygon_mesh(path)
