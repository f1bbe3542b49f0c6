"""
Polygon mesh archive serialization.

This module saves and loads polygon meshes to/from disk using
compressed NumPy archives (``.npz``).  A mesh is stored as its vertex,
normal and texture coordinate arrays together with the sentinel
terminated loop stream and the bounding box.  The loop stream is the
only non‑derived polygon data and round‑trips unchanged; triangles are
not stored since they are regenerated from the loops.

Vertex data is written as ``float64`` so that a saved mesh reloads
bit‑identical and can be split again with the same results.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .polygon_mesh import PolygonMesh

REQUIRED_KEYS = {"vertices", "normals", "uvs", "loops", "bbox_min", "bbox_max"}


def save_polygon_mesh(path: Path, mesh: PolygonMesh) -> None:
    """Write a polygon mesh to a compressed ``.npz`` file.

    Args:
        path: Destination file path.  Parent directories will not be
            created; callers should ensure the directory exists.
        mesh: The mesh to store.
    """
    # Arrays are reshaped to (N, 3) / (N, 2) even when empty so the
    # archive always has a consistent layout.
    vertices_arr = np.array(mesh.vertices, dtype=np.float64).reshape(-1, 3)
    normals_arr = np.array(mesh.normals, dtype=np.float64).reshape(-1, 3)
    uvs_arr = np.array(mesh.uvs, dtype=np.float64).reshape(-1, 2)
    # int32 keeps the negative sentinel representable
    loops_arr = np.array(mesh.loops, dtype=np.int32)
    bbox_min, bbox_max = mesh.bounds()
    np.savez_compressed(
        path,
        vertices=vertices_arr,
        normals=normals_arr,
        uvs=uvs_arr,
        loops=loops_arr,
        bbox_min=np.array(bbox_min, dtype=np.float64),
        bbox_max=np.array(bbox_max, dtype=np.float64),
    )


def load_polygon_mesh(path: Path) -> PolygonMesh:
    """Load a polygon mesh from a compressed ``.npz`` file.

    Args:
        path: File path to the ``.npz`` archive.

    Returns:
        PolygonMesh: The stored mesh.

    Raises:
        FileNotFoundError: If the specified path does not exist.
        ValueError: If the archive lacks expected fields or holds an
            invalid loop stream.
    """
    if not path.exists():
        raise FileNotFoundError(f"Mesh archive not found: {path}")
    with np.load(path, allow_pickle=False) as data:
        if not REQUIRED_KEYS.issubset(data.files):
            missing = REQUIRED_KEYS - set(data.files)
            raise ValueError(f"Mesh archive is missing fields: {missing}")
        vertices = data["vertices"].astype(np.float64).reshape(-1, 3).tolist()
        normals = data["normals"].astype(np.float64).reshape(-1, 3).tolist()
        uvs = data["uvs"].astype(np.float64).reshape(-1, 2).tolist()
        loops = data["loops"].astype(np.int64).reshape(-1).tolist()
    mesh = PolygonMesh(vertices=vertices, normals=normals, uvs=uvs, loops=loops)
    mesh.validate()
    return mesh
