"""
Runtime settings for the fracture service.

Settings are read from environment variables once and cached.  Only a
handful of knobs exist; everything else is a module level constant
next to the code that uses it.

Environment variables:

- ``FRACTURE_STORAGE_DIR`` – directory holding the SQLite database and
  mesh archives (default: ``backend/storage``).
- ``FRACTURE_POOL_SIZE`` – number of pre‑allocated fragments (default 2048).
- ``FRACTURE_ELLIPSOID_SCALE`` – factor applied to the bounding box
  half extents when estimating fracture cross sections (default 1.0).
- ``FRACTURE_PLANE_TOLERANCE`` – coplanarity tolerance used when
  building ngons from triangles (default 3.16e-3).
- ``FRACTURE_DEBUG`` – when set, geometry modules emit verbose debug logs.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_STORAGE_DIR = Path(__file__).resolve().parents[1] / "storage"


class FractureSettings(BaseModel):
    """Validated service settings."""

    storage_dir: Path = Field(default=DEFAULT_STORAGE_DIR, description="Database and archive directory")
    pool_size: int = Field(default=1 << 11, ge=0, description="Pre-allocated fragment count")
    ellipsoid_scale: float = Field(default=1.0, gt=0.0, description="Scale of the bounding ellipsoid semi-axes")
    plane_tolerance: float = Field(default=3.16e-3, gt=0.0, description="Squared normal difference for coplanarity")
    debug: bool = Field(default=False, description="Verbose geometry logging")


@lru_cache(maxsize=1)
def get_settings() -> FractureSettings:
    """Build the settings from the environment (cached)."""
    values: dict = {}
    if os.getenv("FRACTURE_STORAGE_DIR"):
        values["storage_dir"] = Path(os.environ["FRACTURE_STORAGE_DIR"])
    if os.getenv("FRACTURE_POOL_SIZE"):
        values["pool_size"] = int(os.environ["FRACTURE_POOL_SIZE"])
    if os.getenv("FRACTURE_ELLIPSOID_SCALE"):
        values["ellipsoid_scale"] = float(os.environ["FRACTURE_ELLIPSOID_SCALE"])
    if os.getenv("FRACTURE_PLANE_TOLERANCE"):
        values["plane_tolerance"] = float(os.environ["FRACTURE_PLANE_TOLERANCE"])
    values["debug"] = bool(os.getenv("FRACTURE_DEBUG"))
    return FractureSettings(**values)
