"""
Tests for fragments, their parameters and the fragment pool.
"""

from __future__ import annotations

import sys
from pathlib import Path
import pytest

# Make the backend package importable when running tests directly via pytest
sys.path.append(str(Path(__file__).resolve().parents[1]))

from fracture.services.fragment_pool import (
    POOL_SIZE,
    Fragment,
    FractureParams,
    FragmentPool,
    RigidBodyState,
)
from fracture.services.primitives import box_polygon_mesh


def test_pool_is_initialised_lazily() -> None:
    pool = FragmentPool()
    assert pool.capacity == POOL_SIZE == 2048
    assert not pool.initialized
    assert pool.free_count == 0
    fragment = pool.acquire()
    assert pool.initialized
    assert pool.free_count == POOL_SIZE - 1
    assert not fragment.active
    assert fragment.mesh.is_empty


def test_empty_pool_allocates_fresh_fragments() -> None:
    pool = FragmentPool(capacity=1)
    first = pool.acquire()
    second = pool.acquire()
    assert first is not second
    assert pool.fresh_allocations == 1
    assert pool.free_count == 0


def test_release_resets_and_respects_capacity() -> None:
    pool = FragmentPool(capacity=1)
    a = pool.acquire()
    b = pool.acquire()
    a.mesh = box_polygon_mesh()
    a.body = RigidBodyState(mass=3.0)
    a.active = True
    a.fracture_enabled = False

    pool.release(a)
    assert pool.free_count == 1
    assert a.mesh.is_empty
    assert a.body == RigidBodyState()
    assert not a.active
    assert a.fracture_enabled

    # The free list is full; the extra fragment is dropped
    pool.release(b)
    assert pool.free_count == 1
    assert pool.acquire() is a


def test_negative_capacity_rejected() -> None:
    with pytest.raises(ValueError):
        FragmentPool(capacity=-1)


@pytest.mark.parametrize(
    "field",
    ["mean_fault_distance", "fracture_energy", "surface_energy", "fragment_min_mass", "min_fracture_radius"],
)
def test_negative_params_rejected(field: str) -> None:
    with pytest.raises(ValueError):
        FractureParams(**{field: -1.0})


def test_copy_params_is_independent() -> None:
    source = Fragment(params=FractureParams(mean_fault_distance=0.3, min_fracture_radius=0.2))
    target = Fragment()
    target.copy_params_from(source)
    assert target.params == source.params
    target.params.fracture_energy = 99.0
    assert source.params.fracture_energy == 10.0


def test_fragment_size_and_bounds() -> None:
    fragment = Fragment(mesh=box_polygon_mesh((2.0, 4.0, 6.0), (1.0, 0.0, 0.0)))
    assert fragment.size() == (2.0, 4.0, 6.0)
    lo, hi = fragment.bounds()
    assert lo == (0.0, -2.0, -3.0)
    assert hi == (2.0, 2.0, 3.0)
