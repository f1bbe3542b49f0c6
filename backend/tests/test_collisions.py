"""
Tests for collision energy helpers and the collision entry point of
the fracture simulation.
"""

from __future__ import annotations

import sys
from pathlib import Path
import math

import numpy as np
import pytest

# Make the backend package importable when running tests directly via pytest
sys.path.append(str(Path(__file__).resolve().parents[1]))

from fracture.services.collisions import (
    closest_point_on_bounds,
    collision_energy,
    collision_energy_loss,
)
from fracture.services.fragment_pool import FractureParams, RigidBodyState
from fracture.services.primitives import box_polygon_mesh
from fracture.services.simulation import FractureSimulation


class FixedRng:
    """Always samples the x axis and a zero fault distance."""

    def normal(self, size=3):
        return np.array([1.0, 0.0, 0.0])

    def random(self):
        return 0.0


def test_collision_energy_static_and_dynamic() -> None:
    assert collision_energy(2.0, (3.0, 0.0, 0.0)) == pytest.approx(9.0)
    # Reduced mass of two equal bodies is half their mass
    assert collision_energy(2.0, (3.0, 0.0, 0.0), other_mass=2.0) == pytest.approx(4.5)


def test_collision_energy_loss_static_and_dynamic() -> None:
    assert collision_energy_loss(2.0, (0.0, 2.0, 0.0)) == pytest.approx(1.0)
    assert collision_energy_loss(1.0, (0.0, 0.0, 2.0), other_mass=1.0) == pytest.approx(4.0)


@pytest.mark.parametrize("func", [collision_energy, collision_energy_loss])
@pytest.mark.parametrize("mass, other", [(0.0, None), (-1.0, None), (1.0, 0.0)])
def test_non_positive_mass_raises(func, mass, other) -> None:
    with pytest.raises(ValueError):
        func(mass, (1.0, 0.0, 0.0), other)


def test_closest_point_on_bounds() -> None:
    lo, hi = (-1.0, -1.0, -1.0), (1.0, 1.0, 1.0)
    assert closest_point_on_bounds(lo, hi, (0.5, 0.0, -0.5)) == (0.5, 0.0, -0.5)
    assert closest_point_on_bounds(lo, hi, (5.0, -3.0, 0.2)) == (1.0, -1.0, 0.2)


def make_simulation() -> FractureSimulation:
    return FractureSimulation(rng=FixedRng(), pool_size=4, ellipsoid_scale=1.0)


def test_weak_collision_is_ignored() -> None:
    sim = make_simulation()
    params = FractureParams(fracture_energy=10.0, min_fracture_radius=1.0)
    body = sim.add_body(box_polygon_mesh((2.0, 2.0, 2.0)), RigidBodyState(mass=10.0), params)
    # Threshold is pi * r^2 * fracture_energy ≈ 31.4
    assert sim.handle_collision(body, (0.0, 0.0, 5.0), 10.0) is None
    assert len(sim.fragments) == 1


def test_collision_fractures_at_clamped_contact() -> None:
    sim = make_simulation()
    params = FractureParams(fracture_energy=10.0, min_fracture_radius=1.0)
    body = sim.add_body(box_polygon_mesh((2.0, 2.0, 2.0)), RigidBodyState(mass=10.0), params)

    report = sim.handle_collision(body, (0.0, 0.0, 5.0), 50.0)

    assert report is not None
    assert report.splits == 1
    assert len(sim.fragments) == 2
    assert len(sim.active_fragments()) == 2
    assert sim.total_mass() == pytest.approx(10.0)
    # Remaining energy (50 - 10) / 2 = 20 is below the threshold
    assert all(f.body.mass == 5.0 for f in sim.fragments)


def test_disabled_fragment_ignores_collisions() -> None:
    sim = make_simulation()
    body = sim.add_body(box_polygon_mesh((2.0, 2.0, 2.0)))
    body.fracture_enabled = False
    assert sim.handle_collision(body, (0.0, 0.0, 0.0), 1e6) is None


def test_seeded_simulations_agree() -> None:
    def masses(seed: int):
        sim = FractureSimulation(seed=seed, pool_size=8)
        body = sim.add_body(
            box_polygon_mesh((2.0, 1.0, 1.0)),
            RigidBodyState(mass=4.0),
            FractureParams(fracture_energy=5.0, fragment_min_mass=0.2),
        )
        sim.fracture(body, (0.0, 0.0, 0.0), 80.0)
        return sorted(f.body.mass for f in sim.fragments)

    assert masses(3) == masses(3)
    assert math.fsum(masses(3)) == pytest.approx(4.0)
