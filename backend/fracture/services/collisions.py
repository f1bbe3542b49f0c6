"""
Collision energy helpers.

The physics engine reports collisions as masses, a relative velocity
and an impulse.  These helpers turn them into the scalar energies the
fracture controller consumes, and clamp a contact point onto a body's
bounding box.
"""

from __future__ import annotations

from typing import Optional

from .planes import Vec3, dot


def collision_energy(mass: float, relative_velocity: Vec3, other_mass: Optional[float] = None) -> float:
    """Kinetic energy available in a collision.

    Uses the reduced mass ``m0·m1 / (m0 + m1)`` when the other body is
    dynamic, or ``m0`` against a static body.

    Raises:
        ValueError: If a mass is not positive.
    """
    if mass <= 0.0 or (other_mass is not None and other_mass <= 0.0):
        raise ValueError("masses must be positive")
    speed_sq = dot(relative_velocity, relative_velocity)
    if other_mass is not None:
        return 0.5 * (mass * other_mass) / (mass + other_mass) * speed_sq
    return 0.5 * mass * speed_sq


def collision_energy_loss(mass: float, impulse: Vec3, other_mass: Optional[float] = None) -> float:
    """Energy lost in a collision given the impulse exchanged.

    ``½·(m0 + m1)/(m0·m1)·|J|²`` for two dynamic bodies, ``½·|J|²/m0``
    against a static body.

    Raises:
        ValueError: If a mass is not positive.
    """
    if mass <= 0.0 or (other_mass is not None and other_mass <= 0.0):
        raise ValueError("masses must be positive")
    impulse_sq = dot(impulse, impulse)
    if other_mass is not None:
        return 0.5 * (mass + other_mass) / (mass * other_mass) * impulse_sq
    return 0.5 / mass * impulse_sq


def closest_point_on_bounds(bounds_min: Vec3, bounds_max: Vec3, point: Vec3) -> Vec3:
    """Clamp ``point`` into the axis aligned box ``[bounds_min, bounds_max]``."""
    return (
        min(max(point[0], bounds_min[0]), bounds_max[0]),
        min(max(point[1], bounds_min[1]), bounds_max[1]),
        min(max(point[2], bounds_min[2]), bounds_max[2]),
    )
