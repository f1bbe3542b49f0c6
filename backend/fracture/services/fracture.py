"""
Recursive fracture control.

``FractureController.fracture`` decides whether and where a fragment
breaks after an impact, drives :func:`split_mesh`, and keeps breaking
the resulting pieces until energy or mass runs out.

One fracture step works as follows:

1. Stop when the fragment is lighter than its minimum mass (fracturing
   is then disabled for good) or the energy cannot bisect a sphere of
   ``min_fracture_radius``.
2. Sample a cutting plane.  The normal is a random unit vector scaled
   by the squared bounding box extents, which favours cuts across the
   long axes.  The plane passes through the impact point offset by a
   random fault distance drawn from the nearest‑neighbour distribution
   of a 3D Poisson point process.
3. Estimate the cross section area as the section of the bounding
   ellipsoid by the plane.  Stop if the plane misses the ellipsoid or
   the energy does not exceed ``fracture_energy × area``.
4. Split the mesh.  The child fragment is taken from the pool; on
   success mass is shared in proportion to bounding box volume and the
   remaining energy ``(energy − fracture_energy + surface_energy × area) / 2``
   is handed to both pieces.

The recursion is run on an explicit stack.  The child is processed
(with everything it breaks into) before the parent tries again, which
is the same depth‑first order a recursive implementation would give.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from ..config import get_settings
from .fragment_pool import Fragment, FragmentPool, RigidBodyState
from .mesh_split import split_mesh
from .planes import Plane, Vec3, add, mul, normalize, plane_from_normal_and_point, scale

logger = logging.getLogger(__name__)

# 1 / Gamma(4/3): makes ``mean_fault_distance`` the mean sampled distance.
FAULT_DISTANCE_SCALE: float = 1.119846521722185685

_ZERO: Vec3 = (0.0, 0.0, 0.0)


@dataclass
class FractureReport:
    """Summary of one fracture cascade.

    Attributes:
        created: Fragments created by successful splits, in creation order.
        splits: Number of successful splits.
        failed_splits: Splits attempted but rejected by the mesh splitter.
        disabled: Fragments whose fracturing was disabled by the mass floor.
        steps: Number of fracture steps evaluated.
    """

    created: List[Fragment] = field(default_factory=list)
    splits: int = 0
    failed_splits: int = 0
    disabled: int = 0
    steps: int = 0


def random_unit_vector(rng) -> Vec3:
    """Uniformly distributed point on the unit sphere."""
    while True:
        x, y, z = (float(c) for c in rng.normal(size=3))
        direction = normalize((x, y, z))
        if direction != _ZERO:
            return direction


def sample_fault_distance(rng, mean_fault_distance: float) -> float:
    """Distance to the nearest fault point.

    Fault points form a 3D Poisson process, so the nearest one lies at
    ``r`` with ``CDF(r) = 1 − exp(−rho·4/3·pi·r³)``.  Inverting the CDF
    gives ``r(P) ∝ (−ln P)^(1/3)``.
    """
    p = 1.0 - float(rng.random())
    return mean_fault_distance * max(0.0, -math.log(p)) ** (1.0 / 3.0) * FAULT_DISTANCE_SCALE


def sample_fracture_normal(rng, extents: Vec3) -> Vec3:
    """Random plane normal biased towards the long axes of ``extents``."""
    direction = random_unit_vector(rng)
    normal = normalize(mul(direction, mul(extents, extents)))
    return normal if normal != _ZERO else direction


def cross_section_area(plane: Plane, center: Vec3, extents: Vec3) -> float:
    """Area of the section of an ellipsoid by ``plane``.

    The ellipsoid is centred on ``center`` with semi‑axes ``extents``.
    For a unit normal ``n`` and ``h² = Σ (eᵢ·nᵢ)²`` the section is an
    ellipse of area ``pi·a·b·c / h · (1 − δ²/h²)`` where ``δ`` is the
    signed distance of the centre to the plane.  The falloff term is 1
    through the centre and 0 where the plane touches the ellipsoid.

    Returns:
        The area, or 0.0 when the plane misses the ellipsoid or the
        ellipsoid is flat.
    """
    h_sq = sum((e * n) ** 2 for e, n in zip(extents, plane.normal))
    if h_sq <= 0.0:
        return 0.0
    delta = plane.signed_distance(center)
    falloff = 1.0 - delta * delta / h_sq
    if falloff <= 0.0:
        return 0.0
    return math.pi * extents[0] * extents[1] * extents[2] / math.sqrt(h_sq) * falloff


def mass_fraction(kept_size: Vec3, other_size: Vec3) -> float:
    """Share of the mass kept by the first fragment.

    ``1 / (1 + ratio)`` with ``ratio`` the product of the per axis
    bounding box size ratios.  Axes with zero size are ignored.
    """
    ratio = 1.0
    for kept, other in zip(kept_size, other_size):
        if kept > 0.0:
            ratio *= other / kept
    return 1.0 / (1.0 + ratio)


def partition_mass(mass: float, fraction: float) -> Tuple[float, float]:
    """Split ``mass`` into ``(kept, given)`` with ``kept ≈ mass·fraction``.

    The larger share is computed by multiplication and the smaller one
    by subtraction, which is exact in floating point, so
    ``kept + given == mass`` holds exactly.
    """
    if fraction >= 0.5:
        kept = mass * fraction
        return kept, mass - kept
    given = mass * (1.0 - fraction)
    return mass - given, given


class FractureController:
    """Drives recursive fracturing of fragments.

    Args:
        pool: Fragment pool providing the second half of every split.
        rng: Random source exposing ``normal(size=3)`` and ``random()``;
            a ``numpy.random.Generator`` by default.
        ellipsoid_scale: Factor applied to the bounding box half extents
            to obtain the semi‑axes of the bounding ellipsoid.
    """

    def __init__(self, pool: FragmentPool, rng=None, ellipsoid_scale: float = 1.0) -> None:
        self.pool = pool
        self.rng = rng if rng is not None else np.random.default_rng()
        self.ellipsoid_scale = ellipsoid_scale

    def fracture(self, fragment: Fragment, point: Vec3, energy: float) -> FractureReport:
        """Fracture ``fragment`` at ``point`` with ``energy`` and all resulting pieces.

        Returns:
            FractureReport: New fragments and counters for the cascade.
        """
        report = FractureReport()
        stack: List[Tuple[Fragment, Vec3, float]] = [(fragment, point, energy)]
        while stack:
            current, at, budget = stack.pop()
            result = self._step(current, at, budget, report)
            if result is None:
                continue
            child, child_energy = result
            # LIFO: the child cascade runs before the parent tries again
            stack.append((current, at, child_energy))
            stack.append((child, at, child_energy))
        if get_settings().debug:
            logger.debug(
                "fracture: steps=%d splits=%d failed=%d disabled=%d",
                report.steps,
                report.splits,
                report.failed_splits,
                report.disabled,
            )
        return report

    def _step(
        self,
        fragment: Fragment,
        point: Vec3,
        energy: float,
        report: FractureReport,
    ) -> Optional[Tuple[Fragment, float]]:
        report.steps += 1
        params = fragment.params
        if not fragment.fracture_enabled:
            return None
        if fragment.body.mass < params.fragment_min_mass:
            fragment.fracture_enabled = False
            report.disabled += 1
            return None
        if energy < math.pi * params.min_fracture_radius ** 2 * params.fracture_energy:
            return None

        lo, hi = fragment.mesh.bounds()
        center = scale(add(lo, hi), 0.5)
        extents = tuple((high - low) * 0.5 * self.ellipsoid_scale for low, high in zip(lo, hi))

        normal = sample_fracture_normal(self.rng, extents)
        offset = random_unit_vector(self.rng)
        origin = add(point, scale(offset, sample_fault_distance(self.rng, params.mean_fault_distance)))
        plane = plane_from_normal_and_point(normal, origin)

        area = cross_section_area(plane, center, extents)
        if area <= 0.0 or energy <= params.fracture_energy * area:
            return None

        child_energy = (energy - params.fracture_energy + params.surface_energy * area) * 0.5

        other = self.pool.acquire()
        halves = split_mesh(fragment.mesh, plane)
        if halves is None:
            self.pool.release(other)
            report.failed_splits += 1
            return None

        below, above = halves
        fragment.mesh = below
        other.mesh = above
        other.active = True
        other.fracture_enabled = True
        other.copy_params_from(fragment)

        kept, given = partition_mass(fragment.body.mass, mass_fraction(fragment.size(), other.size()))
        body = fragment.body
        body.mass = kept
        other.body = RigidBodyState(
            mass=given,
            velocity=body.velocity,
            angular_velocity=body.angular_velocity,
            drag=body.drag,
        )

        report.splits += 1
        report.created.append(other)
        return other, child_energy


__all__ = [
    "FAULT_DISTANCE_SCALE",
    "FractureReport",
    "FractureController",
    "random_unit_vector",
    "sample_fault_distance",
    "sample_fracture_normal",
    "cross_section_area",
    "mass_fraction",
    "partition_mass",
]
