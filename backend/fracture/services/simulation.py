"""
Top level fracture simulation context.

``FractureSimulation`` owns the pieces that would otherwise be global:
the fragment pool, the random generator and the controller built on
them.  It keeps track of every fragment that takes part in the
simulation and turns collision events (contact point plus energy
loss) into fracture cascades.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

import numpy as np

from ..config import get_settings
from .collisions import closest_point_on_bounds
from .fracture import FractureController, FractureReport
from .fragment_pool import Fragment, FractureParams, FragmentPool, RigidBodyState
from .planes import Vec3
from .polygon_mesh import PolygonMesh

logger = logging.getLogger(__name__)


class FractureSimulation:
    """Registry of fragments plus the controller that breaks them.

    Args:
        seed: Seed for the default ``numpy`` generator.  Ignored when
            ``rng`` is given.
        rng: Random source to use instead of a seeded generator.
        pool_size: Fragment pool capacity; defaults to the configured size.
        ellipsoid_scale: Bounding ellipsoid scale; defaults to the configured value.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng=None,
        pool_size: Optional[int] = None,
        ellipsoid_scale: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self.pool = FragmentPool(settings.pool_size if pool_size is None else pool_size)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.controller = FractureController(
            self.pool,
            self.rng,
            settings.ellipsoid_scale if ellipsoid_scale is None else ellipsoid_scale,
        )
        self.fragments: List[Fragment] = []

    def add_body(
        self,
        mesh: PolygonMesh,
        body: Optional[RigidBodyState] = None,
        params: Optional[FractureParams] = None,
        name: str = "Body",
    ) -> Fragment:
        """Register a fracturable body and return its fragment."""
        fragment = Fragment(
            name=name,
            mesh=mesh,
            body=body if body is not None else RigidBodyState(),
            params=params if params is not None else FractureParams(),
            active=True,
        )
        self.fragments.append(fragment)
        return fragment

    def fracture(self, fragment: Fragment, point: Vec3, energy: float) -> FractureReport:
        """Run a fracture cascade and register the fragments it creates."""
        report = self.controller.fracture(fragment, point, energy)
        self.fragments.extend(report.created)
        logger.info(
            "Fracture of %s: %d splits, %d fragments in simulation",
            fragment.name,
            report.splits,
            len(self.fragments),
        )
        return report

    def handle_collision(self, fragment: Fragment, contact_point: Vec3, energy_loss: float) -> Optional[FractureReport]:
        """React to a collision reported by the physics engine.

        The impact is ignored when the energy loss cannot bisect a sphere
        of the fragment's minimum fracture radius.  Otherwise the contact
        point is clamped onto the fragment's bounding box and a fracture
        cascade is started there.

        Returns:
            The fracture report, or ``None`` if the collision was ignored.
        """
        params = fragment.params
        threshold = math.pi * params.min_fracture_radius ** 2 * params.fracture_energy
        if not fragment.fracture_enabled or energy_loss < threshold:
            return None
        lo, hi = fragment.bounds()
        point = closest_point_on_bounds(lo, hi, contact_point)
        return self.fracture(fragment, point, energy_loss)

    def active_fragments(self) -> List[Fragment]:
        return [f for f in self.fragments if f.active]

    def total_mass(self) -> float:
        return math.fsum(f.body.mass for f in self.active_fragments())


__all__ = ["FractureSimulation"]
