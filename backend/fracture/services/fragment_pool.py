"""
Fracture fragments and their reusable pool.

A ``Fragment`` bundles a polygon mesh with the rigid body attributes
the physics integration reads and writes (mass, velocity, angular
velocity, drag) and the material parameters that drive fracturing.

Cascading fractures create many short lived fragments, so they are
drawn from a ``FragmentPool``: a free list of pre‑allocated instances
that is filled lazily on first use.  When the free list is empty a
fresh fragment is allocated instead.  Released fragments are reset
(empty mesh, default body, deactivated) before going back on the
list.  The pool is plain mutable state without locking; it must only
be used from one logical thread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .planes import Vec3
from .polygon_mesh import PolygonMesh

logger = logging.getLogger(__name__)

# Number of fragments pre‑allocated when the pool is first used.
POOL_SIZE: int = 1 << 11


@dataclass
class FractureParams:
    """Material parameters controlling fracture.

    Attributes:
        mean_fault_distance: Average distance between fault points.
        fracture_energy: Energy per unit area required to fracture.
        surface_energy: Energy per unit area released by fracturing.
        fragment_min_mass: Fragments lighter than this stop fracturing.
        min_fracture_radius: Impacts without enough energy to bisect a
            sphere of this radius are ignored.  A computational short
            cut rather than a physical quantity.
    """

    mean_fault_distance: float = 0.1
    fracture_energy: float = 10.0
    surface_energy: float = 0.0
    fragment_min_mass: float = 0.1
    min_fracture_radius: float = 0.0

    def __post_init__(self) -> None:
        for name in (
            "mean_fault_distance",
            "fracture_energy",
            "surface_energy",
            "fragment_min_mass",
            "min_fracture_radius",
        ):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} must be non-negative")


@dataclass
class RigidBodyState:
    """Rigid body attributes shared with the physics integration."""

    mass: float = 1.0
    velocity: Vec3 = (0.0, 0.0, 0.0)
    angular_velocity: Vec3 = (0.0, 0.0, 0.0)
    drag: float = 0.0


@dataclass
class Fragment:
    """A fracturable body: mesh, rigid body state and fracture parameters."""

    name: str = "Fragment"
    mesh: PolygonMesh = field(default_factory=PolygonMesh.empty)
    body: RigidBodyState = field(default_factory=RigidBodyState)
    params: FractureParams = field(default_factory=FractureParams)
    active: bool = False
    # Cleared permanently once the fragment drops below the minimum mass
    fracture_enabled: bool = True

    def bounds(self):
        return self.mesh.bounds()

    def size(self) -> Vec3:
        lo, hi = self.mesh.bounds()
        return (hi[0] - lo[0], hi[1] - lo[1], hi[2] - lo[2])

    def copy_params_from(self, other: "Fragment") -> None:
        self.params = replace(other.params)

    def reset(self) -> None:
        self.mesh = PolygonMesh.empty()
        self.body = RigidBodyState()
        self.params = FractureParams()
        self.active = False
        self.fracture_enabled = True


class FragmentPool:
    """Fixed capacity free list of :class:`Fragment` instances.

    The free list is created on the first call to :meth:`acquire`.
    """

    def __init__(self, capacity: int = POOL_SIZE) -> None:
        if capacity < 0:
            raise ValueError("pool capacity must be non-negative")
        self.capacity = capacity
        self._free: Optional[List[Fragment]] = None
        self.fresh_allocations = 0

    @property
    def initialized(self) -> bool:
        return self._free is not None

    @property
    def free_count(self) -> int:
        return len(self._free) if self._free is not None else 0

    def _initialize(self) -> None:
        self._free = [Fragment(name=f"Fragment {i}") for i in range(self.capacity)]
        logger.debug("FragmentPool initialised with %d fragments", self.capacity)

    def acquire(self) -> Fragment:
        """Pop a free fragment, or allocate a new one when none is left."""
        if self._free is None:
            self._initialize()
        if self._free:
            return self._free.pop()
        self.fresh_allocations += 1
        return Fragment(name=f"Fragment +{self.fresh_allocations}")

    def release(self, fragment: Fragment) -> None:
        """Reset ``fragment`` and return it to the free list.

        Fragments beyond the pool capacity are dropped.
        """
        fragment.reset()
        if self._free is None:
            self._initialize()
        if len(self._free) < self.capacity:
            self._free.append(fragment)


__all__ = [
    "POOL_SIZE",
    "FractureParams",
    "RigidBodyState",
    "Fragment",
    "FragmentPool",
]
