"""
Planes and small vector helpers used by the fracture core.

This module provides a pure‑Python representation of a cutting plane
together with the tuple based vector arithmetic the rest of the
geometry code relies on.  A ``Plane`` stores a unit normal and a
signed distance from the origin, so that the signed distance of any
point ``p`` is ``dot(normal, p) + distance``.  Points with a positive
distance lie on the side the normal points towards.

Besides classification, planes are used to build a local 2D frame:
``plane_basis`` returns two orthonormal axes (u, v) spanning the plane
which the ngon builder and the mesh splitter use to project vertices
and generate texture coordinates.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

Vec3 = Tuple[float, float, float]
Vec2 = Tuple[float, float]

# World axes used to derive a plane basis.  The second axis is only used
# when the plane normal is close to parallel with the first.
UP: Vec3 = (0.0, 1.0, 0.0)
LEFT: Vec3 = (-1.0, 0.0, 0.0)


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two 3D vectors."""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def sub(a: Vec3, b: Vec3) -> Vec3:
    """Subtract two 3D vectors (a - b)."""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def add(a: Vec3, b: Vec3) -> Vec3:
    """Add two 3D vectors."""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def scale(a: Vec3, s: float) -> Vec3:
    """Scale a 3D vector by ``s``."""
    return (a[0] * s, a[1] * s, a[2] * s)


def mul(a: Vec3, b: Vec3) -> Vec3:
    """Component‑wise product of two 3D vectors."""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Cross product ``a × b``."""
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length_sq(a: Vec3) -> float:
    return dot(a, a)


def normalize(a: Vec3) -> Vec3:
    """Return ``a`` scaled to unit length, or the zero vector if ``a`` is degenerate."""
    mag = math.sqrt(dot(a, a))
    if mag < 1e-15:
        return (0.0, 0.0, 0.0)
    return (a[0] / mag, a[1] / mag, a[2] / mag)


def lerp(a: Tuple[float, ...], b: Tuple[float, ...], t: float) -> Tuple[float, ...]:
    """Linearly interpolate two equally sized tuples: ``a + (b - a) * t``."""
    return tuple(x + (y - x) * t for x, y in zip(a, b))


def signed_angle(a: Vec3, b: Vec3, axis: Vec3) -> float:
    """Signed angle in radians from ``a`` to ``b`` measured around ``axis``.

    The result lies in ``[-pi, pi]`` and is positive when the rotation
    from ``a`` to ``b`` is counter‑clockwise about ``axis``.  Both
    vectors are expected to lie (approximately) in the plane
    perpendicular to ``axis``.
    """
    return math.atan2(dot(cross(a, b), axis), dot(a, b))


@dataclass(frozen=True)
class Plane:
    """Immutable plane in 3D space.

    Attributes:
        normal: Unit vector perpendicular to the plane.
        distance: Signed distance of the plane from the origin along
            ``normal``.  Points satisfying ``dot(normal, p) + distance == 0``
            lie on the plane.
    """

    normal: Vec3
    distance: float

    def signed_distance(self, p: Vec3) -> float:
        """Signed distance of ``p``; positive on the side the normal points to."""
        return dot(self.normal, p) + self.distance


def plane_from_normal_and_point(normal: Vec3, point: Vec3) -> Plane:
    """Construct a plane with the given normal passing through ``point``.

    The normal is normalised before use.

    Raises:
        ValueError: If ``normal`` has zero length.
    """
    n = normalize(normal)
    if n == (0.0, 0.0, 0.0):
        raise ValueError("plane normal must be non-zero")
    return Plane(normal=n, distance=-dot(n, point))


def plane_from_normal_and_distance(normal: Vec3, distance: float) -> Plane:
    """Construct a plane from a (possibly unnormalised) normal and a distance.

    The distance is interpreted relative to the unit normal.

    Raises:
        ValueError: If ``normal`` has zero length.
    """
    n = normalize(normal)
    if n == (0.0, 0.0, 0.0):
        raise ValueError("plane normal must be non-zero")
    return Plane(normal=n, distance=float(distance))


def plane_from_points(a: Vec3, b: Vec3, c: Vec3) -> Plane:
    """Plane through three points with normal ``normalize((b - a) × (c - a))``.

    Degenerate (collinear) input yields a zero normal; callers are
    expected to check for that case.
    """
    n = normalize(cross(sub(b, a), sub(c, a)))
    return Plane(normal=n, distance=-dot(n, a))


def plane_basis(normal: Vec3) -> Tuple[Vec3, Vec3]:
    """Return an orthonormal basis (u, v) spanning the plane with ``normal``.

    ``u`` is the world up axis crossed with the normal; when the normal
    is nearly parallel to up (``|u|² < 0.5``) the left axis is used
    instead.  ``v`` is ``u × normal``.  Both axes are normalised.
    """
    u = cross(UP, normal)
    if length_sq(u) < 0.5:
        u = cross(LEFT, normal)
    v = cross(u, normal)
    return normalize(u), normalize(v)


def project_to_basis(p: Vec3, u: Vec3, v: Vec3) -> Vec2:
    """Project a 3D point onto the 2D coordinate system spanned by ``u`` and ``v``."""
    return (dot(p, u), dot(p, v))


__all__ = [
    "Vec3",
    "Vec2",
    "Plane",
    "dot",
    "sub",
    "add",
    "scale",
    "mul",
    "cross",
    "length_sq",
    "normalize",
    "lerp",
    "signed_angle",
    "plane_from_normal_and_point",
    "plane_from_normal_and_distance",
    "plane_from_points",
    "plane_basis",
    "project_to_basis",
]
