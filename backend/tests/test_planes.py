"""
Tests for plane construction and the vector helpers in planes.py.
"""

from __future__ import annotations

import sys
from pathlib import Path
import math
import pytest

# Make the backend package importable when running tests directly via pytest
sys.path.append(str(Path(__file__).resolve().parents[1]))

from fracture.services.planes import (
    Plane,
    cross,
    dot,
    plane_basis,
    plane_from_normal_and_distance,
    plane_from_normal_and_point,
    plane_from_points,
    project_to_basis,
    signed_angle,
)


def test_plane_from_normal_and_point_normalises() -> None:
    plane = plane_from_normal_and_point((0.0, 0.0, 2.0), (5.0, -1.0, 3.0))
    assert plane.normal == (0.0, 0.0, 1.0)
    assert plane.distance == pytest.approx(-3.0)
    assert plane.signed_distance((0.0, 0.0, 3.0)) == pytest.approx(0.0)
    assert plane.signed_distance((0.0, 0.0, 4.5)) == pytest.approx(1.5)
    assert plane.signed_distance((0.0, 0.0, 1.0)) == pytest.approx(-2.0)


def test_plane_from_normal_and_distance() -> None:
    plane = plane_from_normal_and_distance((3.0, 0.0, 0.0), -2.0)
    assert plane.normal == (1.0, 0.0, 0.0)
    assert plane.signed_distance((2.0, 7.0, -1.0)) == pytest.approx(0.0)


@pytest.mark.parametrize("factory", [plane_from_normal_and_point, plane_from_normal_and_distance])
def test_zero_normal_is_rejected(factory) -> None:
    other = (0.0, 0.0, 0.0) if factory is plane_from_normal_and_point else 0.0
    with pytest.raises(ValueError):
        factory((0.0, 0.0, 0.0), other)


def test_plane_from_points_winding() -> None:
    plane = plane_from_points((0.0, 0.0, 1.0), (1.0, 0.0, 1.0), (0.0, 1.0, 1.0))
    assert plane.normal == pytest.approx((0.0, 0.0, 1.0))
    assert plane.distance == pytest.approx(-1.0)
    # Collinear points give a zero normal
    degenerate = plane_from_points((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (2.0, 0.0, 0.0))
    assert degenerate.normal == (0.0, 0.0, 0.0)


@pytest.mark.parametrize(
    "normal",
    [
        (0.0, 0.0, 1.0),
        (1.0, 0.0, 0.0),
        (0.0, 1.0, 0.0),
        (0.0, -1.0, 0.0),
        (0.57735026919, 0.57735026919, 0.57735026919),
    ],
)
def test_plane_basis_is_orthonormal(normal: tuple) -> None:
    u, v = plane_basis(normal)
    assert dot(u, u) == pytest.approx(1.0)
    assert dot(v, v) == pytest.approx(1.0)
    assert dot(u, v) == pytest.approx(0.0, abs=1e-12)
    assert dot(u, normal) == pytest.approx(0.0, abs=1e-9)
    assert dot(v, normal) == pytest.approx(0.0, abs=1e-9)
    # u × v points against the normal for this construction
    assert dot(cross(u, v), normal) == pytest.approx(-1.0, abs=1e-9)


def test_plane_basis_falls_back_when_normal_is_up() -> None:
    u, v = plane_basis((0.0, 1.0, 0.0))
    assert u == pytest.approx((0.0, 0.0, -1.0))
    assert v == pytest.approx((1.0, 0.0, 0.0))


def test_project_to_basis() -> None:
    u, v = (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)
    assert project_to_basis((2.0, -3.0, 9.0), u, v) == (2.0, -3.0)


def test_signed_angle_sign_follows_axis() -> None:
    x, y, z = (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)
    assert math.isclose(signed_angle(x, y, z), math.pi / 2)
    assert math.isclose(signed_angle(y, x, z), -math.pi / 2)
    assert math.isclose(signed_angle(x, y, (0.0, 0.0, -1.0)), -math.pi / 2)
    assert math.isclose(abs(signed_angle(x, (-1.0, 0.0, 0.0), z)), math.pi)


def test_plane_is_hashable_value() -> None:
    a = Plane(normal=(0.0, 0.0, 1.0), distance=0.5)
    b = Plane(normal=(0.0, 0.0, 1.0), distance=0.5)
    assert a == b
    assert len({a, b}) == 1
