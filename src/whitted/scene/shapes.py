"""Host-side primitive descriptions.

The set of primitives is closed: every shape is one of the ``PrimitiveKind``
variants below. Descriptions are frozen dataclasses built by the config loader
(or directly in code) and packed into the scene's Taichi storage, where all
variants share the same arrays:

    kind      point_a        point_b        point_c   radius
    SPHERE    center         -              -         radius
    PLANE     point          unit normal    -         -
    DISC      center         unit normal    -         radius
    CYLINDER  axis point     unit axis      -         radius
    TRIANGLE  v1             v2             v3        -

``validate()`` raises GeometryDegenerateCase for shapes without a well-defined
surface; the scene skips those instead of aborting the render.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Union

import numpy as np

from src.whitted.errors import GeometryDegenerateCase
from src.whitted.materials.phong import Material

Vec3 = tuple[float, float, float]

_ZERO: Vec3 = (0.0, 0.0, 0.0)

# Shortest accepted normal/axis, and smallest accepted triangle area
_MIN_LENGTH = 1e-9


class PrimitiveKind(IntEnum):
    """Enumeration of supported primitive types.

    Used for intersection dispatch in the scene queries.
    """

    SPHERE = 0
    PLANE = 1
    DISC = 2
    CYLINDER = 3
    TRIANGLE = 4


def _unit(v: Vec3, what: str) -> Vec3:
    vec = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(vec)
    if not n >= _MIN_LENGTH:
        raise GeometryDegenerateCase(f"{what} {v} has zero length")
    return tuple((vec / n).tolist())


def _check_radius(radius: float) -> None:
    if not radius > 0.0:
        raise GeometryDegenerateCase(f"radius {radius} must be positive")


@dataclass(frozen=True)
class SphereShape:
    """A sphere given by center and radius."""

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.SPHERE

    center: Vec3
    radius: float
    material: Material

    def validate(self) -> None:
        _check_radius(self.radius)

    def packed(self) -> tuple[Vec3, Vec3, Vec3, float]:
        return self.center, _ZERO, _ZERO, self.radius


@dataclass(frozen=True)
class PlaneShape:
    """An infinite plane through a point."""

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.PLANE

    point: Vec3
    normal: Vec3
    material: Material

    def validate(self) -> None:
        _unit(self.normal, "plane normal")

    def packed(self) -> tuple[Vec3, Vec3, Vec3, float]:
        return self.point, _unit(self.normal, "plane normal"), _ZERO, 0.0


@dataclass(frozen=True)
class DiscShape:
    """A flat disc: the part of a plane within radius of center."""

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.DISC

    center: Vec3
    normal: Vec3
    radius: float
    material: Material

    def validate(self) -> None:
        _unit(self.normal, "disc normal")
        _check_radius(self.radius)

    def packed(self) -> tuple[Vec3, Vec3, Vec3, float]:
        return self.center, _unit(self.normal, "disc normal"), _ZERO, self.radius


@dataclass(frozen=True)
class CylinderShape:
    """An infinite, uncapped cylinder around the line point + s * axis."""

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.CYLINDER

    point: Vec3
    axis: Vec3
    radius: float
    material: Material

    def validate(self) -> None:
        _unit(self.axis, "cylinder axis")
        _check_radius(self.radius)

    def packed(self) -> tuple[Vec3, Vec3, Vec3, float]:
        return self.point, _unit(self.axis, "cylinder axis"), _ZERO, self.radius


@dataclass(frozen=True)
class TriangleShape:
    """A triangle; its normal follows the v1 -> v2 -> v3 winding."""

    kind: ClassVar[PrimitiveKind] = PrimitiveKind.TRIANGLE

    v1: Vec3
    v2: Vec3
    v3: Vec3
    material: Material

    def validate(self) -> None:
        v1, v2, v3 = (np.asarray(v, dtype=np.float64) for v in (self.v1, self.v2, self.v3))
        if not np.linalg.norm(np.cross(v2 - v1, v3 - v1)) >= _MIN_LENGTH:
            raise GeometryDegenerateCase(
                f"triangle vertices {self.v1}, {self.v2}, {self.v3} are collinear"
            )

    def packed(self) -> tuple[Vec3, Vec3, Vec3, float]:
        return self.v1, self.v2, self.v3, 0.0


Shape = Union[SphereShape, PlaneShape, DiscShape, CylinderShape, TriangleShape]
