"""Phong material model with procedural checkerboard texturing.

This module implements the local reflection model used by the Whitted
integrator. A material carries:

- ambient, diffuse and specular reflectance coefficients in [0, 1]
- a shininess exponent controlling the size of specular highlights
- a base color and an optional checkerboard alternate color
- reflectivity and transparency weights for the recursive rays

The per-light terms are:

    diffuse  = max(0, dot(n, l))
    specular = max(0, dot(reflect(-l, n), v)) ^ shininess

Coefficients are not required to sum to at most one; a material whose terms
add up to more than one simply renders brighter.

Example:
    >>> from src.whitted.materials.phong import Material
    >>> red = Material(color=(1.0, 0.0, 0.0), diffuse=0.8, specular=0.3)
    >>> mirror = Material(color=(0.1, 0.1, 0.1), reflectivity=0.9)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import reflect

# Type alias for 3D vectors
vec3 = tm.vec3

Color = tuple[float, float, float]

DEFAULT_SHININESS = 10.0


@dataclass(frozen=True)
class Material:
    """Host-side description of a Phong material.

    Attributes:
        color: Base RGB color, each component in [0, 1].
        ambient: Ambient reflectance coefficient (k_a).
        diffuse: Diffuse reflectance coefficient (k_d).
        specular: Specular reflectance coefficient (k_s).
        shininess: Specular exponent (k_n), >= 0.
        reflectivity: Weight of the mirror-reflected ray.
        transparency: Weight of the transmitted ray; also the fraction of
            light the surface lets through to shadowed points.
        checker_size: Edge length of checkerboard tiles; 0 disables texturing.
        checker_color: RGB color of the odd checkerboard tiles.
    """

    color: Color
    ambient: float = 1.0
    diffuse: float = 1.0
    specular: float = 0.0
    shininess: float = DEFAULT_SHININESS
    reflectivity: float = 0.0
    transparency: float = 0.0
    checker_size: float = 0.0
    checker_color: Color = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        for name in ("ambient", "diffuse", "specular", "reflectivity", "transparency"):
            value = getattr(self, name)
            if value < 0.0 or value > 1.0:
                raise ValueError(f"Material {name} = {value} is outside [0, 1]")
        for name in ("color", "checker_color"):
            for i, component in enumerate(getattr(self, name)):
                if component < 0.0 or component > 1.0:
                    raise ValueError(
                        f"Material {name} component {i} = {component} is outside [0, 1]"
                    )
        if self.shininess < 0.0:
            raise ValueError(f"Material shininess = {self.shininess} must be >= 0")
        if self.checker_size < 0.0:
            raise ValueError(f"Material checker_size = {self.checker_size} must be >= 0")


@ti.dataclass
class PhongMaterial:
    """Device-side material record assembled from scene storage."""

    color: vec3
    checker_color: vec3
    ambient: ti.f32
    diffuse: ti.f32
    specular: ti.f32
    shininess: ti.f32
    reflectivity: ti.f32
    transparency: ti.f32
    checker_size: ti.f32


@ti.func
def checker_parity(point: vec3, normal: vec3, size: ti.f32) -> ti.i32:
    """Checkerboard tile parity of a surface point.

    Tiles live on the two world axes orthogonal to the dominant axis of the
    normal: floors and ceilings tile on (x, z), walls facing z on (x, y) and
    walls facing x on (y, z). The pattern is periodic with period 2 * size
    along each tiled axis.

    Args:
        point: The surface point.
        normal: The surface normal at the point (either orientation).
        size: Tile edge length (> 0).

    Returns:
        0 for base-color tiles, 1 for checker-color tiles.
    """
    an = ti.abs(normal)
    a = point.x
    b = point.z
    if an.x >= an.y and an.x >= an.z:
        a = point.y
        b = point.z
    elif an.z > an.y:
        a = point.x
        b = point.y

    ia = ti.cast(ti.floor(a / size), ti.i32)
    ib = ti.cast(ti.floor(b / size), ti.i32)
    return (ia + ib) % 2


@ti.func
def surface_color(material: PhongMaterial, point: vec3, normal: vec3) -> vec3:
    """Base color of a material at a point, applying the checkerboard if enabled."""
    color = material.color
    if material.checker_size > 0.0:
        if checker_parity(point, normal, material.checker_size) == 1:
            color = material.checker_color
    return color


@ti.func
def lambert_diffuse(normal: vec3, light_dir: vec3) -> ti.f32:
    """Lambertian cosine term max(0, n . l)."""
    return ti.max(0.0, tm.dot(normal, light_dir))


@ti.func
def phong_specular(normal: vec3, light_dir: vec3, view_dir: vec3, shininess: ti.f32) -> ti.f32:
    """Phong specular lobe max(0, r . v)^shininess with r = reflect(-l, n).

    Args:
        normal: Unit surface normal.
        light_dir: Unit vector from the surface toward the light.
        view_dir: Unit vector from the surface toward the viewer.
        shininess: Specular exponent.

    Returns:
        The specular intensity factor in [0, 1].
    """
    reflect_dir = reflect(-light_dir, normal)
    return ti.max(0.0, tm.dot(reflect_dir, view_dir)) ** shininess
