"""Ray data structure, vector helpers and numeric tolerances.

This module provides the Ray dataclass and the few vector helpers that the
intersection and shading routines share. All operations are designed to work
within Taichi kernels.

It also defines the tolerances shared by the whole engine. ``RAY_EPSILON`` is
the single self-intersection guard: it is the minimum accepted hit distance for
primary and secondary rays and the offset applied to shadow, reflected and
transmitted ray origins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def bounce() -> ti.math.vec3:
    ...     n = ti.math.vec3(0.0, 1.0, 0.0)
    ...     return reflect(ti.math.vec3(1.0, -1.0, 0.0), n)  # (1, 1, 0)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Self-intersection guard and secondary ray origin offset
RAY_EPSILON = 1e-4

# Accepted range of the ray parameter t
T_MIN = RAY_EPSILON
T_MAX = 1e10

# Below this |dot(normal, direction)| a ray is treated as parallel to a plane
PARALLEL_EPSILON = 1e-6

# Components below this make a direction degenerate
_ZERO_COMPONENT = 1e-8


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Must be unit length
            when passed to intersection or shading routines.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """The point ray.origin + t * ray.direction."""
    return ray.origin + t * ray.direction


@ti.func
def offset_origin(point: vec3, normal: vec3) -> vec3:
    """Move a surface point RAY_EPSILON along normal.

    Secondary rays start here so they do not hit the surface they leave.
    Pass the hit normal for shadow and reflected rays and its negation for
    transmitted rays, which continue on the far side.
    """
    return point + RAY_EPSILON * normal


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The mirrored direction, incident - 2 * dot(incident, normal) * normal.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """1 if every component of v is near zero, else 0.

    Used to reject degenerate ray directions.
    """
    return (
        ti.abs(v.x) < _ZERO_COMPONENT
        and ti.abs(v.y) < _ZERO_COMPONENT
        and ti.abs(v.z) < _ZERO_COMPONENT
    )
