"""Sphere primitive and the root selection shared by quadric surfaces.

A ray o + t*d meets the sphere |p - c| = r where

    a*t^2 + 2*h*t + k = 0,   a = d.d,  h = d.(o - c),  k = |o - c|^2 - r^2

The roots are computed with the cancellation-free form
q = -(h + sign(h) * sqrt(h^2 - a*k)), t = q/a and t = k/q. The infinite
cylinder reduces to the same equation in the plane perpendicular to its axis
and uses ``nearest_root`` as well.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # hit_sphere(origin, direction, sphere, t_min, t_max) inside a kernel
"""

import taichi as ti
import taichi.math as tm

from src.whitted.geometry.hit import HitRecord, make_hit_record, miss_record

vec3 = tm.vec3

# Returned by nearest_root when neither root lies in the interval
NO_ROOT = -1.0


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def nearest_root(a: ti.f32, h: ti.f32, k: ti.f32, t_min: ti.f32, t_max: ti.f32) -> ti.f32:
    """Smallest root of a*t^2 + 2*h*t + k = 0 inside (t_min, t_max).

    The near root is preferred. When it falls outside the interval (the ray
    starts inside the surface, or grazes it at its own origin) the far root is
    tried.

    Returns:
        The root, or NO_ROOT if there is none in the interval or a is zero.
    """
    result = NO_ROOT
    discriminant = h * h - a * k

    if a > 1e-12 and discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        q = -(h + ti.select(h < 0.0, -1.0, 1.0) * sqrt_d)

        near = 0.0
        far = 0.0
        if ti.abs(q) < 1e-10:
            near = (-h - sqrt_d) / a
            far = (-h + sqrt_d) / a
        else:
            near = ti.min(q / a, k / q)
            far = ti.max(q / a, k / q)

        if near > t_min and near < t_max:
            result = near
        elif far > t_min and far < t_max:
            result = far

    return result


@ti.func
def sphere_normal_at(point: vec3, sphere: Sphere) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return (point - sphere.center) / sphere.radius


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        sphere: The sphere to test intersection against.
        t_min: Minimum t value to consider a valid hit (avoids self-intersection).
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord whose normal faces the ray; front_face is 0 when the ray
        leaves the sphere from inside.
    """
    oc = ray_origin - sphere.center
    t = nearest_root(
        tm.dot(ray_direction, ray_direction),
        tm.dot(ray_direction, oc),
        tm.dot(oc, oc) - sphere.radius * sphere.radius,
        t_min,
        t_max,
    )

    result = miss_record()
    if t != NO_ROOT:
        hit_point = ray_origin + t * ray_direction
        result = make_hit_record(ray_direction, t, hit_point, sphere_normal_at(hit_point, sphere))

    return result
