"""Plane and disc primitives with ray-plane intersection.

A plane is an infinite flat surface through a point with a unit normal. A disc
is the part of such a plane within a radius of its center, so both primitives
share the same parametric plane test:

    dot(normal, ray_origin + t * ray_direction - point) = 0
    t = dot(point - ray_origin, normal) / dot(normal, ray_direction)

Rays with |dot(normal, ray_direction)| below PARALLEL_EPSILON run parallel to
the plane and never hit it. The disc additionally rejects hits farther than
its radius from the center.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.plane import Plane, hit_plane
    >>> # Floor plane at y=0
    >>> floor = Plane(point=ti.math.vec3(0, 0, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import PARALLEL_EPSILON
from src.whitted.geometry.hit import HitRecord, make_hit_record, miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Plane:
    """An infinite plane.

    Attributes:
        point: Any point on the plane (vec3).
        normal: The unit normal of the plane (vec3).
    """

    point: vec3
    normal: vec3


@ti.dataclass
class Disc:
    """A flat disc.

    Attributes:
        center: The center of the disc (vec3).
        normal: The unit normal of the disc's plane (vec3).
        radius: The radius of the disc (positive float).
    """

    center: vec3
    normal: vec3
    radius: ti.f32


@ti.func
def intersect_plane_t(ray_origin: vec3, ray_direction: vec3, point: vec3, normal: vec3):
    """Solve the ray-plane equation for t.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        point: A point on the plane.
        normal: The unit plane normal.

    Returns:
        Tuple of (valid, t) where valid is 0 when the ray is parallel
        to the plane.
    """
    denom = tm.dot(normal, ray_direction)
    valid = 0
    t = 0.0
    if ti.abs(denom) > PARALLEL_EPSILON:
        valid = 1
        t = tm.dot(point - ray_origin, normal) / denom
    return valid, t


@ti.func
def plane_normal_at(point: vec3, plane: Plane) -> vec3:
    """Unit normal of a plane; constant over the surface."""
    return plane.normal


@ti.func
def disc_normal_at(point: vec3, disc: Disc) -> vec3:
    """Unit normal of a disc; constant over the surface."""
    return disc.normal


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        plane: The plane to test intersection against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord whose normal faces the ray.
    """
    result = miss_record()
    valid, t = intersect_plane_t(ray_origin, ray_direction, plane.point, plane.normal)

    if valid == 1 and t > t_min and t < t_max:
        hit_point = ray_origin + t * ray_direction
        result = make_hit_record(ray_direction, t, hit_point, plane_normal_at(hit_point, plane))

    return result


@ti.func
def hit_disc(
    ray_origin: vec3,
    ray_direction: vec3,
    disc: Disc,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-disc intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        disc: The disc to test intersection against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord whose normal faces the ray.
    """
    result = miss_record()
    valid, t = intersect_plane_t(ray_origin, ray_direction, disc.center, disc.normal)

    if valid == 1 and t > t_min and t < t_max:
        hit_point = ray_origin + t * ray_direction
        offset = hit_point - disc.center
        if tm.dot(offset, offset) <= disc.radius * disc.radius:
            result = make_hit_record(ray_direction, t, hit_point, disc_normal_at(hit_point, disc))

    return result
