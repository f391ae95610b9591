"""Infinite, uncapped cylinder primitive.

The cylinder is the set of points at distance ``radius`` from an axis line
through ``point`` with unit direction ``axis``. It has no caps, so a ray that
starts inside the tube can only leave through its inner wall.

Intersection projects the ray onto the plane perpendicular to the axis and
solves the resulting 2D circle equation:

    d_perp  = direction - dot(direction, axis) * axis
    oc_perp = oc - dot(oc, axis) * axis,   oc = origin - point
    |oc_perp + t * d_perp|^2 = radius^2

which is the same quadratic as the sphere case and shares its root
selection policy. A ray parallel to the axis has d_perp = 0 and never hits.
"""

import taichi as ti
import taichi.math as tm

from src.whitted.geometry.hit import HitRecord, make_hit_record, miss_record
from src.whitted.geometry.sphere import NO_ROOT, nearest_root

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Cylinder:
    """An infinite cylinder around an axis line.

    Attributes:
        point: A point on the axis (vec3).
        axis: The unit axis direction (vec3).
        radius: The radius of the tube (positive float).
    """

    point: vec3
    axis: vec3
    radius: ti.f32


@ti.func
def cylinder_normal_at(point: vec3, cylinder: Cylinder) -> vec3:
    """Outward unit normal of the tube at a surface point."""
    q = point - cylinder.point
    radial = q - tm.dot(q, cylinder.axis) * cylinder.axis
    return radial / cylinder.radius


@ti.func
def hit_cylinder(
    ray_origin: vec3,
    ray_direction: vec3,
    cylinder: Cylinder,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-cylinder intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        cylinder: The cylinder to test intersection against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord whose normal faces the ray.
    """
    oc = ray_origin - cylinder.point
    d_perp = ray_direction - tm.dot(ray_direction, cylinder.axis) * cylinder.axis
    oc_perp = oc - tm.dot(oc, cylinder.axis) * cylinder.axis

    # nearest_root rejects a ~ 0, a ray parallel to the axis
    t = nearest_root(
        tm.dot(d_perp, d_perp),
        tm.dot(d_perp, oc_perp),
        tm.dot(oc_perp, oc_perp) - cylinder.radius * cylinder.radius,
        t_min,
        t_max,
    )

    result = miss_record()
    if t != NO_ROOT:
        hit_point = ray_origin + t * ray_direction
        result = make_hit_record(
            ray_direction, t, hit_point, cylinder_normal_at(hit_point, cylinder)
        )

    return result
