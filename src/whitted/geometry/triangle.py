"""Triangle primitive with plane intersection and barycentric containment.

A triangle is defined by three vertices v1, v2, v3. Its normal is constant and
follows the winding order (right-hand rule):

    normal = normalize(cross(v2 - v1, v3 - v1))

Ray-triangle intersection uses the two-step test:
1. Find where the ray hits the plane containing the triangle
2. Compute the barycentric coordinates (u, v, w) of that point and accept it
   when all of them are >= -BARYCENTRIC_EPSILON (they sum to 1 by construction)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.triangle import Triangle, hit_triangle
    >>> tri = Triangle(
    ...     v1=ti.math.vec3(0, 0, 0),
    ...     v2=ti.math.vec3(1, 0, 0),
    ...     v3=ti.math.vec3(0, 1, 0),
    ... )
    >>> # Use hit_triangle within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import PARALLEL_EPSILON
from src.whitted.geometry.hit import HitRecord, make_hit_record, miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Tolerance on barycentric coordinates so shared edges do not leak rays
BARYCENTRIC_EPSILON = 1e-6


@ti.dataclass
class Triangle:
    """A triangle defined by three vertices.

    Attributes:
        v1: First vertex (vec3).
        v2: Second vertex (vec3).
        v3: Third vertex (vec3).
    """

    v1: vec3
    v2: vec3
    v3: vec3


@ti.func
def triangle_normal_at(point: vec3, triangle: Triangle) -> vec3:
    """Unit normal of a triangle from its vertex winding."""
    return tm.normalize(tm.cross(triangle.v2 - triangle.v1, triangle.v3 - triangle.v1))


@ti.func
def barycentric(point: vec3, triangle: Triangle):
    """Compute barycentric coordinates of a point in the triangle's plane.

    Args:
        point: A point assumed to lie in the triangle's plane.
        triangle: The reference triangle (must not be degenerate).

    Returns:
        Tuple (u, v, w) of weights for v1, v2, v3; u + v + w = 1.
    """
    e1 = triangle.v2 - triangle.v1
    e2 = triangle.v3 - triangle.v1
    p = point - triangle.v1

    d11 = tm.dot(e1, e1)
    d12 = tm.dot(e1, e2)
    d22 = tm.dot(e2, e2)
    dp1 = tm.dot(p, e1)
    dp2 = tm.dot(p, e2)

    denom = d11 * d22 - d12 * d12
    v = (d22 * dp1 - d12 * dp2) / denom
    w = (d11 * dp2 - d12 * dp1) / denom
    u = 1.0 - v - w
    return u, v, w


@ti.func
def hit_triangle(
    ray_origin: vec3,
    ray_direction: vec3,
    triangle: Triangle,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-triangle intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        triangle: The triangle to test intersection against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A HitRecord whose normal faces the ray.
    """
    result = miss_record()

    n = tm.cross(triangle.v2 - triangle.v1, triangle.v3 - triangle.v1)
    n_length = tm.length(n)

    # Collinear vertices have no plane
    if n_length > 1e-12:
        normal = n / n_length
        denom = tm.dot(normal, ray_direction)

        if ti.abs(denom) > PARALLEL_EPSILON:
            t = tm.dot(triangle.v1 - ray_origin, normal) / denom

            if t > t_min and t < t_max:
                hit_point = ray_origin + t * ray_direction
                u, v, w = barycentric(hit_point, triangle)

                inside = ti.min(u, v, w) >= -BARYCENTRIC_EPSILON
                if inside:
                    result = make_hit_record(ray_direction, t, hit_point, normal)

    return result
