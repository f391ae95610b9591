"""Hit record shared by all primitive intersection routines.

Every ``hit_<primitive>`` function returns a ``HitRecord``. The stored normal is
always unit length and faces the incoming ray; ``front_face`` remembers whether
that required flipping the primitive's own normal.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The surface normal at the intersection point (unit length,
            oriented against the ray direction). Only valid if hit == 1.
        front_face: Whether the primitive's own normal already faced the ray
            (1) or had to be flipped (0). Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
    )


@ti.func
def make_hit_record(ray_direction: vec3, t: ti.f32, point: vec3, outward_normal: vec3) -> HitRecord:
    """Build a hit record, orienting the normal to face the incoming ray.

    Args:
        ray_direction: Direction of the ray that produced the hit.
        t: The ray parameter of the hit.
        point: The hit point.
        outward_normal: The primitive's own unit normal at the hit point.

    Returns:
        A HitRecord with hit == 1.
    """
    is_front_face = 1
    hit_normal = outward_normal
    if tm.dot(ray_direction, outward_normal) > 0.0:
        is_front_face = 0
        hit_normal = -outward_normal

    return HitRecord(
        hit=1,
        t=t,
        point=point,
        normal=hit_normal,
        front_face=is_front_face,
    )
