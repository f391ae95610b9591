"""Scene-level primitive intersection testing.

This module provides scene-level ray queries over every primitive stored in a
``Scene``:

- ``intersect_scene``: the nearest hit along a ray, with the index of the
  primitive that was struck (which also identifies its material)
- ``shadow_factor``: how much light survives along a shadow ray, multiplying
  the transparency of every primitive crossed before the light

The scene is always passed explicitly as a ``ti.template()`` argument; these
functions only read its fields.

Primitives are evaluated in scene order. A later primitive replaces the
current nearest hit only when it is strictly closer, so coincident surfaces
resolve to the primitive listed first.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.intersection import intersect_scene
    >>> # Within a Taichi kernel:
    >>> # rec = intersect_scene(scene, origin, direction, T_MIN, T_MAX)
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import near_zero
from src.whitted.geometry.cylinder import Cylinder, hit_cylinder
from src.whitted.geometry.hit import HitRecord, miss_record
from src.whitted.geometry.plane import Disc, Plane, hit_disc, hit_plane
from src.whitted.geometry.sphere import Sphere, hit_sphere
from src.whitted.geometry.triangle import Triangle, hit_triangle
from src.whitted.scene.shapes import PrimitiveKind

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with the struck primitive.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
        point: The 3D point where the ray intersected the surface.
        normal: The unit surface normal, facing the ray origin.
        front_face: Whether the primitive's own normal faced the ray (1) or not (0).
        primitive_id: Index of the hit primitive in the scene; -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    primitive_id: ti.i32


@ti.func
def _to_scene_hit_record(rec: HitRecord, primitive_id: ti.i32) -> SceneHitRecord:
    """Attach a primitive index to a primitive-level hit record."""
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        front_face=rec.front_face,
        primitive_id=primitive_id,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        primitive_id=-1,
    )


@ti.func
def hit_primitive(
    scene: ti.template(),
    i: ti.i32,
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with the i-th primitive of the scene.

    Dispatches on the primitive kind; every PrimitiveKind has a branch.

    Args:
        scene: The scene holding the primitive storage.
        i: Index of the primitive.
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The primitive-level HitRecord.
    """
    kind = scene.kinds[i]
    a = scene.points_a[i]
    b = scene.points_b[i]
    radius = scene.radii[i]

    rec = miss_record()

    if kind == int(PrimitiveKind.SPHERE):
        rec = hit_sphere(ray_origin, ray_direction, Sphere(center=a, radius=radius), t_min, t_max)
    elif kind == int(PrimitiveKind.PLANE):
        rec = hit_plane(ray_origin, ray_direction, Plane(point=a, normal=b), t_min, t_max)
    elif kind == int(PrimitiveKind.DISC):
        rec = hit_disc(
            ray_origin, ray_direction, Disc(center=a, normal=b, radius=radius), t_min, t_max
        )
    elif kind == int(PrimitiveKind.CYLINDER):
        rec = hit_cylinder(
            ray_origin, ray_direction, Cylinder(point=a, axis=b, radius=radius), t_min, t_max
        )
    elif kind == int(PrimitiveKind.TRIANGLE):
        rec = hit_triangle(
            ray_origin,
            ray_direction,
            Triangle(v1=a, v2=b, v3=scene.points_c[i]),
            t_min,
            t_max,
        )

    return rec


@ti.func
def intersect_scene(
    scene: ti.template(),
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Find the nearest primitive hit along a ray.

    Args:
        scene: The scene to query.
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction vector of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        A SceneHitRecord for the closest intersection, or a miss record.
        A zero-length direction always misses.
    """
    closest_t = t_max
    result = _make_miss_record()

    if not near_zero(ray_direction):
        for i in range(scene.num_primitives[None]):
            rec = hit_primitive(scene, i, ray_origin, ray_direction, t_min, closest_t)
            if rec.hit == 1:
                closest_t = rec.t
                result = _to_scene_hit_record(rec, i)

    return result


@ti.func
def shadow_factor(
    scene: ti.template(),
    origin: vec3,
    light_dir: vec3,
    light_distance: ti.f32,
    t_min: ti.f32,
) -> ti.f32:
    """Fraction of a light's contribution that reaches a point.

    Every primitive crossed by the shadow ray before the light multiplies the
    factor by its material transparency, i.e. (1 - opacity). Each primitive
    counts once however many times the ray crosses it.

    Args:
        scene: The scene to query.
        origin: Shadow ray origin (hit point offset along the normal).
        light_dir: Unit direction toward the light.
        light_distance: Distance from origin to the light.
        t_min: Minimum t value to consider a blocker.

    Returns:
        A factor in [0, 1]: 1 when nothing blocks the light, 0 behind an
        opaque blocker.
    """
    factor = 1.0
    for i in range(scene.num_primitives[None]):
        if factor > 0.0:
            rec = hit_primitive(scene, i, origin, light_dir, t_min, light_distance)
            if rec.hit == 1:
                factor *= scene.transparencies[i]
    return factor
