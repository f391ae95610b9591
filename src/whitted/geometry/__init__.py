"""Geometry module for shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    hit: HitRecord shared by every primitive
    sphere: Sphere primitive and the root selection shared with the cylinder
    plane: Infinite plane and bounded disc primitives
    cylinder: Infinite, uncapped cylinder primitive
    triangle: Triangle primitive with barycentric containment

All intersection routines are implemented as Taichi functions (@ti.func).
Every primitive offers the same pair of capabilities:

    rec = hit_<shape>(ray_origin, ray_direction, shape, t_min, t_max)
    n = <shape>_normal_at(point, shape)

Hit records always carry a normal oriented against the incoming ray.
"""

from .cylinder import Cylinder, cylinder_normal_at, hit_cylinder
from .hit import HitRecord, make_hit_record, miss_record
from .plane import Disc, Plane, disc_normal_at, hit_disc, hit_plane, plane_normal_at
from .sphere import NO_ROOT, Sphere, hit_sphere, nearest_root, sphere_normal_at
from .triangle import Triangle, barycentric, hit_triangle, triangle_normal_at

__all__ = [
    "HitRecord",
    "make_hit_record",
    "miss_record",
    "Sphere",
    "hit_sphere",
    "nearest_root",
    "NO_ROOT",
    "sphere_normal_at",
    "Plane",
    "hit_plane",
    "plane_normal_at",
    "Disc",
    "hit_disc",
    "disc_normal_at",
    "Cylinder",
    "hit_cylinder",
    "cylinder_normal_at",
    "Triangle",
    "hit_triangle",
    "triangle_normal_at",
    "barycentric",
]
