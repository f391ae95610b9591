"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure, vector helpers and epsilon constants
    integrator: Whitted-style shading with shadows, reflection and transparency
    renderer: Render driver that owns the pixel buffer

Recursion in the integrator is expressed with an explicit bounded stack of
pending rays, because Taichi functions are inlined and cannot call themselves.
Every pixel is an independent evaluation that only reads scene data, so the
render loop is a plain Taichi parallel-for.
"""

from .ray import (
    PARALLEL_EPSILON,
    RAY_EPSILON,
    T_MAX,
    T_MIN,
    Ray,
    make_ray,
    near_zero,
    offset_origin,
    ray_at,
    reflect,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from src.whitted.core.integrator or src.whitted.core.renderer.

__all__ = [
    "PARALLEL_EPSILON",
    "RAY_EPSILON",
    "T_MAX",
    "T_MIN",
    "Ray",
    "make_ray",
    "ray_at",
    "offset_origin",
    "reflect",
    "near_zero",
    "vec3",
]
