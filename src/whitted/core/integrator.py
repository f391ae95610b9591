"""Whitted-style recursive ray tracing integrator.

This module computes the color seen along a ray: the nearest hit is shaded
with the Phong local model (ambient, diffuse, specular, shadowed per light),
and mirror-reflected and transmitted rays are traced recursively and blended
in by the material's reflectivity and transparency.

    color = residual * clamp(local) + r * reflected + t * transmitted

with residual = 1 - r - t, or 1 when r + t > 1 (the surface then renders
brighter rather than being renormalized).

Taichi functions cannot recurse, so the recursion is an explicit depth-first
stack of pending rays (origin, direction, weight, depth) held in registers.
Each ray's contribution is scaled by its weight, the product of the
reflectivity/transparency coefficients along its branch, and added straight
into the pixel. Only reflections count toward max_depth: a transmitted ray
continues in a straight line and keeps its parent's depth, so a chain of
transparent surfaces is always seen through. A reflected branch is not traced
once its depth reaches max_depth or its weight drops to min_weight, and when
r + t <= 1 its coefficient is handed back to the local term so mirrors do not
darken at the recursion limit. A transmitted branch below min_weight is dropped
without a hand-back, so transparent surfaces never take on their own color.

Key features:
    - Point lights with color, intensity and distance attenuation
    - Shadows attenuated by the transparency of every blocker
    - Procedural checkerboard texturing
    - Deterministic: no sampling, every pixel is computed independently

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.integrator import trace
    >>> # Within a Taichi kernel:
    >>> # color = trace(scene, origin, direction, max_depth, min_weight)
"""

import taichi as ti
import taichi.math as tm

from src.whitted.camera.pinhole import generate_ray
from src.whitted.core.ray import T_MAX, T_MIN, offset_origin, reflect
from src.whitted.materials.phong import (
    PhongMaterial,
    lambert_diffuse,
    phong_specular,
    surface_color,
)
from src.whitted.scene.intersection import intersect_scene, shadow_factor
from src.whitted.scene.scene import get_material

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Hard upper bound on reflection depth
MAX_TRACE_DEPTH = 10

# Pending rays held at once; a branch that does not fit is not traced
STACK_SIZE = 32

DEFAULT_MAX_DEPTH = 5

# Branches whose accumulated weight is at or below this are not traced
DEFAULT_MIN_WEIGHT = 1e-3


# =============================================================================
# Local Illumination
# =============================================================================


@ti.func
def light_attenuation(coefficients: vec3, distance: ti.f32) -> ti.f32:
    """Distance attenuation min(1, 1 / (c1 + c2 * d + c3 * d^2))."""
    denom = coefficients.x + coefficients.y * distance + coefficients.z * distance * distance
    attenuation = 1.0
    if denom > 1.0:
        attenuation = 1.0 / denom
    return attenuation


@ti.func
def local_illumination(
    scene: ti.template(),
    material: PhongMaterial,
    point: vec3,
    normal: vec3,
    view_dir: vec3,
) -> vec3:
    """Phong shading of a surface point from ambient light and every point light.

    Lights behind the surface (n . l <= 0) contribute neither diffuse nor
    specular light. Each light is scaled by its shadow factor.

    Args:
        scene: The scene (lights, ambient light and blockers).
        material: Material of the surface.
        point: The surface point.
        normal: Unit normal facing the viewer.
        view_dir: Unit vector from the point toward the viewer.

    Returns:
        The unclamped local color.
    """
    surface = surface_color(material, point, normal)
    color = (
        surface
        * material.ambient
        * scene.ambient_intensity[None]
        * scene.ambient_color[None]
    )

    shadow_origin = offset_origin(point, normal)

    for j in range(scene.num_lights[None]):
        to_light = scene.light_positions[j] - shadow_origin
        distance = tm.length(to_light)
        if distance > 0.0:
            light_dir = to_light / distance
            n_dot_l = lambert_diffuse(normal, light_dir)
            if n_dot_l > 0.0:
                visibility = shadow_factor(scene, shadow_origin, light_dir, distance, T_MIN)
                if visibility > 0.0:
                    diffuse = n_dot_l * material.diffuse * surface
                    specular = (
                        phong_specular(normal, light_dir, view_dir, material.shininess)
                        * material.specular
                    )
                    scale = (
                        scene.light_intensities[j]
                        * light_attenuation(scene.light_attenuations[j], distance)
                        * visibility
                    )
                    color += (diffuse + specular) * scale * scene.light_colors[j]

    return color


# =============================================================================
# Recursive Tracing
# =============================================================================


@ti.func
def trace(
    scene: ti.template(),
    origin: vec3,
    direction: vec3,
    max_depth: ti.i32,
    min_weight: ti.f32,
) -> vec3:
    """Trace a ray and everything it spawns, returning the combined color.

    Args:
        scene: The scene to render.
        origin: Ray origin.
        direction: Unit ray direction.
        max_depth: Maximum number of reflection bounces; transmission is free.
        min_weight: Branches with weight at or below this are not traced.

    Returns:
        The unclamped color seen along the ray.
    """
    stack_origin = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    stack_dir = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    stack_weight = ti.Vector.zero(ti.f32, STACK_SIZE)
    stack_depth = ti.Vector.zero(ti.i32, STACK_SIZE)

    for c in ti.static(range(3)):
        stack_origin[0, c] = origin[c]
        stack_dir[0, c] = direction[c]
    stack_weight[0] = 1.0
    size = 1

    color = vec3(0.0, 0.0, 0.0)

    while size > 0:
        # Pop
        size -= 1
        o = vec3(0.0, 0.0, 0.0)
        d = vec3(0.0, 0.0, 0.0)
        weight = 0.0
        depth = 0
        for k in ti.static(range(STACK_SIZE)):
            if k == size:
                o = vec3(stack_origin[k, 0], stack_origin[k, 1], stack_origin[k, 2])
                d = vec3(stack_dir[k, 0], stack_dir[k, 1], stack_dir[k, 2])
                weight = stack_weight[k]
                depth = stack_depth[k]

        rec = intersect_scene(scene, o, d, T_MIN, T_MAX)

        if rec.hit == 0:
            color += weight * scene.background[None]
        else:
            material = get_material(scene, rec.primitive_id)
            local = local_illumination(scene, material, rec.point, rec.normal, -d)

            r = material.reflectivity
            t = material.transparency
            local_weight = 1.0 - r - t
            if local_weight < 0.0:
                local_weight = 1.0

            if r > 0.0:
                if depth < max_depth and weight * r > min_weight and size < STACK_SIZE:
                    child_origin = offset_origin(rec.point, rec.normal)
                    child_dir = reflect(d, rec.normal)
                    for k in ti.static(range(STACK_SIZE)):
                        if k == size:
                            for c in ti.static(range(3)):
                                stack_origin[k, c] = child_origin[c]
                                stack_dir[k, c] = child_dir[c]
                            stack_weight[k] = weight * r
                            stack_depth[k] = depth + 1
                    size += 1
                elif r + t <= 1.0:
                    local_weight += r

            if t > 0.0:
                if weight * t > min_weight and size < STACK_SIZE:
                    child_origin = offset_origin(rec.point, -rec.normal)
                    for k in ti.static(range(STACK_SIZE)):
                        if k == size:
                            for c in ti.static(range(3)):
                                stack_origin[k, c] = child_origin[c]
                                stack_dir[k, c] = d[c]
                            stack_weight[k] = weight * t
                            stack_depth[k] = depth
                    size += 1

            color += weight * local_weight * tm.clamp(local, 0.0, 1.0)

    return color


@ti.func
def render_pixel(
    scene: ti.template(),
    camera: ti.template(),
    col: ti.i32,
    row: ti.i32,
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
    min_weight: ti.f32,
) -> vec3:
    """Final color of one pixel, clamped to [0, 1].

    Args:
        scene: The scene to render.
        camera: The camera producing primary rays.
        col: Pixel column (0 = left).
        row: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Maximum recursion depth.
        min_weight: Branch weight cutoff.

    Returns:
        The pixel color. A NaN result is replaced by the background color.
    """
    ray = generate_ray(camera, col, row, width, height)
    color = trace(scene, ray.origin, ray.direction, max_depth, min_weight)

    is_nan = 0
    for c in ti.static(range(3)):
        if tm.isnan(color[c]):
            is_nan = 1
    if is_nan == 1:
        color = scene.background[None]

    return tm.clamp(color, 0.0, 1.0)
