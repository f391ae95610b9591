"""Materials module for the Phong reflection model.

This module implements the local illumination model used by the integrator:

Components:
    phong: Material description, device record, checkerboard texturing and
        the diffuse/specular lobes

Each material provides ambient, diffuse and specular reflectance, a shininess
exponent, and the reflectivity/transparency weights that drive the recursive
reflection and transmission rays. All per-hit computations are Taichi
functions.
"""

from .phong import (
    DEFAULT_SHININESS,
    Material,
    PhongMaterial,
    checker_parity,
    lambert_diffuse,
    phong_specular,
    surface_color,
)

__all__ = [
    "DEFAULT_SHININESS",
    "Material",
    "PhongMaterial",
    "checker_parity",
    "lambert_diffuse",
    "phong_specular",
    "surface_color",
]
