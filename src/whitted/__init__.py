"""Python implementation of a Taichi-based Whitted-style raytracer.

This package renders static scenes described in INI files using classic
recursive ray tracing, with support for:
- Phong local illumination (ambient, diffuse, specular)
- Partial shadows through transparent occluders
- Mirror reflection and non-refractive transparency
- Geometric primitives (spheres, planes, discs, cylinders, triangles)
- Procedural checkerboard textures

Subpackages:
    core: Ray utilities, the shading integrator and the render driver
    geometry: Shape primitives and intersection algorithms
    materials: Phong material model and checkerboard texturing
    scene: Scene descriptions, device storage and scene-level queries
    camera: Observer/projection-plane camera with ray generation
    config: INI scene and observer loading
    output: Image export
"""

__version__ = "0.1.0"
