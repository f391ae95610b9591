"""Scene module: primitive descriptions, scene storage and ray-scene queries.

Components:
    shapes: Host-side primitive descriptions (sphere, plane, disc, cylinder, triangle)
    scene: Scene description, lights and the Taichi-backed Scene storage
    intersection: Nearest-hit and shadow queries over a Scene

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for geometric data
    - One array per material coefficient, indexed by primitive
"""

from .intersection import (
    SceneHitRecord,
    hit_primitive,
    intersect_scene,
    shadow_factor,
)
from .scene import (
    DEFAULT_BACKGROUND,
    HitInfo,
    Light,
    Scene,
    SceneDescription,
    get_material,
)
from .shapes import (
    CylinderShape,
    DiscShape,
    PlaneShape,
    PrimitiveKind,
    Shape,
    SphereShape,
    TriangleShape,
)

__all__ = [
    # Shapes
    "CylinderShape",
    "DiscShape",
    "PlaneShape",
    "PrimitiveKind",
    "Shape",
    "SphereShape",
    "TriangleShape",
    # Scene
    "DEFAULT_BACKGROUND",
    "HitInfo",
    "Light",
    "Scene",
    "SceneDescription",
    "get_material",
    # Intersection
    "SceneHitRecord",
    "hit_primitive",
    "intersect_scene",
    "shadow_factor",
]
