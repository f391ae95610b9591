"""Camera module for view and ray generation.

Components:
    pinhole: Observer, projection plane and pinhole (perspective) camera

Camera responsibilities:
    - Build an orthonormal basis from a view direction and an up hint
    - Transform pixel (col, row) to a world-space primary ray

Ray generation uses normalized image coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: top to bottom across image
"""

from .pinhole import (
    Camera,
    Observer,
    ProjectionPlane,
    generate_ray,
    plane_point,
)

__all__ = [
    "Camera",
    "Observer",
    "ProjectionPlane",
    "generate_ray",
    "plane_point",
]
