"""Pinhole camera model: observer, projection plane and primary ray generation.

The observer sits at ``position`` and looks along ``forward``. A projection
plane of ``width`` x ``height`` world units is placed ``distance`` units in
front of it, perpendicular to ``forward``. Pixel (col, row) maps to the
plane point

    position + forward * distance
             + right * (u - 0.5) * width
             + up    * (0.5 - v) * height

with u = (col + 0.5) / width_px and v = (row + 0.5) / height_px, so row 0 is
the top row of the image. The plane is not stretched to the pixel aspect
ratio; a non-square plane rendered to square pixels distorts, as configured.

The camera builds an orthonormal basis from the view parameters:
- forward: unit view direction
- right: normalize(cross(forward, up_hint))
- up: cross(right, forward)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.camera.pinhole import Camera, Observer, ProjectionPlane
    >>>
    >>> observer = Observer.look_at(position=(0, 0, 3), target=(0, 0, 0))
    >>> camera = Camera(observer, ProjectionPlane(distance=1.0, width=1.0, height=1.0))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = generate_ray(camera, 300, 300, 601, 601)  # Ray through image center
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import Ray, make_ray, vec3

Vec3 = tuple[float, float, float]

# Below this length a basis vector is degenerate
_MIN_BASIS_LENGTH = 1e-9


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Observer:
    """Viewer position and orientation.

    Attributes:
        position: Eye position in world space (x, y, z).
        forward: View direction; need not be normalized.
        up: Up hint; only its component perpendicular to forward is used.
    """

    position: Vec3
    forward: Vec3
    up: Vec3 = (0.0, 1.0, 0.0)

    @classmethod
    def look_at(cls, position: Vec3, target: Vec3, up: Vec3 = (0.0, 1.0, 0.0)) -> "Observer":
        """Create an observer at position looking toward target."""
        forward = tuple(float(t) - float(p) for p, t in zip(position, target))
        return cls(position=position, forward=forward, up=up)

    def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Compute the orthonormal camera basis.

        Returns:
            Tuple (forward, up, right) of unit float64 vectors.

        Raises:
            ValueError: If forward has zero length or is parallel to up.
        """
        forward = np.asarray(self.forward, dtype=np.float64)
        up_hint = np.asarray(self.up, dtype=np.float64)

        norm = np.linalg.norm(forward)
        if norm < _MIN_BASIS_LENGTH:
            raise ValueError(f"observer forward direction {self.forward} has zero length")
        forward = forward / norm

        right = np.cross(forward, up_hint)
        norm = np.linalg.norm(right)
        if norm < _MIN_BASIS_LENGTH:
            raise ValueError(
                f"observer up direction {self.up} is parallel to forward direction {self.forward}"
            )
        right = right / norm

        up = np.cross(right, forward)
        return forward, up, right


@dataclass(frozen=True)
class ProjectionPlane:
    """The image plane in front of the observer.

    Attributes:
        distance: Distance from the observer to the plane (> 0).
        width: Plane width in world units (> 0).
        height: Plane height in world units (> 0).
    """

    distance: float = 1.0
    width: float = 1.0
    height: float = 1.0

    def __post_init__(self) -> None:
        for name in ("distance", "width", "height"):
            value = getattr(self, name)
            if not value > 0.0:
                raise ValueError(f"projection {name} = {value} must be positive")


# =============================================================================
# Camera State (Taichi fields, written once)
# =============================================================================


@ti.data_oriented
class Camera:
    """Taichi-side camera holding the origin, basis and plane geometry.

    Attributes:
        observer: The observer this camera was built from.
        plane: The projection plane.
    """

    def __init__(self, observer: Observer, plane: ProjectionPlane) -> None:
        self.observer = observer
        self.plane = plane

        forward, up, right = observer.basis()

        self.origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.forward = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.up = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.right = ti.Vector.field(3, dtype=ti.f32, shape=())

        # Plane center and the full-extent plane vectors
        self.plane_center = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.vertical = ti.Vector.field(3, dtype=ti.f32, shape=())

        position = np.asarray(observer.position, dtype=np.float64)
        self.origin[None] = position.tolist()
        self.forward[None] = forward.tolist()
        self.up[None] = up.tolist()
        self.right[None] = right.tolist()
        self.plane_center[None] = (position + forward * plane.distance).tolist()
        self.horizontal[None] = (right * plane.width).tolist()
        self.vertical[None] = (up * plane.height).tolist()

    def info(self) -> dict[str, tuple[float, float, float]]:
        """Get current camera state for debugging.

        Returns:
            Dictionary with origin, forward, up, right, plane_center,
            horizontal and vertical.
        """
        names = ("origin", "forward", "up", "right", "plane_center", "horizontal", "vertical")
        result = {}
        for name in names:
            v = getattr(self, name)[None]
            result[name] = (float(v[0]), float(v[1]), float(v[2]))
        return result

    @ti.kernel
    def _ray_kernel(
        self, col: ti.i32, row: ti.i32, width: ti.i32, height: ti.i32
    ) -> ti.types.vector(6, ti.f32):
        ray = generate_ray(self, col, row, width, height)
        return ti.Vector(
            [
                ray.origin.x,
                ray.origin.y,
                ray.origin.z,
                ray.direction.x,
                ray.direction.y,
                ray.direction.z,
            ]
        )

    def ray_for_pixel(self, col: int, row: int, width: int, height: int) -> tuple[Vec3, Vec3]:
        """Primary ray of a pixel, evaluated on the host.

        Returns:
            Tuple (origin, direction).
        """
        out = self._ray_kernel(col, row, width, height)
        return (
            (float(out[0]), float(out[1]), float(out[2])),
            (float(out[3]), float(out[4]), float(out[5])),
        )


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def plane_point(camera: ti.template(), u: ti.f32, v: ti.f32) -> vec3:
    """World-space point on the projection plane at normalized coordinates.

    Args:
        camera: The camera.
        u: Horizontal coordinate in [0, 1] (left to right).
        v: Vertical coordinate in [0, 1] (top to bottom).
    """
    return (
        camera.plane_center[None]
        + (u - 0.5) * camera.horizontal[None]
        + (0.5 - v) * camera.vertical[None]
    )


@ti.func
def generate_ray(
    camera: ti.template(), col: ti.i32, row: ti.i32, width: ti.i32, height: ti.i32
) -> Ray:
    """Generate the primary ray through the center of a pixel.

    Args:
        camera: The camera.
        col: Pixel column (0 = left).
        row: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the observer position with a unit direction.
    """
    u = (ti.cast(col, ti.f32) + 0.5) / ti.cast(width, ti.f32)
    v = (ti.cast(row, ti.f32) + 0.5) / ti.cast(height, ti.f32)

    origin = camera.origin[None]
    direction = tm.normalize(plane_point(camera, u, v) - origin)

    return make_ray(origin, direction)
