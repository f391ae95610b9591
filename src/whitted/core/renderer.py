"""Render driver: owns the pixel buffer and runs the per-pixel kernel.

This module provides a convenient wrapper around the integrator:
- One kernel launch renders the whole image; the outer loop over pixels is
  Taichi's parallel-for and each pixel writes only its own buffer cell
- Host-side probes for single pixels and single rays (testing/debugging)
- NumPy and file export of the finished image

Rendering is deterministic: rendering the same scene twice yields
bit-identical buffers.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(scene, camera, 640, 480)
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()  # (480, 640, 3)
"""

import logging
import time
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.whitted.camera.pinhole import Camera
from src.whitted.core.integrator import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIN_WEIGHT,
    MAX_TRACE_DEPTH,
    render_pixel,
    trace,
)
from src.whitted.output.export import save_image
from src.whitted.scene.scene import Scene

logger = logging.getLogger(__name__)

vec3 = tm.vec3


@dataclass(frozen=True)
class RenderSettings:
    """Recursion limits for a render.

    Attributes:
        max_depth: Maximum number of reflection bounces
            (0 disables secondary rays, at most MAX_TRACE_DEPTH).
        min_weight: Branches whose weight is at or below this are not traced.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    min_weight: float = DEFAULT_MIN_WEIGHT

    def __post_init__(self) -> None:
        if not 0 <= self.max_depth <= MAX_TRACE_DEPTH:
            raise ValueError(f"max_depth must be in [0, {MAX_TRACE_DEPTH}], got {self.max_depth}")
        if self.min_weight < 0.0:
            raise ValueError(f"min_weight must be >= 0, got {self.min_weight}")


@ti.data_oriented
class Renderer:
    """Renders a scene through a camera into a fixed-size pixel buffer.

    Attributes:
        scene: The scene to render.
        camera: The camera producing primary rays.
        width: Image width in pixels.
        height: Image height in pixels.
        settings: Recursion limits.
    """

    def __init__(
        self,
        scene: Scene,
        camera: Camera,
        width: int,
        height: int,
        settings: RenderSettings | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            scene: The scene to render.
            camera: The camera producing primary rays.
            width: Image width in pixels (> 0).
            height: Image height in pixels (> 0).
            settings: Recursion limits; defaults to RenderSettings().

        Raises:
            ValueError: If the dimensions are not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

        self.scene = scene
        self.camera = camera
        self.width = width
        self.height = height
        self.settings = settings if settings is not None else RenderSettings()

        # Indexed [row, col]; row 0 is the top of the image
        self.buffer = ti.Vector.field(3, dtype=ti.f32, shape=(height, width))

    # =========================================================================
    # Kernels
    # =========================================================================

    @ti.kernel
    def _render_kernel(self, width: ti.i32, height: ti.i32, max_depth: ti.i32, min_weight: ti.f32):
        for row, col in ti.ndrange(height, width):
            self.buffer[row, col] = render_pixel(
                self.scene, self.camera, col, row, width, height, max_depth, min_weight
            )

    @ti.kernel
    def _render_pixel_kernel(
        self,
        col: ti.i32,
        row: ti.i32,
        width: ti.i32,
        height: ti.i32,
        max_depth: ti.i32,
        min_weight: ti.f32,
    ) -> vec3:
        return render_pixel(self.scene, self.camera, col, row, width, height, max_depth, min_weight)

    @ti.kernel
    def _trace_kernel(
        self, origin: vec3, direction: vec3, max_depth: ti.i32, min_weight: ti.f32
    ) -> vec3:
        return trace(self.scene, origin, tm.normalize(direction), max_depth, min_weight)

    # =========================================================================
    # Public API
    # =========================================================================

    def render(self) -> None:
        """Render the full image into the buffer."""
        logger.info(
            "Rendering %dx%d (max_depth=%d, min_weight=%g)",
            self.width,
            self.height,
            self.settings.max_depth,
            self.settings.min_weight,
        )
        start = time.perf_counter()
        self._render_kernel(
            self.width, self.height, self.settings.max_depth, self.settings.min_weight
        )
        ti.sync()
        logger.info("Render finished in %.3fs", time.perf_counter() - start)

    def render_pixel(self, col: int, row: int) -> tuple[float, float, float]:
        """Compute the color of one pixel without touching the buffer.

        Args:
            col: Pixel column (0 = left).
            row: Pixel row (0 = top).

        Returns:
            RGB tuple, clamped to [0, 1].
        """
        color = self._render_pixel_kernel(
            col,
            row,
            self.width,
            self.height,
            self.settings.max_depth,
            self.settings.min_weight,
        )
        return (float(color[0]), float(color[1]), float(color[2]))

    def trace_ray(
        self,
        origin: tuple[float, float, float],
        direction: tuple[float, float, float],
        max_depth: int | None = None,
    ) -> tuple[float, float, float]:
        """Trace a single ray through the scene.

        Args:
            origin: Ray origin.
            direction: Ray direction (normalized here).
            max_depth: Overrides settings.max_depth when given.

        Returns:
            The unclamped RGB color seen along the ray.
        """
        depth = self.settings.max_depth if max_depth is None else max_depth
        if not 0 <= depth <= MAX_TRACE_DEPTH:
            raise ValueError(f"max_depth must be in [0, {MAX_TRACE_DEPTH}], got {depth}")
        color = self._trace_kernel(
            vec3(*origin), vec3(*direction), depth, self.settings.min_weight
        )
        return (float(color[0]), float(color[1]), float(color[2]))

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array.

        Returns:
            Array of shape (height, width, 3), dtype float32, top row first,
            values in [0, 1].
        """
        return self.buffer.to_numpy().astype(np.float32, copy=False)

    def save_image(self, filepath: str, gamma: float = 1.0) -> None:
        """Save the rendered image to a file.

        Args:
            filepath: Output path; the extension selects the encoder.
            gamma: Gamma correction value. Default 1.0 (linear).
        """
        save_image(self.get_image_numpy(), filepath, gamma=gamma)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"max_depth={self.settings.max_depth}, min_weight={self.settings.min_weight})"
        )
