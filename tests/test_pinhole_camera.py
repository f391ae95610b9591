"""Unit tests for the pinhole camera module.

Tests cover:
- Observer basis computation (orthonormality, orientation, degenerate input)
- Projection plane validation
- Ray generation for center and corner pixels
- Row 0 at the top of the image
"""

import math

import pytest
import taichi as ti


def _dot(a, b):
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


class TestObserver:
    """Tests for observer basis computation."""

    def test_orthonormal_basis(self):
        """Test that forward, up, right form an orthonormal basis for a tilted view."""
        from src.whitted.camera.pinhole import Observer

        forward, up, right = Observer.look_at((1.0, 2.0, 3.0), (0.0, 0.0, -1.0)).basis()

        assert abs(_dot(forward, up)) < 1e-9
        assert abs(_dot(forward, right)) < 1e-9
        assert abs(_dot(up, right)) < 1e-9
        for v in (forward, up, right):
            assert abs(math.sqrt(_dot(v, v)) - 1.0) < 1e-9

    def test_basis_looking_at_negative_z(self):
        """Test basis vectors for the canonical view down -z."""
        from src.whitted.camera.pinhole import Observer

        forward, up, right = Observer((0.0, 0.0, 0.0), (0.0, 0.0, -2.0)).basis()
        assert tuple(forward) == pytest.approx((0.0, 0.0, -1.0))
        assert tuple(up) == pytest.approx((0.0, 1.0, 0.0))
        assert tuple(right) == pytest.approx((1.0, 0.0, 0.0))

    def test_up_hint_is_orthogonalized(self):
        """Test an up hint not perpendicular to forward is corrected."""
        from src.whitted.camera.pinhole import Observer

        forward, up, _ = Observer((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), up=(0.0, 1.0, 1.0)).basis()
        assert abs(_dot(forward, up)) < 1e-9
        assert tuple(up) == pytest.approx((0.0, 1.0, 0.0))

    @pytest.mark.parametrize(
        "forward, up",
        [
            ((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
            ((0.0, 2.0, 0.0), (0.0, 1.0, 0.0)),
            ((0.0, -1.0, 0.0), (0.0, 3.0, 0.0)),
        ],
    )
    def test_degenerate_basis_raises(self, forward, up):
        """Test a zero forward or forward parallel to up is rejected."""
        from src.whitted.camera.pinhole import Observer

        with pytest.raises(ValueError):
            Observer((0.0, 0.0, 0.0), forward, up).basis()

    @pytest.mark.parametrize("field_name", ["distance", "width", "height"])
    def test_projection_plane_requires_positive_sizes(self, field_name):
        """Test non-positive plane dimensions are rejected."""
        from src.whitted.camera.pinhole import ProjectionPlane

        with pytest.raises(ValueError):
            ProjectionPlane(**{field_name: 0.0})


class TestCameraSetup:
    """Tests for Camera field setup."""

    def test_info_matches_observer(self):
        """Test the camera stores origin, basis and plane geometry."""
        from src.whitted.camera.pinhole import Camera, Observer, ProjectionPlane

        camera = Camera(
            Observer((0.0, 1.0, 2.0), (0.0, 0.0, -1.0)),
            ProjectionPlane(distance=2.0, width=4.0, height=3.0),
        )
        info = camera.info()

        assert info["origin"] == pytest.approx((0.0, 1.0, 2.0))
        assert info["forward"] == pytest.approx((0.0, 0.0, -1.0))
        assert info["plane_center"] == pytest.approx((0.0, 1.0, 0.0))
        assert info["horizontal"] == pytest.approx((4.0, 0.0, 0.0))
        assert info["vertical"] == pytest.approx((0.0, 3.0, 0.0))


class TestRayGeneration:
    """Tests for ray generation."""

    def _camera(self, forward=(0.0, 0.0, -1.0), up=(0.0, 1.0, 0.0)):
        from src.whitted.camera.pinhole import Camera, Observer, ProjectionPlane

        return Camera(
            Observer((0.0, 0.0, 0.0), forward, up),
            ProjectionPlane(distance=1.0, width=2.0, height=2.0),
        )

    @pytest.mark.parametrize(
        "forward",
        [(0.0, 0.0, -1.0), (1.0, 0.0, 0.0), (1.0, -1.0, 2.0)],
    )
    def test_center_pixel_maps_to_forward(self, forward):
        """Test the exact center pixel of an odd-sized image looks along forward."""
        camera = self._camera(forward=forward)
        norm = math.sqrt(_dot(forward, forward))

        origin, direction = camera.ray_for_pixel(50, 50, 101, 101)
        assert origin == pytest.approx((0.0, 0.0, 0.0))
        for i in range(3):
            assert direction[i] == pytest.approx(forward[i] / norm, abs=1e-5)

    def test_row_zero_is_top(self):
        """Test rays for row 0 point up and rays for the last row point down."""
        camera = self._camera()

        _, top = camera.ray_for_pixel(2, 0, 5, 5)
        _, bottom = camera.ray_for_pixel(2, 4, 5, 5)
        assert top[1] > 0.0
        assert bottom[1] < 0.0
        assert top[1] == pytest.approx(-bottom[1], abs=1e-6)

    def test_column_zero_is_left(self):
        """Test rays for column 0 point left (negative right axis)."""
        camera = self._camera()

        _, left = camera.ray_for_pixel(0, 2, 5, 5)
        _, right = camera.ray_for_pixel(4, 2, 5, 5)
        assert left[0] < 0.0
        assert right[0] > 0.0

    def test_corner_pixel_geometry(self):
        """Test the top-left pixel center of a 2x2 image hits the plane at (-0.5, 0.5, -1)."""
        camera = self._camera()

        _, direction = camera.ray_for_pixel(0, 0, 2, 2)
        expected = (-0.5, 0.5, -1.0)
        norm = math.sqrt(_dot(expected, expected))
        for i in range(3):
            assert direction[i] == pytest.approx(expected[i] / norm, abs=1e-5)

    def test_ray_direction_normalized(self):
        """Test that generated ray directions are unit length."""
        from src.whitted.camera.pinhole import generate_ray

        camera = self._camera(forward=(0.3, -0.2, -1.0))
        lengths = ti.field(dtype=ti.f32, shape=(4, 6))

        @ti.kernel
        def test_kernel():
            for row, col in lengths:
                ray = generate_ray(camera, col, row, 6, 4)
                lengths[row, col] = ray.direction.norm()

        test_kernel()
        arr = lengths.to_numpy()
        assert abs(arr - 1.0).max() < 1e-5
