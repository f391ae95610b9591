"""Unit tests for the Phong material model.

Tests cover:
- Host-side Material validation
- Checkerboard parity: periodicity, determinism, axis selection
- Lambert diffuse and Phong specular terms
"""

import pytest
import taichi as ti
import taichi.math as tm


class TestMaterial:
    """Tests for the host-side Material description."""

    def test_defaults(self):
        """Test default coefficients."""
        from src.whitted.materials import DEFAULT_SHININESS, Material

        m = Material(color=(0.5, 0.5, 0.5))
        assert m.ambient == 1.0
        assert m.shininess == DEFAULT_SHININESS
        assert m.reflectivity == 0.0
        assert m.transparency == 0.0
        assert m.checker_size == 0.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"diffuse": 1.5},
            {"specular": -0.1},
            {"reflectivity": 2.0},
            {"transparency": -1.0},
            {"shininess": -1.0},
            {"checker_size": -0.5},
            {"checker_color": (0.0, 2.0, 0.0)},
        ],
    )
    def test_out_of_range_rejected(self, kwargs):
        """Test coefficients outside their range raise ValueError."""
        from src.whitted.materials import Material

        with pytest.raises(ValueError):
            Material(color=(1.0, 1.0, 1.0), **kwargs)

    def test_reflection_plus_transparency_may_exceed_one(self):
        """Test r + t > 1 is accepted (rendered brighter, not rejected)."""
        from src.whitted.materials import Material

        m = Material(color=(1.0, 1.0, 1.0), reflectivity=0.8, transparency=0.8)
        assert m.reflectivity + m.transparency > 1.0


class TestCheckerboard:
    """Tests for checkerboard parity."""

    def test_period_two_along_tiled_axes(self):
        """Test parity repeats every 2 * size and alternates every size."""
        from src.whitted.materials.phong import checker_parity, vec3

        result = ti.field(dtype=ti.i32, shape=5)

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 1.0, 0.0)
            s = 0.5
            result[0] = checker_parity(vec3(0.2, 0.0, 0.3), n, s)
            result[1] = checker_parity(vec3(0.2 + 2.0 * s, 0.0, 0.3), n, s)
            result[2] = checker_parity(vec3(0.2, 0.0, 0.3 + 2.0 * s), n, s)
            result[3] = checker_parity(vec3(0.2 + s, 0.0, 0.3), n, s)
            result[4] = checker_parity(vec3(0.2, 0.0, 0.3 - s), n, s)

        test_kernel()
        assert result[0] == result[1]
        assert result[0] == result[2]
        assert result[3] != result[0]
        assert result[4] != result[0]

    def test_deterministic_and_binary(self):
        """Test the same point always maps to the same parity in {0, 1}."""
        from src.whitted.materials.phong import checker_parity, vec3

        result = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            p = vec3(-3.7, 1.0, 12.25)
            n = vec3(0.0, 1.0, 0.0)
            result[0] = checker_parity(p, n, 1.0)
            result[1] = checker_parity(p, n, 1.0)

        test_kernel()
        assert result[0] == result[1]
        assert result[0] in (0, 1)

    def test_negative_coordinates_alternate(self):
        """Test tiles keep alternating across zero."""
        from src.whitted.materials.phong import checker_parity, vec3

        result = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 1.0, 0.0)
            result[0] = checker_parity(vec3(0.5, 0.0, 0.5), n, 1.0)
            result[1] = checker_parity(vec3(-0.5, 0.0, 0.5), n, 1.0)

        test_kernel()
        assert result[0] == 0
        assert result[1] == 1

    def test_wall_uses_in_plane_axes(self):
        """Test a wall facing z tiles on x and y, ignoring its depth."""
        from src.whitted.materials.phong import checker_parity, vec3

        result = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 0.0, 1.0)
            result[0] = checker_parity(vec3(0.5, 0.5, -7.3), n, 1.0)
            result[1] = checker_parity(vec3(0.5, 0.5, 3.9), n, 1.0)
            result[2] = checker_parity(vec3(0.5, 1.5, -7.3), n, 1.0)

        test_kernel()
        assert result[0] == result[1]
        assert result[2] != result[0]

    def test_surface_color_switches(self):
        """Test odd tiles take the checker color and no checker keeps the base."""
        from src.whitted.materials.phong import PhongMaterial, surface_color, vec3

        result = ti.field(dtype=ti.math.vec3, shape=3)

        @ti.kernel
        def test_kernel():
            checkered = PhongMaterial(
                color=vec3(1.0, 1.0, 1.0),
                checker_color=vec3(0.0, 0.0, 0.0),
                ambient=1.0,
                diffuse=1.0,
                specular=0.0,
                shininess=10.0,
                reflectivity=0.0,
                transparency=0.0,
                checker_size=1.0,
            )
            plain = PhongMaterial(
                color=vec3(0.2, 0.4, 0.6),
                checker_color=vec3(0.0, 0.0, 0.0),
                ambient=1.0,
                diffuse=1.0,
                specular=0.0,
                shininess=10.0,
                reflectivity=0.0,
                transparency=0.0,
                checker_size=0.0,
            )
            n = vec3(0.0, 1.0, 0.0)
            result[0] = surface_color(checkered, vec3(0.5, 0.0, 0.5), n)
            result[1] = surface_color(checkered, vec3(1.5, 0.0, 0.5), n)
            result[2] = surface_color(plain, vec3(1.5, 0.0, 0.5), n)

        test_kernel()
        assert result[0][0] == pytest.approx(1.0)
        assert result[1][0] == pytest.approx(0.0)
        assert result[2][1] == pytest.approx(0.4)


class TestPhongTerms:
    """Tests for the per-light diffuse and specular terms."""

    def test_lambert(self):
        """Test n . l, clamped at zero for lights behind the surface."""
        from src.whitted.materials.phong import lambert_diffuse, vec3

        result = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 1.0, 0.0)
            result[0] = lambert_diffuse(n, vec3(0.0, 0.6, 0.8))
            result[1] = lambert_diffuse(n, vec3(0.0, -1.0, 0.0))

        test_kernel()
        assert result[0] == pytest.approx(0.6, abs=1e-6)
        assert result[1] == 0.0

    def test_specular_peak_and_falloff(self):
        """Test the mirror direction gets full specular and it falls off away from it."""
        from src.whitted.materials.phong import phong_specular, vec3

        result = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 1.0, 0.0)
            l = tm.normalize(vec3(1.0, 1.0, 0.0))
            v_mirror = tm.normalize(vec3(-1.0, 1.0, 0.0))
            result[0] = phong_specular(n, l, v_mirror, 20.0)
            result[1] = phong_specular(n, l, vec3(0.0, 1.0, 0.0), 20.0)

        test_kernel()
        assert result[0] == pytest.approx(1.0, abs=1e-5)
        assert 0.0 <= result[1] < 0.01
