"""Unit tests for image export.

Tests cover:
- Output format selection from the file extension
- Float to 8-bit conversion (clamping, rounding, gamma)
- Writing an image and reading it back
"""

import numpy as np
import pytest


class TestResolveOutputFormat:
    """Tests for resolve_output_format."""

    @pytest.mark.parametrize(
        "path, expected",
        [("out.png", "PNG"), ("OUT.PNG", "PNG"), ("render.jpg", "JPEG"), ("a/b/c.bmp", "BMP")],
    )
    def test_known_extensions(self, path, expected):
        """Test common extensions map to their Pillow encoder."""
        from src.whitted.output import resolve_output_format

        assert resolve_output_format(path) == expected

    @pytest.mark.parametrize(
        "path",
        ["out.xyz", "out", "archive.tar.nope", "out.bufr", "out.grib", "out.h5", "out.wmf"],
    )
    def test_unsupported(self, path):
        """Test unknown extensions and formats without a working encoder are rejected."""
        from src.whitted.errors import UnsupportedOutputFormatError
        from src.whitted.output import resolve_output_format

        with pytest.raises(UnsupportedOutputFormatError):
            resolve_output_format(path)


class TestImageToUint8:
    """Tests for float to 8-bit conversion."""

    def test_rounding_and_clamping(self):
        """Test round(c * 255) with out-of-range values clamped first."""
        from src.whitted.output import image_to_uint8

        image = np.array([[[0.0, 0.5, 1.0], [-0.3, 1.7, 0.1]]], dtype=np.float32)
        out = image_to_uint8(image)

        assert out.dtype == np.uint8
        assert out.shape == (1, 2, 3)
        assert out[0, 0].tolist() == [0, 128, 255]
        assert out[0, 1].tolist() == [0, 255, 26]

    def test_gamma_brightens_midtones(self):
        """Test gamma 2.2 lifts mid-grey and leaves black and white fixed."""
        from src.whitted.output import image_to_uint8

        image = np.array([[[0.0, 0.5, 1.0]]], dtype=np.float32)
        out = image_to_uint8(image, gamma=2.2)

        assert out[0, 0, 0] == 0
        assert out[0, 0, 2] == 255
        assert out[0, 0, 1] == round(0.5 ** (1.0 / 2.2) * 255)

    def test_invalid_gamma(self):
        """Test non-positive gamma is rejected."""
        from src.whitted.output import image_to_uint8

        with pytest.raises(ValueError):
            image_to_uint8(np.zeros((1, 1, 3), dtype=np.float32), gamma=0.0)


class TestSaveImage:
    """Tests for writing images."""

    def test_png_round_trip(self, tmp_path):
        """Test a saved PNG reads back with the same pixels, top row first."""
        from PIL import Image

        from src.whitted.output import save_image

        image = np.zeros((2, 3, 3), dtype=np.float32)
        image[0, 0] = (1.0, 0.0, 0.0)
        image[1, 2] = (0.0, 0.0, 1.0)
        path = tmp_path / "out.png"

        save_image(image, path)

        with Image.open(path) as img:
            assert img.format == "PNG"
            assert img.size == (3, 2)
            pixels = np.asarray(img)
        assert pixels[0, 0].tolist() == [255, 0, 0]
        assert pixels[1, 2].tolist() == [0, 0, 255]
        assert pixels[0, 2].tolist() == [0, 0, 0]

    def test_unsupported_extension_writes_nothing(self, tmp_path):
        """Test an unsupported extension fails before creating the file."""
        from src.whitted.errors import UnsupportedOutputFormatError
        from src.whitted.output import save_image

        path = tmp_path / "out.xyz"
        with pytest.raises(UnsupportedOutputFormatError):
            save_image(np.zeros((1, 1, 3), dtype=np.float32), path)
        assert not path.exists()

    @pytest.mark.parametrize("name", ["out.bufr", "out.h5"])
    def test_stub_format_writes_nothing(self, tmp_path, name):
        """Test a format whose save handler is not installed leaves no file behind."""
        from src.whitted.errors import UnsupportedOutputFormatError
        from src.whitted.output import save_image

        path = tmp_path / name
        with pytest.raises(UnsupportedOutputFormatError):
            save_image(np.zeros((1, 1, 3), dtype=np.float32), path)
        assert not path.exists()

    def test_saves_to_path(self, tmp_path):
        """Test a BMP is written straight to the given path."""
        from PIL import Image

        from src.whitted.output import save_image

        path = tmp_path / "out.bmp"
        save_image(np.ones((2, 2, 3), dtype=np.float32), str(path))

        with Image.open(path) as img:
            assert img.format == "BMP"
            assert np.asarray(img)[1, 1].tolist() == [255, 255, 255]

    def test_missing_directory(self, tmp_path):
        """Test writing into a missing directory raises OSError."""
        from src.whitted.output import save_image

        with pytest.raises(OSError):
            save_image(np.zeros((1, 1, 3), dtype=np.float32), tmp_path / "missing" / "out.png")
