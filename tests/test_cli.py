"""Tests for the command-line entry point.

Tests cover:
- Resolution parsing
- Exit status for bad arguments, bad output paths and bad configuration
- A full render of a small scene to an image file
"""

import argparse

import pytest

SCENE = """\
[scene]
ambient = 0.2

[plane.floor]
point = 0, -1, 0
normal = 0, 1, 0
color = #FFFFFF
checkerboard = 1
k_d = 0.8
k_s = 0.0

[sphere]
center = 0, 0, -4
radius = 1
color = #FF0000
k_d = 0.8
k_s = 0.4
reflection = 0.3

[light]
position = 2, 4, 0
intensity = 1

[camera]
position = 0, 0, 0
look_at = 0, 0, -4

[projection]
width = 1.6
height = 1.2
"""


class TestParseResolution:
    """Tests for parse_resolution."""

    @pytest.mark.parametrize(
        "value, expected",
        [("600", (600, 600)), ("800x600", (800, 600)), ("32X24", (32, 24))],
    )
    def test_valid(self, value, expected):
        """Test square and WxH resolutions."""
        from src.whitted.cli import parse_resolution

        assert parse_resolution(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "10x", "0", "10x-5", "1x2x3"])
    def test_invalid(self, value):
        """Test malformed or non-positive resolutions are rejected."""
        from src.whitted.cli import parse_resolution

        with pytest.raises(argparse.ArgumentTypeError):
            parse_resolution(value)


class TestMain:
    """Tests for main()."""

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["scene.ini", "-r", "0"],
            ["scene.ini", "--max-depth", "11"],
            ["scene.ini", "-v", "-q"],
        ],
    )
    def test_bad_arguments_exit_2(self, argv):
        """Test argument errors exit with status 2."""
        from src.whitted.cli import main

        with pytest.raises(SystemExit) as excinfo:
            main(argv)
        assert excinfo.value.code == 2

    def test_unsupported_output_returns_1(self, tmp_path):
        """Test an unknown output extension fails before rendering."""
        from src.whitted.cli import main

        scene = tmp_path / "scene.ini"
        scene.write_text(SCENE, encoding="utf-8")
        output = tmp_path / "out.xyz"

        assert main([str(scene), "-o", str(output), "-q"]) == 1
        assert not output.exists()

    def test_bad_config_returns_1(self, tmp_path):
        """Test a configuration error is reported with status 1."""
        from src.whitted.cli import main

        scene = tmp_path / "scene.ini"
        scene.write_text("[scene]\nambient = lots\n", encoding="utf-8")
        output = tmp_path / "out.png"

        assert main([str(scene), "-o", str(output), "-q"]) == 1
        assert not output.exists()

    def test_missing_scene_returns_1(self, tmp_path):
        """Test a missing scene file is reported with status 1."""
        from src.whitted.cli import main

        assert main([str(tmp_path / "nope.ini"), "-o", str(tmp_path / "out.png"), "-q"]) == 1

    def test_renders_image(self, tmp_path):
        """Test a full run writes an image of the requested size."""
        from PIL import Image

        from src.whitted.cli import main

        scene = tmp_path / "scene.ini"
        scene.write_text(SCENE, encoding="utf-8")
        output = tmp_path / "out.png"

        assert main([str(scene), "-o", str(output), "-r", "8x6", "-q"]) == 0

        with Image.open(output) as img:
            assert img.size == (8, 6)
