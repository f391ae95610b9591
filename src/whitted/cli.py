"""Command-line entry point: render a scene file to an image.

Usage:
    whitted SCENE [options]
    python -m src.whitted SCENE [options]

Options:
    -O, --observer PATH     Observer file (default: the scene file)
    -o, --output PATH       Output image; the extension selects the format (default: out.png)
    -r, --resolution N|WxH  Image size in pixels (default: 600)
    --max-depth N           Maximum reflection depth (default: 5)
    --arch {cpu,gpu}        Taichi backend (default: cpu)
    --threads N             CPU threads (default: 1)
    --gamma G               Output gamma (default: 1.0, linear)
    -v, --verbose           Debug logging
    -q, --quiet             Only warnings and errors

Example:
    whitted examples/scenes/basic_scene.ini -O examples/scenes/basic_observer.ini -r 800x600
"""

import argparse
import logging
import sys

import taichi as ti

from src.whitted.camera.pinhole import Camera
from src.whitted.config.loader import load_observer, load_scene
from src.whitted.core.integrator import DEFAULT_MAX_DEPTH, MAX_TRACE_DEPTH
from src.whitted.core.renderer import Renderer, RenderSettings
from src.whitted.errors import RaytracerError
from src.whitted.output.export import resolve_output_format
from src.whitted.scene.scene import Scene

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

DEFAULT_RESOLUTION = 600


def parse_resolution(value: str) -> tuple[int, int]:
    """Parse "N" (square) or "WxH" into (width, height).

    Raises:
        argparse.ArgumentTypeError: If the value is malformed or not positive.
    """
    parts = value.lower().split("x")
    try:
        if len(parts) == 1:
            width = height = int(parts[0])
        elif len(parts) == 2:
            width, height = int(parts[0]), int(parts[1])
        else:
            raise ValueError(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid resolution {value!r}, expected N or WxH"
        ) from None
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"resolution must be positive, got {value!r}")
    return width, height


def _max_depth(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth {value!r}") from None
    if not 0 <= depth <= MAX_TRACE_DEPTH:
        raise argparse.ArgumentTypeError(f"max depth must be in [0, {MAX_TRACE_DEPTH}]")
    return depth


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number {value!r}") from None
    if not number > 0.0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="whitted",
        description="Render a scene with Whitted-style ray tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("scene", help="Scene file (INI)")
    parser.add_argument(
        "-O",
        "--observer",
        default=None,
        help="Observer file with [camera] and [projection] (default: the scene file)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="out.png",
        help="Output image path; the extension selects the format (default: out.png)",
    )
    parser.add_argument(
        "-r",
        "--resolution",
        type=parse_resolution,
        default=(DEFAULT_RESOLUTION, DEFAULT_RESOLUTION),
        help=f"Image size as N or WxH (default: {DEFAULT_RESOLUTION})",
    )
    parser.add_argument(
        "--max-depth",
        type=_max_depth,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum reflection depth, at most {MAX_TRACE_DEPTH} "
        f"(default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--threads",
        type=_positive_int,
        default=1,
        help="Number of CPU threads (default: 1)",
    )
    parser.add_argument(
        "--gamma",
        type=_positive_float,
        default=1.0,
        help="Output gamma (default: 1.0, linear)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only warnings and errors")
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging for the command-line tool."""
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def init_taichi(arch: str = "cpu", threads: int = 1) -> None:
    """Initialize Taichi for rendering.

    Args:
        arch: "cpu" or "gpu"; Taichi falls back to CPU when no GPU is available.
        threads: Number of CPU worker threads.
    """
    if arch == "gpu":
        ti.init(arch=ti.gpu)
    else:
        ti.init(arch=ti.cpu, cpu_max_num_threads=threads)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Process exit status: 0 on success, 1 on a configuration, rendering or
        I/O error. Argument errors exit with status 2 from argparse.
    """
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        resolve_output_format(args.output)

        description = load_scene(args.scene)
        observer, plane = load_observer(args.observer or args.scene)

        init_taichi(args.arch, args.threads)

        width, height = args.resolution
        renderer = Renderer(
            Scene(description),
            Camera(observer, plane),
            width,
            height,
            RenderSettings(max_depth=args.max_depth),
        )
        renderer.render()
        renderer.save_image(args.output, gamma=args.gamma)
    except (RaytracerError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
