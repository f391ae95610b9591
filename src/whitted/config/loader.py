"""INI scene and observer loading.

A scene file has one ``[scene]`` section for global lighting plus one section
per entity. The entity type is the section name's prefix, so a file can hold
any number of them (``[sphere]``, ``[sphere.left]``, ``[sphere2]``...):

    [scene]
    ambient = 0.2
    bg_color = #3D1A28

    [sphere.red]
    center = (0, 0, -5)
    radius = 1
    color = #FF0000
    k_d = 0.8
    k_s = 0.3

    [light]
    position = 0, 5, 0
    intensity = 1

The observer lives in ``[camera]`` and ``[projection]`` sections, either in
the scene file or in a separate file.

Every problem is reported as a ConfigSyntaxError (the text cannot be parsed)
or a ConfigValidationError (it parses but does not describe a valid scene),
naming the file, section and key. Unknown keys are only warned about.

Example:
    >>> from src.whitted.config import load_observer, load_scene
    >>> description = load_scene("scene.ini")
    >>> observer, plane = load_observer("scene.ini")
"""

import configparser
import logging
import math
import os
import string

from src.whitted.camera.pinhole import Observer, ProjectionPlane
from src.whitted.errors import ConfigSyntaxError, ConfigValidationError
from src.whitted.materials.phong import DEFAULT_SHININESS, Material
from src.whitted.scene.scene import DEFAULT_BACKGROUND, Light, SceneDescription
from src.whitted.scene.shapes import (
    CylinderShape,
    DiscShape,
    PlaneShape,
    SphereShape,
    TriangleShape,
)

logger = logging.getLogger(__name__)

SCENE_SECTION = "scene"
CAMERA_SECTION = "camera"
PROJECTION_SECTION = "projection"

_OBSERVER_SECTIONS = (CAMERA_SECTION, PROJECTION_SECTION)

# Marker for keys without a default
_REQUIRED = object()

_VECTOR_DELIMITERS = {"(": ")", "[": "]"}


# =============================================================================
# Value parsing
# =============================================================================


class _SectionReader:
    """Typed access to one section, remembering which keys were used."""

    def __init__(self, path: str, section: configparser.SectionProxy) -> None:
        self.path = path
        self.name = section.name
        self.section = section
        self.used: set[str] = set()

    def syntax_error(self, key: str, message: str) -> ConfigSyntaxError:
        return ConfigSyntaxError(message, path=self.path, section=self.name, key=key)

    def validation_error(self, key: str | None, message: str) -> ConfigValidationError:
        return ConfigValidationError(message, path=self.path, section=self.name, key=key)

    def raw(self, key: str, aliases: tuple[str, ...] = ()) -> tuple[str, str | None]:
        """Return (key actually present, raw value or None)."""
        for candidate in (key, *aliases):
            self.used.add(candidate)
        for candidate in (key, *aliases):
            if candidate in self.section:
                return candidate, self.section[candidate].strip()
        return key, None

    def number(self, key: str, default=_REQUIRED, aliases: tuple[str, ...] = ()) -> float:
        found, raw = self.raw(key, aliases)
        if raw is None:
            if default is _REQUIRED:
                raise self.validation_error(key, "missing required value")
            return default
        return self._parse_float(found, raw)

    def vector(self, key: str, default=_REQUIRED) -> tuple[float, float, float]:
        found, raw = self.raw(key)
        if raw is None:
            if default is _REQUIRED:
                raise self.validation_error(key, "missing required vector")
            return default
        return self._parse_vector(found, raw)

    def color(self, key: str, default=_REQUIRED) -> tuple[float, float, float]:
        found, raw = self.raw(key)
        if raw is None:
            if default is _REQUIRED:
                raise self.validation_error(key, "missing required color")
            return default

        if raw.startswith("#"):
            digits = raw[1:]
            if len(digits) != 6 or not all(c in string.hexdigits for c in digits):
                raise self.syntax_error(found, f"color {raw!r} is not of the form #RRGGBB")
            return tuple(int(digits[i : i + 2], 16) / 255.0 for i in (0, 2, 4))

        color = self._parse_vector(found, raw)
        if any(c < 0.0 or c > 1.0 for c in color):
            raise self.validation_error(found, f"color components {color} must lie in [0, 1]")
        return color

    def proportion(self, key: str, default=_REQUIRED, aliases: tuple[str, ...] = ()) -> float:
        """A float that must lie in [0, 1]."""
        value = self.number(key, default, aliases)
        if value < 0.0 or value > 1.0:
            raise self.validation_error(key, f"{value} is outside [0, 1]")
        return value

    def non_negative(self, key: str, default=_REQUIRED, aliases: tuple[str, ...] = ()) -> float:
        value = self.number(key, default, aliases)
        if value < 0.0:
            raise self.validation_error(key, f"{value} must be >= 0")
        return value

    def warn_unknown(self) -> None:
        for key in self.section:
            if key not in self.used:
                logger.warning("%s [%s]: ignoring unknown key %r", self.path, self.name, key)

    def _parse_float(self, key: str, raw: str) -> float:
        try:
            value = float(raw)
        except ValueError:
            raise self.syntax_error(key, f"{raw!r} is not a number") from None
        if not math.isfinite(value):
            raise self.syntax_error(key, f"{raw!r} is not a finite number")
        return value

    def _parse_vector(self, key: str, raw: str) -> tuple[float, float, float]:
        body = raw
        if body and body[0] in _VECTOR_DELIMITERS:
            closing = _VECTOR_DELIMITERS[body[0]]
            if not body.endswith(closing):
                raise self.syntax_error(key, f"vector {raw!r} is not closed with {closing!r}")
            body = body[1:-1]

        parts = [part.strip() for part in body.split(",")]
        if len(parts) != 3:
            raise self.syntax_error(key, f"vector {raw!r} must have 3 components, got {len(parts)}")
        return tuple(self._parse_float(key, part) for part in parts)


def _read_config(path: str | os.PathLike[str]) -> configparser.ConfigParser:
    """Parse an INI file, mapping configparser errors onto ConfigError."""
    parser = configparser.ConfigParser(
        strict=True,
        interpolation=None,
        comment_prefixes=("#", ";"),
        inline_comment_prefixes=(";",),
    )
    path = os.fspath(path)
    with open(path, encoding="utf-8") as fh:
        try:
            parser.read_file(fh, source=path)
        except configparser.DuplicateSectionError as exc:
            raise ConfigValidationError(
                f"duplicate section (line {exc.lineno})", path=path, section=exc.section
            ) from exc
        except configparser.DuplicateOptionError as exc:
            raise ConfigSyntaxError(
                f"duplicate key (line {exc.lineno})", path=path, section=exc.section, key=exc.option
            ) from exc
        except configparser.MissingSectionHeaderError as exc:
            raise ConfigSyntaxError(
                f"line {exc.lineno} is outside any section: {exc.line.strip()!r}", path=path
            ) from exc
        except configparser.ParsingError as exc:
            lines = ", ".join(str(lineno) for lineno, _ in exc.errors)
            raise ConfigSyntaxError(f"unparsable line(s) {lines}", path=path) from exc
    return parser


# =============================================================================
# Scene loading
# =============================================================================


def _load_material(reader: _SectionReader) -> Material:
    return Material(
        color=reader.color("color"),
        ambient=reader.proportion("k_a", 1.0),
        diffuse=reader.proportion("k_d"),
        specular=reader.proportion("k_s"),
        shininess=reader.non_negative("k_n", DEFAULT_SHININESS),
        reflectivity=reader.proportion("reflection", 0.0),
        transparency=reader.proportion("transparency", 0.0),
        checker_size=reader.non_negative("checkerboard", 0.0),
        checker_color=reader.color("checker_color", (0.0, 0.0, 0.0)),
    )


def _load_sphere(reader: _SectionReader) -> SphereShape:
    return SphereShape(
        center=reader.vector("center"),
        radius=reader.number("radius", aliases=("r",)),
        material=_load_material(reader),
    )


def _load_plane(reader: _SectionReader) -> PlaneShape:
    return PlaneShape(
        point=reader.vector("point"),
        normal=reader.vector("normal"),
        material=_load_material(reader),
    )


def _load_disc(reader: _SectionReader) -> DiscShape:
    return DiscShape(
        center=reader.vector("center"),
        normal=reader.vector("normal"),
        radius=reader.number("radius", aliases=("r",)),
        material=_load_material(reader),
    )


def _load_cylinder(reader: _SectionReader) -> CylinderShape:
    return CylinderShape(
        point=reader.vector("point"),
        axis=reader.vector("axis"),
        radius=reader.number("radius", aliases=("r",)),
        material=_load_material(reader),
    )


def _load_triangle(reader: _SectionReader) -> TriangleShape:
    return TriangleShape(
        v1=reader.vector("v1"),
        v2=reader.vector("v2"),
        v3=reader.vector("v3"),
        material=_load_material(reader),
    )


def _load_light(reader: _SectionReader) -> Light:
    attenuation = (
        reader.non_negative("c_1", 1.0, aliases=("c1",)),
        reader.non_negative("c_2", 0.0, aliases=("c2",)),
        reader.non_negative("c_3", 0.0, aliases=("c3",)),
    )
    if not any(c > 0.0 for c in attenuation):
        raise reader.validation_error(
            "c_1", "at least one attenuation coefficient must be positive"
        )
    return Light(
        position=reader.vector("position"),
        intensity=reader.non_negative("intensity", aliases=("i_p",)),
        color=reader.color("color", (1.0, 1.0, 1.0)),
        attenuation=attenuation,
    )


# Section-name prefix -> entity loader; a sphere entity may also be named "sphere2"
_PRIMITIVE_LOADERS = {
    "sphere": _load_sphere,
    "plane": _load_plane,
    "disc": _load_disc,
    "cylinder": _load_cylinder,
    "triangle": _load_triangle,
}


def _entity_prefix(name: str) -> str | None:
    lowered = name.lower()
    for prefix in (*_PRIMITIVE_LOADERS, "light"):
        if lowered.startswith(prefix):
            return prefix
    return None


def load_scene(path: str | os.PathLike[str]) -> SceneDescription:
    """Load a scene description from an INI file.

    Args:
        path: Path to the scene file.

    Returns:
        The SceneDescription, with primitives and lights in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigSyntaxError: If the file or one of its values cannot be parsed.
        ConfigValidationError: If required content is missing, a section name
            is not recognized, or a value is out of range.
    """
    path = os.fspath(path)
    config = _read_config(path)

    if not config.has_section(SCENE_SECTION):
        raise ConfigValidationError("missing [scene] section", path=path, section=SCENE_SECTION)

    scene_reader = _SectionReader(path, config[SCENE_SECTION])
    ambient = scene_reader.non_negative("ambient", aliases=("i_a",))
    ambient_color = scene_reader.color("ambient_color", (1.0, 1.0, 1.0))
    background = scene_reader.color("bg_color", DEFAULT_BACKGROUND)
    scene_reader.warn_unknown()

    primitives = []
    lights = []
    for name in config.sections():
        if name == SCENE_SECTION or name in _OBSERVER_SECTIONS:
            continue

        prefix = _entity_prefix(name)
        if prefix is None:
            raise ConfigValidationError("unrecognized section", path=path, section=name)

        logger.debug("%s: parsing [%s] as %s", path, name, prefix)
        reader = _SectionReader(path, config[name])
        if prefix == "light":
            lights.append(_load_light(reader))
        else:
            primitives.append(_PRIMITIVE_LOADERS[prefix](reader))
        reader.warn_unknown()

    logger.info("Loaded %s: %d primitives, %d lights", path, len(primitives), len(lights))

    return SceneDescription(
        primitives=tuple(primitives),
        lights=tuple(lights),
        ambient=ambient,
        ambient_color=ambient_color,
        background=background,
    )


# =============================================================================
# Observer loading
# =============================================================================


def load_observer(path: str | os.PathLike[str]) -> tuple[Observer, ProjectionPlane]:
    """Load the observer and projection plane from an INI file.

    Only the ``[camera]`` and ``[projection]`` sections are read, so this can
    be pointed at a scene file that carries its own observer.

    Args:
        path: Path to the observer file.

    Returns:
        Tuple (observer, projection_plane).

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigSyntaxError: If the file or one of its values cannot be parsed.
        ConfigValidationError: If a section or value is missing or invalid,
            including a forward direction parallel to up.
    """
    path = os.fspath(path)
    config = _read_config(path)

    for name in _OBSERVER_SECTIONS:
        if not config.has_section(name):
            raise ConfigValidationError(f"missing [{name}] section", path=path, section=name)

    camera = _SectionReader(path, config[CAMERA_SECTION])
    position = camera.vector("position")
    up = camera.vector("up", (0.0, 1.0, 0.0))
    if "look_at" in camera.section:
        if "forward" in camera.section:
            raise camera.validation_error("forward", "give either look_at or forward, not both")
        observer = Observer.look_at(position=position, target=camera.vector("look_at"), up=up)
    elif "forward" in camera.section:
        observer = Observer(position=position, forward=camera.vector("forward"), up=up)
    else:
        raise camera.validation_error("look_at", "missing view direction (look_at or forward)")
    camera.used.update(("look_at", "forward"))
    camera.warn_unknown()

    try:
        observer.basis()
    except ValueError as exc:
        raise camera.validation_error(None, str(exc)) from exc

    projection = _SectionReader(path, config[PROJECTION_SECTION])
    values = {
        "distance": projection.number("distance", 1.0),
        "width": projection.number("width"),
        "height": projection.number("height"),
    }
    for key, value in values.items():
        if not value > 0.0:
            raise projection.validation_error(key, f"{value} must be positive")
    projection.warn_unknown()

    logger.debug("%s: observer at %s looking along %s", path, observer.position, observer.forward)
    return observer, ProjectionPlane(**values)
