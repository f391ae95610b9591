"""Exception types raised by the raytracer.

Configuration problems are fatal and are raised before any ray is cast. They
carry the offending file, section and key. Degenerate geometry is a local
problem: scene construction catches ``GeometryDegenerateCase``, logs it and
skips the primitive.
"""

from __future__ import annotations


class RaytracerError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(RaytracerError):
    """A configuration file could not be turned into a scene or observer.

    Attributes:
        path: The file being loaded, if known.
        section: The offending section, if known.
        key: The offending key within the section, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        section: str | None = None,
        key: str | None = None,
    ) -> None:
        self.message = message
        self.path = path
        self.section = section
        self.key = key
        super().__init__(self._format())

    def _format(self) -> str:
        location = []
        if self.path is not None:
            location.append(str(self.path))
        if self.section is not None:
            location.append(f"[{self.section}]")
        if self.key is not None:
            location.append(self.key)
        if not location:
            return self.message
        return f"{' '.join(location)}: {self.message}"


class ConfigSyntaxError(ConfigError):
    """Malformed section/key=value structure or an unparsable value."""


class ConfigValidationError(ConfigError):
    """Well-formed file with missing, unknown, duplicate or out-of-range content."""


class GeometryDegenerateCase(RaytracerError):
    """A primitive has no well-defined surface (zero radius, collinear vertices...)."""


class UnsupportedOutputFormatError(RaytracerError, ValueError):
    """The output path's extension does not map to a known image encoder."""
